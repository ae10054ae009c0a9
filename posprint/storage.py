from __future__ import annotations

from pathlib import Path
import re

from slugify import slugify

from . import config
from .models import ReportRun, ReportStatus, get_session


REPORT_NAMES = {
    "catalog": "product_catalog",
    "product_sales": "sales_by_category",
    "sales_detail": "sales_details_report",
    "inventory": "inventory_report",
    "daily_sales": "sales_by_day_report",
    "club_import": "club_import_report",
}


def report_slug(report_type: str) -> str:
    name = REPORT_NAMES.get(report_type, report_type)
    slug = slugify(name, separator="_")
    slug = re.sub(r"[^a-z0-9_]+", "_", slug.lower()).strip("_")
    if not slug:
        raise ValueError(f"Invalid report type: {report_type!r}")
    return slug


def report_path(report_type: str, base_dir: Path | None = None) -> Path:
    root = base_dir or config.OUT_DIR
    root.mkdir(parents=True, exist_ok=True)
    return root / f"{report_slug(report_type)}.pdf"


def temp_report_path(report_type: str, base_dir: Path | None = None) -> Path:
    final = report_path(report_type, base_dir=base_dir)
    return final.with_name(f"{final.stem}.tmp.pdf")


def record_run(
    report_type: str,
    title: str,
    status: ReportStatus,
    path: Path | None = None,
    page_count: int = 0,
    fail_detail: str | None = None,
    printer: str | None = None,
) -> ReportRun:
    run = ReportRun(
        report_type=report_type,
        title=title,
        path=str(path.relative_to(config.OUT_DIR)) if path is not None else None,
        page_count=page_count,
        status=status,
        fail_detail=fail_detail,
        printer=printer or None,
    )
    with get_session() as session:
        session.add(run)
        session.commit()
        session.refresh(run)
    return run
