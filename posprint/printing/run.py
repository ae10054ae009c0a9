from __future__ import annotations

from concurrent.futures import Future
from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError

from .. import config
from ..models import ReportStatus, init_db
from ..storage import record_run, report_path, temp_report_path
from .dispatch import dispatch_print
from .reports.common import RenderedReport

logger = logging.getLogger(__name__)


@dataclass
class ReportResult:
    report_type: str
    title: str
    path: Path
    page_count: int
    print_job: Optional[Future] = None


def _discard(path: Path) -> None:
    if path.exists():
        path.unlink()


def run_report(
    report_type: str,
    render: Callable[[], RenderedReport],
    printer: str | None = None,
    sumatra_location: str | None = None,
) -> ReportResult:
    """
    Lay out a report, save it and queue it for printing.

    The document is written to a temporary file and only moved into place once it
    is complete, so a failed layout never leaves a partial PDF behind. The print
    job is fire-and-forget: its outcome is logged by the dispatcher.
    """
    init_db()
    temp_path = temp_report_path(report_type, base_dir=config.OUT_DIR)
    final_path = report_path(report_type, base_dir=config.OUT_DIR)
    title = report_type
    try:
        rendered = render()
        title = rendered.title
        rendered.surface.save(temp_path)
        temp_path.replace(final_path)
    except Exception as exc:
        logger.exception("Report %s failed", report_type)
        _discard(temp_path)
        try:
            record_run(
                report_type,
                title,
                ReportStatus.FAILED,
                fail_detail=str(exc) or type(exc).__name__,
                printer=printer,
            )
        except SQLAlchemyError:
            logger.exception("Could not record failed %s run", report_type)
        raise

    record_run(
        report_type,
        title,
        ReportStatus.READY,
        path=final_path,
        page_count=rendered.page_count,
        printer=printer,
    )
    logger.info("Saved %s (%d pages) to %s", report_type, rendered.page_count, final_path)

    result = ReportResult(report_type, title, final_path, rendered.page_count)
    if printer:
        result.print_job = dispatch_print(final_path, printer, sumatra_location or config.SUMATRA_LOCATION)
    return result
