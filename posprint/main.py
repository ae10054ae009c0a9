from __future__ import annotations

from datetime import datetime
import logging
from pathlib import Path
from typing import Optional

import typer

from . import config
from .models import ClubImport, reset_engine
from .printing import ingest
from .printing.reports.catalog import render_catalog
from .printing.reports.club_imports import render_club_imports
from .printing.reports.common import ReportContext
from .printing.reports.daily_sales import render_daily_sales
from .printing.reports.inventory import render_inventory
from .printing.reports.product_sales import render_product_sales
from .printing.reports.sales_detail import render_sales_detail
from .printing.run import ReportResult, run_report

app = typer.Typer(help="Point-of-sale report printing")


@app.callback()
def main(
    out: Optional[Path] = typer.Option(None, "--out", help="Output directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=config.LOG_FORMAT,
        datefmt=config.LOG_DATE_FORMAT,
    )
    if out:
        config.set_out_dir(out)
        reset_engine()


def _printer(printer: Optional[str], no_print: bool) -> Optional[str]:
    if no_print:
        return None
    return printer or config.PRINTER_NAME or None


def _report(result: ReportResult) -> None:
    typer.echo(f"Saved {result.path} ({result.page_count} pages)")
    if result.print_job is not None:
        # wait so the CLI process does not exit before the job reaches the spooler
        result.print_job.exception()


def _day(value: str) -> datetime:
    try:
        return datetime.strptime(value, "%Y-%m-%d")
    except ValueError as exc:
        raise typer.BadParameter(f"Expected YYYY-MM-DD, got {value!r}") from exc


CSV_OPTION = typer.Option(..., "--csv", exists=True, dir_okay=False, help="CSV with report rows")
PRINTER_OPTION = typer.Option(None, "--printer", help="Printer name (defaults to $POS_PRINTER)")
SUMATRA_OPTION = typer.Option(None, "--sumatra", help="Path to SumatraPDF.exe")
NO_PRINT_OPTION = typer.Option(False, "--no-print", help="Only save the PDF")


@app.command()
def catalog(
    csv: Path = CSV_OPTION,
    printer: Optional[str] = PRINTER_OPTION,
    sumatra: Optional[str] = SUMATRA_OPTION,
    no_print: bool = NO_PRINT_OPTION,
    page_numbers: bool = typer.Option(False, "--page-numbers", help="Add 'Page X of Y'"),
) -> None:
    products = ingest.load_catalog(csv)
    result = run_report(
        "catalog",
        lambda: render_catalog(products, ReportContext(), number_pages=page_numbers),
        printer=_printer(printer, no_print),
        sumatra_location=sumatra,
    )
    _report(result)


@app.command("product-sales")
def product_sales(
    csv: Path = CSV_OPTION,
    start: str = typer.Option(..., "--start", help="YYYY-MM-DD"),
    end: str = typer.Option(..., "--end", help="YYYY-MM-DD"),
    account_total: int = typer.Option(0, "--account-total", help="Sum of account balances in cents"),
    printer: Optional[str] = PRINTER_OPTION,
    sumatra: Optional[str] = SUMATRA_OPTION,
    no_print: bool = NO_PRINT_OPTION,
) -> None:
    period = _day(start), _day(end)
    rows = ingest.load_product_sales(csv)
    totals = ingest.product_sales_totals(rows)
    result = run_report(
        "product_sales",
        lambda: render_product_sales(rows, *period, totals, account_total, ReportContext()),
        printer=_printer(printer, no_print),
        sumatra_location=sumatra,
    )
    _report(result)


@app.command("sales-detail")
def sales_detail(
    csv: Path = CSV_OPTION,
    start: str = typer.Option(..., "--start", help="YYYY-MM-DD"),
    end: str = typer.Option(..., "--end", help="YYYY-MM-DD"),
    account_total: int = typer.Option(0, "--account-total", help="Sum of account balances in cents"),
    printer: Optional[str] = PRINTER_OPTION,
    sumatra: Optional[str] = SUMATRA_OPTION,
    no_print: bool = NO_PRINT_OPTION,
) -> None:
    period = _day(start), _day(end)
    transactions = ingest.load_sales_detail(csv)
    totals = ingest.sales_detail_totals(transactions)
    result = run_report(
        "sales_detail",
        lambda: render_sales_detail(transactions, *period, totals, account_total, ReportContext()),
        printer=_printer(printer, no_print),
        sumatra_location=sumatra,
    )
    _report(result)


@app.command()
def inventory(
    csv: Path = CSV_OPTION,
    account_total: int = typer.Option(0, "--account-total", help="Sum of account balances in cents"),
    printer: Optional[str] = PRINTER_OPTION,
    sumatra: Optional[str] = SUMATRA_OPTION,
    no_print: bool = NO_PRINT_OPTION,
) -> None:
    rows = ingest.load_inventory(csv)
    totals = ingest.inventory_totals(rows)
    result = run_report(
        "inventory",
        lambda: render_inventory(rows, totals, account_total, ReportContext()),
        printer=_printer(printer, no_print),
        sumatra_location=sumatra,
    )
    _report(result)


@app.command("daily-sales")
def daily_sales(
    csv: Path = CSV_OPTION,
    start: str = typer.Option(..., "--start", help="YYYY-MM-DD"),
    end: str = typer.Option(..., "--end", help="YYYY-MM-DD"),
    account_total: int = typer.Option(0, "--account-total", help="Sum of account balances in cents"),
    printer: Optional[str] = PRINTER_OPTION,
    sumatra: Optional[str] = SUMATRA_OPTION,
    no_print: bool = NO_PRINT_OPTION,
) -> None:
    period = _day(start), _day(end)
    days = ingest.load_daily_sales(csv)
    totals = ingest.daily_sales_totals(days)
    result = run_report(
        "daily_sales",
        lambda: render_daily_sales(days, *period, totals, account_total, ReportContext()),
        printer=_printer(printer, no_print),
        sumatra_location=sumatra,
    )
    _report(result)


@app.command("club-import")
def club_import(
    csv: Path = CSV_OPTION,
    start: str = typer.Option(..., "--start", help="First activity day, YYYY-MM-DD"),
    end: str = typer.Option(..., "--end", help="Last activity day, YYYY-MM-DD"),
    opening_balance: int = typer.Option(0, "--opening-balance", help="Club balance before this import, in cents"),
    account_total: int = typer.Option(0, "--account-total", help="Sum of account balances in cents"),
    printer: Optional[str] = PRINTER_OPTION,
    sumatra: Optional[str] = SUMATRA_OPTION,
    no_print: bool = NO_PRINT_OPTION,
) -> None:
    activity_from, activity_to = _day(start), _day(end)
    rows = ingest.load_club_transactions(csv, opening_balance=opening_balance)
    source = ClubImport(source_file=csv.name, activity_from=activity_from, activity_to=activity_to)
    totals = ingest.period_totals(rows)
    result = run_report(
        "club_import",
        lambda: render_club_imports(source, rows, totals, account_total, ReportContext()),
        printer=_printer(printer, no_print),
        sumatra_location=sumatra,
    )
    _report(result)


if __name__ == "__main__":
    app()
