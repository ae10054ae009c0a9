from __future__ import annotations

from typing import Sequence

from ...config import PAGE_HEIGHT, PAGE_WIDTH
from ...models import ClubImport, ClubTransactionRow, PeriodTotals, TransactionType
from ..layout import LayoutGeometry
from ..paginator import Paginator
from ..surface import Layer, ReportLabSurface
from .common import (
    RenderedReport,
    ReportContext,
    account_footer,
    builtin_fonts,
    centered_x,
    format_cents,
)


GEOMETRY = LayoutGeometry(
    page_width=PAGE_WIDTH,
    page_height=PAGE_HEIGHT,
    top_margin=15.0,
    bottom_margin=15.0,
    line_height=7.0,
    footer_height=12.0,
)
TITLE_SIZE = 16.0

# Date, Tx Type, Received From, Amount, Available
COLUMNS = (15.0, 45.0, 85.0, 145.0, 175.0)
LABELS = ("Date", "Tx Type", "Received From", "Amount", "Available")

# summary block: label x and value x for each side
SUMMARY_LEFT = (15.0, 50.0)
SUMMARY_RIGHT = (125.0, 175.0)


def _received_from(row: ClubTransactionRow) -> str:
    if row.mdoc is not None:
        return f"{row.entity_name} ({row.mdoc})"
    return row.entity_name


def render_club_imports(
    club_import: ClubImport,
    rows: Sequence[ClubTransactionRow],
    totals: PeriodTotals,
    account_total: int,
    ctx: ReportContext | None = None,
) -> RenderedReport:
    """Summary of one club import followed by its transactions with a running balance."""
    ctx = ctx or ReportContext()
    geo = GEOMETRY
    line = geo.line_height
    title = (
        f"{ctx.facility} Club Exception Report  "
        f"{club_import.activity_from:%Y/%m/%d} - {club_import.activity_to:%Y/%m/%d}"
    ).strip()
    surface, first_page = ReportLabSurface.new("Club Import Report", geo.page_width, geo.page_height)
    fonts = builtin_fonts(surface)

    def draw_labels(layer: Layer, y: float) -> None:
        for label, x in zip(LABELS, COLUMNS):
            surface.draw_text(layer, label, 11.0, x, y, fonts.bold)

    def draw_header(layer: Layer, is_first_page: bool) -> None:
        y = geo.page_height - geo.top_margin
        if is_first_page:
            surface.draw_text(layer, title, TITLE_SIZE, centered_x(title, TITLE_SIZE, geo.page_width), y, fonts.bold)
        else:
            # first page carries the labels under the summary instead
            draw_labels(layer, y)

    def draw_footer(layer: Layer) -> None:
        account_footer(surface, layer, fonts, account_total, ctx)

    pg = Paginator(surface, first_page, geo, draw_header, draw_footer)
    pg.advance(line * 1.5)

    balance = rows[-1].running_total if rows else totals.net
    summary = (
        ("Source File", club_import.source_file, "Customer Deposits", format_cents(totals.period_pos_sum)),
        ("Balance", format_cents(balance), "Customer Withdrawals", format_cents(totals.period_neg_sum)),
        (
            "Date Range",
            f"{club_import.activity_from:%Y-%m-%d} - {club_import.activity_to:%Y-%m-%d}",
            "Net Customer Change",
            format_cents(totals.net),
        ),
    )
    layer = pg.ensure_space(line * len(summary))
    for i, (label_l, value_l, label_r, value_r) in enumerate(summary):
        y = pg.current_y()
        if i == len(summary) - 1:
            surface.draw_text(layer, "_______", 11.0, SUMMARY_RIGHT[1] + 1.0, y + line * 0.75, fonts.regular)
        surface.draw_text(layer, f"{label_l}:", 11.0, SUMMARY_LEFT[0], y, fonts.bold)
        surface.draw_text(layer, value_l, 11.0, SUMMARY_LEFT[1], y, fonts.regular)
        surface.draw_text(layer, f"{label_r}:", 11.0, SUMMARY_RIGHT[0], y, fonts.bold)
        surface.draw_text(layer, value_r, 11.0, SUMMARY_RIGHT[1], y, fonts.regular)
        pg.advance(line)

    pg.advance(line * 1.8)
    # labels stay with the first transaction
    layer = pg.ensure_space(line * 2)
    draw_labels(layer, pg.current_y())
    pg.advance(line)

    date_x, type_x, from_x, amount_x, available_x = COLUMNS
    for row in rows:
        layer = pg.ensure_space(line)
        y = pg.current_y()
        surface.draw_text(layer, f"{row.date:%Y-%m-%d}", 9.0, date_x, y, fonts.regular)
        surface.draw_text(layer, TransactionType(row.tx_type).value, 9.0, type_x, y, fonts.regular)
        surface.draw_text(layer, _received_from(row), 9.0, from_x, y, fonts.regular)
        surface.draw_text(layer, format_cents(row.amount), 9.0, amount_x, y, fonts.regular)
        surface.draw_text(layer, format_cents(row.running_total), 9.0, available_x, y, fonts.regular)
        pg.advance(line)

    pg.finalize()
    pg.draw_page_numbers(fonts.regular)
    return RenderedReport(title=title, surface=surface)
