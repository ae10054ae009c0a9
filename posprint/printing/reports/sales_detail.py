from __future__ import annotations

from datetime import datetime
from typing import Sequence

from ...config import PAGE_HEIGHT, PAGE_WIDTH
from ...models import SalesTotals, SalesTransaction
from ..layout import LayoutGeometry
from ..paginator import Paginator
from ..surface import Layer, ReportLabSurface
from .common import (
    RenderedReport,
    ReportContext,
    account_footer,
    builtin_fonts,
    centered_x,
    draw_line,
    format_cents,
    format_number,
)


GEOMETRY = LayoutGeometry(
    page_width=PAGE_WIDTH,
    page_height=PAGE_HEIGHT,
    top_margin=15.0,
    bottom_margin=15.0,
    line_height=7.0,
    footer_height=12.0,
)
TITLE_SIZE = 14.0

# Order#, Date, Customer, Items, Total
COLUMNS = (15.0, 40.0, 80.0, 140.0, 165.0)


def transaction_height(tx: SalesTransaction, line_height: float) -> float:
    """
    Rule + header row + one row per detail, measured as a single block.

    Transactions are never split across pages. At the report's 7mm line height
    a page holds 248mm, so an order with 34 or more line items cannot fit and
    the whole report fails with ContentTooTallError.
    """
    return line_height * (1 + len(tx.details)) + line_height


def render_sales_detail(
    transactions: Sequence[SalesTransaction],
    start: datetime,
    end: datetime,
    totals: SalesTotals,
    account_total: int,
    ctx: ReportContext | None = None,
) -> RenderedReport:
    """
    Chronological transaction list. Each transaction is kept on one page together
    with its line items; the first page also carries the period totals under the
    column labels.
    """
    ctx = ctx or ReportContext()
    geo = GEOMETRY
    line = geo.line_height
    title = f"{ctx.facility} - Transactions from {start:%Y-%m-%d} to {end:%Y-%m-%d}".strip(" -")
    surface, first_page = ReportLabSurface.new("Tx History", geo.page_width, geo.page_height)
    fonts = builtin_fonts(surface)
    order_x, date_x, customer_x, items_x, total_x = COLUMNS

    def draw_header(layer: Layer, is_first_page: bool) -> None:
        y = geo.page_height - geo.top_margin
        if is_first_page:
            surface.draw_text(layer, title, TITLE_SIZE, centered_x(title, TITLE_SIZE, geo.page_width), y, fonts.bold)
            y -= line
        for label, x in zip(("Order#", "Date", "Customer", "Items", "Total"), COLUMNS):
            surface.draw_text(layer, label, 10.0, x, y, fonts.bold)
        if is_first_page:
            y -= line
            surface.draw_text(layer, format_number(totals.total_quantity), 9.0, items_x, y, fonts.bold)
            surface.draw_text(layer, format_cents(totals.total_value), 9.0, total_x, y, fonts.bold)

    def draw_footer(layer: Layer) -> None:
        account_footer(surface, layer, fonts, account_total, ctx)

    pg = Paginator(surface, first_page, geo, draw_header, draw_footer)
    # clear the title, labels and totals row on the first page
    pg.advance(line * 1.8)

    for tx in transactions:
        layer = pg.ensure_space(transaction_height(tx, line))
        draw_line(surface, layer, fonts.regular, pg.current_y() + line)

        y = pg.current_y()
        surface.draw_text(layer, str(tx.order_id), 9.0, order_x, y, fonts.bold)
        surface.draw_text(layer, f"{tx.date:%Y-%m-%d}", 9.0, date_x, y, fonts.bold)
        surface.draw_text(layer, f"{tx.customer_name} ({tx.customer_mdoc})", 9.0, customer_x, y, fonts.bold)
        surface.draw_text(layer, str(tx.item_count), 9.0, items_x, y, fonts.bold)
        surface.draw_text(layer, format_cents(tx.order_total), 9.0, total_x, y, fonts.bold)
        pg.advance(line)

        for detail in tx.details:
            layer = pg.ensure_space(line)
            y = pg.current_y()
            surface.draw_text(layer, detail.upc, 8.0, date_x, y, fonts.regular)
            surface.draw_text(layer, detail.product_name, 8.0, customer_x, y, fonts.regular)
            surface.draw_text(layer, str(detail.quantity), 8.0, items_x, y, fonts.regular)
            surface.draw_text(layer, format_cents(detail.price), 8.0, total_x, y, fonts.regular)
            pg.advance(line)

    layer = pg.ensure_space(0.4 + 5.0 + line)
    for offset in (0.0, 0.4):
        y = pg.current_y() - offset
        surface.draw_text(layer, "____", 9.0, items_x, y, fonts.regular)
        surface.draw_text(layer, "__________", 9.0, total_x, y, fonts.regular)
    pg.advance(0.4 + 5.0)
    y = pg.current_y()
    surface.draw_text(layer, format_number(totals.total_quantity), 9.0, items_x, y, fonts.bold)
    surface.draw_text(layer, "Total:", 9.0, 154.0, y, fonts.bold)
    surface.draw_text(layer, format_cents(totals.total_value), 9.0, total_x, y, fonts.bold)
    pg.advance(line)

    pg.finalize()
    pg.draw_page_numbers(fonts.regular)
    return RenderedReport(title=title, surface=surface)
