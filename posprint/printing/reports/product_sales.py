from __future__ import annotations

from datetime import datetime
from typing import Sequence

from ...config import PAGE_HEIGHT, PAGE_WIDTH
from ...models import ProductSalesRow, SalesTotals
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
    format_number,
)


GEOMETRY = LayoutGeometry(
    page_width=PAGE_WIDTH,
    page_height=PAGE_HEIGHT,
    top_margin=15.0,
    bottom_margin=15.0,
    line_height=7.0,
    footer_height=14.0,
)
TITLE_SIZE = 14.0

# Qty, Product, UPC, Price, Total
COLUMNS = (10.0, 30.0, 100.0, 140.0, 170.0)


def render_product_sales(
    rows: Sequence[ProductSalesRow],
    start: datetime,
    end: datetime,
    totals: SalesTotals,
    account_total: int,
    ctx: ReportContext | None = None,
) -> RenderedReport:
    """Sales grouped by category, one summary row per category, grand total at the end."""
    ctx = ctx or ReportContext()
    geo = GEOMETRY
    title = f"{ctx.facility} Sales from {start:%Y-%m-%d} to {end:%Y-%m-%d}".strip()
    surface, first_page = ReportLabSurface.new("Sales by Category", geo.page_width, geo.page_height)
    fonts = builtin_fonts(surface)
    qty_x, name_x, upc_x, price_x, total_x = COLUMNS

    def draw_header(layer: Layer, is_first_page: bool) -> None:
        y = geo.page_height - geo.top_margin
        if is_first_page:
            surface.draw_text(layer, title, TITLE_SIZE, centered_x(title, TITLE_SIZE, geo.page_width), y, fonts.bold)
            y -= geo.line_height * 1.1
        for label, x in zip(("Qty", "Product", "UPC", "Price", "Total"), COLUMNS):
            surface.draw_text(layer, label, 11.0, x, y, fonts.bold)

    def draw_footer(layer: Layer) -> None:
        account_footer(surface, layer, fonts, account_total, ctx)

    pg = Paginator(surface, first_page, geo, draw_header, draw_footer)
    line = geo.line_height
    pg.advance(line * 1.3)

    last_category: str | None = None
    for row in rows:
        if not row.is_summary and row.category != last_category:
            # keep the category label with its first row
            layer = pg.ensure_space(line * 2)
            surface.draw_text(layer, row.category, 12.0, qty_x, pg.current_y(), fonts.bold)
            pg.advance(line * 1.5)
            last_category = row.category

        if row.is_summary:
            layer = pg.ensure_space(line * 2.2)
            surface.draw_text(layer, "____", 11.0, qty_x, pg.current_y() + 4.0, fonts.regular)
            surface.draw_text(layer, "_______", 11.0, total_x, pg.current_y() + 4.0, fonts.regular)
            pg.advance(line * 0.8)
            y = pg.current_y()
            surface.draw_text(layer, format_number(row.quantity_sold), 9.0, qty_x, y, fonts.bold)
            surface.draw_text(layer, format_cents(row.total_sales), 9.0, total_x, y, fonts.bold)
            pg.advance(line * 1.4)
            continue

        layer = pg.ensure_space(line)
        y = pg.current_y()
        surface.draw_text(layer, format_number(row.quantity_sold), 9.0, qty_x, y, fonts.regular)
        surface.draw_text(layer, row.name, 9.0, name_x, y, fonts.regular)
        surface.draw_text(layer, row.upc, 9.0, upc_x, y, fonts.regular)
        surface.draw_text(layer, format_cents(row.price), 9.0, price_x, y, fonts.regular)
        surface.draw_text(layer, format_cents(row.total_sales), 9.0, total_x, y, fonts.regular)
        pg.advance(line)

    # grand total: double rule then the totals row
    pg.advance(2.0)
    layer = pg.ensure_space(0.4 + 5.0 + line)
    for offset in (0.0, 0.4):
        y = pg.current_y() - offset
        surface.draw_text(layer, "____", 9.0, qty_x, y, fonts.regular)
        surface.draw_text(layer, "__________", 9.0, total_x, y, fonts.regular)
    pg.advance(0.4 + 5.0)
    y = pg.current_y()
    surface.draw_text(layer, format_number(totals.total_quantity), 9.0, qty_x, y, fonts.bold)
    surface.draw_text(layer, "Grand Total:", 9.0, 150.0, y, fonts.bold)
    surface.draw_text(layer, format_cents(totals.total_value), 9.0, total_x, y, fonts.bold)
    pg.advance(line)

    pg.finalize()
    pg.draw_page_numbers(fonts.regular)
    return RenderedReport(title=title, surface=surface)
