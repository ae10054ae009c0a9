from __future__ import annotations

from typing import Sequence

from ...config import PAGE_HEIGHT, PAGE_WIDTH
from ...models import InventoryRow, InventoryTotals
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
CATEGORY_GAP = 8.0
SIGNATURE_LINES = 11

# Qty, Name, UPC, Total
COLUMNS = (25.0, 40.0, 120.0, 170.0)


def render_inventory(
    rows: Sequence[InventoryRow],
    totals: InventoryTotals,
    account_total: int,
    ctx: ReportContext | None = None,
) -> RenderedReport:
    ctx = ctx or ReportContext()
    geo = GEOMETRY
    line = geo.line_height
    title = f"{ctx.facility} Product Inventory Report".strip()
    surface, first_page = ReportLabSurface.new("Inventory Report", geo.page_width, geo.page_height)
    fonts = builtin_fonts(surface)
    qty_x, name_x, upc_x, total_x = COLUMNS

    def draw_header(layer: Layer, is_first_page: bool) -> None:
        y = geo.page_height - geo.top_margin
        if is_first_page:
            surface.draw_text(layer, title, TITLE_SIZE, centered_x(title, TITLE_SIZE, geo.page_width), y, fonts.bold)
            y -= line * 1.1
        for label, x in zip(("Qty", "Name", "UPC", "Total"), COLUMNS):
            surface.draw_text(layer, label, 11.0, x, y, fonts.bold)

    def draw_footer(layer: Layer) -> None:
        account_footer(surface, layer, fonts, account_total, ctx)

    pg = Paginator(surface, first_page, geo, draw_header, draw_footer)
    pg.advance(line * 1.1)

    last_category: str | None = None
    for row in rows:
        if not row.is_summary and row.category != last_category:
            # gap + label + first row together
            layer = pg.ensure_space(2 * CATEGORY_GAP + line)
            pg.advance(CATEGORY_GAP)
            surface.draw_text(layer, row.category, 12.0, name_x, pg.current_y(), fonts.bold)
            pg.advance(CATEGORY_GAP)
            last_category = row.category

        layer = pg.ensure_space(line)
        y = pg.current_y()
        font = fonts.bold if row.is_summary else fonts.regular
        surface.draw_text(layer, format_number(row.quantity), 9.0, qty_x, y, font)
        if not row.is_summary:
            surface.draw_text(layer, row.name or "---", 9.0, name_x, y, font)
            surface.draw_text(layer, row.upc or "---", 9.0, upc_x, y, font)
        surface.draw_text(layer, format_cents(row.total), 9.0, total_x, y, font)
        pg.advance(line)

    pg.advance(2.0)
    layer = pg.ensure_space(5.0 + line)
    surface.draw_text(layer, "____", 9.0, qty_x, pg.current_y(), fonts.regular)
    surface.draw_text(layer, "________", 9.0, total_x, pg.current_y(), fonts.regular)
    pg.advance(5.0)
    surface.draw_text(layer, format_number(totals.total_quantity), 9.0, qty_x, pg.current_y(), fonts.bold)
    surface.draw_text(layer, format_cents(totals.total_value), 9.0, total_x, pg.current_y(), fonts.bold)
    pg.advance(line)

    # both signature lines stay on the same page
    layer = pg.ensure_space(line * SIGNATURE_LINES)
    pg.advance(line * 6)
    surface.draw_text(
        layer,
        "Resident Signature:" + "_" * 44,
        9.0,
        name_x,
        pg.current_y(),
        fonts.bold,
    )
    pg.advance(line * 4)
    surface.draw_text(
        layer,
        "Staff Signature:" + "_" * 47,
        9.0,
        name_x,
        pg.current_y(),
        fonts.bold,
    )
    pg.advance(line)

    pg.finalize()
    pg.draw_page_numbers(fonts.regular)
    return RenderedReport(title=title, surface=surface)
