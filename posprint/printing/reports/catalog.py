from __future__ import annotations

from typing import Sequence

from ...config import PAGE_HEIGHT, PAGE_WIDTH
from ...models import Product
from ..columns import ColumnFlow, ColumnGeometry, column_offsets
from ..surface import ReportLabSurface
from .common import RenderedReport, ReportContext, builtin_fonts, centered_x, format_cents, truncate_desc


TITLE_SIZE = 14.0
LABEL_SIZE = 9.0
ITEM_SIZE = 7.0
DESC_OFFSET = 8.0
DESC_CHARS = 40

GEOMETRY = ColumnGeometry(
    page_width=PAGE_WIDTH,
    page_height=PAGE_HEIGHT,
    top_margin=25.0,
    bottom_margin=15.0,
    line_height=5.0,
    column_x=column_offsets(10.0, 67.0, 3),
    first_page_offset=TITLE_SIZE * 1.5 - 5.0,
)


def render_catalog(
    products: Sequence[Product],
    ctx: ReportContext | None = None,
    number_pages: bool = False,
) -> RenderedReport:
    """
    Three-column price list. Products are expected sorted by category; a column
    that starts mid-category repeats the category label.
    """
    ctx = ctx or ReportContext()
    geo = GEOMETRY
    title = f"{ctx.facility} Product Catalog".strip()
    surface, first_page = ReportLabSurface.new("Product Catalog", geo.page_width, geo.page_height)
    fonts = builtin_fonts(surface)

    first_layer = surface.get_layer(first_page)
    surface.draw_text(
        first_layer,
        title,
        TITLE_SIZE,
        centered_x(title, TITLE_SIZE, geo.page_width),
        geo.page_height - geo.top_margin,
        fonts.bold,
    )

    flow = ColumnFlow(surface, first_page, geo)
    for product in products:
        slot = flow.place(product.category)
        if slot.starts_group:
            surface.draw_text(slot.layer, product.category, LABEL_SIZE, slot.x, slot.label_y, fonts.bold)
        surface.draw_text(slot.layer, format_cents(product.price), ITEM_SIZE, slot.x, slot.item_y, fonts.regular)
        surface.draw_text(
            slot.layer,
            truncate_desc(product.desc, DESC_CHARS),
            ITEM_SIZE,
            slot.x + DESC_OFFSET,
            slot.item_y,
            fonts.regular,
        )

    if number_pages:
        flow.draw_page_numbers(fonts.regular)
    return RenderedReport(title=title, surface=surface)
