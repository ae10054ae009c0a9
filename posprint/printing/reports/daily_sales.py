from __future__ import annotations

from datetime import datetime
from typing import Sequence

from ...config import PAGE_HEIGHT, PAGE_WIDTH
from ...models import DailySales, SalesTotals
from ..layout import LayoutGeometry, fits
from ..paginator import Paginator
from ..surface import Layer, ReportLabSurface
from .common import (
    Fonts,
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
    footer_height=12.0,
)
TITLE_SIZE = 14.0

# (date x, total x) for the left and right halves of the page
LEFT = (20.0, 55.0)
RIGHT = (125.0, 160.0)


def lines_left(cursor: float, line_height: float, limit: float) -> int:
    """Single lines that still fit below `cursor`, stepping the way Paginator.advance does."""
    count = 0
    while fits(cursor, line_height, limit):
        cursor -= line_height
        count += 1
    return count


def _draw_day(surface: ReportLabSurface, layer: Layer, fonts: Fonts, row: DailySales, xs, y: float) -> None:
    date_x, total_x = xs
    surface.draw_text(layer, f"{row.day:%Y-%m-%d}", 9.0, date_x, y, fonts.regular)
    surface.draw_text(layer, format_cents(row.total_sales), 9.0, total_x, y, fonts.regular)


def render_daily_sales(
    rows: Sequence[DailySales],
    start: datetime,
    end: datetime,
    totals: SalesTotals,
    account_total: int,
    ctx: ReportContext | None = None,
) -> RenderedReport:
    """
    One line per day, laid out in two columns.

    Each page is filled down the left column first and then down the right one,
    so days read in order column by column. The number of lines per column is
    taken from the space left on that page.
    """
    ctx = ctx or ReportContext()
    geo = GEOMETRY
    line = geo.line_height
    title = f"{ctx.facility} Sales by Day from {start:%Y-%m-%d} to {end:%Y-%m-%d}".strip()
    surface, first_page = ReportLabSurface.new("Sales by Day", geo.page_width, geo.page_height)
    fonts = builtin_fonts(surface)

    def draw_header(layer: Layer, is_first_page: bool) -> None:
        y = geo.page_height - geo.top_margin
        if is_first_page:
            surface.draw_text(layer, title, TITLE_SIZE, centered_x(title, TITLE_SIZE, geo.page_width), y, fonts.bold)
            y -= line * 2
        for date_x, total_x in (LEFT, RIGHT):
            surface.draw_text(layer, "Date", 11.0, date_x, y, fonts.bold)
            surface.draw_text(layer, "Total", 11.0, total_x, y, fonts.bold)

    def draw_footer(layer: Layer) -> None:
        account_footer(surface, layer, fonts, account_total, ctx)

    pg = Paginator(surface, first_page, geo, draw_header, draw_footer)
    pg.advance(line * 2)

    idx = 0
    while idx < len(rows):
        pg.ensure_space(line)
        per_column = lines_left(pg.current_y(), line, geo.bottom_limit)
        page_rows = rows[idx: idx + per_column * 2]
        left, right = page_rows[:per_column], page_rows[per_column:]
        for slot, row in enumerate(left):
            layer = pg.ensure_space(line)
            y = pg.current_y()
            _draw_day(surface, layer, fonts, row, LEFT, y)
            if slot < len(right):
                _draw_day(surface, layer, fonts, right[slot], RIGHT, y)
            pg.advance(line)
        idx += len(page_rows)

    # grand total: double rule then the totals row
    pg.advance(2.0)
    layer = pg.ensure_space(0.4 + 5.0 + line)
    for offset in (0.0, 0.4):
        y = pg.current_y() - offset
        surface.draw_text(layer, "____", 9.0, LEFT[1], y, fonts.regular)
        surface.draw_text(layer, "________", 9.0, RIGHT[1], y, fonts.regular)
    pg.advance(0.4 + 5.0)
    y = pg.current_y()
    surface.draw_text(layer, "Total Quantity:", 9.0, 25.0, y, fonts.bold)
    surface.draw_text(layer, format_number(totals.total_quantity), 9.0, LEFT[1], y, fonts.bold)
    surface.draw_text(layer, "Grand Total:", 9.0, 133.0, y, fonts.bold)
    surface.draw_text(layer, format_cents(totals.total_value), 9.0, RIGHT[1], y, fonts.bold)
    pg.advance(line)

    pg.finalize()
    pg.draw_page_numbers(fonts.regular)
    return RenderedReport(title=title, surface=surface)
