from __future__ import annotations

import logging
from typing import Callable, List, Tuple

from ..errors import ContentTooTallError, PaginationStateError
from .layout import LayoutGeometry, draw_page_numbers, fits, page_layer_name
from .surface import DocumentSurface, FontHandle, Layer, PageHandle

logger = logging.getLogger(__name__)

HeaderFn = Callable[[Layer, bool], None]
FooterFn = Callable[[Layer], None]


class Paginator:
    """
    Single-column flow over fixed-size pages.

    Ask for room with ensure_space() before drawing a block, draw on the returned
    layer at current_y(), then advance() by what was used. When a block does not
    fit, the current page gets its footer, a new page is created and gets its
    header. finalize() closes the last page; draw_page_numbers() runs afterwards
    because the total is only known once every page exists.

    The header callback receives (layer, is_first_page); the footer callback
    receives (layer). Each page gets exactly one of each.
    """

    def __init__(
        self,
        surface: DocumentSurface,
        first_page: PageHandle,
        geometry: LayoutGeometry,
        draw_header: HeaderFn,
        draw_footer: FooterFn,
    ) -> None:
        self.surface = surface
        self.geometry = geometry
        self._draw_header = draw_header
        self._draw_footer = draw_footer
        self._pages: List[PageHandle] = [first_page]
        self._finalized = False
        self._numbered = False
        self._cursor_y = geometry.top_line
        self._draw_header(self._layer(first_page), True)

    def _layer(self, handle: PageHandle) -> Layer:
        return self.surface.get_layer(handle)

    @property
    def page_count(self) -> int:
        return len(self._pages)

    def pages(self) -> Tuple[PageHandle, ...]:
        return tuple(self._pages)

    def current_y(self) -> float:
        return self._cursor_y

    def ensure_space(self, needed: float) -> Layer:
        if self._finalized:
            raise PaginationStateError("ensure_space() called after finalize()")
        geo = self.geometry
        if needed > geo.usable_height:
            raise ContentTooTallError(needed, geo.usable_height)

        if fits(self._cursor_y, needed, geo.bottom_limit):
            return self._layer(self._pages[-1])

        # close the current page before opening the next one
        self._draw_footer(self._layer(self._pages[-1]))
        handle = self.surface.new_page(
            geo.page_width,
            geo.page_height,
            page_layer_name(len(self._pages) + 1),
        )
        self._pages.append(handle)
        layer = self._layer(handle)
        self._draw_header(layer, False)
        self._cursor_y = geo.top_line
        logger.debug("Page %d started for a %.2fmm block", len(self._pages), needed)
        return layer

    def advance(self, delta: float) -> None:
        self._cursor_y -= delta

    def finalize(self) -> None:
        if self._finalized:
            raise PaginationStateError("finalize() may only be called once")
        self._draw_footer(self._layer(self._pages[-1]))
        self._finalized = True

    def draw_page_numbers(self, font: FontHandle) -> int:
        if not self._finalized:
            raise PaginationStateError("draw_page_numbers() requires finalize() first")
        if self._numbered:
            raise PaginationStateError("Page numbers were already drawn")
        self._numbered = True
        return draw_page_numbers(self.surface, self._pages, font, self.geometry.page_width)
