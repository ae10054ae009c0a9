from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import Hashable, List, NamedTuple, Optional, Sequence, Tuple

from ..errors import LayoutConfigError
from .layout import draw_page_numbers, fits, page_layer_name, top_line
from .surface import DocumentSurface, FontHandle, Layer, PageHandle

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ColumnGeometry:
    page_width: float
    page_height: float
    top_margin: float
    bottom_margin: float
    line_height: float
    column_x: Tuple[float, ...]
    first_page_offset: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "column_x", tuple(float(x) for x in self.column_x))
        values = (self.page_width, self.page_height, self.top_margin, self.bottom_margin,
                  self.line_height, self.first_page_offset) + self.column_x
        if not all(math.isfinite(v) for v in values):
            raise LayoutConfigError("Column geometry values must be finite")
        if not self.column_x:
            raise LayoutConfigError("At least one column is required")
        if self.line_height <= 0 or self.page_width <= 0 or self.page_height <= 0:
            raise LayoutConfigError("Page size and line height must be positive")
        if min(self.top_margin, self.bottom_margin, self.first_page_offset) < 0:
            raise LayoutConfigError("Margins and first page offset cannot be negative")
        # a group label and its first item must fit any fresh column
        two_lines = 2 * self.line_height
        if not fits(self.first_page_top, two_lines, self.bottom_margin):
            raise LayoutConfigError(
                f"Column height cannot hold a group label and one item ({two_lines}mm)"
            )

    @property
    def columns(self) -> int:
        return len(self.column_x)

    @property
    def top_line(self) -> float:
        return top_line(self.page_height, self.top_margin, self.line_height)

    @property
    def first_page_top(self) -> float:
        return self.top_line - self.first_page_offset


class ColumnSlot(NamedTuple):
    layer: Layer
    column: int
    x: float
    label_y: Optional[float]
    item_y: float

    @property
    def starts_group(self) -> bool:
        return self.label_y is not None


class ColumnFlow:
    """
    Flows short entries down N side-by-side columns, then onto a new page.

    Every column has its own cursor and remembers the last group it printed, so a
    group label is repeated at the top of any column that continues a group. There
    is no header/footer model here; the caller draws page decorations itself.
    """

    def __init__(
        self,
        surface: DocumentSurface,
        first_page: PageHandle,
        geometry: ColumnGeometry,
    ) -> None:
        self.surface = surface
        self.geometry = geometry
        self._pages: List[PageHandle] = [first_page]
        self._layer = surface.get_layer(first_page)
        self._y: List[float] = [geometry.first_page_top] * geometry.columns
        self._last_group: List[Optional[Hashable]] = [None] * geometry.columns
        self._column = 0

    @property
    def column(self) -> int:
        return self._column

    @property
    def page_count(self) -> int:
        return len(self._pages)

    def pages(self) -> Tuple[PageHandle, ...]:
        return tuple(self._pages)

    def current_layer(self) -> Layer:
        return self._layer

    def current_y(self, column: int | None = None) -> float:
        return self._y[self._column if column is None else column]

    def _starts_group(self, group_key: Optional[Hashable]) -> bool:
        return group_key is not None and group_key != self._last_group[self._column]

    def roll_page(self) -> PageHandle:
        geo = self.geometry
        handle = self.surface.new_page(
            geo.page_width,
            geo.page_height,
            page_layer_name(len(self._pages) + 1),
        )
        self._pages.append(handle)
        self._layer = self.surface.get_layer(handle)
        self._y = [geo.top_line] * geo.columns
        self._last_group = [None] * geo.columns
        self._column = 0
        logger.debug("Column flow started page %d", len(self._pages))
        return handle

    def place(self, group_key: Optional[Hashable] = None) -> ColumnSlot:
        """Reserve the next slot; two lines when the entry opens a group in its column."""
        geo = self.geometry
        while True:
            starts = self._starts_group(group_key)
            needed = geo.line_height * (2 if starts else 1)
            if fits(self._y[self._column], needed, geo.bottom_margin):
                break
            self._column += 1
            if self._column >= geo.columns:
                self.roll_page()

        col = self._column
        label_y = None
        if starts:
            label_y = self._y[col]
            self._y[col] -= geo.line_height
        item_y = self._y[col]
        self._y[col] -= geo.line_height
        if group_key is not None:
            self._last_group[col] = group_key
        return ColumnSlot(self._layer, col, geo.column_x[col], label_y, item_y)

    def draw_page_numbers(self, font: FontHandle) -> int:
        return draw_page_numbers(self.surface, self._pages, font, self.geometry.page_width)


def column_offsets(left: float, width: float, count: int) -> Sequence[float]:
    return tuple(left + width * i for i in range(count))
