from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Sequence

from ..errors import LayoutConfigError
from .surface import DocumentSurface, FontHandle, PageHandle


PAGE_NUMBER_SIZE = 8.0
PAGE_NUMBER_RIGHT_INSET = 30.0
PAGE_NUMBER_Y = 10.0


@dataclass(frozen=True)
class LayoutGeometry:
    """Per-report page metrics in millimetres."""

    page_width: float
    page_height: float
    top_margin: float
    bottom_margin: float
    line_height: float
    footer_height: float = 0.0

    def __post_init__(self) -> None:
        for name in ("page_width", "page_height", "top_margin", "bottom_margin", "line_height", "footer_height"):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise LayoutConfigError(f"{name} must be finite, got {value!r}")
        if self.page_width <= 0 or self.page_height <= 0:
            raise LayoutConfigError("Page size must be positive")
        if self.line_height <= 0:
            raise LayoutConfigError("line_height must be positive")
        if min(self.top_margin, self.bottom_margin, self.footer_height) < 0:
            raise LayoutConfigError("Margins and footer height cannot be negative")
        # the cursor starts one line below the top margin, and a line must still fit above the footer
        if self.usable_height < self.line_height:
            reserved = self.top_margin + self.bottom_margin + self.footer_height + self.line_height
            raise LayoutConfigError(
                f"Page height {self.page_height}mm leaves no room for a line "
                f"(margins + footer + line = {reserved}mm, usable {self.usable_height:.2f}mm)"
            )

    @property
    def top_line(self) -> float:
        return top_line(self.page_height, self.top_margin, self.line_height)

    @property
    def bottom_limit(self) -> float:
        return self.bottom_margin + self.footer_height

    @property
    def usable_height(self) -> float:
        return self.top_line - self.bottom_limit


def top_line(page_height: float, top_margin: float, line_height: float) -> float:
    """Baseline of the first writable line on a fresh page."""
    return page_height - top_margin - line_height


def fits(cursor: float, needed: float, limit: float) -> bool:
    return cursor - needed >= limit


def page_layer_name(index: int) -> str:
    return f"Layer{index}"


def draw_page_numbers(
    surface: DocumentSurface,
    pages: Sequence[PageHandle],
    font: FontHandle,
    page_width: float,
) -> int:
    """Write "Page i of N" on every page; N is the final page count."""
    total = len(pages)
    for i, handle in enumerate(pages, start=1):
        layer = surface.get_layer(handle)
        surface.draw_text(
            layer,
            f"Page {i} of {total}",
            PAGE_NUMBER_SIZE,
            page_width - PAGE_NUMBER_RIGHT_INSET,
            PAGE_NUMBER_Y,
            font,
        )
    return total
