from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ... import config
from ..surface import FontHandle, Layer, ReportLabSurface


# helvetica averages about half an em per glyph; 1pt = 0.3528mm
AVG_CHAR_RATIO = 0.5
PT_TO_MM = 0.3528

FOOTER_Y = 10.0
FOOTER_SIZE = 8.0

RULE = "_" * 105


@dataclass
class ReportContext:
    facility: str = field(default_factory=lambda: config.CLUB_NAME)
    printed_at: Optional[datetime] = None

    def now(self) -> datetime:
        return self.printed_at or datetime.now()


@dataclass
class RenderedReport:
    title: str
    surface: ReportLabSurface

    @property
    def page_count(self) -> int:
        return self.surface.page_count


@dataclass(frozen=True)
class Fonts:
    regular: FontHandle
    bold: FontHandle


def builtin_fonts(surface: ReportLabSurface) -> Fonts:
    return Fonts(
        regular=surface.add_builtin_font("Helvetica"),
        bold=surface.add_builtin_font("Helvetica-Bold"),
    )


def format_cents(cents: int) -> str:
    sign = "-" if cents < 0 else ""
    dollars, remainder = divmod(abs(int(cents)), 100)
    return f"{sign}${dollars:,}.{remainder:02d}"


def format_number(value: int) -> str:
    return f"{int(value):,}"


def truncate_desc(desc: str, max_chars: int) -> str:
    if len(desc) <= max_chars:
        return desc
    return desc[: max(0, max_chars - 1)] + "…"


def centered_x(text: str, size: float, page_width: float) -> float:
    """Approximate left edge that centres `text`; no font metrics involved."""
    width = size * AVG_CHAR_RATIO * len(text) * PT_TO_MM
    return max(0.0, (page_width - width) / 2)


def account_footer(
    surface: ReportLabSurface,
    layer: Layer,
    fonts: Fonts,
    account_total: int,
    ctx: ReportContext,
) -> float:
    """Printed timestamp plus the total of all customer accounts."""
    ts = ctx.now()
    stamp = f"{ts.month}/{ts.day}/{ts.year} {ts.strftime('%I:%M:%S %p').lstrip('0')}"
    surface.draw_text(layer, f"Printed: {stamp}", FOOTER_SIZE, 5.0, FOOTER_Y, fonts.regular)
    surface.draw_text(
        layer,
        f"Account Total: {format_cents(account_total)}",
        FOOTER_SIZE,
        90.0,
        FOOTER_Y,
        fonts.bold,
    )
    return FOOTER_Y


def draw_line(surface: ReportLabSurface, layer: Layer, font: FontHandle, start_y: float) -> float:
    y = start_y - 2.0
    surface.draw_text(layer, RULE, 9.0, 15.0, y, font)
    return y
