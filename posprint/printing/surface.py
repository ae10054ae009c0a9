from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import List, NamedTuple, Protocol, Tuple

from reportlab.lib.units import mm
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen import canvas

from .. import config
from ..errors import SurfaceError

logger = logging.getLogger(__name__)


class PageHandle(NamedTuple):
    page_index: int
    layer_index: int


@dataclass(frozen=True)
class FontHandle:
    name: str


class DocumentSurface(Protocol):
    """What the layout core needs from a drawing backend."""

    def new_page(self, width: float, height: float, name: str) -> PageHandle:
        ...

    def get_layer(self, handle: PageHandle) -> "Layer":
        ...

    def draw_text(
        self,
        layer: "Layer",
        text: str,
        size: float,
        x: float,
        y: float,
        font: FontHandle,
    ) -> None:
        ...


@dataclass(frozen=True)
class TextRun:
    text: str
    size: float
    x: float
    y: float
    font: str


@dataclass
class Layer:
    name: str
    runs: List[TextRun] = field(default_factory=list)


@dataclass
class _Page:
    width: float
    height: float
    layers: List[Layer] = field(default_factory=list)


class ReportLabSurface:
    """
    Page store that keeps every text run in memory and only writes the PDF on save.

    ReportLab's canvas is strictly sequential (once showPage() is called a page is
    closed), while the paginator needs to come back to finished pages for the
    "Page X of Y" pass. Runs are therefore recorded per page and replayed in order
    when the document is saved. All coordinates are millimetres from the bottom-left
    corner, converted to points at save time.
    """

    def __init__(self, title: str, max_pages: int | None = None) -> None:
        self.title = title
        self.max_pages = config.MAX_PAGES if max_pages is None else max_pages
        self._pages: List[_Page] = []

    @classmethod
    def new(
        cls,
        title: str,
        width: float,
        height: float,
        layer_name: str = "Layer1",
        max_pages: int | None = None,
    ) -> Tuple["ReportLabSurface", PageHandle]:
        surface = cls(title, max_pages=max_pages)
        first = surface.new_page(width, height, layer_name)
        return surface, first

    @property
    def page_count(self) -> int:
        return len(self._pages)

    def add_builtin_font(self, name: str) -> FontHandle:
        if name not in pdfmetrics.standardFonts:
            raise SurfaceError(f"Unknown builtin font: {name}")
        try:
            pdfmetrics.getFont(name)
        except KeyError as exc:
            raise SurfaceError(f"Font could not be loaded: {name}") from exc
        return FontHandle(name)

    def new_page(self, width: float, height: float, name: str) -> PageHandle:
        if len(self._pages) >= self.max_pages:
            raise SurfaceError(
                f"Page limit reached ({self.max_pages}) while creating {name!r} in {self.title!r}"
            )
        page = _Page(width=width, height=height, layers=[Layer(name)])
        self._pages.append(page)
        return PageHandle(len(self._pages) - 1, 0)

    def get_layer(self, handle: PageHandle) -> Layer:
        try:
            return self._pages[handle.page_index].layers[handle.layer_index]
        except IndexError as exc:
            raise SurfaceError(f"No such page/layer: {handle}") from exc

    def draw_text(
        self,
        layer: Layer,
        text: str,
        size: float,
        x: float,
        y: float,
        font: FontHandle,
    ) -> None:
        layer.runs.append(TextRun(str(text), float(size), float(x), float(y), font.name))

    def save(self, output_path: Path) -> None:
        if not self._pages:
            raise SurfaceError("Cannot save a document without pages")
        first = self._pages[0]
        canv = canvas.Canvas(str(output_path), pagesize=(first.width * mm, first.height * mm))
        canv.setTitle(self.title)

        for page in self._pages:
            canv.setPageSize((page.width * mm, page.height * mm))
            for layer in page.layers:
                for run in layer.runs:
                    canv.setFont(run.font, run.size)
                    canv.drawString(run.x * mm, run.y * mm, run.text)
            canv.showPage()

        canv.save()
        logger.debug("Wrote %d pages to %s", len(self._pages), output_path)
