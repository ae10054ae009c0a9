from __future__ import annotations

from pathlib import Path
from typing import List, Tuple

import pytest

from posprint import config
from posprint.errors import SurfaceError
from posprint.models import reset_engine
from posprint.printing.surface import FontHandle, PageHandle


class RecordingLayer:
    def __init__(self, page_index: int) -> None:
        self.page_index = page_index


class RecordingSurface:
    """Surface double that logs every call instead of drawing."""

    def __init__(self, max_pages: int | None = None) -> None:
        self.max_pages = max_pages
        self.pages: List[Tuple[float, float, str]] = []
        self.events: List[tuple] = []
        self.texts: List[Tuple[int, str, float, float]] = []

    def new_page(self, width: float, height: float, name: str) -> PageHandle:
        if self.max_pages is not None and len(self.pages) >= self.max_pages:
            raise SurfaceError("out of pages")
        self.pages.append((width, height, name))
        return PageHandle(len(self.pages) - 1, 0)

    def get_layer(self, handle: PageHandle) -> RecordingLayer:
        return RecordingLayer(handle.page_index)

    def draw_text(self, layer, text, size, x, y, font) -> None:  # noqa: ANN001 - matches surface protocol
        self.texts.append((layer.page_index, text, x, y))
        self.events.append(("text", layer.page_index, text))

    def texts_on(self, page_index: int) -> List[str]:
        return [text for page, text, _, _ in self.texts if page == page_index]


@pytest.fixture
def surface() -> RecordingSurface:
    s = RecordingSurface()
    s.new_page(210.0, 297.0, "Layer1")
    return s


@pytest.fixture
def font() -> FontHandle:
    return FontHandle("Helvetica")


@pytest.fixture
def out_dir(tmp_path: Path) -> Path:
    config.set_out_dir(tmp_path / "out")
    reset_engine()
    return config.OUT_DIR
