from __future__ import annotations

import math

import pytest

from posprint.errors import ContentTooTallError, LayoutConfigError, PaginationStateError, SurfaceError
from posprint.printing.layout import LayoutGeometry
from posprint.printing.paginator import Paginator
from posprint.printing.surface import PageHandle

from conftest import RecordingSurface


GEOMETRY = LayoutGeometry(
    page_width=210.0,
    page_height=297.0,
    top_margin=15.0,
    bottom_margin=15.0,
    line_height=7.0,
    footer_height=12.0,
)


def _paginator(surface: RecordingSurface, geometry: LayoutGeometry = GEOMETRY, log: list | None = None) -> Paginator:
    log = log if log is not None else []

    def header(layer, is_first_page: bool) -> None:  # noqa: ANN001 - recording layer
        log.append(("header", layer.page_index, is_first_page))
        surface.events.append(("header", layer.page_index))

    def footer(layer) -> None:  # noqa: ANN001 - recording layer
        log.append(("footer", layer.page_index))
        surface.events.append(("footer", layer.page_index))

    return Paginator(surface, PageHandle(0, 0), geometry, header, footer)


def _feed(pg: Paginator, surface: RecordingSurface, heights) -> None:
    for i, h in enumerate(heights):
        layer = pg.ensure_space(h)
        surface.draw_text(layer, f"row {i}", 9.0, 10.0, pg.current_y(), None)
        pg.advance(h)


def test_header_drawn_on_first_page_at_construction(surface: RecordingSurface) -> None:
    log: list = []
    pg = _paginator(surface, log=log)
    assert log == [("header", 0, True)]
    assert pg.current_y() == pytest.approx(297.0 - 15.0 - 7.0)
    assert pg.pages() == (PageHandle(0, 0),)


def test_one_header_and_footer_per_page_in_order(surface: RecordingSurface) -> None:
    log: list = []
    pg = _paginator(surface, log=log)
    _feed(pg, surface, [7.0, 14.0, 21.0, 3.5, 28.0] * 12)
    pg.finalize()

    pages = pg.page_count
    assert pages > 1
    headers = [e for e in log if e[0] == "header"]
    footers = [e for e in log if e[0] == "footer"]
    assert [h[1] for h in headers] == list(range(pages))
    assert [f[1] for f in footers] == list(range(pages))
    assert [h[2] for h in headers] == [True] + [False] * (pages - 1)

    for page in range(pages):
        events = [e for e in surface.events if e[1] == page]
        assert events[0] == ("header", page)
        assert events[-1] == ("footer", page)
        assert sum(1 for e in events if e[0] in ("header", "footer")) == 2


def test_ensure_space_leaves_room_above_footer(surface: RecordingSurface) -> None:
    pg = _paginator(surface)
    for h in [7.0, 30.0, 12.5, 60.0, 7.0, 100.0, 44.0] * 6:
        pg.ensure_space(h)
        assert pg.current_y() - h >= GEOMETRY.bottom_margin + GEOMETRY.footer_height
        assert pg.current_y() <= GEOMETRY.top_line
        pg.advance(h)


def test_page_count_grows_by_one_per_rollover(surface: RecordingSurface) -> None:
    pg = _paginator(surface)
    previous = pg.page_count
    for _ in range(200):
        before_y = pg.current_y()
        pg.ensure_space(7.0)
        rolled = before_y - 7.0 < GEOMETRY.bottom_limit
        assert pg.page_count == previous + (1 if rolled else 0)
        previous = pg.page_count
        pg.advance(7.0)
    assert len(surface.pages) == pg.page_count


def test_advance_does_not_break_pages(surface: RecordingSurface) -> None:
    pg = _paginator(surface)
    pg.advance(1000.0)
    assert pg.page_count == 1
    assert pg.current_y() < 0
    pg.ensure_space(7.0)
    assert pg.page_count == 2
    assert pg.current_y() == pytest.approx(GEOMETRY.top_line)


def test_fifty_single_line_blocks(surface: RecordingSurface) -> None:
    pg = _paginator(surface)
    _feed(pg, surface, [7.0] * 50)
    pg.finalize()

    per_page = math.floor(GEOMETRY.usable_height / GEOMETRY.line_height)
    assert per_page == 35
    assert pg.page_count == math.ceil(50 / per_page)
    last_rows = [t for t in surface.texts_on(pg.page_count - 1) if t.startswith("row ")]
    assert len(last_rows) == (50 % per_page or per_page)


def test_multi_line_block_is_not_split(surface: RecordingSurface) -> None:
    pg = _paginator(surface)
    pg.advance(GEOMETRY.usable_height - 10.0)
    layer = pg.ensure_space(7.0 * 4)
    assert layer.page_index == 1
    for _ in range(4):
        surface.draw_text(layer, "line", 9.0, 10.0, pg.current_y(), None)
        pg.advance(7.0)
    assert surface.texts_on(1).count("line") == 4


def test_page_numbers_use_final_total(surface: RecordingSurface, font) -> None:  # noqa: ANN001 - fixture
    pg = _paginator(surface)
    _feed(pg, surface, [7.0] * 120)
    pg.finalize()
    total = pg.draw_page_numbers(font)

    assert total == pg.page_count == 4
    for page in range(total):
        numbers = [t for t in surface.texts_on(page) if t.startswith("Page ")]
        assert numbers == [f"Page {page + 1} of {total}"]
    placed = [(x, y) for _, text, x, y in surface.texts if text.startswith("Page ")]
    assert set(placed) == {(210.0 - 30.0, 10.0)}


def test_page_numbers_require_finalize(surface: RecordingSurface, font) -> None:  # noqa: ANN001 - fixture
    pg = _paginator(surface)
    with pytest.raises(PaginationStateError):
        pg.draw_page_numbers(font)
    pg.finalize()
    pg.draw_page_numbers(font)
    with pytest.raises(PaginationStateError):
        pg.draw_page_numbers(font)


def test_finalize_only_once(surface: RecordingSurface) -> None:
    log: list = []
    pg = _paginator(surface, log=log)
    pg.finalize()
    with pytest.raises(PaginationStateError):
        pg.finalize()
    with pytest.raises(PaginationStateError):
        pg.ensure_space(7.0)
    assert log.count(("footer", 0)) == 1


def test_block_taller_than_page_is_rejected(surface: RecordingSurface) -> None:
    pg = _paginator(surface)
    pg.advance(50.0)
    with pytest.raises(ContentTooTallError) as info:
        pg.ensure_space(GEOMETRY.usable_height + 0.5)
    assert info.value.usable == pytest.approx(GEOMETRY.usable_height)
    assert pg.page_count == 1
    assert len(surface.pages) == 1


def test_block_of_exactly_usable_height_fits_fresh_page(surface: RecordingSurface) -> None:
    pg = _paginator(surface)
    pg.ensure_space(GEOMETRY.usable_height)
    assert pg.page_count == 1
    pg.advance(1.0)
    pg.ensure_space(GEOMETRY.usable_height)
    assert pg.page_count == 2


@pytest.mark.parametrize(
    "overrides",
    [
        {"page_height": 49.0},
        {"page_height": 50.0},
        {"line_height": 0.0},
        {"top_margin": -1.0},
        {"footer_height": float("nan")},
    ],
)
def test_geometry_without_room_for_a_line_is_rejected(overrides: dict) -> None:
    values = dict(page_width=210.0, page_height=297.0, top_margin=15.0, bottom_margin=15.0,
                  line_height=7.0, footer_height=12.0)
    values.update(overrides)
    with pytest.raises(LayoutConfigError):
        LayoutGeometry(**values)


def test_smallest_valid_geometry_holds_one_line(surface: RecordingSurface) -> None:
    geometry = LayoutGeometry(210.0, 56.0, 15.0, 15.0, 7.0, 12.0)
    assert geometry.usable_height == pytest.approx(7.0)
    pg = _paginator(surface, geometry)
    pg.ensure_space(7.0)
    assert pg.page_count == 1


def test_surface_failure_propagates() -> None:
    surface = RecordingSurface(max_pages=1)
    surface.new_page(210.0, 297.0, "Layer1")
    pg = _paginator(surface)
    with pytest.raises(SurfaceError):
        _feed(pg, surface, [7.0] * 40)
    assert pg.page_count == 1
