"""Tests for the page layout cursor."""

import pytest

from medicare.services.pdfs.errors import LayoutOverflowError
from medicare.services.pdfs.layout import LayoutState


def make_state(**kwargs):
    opts = dict(page_width=210, page_height=297, margin=15, top=13,
                footer_height=12)
    opts.update(kwargs)
    return LayoutState(**opts)


def test_starts_at_top_of_page_one():
    state = make_state()
    assert state.page == 1
    assert state.y == 13
    assert state.bottom_limit == 297 - 15 - 12
    assert state.at_page_top


def test_advance_returns_previous_y():
    state = make_state()
    assert state.advance(10) == 13
    assert state.y == 23


def test_ensure_room_no_break_when_space_left():
    state = make_state()
    state.advance(50)
    assert state.ensure_room(30) is False
    assert state.page == 1


def test_ensure_room_breaks_and_calls_hook():
    pages = []
    state = make_state(on_new_page=lambda s: pages.append(s.page))
    state.advance(200)
    assert state.ensure_room(80) is True
    assert state.page == 2
    assert state.y == state.top
    assert pages == [2]


def test_trigger_forces_break_even_when_block_fits():
    state = make_state()
    state.advance(190)  # 67mm left
    assert state.ensure_room(20, trigger=90) is True
    assert state.page == 2


def test_fresh_page_never_breaks_again():
    state = make_state()
    assert state.ensure_room(1000, trigger=1000) is False
    assert state.page == 1


def test_place_records_placement():
    state = make_state()
    top = state.place(20, "box")
    assert top == 13
    p = state.placements[-1]
    assert (p.page, p.top, p.bottom, p.kind) == (1, 13, 33, "box")


def test_place_past_bottom_raises():
    state = make_state()
    state.advance(state.content_height - 5)
    with pytest.raises(LayoutOverflowError):
        state.place(10, "box")


def test_place_exactly_to_bottom_is_allowed():
    state = make_state()
    state.advance(state.content_height - 10)
    state.place(10, "box")
    assert state.placements[-1].bottom == pytest.approx(state.bottom_limit)
