from __future__ import annotations

import pytest

from conftest import rendered_page
from phrase_viewer.view import DocumentView


def _view(pages=3, height=800.0):
    view = DocumentView(container_width=640, viewport_height=900, spacing=20, top_offset=10)
    for number in range(1, pages + 1):
        view.mount(rendered_page(number, [], height=height))
    return view


def test_containers_are_stacked_in_page_order() -> None:
    view = _view()
    assert [view.get(n).top for n in view.page_numbers()] == [10, 830, 1650]
    assert view.total_height == pytest.approx(2470)


def test_mount_replaces_existing_container() -> None:
    view = _view()
    old = view.get(2)
    new = view.mount(rendered_page(2, [], height=400))
    assert len(view) == 3
    assert view.get(2) is new is not old
    assert view.get(3).top == 10 + 800 + 20 + 400 + 20


def test_scroll_to_page_start_and_center() -> None:
    view = _view()
    assert view.scroll_to_page(2)
    assert view.scroll_top == 830
    assert view.scroll_to_page(2, block="center")
    assert view.scroll_top == pytest.approx(830 + 400 - 450)
    assert view.current_page() == 2


def test_scroll_is_clamped_to_scroll_region() -> None:
    view = _view()
    view.scroll_to_page(3)
    assert view.scroll_top == pytest.approx(2470 - 900)
    view.scroll_to_page(1, block="center")
    assert view.scroll_top == 0


def test_scroll_to_unrendered_page_is_a_noop() -> None:
    view = _view()
    view.scroll_to_page(2)
    assert not view.scroll_to_page(9)
    assert view.scroll_top == 830


def test_visible_pages() -> None:
    view = _view()
    view.scroll_to_page(2)
    assert view.visible_pages() == [2, 3]
