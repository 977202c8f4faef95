from __future__ import annotations

import pytest

from conftest import rendered_page
from phrase_viewer.locator import PhraseLocator, union_rect
from phrase_viewer.models import GlyphSpan, Highlight


def span(text, left, top, width, height=10.0):
    return GlyphSpan(text=text, left=left, top=top, font_height=height, width=width)


def test_union_rect_is_minimal() -> None:
    assert union_rect([(10, 20, 30, 40), (5, 25, 15, 50)]) == (5, 20, 30, 50)
    assert union_rect([]) is None


def test_highlight_covers_all_contributing_spans() -> None:
    spans = [
        span("Intro text. ", 40, 40, 90),
        span("EBITDA increased ", 200, 100, 120),
        span("to USD 2.3 bn", 50, 112, 95, height=12),
        span(" and more", 150, 300, 60),
    ]
    page = rendered_page(4, spans)

    highlight = PhraseLocator().locate_on_page("ebitda increased to usd 2.3 BN", page)

    expected = union_rect([spans[1].bbox, spans[2].bbox])
    assert highlight == Highlight(page=4, left=expected[0], top=expected[1],
                                  width=expected[2] - expected[0],
                                  height=expected[3] - expected[1])
    assert highlight.rect == pytest.approx((50, 100, 320, 124))


def test_only_first_occurrence_on_a_page_is_used() -> None:
    page = rendered_page(1, [span("EBITDA ", 10, 10, 40), span("EBITDA", 10, 500, 40)])
    highlight = PhraseLocator().locate_on_page("EBITDA", page)
    assert highlight.top == 10


def test_one_highlight_per_matching_page_in_page_order() -> None:
    pages = [
        rendered_page(3, [span("Gain on sale of assets", 10, 30, 100)]),
        rendered_page(1, [span("gain on SALE", 20, 60, 80)]),
        rendered_page(2, [span("Nothing relevant", 0, 0, 50)]),
    ]
    found = PhraseLocator().locate("Gain on sale", pages)
    assert [h.page for h in found] == [1, 3]


def test_absent_phrase_yields_nothing() -> None:
    pages = [rendered_page(1, [span("EBITDA", 0, 0, 30)])]
    assert PhraseLocator().locate("net debt", pages) == []
    assert PhraseLocator().locate("", pages) == []
