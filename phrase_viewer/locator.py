# locator.py
from typing import Iterable, List, Optional, Sequence

from phrase_viewer.models import GlyphSpan, Highlight, Rect, RenderedPage
from phrase_viewer.text_index import TextIndex


def union_rect(boxes: Iterable[Rect]) -> Optional[Rect]:
    """Smallest axis-aligned rectangle containing every box, or None."""
    left = top = float("inf")
    right = bottom = float("-inf")
    for x0, y0, x1, y1 in boxes:
        left, top = min(left, x0), min(top, y0)
        right, bottom = max(right, x1), max(bottom, y1)
    if left == float("inf"):
        return None
    return (left, top, right, bottom)


class PhraseLocator:
    """
    Finds a phrase on each rendered page and turns the match into a
    highlight rectangle covering the spans that carry it.

    Only the first occurrence per page is used. Matching is a plain
    case-insensitive substring test over the page's TextIndex.
    """

    def locate_on_page(self, phrase: str, page: RenderedPage) -> Optional[Highlight]:
        index = page.text_index if page.text_index is not None else TextIndex(page.spans)
        start = index.find(phrase)
        if start < 0:
            return None
        owners = index.spans_for_range(start, start + len(phrase))
        spans: Sequence[GlyphSpan] = [page.spans[i] for i in owners]
        rect = union_rect(span.bbox for span in spans)
        if rect is None:
            return None
        left, top, right, bottom = rect
        return Highlight(page=page.number, left=left, top=top,
                         width=right - left, height=bottom - top)

    def locate(self, phrase: str, pages: Iterable[RenderedPage]) -> List[Highlight]:
        """One highlight per page containing ``phrase``, in page order."""
        found = []
        for page in sorted(pages, key=lambda p: p.number):
            highlight = self.locate_on_page(phrase, page)
            if highlight is not None:
                found.append(highlight)
        return found
