from __future__ import annotations

import math
import threading
from typing import List, Optional, Sequence

import pytest
from PIL import Image

from phrase_viewer.app import ViewerController
from phrase_viewer.models import GlyphRun, GlyphSpan, Page, RenderedPage
from phrase_viewer.text_index import TextIndex


PAGE_WIDTH = 600.0
PAGE_HEIGHT = 800.0


def run(text: str, x: float, y: float, size: float = 10.0,
        width: Optional[float] = None) -> GlyphRun:
    """A horizontal glyph run with its baseline at (x, y) in document space."""
    if width is None:
        width = size * 0.5 * len(text)
    return GlyphRun(text=text, transform=(size, 0.0, 0.0, size, x, y), width=width)


class FakeDocument:
    """In-memory document engine; each page is a list of glyph runs."""

    def __init__(self, pages: Sequence[Sequence[GlyphRun]],
                 width: float = PAGE_WIDTH, height: float = PAGE_HEIGHT) -> None:
        self.pages = [list(p) for p in pages]
        self.width = width
        self.height = height
        self.page_count = len(self.pages)
        self.calls: List[tuple] = []
        self.closed = False

    def get_page(self, page_number: int) -> Page:
        if not 1 <= page_number <= self.page_count:
            raise IndexError(page_number)
        return Page(number=page_number, width=self.width, height=self.height)

    def render_raster(self, page_number: int, scale: float) -> Image.Image:
        self.calls.append(("raster", page_number))
        size = (max(1, math.ceil(self.width * scale)),
                max(1, math.ceil(self.height * scale)))
        return Image.new("RGB", size, "white")

    def get_text_content(self, page_number: int) -> List[GlyphRun]:
        self.calls.append(("text", page_number))
        return list(self.pages[page_number - 1])

    def close(self) -> None:
        self.closed = True


class FailingDocument(FakeDocument):
    def __init__(self, pages, fail_on: int, **kwargs) -> None:
        super().__init__(pages, **kwargs)
        self.fail_on = fail_on

    def render_raster(self, page_number: int, scale: float) -> Image.Image:
        if page_number == self.fail_on:
            raise RuntimeError("corrupt content stream")
        return super().render_raster(page_number, scale)


class BlockingDocument(FakeDocument):
    """Blocks the first raster call until ``release`` is set."""

    def __init__(self, pages, **kwargs) -> None:
        super().__init__(pages, **kwargs)
        self.started = threading.Event()
        self.release = threading.Event()
        self._blocked_once = False

    def render_raster(self, page_number: int, scale: float) -> Image.Image:
        if not self._blocked_once:
            self._blocked_once = True
            self.started.set()
            self.release.wait(timeout=5)
        return super().render_raster(page_number, scale)


def rendered_page(number: int, spans: Sequence[GlyphSpan],
                  width: float = PAGE_WIDTH, height: float = PAGE_HEIGHT) -> RenderedPage:
    spans = list(spans)
    return RenderedPage(number=number, scale=1.0, width=width, height=height,
                        raster=Image.new("RGB", (int(width), int(height)), "white"),
                        spans=spans, text_index=TextIndex(spans))


def report_pages() -> List[List[GlyphRun]]:
    """Three pages; the EBITDA sentence is only on page 2."""
    return [
        [run("Highlights Q2 2025", 50, 750, size=14),
         run("Revenue grew on higher volumes.", 50, 720)],
        [run("Review Q2 2025", 50, 750, size=14),
         run("EBITDA increased to USD 2.3 bn", 50, 700),
         run("(USD 2.1 bn) driven by higher revenue.", 50, 688)],
        [run("Condensed income statement", 50, 750, size=14),
         run("Gain on sale of non-current assets", 50, 600)],
    ]


@pytest.fixture
def viewer():
    # (640 - 40) / 600 == 1.0, so page geometry equals document geometry
    app = ViewerController(container_width=640, viewport_height=900)
    try:
        yield app
    finally:
        app.close()


@pytest.fixture
def ready_viewer(viewer):
    viewer.load_document(FakeDocument(report_pages()))
    viewer.wait_idle()
    return viewer
