# renderer.py
import math
import queue
import threading
from dataclasses import dataclass
from typing import Any, List

import fitz  # PyMuPDF

from phrase_viewer.config import PAGE_MARGIN, MIN_SCALE
from phrase_viewer.errors import PageRenderFailure
from phrase_viewer.layout import fit_to_width_scale
from phrase_viewer.logger import logger
from phrase_viewer.models import GlyphRun, GlyphSpan, Page, RenderedPage
from phrase_viewer.text_index import TextIndex


def layout_glyph_run(run: GlyphRun, viewport: fitz.Matrix, viewport_height: float) -> GlyphSpan:
    """
    Positions one glyph run in rendered-page pixel space.

    The run's transform is composed with the content-to-viewport transform,
    which keeps the document's bottom-up y axis, so the top of the span is
    found by flipping the baseline: ``viewport_height - y - font_height``.

    Rotated runs get the axis-aligned box of their advance x font-height
    quad, which reduces to the formula above for horizontal text.
    """
    m = fitz.Matrix(*run.transform)
    tx = m * viewport
    font_height = math.hypot(tx.b, tx.d)
    skew = tx.a / font_height if font_height else 1.0

    # advance width in text space units
    unit = math.hypot(m.a, m.b)
    advance = run.width / unit if unit else 0.0
    corners = [fitz.Point(u, v) * tx for u in (0.0, advance) for v in (0.0, 1.0)]
    xs = [p.x for p in corners]
    ys = [viewport_height - p.y for p in corners]
    return GlyphSpan(
        text=run.text,
        left=min(xs),
        top=min(ys),
        font_height=font_height,
        skew=skew,
        width=max(xs) - min(xs),
        height=max(ys) - min(ys),
    )


class PageRenderer:
    """Produces the raster and the text layer of one page at one scale."""

    def __init__(self, document):
        self.document = document

    def render(self, page: Page, scale: float, generation: int = 0) -> RenderedPage:
        viewport = fitz.Matrix(scale, scale)
        width, height = page.width * scale, page.height * scale

        # raster first; the text layer is only built once it has completed
        raster = self.document.render_raster(page.number, scale)
        runs = self.document.get_text_content(page.number)
        spans = [layout_glyph_run(run, viewport, height) for run in runs]

        return RenderedPage(
            number=page.number,
            scale=scale,
            width=width,
            height=height,
            raster=raster,
            spans=spans,
            text_index=TextIndex(spans),
            generation=generation,
        )


@dataclass
class RenderPass:
    """One full render of every page of ``document`` at ``container_width``."""

    generation: int
    document: Any
    container_width: float
    margin: float = PAGE_MARGIN
    min_scale: float = MIN_SCALE


class RenderWorker(threading.Thread):
    """
    A worker thread that runs render passes in the background.

    Pages of a pass are rendered one after the other in ascending order and
    each is handed to ``sink.commit_page`` before the next one starts. The
    sink decides whether a pass is still current; a superseded pass stops at
    the next page boundary and its output is dropped.

    The sink must provide ``is_current(generation)``, ``begin_pass(pass_)``,
    ``commit_page(generation, rendered)``, ``page_failed(failure)`` and
    ``finish_pass(generation)``.
    """
    def __init__(self, sink):
        super().__init__(daemon=True, name="render-worker")
        self.sink = sink
        self.render_queue: "queue.Queue" = queue.Queue()
        self.start()

    def run(self):
        while True:
            job = self.render_queue.get()
            try:
                if job is None:  # Sentinel value to stop the thread
                    break
                self._run_pass(job)
            except Exception:
                logger.exception("Render pass crashed")
            finally:
                self.render_queue.task_done()

    def _run_pass(self, job: RenderPass):
        if not self.sink.begin_pass(job):
            logger.debug("Skipping stale render pass %d", job.generation)
            return

        renderer = PageRenderer(job.document)
        rendered: List[int] = []
        for page_number in range(1, job.document.page_count + 1):
            if not self.sink.is_current(job.generation):
                logger.debug("Render pass %d superseded before page %d",
                             job.generation, page_number)
                return
            try:
                page = job.document.get_page(page_number)
                scale = fit_to_width_scale(page.width, job.container_width,
                                           job.margin, job.min_scale)
                result = renderer.render(page, scale, job.generation)
            except Exception as e:
                self.sink.page_failed(PageRenderFailure(page_number, job.generation, e))
                continue
            if not self.sink.commit_page(job.generation, result):
                logger.debug("Dropped page %d of superseded pass %d",
                             page_number, job.generation)
                return
            rendered.append(page_number)

        logger.debug("Render pass %d finished, %d of %d pages rendered",
                     job.generation, len(rendered), job.document.page_count)
        self.sink.finish_pass(job.generation)

    def render(self, job: RenderPass):
        """Adds a render pass to the queue."""
        self.render_queue.put(job)

    def wait_idle(self):
        """Blocks until every queued pass has been processed."""
        self.render_queue.join()

    def stop(self):
        """Stops the worker thread."""
        self.render_queue.put(None)
