# app.py
import enum
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from PIL import Image

from phrase_viewer.config import (
    DEFAULT_CONTAINER_WIDTH, DEFAULT_THEME, DEFAULT_VIEWPORT_HEIGHT, MIN_SCALE,
    PAGE_MARGIN, SEARCH_PHRASES
)
from phrase_viewer.errors import DocumentLoadFailure, PageRenderFailure, ViewerNotReady
from phrase_viewer.locator import PhraseLocator
from phrase_viewer.logger import logger
from phrase_viewer.models import Highlight, RenderedPage
from phrase_viewer.overlay import HighlightOverlay
from phrase_viewer.pdf_model import PDFModel
from phrase_viewer.renderer import RenderPass, RenderWorker
from phrase_viewer.view import DocumentView


class ViewerState(enum.Enum):
    EMPTY = "empty"
    LOADING = "loading"
    RENDERING = "rendering"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class DocumentLoaded:
    document: Any


@dataclass(frozen=True)
class ResizeSettled:
    container_width: float
    viewport_height: Optional[float] = None


@dataclass(frozen=True)
class PhraseQueried:
    phrase: str


class ViewerController:
    """
    The controller owning all view state: the document, the rendered pages
    (through the DocumentView), the active highlights and the container size.

    State only changes through ``dispatch`` with a DocumentLoaded,
    ResizeSettled or PhraseQueried event, and through the render worker
    committing pages of the current generation.

    Listener channels: ``not_found`` (phrase), ``render_failure``
    (PageRenderFailure), ``load_failure`` (DocumentLoadFailure) and
    ``ready`` (generation number).
    """
    CHANNELS = ("not_found", "render_failure", "load_failure", "ready")

    def __init__(self, container_width: float = DEFAULT_CONTAINER_WIDTH,
                 viewport_height: float = DEFAULT_VIEWPORT_HEIGHT,
                 references: Optional[Dict[int, str]] = None,
                 margin: float = PAGE_MARGIN, min_scale: float = MIN_SCALE,
                 theme: str = DEFAULT_THEME):
        self.state = ViewerState.EMPTY
        self.document = None
        self.view = DocumentView(container_width, viewport_height)
        self.references = dict(SEARCH_PHRASES if references is None else references)
        self.margin = margin
        self.min_scale = min_scale

        self.locator = PhraseLocator()
        self.overlay = HighlightOverlay(theme)
        self.highlights: List[Highlight] = []
        self.active_phrase: Optional[str] = None
        self.render_failures: List[PageRenderFailure] = []

        self.generation = 0
        self._retired = []
        self._restore_page: Optional[int] = None
        self._lock = threading.RLock()
        self._listeners: Dict[str, List[Callable]] = {c: [] for c in self.CHANNELS}
        self.renderer = RenderWorker(self)

    # --- Notifications ---

    def subscribe(self, channel: str, callback: Callable):
        if channel not in self._listeners:
            raise ValueError(f"Unknown channel {channel!r}, expected one of {self.CHANNELS}")
        self._listeners[channel].append(callback)

    def _publish(self, channel: str, payload):
        for callback in list(self._listeners[channel]):
            try:
                callback(payload)
            except Exception:
                logger.exception("Listener %r on %r failed", callback, channel)

    # --- Entry points ---

    def load(self, source) -> None:
        """Opens a PDF from a path or bytes and starts rendering it."""
        with self._lock:
            if self.state is ViewerState.FAILED:
                raise ViewerNotReady("load a document", self.state)
            self.state = ViewerState.LOADING
        try:
            document = PDFModel(source)
        except DocumentLoadFailure as e:
            with self._lock:
                self.state = ViewerState.FAILED
            logger.error("PDF load error: %s", e)
            self._publish("load_failure", e)
            raise
        self.dispatch(DocumentLoaded(document))

    def load_document(self, document) -> None:
        """Starts rendering an already opened document engine."""
        self.dispatch(DocumentLoaded(document))

    def resize(self, container_width: float, viewport_height: Optional[float] = None) -> bool:
        return self.dispatch(ResizeSettled(container_width, viewport_height))

    def search_and_highlight(self, phrase: str) -> List[Highlight]:
        return self.dispatch(PhraseQueried(phrase))

    def resolve_phrase_and_highlight(self, reference_id: int) -> List[Highlight]:
        phrase = self.references.get(reference_id)
        if phrase is None:
            logger.warning("No phrase registered for reference %s", reference_id)
            return []
        return self.search_and_highlight(phrase)

    def jump_to_page(self, page_number: int) -> bool:
        """Scrolls to the top of a rendered page. Does nothing if it is not rendered yet."""
        with self._lock:
            return self.view.scroll_to_page(page_number, block="start")

    def dispatch(self, event):
        with self._lock:
            if isinstance(event, DocumentLoaded):
                return self._on_document_loaded(event)
            if isinstance(event, ResizeSettled):
                return self._on_resize_settled(event)
            if isinstance(event, PhraseQueried):
                return self._on_phrase_queried(event)
        raise TypeError(f"Unknown event {event!r}")

    # --- Transitions ---

    def _on_document_loaded(self, event: DocumentLoaded):
        if self.state is ViewerState.FAILED:
            raise ViewerNotReady("load a document", self.state)
        if self.document is not None and self.document is not event.document:
            self._retired.append(self.document)
        self.document = event.document
        self.highlights = []
        self.active_phrase = None
        self._restore_page = None
        self._start_pass()

    def _on_resize_settled(self, event: ResizeSettled) -> bool:
        if event.viewport_height is not None:
            self.view.viewport_height = event.viewport_height
        if event.container_width == self.view.container_width:
            return False
        self.view.container_width = event.container_width
        if self.document is None or self.state is ViewerState.FAILED:
            return False
        self._restore_page = self.view.current_page()
        self._start_pass()
        return True

    def _on_phrase_queried(self, event: PhraseQueried) -> List[Highlight]:
        if self.state is not ViewerState.READY:
            raise ViewerNotReady("search", self.state)

        found = self.locator.locate(event.phrase, self.view.pages())
        self.overlay.clear(self.view)
        self.highlights = []
        if not found:
            self.active_phrase = None
            logger.info("Text not found: %r", event.phrase)
            self._publish("not_found", event.phrase)
            return []

        self.active_phrase = event.phrase
        self.highlights = self.overlay.apply(self.view, found)
        self.view.scroll_to_page(self.highlights[0].page, block="center")
        return list(self.highlights)

    def _start_pass(self):
        self.generation += 1
        self.render_failures = []
        self.state = ViewerState.RENDERING
        logger.debug("Starting render pass %d at width %s",
                     self.generation, self.view.container_width)
        self.renderer.render(RenderPass(self.generation, self.document,
                                        self.view.container_width,
                                        self.margin, self.min_scale))

    def _revalidate_highlights(self):
        if self.active_phrase:
            candidates = self.locator.locate(self.active_phrase, self.view.pages())
        else:
            candidates = self.highlights
        self.highlights = self.overlay.apply(self.view, candidates)

    # --- Render worker callbacks ---

    def is_current(self, generation: int) -> bool:
        with self._lock:
            return generation == self.generation

    def begin_pass(self, job: RenderPass) -> bool:
        with self._lock:
            if job.generation != self.generation:
                return False
            while self._retired:
                self._retired.pop().close()
            self.view.clear()
            return True

    def commit_page(self, generation: int, rendered: RenderedPage) -> bool:
        with self._lock:
            if generation != self.generation:
                return False
            self.view.mount(rendered)
            return True

    def page_failed(self, failure: PageRenderFailure):
        with self._lock:
            if failure.generation != self.generation:
                return
            logger.error("%s", failure)
            self.render_failures.append(failure)
            self._publish("render_failure", failure)

    def finish_pass(self, generation: int):
        with self._lock:
            if generation != self.generation or self.state is not ViewerState.RENDERING:
                return
            self.state = ViewerState.READY
            self._revalidate_highlights()
            if self._restore_page is not None:
                self.view.scroll_to_page(self._restore_page)
            logger.debug("Viewer ready, %d pages rendered", len(self.view))
            self._publish("ready", generation)

    # --- Queries ---

    @property
    def rendered_pages(self) -> List[RenderedPage]:
        with self._lock:
            return self.view.pages()

    def compose_page(self, page_number: int) -> Image.Image:
        """The page raster with the active highlights drawn on it."""
        with self._lock:
            container = self.view.get(page_number)
            if container is None:
                raise KeyError(f"Page {page_number} is not rendered")
            return self.overlay.compose(container)

    def wait_idle(self):
        self.renderer.wait_idle()

    def close(self):
        self.renderer.stop()
        self.renderer.join()
        with self._lock:
            for document in self._retired:
                document.close()
            self._retired.clear()
            if self.document is not None:
                self.document.close()
                self.document = None
