from phrase_viewer.app import (
    DocumentLoaded, PhraseQueried, ResizeSettled, ViewerController, ViewerState
)
from phrase_viewer.errors import (
    DocumentLoadFailure, PageRenderFailure, PhraseViewerError, ViewerNotReady
)
from phrase_viewer.models import GlyphRun, GlyphSpan, Highlight, Page, RenderedPage

__version__ = "0.1.0"
