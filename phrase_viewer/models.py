"""
Plain data carried through the render → index → locate pipeline.

Coordinates on ``GlyphRun`` are in document space (points, origin at the
bottom-left of the page). Everything else is in rendered-page pixel space
(origin at the top-left of the page container, y growing downwards).
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional, Tuple

from PIL import Image

if TYPE_CHECKING:
    from phrase_viewer.text_index import TextIndex

Matrix = Tuple[float, float, float, float, float, float]
Rect = Tuple[float, float, float, float]


@dataclass(frozen=True)
class Page:
    """A page as supplied by the document engine, at scale 1.0."""

    number: int
    width: float
    height: float


@dataclass(frozen=True)
class GlyphRun:
    """A run of text sharing one transform in the extracted text content."""

    text: str
    transform: Matrix
    width: float = 0.0


@dataclass
class GlyphSpan:
    """One positioned run of the text layer."""

    text: str
    left: float
    top: float
    font_height: float
    skew: float = 1.0
    width: float = 0.0
    # box height when it differs from font_height (rotated runs)
    height: Optional[float] = None

    @property
    def bbox(self) -> Rect:
        height = self.font_height if self.height is None else self.height
        return (self.left, self.top, self.left + self.width, self.top + height)


@dataclass(frozen=True)
class Highlight:
    page: int
    left: float
    top: float
    width: float
    height: float

    @property
    def rect(self) -> Rect:
        return (self.left, self.top, self.left + self.width, self.top + self.height)


@dataclass
class RenderedPage:
    """Raster and text layer of one page at one scale, from one render pass."""

    number: int
    scale: float
    width: float
    height: float
    raster: Optional[Image.Image]
    spans: List[GlyphSpan] = field(default_factory=list)
    text_index: Optional["TextIndex"] = None
    generation: int = 0

    @property
    def raster_size(self) -> Tuple[int, int]:
        if self.raster is None:
            return (0, 0)
        return self.raster.size
