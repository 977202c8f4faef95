# overlay.py
from typing import Iterable, List

from PIL import Image, ImageColor, ImageDraw

from phrase_viewer.config import DEFAULT_THEME, THEMES
from phrase_viewer.logger import logger
from phrase_viewer.models import Highlight
from phrase_viewer.view import DocumentView, PageContainer


class HighlightOverlay:
    """Draws highlight rectangles over the page containers of a DocumentView."""

    def __init__(self, theme: str = DEFAULT_THEME):
        self.theme = THEMES[theme]

    def clear(self, view: DocumentView):
        for container in view.containers.values():
            container.highlights.clear()

    def apply(self, view: DocumentView, highlights: Iterable[Highlight]) -> List[Highlight]:
        """
        Replaces every displayed highlight with ``highlights``. Highlights on
        pages without a container are dropped. Returns the ones drawn.
        """
        self.clear(view)
        drawn = []
        for h in highlights:
            container = view.get(h.page)
            if container is None:
                logger.debug("Dropping highlight on page %d, page is not rendered", h.page)
                continue
            container.highlights.append(h)
            drawn.append(h)
        return drawn

    def compose(self, container: PageContainer) -> Image.Image:
        """The container's raster with its highlights blended on top."""
        page = container.page
        if page.raster is None:
            base = Image.new("RGBA", (max(int(round(page.width)), 1),
                                      max(int(round(page.height)), 1)), "white")
        else:
            base = page.raster.convert("RGBA")
        if not container.highlights:
            return base

        fill = ImageColor.getrgb(self.theme["highlight"]) + (self.theme["highlight_alpha"],)
        layer = Image.new("RGBA", base.size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(layer)
        for h in container.highlights:
            x0, y0, x1, y1 = h.rect
            draw.rectangle([x0, y0, x1, y1], fill=fill)
        return Image.alpha_composite(base, layer)
