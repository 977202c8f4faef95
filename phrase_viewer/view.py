# view.py
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from phrase_viewer.config import (
    DEFAULT_CONTAINER_WIDTH, DEFAULT_VIEWPORT_HEIGHT, PAGE_SPACING, PAGE_TOP_OFFSET
)
from phrase_viewer.models import Highlight, RenderedPage


@dataclass
class PageContainer:
    """A page's node in the scroll region: its rendered content and overlays."""

    page: RenderedPage
    top: float
    highlights: List[Highlight] = field(default_factory=list)

    @property
    def number(self) -> int:
        return self.page.number

    @property
    def bottom(self) -> float:
        return self.top + self.page.height


class DocumentView:
    """
    The scrollable viewport holding one container per rendered page.

    Containers are stacked vertically in page order, ``PAGE_SPACING`` apart,
    and addressed by page number; nothing is looked up by walking the tree.
    """
    def __init__(self, container_width: float = DEFAULT_CONTAINER_WIDTH,
                 viewport_height: float = DEFAULT_VIEWPORT_HEIGHT,
                 spacing: float = PAGE_SPACING, top_offset: float = PAGE_TOP_OFFSET):
        self.container_width = container_width
        self.viewport_height = viewport_height
        self.spacing = spacing
        self.top_offset = top_offset
        self.containers: Dict[int, PageContainer] = {}
        self.scroll_top = 0.0

    def __contains__(self, page_number: int) -> bool:
        return page_number in self.containers

    def __len__(self) -> int:
        return len(self.containers)

    def get(self, page_number: int) -> Optional[PageContainer]:
        return self.containers.get(page_number)

    def page_numbers(self) -> List[int]:
        return sorted(self.containers)

    def pages(self) -> List[RenderedPage]:
        return [self.containers[n].page for n in self.page_numbers()]

    def clear(self):
        self.containers.clear()
        self.scroll_top = 0.0

    def mount(self, page: RenderedPage) -> PageContainer:
        """
        Inserts the page's container, replacing any previous content for the
        same page number, and re-stacks the containers.
        """
        self.containers.pop(page.number, None)
        container = PageContainer(page=page, top=0.0)
        self.containers[page.number] = container
        self._relayout()
        return container

    def _relayout(self):
        y_pos = self.top_offset
        for number in self.page_numbers():
            container = self.containers[number]
            container.top = y_pos
            y_pos += container.page.height + self.spacing

    @property
    def total_height(self) -> float:
        if not self.containers:
            return 0.0
        last = self.containers[self.page_numbers()[-1]]
        return last.bottom + self.spacing

    def _clamp_scroll(self, y: float) -> float:
        max_scroll = max(self.total_height - self.viewport_height, 0.0)
        return min(max(y, 0.0), max_scroll)

    def scroll_to_page(self, page_number: int, block: str = "start") -> bool:
        """
        Scrolls so the page's container is aligned to the top of the viewport
        (``block="start"``) or centred in it (``block="center"``). Returns
        False if the page has no container.
        """
        container = self.containers.get(page_number)
        if container is None:
            return False
        if block == "center":
            y = container.top + container.page.height / 2 - self.viewport_height / 2
        elif block == "start":
            y = container.top
        else:
            raise ValueError(f"Unknown scroll alignment {block!r}")
        self.scroll_top = self._clamp_scroll(y)
        return True

    def visible_pages(self) -> List[int]:
        y0, y1 = self.scroll_top, self.scroll_top + self.viewport_height
        return [n for n in self.page_numbers()
                if self.containers[n].bottom >= y0 and self.containers[n].top <= y1]

    def current_page(self) -> Optional[int]:
        """The page under the centre of the viewport."""
        y_center = self.scroll_top + self.viewport_height / 2
        current = None
        for number in self.page_numbers():
            if y_center >= self.containers[number].top:
                current = number
            else:
                break
        return current
