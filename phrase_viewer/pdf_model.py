# pdf_model.py
import os
from typing import List, Optional, Union

import fitz  # PyMuPDF
from PIL import Image

from phrase_viewer.errors import DocumentLoadFailure
from phrase_viewer.logger import logger
from phrase_viewer.models import GlyphRun, Page


class PDFModel:
    """
    The Model class responsible for handling the PDF document.
    It encapsulates all interactions with the PyMuPDF (fitz) library and
    exposes pages with 1-based numbers.

    Any object with the same ``page_count``, ``get_page``, ``render_raster``,
    ``get_text_content`` and ``close`` members can stand in for it.
    """
    def __init__(self, source: Union[str, os.PathLike, bytes]):
        self.filepath = None if isinstance(source, (bytes, bytearray)) else os.fspath(source)
        try:
            if self.filepath is None:
                self.doc: Optional[fitz.Document] = fitz.open(stream=bytes(source), filetype="pdf")
            else:
                self.doc = fitz.open(self.filepath)
        except Exception as e:
            raise DocumentLoadFailure(self.filepath or "<bytes>", e) from e
        if not self.doc.is_pdf or self.doc.page_count == 0:
            self.doc.close()
            raise DocumentLoadFailure(self.filepath or "<bytes>", "not a PDF document with pages")
        self.page_count = self.doc.page_count
        logger.info("Opened %s with %d pages", self.filepath or "<bytes>", self.page_count)

    def _load_page(self, page_number: int) -> fitz.Page:
        if not self.doc or not 1 <= page_number <= self.page_count:
            raise IndexError(f"Page {page_number} out of range 1..{self.page_count}")
        return self.doc.load_page(page_number - 1)

    def get_page(self, page_number: int) -> Page:
        """Returns the page with its dimensions at scale 1.0."""
        rect = self._load_page(page_number).rect
        return Page(number=page_number, width=rect.width, height=rect.height)

    def render_raster(self, page_number: int, scale: float) -> Image.Image:
        page = self._load_page(page_number)
        pix = page.get_pixmap(matrix=fitz.Matrix(scale, scale), alpha=False)
        return Image.frombytes("RGB", (pix.width, pix.height), pix.samples)

    def get_text_content(self, page_number: int) -> List[GlyphRun]:
        """
        Returns the page's text spans in reading order as glyph runs.

        PyMuPDF reports spans top-down and in unrotated page coordinates.
        Origins and directions are mapped through the page rotation so they
        line up with the raster, then converted to the PDF bottom-up
        convention so each run carries a regular text matrix
        ``(size*cos, size*sin, -size*sin, size*cos, x, y)``.
        """
        page = self._load_page(page_number)
        rect = page.rect
        rot = page.rotation_matrix
        # rotation without translation, for direction vectors
        turn = fitz.Matrix(rot.a, rot.b, rot.c, rot.d, 0, 0)
        runs = []
        for block in page.get_text("dict")["blocks"]:
            if block.get("type", 0) != 0:
                continue
            for line in block["lines"]:
                dx, dy = line["dir"]
                direction = fitz.Point(dx, dy) * turn
                # flip the direction vector along with the y axis
                cos, sin = direction.x, -direction.y
                for span in line["spans"]:
                    if not span["text"]:
                        continue
                    size = span["size"]
                    origin = fitz.Point(span["origin"]) * rot
                    x0, y0, x1, y1 = span["bbox"]
                    runs.append(GlyphRun(
                        text=span["text"],
                        transform=(size * cos, size * sin, -size * sin, size * cos,
                                   origin.x - rect.x0, rect.height - (origin.y - rect.y0)),
                        # extent along the unrotated baseline direction
                        width=abs((x1 - x0) * dx) + abs((y1 - y0) * dy),
                    ))
        return runs

    def close(self):
        """Closes the PDF document."""
        if self.doc:
            self.doc.close()
            self.doc = None
