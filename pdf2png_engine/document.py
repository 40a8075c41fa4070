"""
Adapter around PyMuPDF, the document decoder and renderer.

Only the small surface the conversion pipeline needs is exposed: a document
with a page count and 1-based page lookup, and pages that know their viewport
and can draw themselves onto a raster surface.
"""
import logging

import fitz  # PyMuPDF

from .errors import DecodeError, RenderError
from .rasterizer import Viewport
from .surfaces import Surface, SurfaceFactory


class PdfPage:
    def __init__(self, page: fitz.Page, number: int):
        self._page = page
        self.number = number

    @property
    def size(self):
        """Intrinsic page size in PDF points."""
        return self._page.rect.width, self._page.rect.height

    def get_viewport(self, scale: float) -> Viewport:
        # The rounded rectangle is the exact pixmap size MuPDF renders for this matrix.
        irect = (self._page.rect * fitz.Matrix(scale, scale)).irect
        return Viewport(width=irect.width, height=irect.height, scale=scale)

    def render(self, surface: Surface, viewport: Viewport, surface_factory: SurfaceFactory):
        # MuPDF renders into its own pixmap, so the factory is not needed here.
        matrix = fitz.Matrix(viewport.scale, viewport.scale)
        pix = self._page.get_pixmap(matrix=matrix, alpha=False, colorspace=fitz.csRGB)
        if (pix.width, pix.height) != (viewport.width, viewport.height):
            raise RenderError(
                f"Page {self.number} rendered at {pix.width}x{pix.height}, "
                f"expected {viewport.width}x{viewport.height}."
            )
        surface.write_rgb(pix.samples, (0, 0), (pix.width, pix.height))


class PdfDocument:
    def __init__(self, doc: fitz.Document):
        self._doc = doc

    @property
    def page_count(self) -> int:
        return self._doc.page_count

    def get_page(self, index: int) -> PdfPage:
        """Returns page `index`, counting from 1."""
        if not 1 <= index <= self.page_count:
            raise IndexError(f"Page number {index} is out of bounds for PDF with {self.page_count} pages.")
        return PdfPage(self._doc.load_page(index - 1), index)

    def close(self):
        self._doc.close()


def open_document(data: bytes) -> PdfDocument:
    """
    Decodes raw PDF bytes.

    Raises:
        DecodeError: If the bytes are empty, malformed or not a PDF.
    """
    if not data:
        raise DecodeError("Document is empty.")
    try:
        doc = fitz.open(stream=data, filetype="pdf")
    except Exception as e:
        raise DecodeError(f"Failed to decode PDF: {e}") from e
    if doc.needs_pass or doc.page_count == 0:
        reason = "is encrypted and requires a password" if doc.needs_pass else "has no pages"
        doc.close()
        raise DecodeError(f"Document {reason}.")
    logging.info(f"Decoded PDF with {doc.page_count} pages.")
    return PdfDocument(doc)
