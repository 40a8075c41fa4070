from pathlib import Path

import fitz
import pytest

from pdf2png_engine.rasterizer import Viewport
from pdf2png_engine.surfaces import MemorySurfaceFactory
from pdf2png_engine.writer import write_image


def pattern_pixels(width, height, seed=0):
    """Deterministic RGB bytes where every row differs from its neighbours."""
    data = bytearray()
    for y in range(height):
        for x in range(width):
            data += bytes(((x + seed) % 256, (y * 7 + seed) % 256, (x * y + seed) % 256))
    return bytes(data)


class FakePage:
    def __init__(self, number, width=6, height=10, fail=False):
        self.number = number
        self.width = width
        self.height = height
        self.fail = fail

    def get_viewport(self, scale):
        return Viewport(self.width, self.height, scale)

    def render(self, surface, viewport, surface_factory):
        if self.fail:
            raise RuntimeError(f"cannot render page {self.number}")
        surface.write_rgb(pattern_pixels(viewport.width, viewport.height, self.number), (0, 0),
                          (viewport.width, viewport.height))


class FakeDocument:
    def __init__(self, pages):
        self.pages = pages
        self.closed = False
        self.requested = []

    @property
    def page_count(self):
        return len(self.pages)

    def get_page(self, index):
        self.requested.append(index)
        return self.pages[index - 1]

    def close(self):
        self.closed = True


class TrackingFactory(MemorySurfaceFactory):
    """Memory backend that remembers every surface it handed out."""

    def __init__(self):
        self.created = []

    def create(self, width, height):
        surface = super().create(width, height)
        self.created.append(surface)
        return surface


class RecordingWriter:
    def __init__(self, fail_on=None):
        self.names = []
        self.fail_on = fail_on

    def __call__(self, surface, path):
        if path.name == self.fail_on:
            raise OSError(f"disk full while writing {path.name}")
        self.names.append(path.name)
        return write_image(surface, path)


@pytest.fixture
def make_document():
    def _make(page_count=3, fail_page=None, width=6, height=10):
        pages = [FakePage(i, width, height, fail=(i == fail_page)) for i in range(1, page_count + 1)]
        return FakeDocument(pages)
    return _make


@pytest.fixture
def factory():
    return TrackingFactory()


@pytest.fixture
def pdf_bytes():
    """A real two-page PDF; the second page is 50.5pt tall so it renders to an odd height."""
    doc = fitz.open()
    page = doc.new_page(width=100, height=80)
    page.draw_rect(fitz.Rect(10, 10, 90, 30), color=(1, 0, 0), fill=(1, 0, 0))
    page.insert_text((10, 60), "top and bottom", fontsize=8)
    page = doc.new_page(width=100, height=50.5)
    page.draw_rect(fitz.Rect(0, 30, 100, 50.5), color=(0, 0, 1), fill=(0, 0, 1))
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def pdf_file(tmp_path, pdf_bytes) -> Path:
    path = tmp_path / "input.pdf"
    path.write_bytes(pdf_bytes)
    return path
