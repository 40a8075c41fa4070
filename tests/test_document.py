import pytest

from pdf2png_engine.document import open_document
from pdf2png_engine.errors import DecodeError
from pdf2png_engine.rasterizer import RENDER_SCALE, Viewport, rasterize
from pdf2png_engine.surfaces import MemorySurfaceFactory, PillowSurfaceFactory


def test_open_document_exposes_pages(pdf_bytes):
    document = open_document(pdf_bytes)
    try:
        assert document.page_count == 2
        assert document.get_page(1).size == (100, 80)
        assert document.get_page(2).number == 2
        with pytest.raises(IndexError):
            document.get_page(0)
        with pytest.raises(IndexError):
            document.get_page(3)
    finally:
        document.close()


def test_viewport_is_scaled_page_size(pdf_bytes):
    document = open_document(pdf_bytes)
    try:
        assert document.get_page(1).get_viewport(RENDER_SCALE) == Viewport(200, 160, 2.0)
        assert document.get_page(2).get_viewport(RENDER_SCALE) == Viewport(200, 101, 2.0)
    finally:
        document.close()


@pytest.mark.parametrize("factory_cls", [MemorySurfaceFactory, PillowSurfaceFactory])
def test_render_fills_surface(pdf_bytes, factory_cls):
    document = open_document(pdf_bytes)
    try:
        surface, viewport = rasterize(document.get_page(1), RENDER_SCALE, factory_cls())
    finally:
        document.close()

    assert (surface.width, surface.height) == (200, 160)
    # Inside the red rectangle drawn at (10, 10)-(90, 30) points.
    assert surface.read_rgb((100, 40, 1, 1)) == bytes((255, 0, 0))
    # Blank page background.
    assert surface.read_rgb((2, 150, 1, 1)) == bytes((255, 255, 255))


@pytest.mark.parametrize("data", [b"", b"not a pdf at all"])
def test_malformed_input_is_a_decode_error(data):
    with pytest.raises(DecodeError):
        open_document(data)
