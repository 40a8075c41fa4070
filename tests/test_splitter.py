import pytest

from pdf2png_engine.rasterizer import Viewport
from pdf2png_engine.splitter import split
from pdf2png_engine.surfaces import MemorySurfaceFactory, PillowSurfaceFactory

from conftest import pattern_pixels


def _full_page(factory, width, height):
    full = factory.create(width, height)
    full.write_rgb(pattern_pixels(width, height), (0, 0), (width, height))
    return full


@pytest.mark.parametrize("factory_cls", [MemorySurfaceFactory, PillowSurfaceFactory])
@pytest.mark.parametrize("height", [2, 10, 11, 101])
def test_halves_stack_to_leading_rows_of_source(factory_cls, height):
    factory = factory_cls()
    width = 9
    full = _full_page(factory, width, height)

    top, bottom = split(full, Viewport(width, height), factory)

    half = height // 2
    assert (top.width, top.height) == (width, half)
    assert (bottom.width, bottom.height) == (width, half)
    stacked = top.read_rgb((0, 0, width, half)) + bottom.read_rgb((0, 0, width, half))
    assert stacked == full.read_rgb((0, 0, width, 2 * half))


def test_odd_height_drops_last_row():
    factory = MemorySurfaceFactory()
    full = _full_page(factory, 4, 101)

    top, bottom = split(full, Viewport(4, 101), factory)

    assert top.height == bottom.height == 50
    assert bottom.read_rgb((0, 49, 4, 1)) == full.read_rgb((0, 99, 4, 1))


def test_source_is_left_untouched():
    factory = MemorySurfaceFactory()
    full = _full_page(factory, 3, 6)
    before = full.read_rgb((0, 0, 3, 6))

    split(full, Viewport(3, 6), factory)

    assert full.read_rgb((0, 0, 3, 6)) == before
