import logging
from typing import Tuple

from .rasterizer import Viewport
from .surfaces import Surface, SurfaceFactory


def split(full: Surface, viewport: Viewport, surface_factory: SurfaceFactory) -> Tuple[Surface, Surface]:
    """
    Cuts a rendered page into a top and a bottom half.

    Both halves are `viewport.width` x `viewport.height // 2`. For an odd
    height the bottom row of the page is dropped so the halves never read
    past the source.

    Returns:
        (top, bottom) surfaces owned by the caller.
    """
    half_height = viewport.half_height
    logging.debug(f"Splitting {viewport.width}x{viewport.height} page into halves of height {half_height}.")

    top = surface_factory.create(viewport.width, half_height)
    try:
        bottom = surface_factory.create(viewport.width, half_height)
    except Exception:
        surface_factory.destroy(top)
        raise

    try:
        top.draw_surface(full, (0, 0, viewport.width, half_height), (0, 0))
        bottom.draw_surface(full, (0, half_height, viewport.width, half_height), (0, 0))
    except Exception:
        surface_factory.destroy(top)
        surface_factory.destroy(bottom)
        raise
    return top, bottom
