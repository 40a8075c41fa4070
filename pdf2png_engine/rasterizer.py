import logging
from dataclasses import dataclass
from typing import Tuple

from .errors import ConversionError, RenderError
from .surfaces import Surface, SurfaceFactory

# Pages are always rendered at twice their intrinsic size.
RENDER_SCALE = 2.0


@dataclass(frozen=True)
class Viewport:
    """Pixel dimensions of a page rendered at `scale`."""
    width: int
    height: int
    scale: float = RENDER_SCALE

    @property
    def half_height(self) -> int:
        # Floor: for an odd height the last row belongs to neither half.
        return self.height // 2


def rasterize(page, scale: float, surface_factory: SurfaceFactory) -> Tuple[Surface, Viewport]:
    """
    Renders a whole page onto a freshly allocated surface.

    Args:
        page: A page handle exposing `get_viewport(scale)` and `render(surface, viewport, surface_factory)`.
        scale: The render scale.
        surface_factory: Provider used for the page surface and handed to the renderer.

    Returns:
        The full-page surface and the viewport it was rendered with. The caller
        owns the surface and must destroy it.

    Raises:
        RenderError: If the renderer fails or reports an unusable viewport.
    """
    try:
        viewport = page.get_viewport(scale)
    except ConversionError:
        raise
    except Exception as e:
        raise RenderError(f"Could not compute viewport at scale {scale}: {e}") from e

    if viewport.width <= 0 or viewport.height <= 0:
        raise RenderError(f"Page has an empty viewport ({viewport.width}x{viewport.height}).")

    logging.debug(f"Rasterizing page at {viewport.width}x{viewport.height} (scale {scale}).")
    surface = surface_factory.create(viewport.width, viewport.height)
    try:
        page.render(surface, viewport, surface_factory)
    except Exception as e:
        surface_factory.destroy(surface)
        if isinstance(e, RenderError):
            raise
        raise RenderError(f"Rendering failed: {e}") from e
    return surface, viewport
