import io
from typing import Tuple

from PIL import Image, ImageDraw

from .errors import InvalidSizeError, InvalidSurfaceError

# Every backend stores opaque RGB, three bytes per pixel, rows top to bottom.
BYTES_PER_PIXEL = 3

Box = Tuple[int, int, int, int]


class Surface:
    """
    A pixel buffer (`canvas`) plus the drawing context bound to it.

    Backends subclass this and implement the buffer primitives. A destroyed
    surface has no canvas and zero dimensions; any further use raises
    InvalidSurfaceError.
    """

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self.canvas = None
        self.context = None

    @property
    def destroyed(self) -> bool:
        return self.canvas is None

    def _require_canvas(self):
        if self.canvas is None:
            raise InvalidSurfaceError("Canvas is not specified (surface was destroyed).")

    def _check_region(self, x: int, y: int, width: int, height: int):
        if x < 0 or y < 0 or width < 0 or height < 0 or x + width > self.width or y + height > self.height:
            raise ValueError(
                f"Region ({x}, {y}, {width}, {height}) is outside the {self.width}x{self.height} surface."
            )

    def read_rgb(self, box: Box) -> bytes:
        """Returns the RGB bytes of the region `box` = (x, y, width, height)."""
        raise NotImplementedError

    def write_rgb(self, data: bytes, origin: Tuple[int, int], size: Tuple[int, int]):
        """Writes `size` = (width, height) worth of RGB bytes with their top-left corner at `origin`."""
        raise NotImplementedError

    def draw_surface(self, source: "Surface", box: Box, origin: Tuple[int, int] = (0, 0)):
        """Copies the region `box` of `source` onto this surface at `origin`, unscaled."""
        _, _, width, height = box
        self.write_rgb(source.read_rgb(box), origin, (width, height))

    def to_png(self) -> bytes:
        raise NotImplementedError

    def _resize(self, width: int, height: int):
        raise NotImplementedError

    def _release(self):
        raise NotImplementedError


class SurfaceFactory:
    """
    Allocates, resizes and releases raster surfaces.

    Subclasses only provide `_allocate`; argument and lifecycle checks live here
    so that every backend rejects misuse in the same way.
    """

    def create(self, width: int, height: int) -> Surface:
        _check_size(width, height)
        return self._allocate(width, height)

    def reset(self, surface: Surface, width: int, height: int):
        surface._require_canvas()
        _check_size(width, height)
        surface._resize(width, height)
        surface.width = width
        surface.height = height

    def destroy(self, surface: Surface):
        surface._require_canvas()
        surface._release()
        # The buffer is already released; drop every reference to it.
        surface.width = 0
        surface.height = 0
        surface.canvas = None
        surface.context = None

    def _allocate(self, width: int, height: int) -> Surface:
        raise NotImplementedError


def _check_size(width: int, height: int):
    if width <= 0 or height <= 0:
        raise InvalidSizeError(f"Invalid canvas size: {width}x{height}")


# --- Pillow backend ---

class PillowSurface(Surface):
    def __init__(self, width: int, height: int):
        super().__init__(width, height)
        self.canvas = Image.new("RGB", (width, height), "white")
        self.context = ImageDraw.Draw(self.canvas)

    def read_rgb(self, box: Box) -> bytes:
        self._require_canvas()
        x, y, width, height = box
        self._check_region(x, y, width, height)
        return self.canvas.crop((x, y, x + width, y + height)).tobytes()

    def write_rgb(self, data: bytes, origin: Tuple[int, int], size: Tuple[int, int]):
        self._require_canvas()
        self._check_region(origin[0], origin[1], size[0], size[1])
        self.canvas.paste(Image.frombytes("RGB", size, bytes(data)), origin)

    def draw_surface(self, source: Surface, box: Box, origin: Tuple[int, int] = (0, 0)):
        if not isinstance(source, PillowSurface):
            return super().draw_surface(source, box, origin)
        self._require_canvas()
        source._require_canvas()
        x, y, width, height = box
        source._check_region(x, y, width, height)
        self._check_region(origin[0], origin[1], width, height)
        self.canvas.paste(source.canvas.crop((x, y, x + width, y + height)), origin)

    def to_png(self) -> bytes:
        self._require_canvas()
        buffer = io.BytesIO()
        self.canvas.save(buffer, format="PNG")
        return buffer.getvalue()

    def _resize(self, width: int, height: int):
        self.canvas.close()
        self.canvas = Image.new("RGB", (width, height), "white")
        self.context = ImageDraw.Draw(self.canvas)

    def _release(self):
        self.canvas.close()


class PillowSurfaceFactory(SurfaceFactory):
    """Production backend: Pillow images with an ImageDraw context."""

    def _allocate(self, width: int, height: int) -> Surface:
        return PillowSurface(width, height)


# --- In-memory backend ---

class MemorySurface(Surface):
    """A bare bytearray pixel buffer; the context is a memoryview over it."""

    def __init__(self, width: int, height: int):
        super().__init__(width, height)
        self.canvas = bytearray(width * height * BYTES_PER_PIXEL)
        self.context = memoryview(self.canvas)

    def read_rgb(self, box: Box) -> bytes:
        self._require_canvas()
        x, y, width, height = box
        self._check_region(x, y, width, height)
        stride = self.width * BYTES_PER_PIXEL
        row_bytes = width * BYTES_PER_PIXEL
        rows = []
        for row in range(y, y + height):
            start = row * stride + x * BYTES_PER_PIXEL
            rows.append(bytes(self.context[start:start + row_bytes]))
        return b"".join(rows)

    def write_rgb(self, data: bytes, origin: Tuple[int, int], size: Tuple[int, int]):
        self._require_canvas()
        x, y = origin
        width, height = size
        self._check_region(x, y, width, height)
        row_bytes = width * BYTES_PER_PIXEL
        if len(data) != row_bytes * height:
            raise ValueError(f"Expected {row_bytes * height} bytes of RGB data, got {len(data)}.")
        stride = self.width * BYTES_PER_PIXEL
        for row in range(height):
            start = (y + row) * stride + x * BYTES_PER_PIXEL
            self.context[start:start + row_bytes] = data[row * row_bytes:(row + 1) * row_bytes]

    def to_png(self) -> bytes:
        self._require_canvas()
        image = Image.frombytes("RGB", (self.width, self.height), bytes(self.canvas))
        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        return buffer.getvalue()

    def _resize(self, width: int, height: int):
        # The view must be released before the bytearray may change size.
        self.context.release()
        self.canvas[:] = bytes(width * height * BYTES_PER_PIXEL)
        self.context = memoryview(self.canvas)

    def _release(self):
        self.context.release()
        self.canvas.clear()


class MemorySurfaceFactory(SurfaceFactory):
    """Dependency-free backend, used to exercise the pipeline without a renderer."""

    def _allocate(self, width: int, height: int) -> Surface:
        return MemorySurface(width, height)
