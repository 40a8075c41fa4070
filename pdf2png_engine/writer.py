import logging
from pathlib import Path

from .errors import EncodeError, ImageWriteError, InvalidSurfaceError
from .surfaces import Surface


def write_image(surface: Surface, path: Path) -> Path:
    """
    Encodes a surface as PNG and writes it to `path`, replacing any existing file.

    Raises:
        EncodeError: If the surface cannot be encoded.
        ImageWriteError: If the file cannot be written.
    """
    try:
        image_bytes = surface.to_png()
    except InvalidSurfaceError:
        raise
    except Exception as e:
        raise EncodeError(f"Failed to encode PNG for '{path.name}': {e}") from e

    try:
        path.write_bytes(image_bytes)
    except OSError as e:
        raise ImageWriteError(f"Failed to write '{path}': {e}") from e

    logging.info(f"--> Saved output to: {path}")
    return path
