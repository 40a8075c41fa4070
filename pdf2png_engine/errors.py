from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .engine import PageState


class ConversionError(Exception):
    """Base class for every failure raised while converting a document."""

    def __init__(self, message: str):
        super().__init__(message)
        self.page_index: Optional[int] = None
        self.state: Optional["PageState"] = None


class InvalidSizeError(ConversionError):
    """A surface was requested with a non-positive width or height."""


class InvalidSurfaceError(ConversionError):
    """A surface was used after it was destroyed."""


class DecodeError(ConversionError):
    """The input bytes could not be decoded as a PDF document."""


class RenderError(ConversionError):
    """A page could not be rasterized."""


class EncodeError(ConversionError):
    """A surface could not be encoded to PNG."""


class ImageWriteError(ConversionError):
    """An encoded image could not be written to disk."""
