import enum
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from tqdm import tqdm

from .document import open_document
from .errors import ConversionError
from .file_utils import _get_output_path, ensure_dir, group_output_dir, write_manifest, zip_directory, ARCHIVE_SUFFIX
from .rasterizer import RENDER_SCALE, rasterize
from .splitter import split
from .surfaces import PillowSurfaceFactory, SurfaceFactory
from .writer import write_image

ImageWriter = Callable[..., Path]


class PageState(enum.Enum):
    FETCHING = "fetching"
    RASTERIZING = "rasterizing"
    SPLITTING = "splitting"
    WRITING_TOP = "writing top"
    WRITING_BOTTOM = "writing bottom"
    DONE = "done"
    FAILED = "failed"


@dataclass
class ConversionResult:
    page_count: int
    written: List[Path] = field(default_factory=list)


def convert_page(document, page_index: int, output_dir: Path, surface_factory: SurfaceFactory,
                 writer: ImageWriter = write_image) -> List[Path]:
    """
    Runs the pipeline for a single page: fetch, rasterize, split, then write
    the top half and, only once that has succeeded, the bottom half.

    All surfaces created for the page are destroyed before returning, whether
    the page succeeded or not.

    Returns:
        The two written paths, top half first.

    Raises:
        The first error hit; ConversionErrors carry the page index and the
        state the page was in.
    """
    state = PageState.FETCHING
    surfaces = []
    written = []

    def advance(next_state: PageState):
        nonlocal state
        logging.debug(f"Page {page_index}: {state.value} -> {next_state.value}")
        state = next_state

    try:
        page = document.get_page(page_index)

        advance(PageState.RASTERIZING)
        full, viewport = rasterize(page, RENDER_SCALE, surface_factory)
        surfaces.append(full)

        advance(PageState.SPLITTING)
        top, bottom = split(full, viewport, surface_factory)
        surfaces.extend([top, bottom])

        advance(PageState.WRITING_TOP)
        written.append(writer(top, _get_output_path(output_dir, page_index, "a")))

        advance(PageState.WRITING_BOTTOM)
        written.append(writer(bottom, _get_output_path(output_dir, page_index, "b")))

        advance(PageState.DONE)
        return written
    except Exception as e:
        logging.error(f"Page {page_index} failed while {state.value}: {e}")
        if isinstance(e, ConversionError):
            e.page_index = page_index
            e.state = state
        advance(PageState.FAILED)
        raise
    finally:
        for surface in surfaces:
            surface_factory.destroy(surface)


def convert_document(document_bytes: bytes, output_dir: Path,
                     surface_factory: Optional[SurfaceFactory] = None,
                     decoder: Callable[[bytes], Any] = open_document,
                     writer: ImageWriter = write_image,
                     progress: bool = False) -> ConversionResult:
    """
    Converts every page of a document into `<i>_a.png` / `<i>_b.png` pairs.

    Pages are processed one at a time in order; a page is finished (both
    halves on disk) before the next one is fetched. The first failure stops
    the run: earlier pages stay on disk, later pages are not attempted.

    Args:
        document_bytes: Raw PDF bytes.
        output_dir: Directory for the images, created if missing.
        surface_factory: Raster backend, Pillow by default.
        decoder: Turns bytes into a document with `page_count` and `get_page(i)`.
        writer: Persists one surface to one path.
        progress: Show a tqdm progress bar over the pages.

    Returns:
        A ConversionResult listing the written files in write order.
    """
    surface_factory = surface_factory or PillowSurfaceFactory()
    ensure_dir(output_dir)
    logging.info(f"Output directory is '{output_dir}'.")

    document = decoder(document_bytes)
    result = ConversionResult(page_count=document.page_count)
    try:
        for page_index in tqdm(range(1, document.page_count + 1), desc="Converting pages", disable=not progress):
            logging.info(f"Converting page {page_index}")
            result.written.extend(convert_page(document, page_index, output_dir, surface_factory, writer))
    finally:
        close = getattr(document, "close", None)
        if close is not None:
            close()
    return result


def run_conversion(name: str, pdf_path: Path, config: Dict[str, Any]) -> ConversionResult:
    """
    Converts `pdf_path` into the group directory for `name` and runs the
    optional manifest and archive steps when every page succeeded.
    """
    if not pdf_path.exists():
        raise FileNotFoundError(f"Source PDF not found: {pdf_path}")

    package_dir, group_dir = group_output_dir(name, Path(config["output_root"]))
    document_bytes = pdf_path.read_bytes()
    logging.info(f"Read {len(document_bytes)} bytes from '{pdf_path}'.")

    result = convert_document(document_bytes, group_dir, progress=config.get("progress", False))
    logging.info(f"Converted {result.page_count} pages into {len(result.written)} images.")

    if config.get("manifest"):
        write_manifest(group_dir, result.page_count)
    if config.get("archive"):
        zip_directory(package_dir, package_dir.parent / f"{package_dir.name}{ARCHIVE_SUFFIX}")
    return result
