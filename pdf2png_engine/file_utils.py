import logging
import os
import zipfile
from pathlib import Path
from typing import Tuple

# Output lives under <root>/<sanitized name>/Archive/Groups/<name>/.
GROUPS_SUBDIR = Path("Archive") / "Groups"
MANIFEST_NAME = "Data.csv"
MANIFEST_HEADER = "1 Text, 1 Image, 2 Text, 2 Image"
ARCHIVE_SUFFIX = ".studyarch"


def sanitize_name(name: str) -> str:
    """Replaces path separators so `name` can be used as a single directory name."""
    sanitized = name.replace("/", "_")
    if os.sep != "/":
        sanitized = sanitized.replace(os.sep, "_")
    return sanitized


def group_output_dir(name: str, output_root: Path) -> Tuple[Path, Path]:
    """
    Returns (package_dir, group_dir) for a run named `name`.

    The package directory is what gets archived; page images are written to
    the group directory. `name` is kept below Groups/ with its separators, so
    a name with a separator produces nested directories there. Leading and
    repeated separators are dropped so the group directory always stays
    inside the package directory.

    Raises:
        ValueError: If `name` is empty or contains a '..' component.
    """
    parts = [part for part in name.replace(os.sep, "/").split("/") if part]
    if not parts:
        raise ValueError(f"Invalid stack name: {name!r}")
    if ".." in parts:
        raise ValueError(f"Stack name must not contain '..' components: {name!r}")
    package_dir = output_root / sanitize_name(name)
    return package_dir, package_dir.joinpath(GROUPS_SUBDIR, *parts)


def ensure_dir(path: Path) -> Path:
    """Creates `path` and any missing parents. An existing directory is not an error."""
    path.mkdir(parents=True, exist_ok=True)
    return path


def _get_output_path(output_dir: Path, page_index: int, half: str) -> Path:
    """Path of one half of a page: `<page_index>_a.png` (top) or `<page_index>_b.png` (bottom)."""
    if half not in ("a", "b"):
        raise ValueError(f"Unknown page half: {half!r}")
    return output_dir / f"{page_index}_{half}.png"


def write_manifest(group_dir: Path, page_count: int) -> Path:
    """Writes Data.csv listing the two images of every page, one row per page."""
    manifest_path = group_dir / MANIFEST_NAME
    lines = [MANIFEST_HEADER]
    for page_index in range(1, page_count + 1):
        lines.append(f",{page_index}_a.png,,{page_index}_b.png")
    manifest_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    logging.info(f"--> Saved manifest to: {manifest_path}")
    return manifest_path


def zip_directory(source: Path, out: Path) -> Path:
    """
    Zips the contents of `source` into `out` at maximum compression.

    Archive member names are relative to `source`; the directory itself is not
    a member.
    """
    logging.info(f"Archiving '{source}' into '{out.name}'.")
    files = sorted(path for path in source.rglob("*") if path.is_file())
    with zipfile.ZipFile(out, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=9) as archive:
        for file_path in files:
            archive.write(file_path, file_path.relative_to(source).as_posix())
    logging.info(f"--> Saved archive with {len(files)} files to: {out}")
    return out
