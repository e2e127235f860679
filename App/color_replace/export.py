"""Encoding of processed buffers for download: one PNG, or a ZIP of PNGs."""

import io
import logging
import zipfile
from pathlib import Path, PurePath
from typing import Optional, Sequence, Tuple

from models import DEFAULT_ARCHIVE_NAME, ExportedFile, RasterBuffer

from .errors import InvalidBufferError, NothingToExportError
from .raster import raster_to_image

logger = logging.getLogger(__name__)

ExportEntry = Tuple[Optional[str], RasterBuffer]


def encode_png(buffer: RasterBuffer) -> bytes:
    """Encode a raster buffer as PNG bytes."""
    if not buffer.is_well_formed():
        raise InvalidBufferError(
            f"Cannot encode {buffer.width}x{buffer.height} image "
            f"from {len(buffer.data)} bytes"
        )
    output = io.BytesIO()
    raster_to_image(buffer).save(output, format="PNG")
    return output.getvalue()


def png_file_name(name: str | None, index: int) -> str:
    """Name for the index-th (1-based) exported image.

    The original file name is kept with its extension switched to .png,
    since the encoded bytes are always PNG.
    """
    if not name:
        return f"{index}.png"
    return PurePath(name).with_suffix(".png").name


def _unique(name: str, used: "set[str]") -> str:
    if name not in used:
        return name
    stem, suffix = PurePath(name).stem, PurePath(name).suffix
    counter = 2
    while f"{stem}-{counter}{suffix}" in used:
        counter += 1
    return f"{stem}-{counter}{suffix}"


def export_images(
    entries: Sequence[ExportEntry],
    archive_name: str = DEFAULT_ARCHIVE_NAME,
) -> ExportedFile:
    """Encode processed images for export.

    Args:
        entries: (original file name or None, buffer) pairs in output order
        archive_name: File name used when several images are packaged

    Returns:
        A single PNG for one entry, otherwise a ZIP with one PNG per entry

    Raises:
        NothingToExportError: If ``entries`` is empty
    """
    if not entries:
        raise NothingToExportError()

    if len(entries) == 1:
        name, buffer = entries[0]
        return ExportedFile(png_file_name(name, 1), encode_png(buffer), "image/png")

    archive = io.BytesIO()
    used: "set[str]" = set()
    with zipfile.ZipFile(archive, "w", zipfile.ZIP_DEFLATED) as zf:
        for index, (name, buffer) in enumerate(entries, start=1):
            entry_name = _unique(png_file_name(name, index), used)
            used.add(entry_name)
            zf.writestr(entry_name, encode_png(buffer))

    logger.info("Packaged %d images into %s", len(entries), archive_name)
    return ExportedFile(archive_name, archive.getvalue(), "application/zip")


def save_export(exported: ExportedFile, directory: str | Path = ".") -> Path:
    """Write an export to ``directory`` and return the file path."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / exported.file_name
    path.write_bytes(exported.data)
    return path
