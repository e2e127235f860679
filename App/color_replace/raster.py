"""Conversion between image files, PIL images and raster buffers."""

from pathlib import Path

from PIL import Image

from models import RasterBuffer


def load_raster(file_path: str | Path) -> RasterBuffer:
    """Load an image file as an RGBA raster buffer.

    Args:
        file_path: Path to image file (PNG, JPG, etc.)

    Returns:
        RasterBuffer with the decoded pixels

    Raises:
        ValueError: If file cannot be loaded or is invalid
    """
    try:
        with Image.open(file_path) as image:
            return raster_from_image(image)
    except Exception as e:
        raise ValueError(f"Failed to load image {file_path}: {e}") from e


def raster_from_image(image: Image.Image) -> RasterBuffer:
    # AIDEV-NOTE: Always convert to RGBA for consistent processing
    if image.mode != "RGBA":
        image = image.convert("RGBA")
    width, height = image.size
    return RasterBuffer(width, height, bytearray(image.tobytes()))


def raster_to_image(buffer: RasterBuffer) -> Image.Image:
    """Copy a raster buffer into a new RGBA PIL image."""
    return Image.frombytes("RGBA", (buffer.width, buffer.height), bytes(buffer.data))
