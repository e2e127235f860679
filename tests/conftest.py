import pytest
from PyQt6.QtCore import QCoreApplication

from models import RasterBuffer


@pytest.fixture(scope="session")
def qapp():
    """A QCoreApplication so worker signals can be delivered."""
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture
def make_raster():
    """Build a RasterBuffer from RGBA tuples, one row unless width is given."""

    def _make(pixels, width=None):
        width = width or len(pixels)
        height = len(pixels) // width
        data = bytearray()
        for pixel in pixels:
            data.extend(pixel)
        return RasterBuffer(width, height, data)

    return _make


def pixels_of(buffer):
    """RGBA tuples of a buffer in row-major order."""
    data = buffer.data
    return [tuple(data[i : i + 4]) for i in range(0, len(data), 4)]


@pytest.fixture
def read_pixels():
    return pixels_of
