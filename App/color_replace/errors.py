"""Exceptions raised by the color replacement engine."""


class ColorReplaceError(Exception):
    """Base class for color replacer errors."""


class ColorDecodeError(ColorReplaceError, ValueError):
    """A color spec is neither a 6-digit hex color nor the transparent sentinel."""


class InvalidBufferError(ColorReplaceError, ValueError):
    """A pixel buffer does not hold width * height RGBA samples."""


class NothingToExportError(ColorReplaceError):
    """An export was requested without any images."""

    def __init__(self, message: str = "Nothing to export: no images were provided"):
        super().__init__(message)
