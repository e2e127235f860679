"""Parsing of user color specs into RGBA samples."""

import re
from functools import lru_cache

from models import TRANSPARENT

from .errors import ColorDecodeError

_HEX_PATTERN = re.compile(r"#?([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})", re.IGNORECASE)

TRANSPARENT_RGBA = (0, 0, 0, 0)


@lru_cache(maxsize=256)
def decode_color(spec: str | None) -> "tuple[int, int, int, int]":
    """Decode a color spec into an (r, g, b, a) tuple.

    Args:
        spec: ``"#RRGGBB"``/``"RRGGBB"`` (any case) or the transparent sentinel.
            ``None`` and ``""`` are treated like the sentinel.

    Returns:
        Opaque colors come back with alpha 255, the sentinel as (0, 0, 0, 0)

    Raises:
        ColorDecodeError: If the color spec cannot be parsed
    """
    if not spec or spec == TRANSPARENT:
        return TRANSPARENT_RGBA

    if not isinstance(spec, str):
        raise ColorDecodeError(f"Invalid color spec: {spec!r}")

    match = _HEX_PATTERN.fullmatch(spec)
    if match is None:
        raise ColorDecodeError(f"Invalid color spec: {spec!r}")

    r, g, b = (int(pair, 16) for pair in match.groups())
    return (r, g, b, 255)


def is_valid_color(spec: str | None) -> bool:
    """Check whether a color spec decodes."""
    try:
        decode_color(spec)
    except ColorDecodeError:
        return False
    return True


def encode_color(rgba: "tuple[int, ...]") -> str:
    """Format an RGB(A) tuple as ``#RRGGBB``, or the sentinel when alpha is 0."""
    if len(rgba) == 4 and rgba[3] == 0:
        return TRANSPARENT
    r, g, b = rgba[:3]
    return f"#{r:02X}{g:02X}{b:02X}"
