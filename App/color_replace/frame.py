"""In-place color replacement over a whole frame.

AIDEV-NOTE: Each rule is applied as one vectorized pass over the pixels no
earlier rule has claimed. Distances are always taken against the original
pixel values, so the result is identical to evaluating every pixel on its
own with first-match-wins.
"""

from typing import Iterable

import numpy as np

from models import RasterBuffer, ReplacementRule

from .distance import distance_map
from .errors import InvalidBufferError
from .matcher import CompiledRule, compile_rules


def transform(
    buffer: RasterBuffer,
    rules: Iterable[ReplacementRule],
    chunk_rows: int | None = None,
) -> RasterBuffer:
    """Apply replacement rules to every pixel of ``buffer`` in place.

    Args:
        buffer: Frame to modify; callers that need the original must copy it
        rules: Rules in evaluation order
        chunk_rows: Process this many rows at a time to bound temporary
            memory on large frames. Does not change the result.

    Returns:
        The same buffer, for chaining

    Raises:
        InvalidBufferError: If the buffer length is not width * height * 4
    """
    if not buffer.is_well_formed():
        raise InvalidBufferError(
            f"Buffer holds {len(buffer.data)} bytes, expected "
            f"{buffer.expected_length} for {buffer.width}x{buffer.height} RGBA"
        )

    compiled = compile_rules(rules)
    if not compiled or buffer.expected_length == 0:
        return buffer

    pixels = buffer.pixels()
    step = chunk_rows if chunk_rows and chunk_rows > 0 else buffer.height
    for start in range(0, buffer.height, step):
        # Row slices of a C-contiguous array reshape to views
        block = pixels[start : start + step].reshape(-1, 4)
        replace_pixels(block, compiled)

    return buffer


def replace_pixels(pixels: np.ndarray, rules: "list[CompiledRule]") -> None:
    """Apply compiled rules to an (N, 4) uint8 array in place."""
    pending = np.ones(len(pixels), dtype=bool)

    for rule in rules:
        candidates = np.flatnonzero(pending)
        if candidates.size == 0:
            break

        distances = distance_map(pixels[candidates], rule.source)
        hits = candidates[distances <= rule.threshold]
        if hits.size == 0:
            continue

        pixels[hits, :3] = rule.target[:3]
        if rule.writes_alpha:
            pixels[hits, 3] = rule.target[3]
        pending[hits] = False
