"""Perceptual distance between RGBA samples.

AIDEV-NOTE: This is the "redmean" weighted Euclidean approximation, not a
CIE metric. Rule tolerances were tuned against it, so the 765 divisor is
kept as-is even though extreme pairs can land slightly above 1.0. The
scalar and vectorized forms use the same operation order so they agree
bit for bit.
"""

import math

import numpy as np

# Normalizes the weighted distance to roughly 0-1
DISTANCE_SCALE = 765


def color_distance(
    a: "tuple[int, int, int, int]", b: "tuple[int, int, int, int]"
) -> float:
    """Normalized distance between two RGBA samples.

    If either sample is fully transparent only the alpha channels are
    compared, so fully transparent vs. fully opaque is 1.0.
    """
    r1, g1, b1, a1 = (int(c) for c in a)
    r2, g2, b2, a2 = (int(c) for c in b)

    if a1 == 0 or a2 == 0:
        return abs(a1 - a2) / 255

    r_mean = (r1 + r2) / 2
    delta_r = r1 - r2
    delta_g = g1 - g2
    delta_b = b1 - b2

    distance = math.sqrt(
        (2 + r_mean / 256) * delta_r * delta_r
        + 4 * delta_g * delta_g
        + (2 + (255 - r_mean) / 256) * delta_b * delta_b
    )
    return distance / DISTANCE_SCALE


def distance_map(
    pixels: np.ndarray, source: "tuple[int, int, int, int]"
) -> np.ndarray:
    """Vectorized ``color_distance`` of every pixel against one sample.

    Args:
        pixels: Array of shape (N, 4), uint8 RGBA
        source: RGBA sample to compare against

    Returns:
        float64 array of shape (N,)
    """
    channels = pixels.astype(np.float64)
    r1, g1, b1, a1 = (channels[:, i] for i in range(4))
    r2, g2, b2, a2 = (float(c) for c in source)

    alpha_distance = np.abs(a1 - a2) / 255
    if a2 == 0:
        return alpha_distance

    r_mean = (r1 + r2) / 2
    delta_r = r1 - r2
    delta_g = g1 - g2
    delta_b = b1 - b2

    distance = np.sqrt(
        (2 + r_mean / 256) * delta_r * delta_r
        + 4 * delta_g * delta_g
        + (2 + (255 - r_mean) / 256) * delta_b * delta_b
    )
    weighted = distance / DISTANCE_SCALE

    return np.where(a1 == 0, alpha_distance, weighted)
