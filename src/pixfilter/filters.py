"""Pixel transforms over a PixelGrid.

Every filter reads only from its input grid and returns a new one, so
neighbour lookups always see original values regardless of traversal order.
"""

import logging
from collections.abc import Callable

import numpy as np

from pixfilter.model import PixelGrid

logger = logging.getLogger(__name__)

CHANNEL_MIN = 0
CHANNEL_MAX = 255
EMBOSS_BASE = 128


class UnknownFilterError(KeyError):
    pass


def clamp(values):
    """Constrain a scalar or array to the channel range [0, 255]."""
    return np.clip(values, CHANNEL_MIN, CHANNEL_MAX)


def _with_pixels(grid: PixelGrid, pixels: np.ndarray) -> PixelGrid:
    return PixelGrid(width=grid.width, height=grid.height, pixels=pixels)


def grayscale(grid: PixelGrid) -> PixelGrid:
    """Replace every channel with the floored mean of the pixel's channels."""
    mean = grid.pixels.sum(axis=2) // 3
    gray = clamp(mean)
    return _with_pixels(grid, np.repeat(gray[:, :, None], 3, axis=2))


def invert(grid: PixelGrid) -> PixelGrid:
    return _with_pixels(grid, clamp(CHANNEL_MAX - grid.pixels))


def emboss(grid: PixelGrid) -> PixelGrid:
    """Gray relief from the difference against each pixel's up-left neighbour.

    The difference kept is the signed per-channel difference of largest
    magnitude, checked in red, green, blue order; a later channel only
    replaces it when strictly larger. Pixels in the top row or left column
    have no up-left neighbour and come out mid gray.
    """
    src = grid.pixels
    diff = np.zeros((grid.height, grid.width), dtype=src.dtype)
    deltas = src[1:, 1:] - src[:-1, :-1]
    inner = diff[1:, 1:]
    for ch in range(3):
        delta = deltas[:, :, ch]
        np.copyto(inner, delta, where=np.abs(delta) > np.abs(inner))
    gray = clamp(EMBOSS_BASE + diff)
    return _with_pixels(grid, np.repeat(gray[:, :, None], 3, axis=2))


def motion_blur(grid: PixelGrid, length: int) -> PixelGrid:
    """Horizontal blur averaging each pixel with up to ``length - 1`` pixels to its right.

    The window is cut short at the right edge, so the divisor shrinks there.
    A length below 1 leaves the image unchanged.
    """
    if length < 1:
        return grid.copy()
    length = min(length, grid.width)
    src = grid.pixels
    # Prefix sums along each row: window sum is csum[end] - csum[start]
    csum = np.zeros((grid.height, grid.width + 1, 3), dtype=src.dtype)
    csum[:, 1:] = np.cumsum(src, axis=1)
    cols = np.arange(grid.width)
    ends = np.minimum(cols + length, grid.width)
    totals = csum[:, ends] - csum[:, cols]
    counts = (ends - cols)[None, :, None]
    return _with_pixels(grid, clamp(totals // counts))


FILTERS: dict[str, Callable[..., PixelGrid]] = {
    "grayscale": grayscale,
    "invert": invert,
    "emboss": emboss,
    "motionblur": motion_blur,
}

PARAMETRIC_FILTERS = frozenset({"motionblur"})


def apply_filter(name: str, grid: PixelGrid, length: int | None = None) -> PixelGrid:
    try:
        func = FILTERS[name]
    except KeyError:
        raise UnknownFilterError(name) from None
    if name in PARAMETRIC_FILTERS:
        if length is None:
            raise ValueError(f"Filter {name!r} requires a length")
        result = func(grid, length)
    else:
        result = func(grid)
    logger.debug(f"Applied {name} to {grid.width}x{grid.height} image")
    return result
