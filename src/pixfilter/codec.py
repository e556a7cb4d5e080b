"""Plain-text pixel-map (PPM "P3") codec.

The format is a stream of whitespace-separated tokens: a magic marker,
width, height, maximum channel value, then ``width * height * 3`` channel
values in row-major order. Any run of whitespace separates tokens; line
breaks carry no meaning on read.
"""

import logging
import os
import tempfile
from pathlib import Path

import numpy as np

from pixfilter.model import DTYPE, PixelGrid

logger = logging.getLogger(__name__)

MAGIC = "P3"
MAX_VALUE = 255
HEADER_TOKENS = 4
# Channel values outside this range are rejected; sums over an image row stay within int64
CHANNEL_LIMIT = 2**31


class FormatError(ValueError):
    """Raised when pixel-map content cannot be decoded."""


def _parse_int(token: str, what: str) -> int:
    try:
        return int(token, 10)
    except ValueError:
        raise FormatError(f"Invalid {what}: {token!r} is not an integer") from None


def decode(text: str) -> PixelGrid:
    """Decode pixel-map text into a PixelGrid.

    The magic marker and maximum channel value are required but otherwise
    ignored; channel values are taken as-is without rescaling, and values
    outside [0, 255] are kept for the filters to clamp. Only values beyond
    +/- CHANNEL_LIMIT are rejected. Tokens past the last pixel are ignored.
    """
    tokens = text.split()
    if len(tokens) < HEADER_TOKENS:
        raise FormatError(f"Truncated header: expected {HEADER_TOKENS} tokens, found {len(tokens)}")

    width = _parse_int(tokens[1], "width")
    height = _parse_int(tokens[2], "height")
    if width <= 0 or height <= 0:
        raise FormatError(f"Image dimensions must be positive, got {width}x{height}")

    count = width * height * 3
    available = len(tokens) - HEADER_TOKENS
    if available < count:
        raise FormatError(
            f"Expected {count} channel values for a {width}x{height} image, found {available}"
        )
    if available > count:
        logger.debug(f"Ignoring {available - count} trailing tokens")

    values = [_parse_int(t, "channel value") for t in tokens[HEADER_TOKENS : HEADER_TOKENS + count]]
    for i, value in enumerate(values):
        if not -CHANNEL_LIMIT < value < CHANNEL_LIMIT:
            raise FormatError(f"Channel value {value} at position {i} is out of range")
    pixels = np.array(values, dtype=DTYPE).reshape(height, width, 3)
    logger.debug(f"Decoded {width}x{height} image")
    return PixelGrid(width=width, height=height, pixels=pixels)


def encode(grid: PixelGrid) -> str:
    """Encode a PixelGrid as pixel-map text, one line per row."""
    lines = [MAGIC, f"{grid.width} {grid.height}", str(MAX_VALUE)]
    for row in grid.pixels:
        lines.append(" ".join(f"{r} {g} {b}" for r, g, b in row.tolist()))
    return "\n".join(lines) + "\n"


def load(path: str | Path) -> PixelGrid:
    path = Path(path)
    try:
        text = path.read_text(encoding="ascii")
    except UnicodeDecodeError as e:
        raise FormatError(f"{path} is not a text pixel map: {e}") from e
    return decode(text)


def save(grid: PixelGrid, path: str | Path) -> None:
    """Write the encoded grid to ``path``, replacing it only once fully written."""
    path = Path(path)
    text = encode(grid)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    tmp = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="ascii") as f:
            f.write(text)
        tmp.replace(path)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise
    logger.debug(f"Wrote {len(text)} bytes to {path}")
