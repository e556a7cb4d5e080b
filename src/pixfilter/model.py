from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
from PIL import Image

Pixel = tuple[int, int, int]

# Signed and wide so out-of-range values survive until a filter clamps them
DTYPE = np.int64


@dataclass(eq=False)
class PixelGrid:
    width: int
    height: int
    pixels: np.ndarray  # (height, width, 3), row 0 is the top

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {self.width}x{self.height}")
        self.pixels = np.asarray(self.pixels, dtype=DTYPE)
        expected = (self.height, self.width, 3)
        if self.pixels.shape != expected:
            raise ValueError(f"Pixel array has shape {self.pixels.shape}, expected {expected}")

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Sequence[int]]]) -> PixelGrid:
        """Build a grid from nested rows of (r, g, b) triples."""
        if not rows or not rows[0]:
            raise ValueError("Grid must have at least one row and one column")
        width = len(rows[0])
        for r, row in enumerate(rows):
            if len(row) != width:
                raise ValueError(f"Row {r} has {len(row)} pixels, expected {width}")
        return cls(width=width, height=len(rows), pixels=np.array(rows, dtype=DTYPE))

    @classmethod
    def blank(cls, width: int, height: int, colour: Pixel = (0, 0, 0)) -> PixelGrid:
        """Grid of the given size with every pixel set to ``colour``."""
        pixels = np.empty((height, width, 3), dtype=DTYPE)
        pixels[:, :] = colour
        return cls(width=width, height=height, pixels=pixels)

    @classmethod
    def from_image(cls, image: Image.Image) -> PixelGrid:
        """Build a grid from an in-memory PIL image, converting it to RGB.

        Lets callers that already hold a Pillow image run the filters
        without going through the text format.
        """
        image = image.convert("RGB")
        return cls(width=image.width, height=image.height, pixels=np.asarray(image))

    def to_image(self) -> Image.Image:
        """Return an RGB PIL image, clamping channels to [0, 255]."""
        return Image.fromarray(np.clip(self.pixels, 0, 255).astype(np.uint8), "RGB")

    def to_rows(self) -> list[list[Pixel]]:
        return [[tuple(int(c) for c in px) for px in row] for row in self.pixels]

    def pixel(self, row: int, col: int) -> Pixel:
        r, g, b = self.pixels[row, col]
        return (int(r), int(g), int(b))

    def copy(self) -> PixelGrid:
        return PixelGrid(width=self.width, height=self.height, pixels=self.pixels.copy())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelGrid):
            return NotImplemented
        return (
            self.width == other.width
            and self.height == other.height
            and np.array_equal(self.pixels, other.pixels)
        )
