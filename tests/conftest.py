from pixfilter.model import PixelGrid

# 2x1 image used throughout the filter and codec tests
SAMPLE_TEXT = "P3\n2 1\n255\n10 20 30 40 50 60\n"


def make_grid(rows):
    """Build a PixelGrid from nested lists of (r, g, b) triples."""
    return PixelGrid.from_rows(rows)


def make_gradient(width=4, height=3):
    """Grid whose channels vary with position, for order-sensitive filters."""
    return PixelGrid.from_rows(
        [[(c * 40 + r * 10, (c * 17 + r * 50) % 256, 255 - c * 30) for c in range(width)] for r in range(height)]
    )
