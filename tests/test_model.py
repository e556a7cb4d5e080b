import numpy as np
import pytest
from PIL import Image

from pixfilter.filters import invert
from pixfilter.model import PixelGrid
from tests.conftest import make_gradient, make_grid


def test_from_rows_dimensions():
    grid = make_grid([[(1, 2, 3), (4, 5, 6), (7, 8, 9)], [(0, 0, 0), (1, 1, 1), (2, 2, 2)]])
    assert grid.width == 3
    assert grid.height == 2
    assert grid.pixels.shape == (2, 3, 3)


def test_pixel_is_row_col_indexed():
    grid = make_grid([[(1, 2, 3), (4, 5, 6)], [(7, 8, 9), (10, 11, 12)]])
    assert grid.pixel(0, 1) == (4, 5, 6)
    assert grid.pixel(1, 0) == (7, 8, 9)


def test_to_rows_matches_input():
    rows = [[(1, 2, 3), (4, 5, 6)]]
    assert make_grid(rows).to_rows() == rows


def test_ragged_rows_rejected():
    with pytest.raises(ValueError, match="Row 1 has 1 pixels"):
        make_grid([[(0, 0, 0), (0, 0, 0)], [(0, 0, 0)]])


def test_empty_rows_rejected():
    with pytest.raises(ValueError):
        PixelGrid.from_rows([])


def test_shape_mismatch_rejected():
    with pytest.raises(ValueError, match="expected"):
        PixelGrid(width=2, height=2, pixels=np.zeros((2, 3, 3)))


def test_non_positive_dimensions_rejected():
    with pytest.raises(ValueError, match="positive"):
        PixelGrid(width=0, height=1, pixels=np.zeros((1, 0, 3)))


def test_out_of_range_values_kept():
    grid = make_grid([[(-5, 300, 128)]])
    assert grid.pixel(0, 0) == (-5, 300, 128)


def test_blank_fills_colour():
    grid = PixelGrid.blank(3, 2, (9, 8, 7))
    assert all(px == (9, 8, 7) for row in grid.to_rows() for px in row)


def test_equality():
    assert make_gradient() == make_gradient()
    assert make_gradient() != make_gradient(width=3)
    other = make_gradient()
    other.pixels[0, 0, 0] += 1
    assert make_gradient() != other


def test_copy_is_independent():
    grid = make_gradient()
    dup = grid.copy()
    dup.pixels[0, 0] = (0, 0, 0)
    assert grid.pixel(0, 0) != (0, 0, 0)


def test_image_roundtrip():
    grid = make_gradient()
    image = grid.to_image()
    assert image.size == (grid.width, grid.height)
    assert PixelGrid.from_image(image) == grid


def test_to_image_clamps():
    image = make_grid([[(-20, 128, 400)]]).to_image()
    assert image.getpixel((0, 0)) == (0, 128, 255)


def test_from_image_converts_mode():
    image = Image.new("L", (2, 2), 77)
    grid = PixelGrid.from_image(image)
    assert grid.pixel(1, 1) == (77, 77, 77)


def test_filters_run_on_image_grids():
    grid = PixelGrid.from_image(Image.new("RGB", (2, 2), (10, 20, 30)))
    assert invert(grid).to_image().getpixel((1, 1)) == (245, 235, 225)
