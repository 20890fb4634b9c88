import numpy as np
import pytest

from service.heatmap_converter import HeatmapConverter

from mocks.patterns import GOOD_PATTERN


def test_upsample_shape_and_corners():
    grid = np.asarray(GOOD_PATTERN).reshape(5, 5)
    heatmap = HeatmapConverter().upsample(grid, (10, 10))

    assert heatmap.shape == (10, 10)
    assert heatmap[0, 0] == pytest.approx(grid[0, 0])
    assert heatmap[-1, -1] == pytest.approx(grid[-1, -1])
    assert heatmap.min() >= grid.min()
    assert heatmap.max() <= grid.max()


def test_same_shape_returns_copy():
    grid = np.asarray(GOOD_PATTERN).reshape(5, 5)
    result = HeatmapConverter().upsample(grid, (5, 5))
    np.testing.assert_array_equal(result, grid)
    assert result is not grid


def test_single_row_fallback():
    row = np.array([[0.0, 1.0]])
    result = HeatmapConverter().upsample(row, (3, 3))
    assert result.shape == (3, 3)
    np.testing.assert_allclose(result[0], [0.0, 0.5, 1.0])


@pytest.mark.parametrize(
    "origin, shape",
    [(np.zeros(25), (10, 10)), (np.zeros((5, 5)), (0, 10))],
)
def test_invalid_arguments(origin, shape):
    with pytest.raises(ValueError):
        HeatmapConverter().upsample(origin, shape)
