"""
Tests for distance matrix utilities and series collections.
"""

import numpy as np
import pandas as pd
import pytest

from ts2net.core.matrix import as_matrix, dist_matrix_normalize, dist_percentile
from ts2net.core.series import SeriesCollection, as_series_collection, ts_to_windows
from ts2net.core.engine import ts_dist


@pytest.fixture
def D():
    return np.array([
        [0.0, 2.0, 4.0],
        [2.0, 0.0, 6.0],
        [4.0, 6.0, 0.0],
    ])


class TestNormalize:
    """Min-max rescaling of the off-diagonal."""

    def test_unit_interval(self, D):
        N = dist_matrix_normalize(D)
        assert N[0, 1] == 0.0
        assert N[1, 2] == 1.0
        assert N[0, 2] == pytest.approx(0.5)
        np.testing.assert_array_equal(np.diag(N), np.zeros(3))
        np.testing.assert_array_equal(N, N.T)

    def test_custom_interval(self, D):
        N = dist_matrix_normalize(D, to=(1.0, 3.0))
        assert N[0, 1] == 1.0
        assert N[1, 2] == 3.0

    def test_constant_maps_to_middle(self):
        N = dist_matrix_normalize(np.ones((3, 3)) - np.eye(3))
        assert N[0, 1] == 0.5

    def test_keeps_labels(self, D):
        df = pd.DataFrame(D, index=list('xyz'), columns=list('xyz'))
        N = dist_matrix_normalize(df)
        assert isinstance(N, pd.DataFrame)
        assert N.loc['y', 'z'] == 1.0

    def test_non_square_rejected(self):
        with pytest.raises(ValueError, match="square"):
            as_matrix(np.zeros((2, 3)))


class TestPercentile:
    """Threshold at a percentile of the distances."""

    def test_extremes(self, D):
        assert dist_percentile(D, 0.0) == 2.0
        assert dist_percentile(D, 1.0) == 6.0

    def test_median(self, D):
        assert dist_percentile(D, 0.5) == 4.0

    def test_nan_counts_as_infinite(self, D):
        D[0, 1] = D[1, 0] = np.nan
        assert dist_percentile(D, 0.0) == 4.0

    @pytest.mark.parametrize('percentile, expected', [
        (0.0, 0.1),
        (0.25, 0.2),
        (0.5, 0.3),
        (0.9, np.inf),
        (1.0, np.inf),
    ])
    def test_infinite_tail(self, percentile, expected):
        D = np.array([
            [0.0, 0.1, np.nan],
            [0.1, 0.0, 0.3],
            [np.nan, 0.3, 0.0],
        ])
        assert dist_percentile(D, percentile) == pytest.approx(expected)

    def test_interpolates_between_finite_values(self, D):
        assert dist_percentile(D, 0.25) == pytest.approx(3.0)

    def test_no_off_diagonal(self):
        with pytest.raises(ValueError):
            dist_percentile(np.zeros((1, 1)), 0.5)

    def test_invalid_percentile(self, D):
        with pytest.raises(ValueError):
            dist_percentile(D, 1.5)


class TestSeriesCollection:
    """Accepted collection shapes."""

    def test_list(self):
        c = as_series_collection([[1, 2, 3], np.arange(4)])
        assert len(c) == 2
        assert c.names is None
        assert c[1].dtype == np.float64

    def test_dict_keeps_order(self):
        c = as_series_collection({'b': [1.0, 2.0], 'a': [3.0, 4.0]})
        assert c.names == ['b', 'a']

    def test_dataframe_columns(self):
        c = as_series_collection(pd.DataFrame({'x': [1.0, 2.0], 'y': [3.0, 4.0]}))
        assert c.names == ['x', 'y']
        np.testing.assert_array_equal(c[1], [3.0, 4.0])

    def test_2d_array_rows(self):
        c = as_series_collection(np.arange(6.0).reshape(2, 3))
        np.testing.assert_array_equal(c[1], [3.0, 4.0, 5.0])

    def test_passthrough(self):
        c = SeriesCollection(values=[np.zeros(3)])
        assert as_series_collection(c) is c

    def test_unsupported(self):
        with pytest.raises(TypeError):
            as_series_collection(42)


class TestWindows:
    """Sliding windows over one series."""

    def test_windows(self):
        windows = ts_to_windows(np.arange(6.0), width=3, by=2)
        assert [w.tolist() for w in windows] == [[0, 1, 2], [2, 3, 4]]

    def test_window_network_input(self):
        x = np.sin(np.linspace(0, 4 * np.pi, 100))
        D = ts_dist(ts_to_windows(x, width=20, by=10))
        assert D.shape == (9, 9)

    def test_invalid_width(self):
        with pytest.raises(ValueError):
            ts_to_windows(np.arange(5.0), width=6)
        with pytest.raises(ValueError):
            ts_to_windows(np.arange(5.0), width=2, by=0)
