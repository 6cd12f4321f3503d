"""
Tests for the pairwise distance engine.

Covers matrix assembly, pair enumeration, options handling, parallel
execution and per-pair failure isolation.
"""

import warnings

import numpy as np
import pandas as pd
import pytest

from ts2net.core.engine import ts_dist, pair_indices
from ts2net.core.distances import tsdist_cor, CorrelationOptions


def mean_difference(ts1, ts2):
    """Asymmetric test distance."""
    return float(np.mean(ts1) - np.mean(ts2))


def fails_on_short(ts1, ts2):
    if len(ts1) < 5 or len(ts2) < 5:
        raise RuntimeError("series too short")
    return 0.5


class TestPairIndices:
    """Deterministic pair enumeration."""

    def test_symmetric_pairs(self):
        assert pair_indices(3, symmetric=True) == [(0, 1), (0, 2), (1, 2)]

    def test_asymmetric_pairs_include_self(self):
        pairs = pair_indices(3, symmetric=False)
        assert len(pairs) == 9
        assert pairs[0] == (0, 0)
        assert pairs[-1] == (2, 2)

    def test_single_series(self):
        assert pair_indices(1) == []


class TestTsDist:
    """Distance matrix assembly."""

    def test_sine_cosine_groups(self, sincos):
        D = ts_dist(sincos, tsdist_cor)

        assert D.shape == (10, 10)
        np.testing.assert_array_equal(D, D.T)
        np.testing.assert_array_equal(np.diag(D), np.zeros(10))
        assert D[:5, :5].max() < 1e-6
        assert D[5:, 5:].max() < 1e-6
        assert D[:5, 5:].min() > 0.5

    def test_named_collection_returns_dataframe(self, sincos_named):
        D = ts_dist(sincos_named)

        assert isinstance(D, pd.DataFrame)
        assert list(D.index) == list(sincos_named.keys())
        assert list(D.columns) == list(sincos_named.keys())
        assert D.loc['sin_0', 'cos_3'] > 0.5

    def test_dataframe_input(self, sincos_named):
        df = pd.DataFrame(sincos_named)
        D = ts_dist(df)
        assert list(D.columns) == list(df.columns)

    def test_options_dataclass_and_dict_agree(self, sincos):
        a = ts_dist(sincos, tsdist_cor, options=CorrelationOptions(cor_type='+'))
        b = ts_dist(sincos, tsdist_cor, options={'cor_type': '+'})
        np.testing.assert_array_equal(a, b)

    def test_options_wrong_type(self, sincos):
        with pytest.raises(TypeError):
            ts_dist(sincos, tsdist_cor, options=['abs'])

    def test_asymmetric_fills_every_cell(self):
        series = [np.full(10, v) for v in (1.0, 2.0, 4.0)]
        D = ts_dist(series, mean_difference, symmetric=False)

        assert D[0, 1] == pytest.approx(-1.0)
        assert D[1, 0] == pytest.approx(1.0)
        assert D[2, 0] == pytest.approx(3.0)
        np.testing.assert_allclose(D, -D.T)

    def test_parallel_matches_serial(self, sincos):
        serial = ts_dist(sincos, tsdist_cor, n_jobs=1)
        parallel = ts_dist(sincos, tsdist_cor, n_jobs=2)
        np.testing.assert_array_equal(serial, parallel)

    def test_n_jobs_zero_rejected(self, sincos):
        with pytest.raises(ValueError, match="n_jobs"):
            ts_dist(sincos, n_jobs=0)

    def test_empty_collection(self):
        assert ts_dist([]).shape == (0, 0)


class TestFailureIsolation:
    """One failing pair never aborts the matrix."""

    def test_failed_pairs_get_error_value_and_warning(self):
        series = [np.arange(10.0), np.arange(10.0) ** 2, np.arange(3.0)]

        with pytest.warns(RuntimeWarning, match=r"Error when calculating distance .*\(1, 3\), \(2, 3\)"):
            D = ts_dist(series, fails_on_short)

        assert D[0, 1] == 0.5
        assert np.isnan(D[0, 2]) and np.isnan(D[2, 0])
        assert np.isnan(D[1, 2])

    def test_custom_error_value(self):
        series = [np.arange(10.0), np.arange(3.0)]
        with pytest.warns(RuntimeWarning):
            D = ts_dist(series, fails_on_short, error_value=-1.0)
        assert D[0, 1] == -1.0

    def test_warning_can_be_silenced(self):
        series = [np.arange(10.0), np.arange(3.0)]
        with warnings.catch_warnings():
            warnings.simplefilter('error')
            D = ts_dist(series, fails_on_short, warn_error=False)
        assert np.isnan(D[0, 1])

    def test_length_mismatch_in_builtin_distance(self):
        series = [np.arange(10.0), np.arange(10.0) * 2, np.arange(7.0)]
        with pytest.warns(RuntimeWarning):
            D = ts_dist(series, tsdist_cor)
        assert D[0, 1] == pytest.approx(0.0, abs=1e-12)
        assert np.isnan(D[0, 2])
