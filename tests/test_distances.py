"""
Tests for the distance functions.

Self-distance, symmetry and the sign conventions of every distance, plus
the information-theoretic helpers.
"""

import warnings

import numpy as np
import pytest

from ts2net.core.engine import ts_dist
from ts2net.core.distances import (
    DTWOptions,
    tsdist_cor,
    tsdist_ccf,
    tsdist_dtw,
    tsdist_nmi,
    tsdist_voi,
    tsdist_mic,
    mic,
    num_bins,
    discretize,
    cross_correlation,
    LaggedDistance,
)
from ts2net.core.distances.information import entropy_from_counts


@pytest.fixture
def noise():
    rng = np.random.default_rng(1)
    return rng.normal(size=500)


@pytest.fixture
def orthogonal():
    """sin and cos over exactly one period: zero sample correlation."""
    t = np.arange(200) * 2 * np.pi / 200
    return np.sin(t), np.cos(t)


class TestCorrelation:
    """Pearson correlation distance."""

    def test_self_distance_is_zero(self, noise):
        assert tsdist_cor(noise, noise) == pytest.approx(0.0, abs=1e-12)

    def test_symmetric(self, noise):
        other = np.cumsum(noise)
        assert tsdist_cor(noise, other) == pytest.approx(tsdist_cor(other, noise))

    def test_cor_types_on_anticorrelated(self, noise):
        assert tsdist_cor(noise, -noise, cor_type='abs') == pytest.approx(0.0, abs=1e-12)
        assert tsdist_cor(noise, -noise, cor_type='+') == pytest.approx(1.0)
        assert tsdist_cor(noise, -noise, cor_type='-') == pytest.approx(0.0, abs=1e-12)

    def test_orthogonal_is_max_distance(self, orthogonal):
        x, y = orthogonal
        assert tsdist_cor(x, y) == pytest.approx(1.0, abs=1e-9)

    def test_sig_test_significant(self, noise):
        assert tsdist_cor(noise, 2 * noise + 1, sig_test=True) == 0.0

    def test_sig_test_respects_sign(self, noise):
        assert tsdist_cor(noise, -noise, cor_type='+', sig_test=True) == 1.0
        assert tsdist_cor(noise, -noise, cor_type='-', sig_test=True) == 0.0
        assert tsdist_cor(noise, -noise, cor_type='abs', sig_test=True) == 0.0

    def test_sig_test_not_significant(self, orthogonal):
        x, y = orthogonal
        assert tsdist_cor(x, y, sig_test=True) == 1.0

    def test_length_mismatch_raises(self):
        with pytest.raises(ValueError, match="lengths differ"):
            tsdist_cor(np.arange(10.0), np.arange(11.0))

    def test_invalid_cor_type(self, noise):
        with pytest.raises(ValueError):
            tsdist_cor(noise, noise, cor_type='both')


class TestCrossCorrelation:
    """Lagged correlation distance."""

    def test_finds_shift(self, noise):
        shifted = np.roll(noise, 3)
        result = tsdist_ccf(noise, shifted, lag_max=10, return_lag=True)

        assert isinstance(result, LaggedDistance)
        assert result.lag == -3
        assert result.dist < 0.1

    def test_directed_keeps_non_positive_lags(self, noise):
        lagged = np.roll(noise, -3)
        undirected = tsdist_ccf(noise, lagged, lag_max=10, return_lag=True)
        directed = tsdist_ccf(noise, lagged, lag_max=10, directed=True, return_lag=True)

        assert undirected.lag == 3
        assert directed.lag <= 0
        assert directed.dist > undirected.dist

    def test_self_distance_at_lag_zero(self, noise):
        result = tsdist_ccf(noise, noise, return_lag=True)
        assert result.lag == 0
        assert result.dist == pytest.approx(0.0, abs=1e-12)

    def test_plain_float_by_default(self, noise):
        assert isinstance(tsdist_ccf(noise, noise), float)

    def test_lag_max_capped(self):
        lags, values = cross_correlation(np.arange(5.0), np.arange(5.0)[::-1], lag_max=50)
        assert lags.min() == -4
        assert lags.max() == 4
        assert len(values) == 9

    def test_positive_only_ignores_anticorrelation(self, noise):
        assert tsdist_ccf(noise, -noise, cor_type='+', lag_max=0) == pytest.approx(1.0)


class TestDTW:
    """DTW through pmtvs."""

    def test_self_distance_and_symmetry(self, noise):
        x, y = noise[:60], np.cumsum(noise[:60])

        assert tsdist_dtw(x, x) == pytest.approx(0.0, abs=1e-12)
        assert tsdist_dtw(x, y) == pytest.approx(tsdist_dtw(y, x))

    def test_window_never_decreases_cost(self, noise):
        x, y = noise[:60], np.cumsum(noise[:60])

        assert tsdist_dtw(x, y, window=2) >= tsdist_dtw(x, y) - 1e-9

    def test_window_through_engine(self, noise):
        series = [noise[:60], np.cumsum(noise[:60]), noise[60:120]]
        with warnings.catch_warnings():
            warnings.simplefilter('error', RuntimeWarning)
            D = ts_dist(series, tsdist_dtw, options=DTWOptions(window=3))

        assert not np.isnan(D).any()
        assert D[0, 1] == pytest.approx(tsdist_dtw(series[0], series[1], window=3))


class TestInformation:
    """NMI, VoI and MIC distances."""

    def test_num_bins_explicit(self):
        assert num_bins(np.arange(10.0), np.arange(10.0), nbins=4) == 4

    def test_num_bins_uses_longer_series(self):
        short, long = np.arange(8.0), np.arange(1000.0)
        assert num_bins(short, long) == num_bins(long, short) == num_bins(long, long)

    def test_num_bins_invalid_rule(self):
        with pytest.raises(ValueError):
            num_bins(np.arange(10.0), np.arange(10.0), nbins='rice')

    def test_discretize(self):
        labels = discretize(np.array([0.0, 0.5, 1.0, 2.0]), 2)
        assert labels.tolist() == [0, 0, 1, 1]
        assert discretize(np.ones(5), 3).tolist() == [0, 0, 0, 0, 0]

    def test_entropy_of_uniform(self):
        assert entropy_from_counts(np.array([5, 5, 5, 5])) == pytest.approx(np.log(4))

    def test_miller_madow_adds_bias_term(self):
        counts = np.array([4, 4, 2, 0])
        plain = entropy_from_counts(counts, 'emp')
        assert entropy_from_counts(counts, 'mm') == pytest.approx(plain + 2 / 20)

    def test_schurmann_grassberger_ignores_empty_cells(self):
        sparse = entropy_from_counts(np.array([3, 0, 1, 0, 0, 0]), 'sg')
        assert sparse == pytest.approx(entropy_from_counts(np.array([3, 1]), 'sg'))
        assert sparse == pytest.approx(entropy_from_counts(np.array([3.5, 1.5]), 'emp'))

    @pytest.mark.parametrize('method', ['emp', 'mm', 'sg'])
    def test_nmi_self_distance(self, noise, method):
        assert tsdist_nmi(noise, noise, method=method) == pytest.approx(0.0, abs=1e-12)

    @pytest.mark.parametrize('normalization', ['sum', 'min', 'max', 'sqrt'])
    def test_nmi_in_unit_interval(self, noise, normalization):
        d = tsdist_nmi(noise, np.cumsum(noise), normalization=normalization)
        assert 0.0 <= d <= 1.0

    def test_nmi_constant_series_is_nan(self):
        assert np.isnan(tsdist_nmi(np.ones(50), np.ones(50)))

    @pytest.mark.parametrize('method', ['emp', 'mm', 'sg'])
    def test_voi_self_distance(self, noise, method):
        assert tsdist_voi(noise, noise, method=method) == pytest.approx(0.0, abs=1e-12)

    def test_voi_symmetric(self, noise):
        other = np.cumsum(noise)
        assert tsdist_voi(noise, other) == pytest.approx(tsdist_voi(other, noise))

    def test_mic_self_distance(self, noise):
        assert tsdist_mic(noise, noise) == pytest.approx(0.0, abs=1e-9)

    def test_mic_detects_nonlinear_dependence(self, noise):
        assert mic(noise, noise ** 2) > mic(noise, np.random.default_rng(7).normal(size=500))

    def test_mic_constant_series(self, noise):
        assert tsdist_mic(noise, np.ones(500)) == 1.0

    def test_mic_too_short(self):
        with pytest.raises(ValueError):
            mic(np.arange(3.0), np.arange(3.0))
