"""
Distance Options
================

One frozen options structure per distance function. Each structure
validates its fields on construction, so an invalid combination fails
before any pair is scheduled:

    opts = EventSyncOptions(method='boers')        # ValueError: needs sig_test
    D = ts_dist(events, tsdist_es, options=EventSyncOptions(tau_max=3))

`as_kwargs()` turns the structure into the keyword arguments of the
matching `tsdist_*` function.
"""

import math
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional, Union


COR_TYPES = ('abs', '+', '-')
CCF_TYPES = ('correlation', 'covariance')
NBINS_RULES = ('sturges', 'freedman-diaconis', 'scott')
NMI_NORMALIZATIONS = ('sum', 'min', 'max', 'sqrt')
ENTROPY_METHODS = ('emp', 'mm', 'sg')
ES_METHODS = ('quiroga', 'boers')


def _check_choice(name: str, value: str, choices) -> None:
    if value not in choices:
        raise ValueError(f"{name} must be one of {list(choices)}, got {value!r}")


def _check_alpha(name: str, value: float) -> None:
    if not 0 < value < 1:
        raise ValueError(f"{name} must be in (0, 1), got {value}")


@dataclass(frozen=True)
class DistanceOptions:
    """Base class: keyword view of an options structure."""

    def as_kwargs(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class CorrelationOptions(DistanceOptions):
    """
    Options for tsdist_cor.

    Attributes:
        cor_type: 'abs' (|r|), '+' (positive only) or '-' (negative only)
        sig_test: Return 0/1 from a two-sided Pearson test instead of 1 - r
        sig_level: Significance level in (0, 1]
    """
    cor_type: str = 'abs'
    sig_test: bool = False
    sig_level: float = 0.01

    def __post_init__(self):
        _check_choice('cor_type', self.cor_type, COR_TYPES)
        if not 0 < self.sig_level <= 1:
            raise ValueError(f"sig_level must be in (0, 1], got {self.sig_level}")


@dataclass(frozen=True)
class CrossCorrelationOptions(DistanceOptions):
    """
    Options for tsdist_ccf.

    Attributes:
        type: 'correlation' or 'covariance'
        cor_type: 'abs', '+' or '-'
        directed: Only lags in [-lag_max, 0]
        lag_max: Largest lag considered (>= 0)
        return_lag: Also return the lag of the maximum
    """
    type: str = 'correlation'
    cor_type: str = 'abs'
    directed: bool = False
    lag_max: int = 10
    return_lag: bool = False

    def __post_init__(self):
        _check_choice('type', self.type, CCF_TYPES)
        _check_choice('cor_type', self.cor_type, COR_TYPES)
        if int(self.lag_max) != self.lag_max or self.lag_max < 0:
            raise ValueError(f"lag_max must be a non-negative integer, got {self.lag_max}")


@dataclass(frozen=True)
class DTWOptions(DistanceOptions):
    """
    Options for tsdist_dtw.

    Attributes:
        window: Sakoe-Chiba band width, or None for an unconstrained path
    """
    window: Optional[int] = None

    def __post_init__(self):
        if self.window is not None and (int(self.window) != self.window or self.window < 0):
            raise ValueError(f"window must be a non-negative integer or None, got {self.window}")


@dataclass(frozen=True)
class VariationOfInformationOptions(DistanceOptions):
    """
    Options for tsdist_voi.

    Attributes:
        nbins: Bin count (int >= 1) or rule: 'sturges', 'freedman-diaconis', 'scott'
        method: Entropy estimator: 'emp' (plug-in), 'mm' (Miller-Madow),
            'sg' (Schurmann-Grassberger)
    """
    nbins: Union[int, str] = 'sturges'
    method: str = 'emp'

    def __post_init__(self):
        if isinstance(self.nbins, str):
            _check_choice('nbins', self.nbins, NBINS_RULES)
        elif int(self.nbins) != self.nbins or self.nbins < 1:
            raise ValueError(f"nbins must be a positive integer or a rule name, got {self.nbins}")
        _check_choice('method', self.method, ENTROPY_METHODS)


@dataclass(frozen=True)
class MutualInformationOptions(VariationOfInformationOptions):
    """
    Options for tsdist_nmi.

    Adds the NMI normaliser: 'sum' (mean of entropies), 'min', 'max', 'sqrt'.
    """
    normalization: str = 'sum'

    def __post_init__(self):
        super().__post_init__()
        _check_choice('normalization', self.normalization, NMI_NORMALIZATIONS)


@dataclass(frozen=True)
class MICOptions(DistanceOptions):
    """
    Options for tsdist_mic.

    Attributes:
        alpha: Grid budget exponent, grids satisfy nx * ny <= n ** alpha
    """
    alpha: float = 0.6

    def __post_init__(self):
        if not 0 < self.alpha <= 1:
            raise ValueError(f"alpha must be in (0, 1], got {self.alpha}")


@dataclass(frozen=True)
class EventSyncOptions(DistanceOptions):
    """
    Options for tsdist_es.

    Attributes:
        tau_max: Cap on the adaptive coincidence window (>= 0, inf = no cap)
        method: 'quiroga' (normalised) or 'boers' (raw count, sig_test only)
        sig_test: Compare against random event placements
        reps: Number of null-model resamples (>= 1)
        alpha: Significance level in (0, 1)
        seed: Seed for the null-model generator
    """
    tau_max: float = math.inf
    method: str = 'quiroga'
    sig_test: bool = False
    reps: int = 100
    alpha: float = 0.05
    seed: Optional[int] = None

    def __post_init__(self):
        _check_choice('method', self.method, ES_METHODS)
        if self.method == 'boers' and not self.sig_test:
            raise ValueError("method='boers' is only valid with sig_test=True")
        if not self.tau_max >= 0:
            raise ValueError(f"tau_max must be >= 0, got {self.tau_max}")
        if self.reps < 1:
            raise ValueError(f"reps must be >= 1, got {self.reps}")
        _check_alpha('alpha', self.alpha)


@dataclass(frozen=True)
class VanRossumOptions(DistanceOptions):
    """
    Options for tsdist_vr.

    Attributes:
        tau: Kernel time constant (>= 0; 0 gives the maximum distance)
        sig_test: Compare against random event placements
        reps: Number of null-model resamples (>= 1)
        alpha: Significance level in (0, 1)
        seed: Seed for the null-model generator
    """
    tau: float = 1.0
    sig_test: bool = False
    reps: int = 100
    alpha: float = 0.05
    seed: Optional[int] = None

    def __post_init__(self):
        if self.tau < 0:
            raise ValueError(f"tau must be >= 0, got {self.tau}")
        if self.reps < 1:
            raise ValueError(f"reps must be >= 1, got {self.reps}")
        _check_alpha('alpha', self.alpha)


def options_to_kwargs(options) -> Dict[str, Any]:
    """Normalise None, a mapping, or a DistanceOptions into keyword arguments."""
    if options is None:
        return {}
    if isinstance(options, DistanceOptions):
        return options.as_kwargs()
    if isinstance(options, dict):
        return dict(options)
    raise TypeError(
        f"options must be a DistanceOptions, a dict or None, got {type(options).__name__}"
    )
