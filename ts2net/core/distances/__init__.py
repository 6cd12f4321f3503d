"""
Distance Functions.

Pair-of-series to scalar. Every function takes two sequences plus keyword
options and returns a float (tsdist_ccf can also return the lag).

Each function has an options structure in options.py for use with the
pairwise engine.
"""

from ts2net.core.distances.correlation import tsdist_cor, tsdist_ccf, cross_correlation, LaggedDistance
from ts2net.core.distances.dtw import tsdist_dtw
from ts2net.core.distances.information import tsdist_nmi, tsdist_voi, tsdist_mic, mic, num_bins, discretize
from ts2net.core.distances.events import (
    tsdist_es,
    tsdist_vr,
    events_from_ts,
    random_events,
    event_sync_count,
    van_rossum_similarity,
)
from ts2net.core.distances.options import (
    DistanceOptions,
    CorrelationOptions,
    CrossCorrelationOptions,
    DTWOptions,
    VariationOfInformationOptions,
    MutualInformationOptions,
    MICOptions,
    EventSyncOptions,
    VanRossumOptions,
    options_to_kwargs,
)

__all__ = [
    'tsdist_cor', 'tsdist_ccf', 'tsdist_dtw',
    'tsdist_nmi', 'tsdist_voi', 'tsdist_mic',
    'tsdist_es', 'tsdist_vr',
    'cross_correlation', 'LaggedDistance', 'mic', 'num_bins', 'discretize',
    'events_from_ts', 'random_events', 'event_sync_count', 'van_rossum_similarity',
    'DistanceOptions', 'CorrelationOptions', 'CrossCorrelationOptions', 'DTWOptions',
    'VariationOfInformationOptions', 'MutualInformationOptions', 'MICOptions',
    'EventSyncOptions', 'VanRossumOptions', 'options_to_kwargs',
]
