"""
ts2net: time series to networks.

Public API:
    from ts2net import ts_dist, tsdist_cor, net_knn

    D = ts_dist(series, tsdist_cor, n_jobs=4)
    G = net_knn(D, k=3)

Layers:
    ts2net.core.distances   Distance functions (series pair in, float out)
    ts2net.core.engine      Pairwise distance matrix
    ts2net.core.partition   Partitioned runs (records per part) and merge
    ts2net.core.network     Graph construction (networkx graphs out)

Also:
    ts2net.io               Series and record-batch files (npy, parquet, csv)
    ts2net.config           Package defaults (defaults.yaml, TS2NET_CONFIG)
    ts2net.validation       Record-batch validation
"""

from ts2net.core.distances import (
    tsdist_cor,
    tsdist_ccf,
    tsdist_dtw,
    tsdist_nmi,
    tsdist_voi,
    tsdist_mic,
    tsdist_es,
    tsdist_vr,
    events_from_ts,
    random_events,
    CorrelationOptions,
    CrossCorrelationOptions,
    DTWOptions,
    VariationOfInformationOptions,
    MutualInformationOptions,
    MICOptions,
    EventSyncOptions,
    VanRossumOptions,
)
from ts2net.core import (
    ts_dist,
    ts_dist_part,
    ts_dist_part_file,
    dist_parts_merge,
    dist_file_parts_merge,
    ts_to_windows,
    dist_matrix_normalize,
    dist_percentile,
)
from ts2net.core.network import (
    net_knn,
    net_knn_approx,
    net_enn,
    net_enn_approx,
    net_weighted,
    net_significant_links,
    tsnet_vg,
    tsnet_rn,
    tsnet_qn,
)

__version__ = "0.1.0"

__all__ = [
    'tsdist_cor', 'tsdist_ccf', 'tsdist_dtw', 'tsdist_nmi', 'tsdist_voi', 'tsdist_mic',
    'tsdist_es', 'tsdist_vr', 'events_from_ts', 'random_events',
    'CorrelationOptions', 'CrossCorrelationOptions', 'DTWOptions',
    'VariationOfInformationOptions', 'MutualInformationOptions', 'MICOptions',
    'EventSyncOptions', 'VanRossumOptions',
    'ts_dist', 'ts_dist_part', 'ts_dist_part_file', 'dist_parts_merge', 'dist_file_parts_merge',
    'ts_to_windows', 'dist_matrix_normalize', 'dist_percentile',
    'net_knn', 'net_knn_approx', 'net_enn', 'net_enn_approx', 'net_weighted',
    'net_significant_links', 'tsnet_vg', 'tsnet_rn', 'tsnet_qn',
]
