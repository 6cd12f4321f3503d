"""
Graph construction.

From a distance matrix: net_knn, net_knn_approx, net_enn, net_enn_approx,
net_weighted, net_significant_links.

From a single series: tsnet_vg (visibility), tsnet_rn (recurrence),
tsnet_qn (transition).
"""

from ts2net.core.network.proximity import (
    net_knn,
    net_knn_approx,
    net_enn,
    net_enn_approx,
    net_weighted,
    net_significant_links,
)
from ts2net.core.network.visibility import tsnet_vg, VG_METHODS
from ts2net.core.network.recurrence import tsnet_rn, delay_embedding, recurrence_matrix
from ts2net.core.network.transition import tsnet_qn, transition_counts

__all__ = [
    'net_knn', 'net_knn_approx', 'net_enn', 'net_enn_approx',
    'net_weighted', 'net_significant_links',
    'tsnet_vg', 'VG_METHODS',
    'tsnet_rn', 'delay_embedding', 'recurrence_matrix',
    'tsnet_qn', 'transition_counts',
]
