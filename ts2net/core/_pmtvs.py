"""pmtvs import resolver. Works with both dev (0.3.x) and published (0.1.4).

Dev pmtvs (editable install, 0.3.x): every primitive at top level.
Published pmtvs (PyPI, 0.1.4): embedding helpers at top level, pairwise
distances via old-style submodule paths.

Usage:
    from ts2net.core._pmtvs import dynamic_time_warping, optimal_dimension

Imported lazily by the DTW distance and the recurrence network so the rest
of the package does not pay for pmtvs at import time.
"""

import pmtvs as _pmtvs

_HAS_ALL = hasattr(_pmtvs, "dynamic_time_warping")

# Always at top level (both versions)
from pmtvs import (  # noqa: F401, E402
    optimal_delay,
    optimal_dimension,
)

if _HAS_ALL:
    from pmtvs import dynamic_time_warping  # noqa: F401
else:
    from pmtvs.pairwise.distance import dynamic_time_warping  # noqa: F401
