from .cluster import (
    Cluster,
    clusters_equal,
    combine_clusters,
    make_cluster,
    seed_clusters,
    squared_distance,
)
from .assign import assign, step
from .reduce import reduce_clusters, split_points
from .base import Converged, GaveUp, KMeansBase, KMeansResult, Running
from .sequential import KMeansSequential
from .cpu_multiprocessing import KMeansCPUMultiprocessing, MultiprocessingConfig
from .scheduled import KMeansScheduled

__all__ = [
    "Cluster",
    "clusters_equal",
    "combine_clusters",
    "make_cluster",
    "seed_clusters",
    "squared_distance",
    "assign",
    "step",
    "reduce_clusters",
    "split_points",
    "Converged",
    "GaveUp",
    "KMeansBase",
    "KMeansResult",
    "Running",
    "KMeansSequential",
    "KMeansCPUMultiprocessing",
    "MultiprocessingConfig",
    "KMeansScheduled",
]
