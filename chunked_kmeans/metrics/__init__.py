from .timers import Timer
from .metrics import speedup, efficiency, throughput, max_centroid_diff

__all__ = [
    "Timer",
    "speedup",
    "efficiency",
    "throughput",
    "max_centroid_diff",
]
