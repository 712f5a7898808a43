from .validation import validate_clusters, validate_inputs, validate_points
from .points import gen_blob_points, gen_points
from .seeds import load_seeds, save_seeds

__all__ = [
    "validate_clusters",
    "validate_inputs",
    "validate_points",
    "gen_blob_points",
    "gen_points",
    "load_seeds",
    "save_seeds",
]
