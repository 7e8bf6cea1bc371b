"""Top-level package exports

Curated re-exports for notebook ergonomics:

    from cluster_explorer import cluster_kmeans

    res = cluster_kmeans(df, limit=10)               # elbow curve only
    res = cluster_kmeans(df, k=3, exclude=["id"])    # full run
    res.means, res.pca.pcadf
"""
from __future__ import annotations
import logging
from importlib.metadata import version as _v, PackageNotFoundError

from .errors import (
    ClusterExplorerError,
    ValidationError,
    ConvergenceError,
    ConfigurationError,
)
from .data_processing.preprocessing import prepare, PreparedData
from .data_processing.clustering_utils import (
    elbow_curve,
    fit_kmeans,
    label_dataframe,
    profile_clusters,
    cluster_correlations,
    FitResult,
)
from .data_processing.pca_utils import project, ProjectionBundle
from .data_processing.clustering_pipeline import (
    ClusteringPipeline,
    ClusterResults,
    cluster_kmeans,
)
from .data_processing.clustering_params import get_clustering_params

__all__ = [
    # Errors
    "ClusterExplorerError",
    "ValidationError",
    "ConvergenceError",
    "ConfigurationError",
    # Pipeline stages
    "prepare",
    "PreparedData",
    "elbow_curve",
    "fit_kmeans",
    "label_dataframe",
    "profile_clusters",
    "cluster_correlations",
    "FitResult",
    "project",
    "ProjectionBundle",
    # Orchestration
    "ClusteringPipeline",
    "ClusterResults",
    "cluster_kmeans",
    "get_clustering_params",
]

# Avoid "No handler found" warnings; user configures logging in notebook if desired
logging.getLogger(__name__).addHandler(logging.NullHandler())

try:
    __version__ = _v("cluster-explorer")
except PackageNotFoundError:
    __version__ = "0.0.0"
