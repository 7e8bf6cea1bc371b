"""
Centralized Parameters for Clustering Analysis

This module provides a single place to define all clustering analysis parameters.
Simple, clean, and easy to modify without unnecessary complexity.

A handful of run-level values can be overridden through environment variables
(or a local ``.env`` file): CLUSTER_LIMIT, CLUSTER_SEED and CLUSTER_N_JOBS.
"""
import os
from typing import Any, Dict

from dotenv import load_dotenv

load_dotenv()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    return int(raw) if raw not in (None, "") else default


# =============================================================================
# PREPROCESSING PARAMETERS
# =============================================================================

# Remove rows with missing values instead of failing
DROP_NA = True

# One hot encode non-numeric columns (False: drop them instead)
ENCODE_CATEGORICAL = True

# Min-max normalize every clustering column to [0, 1]
NORMALIZE = True

# Value used for columns that cannot be normalized (zero variance)
NA_FILL_VALUE = 0.0

# =============================================================================
# ONE HOT ENCODING
# =============================================================================

OHSE_LIMIT = 8                # Keep the n most frequent levels per column, lump the rest
OHSE_DROP_REDUNDANT = True    # Drop one indicator per original column (avoids collinearity)
OHSE_EXPAND_DATES = True      # Expand date columns into numeric date parts
OHSE_OTHER_LABEL = "OTHER"    # Level name for lumped infrequent values

# =============================================================================
# CLUSTERING PARAMETERS
# =============================================================================

# Largest cluster count evaluated by the elbow sweep
LIMIT = _env_int("CLUSTER_LIMIT", 20)

# Random state for reproducible results
RANDOM_STATE = _env_int("CLUSTER_SEED", 123)

# Workers for the elbow sweep (1 = sequential, -1 = all cores)
N_JOBS = _env_int("CLUSTER_N_JOBS", 1)

KMEANS_N_INIT = 10
KMEANS_MAX_ITER = 300

# Name of the appended label column
CLUSTER_COL = "cluster"

# =============================================================================
# PCA
# =============================================================================

# Components must explain strictly more than this percentage to be kept
PCA_MIN_VARIANCE_PCT = 0.1

# =============================================================================
# OUTPUT AND VISUALIZATION
# =============================================================================

# Confidence level of the per-cluster ellipses on the PCA scatter
ELLIPSE_CONFIDENCE = 0.95


def get_clustering_params() -> Dict[str, Any]:
    """
    Retrieve clustering parameters from the centralized configuration.

    Returns:
        Dict[str, Any]: Dictionary of clustering parameters.
    """
    return {
        'drop_na': DROP_NA,
        'encode_categorical': ENCODE_CATEGORICAL,
        'normalize': NORMALIZE,
        'na_fill_value': NA_FILL_VALUE,
        'ohse_limit': OHSE_LIMIT,
        'ohse_drop_redundant': OHSE_DROP_REDUNDANT,
        'ohse_expand_dates': OHSE_EXPAND_DATES,
        'ohse_other_label': OHSE_OTHER_LABEL,
        'limit': LIMIT,
        'random_state': RANDOM_STATE,
        'n_jobs': N_JOBS,
        'kmeans_n_init': KMEANS_N_INIT,
        'kmeans_max_iter': KMEANS_MAX_ITER,
        'cluster_col': CLUSTER_COL,
        'pca_min_variance_pct': PCA_MIN_VARIANCE_PCT,
        'ellipse_confidence': ELLIPSE_CONFIDENCE,
    }
