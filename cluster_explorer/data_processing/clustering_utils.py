"""
Clustering Utilities: elbow sweep, k-means fit and cluster summaries

Works on the numeric feature table produced by preprocessing.prepare(). All fits
are seeded explicitly; nothing here touches global random state.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Tuple, Union

import numpy as np
import pandas as pd
from joblib import Parallel, delayed
from sklearn.cluster import KMeans

from ..errors import ConfigurationError, ConvergenceError, ValidationError
from . import clustering_params as params
from .preprocessing import PreparedData

_LOG = logging.getLogger(__name__)

TableLike = Union[pd.DataFrame, np.ndarray]


def _as_matrix(table: TableLike) -> np.ndarray:
    X = table.to_numpy(dtype=float) if isinstance(table, pd.DataFrame) else np.asarray(table, dtype=float)
    if X.ndim == 1:
        X = X.reshape(-1, 1)
    if np.isnan(X).any():
        raise ValidationError(
            "Clustering input contains missing values. Run prepare() with drop_na=True first."
        )
    return X


def _feature_names(table: TableLike, n_features: int) -> list:
    if isinstance(table, pd.DataFrame):
        return list(table.columns)
    return [f"V{i + 1}" for i in range(n_features)]


def derive_seed(seed: int, count: int) -> int:
    """Seed for the elbow fit with ``count`` clusters; independent of scheduling."""
    return int(seed) + int(count)


def total_sum_of_squares(table: TableLike) -> float:
    """Sum of per-column variances times (R - 1): the wss of a single cluster."""
    X = _as_matrix(table)
    if X.shape[0] < 2:
        return 0.0
    return float(np.var(X, axis=0, ddof=1).sum() * (X.shape[0] - 1))


@dataclass(frozen=True, eq=False)
class FitResult:
    """Immutable outcome of one k-means fit. Labels run from 1 to k."""

    k: int
    seed: int
    labels: np.ndarray
    centers: pd.DataFrame
    withinss: np.ndarray
    size: np.ndarray
    n_iter: int
    model: Any

    @property
    def wss(self) -> float:
        return float(self.withinss.sum())


def fit_kmeans(
    table: TableLike,
    k: int,
    seed: int = params.RANDOM_STATE,
    n_init: int = params.KMEANS_N_INIT,
    max_iter: int = params.KMEANS_MAX_ITER,
) -> FitResult:
    """
    Fit k-means for exactly ``k`` clusters.

    Args:
        table: NA-free numeric table (rows x features).
        k: Number of clusters, 1 <= k <= number of rows.
        seed: Random state; same inputs and seed reproduce the same fit.
        n_init: Number of centroid initializations; the best one is kept.
        max_iter: Iteration cap per initialization.

    Returns:
        FitResult with 1-based labels, centers indexed by label and per-cluster wss.

    Raises:
        ValidationError: k out of range or missing values.
        ConvergenceError: fewer distinct points than k, or empty clusters after fitting.
    """
    X = _as_matrix(table)
    n_rows = X.shape[0]
    if not 1 <= k <= n_rows:
        raise ValidationError(
            f"k={k} is out of range: it must be between 1 and the number of rows ({n_rows}). "
            "Choose a smaller k."
        )
    n_distinct = len(np.unique(X, axis=0))
    if n_distinct < k:
        raise ConvergenceError(
            f"Cannot form {k} clusters from {n_distinct} distinct points. Choose a smaller k."
        )

    model = KMeans(n_clusters=k, random_state=seed, n_init=n_init, max_iter=max_iter)
    raw_labels = model.fit_predict(X)
    size = np.bincount(raw_labels, minlength=k)
    if (size == 0).any():
        raise ConvergenceError(
            f"K-means produced {int((size == 0).sum())} empty clusters for k={k} "
            f"after {max_iter} iterations. Choose a smaller k."
        )

    centers_arr = model.cluster_centers_
    sq_dist = ((X - centers_arr[raw_labels]) ** 2).sum(axis=1)
    withinss = np.bincount(raw_labels, weights=sq_dist, minlength=k)
    labels = raw_labels.astype(int) + 1
    centers = pd.DataFrame(
        centers_arr,
        columns=_feature_names(table, X.shape[1]),
        index=pd.Index(range(1, k + 1), name=params.CLUSTER_COL),
    )
    for arr in (labels, withinss, size):
        arr.setflags(write=False)
    _LOG.debug("k=%d seed=%d wss=%.4f iterations=%d", k, seed, withinss.sum(), model.n_iter_)
    return FitResult(
        k=k,
        seed=seed,
        labels=labels,
        centers=centers,
        withinss=withinss,
        size=size,
        n_iter=int(model.n_iter_),
        model=model,
    )


def _fit_wss(X: np.ndarray, count: int, seed: int, n_init: int, max_iter: int) -> Tuple[int, float]:
    return count, fit_kmeans(X, count, seed=seed, n_init=n_init, max_iter=max_iter).wss


def elbow_curve(
    table: TableLike,
    limit: int = params.LIMIT,
    seed: int = params.RANDOM_STATE,
    n_jobs: int = params.N_JOBS,
    n_init: int = params.KMEANS_N_INIT,
    max_iter: int = params.KMEANS_MAX_ITER,
) -> pd.DataFrame:
    """
    Within-cluster sum of squares for 1..limit clusters.

    n = 1 is the total sum of squares; every n >= 2 is an independent fit seeded with
    derive_seed(seed, n). Fits may run on ``n_jobs`` threads; each gets its own copy
    of the data and the output is ordered by n regardless of scheduling.

    Returns:
        DataFrame with columns ``n`` and ``wss``.
    """
    X = _as_matrix(table)
    n_rows = X.shape[0]
    if not 1 <= limit <= n_rows:
        raise ValidationError(
            f"limit={limit} is out of range: it must be between 1 and the number of rows ({n_rows}). "
            "Lower limit."
        )
    wss = {1: total_sum_of_squares(X)}
    counts = range(2, limit + 1)
    if len(counts):
        _LOG.info("Evaluating k-means for 2..%d clusters", limit)
        results = Parallel(n_jobs=n_jobs, prefer="threads")(
            delayed(_fit_wss)(X.copy(), c, derive_seed(seed, c), n_init, max_iter) for c in counts
        )
        wss.update(results)
    ns = list(range(1, limit + 1))
    return pd.DataFrame({"n": ns, "wss": [wss[n] for n in ns]})


def label_dataframe(
    prepared: PreparedData, fit: FitResult, label_col: str = params.CLUSTER_COL
) -> pd.DataFrame:
    """Excluded columns first, then the clustering features, then the label."""
    numeric, excluded, layout = prepared
    if label_col in layout.names():
        raise ConfigurationError(
            f"Label column '{label_col}' clashes with an existing column. Pass another label_col."
        )
    if len(fit.labels) != len(numeric):
        raise ValidationError(
            f"Fit has {len(fit.labels)} labels but the prepared table has {len(numeric)} rows."
        )
    out = pd.concat([excluded, numeric], axis=1)[layout.names()].copy()
    out[label_col] = pd.Categorical(fit.labels, categories=range(1, fit.k + 1))
    return out


def profile_clusters(labeled: pd.DataFrame, label_col: str = params.CLUSTER_COL) -> pd.DataFrame:
    """Mean of every numeric column per cluster plus the cluster size ``n``."""
    if label_col not in labeled.columns:
        raise ConfigurationError(f"Label column '{label_col}' not found in the labeled dataset.")
    nums = list(labeled.drop(columns=label_col).select_dtypes(include=[np.number]).columns)
    grouped = labeled.groupby(label_col, observed=True, sort=True)
    means = grouped[nums].mean()
    means["n"] = grouped.size().astype(int)
    return means.reset_index()


def cluster_correlations(labeled: pd.DataFrame, label_col: str = params.CLUSTER_COL) -> pd.DataFrame:
    """
    Correlate every cluster indicator with every other numeric column.

    Returns a long table (key, mix, corr) sorted by absolute correlation; constant
    columns are skipped since their correlation is undefined.
    """
    if label_col not in labeled.columns:
        raise ConfigurationError(f"Label column '{label_col}' not found in the labeled dataset.")
    dummies = pd.get_dummies(labeled[label_col], prefix=label_col, prefix_sep="_", dtype=int)
    others = labeled.drop(columns=label_col).select_dtypes(include=[np.number]).astype(float)
    others = others.loc[:, others.std() > 0]
    if others.empty:
        return pd.DataFrame(columns=["key", "mix", "corr"])
    corr = pd.concat([dummies, others], axis=1).corr().loc[dummies.columns, others.columns]
    long = (
        corr.rename_axis("key")
        .reset_index()
        .melt(id_vars="key", var_name="mix", value_name="corr")
        .dropna(subset=["corr"])
    )
    order = long["corr"].abs().sort_values(ascending=False, kind="stable").index
    return long.loc[order].reset_index(drop=True)
