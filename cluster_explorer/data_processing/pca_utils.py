"""
Principal component projection of a clustered dataset.

The labeled dataset is standardized (center + unit variance) and fully decomposed.
Components explaining more than ``min_variance_pct`` percent of the variance are
kept in the scored table, next to the cluster label, for 2-D/3-D inspection. The
cumulative series always covers every component so the scree chart ends at 100%.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List

import numpy as np
import pandas as pd
from sklearn.decomposition import PCA
from sklearn.preprocessing import StandardScaler

from ..errors import ConfigurationError, ValidationError
from . import clustering_params as params

_LOG = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class PcaDecomposition:
    """Raw decomposition; ``scale`` is the sample SD (ddof=1) and sdev**2 sums to the feature count."""

    rotation: pd.DataFrame  # loadings, features x components
    center: pd.Series
    scale: pd.Series
    sdev: np.ndarray
    model: Any


@dataclass(frozen=True, eq=False)
class ProjectionBundle:
    pcadf: pd.DataFrame
    explained: pd.Series
    cumulative: pd.DataFrame
    decomposition: PcaDecomposition
    label_col: str = params.CLUSTER_COL

    @property
    def components(self) -> List[str]:
        """Retained component columns of ``pcadf``."""
        return [c for c in self.pcadf.columns if c != self.label_col]


def zero_variance_columns(df: pd.DataFrame) -> List[str]:
    return [c for c in df.columns if df[c].nunique(dropna=True) <= 1]


def project(
    labeled: pd.DataFrame,
    label_col: str = params.CLUSTER_COL,
    min_variance_pct: float = params.PCA_MIN_VARIANCE_PCT,
    random_state: int = params.RANDOM_STATE,
) -> ProjectionBundle:
    """
    Run PCA on the numeric, non-constant columns of a labeled dataset.

    Args:
        labeled: Dataset with an appended cluster label column.
        label_col: Name of the label column; never decomposed, always kept.
        min_variance_pct: Components must explain strictly more than this many
            percent of the variance to be kept. PC1 is always kept.
        random_state: Passed to sklearn's PCA for solver reproducibility.

    Returns:
        ProjectionBundle whose ``pcadf`` rows align 1:1 with ``labeled``.
    """
    if label_col not in labeled.columns:
        raise ConfigurationError(f"Label column '{label_col}' not found in the labeled dataset.")
    features = labeled.drop(columns=label_col).select_dtypes(include=[np.number])
    constant = zero_variance_columns(features)
    if constant:
        _LOG.info("Dropping zero-variance columns before PCA: %s", ", ".join(map(str, constant)))
        features = features.drop(columns=constant)
    if features.shape[1] == 0:
        raise ValidationError("No numeric column with non-zero variance is left for PCA.")
    if features.isna().any().any():
        raise ValidationError("PCA input contains missing values.")

    if len(features) < 2:
        raise ValidationError("PCA needs at least two rows.")

    # StandardScaler divides by the population SD; rescale to the sample SD (ddof=1)
    n_rows = len(features)
    ddof_factor = np.sqrt(n_rows / (n_rows - 1))
    scaler = StandardScaler()
    Z = scaler.fit_transform(features.to_numpy(dtype=float)) / ddof_factor
    pca = PCA(random_state=random_state)
    scores = pca.fit_transform(Z)

    names = [f"PC{i + 1}" for i in range(pca.n_components_)]
    variance = pca.explained_variance_
    explained = pd.Series(np.round(100 * variance / variance.sum(), 4), index=names, name="explained")

    keep = np.array(explained.to_numpy() > min_variance_pct, dtype=bool)
    keep[0] = True
    retained = [n for n, k in zip(names, keep) if k]
    _LOG.info("PCA: keeping %d of %d components (> %s%% variance each)", len(retained), len(names), min_variance_pct)

    pcadf = pd.DataFrame(scores[:, keep], columns=retained, index=labeled.index)
    pcadf[label_col] = labeled[label_col]

    cumulative = pd.DataFrame({
        "id": range(1, len(names) + 1),
        "PC": names,
        "amount": explained.to_numpy(),
        "cumulative": explained.cumsum().to_numpy(),
    })

    decomposition = PcaDecomposition(
        rotation=pd.DataFrame(pca.components_.T, index=features.columns, columns=names),
        center=pd.Series(scaler.mean_, index=features.columns, name="center"),
        scale=pd.Series(scaler.scale_ * ddof_factor, index=features.columns, name="scale"),
        sdev=np.sqrt(variance),
        model=pca,
    )
    return ProjectionBundle(pcadf, explained, cumulative, decomposition, label_col=label_col)
