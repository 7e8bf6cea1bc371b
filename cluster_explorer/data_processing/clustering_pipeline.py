"""
K-Means + PCA Clustering Pipeline

Structured pipeline that clusters a whole DataFrame:

    prepare_data -> compute_elbow -> fit -> analyze

Leave ``k`` unset to get only the elbow curve, inspect where it levels off, then
set ``k`` and run again. Any failure aborts the run; no partial results are kept.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

import pandas as pd

from ..errors import ValidationError
from . import clustering_params as params
from .clustering_utils import (
    FitResult,
    cluster_correlations,
    elbow_curve,
    fit_kmeans,
    label_dataframe,
    profile_clusters,
)
from .column_utils import ColumnLayout
from .pca_utils import ProjectionBundle, project
from .preprocessing import PreparedData, prepare

_LOG = logging.getLogger(__name__)


@dataclass
class ClusterResults:
    """In-memory result bundle of one pipeline run."""

    nclusters: pd.DataFrame
    df: pd.DataFrame
    clusters: Optional[int] = None
    fit: Optional[FitResult] = None
    means: Optional[pd.DataFrame] = None
    correlations: Optional[pd.DataFrame] = None
    pca: Optional[ProjectionBundle] = None
    layout: Optional[ColumnLayout] = None


@dataclass
class ClusteringPipeline:
    """
    Configurable k-means workflow over a single DataFrame.
    """

    # Configuration
    k: Optional[int] = None
    limit: int = params.LIMIT
    drop_na: bool = params.DROP_NA
    exclude: Optional[Iterable[str]] = None
    encode_categorical: bool = params.ENCODE_CATEGORICAL
    normalize: bool = params.NORMALIZE
    seed: int = params.RANDOM_STATE
    n_jobs: int = params.N_JOBS
    label_col: str = params.CLUSTER_COL
    ohse_limit: Optional[int] = params.OHSE_LIMIT
    min_variance_pct: float = params.PCA_MIN_VARIANCE_PCT

    # Data containers
    prepared: Optional[PreparedData] = field(default=None, repr=False)
    nclusters: Optional[pd.DataFrame] = field(default=None, repr=False)
    fit_result: Optional[FitResult] = field(default=None, repr=False)
    labeled: Optional[pd.DataFrame] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.exclude is not None and not isinstance(self.exclude, str):
            self.exclude = list(self.exclude)
        _LOG.debug(
            "Pipeline initialized: k=%s limit=%s seed=%s exclude=%s",
            self.k, self.limit, self.seed, self.exclude,
        )

    # Steps
    def prepare_data(self, df: pd.DataFrame) -> PreparedData:
        self.prepared = prepare(
            df,
            drop_na=self.drop_na,
            exclude=self.exclude,
            encode_categorical=self.encode_categorical,
            normalize=self.normalize,
            ohse_limit=self.ohse_limit,
        )
        self.nclusters = self.fit_result = self.labeled = None
        return self.prepared

    def compute_elbow(self) -> pd.DataFrame:
        if self.prepared is None:
            raise ValidationError("Data must be prepared first. Call prepare_data().")
        self.nclusters = elbow_curve(
            self.prepared.numeric, limit=self.limit, seed=self.seed, n_jobs=self.n_jobs
        )
        return self.nclusters

    def fit(self, k: Optional[int] = None) -> FitResult:
        if self.prepared is None:
            raise ValidationError("Data must be prepared first. Call prepare_data().")
        k = self.k if k is None else k
        if k is None:
            raise ValidationError("No cluster count selected. Pick k from the elbow curve and pass it.")
        self.k = k
        self.fit_result = fit_kmeans(self.prepared.numeric, k, seed=self.seed)
        self.labeled = label_dataframe(self.prepared, self.fit_result, label_col=self.label_col)
        _LOG.info("K-means completed with %d clusters (wss=%.4f)", k, self.fit_result.wss)
        return self.fit_result

    def analyze(self) -> ClusterResults:
        if self.labeled is None:
            raise ValidationError("No clustering results available. Call fit() first.")
        return ClusterResults(
            nclusters=self.nclusters,
            df=self.labeled,
            clusters=self.k,
            fit=self.fit_result,
            means=profile_clusters(self.labeled, label_col=self.label_col),
            correlations=cluster_correlations(self.labeled, label_col=self.label_col),
            pca=project(
                self.labeled,
                label_col=self.label_col,
                min_variance_pct=self.min_variance_pct,
                random_state=self.seed,
            ),
            layout=self.prepared.layout.with_label(self.label_col),
        )

    def run(self, df: pd.DataFrame) -> ClusterResults:
        prepared = self.prepare_data(df)
        nclusters = self.compute_elbow()
        if self.k is None:
            return ClusterResults(nclusters=nclusters, df=prepared.numeric, layout=prepared.layout)
        self.fit()
        return self.analyze()


def cluster_kmeans(
    df: pd.DataFrame,
    k: Optional[int] = None,
    limit: int = params.LIMIT,
    drop_na: bool = params.DROP_NA,
    exclude: Optional[Iterable[str]] = None,
    encode_categorical: bool = params.ENCODE_CATEGORICAL,
    normalize: bool = params.NORMALIZE,
    seed: int = params.RANDOM_STATE,
    n_jobs: int = params.N_JOBS,
) -> ClusterResults:
    """Cluster a whole DataFrame automatically; see ClusteringPipeline."""
    pipeline = ClusteringPipeline(
        k=k,
        limit=limit,
        drop_na=drop_na,
        exclude=exclude,
        encode_categorical=encode_categorical,
        normalize=normalize,
        seed=seed,
        n_jobs=n_jobs,
    )
    return pipeline.run(df)
