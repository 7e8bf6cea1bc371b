"""
clustering_visualization_utils.py

Diagnostic charts for the k-means + PCA pipeline.

Key functions
-------------
- plot_elbow_curve(nclusters, k): wss per cluster count, optional selected-k line
- plot_pca_variance(bundle): cumulative variance explained by component (0-100%)
- plot_pca_clusters(bundle): PC1 vs PC2 scatter with a confidence ellipse per cluster

Every function returns the matplotlib Figure; nothing is shown or saved here so
notebooks decide what to do with it.
"""
from __future__ import annotations

from typing import Optional

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns
from matplotlib.patches import Ellipse
from matplotlib.ticker import FuncFormatter
from scipy.stats import chi2

from ..errors import ValidationError
from . import clustering_params as params
from .pca_utils import ProjectionBundle

THOUSANDS = FuncFormatter(lambda v, _: f"{v:,.0f}")


def _color_cycle(n: int):
    return sns.color_palette("tab10", max(n, 1))


def plot_elbow_curve(nclusters: pd.DataFrame, k: Optional[int] = None, figsize=(8, 5)):
    fig, ax = plt.subplots(figsize=figsize)
    ax.plot(nclusters["n"], nclusters["wss"], color="black", linewidth=1)
    ax.scatter(nclusters["n"], nclusters["wss"], color="black", s=20, zorder=3)
    subtitle = "Where does the curve level?"
    if k is not None:
        selected = nclusters.loc[nclusters["n"] == k, "wss"]
        if not selected.empty:
            ax.axhline(selected.iloc[0], color="red", linewidth=1)
        subtitle = f"Number of clusters selected: {k}"
    fig.suptitle("Total Number of Clusters", fontweight="bold")
    ax.set_title(subtitle, fontsize=10)
    ax.set_xlabel("Number of Clusters")
    ax.set_ylabel("Within Groups Sum of Squares")
    ax.yaxis.set_major_formatter(THOUSANDS)
    ax.grid(alpha=0.3)
    return fig


def plot_pca_variance(bundle: ProjectionBundle, figsize=(8, 5)):
    cum = bundle.cumulative
    fig, ax = plt.subplots(figsize=figsize)
    ax.plot(cum["id"], cum["cumulative"], color="black", linewidth=1)
    ax.scatter(cum["id"], cum["cumulative"], color="black", s=20, zorder=3)
    ax.set_ylim(0, 100)
    ax.set_xticks(list(cum["id"]))
    fig.suptitle("Principal Component Analysis", fontweight="bold")
    ax.set_title("Percentage of Variation Explained by Components", fontsize=10)
    ax.set_xlabel("PC(i)")
    ax.set_ylabel("Cumulative variation explained [%]")
    ax.grid(alpha=0.3)
    return fig


def confidence_ellipse(points: np.ndarray, confidence: float = params.ELLIPSE_CONFIDENCE, **kwargs) -> Optional[Ellipse]:
    """Ellipse covering ``confidence`` of a 2-D gaussian fitted to ``points``."""
    if len(points) < 3:
        return None
    mean = points.mean(axis=0)
    cov = np.cov(points, rowvar=False)
    eigenvalues, eigenvectors = np.linalg.eigh(cov)
    order = eigenvalues.argsort()[::-1]
    eigenvalues = eigenvalues[order]
    eigenvectors = eigenvectors[:, order]
    angle = np.degrees(np.arctan2(eigenvectors[1, 0], eigenvectors[0, 0]))
    radius = np.sqrt(chi2.ppf(confidence, df=2))
    width = 2 * radius * np.sqrt(max(eigenvalues[0], 0))
    height = 2 * radius * np.sqrt(max(eigenvalues[1], 0))
    return Ellipse(xy=mean, width=width, height=height, angle=angle, **kwargs)


def plot_pca_clusters(
    bundle: ProjectionBundle,
    confidence: float = params.ELLIPSE_CONFIDENCE,
    figsize=(8, 6),
):
    if len(bundle.components) < 2:
        raise ValidationError(
            "Only one principal component was retained; a PC1 vs PC2 scatter needs two. "
            "Lower min_variance_pct to keep more components."
        )
    label_col = bundle.label_col
    pcadf = bundle.pcadf
    clusters = list(pd.unique(pcadf[label_col]))
    try:
        clusters = sorted(clusters)
    except TypeError:
        pass
    colors = dict(zip(clusters, _color_cycle(len(clusters))))

    fig, ax = plt.subplots(figsize=figsize)
    sns.scatterplot(
        data=pcadf, x="PC1", y="PC2", hue=label_col, hue_order=clusters,
        palette=colors, ax=ax, s=25, edgecolor=None,
    )
    for cid in clusters:
        pts = pcadf.loc[pcadf[label_col] == cid, ["PC1", "PC2"]].to_numpy()
        ellipse = confidence_ellipse(
            pts, confidence, facecolor=colors[cid], edgecolor=colors[cid],
            alpha=0.15, linewidth=2, linestyle="--",
        )
        if ellipse is not None:
            ax.add_patch(ellipse)
            cx, cy = pts.mean(axis=0)
            ax.annotate(
                str(cid), (cx, cy), color="white", fontweight="bold", ha="center", va="center",
                bbox=dict(boxstyle="round", facecolor="black"),
            )
    explained = bundle.explained
    ax.set_xlabel(f"PC1 ({explained['PC1']:.1f}%)")
    ax.set_ylabel(f"PC2 ({explained['PC2']:.1f}%)")
    ax.set_title("Principal Component Analysis", fontweight="bold")
    ax.legend(title="Cluster")
    ax.grid(alpha=0.3)
    return fig
