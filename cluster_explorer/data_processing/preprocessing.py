"""
Preprocessing for distance-based clustering.

Turns an arbitrary DataFrame into a fully numeric, NA-free feature table plus a
side table of excluded (identifier) columns. Steps, in order:

1. missing values: drop offending rows or fail
2. encoding: one hot encode non-numeric columns, or drop them
3. normalization: min-max every column, then fill unscalable columns
4. exclusion: split caller-named columns off into the side table

Excluded numeric columns go through steps 2-3 like any other column, so they come
back on the same scale as the features. Excluded non-numeric columns (string
identifiers) are kept out of encoding and come back with their raw values.
"""
from __future__ import annotations

import logging
from typing import Dict, Iterable, NamedTuple, Optional

import pandas as pd

from ..errors import ConfigurationError, ValidationError
from ..utils.validate import expect_columns, expect_no_missing, expect_non_empty
from . import clustering_params as params
from .column_utils import ColumnKind, ColumnLayout, infer_column_kinds, numeric_columns
from .encoding_utils import one_hot_encode
from .normalization_utils import fill_unscalable, normalize_frame

_LOG = logging.getLogger(__name__)


class PreparedData(NamedTuple):
    numeric: pd.DataFrame
    excluded: pd.DataFrame
    layout: ColumnLayout


def drop_missing_rows(df: pd.DataFrame, drop_na: bool = params.DROP_NA) -> pd.DataFrame:
    if not df.isna().any().any():
        return df
    if not drop_na:
        expect_no_missing(df)
    out = df.dropna(axis=0, how="any")
    _LOG.info(
        "Automatically removed %d rows with NA. To overwrite: fix NAs and set drop_na=False",
        len(df) - len(out),
    )
    if out.empty:
        raise ValidationError("Every row contains at least one NA; nothing left to cluster.")
    return out


def _as_list(names: Optional[Iterable[str]]) -> list:
    if names is None:
        return []
    if isinstance(names, str):
        return [names]
    return list(names)


def prepare(
    df: pd.DataFrame,
    drop_na: bool = params.DROP_NA,
    exclude: Optional[Iterable[str]] = None,
    encode_categorical: bool = params.ENCODE_CATEGORICAL,
    normalize: bool = params.NORMALIZE,
    kinds: Optional[Dict[str, ColumnKind]] = None,
    ohse_limit: Optional[int] = params.OHSE_LIMIT,
    fill_value: float = params.NA_FILL_VALUE,
) -> PreparedData:
    """
    Validate and convert a dataset into clustering-ready numeric features.

    Args:
        df: Input dataset.
        drop_na: Remove rows with missing values instead of raising ValidationError.
        exclude: Column names kept out of every numeric computation (e.g. identifiers).
        encode_categorical: One hot encode non-numeric columns; False drops them.
        normalize: Min-max normalize every feature column to [0, 1].
        kinds: Column kinds overriding the ones inferred from ``df``.
        ohse_limit: Max levels kept per categorical column when encoding.
        fill_value: Replacement for columns that cannot be normalized.

    Returns:
        PreparedData(numeric, excluded, layout). ``numeric`` and ``excluded`` share the
        row index of the surviving rows; ``layout`` records excluded and feature column
        names in output order.
    """
    expect_non_empty(df)
    exclude = _as_list(exclude)
    expect_columns(df, exclude, option="excluded columns")
    if exclude and len(set(exclude)) >= df.shape[1]:
        raise ConfigurationError("Every column is excluded; at least one column must remain for clustering.")

    kinds = {**infer_column_kinds(df), **(kinds or {})}

    df = drop_missing_rows(df, drop_na=drop_na)

    layout = ColumnLayout.from_frame(df, exclude)
    # non-numeric identifiers are never encoded; they ride along untouched
    passthrough = [c for c in layout.excluded if kinds[c] is not ColumnKind.NUMERIC]
    work = df.drop(columns=passthrough)
    work_kinds = {c: kinds[c] for c in work.columns}

    nums = numeric_columns(work_kinds)
    if len(nums) != work.shape[1]:
        if encode_categorical:
            work = one_hot_encode(work, work_kinds, limit=ohse_limit)
            _LOG.info("One hot encoding applied...")
        else:
            dropped = [c for c in work.columns if c not in nums]
            _LOG.debug("Dropping non-numeric columns: %s", dropped)
            work = work[nums]
    work = work.astype(float)

    if normalize:
        work = fill_unscalable(normalize_frame(work), value=fill_value)

    numeric_excluded = [c for c in layout.excluded if c not in passthrough]
    features = work.drop(columns=numeric_excluded)
    if features.shape[1] == 0:
        raise ValidationError(
            "No numeric columns remain after preprocessing. "
            "Set encode_categorical=True or exclude fewer columns."
        )
    excluded = pd.concat([work[numeric_excluded], df[passthrough]], axis=1)[layout.excluded]
    if layout.excluded:
        _LOG.info("Ignored only for kmeans: %s", ", ".join(map(str, layout.excluded)))

    return PreparedData(features, excluded, layout.with_features(features.columns))
