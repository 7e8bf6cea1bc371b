"""One hot encoding for mixed-type frames.

Turns every non-numeric column into numeric indicator columns so the frame can be
fed to distance-based clustering:

- numeric columns pass through unchanged (booleans become 0/1)
- categorical columns keep their ``limit`` most frequent levels, the rest are
  lumped into ``other_label``, then expand to ``<col>_<level>`` indicators
- date columns expand to year / month / day / weekday / day-of-year parts

With ``drop_redundant`` one indicator per original column is dropped (the first
level in sorted order), so a 3-level column yields 2 indicator columns.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional

import pandas as pd

from . import clustering_params as params
from .column_utils import ColumnKind, infer_column_kinds

_LOG = logging.getLogger(__name__)

DATE_PARTS = ("year", "month", "day", "weekday", "yday")


def expand_dates(s: pd.Series, sep: str = "_") -> pd.DataFrame:
    d = pd.to_datetime(s, errors="coerce")
    parts = {
        "year": d.dt.year,
        "month": d.dt.month,
        "day": d.dt.day,
        "weekday": d.dt.dayofweek,
        "yday": d.dt.dayofyear,
    }
    return pd.DataFrame({f"{s.name}{sep}{p}": parts[p] for p in DATE_PARTS}, index=s.index)


def lump_levels(s: pd.Series, limit: Optional[int], other_label: str = "OTHER") -> pd.Series:
    """Keep the ``limit`` most frequent levels, replace the rest with ``other_label``."""
    values = s.astype(object).map(lambda v: v if pd.isna(v) else str(v))
    if not limit or values.nunique() <= limit:
        return values
    top = values.value_counts().index[:limit]
    return values.where(values.isin(top) | values.isna(), other_label)


def one_hot_encode(
    df: pd.DataFrame,
    kinds: Optional[Dict[str, ColumnKind]] = None,
    limit: Optional[int] = params.OHSE_LIMIT,
    drop_redundant: bool = params.OHSE_DROP_REDUNDANT,
    dates: bool = params.OHSE_EXPAND_DATES,
    other_label: str = params.OHSE_OTHER_LABEL,
    sep: str = "_",
) -> pd.DataFrame:
    """Return a fully numeric copy of ``df``.

    Args:
        df: Input frame.
        kinds: Pre-computed column kinds; inferred when missing.
        limit: Max levels kept per categorical column (None keeps all).
        drop_redundant: Drop one indicator per categorical column.
        dates: Expand date columns into numeric parts (False drops them).
        other_label: Level name for lumped infrequent values.
        sep: Separator between column name and level / date part.

    Returns:
        DataFrame with the original row index; encoded columns replace their source
        column in place so the relative column order is preserved.
    """
    if kinds is None:
        kinds = infer_column_kinds(df)
    parts: List[pd.DataFrame] = []
    for col in df.columns:
        s = df[col]
        kind = kinds.get(col, ColumnKind.CATEGORICAL)
        if kind is ColumnKind.NUMERIC:
            parts.append(s.astype(int).to_frame() if s.dtype == bool else s.to_frame())
        elif kind is ColumnKind.DATE:
            if dates:
                parts.append(expand_dates(s, sep=sep))
            else:
                _LOG.debug("Dropping date column '%s' (dates=False)", col)
        else:
            values = lump_levels(s, limit, other_label)
            dummies = pd.get_dummies(
                values, prefix=str(col), prefix_sep=sep, drop_first=drop_redundant, dtype=int
            )
            _LOG.debug("Encoded '%s' into %d indicator columns", col, dummies.shape[1])
            parts.append(dummies)
    if not parts:
        return pd.DataFrame(index=df.index)
    return pd.concat(parts, axis=1)
