"""Column identity tracking across the clustering pipeline.

Encoding grows the column set, exclusion shrinks it and labeling appends to it, so
positions are never stable. Each column therefore carries two tags:

- ``ColumnKind``: what the values are (numeric, categorical, date). Computed once
  at ingestion by ``infer_column_kinds`` and passed along with the frame.
- ``ColumnRole``: what the column does in the output (excluded identifier,
  clustering feature, cluster label). Kept in an ordered ``ColumnLayout``.
"""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

import pandas as pd
from pandas.api import types as ptypes


class ColumnKind(str, Enum):
    NUMERIC = "numeric"
    CATEGORICAL = "categorical"
    DATE = "date"


class ColumnRole(str, Enum):
    EXCLUDED = "excluded"
    FEATURE = "feature"
    LABEL = "label"


def _is_date_like(s: pd.Series) -> bool:
    if ptypes.is_datetime64_any_dtype(s):
        return True
    if s.dtype != object:
        return False
    values = s.dropna()
    return len(values) > 0 and all(isinstance(v, (dt.date, dt.datetime)) for v in values)


def infer_column_kinds(df: pd.DataFrame) -> Dict[str, ColumnKind]:
    """Tag every column once; booleans count as numeric."""
    kinds: Dict[str, ColumnKind] = {}
    for col in df.columns:
        s = df[col]
        if ptypes.is_bool_dtype(s) or ptypes.is_numeric_dtype(s):
            kinds[col] = ColumnKind.NUMERIC
        elif _is_date_like(s):
            kinds[col] = ColumnKind.DATE
        else:
            kinds[col] = ColumnKind.CATEGORICAL
    return kinds


def numeric_columns(kinds: Dict[str, ColumnKind]) -> List[str]:
    return [c for c, k in kinds.items() if k is ColumnKind.NUMERIC]


@dataclass(frozen=True)
class ColumnLayout:
    """Ordered ``(name, role)`` pairs: excluded first, then features, then the label."""

    columns: Tuple[Tuple[str, ColumnRole], ...] = ()

    def names(self, role: Optional[ColumnRole] = None) -> List[str]:
        return [name for name, r in self.columns if role is None or r is role]

    @property
    def excluded(self) -> List[str]:
        return self.names(ColumnRole.EXCLUDED)

    @property
    def features(self) -> List[str]:
        return self.names(ColumnRole.FEATURE)

    @property
    def label(self) -> Optional[str]:
        labels = self.names(ColumnRole.LABEL)
        return labels[0] if labels else None

    def with_features(self, names: Iterable[str]) -> "ColumnLayout":
        kept = [(n, r) for n, r in self.columns if r is ColumnRole.EXCLUDED]
        return ColumnLayout(tuple(kept + [(n, ColumnRole.FEATURE) for n in names]))

    def with_label(self, name: str) -> "ColumnLayout":
        kept = [(n, r) for n, r in self.columns if r is not ColumnRole.LABEL]
        return ColumnLayout(tuple(kept + [(name, ColumnRole.LABEL)]))

    @classmethod
    def from_frame(cls, df: pd.DataFrame, exclude: Iterable[str] = ()) -> "ColumnLayout":
        """Excluded columns keep the frame's relative order, not the caller's list order."""
        exclude = set(exclude)
        excluded = [(c, ColumnRole.EXCLUDED) for c in df.columns if c in exclude]
        features = [(c, ColumnRole.FEATURE) for c in df.columns if c not in exclude]
        return cls(tuple(excluded + features))
