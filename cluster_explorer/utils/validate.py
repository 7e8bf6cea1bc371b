from __future__ import annotations
import pandas as pd

from ..errors import ConfigurationError, ValidationError


def expect_columns(df: pd.DataFrame, cols: list[str], option: str = "columns") -> None:
    missing = [c for c in cols if c not in df.columns]
    if missing:
        raise ConfigurationError(f"Unknown {option}: {missing}. Available: {list(df.columns)}")


def expect_non_empty(df: pd.DataFrame) -> None:
    if df.empty:
        raise ValidationError("DataFrame is empty")


def expect_no_missing(df: pd.DataFrame) -> None:
    n_missing = int(df.isna().sum().sum())
    if n_missing:
        raise ValidationError(
            f"There should be no NAs in your dataframe ({n_missing} found). "
            "You can manually fix it or set drop_na=True to remove these rows."
        )
