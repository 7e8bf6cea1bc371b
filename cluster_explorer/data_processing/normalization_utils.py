import numpy as np
import pandas as pd


def normalize(s: pd.Series) -> pd.Series:
    """
    Min-max rescale a numeric column to [0, 1].

    A constant column has no range to scale by and comes back as all NaN; callers
    decide what to do with it (see fill_unscalable).
    """
    x = pd.to_numeric(s, errors="coerce").astype(float)
    span = x.max() - x.min()
    if not np.isfinite(span) or span == 0:
        return pd.Series(np.nan, index=s.index, name=s.name)
    return (x - x.min()) / span


def normalize_frame(df: pd.DataFrame) -> pd.DataFrame:
    return df.apply(normalize, axis=0)


def fill_unscalable(df: pd.DataFrame, value: float = 0.0) -> pd.DataFrame:
    """Replace the NaN left behind by normalize() with a constant."""
    return df.fillna(value)
