"""Column checks shared by the CSV-backed tables."""

from __future__ import annotations

import pandas as pd

from .errors import CoordinateParseError


def coerce_coordinates(df: pd.DataFrame, columns: tuple[str, ...]) -> pd.DataFrame:
    """Return ``columns`` of ``df`` as floats.

    Raises CoordinateParseError for a missing column, or naming the first row
    with a missing or non-numeric value. No fallback value is substituted.
    """
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise CoordinateParseError(f"Missing coordinate columns: {missing}", columns=missing)

    numeric = df[list(columns)].apply(pd.to_numeric, errors="coerce")
    bad = numeric.isna()
    if bad.to_numpy().any():
        # positional lookup; index labels may repeat
        pos = int(bad.any(axis=1).to_numpy().argmax())
        row = df.index[pos]
        cols = [c for c, flag in zip(columns, bad.iloc[pos].to_numpy()) if flag]
        raise CoordinateParseError(
            f"Row {row}: missing or non-numeric coordinate in {cols}",
            row=row,
            columns=cols,
        )
    return numeric.astype(float)


def check_geographic_range(lon: pd.Series, lat: pd.Series) -> None:
    """Raise CoordinateParseError for the first lon/lat pair outside decimal-degree bounds."""
    out = ~(lon.between(-180, 180) & lat.between(-90, 90))
    if out.any():
        pos = int(out.to_numpy().argmax())
        row = lon.index[pos]
        raise CoordinateParseError(
            f"Row {row}: coordinate ({lon.iloc[pos]}, {lat.iloc[pos]}) is outside decimal-degree bounds",
            row=row,
            columns=[lon.name, lat.name],
        )
