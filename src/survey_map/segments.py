"""Effort line lengths with cumulative distance."""

import geopandas as gpd

from .effort import ID_COLUMNS
from .errors import CRSMismatchError
from .models import EffortSummary


def summarize_effort(lines: gpd.GeoDataFrame) -> list[EffortSummary]:
    """Compute planar length per effort line and cumulative km in row order."""
    if lines.crs is None or not lines.crs.is_projected:
        raise CRSMismatchError("Effort lengths need a projected CRS; reproject the lines first")

    summaries: list[EffortSummary] = []
    cumulative_km = 0.0

    for row, geom in zip(lines[list(ID_COLUMNS)].itertuples(index=False), lines.geometry):
        index, label, date = row
        length_m = geom.length
        length_km = length_m / 1000

        summaries.append(
            EffortSummary(
                Index=int(index),
                LineLabel=str(label),
                Date=str(date),
                length_m=float(length_m),
                length_km=length_km,
                cumulative_km_start=cumulative_km,
                cumulative_km_end=cumulative_km + length_km,
            )
        )
        cumulative_km += length_km

    return summaries
