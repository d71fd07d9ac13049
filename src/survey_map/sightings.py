"""Sighting records: CSV loading, Effort classification and polygon subsetting."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import IO, Iterable

import geopandas as gpd
import pandas as pd

from .errors import EffortCategoryError
from .geometry import ensure_valid, require_same_crs
from .models import SightingRecord
from .tables import check_geographic_range, coerce_coordinates

logger = logging.getLogger(__name__)

EFFORT_LEVELS = ("ON", "OFF")
COORDINATE_COLUMNS = ("Lat", "Long")


def classify_effort(values: Iterable) -> pd.Categorical:
    """Map raw Effort values onto the ON/OFF categorical.

    Surrounding whitespace is ignored; anything else outside the two levels
    (including missing values) raises EffortCategoryError.
    """
    series = pd.Series(list(values), dtype="object")
    cleaned = series.map(lambda v: v.strip() if isinstance(v, str) else v)
    unknown = sorted({str(v) for v in cleaned if v not in EFFORT_LEVELS})
    if unknown:
        raise EffortCategoryError(f"Unknown Effort values: {unknown}", values=unknown)
    return pd.Categorical(cleaned, categories=list(EFFORT_LEVELS))


def sightings_from_frame(df: pd.DataFrame) -> gpd.GeoDataFrame:
    """Convert a Lat/Long/Effort frame to EPSG:4326 points."""
    coords = coerce_coordinates(df, COORDINATE_COLUMNS)
    check_geographic_range(coords["Long"], coords["Lat"])
    if "Effort" not in df.columns:
        raise EffortCategoryError("Missing Effort column")

    out = df.copy()
    out["Lat"] = coords["Lat"]
    out["Long"] = coords["Long"]
    out["Effort"] = classify_effort(out["Effort"])
    return gpd.GeoDataFrame(
        out,
        geometry=gpd.points_from_xy(out["Long"], out["Lat"]),
        crs="EPSG:4326",
    )


def sightings_from_records(records: list[SightingRecord]) -> gpd.GeoDataFrame:
    """Build EPSG:4326 sighting points from validated records."""
    return sightings_from_frame(pd.DataFrame([r.model_dump() for r in records]))


def read_sightings(source: str | Path | IO[str]) -> gpd.GeoDataFrame:
    """Read a sightings CSV with Lat, Long and Effort columns."""
    df = pd.read_csv(source)
    gdf = sightings_from_frame(df)
    logger.info("Loaded %d sightings (%s)", len(gdf), gdf["Effort"].value_counts().to_dict())
    return gdf


def subset_within(points: gpd.GeoDataFrame, polygons: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
    """Return the points lying within any of the polygons.

    Both tables must share a CRS and the polygons must already be valid.
    """
    require_same_crs(points, polygons)
    ensure_valid(polygons)

    area = polygons.geometry.union_all()
    inside = points[points.geometry.within(area)]
    logger.debug("%d of %d points inside polygons", len(inside), len(points))
    return inside
