"""Effort-line builder: begin/end coordinate columns to two-point line geometries.

Survey effort tables carry one row per segment with four decimal-degree
columns (``LatD_Beg``, ``LatD_End``, ``LongD_Beg``, ``LongD_End``). The
builder melts those columns to long form, widens them back on the lat/lon
axis so each segment has a ``begin`` and an ``end`` row, turns each row into
a point, reprojects, and joins the two points of a segment into a line.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import IO

import geopandas as gpd
import pandas as pd
from shapely.geometry import LineString

from .errors import GroupingCardinalityError, SurveyMapError
from .models import SegmentRecord
from .tables import check_geographic_range, coerce_coordinates

logger = logging.getLogger(__name__)

ID_COLUMNS = ("Index", "LineLabel", "Date")
COORDINATE_COLUMNS = ("LatD_Beg", "LatD_End", "LongD_Beg", "LongD_End")
ROLES = ("begin", "end")
GEOGRAPHIC_EPSG = 4326
DEFAULT_TARGET_EPSG = 32724  # WGS 84 / UTM zone 24S

_AXIS = {"LatD": "lat", "LongD": "lon"}
_ROLE = {"Beg": "begin", "End": "end"}
_ORDER = "segment_order"


def read_effort_segments(source: str | Path | IO[str]) -> pd.DataFrame:
    """Read an effort CSV, keeping LineLabel and Date as text."""
    return pd.read_csv(source, dtype={"LineLabel": str, "Date": str})


def segments_from_records(records: list[SegmentRecord]) -> pd.DataFrame:
    """Build a segment table from validated records, columns in the CSV layout."""
    return pd.DataFrame(
        [r.model_dump() for r in records],
        columns=[*ID_COLUMNS, *COORDINATE_COLUMNS],
    )


def pivot_roles(segments: pd.DataFrame) -> pd.DataFrame:
    """Split each segment row into a begin row and an end row.

    Returns one row per (segment, role) with ``lon`` and ``lat`` columns plus
    the identifiers, ordered by input row and then begin before end.
    """
    missing = [c for c in ID_COLUMNS if c not in segments.columns]
    if missing:
        raise SurveyMapError(f"Missing identifier columns: {missing}")

    coords = coerce_coordinates(segments, COORDINATE_COLUMNS)
    check_geographic_range(coords["LongD_Beg"], coords["LatD_Beg"])
    check_geographic_range(coords["LongD_End"], coords["LatD_End"])

    wide = segments[list(ID_COLUMNS)].copy()
    wide[list(COORDINATE_COLUMNS)] = coords
    wide[_ORDER] = range(len(wide))

    long = wide.melt(
        id_vars=[_ORDER, *ID_COLUMNS],
        value_vars=list(COORDINATE_COLUMNS),
        var_name="column",
        value_name="value",
    )
    parts = long["column"].str.split("_", n=1, expand=True)
    long["axis"] = parts[0].map(_AXIS)
    long["role"] = parts[1].map(_ROLE)

    roles = long.pivot(index=[_ORDER, *ID_COLUMNS, "role"], columns="axis", values="value").reset_index()
    roles.columns.name = None
    roles["role"] = pd.Categorical(roles["role"], categories=list(ROLES), ordered=True)
    roles = roles.sort_values([_ORDER, "role"], ignore_index=True)
    return roles[[_ORDER, *ID_COLUMNS, "role", "lon", "lat"]]


def check_role_cardinality(roles: pd.DataFrame) -> None:
    """Raise GroupingCardinalityError unless every group has one begin and one end row."""
    role_names = roles["role"].astype(str)
    unknown = sorted(set(role_names) - set(ROLES))
    if unknown:
        raise GroupingCardinalityError(f"Unknown roles: {unknown}")

    counts = (
        roles.assign(role=role_names)
        .groupby([*ID_COLUMNS, "role"], dropna=False)
        .size()
        .unstack("role", fill_value=0)
        .reindex(columns=list(ROLES), fill_value=0)
    )
    bad = counts[(counts != 1).any(axis=1)]
    if not bad.empty:
        keys = list(bad.index)
        raise GroupingCardinalityError(
            f"{len(keys)} segment groups without exactly one begin and one end: {keys[:5]}",
            keys=keys,
        )


def role_points(roles: pd.DataFrame, target_epsg: int = DEFAULT_TARGET_EPSG) -> gpd.GeoDataFrame:
    """Build EPSG:4326 points from role rows and reproject them to ``target_epsg``."""
    points = gpd.GeoDataFrame(
        roles,
        geometry=gpd.points_from_xy(roles["lon"], roles["lat"]),
        crs=f"EPSG:{GEOGRAPHIC_EPSG}",
    )
    return points.to_crs(epsg=target_epsg)


def build_effort_lines(
    segments: pd.DataFrame,
    target_epsg: int = DEFAULT_TARGET_EPSG,
) -> gpd.GeoDataFrame:
    """Convert a segment table to one begin-to-end LineString per (Index, LineLabel, Date).

    Output rows follow the first appearance of each key in the input.
    """
    crs = f"EPSG:{target_epsg}"
    if segments.empty:
        return gpd.GeoDataFrame(columns=[*ID_COLUMNS, "geometry"], geometry="geometry", crs=crs)

    roles = pivot_roles(segments)
    check_role_cardinality(roles)
    points = role_points(roles, target_epsg)

    rows = []
    geometries = []
    for key, group in points.groupby(list(ID_COLUMNS), sort=False, dropna=False):
        group = group.sort_values("role")
        rows.append(dict(zip(ID_COLUMNS, key)))
        geometries.append(LineString([(p.x, p.y) for p in group.geometry]))

    lines = gpd.GeoDataFrame(rows, columns=list(ID_COLUMNS), geometry=geometries, crs=points.crs)
    logger.info("Built %d effort lines in %s", len(lines), crs)
    return lines
