"""Geometry repair, CRS checks and reprojection for GeoDataFrames."""

from __future__ import annotations

import logging

import geopandas as gpd
from shapely.geometry import GeometryCollection, MultiPolygon, Polygon
from shapely.ops import unary_union

from .errors import CRSMismatchError, MalformedGeometryError

logger = logging.getLogger(__name__)

POLYGONAL = ("Polygon", "MultiPolygon")


def _polygonal_parts(geom):
    """Keep only the polygon parts of a repaired geometry."""
    if geom is None or geom.geom_type in POLYGONAL:
        return geom
    if isinstance(geom, GeometryCollection):
        parts = [g for g in geom.geoms if g.geom_type in POLYGONAL]
        if not parts:
            return Polygon()
        merged = unary_union(parts)
        return merged if merged.geom_type in POLYGONAL else MultiPolygon()
    return Polygon()


def repair_geometries(gdf: gpd.GeoDataFrame, tolerance: float = 0.0) -> gpd.GeoDataFrame:
    """Make every geometry valid and simplify it.

    Polygon layers stay polygonal: slivers that collapse to lines or points
    during repair are dropped from the geometry. ``tolerance`` is in CRS units.
    """
    invalid = int((~gdf.geometry.is_valid).sum())
    repaired = gdf.copy()
    geoms = repaired.geometry.make_valid()

    if gdf.geometry.geom_type.isin(POLYGONAL).all():
        geoms = geoms.apply(_polygonal_parts)
    geoms = gpd.GeoSeries(geoms, crs=gdf.crs, index=gdf.index)

    if tolerance > 0:
        geoms = geoms.simplify(tolerance, preserve_topology=True)

    repaired[gdf.geometry.name] = geoms
    ensure_valid(repaired)
    if invalid:
        logger.info("Repaired %d invalid geometries", invalid)
    return repaired


def ensure_valid(gdf: gpd.GeoDataFrame) -> None:
    """Raise MalformedGeometryError if any geometry is missing, empty or invalid."""
    geoms = gdf.geometry
    bad = geoms.isna() | geoms.is_empty | ~geoms.is_valid
    if bad.any():
        rows = list(gdf.index[bad])
        raise MalformedGeometryError(
            f"{len(rows)} invalid geometries (rows {rows[:10]}); run repair_geometries first",
            rows=rows,
        )


def require_same_crs(*frames: gpd.GeoDataFrame) -> None:
    """Raise CRSMismatchError unless every frame has the same, set CRS."""
    crs_list = [f.crs for f in frames]
    if any(c is None for c in crs_list):
        raise CRSMismatchError("Spatial operation on a table with no CRS")
    first = crs_list[0]
    for other in crs_list[1:]:
        if other != first:
            raise CRSMismatchError(f"CRS mismatch: {first.to_string()} vs {other.to_string()}")


def reproject(gdf: gpd.GeoDataFrame, epsg: int) -> gpd.GeoDataFrame:
    """Reproject to ``EPSG:<epsg>``; the source CRS must be set."""
    if gdf.crs is None:
        raise CRSMismatchError("Cannot reproject a table with no CRS")
    return gdf.to_crs(epsg=epsg)
