"""Shapefile reader producing GeoDataFrames with CRS taken from the .prj."""

from __future__ import annotations

import logging
from pathlib import Path

import geopandas as gpd
import shapefile
from pyproj import CRS
from pyproj.exceptions import CRSError
from shapely.geometry import shape as to_shape

from .models import LayerMetadata

logger = logging.getLogger(__name__)


def detect_crs(prj_source: str | Path | None) -> tuple[int | None, str | None, bool | None]:
    """Parse CRS from a .prj WKT string or file path.

    Returns (epsg_code, crs_name, is_projected) or (None, None, None) on failure.
    """
    crs = _parse_prj(prj_source)
    if crs is None:
        return None, None, None
    return crs.to_epsg(), crs.name, crs.is_projected


def _parse_prj(prj_source: str | Path | None) -> CRS | None:
    if prj_source is None:
        return None

    wkt = prj_source if isinstance(prj_source, str) else ""
    if isinstance(prj_source, Path):
        if not prj_source.exists():
            return None
        wkt = prj_source.read_text()

    if not wkt.strip():
        return None

    try:
        return CRS.from_wkt(wkt)
    except CRSError:
        logger.warning("Unparseable .prj content, leaving CRS unset")
        return None


def _shp_path(shp_path: Path) -> Path:
    # pyshp strips the last suffix itself, so dotted stems need ".shp" attached
    if shp_path.suffix.lower() == ".shp":
        return shp_path
    return shp_path.parent / f"{shp_path.name}.shp"


def read_shapefile(
    shp_path: str | Path,
    *,
    crs: str | int | None = None,
) -> tuple[gpd.GeoDataFrame, LayerMetadata]:
    """Read a shapefile into a GeoDataFrame plus layer metadata.

    The CRS comes from the companion .prj file. Pass ``crs`` to override it
    (or to supply one when the .prj is missing).
    """
    shp = _shp_path(Path(shp_path))

    with shapefile.Reader(str(shp)) as sf:
        shape_type_name = sf.shapeTypeName
        fields = [f[0] for f in sf.fields[1:]]  # skip DeletionFlag
        records = []
        geometries = []
        for sr in sf.iterShapeRecords():
            records.append(sr.record.as_dict())
            geometries.append(_shape_geometry(sr.shape))

    if crs is not None:
        layer_crs = CRS.from_user_input(crs)
    else:
        layer_crs = _parse_prj(shp.with_suffix(".prj"))

    gdf = gpd.GeoDataFrame(records, columns=fields, geometry=geometries, crs=layer_crs)

    metadata = LayerMetadata(
        source=shp.stem,
        shape_type_name=shape_type_name,
        crs_epsg=layer_crs.to_epsg() if layer_crs is not None else None,
        crs_name=layer_crs.name if layer_crs is not None else None,
        is_projected=layer_crs.is_projected if layer_crs is not None else None,
        num_features=len(gdf),
        fields=fields,
    )
    logger.debug("Read %d %s features from %s", len(gdf), shape_type_name, shp)
    return gdf, metadata


def _shape_geometry(shp: shapefile.Shape):
    """Convert a pyshp shape to a shapely geometry (None for NULL shapes)."""
    if shp.shapeType == shapefile.NULL:
        return None
    return to_shape(shp.__geo_interface__)


def read_shapefile_dir(directory: str | Path) -> dict[str, tuple[gpd.GeoDataFrame, LayerMetadata]]:
    """Read every shapefile in a directory, keyed by file stem."""
    directory = Path(directory)
    shp_files = sorted(p for p in directory.iterdir() if p.suffix.lower() == ".shp")
    if not shp_files:
        raise FileNotFoundError(f"No .shp file found in {directory}")
    return {p.stem: read_shapefile(p) for p in shp_files}
