"""Survey effort and sighting maps from shapefiles and coordinate CSVs."""

from .config import ESRI_OCEAN_BASEMAP, MapSettings
from .effort import (
    build_effort_lines,
    check_role_cardinality,
    pivot_roles,
    read_effort_segments,
    role_points,
    segments_from_records,
)
from .errors import (
    CoordinateParseError,
    CRSMismatchError,
    EffortCategoryError,
    GroupingCardinalityError,
    MalformedGeometryError,
    SurveyMapError,
)
from .geometry import ensure_valid, repair_geometries, reproject, require_same_crs
from .mapping import MapLayer, nice_scale_length, render_map
from .models import EffortSummary, LayerMetadata, SegmentRecord, SightingRecord
from .reader import detect_crs, read_shapefile, read_shapefile_dir
from .segments import summarize_effort
from .sightings import (
    EFFORT_LEVELS,
    classify_effort,
    read_sightings,
    sightings_from_frame,
    sightings_from_records,
    subset_within,
)

__all__ = [
    "CRSMismatchError",
    "CoordinateParseError",
    "EFFORT_LEVELS",
    "ESRI_OCEAN_BASEMAP",
    "EffortCategoryError",
    "EffortSummary",
    "GroupingCardinalityError",
    "LayerMetadata",
    "MalformedGeometryError",
    "MapLayer",
    "MapSettings",
    "SegmentRecord",
    "SightingRecord",
    "SurveyMapError",
    "build_effort_lines",
    "check_role_cardinality",
    "classify_effort",
    "detect_crs",
    "ensure_valid",
    "nice_scale_length",
    "pivot_roles",
    "read_effort_segments",
    "read_shapefile",
    "read_shapefile_dir",
    "read_sightings",
    "render_map",
    "repair_geometries",
    "reproject",
    "require_same_crs",
    "role_points",
    "segments_from_records",
    "sightings_from_frame",
    "sightings_from_records",
    "subset_within",
    "summarize_effort",
]
