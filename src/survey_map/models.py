"""Pydantic data models for survey effort maps."""

from typing import Literal

from pydantic import BaseModel


class LayerMetadata(BaseModel):
    """Metadata about a parsed shapefile layer."""

    source: str
    shape_type_name: str
    crs_epsg: int | None = None
    crs_name: str | None = None
    is_projected: bool | None = None
    num_features: int
    fields: list[str]


class SegmentRecord(BaseModel):
    """One survey effort segment with begin and end coordinates in decimal degrees."""

    Index: int
    LineLabel: str
    Date: str
    LatD_Beg: float
    LatD_End: float
    LongD_Beg: float
    LongD_End: float


class SightingRecord(BaseModel):
    """One sighting position in decimal degrees with its Effort state."""

    Lat: float
    Long: float
    Effort: Literal["ON", "OFF"]


class EffortSummary(BaseModel):
    """Planar length of one effort line and its running total."""

    Index: int
    LineLabel: str
    Date: str
    length_m: float
    length_km: float
    cumulative_km_start: float
    cumulative_km_end: float
