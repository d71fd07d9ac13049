"""Tunable settings for the survey map recipe, overridable from the environment."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ESRI_OCEAN_BASEMAP = (
    "https://server.arcgisonline.com/ArcGIS/rest/services/Ocean/World_Ocean_Base/MapServer/tile/{z}/{y}/{x}"
)


class MapSettings(BaseSettings):
    """Settings read from ``SURVEY_MAP_*`` environment variables.

    Attributes:
        target_epsg: Planar CRS every layer is projected into before plotting
        basemap_url: XYZ tile URL template; empty string disables the basemap
        basemap_zoom: Tile zoom level, or "auto" to derive it from the extent
        simplify_tolerance: Boundary simplification tolerance in target CRS units
        figsize: Figure size in inches
        dpi: Output image resolution
        title: Map title
        log_level: Level passed to logging.basicConfig by the recipe script
    """

    target_epsg: int = Field(32724, description="Planar CRS for all layers")
    basemap_url: str = Field(ESRI_OCEAN_BASEMAP, description="XYZ tile URL template")
    basemap_zoom: int | Literal["auto"] = Field("auto", description="Tile zoom level or 'auto'")
    simplify_tolerance: float = Field(0.0, ge=0, description="Simplify tolerance in CRS units")
    figsize: tuple[float, float] = Field((10.0, 10.0), description="Figure size in inches")
    dpi: int = Field(150, gt=0, description="Output resolution")
    title: str = Field("Survey effort and sightings", description="Map title")
    log_level: str = Field("INFO", description="Logging level for the recipe script")

    model_config = SettingsConfigDict(
        env_prefix="SURVEY_MAP_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )
