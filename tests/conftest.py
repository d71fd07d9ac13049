from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import geopandas as gpd
import pandas as pd
import pytest
import shapefile
from pyproj import CRS
from shapely.geometry import Polygon

# Clockwise rings, as the shapefile format expects for outer boundaries
STUDY_AREA_RING = [(-36.0, -6.0), (-36.0, -4.0), (-34.0, -4.0), (-34.0, -6.0), (-36.0, -6.0)]
ISLAND_RING = [(-32.5, -4.0), (-32.5, -3.8), (-32.3, -3.8), (-32.3, -4.0), (-32.5, -4.0)]


def write_polygon_shapefile(base: Path, features: list[tuple[str, list]], epsg: int | None = 4326) -> Path:
    with shapefile.Writer(str(base), shapeType=shapefile.POLYGON) as w:
        w.field("NAME", "C", size=40)
        for name, ring in features:
            w.poly([ring])
            w.record(name)
    if epsg is not None:
        base.with_suffix(".prj").write_text(CRS.from_epsg(epsg).to_wkt("WKT1_GDAL"))
    return base


@pytest.fixture
def boundary_dir(tmp_path):
    directory = tmp_path / "boundaries"
    directory.mkdir()
    write_polygon_shapefile(directory / "study_area", [("Potiguar Basin", STUDY_AREA_RING)])
    write_polygon_shapefile(directory / "islands", [("Rocas", ISLAND_RING)])
    return directory


@pytest.fixture
def study_area_path(boundary_dir):
    return boundary_dir / "study_area"


@pytest.fixture
def study_area():
    return gpd.GeoDataFrame({"NAME": ["Potiguar Basin"]}, geometry=[Polygon(STUDY_AREA_RING)], crs="EPSG:4326")


@pytest.fixture
def segments():
    return pd.DataFrame(
        {
            "Index": [1, 2, 3],
            "LineLabel": ["A", "A", "B"],
            "Date": ["2018-01-01", "2018-01-01", "2018-01-02"],
            "LatD_Beg": [-5.0, -5.2, -4.5],
            "LatD_End": [-5.2, -5.4, -4.6],
            "LongD_Beg": [-35.0, -35.3, -34.8],
            "LongD_End": [-35.3, -35.5, -34.2],
        }
    )


@pytest.fixture
def sightings_frame():
    return pd.DataFrame(
        {
            "Lat": [-5.0, -4.8, -5.0],
            "Long": [-35.0, -34.5, -30.0],
            "Effort": ["ON", "OFF", "ON"],
            "Species": ["Sotalia guianensis", "Stenella longirostris", "Megaptera novaeangliae"],
        }
    )


@pytest.fixture
def polygon_writer():
    return write_polygon_shapefile
