"""Tests for sighting loading, Effort classification and polygon subsetting."""

import io

import geopandas as gpd
import pandas as pd
import pytest
from shapely.geometry import Polygon

from survey_map import (
    CoordinateParseError,
    CRSMismatchError,
    EffortCategoryError,
    MalformedGeometryError,
    SightingRecord,
    classify_effort,
    read_sightings,
    repair_geometries,
    sightings_from_frame,
    sightings_from_records,
    subset_within,
)


class TestClassifyEffort:
    def test_two_levels(self):
        cat = classify_effort(["ON", "OFF"])
        assert list(cat.categories) == ["ON", "OFF"]
        assert set(cat) == {"ON", "OFF"}

    def test_strips_whitespace(self):
        assert list(classify_effort([" ON", "OFF "])) == ["ON", "OFF"]

    def test_rejects_other_values(self):
        with pytest.raises(EffortCategoryError) as exc:
            classify_effort(["ON", "on", "MAYBE"])
        assert exc.value.values == ["MAYBE", "on"]

    def test_rejects_missing(self):
        with pytest.raises(EffortCategoryError):
            classify_effort(["ON", None])


class TestSightingsFrame:
    def test_points_in_geographic_crs(self, sightings_frame):
        gdf = sightings_from_frame(sightings_frame)
        assert gdf.crs.to_epsg() == 4326
        assert (gdf.geometry.x.tolist(), gdf.geometry.y.tolist()) == (
            [-35.0, -34.5, -30.0],
            [-5.0, -4.8, -5.0],
        )

    def test_effort_is_categorical(self, sightings_frame):
        gdf = sightings_from_frame(sightings_frame)
        assert isinstance(gdf["Effort"].dtype, pd.CategoricalDtype)
        assert gdf["Effort"].cat.categories.tolist() == ["ON", "OFF"]

    def test_keeps_other_columns(self, sightings_frame):
        gdf = sightings_from_frame(sightings_frame)
        assert gdf["Species"].iloc[0] == "Sotalia guianensis"

    def test_missing_latitude(self, sightings_frame):
        sightings_frame.loc[2, "Lat"] = None
        with pytest.raises(CoordinateParseError) as exc:
            sightings_from_frame(sightings_frame)
        assert exc.value.row == 2
        assert exc.value.columns == ["Lat"]

    def test_missing_effort_column(self, sightings_frame):
        with pytest.raises(EffortCategoryError):
            sightings_from_frame(sightings_frame.drop(columns="Effort"))

    def test_from_records(self):
        gdf = sightings_from_records(
            [
                SightingRecord(Lat=-5.0, Long=-35.0, Effort="ON"),
                SightingRecord(Lat=-5.1, Long=-35.1, Effort="OFF"),
            ]
        )
        assert gdf["Effort"].tolist() == ["ON", "OFF"]

    def test_read_csv(self):
        text = "Lat,Long,Effort\n-5.0,-35.0,ON\n-4.5,-34.5,OFF\n"
        gdf = read_sightings(io.StringIO(text))
        assert len(gdf) == 2
        assert gdf["Effort"].value_counts().to_dict() == {"ON": 1, "OFF": 1}


class TestSubsetWithin:
    def test_keeps_points_inside(self, sightings_frame, study_area):
        inside = subset_within(sightings_from_frame(sightings_frame), study_area)
        assert inside.index.tolist() == [0, 1]

    def test_after_projection(self, sightings_frame, study_area):
        points = sightings_from_frame(sightings_frame).to_crs(epsg=32724)
        inside = subset_within(points, study_area.to_crs(epsg=32724))
        assert inside.index.tolist() == [0, 1]

    def test_no_overlap_is_empty(self, sightings_frame):
        far_away = gpd.GeoDataFrame(
            geometry=[Polygon([(10, 10), (10, 11), (11, 11), (11, 10)])],
            crs="EPSG:4326",
        )
        points = sightings_from_frame(sightings_frame)
        inside = subset_within(points, far_away)
        assert inside.empty
        assert list(inside.columns) == list(points.columns)
        assert inside.crs == points.crs

    def test_crs_mismatch(self, sightings_frame, study_area):
        with pytest.raises(CRSMismatchError):
            subset_within(sightings_from_frame(sightings_frame), study_area.to_crs(epsg=32724))

    def test_unset_crs(self, sightings_frame, study_area):
        with pytest.raises(CRSMismatchError):
            subset_within(sightings_from_frame(sightings_frame), gpd.GeoDataFrame(geometry=list(study_area.geometry)))

    def test_invalid_polygon_must_be_repaired(self, sightings_frame):
        bow_tie = gpd.GeoDataFrame(
            geometry=[Polygon([(-36, -6), (-36, -4), (-34, -6), (-34, -4), (-36, -6)])],
            crs="EPSG:4326",
        )
        points = sightings_from_frame(sightings_frame)
        with pytest.raises(MalformedGeometryError):
            subset_within(points, bow_tie)

        inside = subset_within(points, repair_geometries(bow_tie))
        # (-35, -5) is the crossing point of the bow tie, on its boundary
        assert inside.index.tolist() == [1]
