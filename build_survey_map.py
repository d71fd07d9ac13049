"""Build the survey map: boundaries, sightings inside the study area, and effort lines over ocean basemap tiles.

This script chains the survey_map library steps: read and repair boundary
shapefiles, reproject everything to one planar CRS, subset sightings to the
study area, convert effort segments to lines, then render and export.
"""

import csv
import logging
from pathlib import Path

from survey_map import (
    MapLayer,
    MapSettings,
    build_effort_lines,
    read_effort_segments,
    read_shapefile_dir,
    read_sightings,
    render_map,
    repair_geometries,
    reproject,
    subset_within,
    summarize_effort,
)

DATA = Path(__file__).parent / "data"
BOUNDARY_DIR = DATA / "boundaries"
SIGHTINGS_CSV = DATA / "sightings.csv"
EFFORT_CSV = DATA / "effort.csv"
OUTPUT_CSV = Path(__file__).parent / "effort_summary.csv"
OUTPUT_MAP = Path(__file__).parent / "survey_map.png"


def export_summary(summaries, path: Path) -> None:
    """Write effort summaries to a CSV file."""
    rows = [s.model_dump() for s in summaries]
    fieldnames = list(rows[0].keys()) if rows else []
    with open(path, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        writer.writerows(rows)
    print(f"CSV exported: {path}")


def main():
    settings = MapSettings()
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")

    print(f"Reading boundaries: {BOUNDARY_DIR}\n")
    boundaries = {}
    for name, (gdf, metadata) in read_shapefile_dir(BOUNDARY_DIR).items():
        print(f"{name}: {metadata.num_features} {metadata.shape_type_name} features, CRS: EPSG:{metadata.crs_epsg} ({metadata.crs_name})")
        # Repair in the source CRS, simplify after projecting so the tolerance is in metres
        gdf = reproject(repair_geometries(gdf), settings.target_epsg)
        boundaries[name] = repair_geometries(gdf, tolerance=settings.simplify_tolerance)
    print()

    study_area = next(iter(boundaries.values()))

    sightings = reproject(read_sightings(SIGHTINGS_CSV), settings.target_epsg)
    inside = subset_within(sightings, study_area)
    print(f"Sightings:     {len(sightings):,} total, {len(inside):,} inside study area")
    for level, count in inside["Effort"].value_counts().sort_index().items():
        print(f"  Effort {level}: {count:,}")

    lines = build_effort_lines(read_effort_segments(EFFORT_CSV), target_epsg=settings.target_epsg)
    summaries = summarize_effort(lines)
    total_km = summaries[-1].cumulative_km_end if summaries else 0.0
    print(f"Effort lines:  {len(lines):,}")
    print(f"Total effort:  {total_km:,.2f} km")
    print()

    export_summary(summaries, OUTPUT_CSV)

    layers = [
        MapLayer(data=gdf, label=name, color="lightgrey", edgecolor="dimgray", alpha=0.5, linewidth=0.6, zorder=1)
        for name, gdf in boundaries.items()
    ]
    layers.append(MapLayer(data=lines, label="Effort lines", color="black", linewidth=1.2, zorder=2))
    layers.append(MapLayer(data=inside, label="Effort", column="Effort", cmap="Set1", markersize=18, zorder=3))

    render_map(
        layers,
        OUTPUT_MAP,
        title=settings.title,
        basemap=settings.basemap_url or None,
        zoom=settings.basemap_zoom,
        figsize=settings.figsize,
        dpi=settings.dpi,
    )
    print(f"Map saved: {OUTPUT_MAP}")


if __name__ == "__main__":
    main()
