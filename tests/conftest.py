"""Shared pytest fixtures for terrain_analysis tests.

Provides synthetic DemData grids and reusable geometries.
All fixtures use explicit values with documented rationale.

COORDINATE SYSTEM:
    Most DEMs cover the unit square lon 0..1, lat 0..1 with a 10x10 grid,
    so each cell is 0.1° wide. Row 0 is the northern edge (lat 0.9..1.0),
    column 0 the western edge (lon 0.0..0.1).
"""

from typing import Optional

import numpy as np
import pytest

from terrain_analysis.model.dem_data import BBox, DemData, ProjConverter

UNIT_BBOX: BBox = (0.0, 0.0, 1.0, 1.0)


def make_dem(
    grid: np.ndarray,
    bbox: BBox = UNIT_BBOX,
    wgs84_bbox: Optional[BBox] = None,
    nodata_value: Optional[float] = None,
    proj_converter: Optional[ProjConverter] = None,
) -> DemData:
    """Build a DemData from a 2D (rows, cols) grid."""
    grid = np.asarray(grid, dtype=np.float32)
    return DemData(
        values=grid.ravel(),
        width=grid.shape[1],
        height=grid.shape[0],
        bbox=bbox,
        wgs84_bbox=wgs84_bbox if wgs84_bbox is not None else bbox,
        nodata_value=nodata_value,
        proj_converter=proj_converter,
    )


# =============================================================================
# DEM FIXTURES
# =============================================================================


@pytest.fixture
def flat_dem() -> DemData:
    """10x10 grid, every cell 50.0 m, over the unit square (no projection)."""
    return make_dem(grid=np.full((10, 10), 50.0))


@pytest.fixture
def mound_dem() -> DemData:
    """10x10 grid at 50.0 m with a 55.0 m plateau in rows 2-7, cols 2-7.

    The square polygon [0.2, 0.8]² has its vertices in cells (8,2), (8,8),
    (1,8), (1,2), all at 50.0 m, while every 50x50 grid cell center lies in
    the plateau.
    """
    grid = np.full((10, 10), 50.0)
    grid[2:8, 2:8] = 55.0
    return make_dem(grid=grid)


@pytest.fixture
def center_peak_dem() -> DemData:
    """3x3 grid over [-10, 10]² with 100.0 in the center and no-data around it."""
    grid = np.full((3, 3), -9999.0)
    grid[1, 1] = 100.0
    return make_dem(grid=grid, bbox=(-10.0, -10.0, 10.0, 10.0), nodata_value=-9999.0)


@pytest.fixture
def east_ramp_dem() -> DemData:
    """100x100 grid rising 1 m per column towards the east (col 0 = 0 m)."""
    grid = np.tile(np.arange(100, dtype=np.float32), (100, 1))
    return make_dem(grid=grid)


@pytest.fixture
def projected_mound_dem(mound_dem: DemData) -> DemData:
    """mound_dem in a metric native CRS: x = lon * 1000, y = lat * 1000."""
    grid = mound_dem.values.reshape(mound_dem.height, mound_dem.width)
    return make_dem(
        grid=grid,
        bbox=(0.0, 0.0, 1000.0, 1000.0),
        wgs84_bbox=UNIT_BBOX,
        proj_converter=lambda lon, lat: (lon * 1000.0, lat * 1000.0),
    )


@pytest.fixture
def rough_dem() -> DemData:
    """10x10 grid of reproducible pseudo-random elevations between 40 and 60 m."""
    rng = np.random.default_rng(seed=42)
    return make_dem(grid=rng.uniform(40.0, 60.0, size=(10, 10)))


# =============================================================================
# GEOMETRY FIXTURES
# =============================================================================


@pytest.fixture
def square_polygon() -> dict:
    """GeoJSON Polygon [0.2, 0.8]², closed ring."""
    return {
        "type": "Polygon",
        "coordinates": [[[0.2, 0.2], [0.8, 0.2], [0.8, 0.8], [0.2, 0.8], [0.2, 0.2]]],
    }


@pytest.fixture
def east_line() -> dict:
    """GeoJSON Feature LineString crossing the unit square west to east at lat 0.5."""
    return {
        "type": "Feature",
        "properties": {},
        "geometry": {"type": "LineString", "coordinates": [[0.05, 0.5], [0.95, 0.5]]},
    }
