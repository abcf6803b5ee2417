"""GeoTIFF loading into DemData snapshots.

Reads a single-band elevation GeoTIFF and prepares everything the sampler needs:
- Flat float32 elevation grid and the raster's no-data value
- Native-CRS extent from the dataset bounds
- WGS84 extent from the four transformed corners
- Forward (lon, lat) -> (x, y) converter when the raster is projected

Multi-band rasters are imagery, not elevation, and are rejected.

Reference: DETAILS.md Section 2.1
"""

import logging
import time
from pathlib import Path
from typing import Optional

import numpy as np
import pyproj
import rasterio
from rasterio.warp import transform

from terrain_analysis.constants import DEMConfig
from terrain_analysis.model.dem_data import BBox, DemData, ProjConverter

logger = logging.getLogger(__name__)


def make_proj_converter(crs: str) -> Optional[ProjConverter]:
    """Build the forward WGS84 -> native CRS converter.

    Args:
        crs: Native CRS of the raster (anything pyproj understands)

    Returns:
        Callable (lon, lat) -> (x, y), or None if the raster is already WGS84.
    """
    if pyproj.CRS.from_user_input(crs) == pyproj.CRS.from_user_input(DEMConfig.WGS84_CRS):
        return None
    transformer = pyproj.Transformer.from_crs(DEMConfig.WGS84_CRS, crs, always_xy=True)

    def converter(lon: float, lat: float) -> tuple[float, float]:
        x, y = transformer.transform(lon, lat)
        return float(x), float(y)

    return converter


def wgs84_bounds(crs: str, bbox: BBox) -> BBox:
    """Transform native bounds to a WGS84 (min_lon, min_lat, max_lon, max_lat) box.

    All four corners are transformed so rotated projections still
    produce an enclosing box.
    """
    left, bottom, right, top = bbox
    if pyproj.CRS.from_user_input(crs) == pyproj.CRS.from_user_input(DEMConfig.WGS84_CRS):
        return left, bottom, right, top

    corners_x = [left, right, left, right]
    corners_y = [bottom, bottom, top, top]
    lons, lats = transform(crs, DEMConfig.WGS84_CRS, corners_x, corners_y)
    return min(lons), min(lats), max(lons), max(lats)


def load_dem(path: Path | str) -> DemData:
    """Load a single-band elevation GeoTIFF.

    Args:
        path: Path to the GeoTIFF

    Returns:
        DemData snapshot of band 1.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the raster has more than one band.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"DEM file not found at {path}")

    logger.info(f"Loading DEM from {path}...")
    start_time = time.time()

    with rasterio.open(path) as src:
        if src.count != 1:
            raise ValueError(f"{path.name} has {src.count} bands; expected a single-band elevation raster")

        crs = src.crs.to_string() if src.crs else DEMConfig.WGS84_CRS
        values = src.read(1).astype(np.float32)
        b = src.bounds
        bbox = (b.left, b.bottom, b.right, b.top)
        dem = DemData(
            values=values,
            width=src.width,
            height=src.height,
            bbox=bbox,
            wgs84_bbox=wgs84_bounds(crs=crs, bbox=bbox),
            nodata_value=src.nodata,
            proj_converter=make_proj_converter(crs=crs),
        )

    elapsed = time.time() - start_time
    logger.info(f"DEM loaded in {elapsed:.2f}s (shape: {dem.height}x{dem.width}, CRS: {crs})")
    return dem
