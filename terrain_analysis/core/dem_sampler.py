"""Elevation sampling from an in-memory DEM snapshot.

Resolves a WGS84 coordinate to a raster cell and returns its elevation:
- Cheap early rejection against the WGS84 extent
- Optional forward projection into the raster's native CRS
- Nearest-cell lookup (no interpolation), row 0 at the northern edge
- No-data cells yield no elevation, never the sentinel itself

Reference: DETAILS.md Section 2
"""

import logging
from dataclasses import dataclass
from math import floor, isfinite
from typing import Optional

from terrain_analysis.core.geo_calculator import GeoCalculator
from terrain_analysis.model.dem_data import DemData
from terrain_analysis.model.failure import FailureReason

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SampleResult:
    """Outcome of a single DEM lookup.

    Attributes:
        elevation: Elevation in meters, or None if unresolved
        reason: Why the lookup failed (None on success)
    """

    elevation: Optional[float]
    reason: Optional[FailureReason] = None

    @property
    def is_valid(self) -> bool:
        return self.elevation is not None


class DemSampler:
    """Static methods for nearest-cell elevation lookup.

    Example:
        elevation = DemSampler.sample(lon=10.295, lat=46.985, dem=dem)
        if elevation is None:
            ...  # outside the DEM or no-data
    """

    @staticmethod
    def resolve(lon: float, lat: float, dem: DemData) -> SampleResult:
        """Look up the DEM cell under a WGS84 coordinate.

        Args:
            lon: Longitude in decimal degrees (WGS84)
            lat: Latitude in decimal degrees (WGS84)
            dem: DEM snapshot to sample

        Returns:
            SampleResult with the elevation, or with OUT_OF_EXTENT / NO_DATA.
        """
        if not (isfinite(lon) and isfinite(lat)):
            return SampleResult(elevation=None, reason=FailureReason.OUT_OF_EXTENT)

        min_lon, min_lat, max_lon, max_lat = dem.wgs84_bbox
        if lon < min_lon or lon > max_lon or lat < min_lat or lat > max_lat:
            return SampleResult(elevation=None, reason=FailureReason.OUT_OF_EXTENT)

        proj_x, proj_y = dem.project(lon=lon, lat=lat)
        if not (isfinite(proj_x) and isfinite(proj_y)):
            return SampleResult(elevation=None, reason=FailureReason.OUT_OF_EXTENT)

        min_x, min_y, max_x, max_y = dem.bbox
        if proj_x < min_x or proj_x > max_x or proj_y < min_y or proj_y > max_y:
            return SampleResult(elevation=None, reason=FailureReason.OUT_OF_EXTENT)

        # Row 0 is the northern edge, so y is measured down from max_y
        x_percent = (proj_x - min_x) / (max_x - min_x)
        y_percent = (max_y - proj_y) / (max_y - min_y)

        col = floor(x_percent * dem.width)
        row = floor(y_percent * dem.height)
        if col < 0 or col >= dem.width or row < 0 or row >= dem.height:
            return SampleResult(elevation=None, reason=FailureReason.OUT_OF_EXTENT)

        value = dem.value_at(row=row, col=col)
        if dem.is_nodata(value):
            return SampleResult(elevation=None, reason=FailureReason.NO_DATA)

        return SampleResult(elevation=value)

    @staticmethod
    def sample(lon: float, lat: float, dem: DemData) -> Optional[float]:
        """Get elevation at a single point.

        Args:
            lon: Longitude in decimal degrees (WGS84)
            lat: Latitude in decimal degrees (WGS84)
            dem: DEM snapshot to sample

        Returns:
            Elevation in meters, or None if outside coverage or no-data.
        """
        result = DemSampler.resolve(lon=lon, lat=lat, dem=dem)
        if not result.is_valid:
            logger.debug(f"No elevation at lon={lon}, lat={lat}: {result.reason.value}")
        return result.elevation

    @staticmethod
    def cell_size_m(dem: DemData) -> tuple[float, float]:
        """Approximate ground size of one DEM cell.

        Measured across the middle of the WGS84 extent and divided by the grid
        dimensions; useful for choosing profile sample budgets or grid sizes.

        Returns:
            Tuple (cell_width_m, cell_height_m).
        """
        min_lon, min_lat, max_lon, max_lat = dem.wgs84_bbox
        mid_lat = (min_lat + max_lat) / 2
        mid_lon = (min_lon + max_lon) / 2
        width_m = GeoCalculator.haversine_distance_m(lon1=min_lon, lat1=mid_lat, lon2=max_lon, lat2=mid_lat)
        height_m = GeoCalculator.haversine_distance_m(lon1=mid_lon, lat1=min_lat, lon2=mid_lon, lat2=max_lat)
        return width_m / dem.width, height_m / dem.height
