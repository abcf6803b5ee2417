"""Measurement text for drawn features.

Produces the one-line summaries attached to annotations:
- Point: "Marker at lon, lat" plus the DEM elevation when available
- LineString: "Length: ..."
- Polygon: "Area: ..."
- Profile lines: "Profile: ..."
"""

from typing import Any, Optional

from terrain_analysis.constants import FormatConfig
from terrain_analysis.core.dem_sampler import DemSampler
from terrain_analysis.core.geo_calculator import GeoCalculator
from terrain_analysis.model.dem_data import DemData
from terrain_analysis.model.geometry import (
    geometry_type,
    line_coordinates,
    point_coordinates,
    polygon_ring,
)


def describe_point(point: Any, dem: Optional[DemData] = None) -> str:
    """Marker location, with elevation on a second line if the DEM covers it."""
    lon, lat = point_coordinates(point)
    decimals = FormatConfig.COORDINATE_DECIMALS
    text = f"Marker at {lon:.{decimals}f}, {lat:.{decimals}f}"
    if dem is not None:
        elevation = DemSampler.sample(lon=lon, lat=lat, dem=dem)
        if elevation is not None:
            text += f"\nElevation: {elevation:.{FormatConfig.DECIMALS}f} m"
    return text


def describe_line(line: Any) -> str:
    return f"Length: {GeoCalculator.format_distance(GeoCalculator.line_length_km(line_coordinates(line)))}"


def describe_polygon(polygon: Any) -> str:
    return f"Area: {GeoCalculator.format_area(GeoCalculator.polygon_area_m2(polygon_ring(polygon)))}"


def describe_profile_line(line: Any) -> str:
    return f"Profile: {GeoCalculator.format_distance(GeoCalculator.line_length_km(line_coordinates(line)))}"


def describe_feature(feature: Any, dem: Optional[DemData] = None) -> str:
    """Measurement text for any supported geometry.

    Args:
        feature: Point, LineString or Polygon (shapely, GeoJSON geometry or Feature)
        dem: Optional DEM used for point elevations

    Returns:
        Measurement string.

    Raises:
        TypeError: For unsupported geometry types.
    """
    kind = geometry_type(feature)
    if kind == "Point":
        return describe_point(point=feature, dem=dem)
    if kind == "LineString":
        return describe_line(line=feature)
    if kind == "Polygon":
        return describe_polygon(polygon=feature)
    raise TypeError(f"No measurement for geometry type {kind}")
