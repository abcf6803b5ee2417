"""Geodesic calculations on Earth's surface.

Provides geographic helper functions for terrain analysis:
- Distance calculation (Haversine formula)
- Line length (sum of great-circle legs)
- Polygon area (spherical excess approximation)
- Distance and area formatting for display

All calculations use WGS84 spherical Earth approximation (R = 6,371 km).

Reference: DETAILS.md Section 1
"""

from math import atan2, cos, radians, sin, sqrt
from typing import Sequence

from terrain_analysis.constants import FormatConfig, GeoConfig

Coordinate = Sequence[float]


class GeoCalculator:
    """Static methods for geodesic calculations on Earth's surface.

    All methods use WGS84 spherical Earth model (R = 6,371 km).
    Coordinates are (lon, lat) pairs in decimal degrees (WGS84), GeoJSON order.
    Distances are in kilometers unless the method name says otherwise.
    """

    EARTH_RADIUS_KM = GeoConfig.EARTH_RADIUS_KM

    @staticmethod
    def haversine_distance_km(lon1: float, lat1: float, lon2: float, lat2: float) -> float:
        """Calculate great-circle distance between two points using Haversine formula.

        Args:
            lon1: Longitude of first point (decimal degrees)
            lat1: Latitude of first point (decimal degrees)
            lon2: Longitude of second point (decimal degrees)
            lat2: Latitude of second point (decimal degrees)

        Returns:
            Distance in kilometers.
        """
        dlat = radians(lat2 - lat1)
        dlon = radians(lon2 - lon1)
        a = sin(dlat / 2) ** 2 + cos(radians(lat1)) * cos(radians(lat2)) * sin(dlon / 2) ** 2
        return GeoConfig.EARTH_RADIUS_KM * 2 * atan2(sqrt(a), sqrt(1 - a))

    @staticmethod
    def haversine_distance_m(lon1: float, lat1: float, lon2: float, lat2: float) -> float:
        """Same as haversine_distance_km, in meters."""
        return GeoCalculator.haversine_distance_km(lon1=lon1, lat1=lat1, lon2=lon2, lat2=lat2) * 1000

    @staticmethod
    def line_length_km(coords: Sequence[Coordinate]) -> float:
        """Total length of a polyline as the sum of its great-circle legs.

        Args:
            coords: Ordered (lon, lat) coordinates

        Returns:
            Length in kilometers, 0.0 for fewer than two points.
        """
        total = 0.0
        for i in range(len(coords) - 1):
            total += GeoCalculator.haversine_distance_km(
                lon1=coords[i][0],
                lat1=coords[i][1],
                lon2=coords[i + 1][0],
                lat2=coords[i + 1][1],
            )
        return total

    @staticmethod
    def polygon_area_m2(ring: Sequence[Coordinate]) -> float:
        """Approximate area of a polygon ring on the sphere.

        Sums (lon2 - lon1) * (2 + sin(lat1) + sin(lat2)) over every edge
        (wrapping from the last vertex back to the first) and scales by R²/2.
        Good for small to regional polygons, not for near-global shapes.
        Winding direction only changes the sign, which is dropped.

        Reference: DETAILS.md Section 1.2

        Args:
            ring: Polygon ring as (lon, lat) coordinates, closed or open

        Returns:
            Area in square meters, 0.0 for fewer than three vertices.
        """
        if len(ring) < 3:
            return 0.0

        area = 0.0
        for i in range(len(ring)):
            lon1, lat1 = radians(ring[i][0]), radians(ring[i][1])
            lon2, lat2 = radians(ring[(i + 1) % len(ring)][0]), radians(ring[(i + 1) % len(ring)][1])
            area += (lon2 - lon1) * (2 + sin(lat1) + sin(lat2))

        return abs(area * GeoConfig.EARTH_RADIUS_M**2 / 2.0)

    @staticmethod
    def format_distance(distance_km: float) -> str:
        """Format a distance as meters below 1 km, kilometers above.

        Example:
            format_distance(0.25) -> "250.00 m"
            format_distance(12.3) -> "12.30 km"
        """
        if distance_km < FormatConfig.DISTANCE_KM_THRESHOLD:
            return f"{distance_km * 1000:.{FormatConfig.DECIMALS}f} m"
        return f"{distance_km:.{FormatConfig.DECIMALS}f} km"

    @staticmethod
    def format_area(area_m2: float) -> str:
        """Format an area as m² below one hectare, km² above."""
        if area_m2 < FormatConfig.AREA_M2_THRESHOLD:
            return f"{area_m2:.{FormatConfig.DECIMALS}f} m²"
        return f"{area_m2 / 1_000_000:.{FormatConfig.DECIMALS}f} km²"
