"""Geometry inputs - Coordinate extraction for drawn or imported features.

The drawing/import layer hands over points, lines and polygons in WGS84 in
any of these shapes:
- shapely geometries (Point, LineString, Polygon)
- GeoJSON geometry mappings ({"type": "LineString", "coordinates": [...]})
- GeoJSON Feature mappings, optionally carrying a precomputed "bbox"

shapely.geometry.shape() does the decoding. Inputs are never mutated.
"""

from typing import Any, Iterable, Mapping, Optional

from shapely.geometry import shape
from shapely.geometry.base import BaseGeometry

from terrain_analysis.model.dem_data import BBox

Coords = list[tuple[float, float]]


def _as_geometry(feature: Any) -> BaseGeometry:
    """Decode a shapely geometry, GeoJSON geometry or GeoJSON Feature."""
    if isinstance(feature, BaseGeometry):
        return feature
    if isinstance(feature, Mapping):
        if feature.get("type") == "Feature":
            geometry = feature.get("geometry")
            if geometry is None:
                raise TypeError("Feature has no geometry")
            return shape(geometry)
        return shape(feature)
    raise TypeError(f"Unsupported geometry input: {type(feature).__name__}")


def _expect(geometry: BaseGeometry, geom_type: str) -> BaseGeometry:
    if geometry.geom_type != geom_type:
        raise TypeError(f"Expected {geom_type}, got {geometry.geom_type}")
    return geometry


def _xy(coords: Iterable[Any]) -> Coords:
    # Drop Z if present
    return [(float(c[0]), float(c[1])) for c in coords]


def geometry_type(feature: Any) -> str:
    """GeoJSON type name of the feature's geometry ("Point", "LineString", ...)."""
    return _as_geometry(feature).geom_type


def point_coordinates(point: Any) -> tuple[float, float]:
    """(lon, lat) of a Point feature."""
    geometry = _expect(_as_geometry(point), "Point")
    return _xy(geometry.coords)[0]


def line_coordinates(line: Any) -> Coords:
    """Ordered (lon, lat) vertices of a LineString feature."""
    geometry = _expect(_as_geometry(line), "LineString")
    return _xy(geometry.coords)


def polygon_ring(polygon: Any) -> Coords:
    """Closed exterior ring (first == last) of a Polygon feature."""
    geometry = _expect(_as_geometry(polygon), "Polygon")
    return _xy(geometry.exterior.coords)


def ring_bbox(ring: Coords) -> BBox:
    """(min_lon, min_lat, max_lon, max_lat) of a coordinate list."""
    lons = [c[0] for c in ring]
    lats = [c[1] for c in ring]
    return min(lons), min(lats), max(lons), max(lats)


def polygon_bbox(polygon: Any) -> BBox:
    """Bounding box of a polygon feature.

    Uses the feature's precomputed "bbox" member when the drawing layer
    supplied one, otherwise computes it from the exterior ring.
    """
    if isinstance(polygon, Mapping) and polygon.get("bbox") is not None:
        box = polygon["bbox"]
        # GeoJSON allows 3D boxes: (min_x, min_y, min_z, max_x, max_y, max_z)
        if len(box) == 6:
            return float(box[0]), float(box[1]), float(box[3]), float(box[4])
        return float(box[0]), float(box[1]), float(box[2]), float(box[3])
    return ring_bbox(polygon_ring(polygon))


def collection_bbox(features: Iterable[Any]) -> Optional[BBox]:
    """Bounding box over every vertex of a feature collection.

    Accepts a GeoJSON FeatureCollection mapping or any iterable of features.

    Returns:
        (min_lon, min_lat, max_lon, max_lat), or None if there are no coordinates.
    """
    if isinstance(features, Mapping):
        features = features.get("features", [])

    bounds: Optional[BBox] = None
    for feature in features:
        if isinstance(feature, Mapping) and feature.get("type") == "Feature" and feature.get("geometry") is None:
            continue
        geometry = _as_geometry(feature)
        if geometry.is_empty:
            continue
        min_x, min_y, max_x, max_y = geometry.bounds
        if bounds is None:
            bounds = (min_x, min_y, max_x, max_y)
        else:
            bounds = (
                min(bounds[0], min_x),
                min(bounds[1], min_y),
                max(bounds[2], max_x),
                max(bounds[3], max_y),
            )
    return bounds
