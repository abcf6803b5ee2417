"""Configuration constants for the terrain analysis engine.

All tunable parameters are centralized here.
Values are referenced in DETAILS.md.

Classes:
    GeoConfig: Spherical Earth model
    FormatConfig: Unit switch thresholds for measurement strings
    DEMConfig: Coordinate reference system identifiers
    ProfileConfig: Elevation profile sampling
    VolumeConfig: Cut/fill grid integration and base plane fitting
    ChartConfig: Profile chart rendering dimensions
    StyleConfig: Chart colors
"""


class GeoConfig:
    """Spherical Earth approximation (WGS84 mean radius)."""

    EARTH_RADIUS_KM = 6371.0
    EARTH_RADIUS_M = EARTH_RADIUS_KM * 1000


class FormatConfig:
    """Thresholds and precision for human-readable measurements."""

    # Below 1 km distances are shown in meters
    DISTANCE_KM_THRESHOLD = 1.0
    # Below 10,000 m² (one hectare) areas are shown in m², above in km²
    AREA_M2_THRESHOLD = 10_000.0
    DECIMALS = 2
    COORDINATE_DECIMALS = 4


class DEMConfig:
    """Coordinate reference systems used by the DEM loader."""

    WGS84_CRS = "EPSG:4326"


class ProfileConfig:
    """Elevation profile sampling parameters."""

    # Total samples distributed along the line proportional to segment length
    DEFAULT_SAMPLE_BUDGET = 100
    # Every segment gets at least this many samples, however short
    MIN_SEGMENT_SAMPLES = 2
    # A profile needs at least two points to be chartable
    MIN_VALID_SAMPLES = 2


class VolumeConfig:
    """Cut/fill volume computation parameters."""

    # Lattice resolution: GRID_SIZE x GRID_SIZE cell centers over the polygon bbox
    DEFAULT_GRID_SIZE = 50
    # Fewer resolved perimeter vertices cannot define a base plane
    MIN_PERIMETER_SAMPLES = 3
    # Normal-equations determinant below this is treated as singular
    DETERMINANT_EPSILON = 1e-9
    # Column workers for the grid integration map step
    DEFAULT_WORKERS = 1

    METHOD_LABELS = {
        "lowestPoint": "Lowest Point on Perimeter",
        "averagePerimeter": "Average Elevation of Perimeter",
        "bestFit": "Best-Fit Plane",
        "fixedElevation": "Fixed Elevation",
    }


class ChartConfig:
    """Chart rendering dimensions and settings."""

    DEFAULT_WIDTH = 800
    PROFILE_HEIGHT = 400

    # Y-axis padding settings
    ELEVATION_PADDING_FACTOR = 0.1  # 10% padding above/below
    ELEVATION_PADDING_MIN_M = 5  # Minimum padding in meters


class StyleConfig:
    """Colors used by the report renderers."""

    PROFILE_LINE_COLOR = "#2563eb"
    PROFILE_FILL_ALPHA = 0.25
    GRID_COLOR = "rgba(200, 200, 200, 0.3)"
