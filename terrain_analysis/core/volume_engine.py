"""Cut/fill earthwork volume inside a drawn polygon.

Three steps:
1. Sample the DEM at every vertex of the polygon's outer ring
2. Fit a base plane from those samples (lowest, average, fixed or least squares)
3. Integrate DEM minus base plane over a regular grid of cell centers inside
   the polygon, split into fill (above) and cut (below)

The grid step is a map-reduce: each grid column maps to a partial
(cut, fill) sum, and partials are reduced in column order. Running the map on
several worker threads therefore gives bit-identical totals.

Reference: DETAILS.md Section 4
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from terrain_analysis.constants import VolumeConfig
from terrain_analysis.core.dem_sampler import DemSampler
from terrain_analysis.core.geo_calculator import GeoCalculator
from terrain_analysis.model.base_plane import BasePlane, FlatPlane, TiltedPlane, base_elevation_at
from terrain_analysis.model.dem_data import BBox, DemData
from terrain_analysis.model.failure import AnalysisFailure, FailureReason, InvalidMethodArgumentsError
from terrain_analysis.model.geometry import polygon_bbox, polygon_ring
from terrain_analysis.model.volume_result import VolumeMethod, VolumeResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PerimeterSample:
    """A ring vertex with a resolved elevation.

    Attributes:
        lon, lat: WGS84 vertex position
        proj_x, proj_y: Vertex in the DEM's native CRS
        elevation: DEM elevation in meters
    """

    lon: float
    lat: float
    proj_x: float
    proj_y: float
    elevation: float


@dataclass(frozen=True)
class CellContribution:
    """Partial cut/fill sum over some grid cells.

    Attributes:
        cut: Volume below the base plane (m³)
        fill: Volume above the base plane (m³)
        cells: Number of cells that contributed
    """

    cut: float
    fill: float
    cells: int

    def __add__(self, other: "CellContribution") -> "CellContribution":
        return CellContribution(cut=self.cut + other.cut, fill=self.fill + other.fill, cells=self.cells + other.cells)


@dataclass(frozen=True)
class IntegrationGrid:
    """Regular lattice over the polygon bounding box.

    Cell centers are min + step * (index + 0.5) in both WGS84 and projected
    space; projected centers interpolate linearly between the projected bbox
    corners.
    """

    grid_size: int
    min_lon: float
    min_lat: float
    lon_step: float
    lat_step: float
    min_proj_x: float
    min_proj_y: float
    proj_x_step: float
    proj_y_step: float
    cell_area_m2: float

    @classmethod
    def from_bbox(cls, bbox: BBox, dem: DemData, grid_size: int) -> "IntegrationGrid":
        """Build the lattice and its planar cell area.

        Cell width is measured along the bbox center latitude, cell height
        along the western edge; their product is the cell area.
        """
        min_lon, min_lat, max_lon, max_lat = bbox
        min_proj_x, min_proj_y = dem.project(lon=min_lon, lat=min_lat)
        max_proj_x, max_proj_y = dem.project(lon=max_lon, lat=max_lat)

        lon_step = (max_lon - min_lon) / grid_size
        lat_step = (max_lat - min_lat) / grid_size

        center_lat = min_lat + (max_lat - min_lat) / 2
        cell_width_m = GeoCalculator.haversine_distance_m(
            lon1=min_lon,
            lat1=center_lat,
            lon2=min_lon + lon_step,
            lat2=center_lat,
        )
        cell_height_m = GeoCalculator.haversine_distance_m(
            lon1=min_lon,
            lat1=min_lat,
            lon2=min_lon,
            lat2=min_lat + lat_step,
        )

        return cls(
            grid_size=grid_size,
            min_lon=min_lon,
            min_lat=min_lat,
            lon_step=lon_step,
            lat_step=lat_step,
            min_proj_x=min_proj_x,
            min_proj_y=min_proj_y,
            proj_x_step=(max_proj_x - min_proj_x) / grid_size,
            proj_y_step=(max_proj_y - min_proj_y) / grid_size,
            cell_area_m2=cell_width_m * cell_height_m,
        )


def point_in_ring(lon: float, lat: float, ring: Sequence[tuple[float, float]]) -> bool:
    """Even-odd ray casting test against a polygon ring.

    Casts a ray towards +x and counts edge crossings. Points exactly on an
    edge may land on either side.
    """
    inside = False
    j = len(ring) - 1
    for i in range(len(ring)):
        xi, yi = ring[i]
        xj, yj = ring[j]
        if (yi > lat) != (yj > lat) and lon < (xj - xi) * (lat - yi) / (yj - yi) + xi:
            inside = not inside
        j = i
    return inside


def solve_3x3(A: Sequence[Sequence[float]], b: Sequence[float]) -> Optional[tuple[float, float, float]]:
    """Solve A x = b for a 3x3 system via adjugate and determinant.

    Returns:
        Solution (x0, x1, x2), or None if |det(A)| < DETERMINANT_EPSILON.
    """
    det = (
        A[0][0] * (A[1][1] * A[2][2] - A[2][1] * A[1][2])
        - A[0][1] * (A[1][0] * A[2][2] - A[1][2] * A[2][0])
        + A[0][2] * (A[1][0] * A[2][1] - A[1][1] * A[2][0])
    )
    if abs(det) < VolumeConfig.DETERMINANT_EPSILON:
        return None

    inv_det = 1.0 / det
    adj = [
        [
            A[1][1] * A[2][2] - A[2][1] * A[1][2],
            -(A[0][1] * A[2][2] - A[0][2] * A[2][1]),
            A[0][1] * A[1][2] - A[0][2] * A[1][1],
        ],
        [
            -(A[1][0] * A[2][2] - A[1][2] * A[2][0]),
            A[0][0] * A[2][2] - A[0][2] * A[2][0],
            -(A[0][0] * A[1][2] - A[1][0] * A[0][2]),
        ],
        [
            A[1][0] * A[2][1] - A[2][0] * A[1][1],
            -(A[0][0] * A[2][1] - A[2][0] * A[0][1]),
            A[0][0] * A[1][1] - A[1][0] * A[0][1],
        ],
    ]
    x0, x1, x2 = (inv_det * (row[0] * b[0] + row[1] * b[1] + row[2] * b[2]) for row in adj)
    return x0, x1, x2


class VolumeEngine:
    """Computes cut/fill volumes of polygons against a DEM.

    Example:
        engine = VolumeEngine()
        result = engine.compute(polygon=feature, dem=dem, method="lowestPoint")
        if not isinstance(result, AnalysisFailure):
            print(f"Cut {result.cut:.0f} m³, fill {result.fill:.0f} m³")
    """

    def __init__(self, workers: int = VolumeConfig.DEFAULT_WORKERS) -> None:
        """Initialize the engine.

        Args:
            workers: Threads for the per-column grid map (1 = run inline)
        """
        if workers < 1:
            raise ValueError(f"workers must be >= 1, got {workers}")
        self.workers = workers

    @staticmethod
    def parse_method(method: VolumeMethod | str, fixed_elevation: Optional[float]) -> VolumeMethod:
        """Validate method arguments before touching the DEM.

        Raises:
            InvalidMethodArgumentsError: Unknown method, or fixedElevation
                without an elevation value.
        """
        try:
            parsed = VolumeMethod(method)
        except ValueError:
            valid = ", ".join(m.value for m in VolumeMethod)
            raise InvalidMethodArgumentsError(f"Unknown volume method {method!r}; expected one of: {valid}") from None

        if parsed is VolumeMethod.FIXED_ELEVATION and fixed_elevation is None:
            raise InvalidMethodArgumentsError("Method 'fixedElevation' requires a fixed_elevation value")
        return parsed

    @staticmethod
    def sample_perimeter(ring: Sequence[tuple[float, float]], dem: DemData) -> list[PerimeterSample]:
        """Sample every ring vertex, dropping vertices without elevation.

        The closing vertex is sampled like any other, so for a closed ring the
        first vertex counts twice in averages.
        """
        samples: list[PerimeterSample] = []
        for lon, lat in ring:
            elevation = DemSampler.sample(lon=lon, lat=lat, dem=dem)
            if elevation is None:
                continue
            proj_x, proj_y = dem.project(lon=lon, lat=lat)
            samples.append(PerimeterSample(lon=lon, lat=lat, proj_x=proj_x, proj_y=proj_y, elevation=elevation))
        return samples

    @staticmethod
    def fit_best_plane(samples: Sequence[PerimeterSample]) -> Optional[TiltedPlane]:
        """Least-squares plane z = a*x + b*y + c through perimeter samples.

        Solves the 3x3 normal equations in projected coordinates.

        Reference: DETAILS.md Section 4.2

        Returns:
            TiltedPlane, or None if the normal matrix is singular
            (collinear or too few distinct points).
        """
        n = len(samples)
        sum_x = sum_y = sum_z = 0.0
        sum_xy = sum_x2 = sum_y2 = sum_xz = sum_yz = 0.0
        for s in samples:
            x, y, z = s.proj_x, s.proj_y, s.elevation
            sum_x += x
            sum_y += y
            sum_z += z
            sum_xy += x * y
            sum_x2 += x * x
            sum_y2 += y * y
            sum_xz += x * z
            sum_yz += y * z

        A = [
            [sum_x2, sum_xy, sum_x],
            [sum_xy, sum_y2, sum_y],
            [sum_x, sum_y, float(n)],
        ]
        params = solve_3x3(A=A, b=[sum_xz, sum_yz, sum_z])
        if params is None:
            return None
        a, b, c = params
        return TiltedPlane(a=a, b=b, c=c)

    @staticmethod
    def fit_base_plane(
        method: VolumeMethod,
        samples: Sequence[PerimeterSample],
        fixed_elevation: Optional[float] = None,
    ) -> Optional[BasePlane]:
        """Choose the reference plane for a method.

        Returns:
            FlatPlane or TiltedPlane, or None for a degenerate best fit.
        """
        elevations = [s.elevation for s in samples]
        if method is VolumeMethod.LOWEST_POINT:
            return FlatPlane(elevation=min(elevations))
        if method is VolumeMethod.AVERAGE_PERIMETER:
            return FlatPlane(elevation=sum(elevations) / len(elevations))
        if method is VolumeMethod.FIXED_ELEVATION:
            assert fixed_elevation is not None
            return FlatPlane(elevation=float(fixed_elevation))
        if method is VolumeMethod.BEST_FIT:
            return VolumeEngine.fit_best_plane(samples=samples)
        raise InvalidMethodArgumentsError(f"Unhandled volume method: {method}")

    @staticmethod
    def integrate_column(
        i: int,
        grid: IntegrationGrid,
        ring: Sequence[tuple[float, float]],
        dem: DemData,
        base_plane: BasePlane,
    ) -> CellContribution:
        """Cut/fill of all cells in grid column i.

        Cells outside the ring or without DEM elevation contribute nothing.
        """
        cut = 0.0
        fill = 0.0
        cells = 0
        lon = grid.min_lon + grid.lon_step * (i + 0.5)
        proj_x = grid.min_proj_x + grid.proj_x_step * (i + 0.5)

        for j in range(grid.grid_size):
            lat = grid.min_lat + grid.lat_step * (j + 0.5)
            if not point_in_ring(lon=lon, lat=lat, ring=ring):
                continue

            dem_elevation = DemSampler.sample(lon=lon, lat=lat, dem=dem)
            if dem_elevation is None:
                continue

            proj_y = grid.min_proj_y + grid.proj_y_step * (j + 0.5)
            delta = dem_elevation - base_elevation_at(plane=base_plane, proj_x=proj_x, proj_y=proj_y)
            if delta > 0:
                fill += delta * grid.cell_area_m2
            else:
                cut += -delta * grid.cell_area_m2
            cells += 1

        return CellContribution(cut=cut, fill=fill, cells=cells)

    def integrate(
        self,
        grid: IntegrationGrid,
        ring: Sequence[tuple[float, float]],
        dem: DemData,
        base_plane: BasePlane,
    ) -> CellContribution:
        """Map every grid column to its partial sum and reduce in column order."""

        def column(i: int) -> CellContribution:
            return VolumeEngine.integrate_column(i=i, grid=grid, ring=ring, dem=dem, base_plane=base_plane)

        if self.workers == 1:
            partials = [column(i) for i in range(grid.grid_size)]
        else:
            with ThreadPoolExecutor(max_workers=self.workers) as pool:
                partials = list(pool.map(column, range(grid.grid_size)))

        total = CellContribution(cut=0.0, fill=0.0, cells=0)
        for partial in partials:
            total = total + partial
        return total

    def compute(
        self,
        polygon: Any,
        dem: DemData,
        method: VolumeMethod | str,
        fixed_elevation: Optional[float] = None,
        grid_size: int = VolumeConfig.DEFAULT_GRID_SIZE,
    ) -> VolumeResult | AnalysisFailure:
        """Compute cut and fill of a polygon against a base plane.

        Args:
            polygon: Polygon as shapely geometry, GeoJSON geometry or Feature
                (a Feature "bbox" is used for gridding when present)
            dem: DEM snapshot to sample
            method: "lowestPoint", "averagePerimeter", "fixedElevation" or "bestFit"
            fixed_elevation: Base elevation for "fixedElevation"
            grid_size: Cells per side of the integration lattice

        Returns:
            VolumeResult, or AnalysisFailure with INSUFFICIENT_COVERAGE
            (fewer than 3 perimeter samples) or DEGENERATE_FIT.

        Raises:
            InvalidMethodArgumentsError: Unknown method, or fixedElevation without a value.
            ValueError: If grid_size < 1.
            TypeError: If polygon is not a Polygon.
        """
        volume_method = self.parse_method(method=method, fixed_elevation=fixed_elevation)
        if grid_size < 1:
            raise ValueError(f"grid_size must be >= 1, got {grid_size}")

        ring = polygon_ring(polygon)

        perimeter = self.sample_perimeter(ring=ring, dem=dem)
        if len(perimeter) < VolumeConfig.MIN_PERIMETER_SAMPLES:
            failure = AnalysisFailure(
                reason=FailureReason.INSUFFICIENT_COVERAGE,
                detail=(
                    f"Only {len(perimeter)} of {len(ring)} perimeter vertices have an elevation; "
                    f"need {VolumeConfig.MIN_PERIMETER_SAMPLES}"
                ),
            )
            logger.warning(f"Volume failed: {failure.message}")
            return failure

        base_plane = self.fit_base_plane(method=volume_method, samples=perimeter, fixed_elevation=fixed_elevation)
        if base_plane is None:
            failure = AnalysisFailure(
                reason=FailureReason.DEGENERATE_FIT,
                detail="Perimeter samples do not define a plane (normal equations are singular)",
            )
            logger.warning(f"Volume failed: {failure.message}")
            return failure

        grid = IntegrationGrid.from_bbox(bbox=polygon_bbox(polygon), dem=dem, grid_size=grid_size)
        total = self.integrate(grid=grid, ring=ring, dem=dem, base_plane=base_plane)

        result = VolumeResult(
            cut=total.cut,
            fill=total.fill,
            base_plane=base_plane,
            method=volume_method,
            cell_area_m2=grid.cell_area_m2,
            cells_sampled=total.cells,
        )
        logger.info(
            f"Volume computed: method={volume_method.value}, cells={total.cells}/{grid_size**2}, "
            f"cut={result.cut:.1f}m³, fill={result.fill:.1f}m³"
        )
        return result
