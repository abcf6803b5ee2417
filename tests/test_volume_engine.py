"""Tests for VolumeEngine - base planes and cut/fill grid integration."""

import numpy as np
import pytest

from conftest import make_dem
from terrain_analysis.core.geo_calculator import GeoCalculator
from terrain_analysis.core.volume_engine import (
    CellContribution,
    IntegrationGrid,
    PerimeterSample,
    VolumeEngine,
    point_in_ring,
    solve_3x3,
)
from terrain_analysis.model.base_plane import FlatPlane, TiltedPlane
from terrain_analysis.model.dem_data import DemData
from terrain_analysis.model.failure import AnalysisFailure, FailureReason, InvalidMethodArgumentsError
from terrain_analysis.model.volume_result import VolumeMethod, VolumeResult

ALL_METHODS = ["lowestPoint", "averagePerimeter", "fixedElevation", "bestFit"]


def compute(dem: DemData, polygon, method: str, **kwargs) -> VolumeResult:
    """Run the engine and assert a result came back."""
    result = VolumeEngine().compute(polygon=polygon, dem=dem, method=method, **kwargs)
    assert isinstance(result, VolumeResult), f"Expected VolumeResult, got {result}"
    return result


class TestPointInRing:
    """Even-odd ray casting."""

    SQUARE = [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0), (0.0, 0.0)]
    # U shape: notch cut from the top between x=0.4 and x=0.6
    U_SHAPE = [(0, 0), (1, 0), (1, 1), (0.6, 1), (0.6, 0.3), (0.4, 0.3), (0.4, 1), (0, 1), (0, 0)]

    def test_inside_and_outside_square(self) -> None:
        assert point_in_ring(lon=0.5, lat=0.5, ring=self.SQUARE)
        assert not point_in_ring(lon=1.5, lat=0.5, ring=self.SQUARE)
        assert not point_in_ring(lon=0.5, lat=-0.1, ring=self.SQUARE)

    def test_concave_notch_is_outside(self) -> None:
        assert not point_in_ring(lon=0.5, lat=0.8, ring=self.U_SHAPE)
        assert point_in_ring(lon=0.5, lat=0.1, ring=self.U_SHAPE)
        assert point_in_ring(lon=0.2, lat=0.8, ring=self.U_SHAPE)

    def test_open_ring_works_too(self) -> None:
        assert point_in_ring(lon=0.5, lat=0.5, ring=self.SQUARE[:-1])


class TestSolve3x3:
    """Closed-form adjugate solver."""

    def test_identity(self) -> None:
        assert solve_3x3(A=[[1, 0, 0], [0, 1, 0], [0, 0, 1]], b=[4, 5, 6]) == pytest.approx((4, 5, 6))

    def test_matches_numpy(self) -> None:
        A = [[4.0, -2.0, 1.0], [3.0, 6.0, -4.0], [2.0, 1.0, 8.0]]
        b = [12.0, -25.0, 32.0]
        assert solve_3x3(A=A, b=b) == pytest.approx(tuple(np.linalg.solve(np.array(A), np.array(b))))

    def test_singular_returns_none(self) -> None:
        assert solve_3x3(A=[[1, 2, 3], [2, 4, 6], [1, 1, 1]], b=[1, 2, 3]) is None


class TestBestFitPlane:
    """Least-squares plane through perimeter samples."""

    @staticmethod
    def _samples(points: list[tuple[float, float, float]]) -> list[PerimeterSample]:
        return [PerimeterSample(lon=x, lat=y, proj_x=x, proj_y=y, elevation=z) for x, y, z in points]

    def test_recovers_exact_plane(self) -> None:
        samples = self._samples([(x, y, 2 * x + 3 * y + 10) for x, y in [(0, 0), (1, 0), (0, 1), (1, 1), (0.5, 0.2)]])
        plane = VolumeEngine.fit_best_plane(samples=samples)

        assert isinstance(plane, TiltedPlane)
        assert plane.a == pytest.approx(2.0)
        assert plane.b == pytest.approx(3.0)
        assert plane.c == pytest.approx(10.0)

    def test_least_squares_matches_numpy(self) -> None:
        points = [(0, 0, 1.0), (2, 0, 2.5), (2, 3, 4.0), (0, 3, 2.0), (1, 1, 1.0)]
        plane = VolumeEngine.fit_best_plane(samples=self._samples(points))
        design = np.array([[x, y, 1.0] for x, y, _ in points])
        expected, *_ = np.linalg.lstsq(design, np.array([z for *_, z in points]), rcond=None)

        assert plane is not None
        assert (plane.a, plane.b, plane.c) == pytest.approx(tuple(expected))

    def test_collinear_samples_are_degenerate(self) -> None:
        samples = self._samples([(0, 0, 1.0), (1, 1, 2.0), (2, 2, 3.0)])
        assert VolumeEngine.fit_best_plane(samples=samples) is None


class TestArgumentValidation:
    """Caller contract violations raise before any DEM access."""

    def test_fixed_elevation_requires_value(self, square_polygon: dict) -> None:
        with pytest.raises(InvalidMethodArgumentsError, match="fixed_elevation"):
            VolumeEngine().compute(polygon=square_polygon, dem=None, method="fixedElevation")  # type: ignore[arg-type]

    def test_unknown_method(self, square_polygon: dict) -> None:
        with pytest.raises(InvalidMethodArgumentsError, match="Unknown volume method"):
            VolumeEngine().compute(polygon=square_polygon, dem=None, method="triangulation")  # type: ignore[arg-type]

    def test_grid_size_must_be_positive(self, square_polygon: dict, flat_dem: DemData) -> None:
        with pytest.raises(ValueError, match="grid_size"):
            VolumeEngine().compute(polygon=square_polygon, dem=flat_dem, method="lowestPoint", grid_size=0)

    def test_workers_must_be_positive(self) -> None:
        with pytest.raises(ValueError, match="workers"):
            VolumeEngine(workers=0)

    def test_enum_method_accepted(self, square_polygon: dict, flat_dem: DemData) -> None:
        result = compute(flat_dem, square_polygon, VolumeMethod.LOWEST_POINT)
        assert result.method is VolumeMethod.LOWEST_POINT


class TestFlatTerrain:
    """DEM equal to the base plane everywhere: no cut, no fill."""

    @pytest.mark.parametrize("method", ALL_METHODS)
    def test_flat_terrain_has_no_volume(self, flat_dem: DemData, square_polygon: dict, method: str) -> None:
        result = compute(flat_dem, square_polygon, method, fixed_elevation=50.0)

        assert result.cut == pytest.approx(0.0, abs=1.0)
        assert result.fill == pytest.approx(0.0, abs=1.0)
        assert result.net == pytest.approx(0.0, abs=1.0)
        assert result.net == result.fill - result.cut

    @pytest.mark.parametrize("method", ["lowestPoint", "averagePerimeter"])
    def test_flat_base_elevation_is_50(self, flat_dem: DemData, square_polygon: dict, method: str) -> None:
        result = compute(flat_dem, square_polygon, method)

        assert result.base_plane == FlatPlane(elevation=50.0)
        assert result.cut == 0.0
        assert result.fill == 0.0

    def test_every_cell_sampled(self, flat_dem: DemData, square_polygon: dict) -> None:
        result = compute(flat_dem, square_polygon, "lowestPoint")
        assert result.cells_sampled == 50 * 50

    def test_best_fit_is_horizontal(self, flat_dem: DemData, square_polygon: dict) -> None:
        result = compute(flat_dem, square_polygon, "bestFit")

        assert isinstance(result.base_plane, TiltedPlane)
        assert result.base_plane.a == pytest.approx(0.0, abs=1e-9)
        assert result.base_plane.b == pytest.approx(0.0, abs=1e-9)
        assert result.base_plane.c == pytest.approx(50.0)


class TestMound:
    """Plateau at 55 m inside a 50 m perimeter."""

    def test_lowest_point_gives_fill_only(self, mound_dem: DemData, square_polygon: dict) -> None:
        result = compute(mound_dem, square_polygon, "lowestPoint")

        assert result.base_plane == FlatPlane(elevation=50.0)
        assert result.cut == 0.0
        assert result.fill > 0
        assert result.fill == pytest.approx(5.0 * result.cell_area_m2 * 2500)
        assert result.net == result.fill - result.cut

    def test_average_perimeter_matches_lowest(self, mound_dem: DemData, square_polygon: dict) -> None:
        lowest = compute(mound_dem, square_polygon, "lowestPoint")
        average = compute(mound_dem, square_polygon, "averagePerimeter")
        assert average.base_plane == FlatPlane(elevation=50.0)
        assert average.fill == lowest.fill

    def test_fixed_elevation_above_mound_gives_cut(self, mound_dem: DemData, square_polygon: dict) -> None:
        result = compute(mound_dem, square_polygon, "fixedElevation", fixed_elevation=60.0)

        assert result.base_plane == FlatPlane(elevation=60.0)
        assert result.fill == 0.0
        assert result.cut == pytest.approx(5.0 * result.cell_area_m2 * 2500)
        assert result.net < 0

    def test_best_fit_on_level_perimeter(self, mound_dem: DemData, square_polygon: dict) -> None:
        result = compute(mound_dem, square_polygon, "bestFit")

        assert result.fill == pytest.approx(5.0 * result.cell_area_m2 * 2500, rel=1e-6)
        assert result.cut == pytest.approx(0.0, abs=1.0)

    def test_projected_dem_matches_geographic(
        self, mound_dem: DemData, projected_mound_dem: DemData, square_polygon: dict
    ) -> None:
        geographic = compute(mound_dem, square_polygon, "lowestPoint")
        projected = compute(projected_mound_dem, square_polygon, "lowestPoint")

        assert projected.base_plane == FlatPlane(elevation=50.0)
        assert projected.fill == pytest.approx(geographic.fill)
        assert projected.cells_sampled == geographic.cells_sampled

    def test_nodata_cells_are_skipped_not_zero(self, square_polygon: dict) -> None:
        """A no-data hole inside the plateau neither adds cut nor fill."""
        grid = np.full((10, 10), 50.0)
        grid[2:8, 2:8] = 55.0
        grid[4, 4] = -9999.0
        dem = make_dem(grid=grid, nodata_value=-9999.0)

        result = compute(dem, square_polygon, "lowestPoint")

        assert 0 < result.cells_sampled < 2500
        assert result.cut == 0.0
        assert result.fill == pytest.approx(5.0 * result.cell_area_m2 * result.cells_sampled)

    def test_feature_bbox_drives_grid(self, mound_dem: DemData, square_polygon: dict) -> None:
        """Precomputed bbox [0, 1]²: 0.02° cells, 30x30 of them inside the square."""
        feature = {"type": "Feature", "bbox": [0.0, 0.0, 1.0, 1.0], "properties": {}, "geometry": square_polygon}
        result = compute(mound_dem, feature, "lowestPoint")

        assert result.cells_sampled == 900
        assert result.fill == pytest.approx(5.0 * result.cell_area_m2 * 900)


class TestFailures:
    """Explicit no-result outcomes."""

    def test_polygon_outside_dem(self, flat_dem: DemData) -> None:
        polygon = {"type": "Polygon", "coordinates": [[[5, 5], [6, 5], [6, 6], [5, 6], [5, 5]]]}
        result = VolumeEngine().compute(polygon=polygon, dem=flat_dem, method="lowestPoint")

        assert isinstance(result, AnalysisFailure)
        assert result.reason is FailureReason.INSUFFICIENT_COVERAGE

    def test_two_valid_perimeter_samples_are_not_enough(self, flat_dem: DemData) -> None:
        """Only (0.5, 0.5) resolves, counted twice as first and closing vertex."""
        polygon = {"type": "Polygon", "coordinates": [[[0.5, 0.5], [1.5, 0.5], [1.5, 1.5], [0.5, 1.5], [0.5, 0.5]]]}
        result = VolumeEngine().compute(polygon=polygon, dem=flat_dem, method="averagePerimeter")

        assert isinstance(result, AnalysisFailure)
        assert result.reason is FailureReason.INSUFFICIENT_COVERAGE

    def test_collinear_perimeter_best_fit_fails(self, flat_dem: DemData) -> None:
        polygon = {"type": "Polygon", "coordinates": [[[0.2, 0.2], [0.5, 0.5], [0.8, 0.8], [0.2, 0.2]]]}
        result = VolumeEngine().compute(polygon=polygon, dem=flat_dem, method="bestFit")

        assert isinstance(result, AnalysisFailure)
        assert result.reason is FailureReason.DEGENERATE_FIT

    def test_collinear_perimeter_flat_methods_still_work(self, flat_dem: DemData) -> None:
        polygon = {"type": "Polygon", "coordinates": [[[0.2, 0.2], [0.5, 0.5], [0.8, 0.8], [0.2, 0.2]]]}
        result = VolumeEngine().compute(polygon=polygon, dem=flat_dem, method="lowestPoint")
        assert isinstance(result, VolumeResult)


class TestGridIntegration:
    """Map-reduce structure and cell geometry."""

    def test_cell_area_from_bbox_edges(self, flat_dem: DemData) -> None:
        grid = IntegrationGrid.from_bbox(bbox=(0.2, 0.2, 0.8, 0.8), dem=flat_dem, grid_size=50)
        width = GeoCalculator.haversine_distance_m(lon1=0.2, lat1=0.5, lon2=0.2 + 0.6 / 50, lat2=0.5)
        height = GeoCalculator.haversine_distance_m(lon1=0.2, lat1=0.2, lon2=0.2, lat2=0.2 + 0.6 / 50)
        assert grid.cell_area_m2 == pytest.approx(width * height)

    def test_projected_steps_interpolate_bbox_corners(self, projected_mound_dem: DemData) -> None:
        grid = IntegrationGrid.from_bbox(bbox=(0.2, 0.2, 0.8, 0.8), dem=projected_mound_dem, grid_size=10)
        assert grid.min_proj_x == pytest.approx(200.0)
        assert grid.proj_x_step == pytest.approx(60.0)
        assert grid.proj_y_step == pytest.approx(60.0)

    def test_contributions_add(self) -> None:
        total = CellContribution(cut=1.0, fill=2.0, cells=3) + CellContribution(cut=0.5, fill=0.25, cells=1)
        assert total == CellContribution(cut=1.5, fill=2.25, cells=4)

    @pytest.mark.parametrize("method", ["averagePerimeter", "bestFit"])
    def test_worker_count_does_not_change_totals(self, rough_dem: DemData, square_polygon: dict, method: str) -> None:
        serial = VolumeEngine(workers=1).compute(polygon=square_polygon, dem=rough_dem, method=method)
        parallel = VolumeEngine(workers=4).compute(polygon=square_polygon, dem=rough_dem, method=method)

        assert isinstance(serial, VolumeResult) and isinstance(parallel, VolumeResult)
        assert serial.cut == parallel.cut
        assert serial.fill == parallel.fill
        assert serial.cells_sampled == parallel.cells_sampled

    def test_rough_terrain_has_both_cut_and_fill(self, rough_dem: DemData, square_polygon: dict) -> None:
        result = compute(rough_dem, square_polygon, "averagePerimeter")

        assert result.cut > 0
        assert result.fill > 0
        assert result.net == result.fill - result.cut
