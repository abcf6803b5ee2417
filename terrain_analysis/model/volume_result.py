"""VolumeResult - Cut/fill totals of a volume analysis.

Reference: DETAILS.md Section 4
"""

from dataclasses import dataclass
from enum import Enum

from terrain_analysis.constants import VolumeConfig
from terrain_analysis.model.base_plane import BasePlane


class VolumeMethod(str, Enum):
    """How the base plane is chosen from the polygon perimeter."""

    LOWEST_POINT = "lowestPoint"
    AVERAGE_PERIMETER = "averagePerimeter"
    FIXED_ELEVATION = "fixedElevation"
    BEST_FIT = "bestFit"

    @property
    def label(self) -> str:
        return VolumeConfig.METHOD_LABELS[self.value]


@dataclass(frozen=True)
class VolumeResult:
    """Earthwork volumes of a polygon against a base plane.

    Attributes:
        cut: Volume below the base plane in m³ (>= 0)
        fill: Volume above the base plane in m³ (>= 0)
        base_plane: Reference plane the volumes were measured against
        method: Method that produced the base plane
        cell_area_m2: Ground area of one integration cell
        cells_sampled: Grid cells inside the polygon with a DEM elevation

    Computed Properties:
        net: fill - cut
        sampled_area_m2: Area actually covered by sampled cells
    """

    cut: float
    fill: float
    base_plane: BasePlane
    method: VolumeMethod
    cell_area_m2: float = 0.0
    cells_sampled: int = 0

    @property
    def net(self) -> float:
        """Net volume in m³; positive means more material above the plane."""
        return self.fill - self.cut

    @property
    def sampled_area_m2(self) -> float:
        return self.cell_area_m2 * self.cells_sampled

    def __repr__(self) -> str:
        return (
            f"VolumeResult(method={self.method.value}, cut={self.cut:.1f}m³, "
            f"fill={self.fill:.1f}m³, net={self.net:.1f}m³, base={self.base_plane})"
        )
