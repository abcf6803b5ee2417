"""BasePlane - Reference surface for cut/fill volume computation.

Two variants:
- FlatPlane: constant elevation (lowest point, perimeter average, fixed value)
- TiltedPlane: z = a * x + b * y + c in the DEM's projected coordinates (best fit)

Use base_elevation_at() to evaluate either variant at a grid cell.

Reference: DETAILS.md Section 4.2
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class BasePlane(ABC):
    """Abstract base class for volume reference planes.

    Each subclass has a plane_type field for serialization.
    """

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable summary of the plane."""

    def __str__(self) -> str:
        return self.description


@dataclass(frozen=True)
class FlatPlane(BasePlane):
    """Horizontal plane at a single elevation.

    Attributes:
        elevation: Plane elevation in meters
        plane_type: Type identifier for serialization
    """

    elevation: float
    plane_type: str = "FlatPlane"

    @property
    def description(self) -> str:
        return f"{self.elevation:.2f} m"


@dataclass(frozen=True)
class TiltedPlane(BasePlane):
    """Plane z = a * x + b * y + c over projected coordinates.

    Attributes:
        a: Elevation change per projected x unit
        b: Elevation change per projected y unit
        c: Elevation at the projected origin
        plane_type: Type identifier for serialization
    """

    a: float
    b: float
    c: float
    plane_type: str = "TiltedPlane"

    @property
    def description(self) -> str:
        return f"Tilted Plane (a={self.a:.2e}, b={self.b:.2e})"


def base_elevation_at(plane: BasePlane, proj_x: float, proj_y: float) -> float:
    """Evaluate a base plane at a projected coordinate.

    Args:
        plane: FlatPlane or TiltedPlane
        proj_x: Projected x of the cell center
        proj_y: Projected y of the cell center

    Returns:
        Base elevation in meters.

    Raises:
        TypeError: For an unknown plane variant.
    """
    if isinstance(plane, FlatPlane):
        return plane.elevation
    if isinstance(plane, TiltedPlane):
        return plane.a * proj_x + plane.b * proj_y + plane.c
    raise TypeError(f"Unknown base plane type: {type(plane).__name__}")
