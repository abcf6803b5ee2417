"""DemData - Immutable in-memory snapshot of a DEM raster.

A DemData holds everything the sampler needs to turn a WGS84 coordinate
into an elevation:
- Flat row-major elevation grid (row 0 is the northern edge)
- Extent in the raster's native CRS and in WGS84
- Optional no-data sentinel
- Optional forward projection (lon, lat) -> (x, y)

Built by the DEM loader (core.dem_loader) or directly in tests.

Reference: DETAILS.md Section 2
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional

import numpy as np

# (min_x, min_y, max_x, max_y)
BBox = tuple[float, float, float, float]
ProjConverter = Callable[[float, float], tuple[float, float]]


@dataclass(frozen=True, eq=False)
class DemData:
    """Raster surface with its extent, no-data rule and projection.

    Attributes:
        values: Flat row-major float32 elevations, length width * height
        width: Number of columns (>= 1)
        height: Number of rows (>= 1)
        bbox: Extent in the raster's native CRS (min_x, min_y, max_x, max_y)
        wgs84_bbox: Same extent in WGS84 (min_lon, min_lat, max_lon, max_lat)
        nodata_value: Sentinel meaning "elevation unknown", if any
        proj_converter: Forward transform (lon, lat) -> (x, y) into the native CRS.
            None means the raster is already geographic.

    Example:
        dem = DemData(
            values=np.full(100, 50.0),
            width=10,
            height=10,
            bbox=(0.0, 0.0, 1.0, 1.0),
            wgs84_bbox=(0.0, 0.0, 1.0, 1.0),
        )
    """

    values: Any
    width: int
    height: int
    bbox: BBox
    wgs84_bbox: BBox
    nodata_value: Optional[float] = None
    proj_converter: Optional[ProjConverter] = None

    def __post_init__(self) -> None:
        """Validate dimensions and freeze a float32 copy of the grid."""
        if self.width < 1 or self.height < 1:
            raise ValueError(f"DEM dimensions must be >= 1, got {self.width}x{self.height}")

        values = np.array(self.values, dtype=np.float32).ravel()
        if values.size != self.width * self.height:
            raise ValueError(
                f"DEM has {values.size} values but {self.width}x{self.height} = {self.width * self.height} cells"
            )
        values.flags.writeable = False
        object.__setattr__(self, "values", values)

        for name in ("bbox", "wgs84_bbox"):
            box = tuple(float(v) for v in getattr(self, name))
            if len(box) != 4:
                raise ValueError(f"{name} must have 4 values (min_x, min_y, max_x, max_y), got {len(box)}")
            if not (box[0] < box[2] and box[1] < box[3]):
                raise ValueError(f"{name} is degenerate: {box}")
            object.__setattr__(self, name, box)

    @property
    def is_geographic(self) -> bool:
        """True when the raster grid is already in WGS84 (no projection)."""
        return self.proj_converter is None

    def project(self, lon: float, lat: float) -> tuple[float, float]:
        """Map a WGS84 coordinate into the raster's native CRS."""
        if self.proj_converter is None:
            return lon, lat
        x, y = self.proj_converter(lon, lat)
        return float(x), float(y)

    def value_at(self, row: int, col: int) -> float:
        """Raw cell value (may be the no-data sentinel)."""
        return float(self.values[row * self.width + col])

    def is_nodata(self, value: float) -> bool:
        """Check a raw cell value against the no-data rule.

        The sentinel is compared at the grid's float32 precision so that
        sentinels like -3.4e38 match their stored representation. NaN cells
        never carry an elevation either.
        """
        if np.isnan(value):
            return True
        if self.nodata_value is None:
            return False
        return bool(np.float32(value) == np.float32(self.nodata_value))

    def __repr__(self) -> str:
        return (
            f"DemData({self.width}x{self.height}, bbox={self.bbox}, "
            f"wgs84_bbox={self.wgs84_bbox}, nodata={self.nodata_value}, "
            f"projected={not self.is_geographic})"
        )
