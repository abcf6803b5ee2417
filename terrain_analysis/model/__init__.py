"""Data model classes for terrain analysis.

- DemData: Immutable raster snapshot (grid, extents, no-data, projection)
- ProfileSample / Profile: Elevation series along a line
- BasePlane: FlatPlane | TiltedPlane reference surfaces
- VolumeMethod / VolumeResult: Cut/fill outcome
- AnalysisFailure / FailureReason: Explicit "no result" outcomes
- geometry: Coordinate extraction from shapely or GeoJSON inputs

Data structure details documented in DETAILS.md.
"""

from terrain_analysis.model.base_plane import (
    BasePlane,
    FlatPlane,
    TiltedPlane,
    base_elevation_at,
)
from terrain_analysis.model.dem_data import BBox, DemData
from terrain_analysis.model.failure import (
    AnalysisFailure,
    FailureReason,
    InvalidMethodArgumentsError,
)
from terrain_analysis.model.profile import Profile, ProfileSample
from terrain_analysis.model.volume_result import VolumeMethod, VolumeResult

__all__ = [
    "BBox",
    "DemData",
    "Profile",
    "ProfileSample",
    "BasePlane",
    "FlatPlane",
    "TiltedPlane",
    "base_elevation_at",
    "VolumeMethod",
    "VolumeResult",
    "AnalysisFailure",
    "FailureReason",
    "InvalidMethodArgumentsError",
]
