"""Core algorithms for terrain analysis.

- GeoCalculator: Geodesic calculations (distances, line length, polygon area, formatting)
- DemSampler: Nearest-cell elevation lookup on a DemData snapshot
- ProfileExtractor: Distance/elevation series along a line
- VolumeEngine: Base-plane fitting and cut/fill grid integration
- load_dem: Single-band GeoTIFF to DemData

Mathematical details documented in DETAILS.md.
"""

from terrain_analysis.core.dem_loader import load_dem
from terrain_analysis.core.dem_sampler import DemSampler, SampleResult
from terrain_analysis.core.geo_calculator import GeoCalculator
from terrain_analysis.core.measurement import describe_feature, describe_profile_line
from terrain_analysis.core.profile_extractor import ProfileExtractor
from terrain_analysis.core.volume_engine import (
    VolumeEngine,
    point_in_ring,
    solve_3x3,
)

__all__ = [
    # Geo calculator
    "GeoCalculator",
    # DEM access
    "DemSampler",
    "SampleResult",
    "load_dem",
    # Analyses
    "ProfileExtractor",
    "VolumeEngine",
    "point_in_ring",
    "solve_3x3",
    # Measurement text
    "describe_feature",
    "describe_profile_line",
]
