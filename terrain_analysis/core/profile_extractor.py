"""Elevation profile extraction along a drawn line.

Walks the line vertex to vertex and samples the DEM:
- Sample budget shared between segments proportional to their length
- At least two samples per segment, however short
- Linear interpolation of lon/lat within a segment
- Samples without elevation are dropped, never zero-filled

Reference: DETAILS.md Section 3
"""

import logging
from math import ceil
from typing import Any, Optional

from terrain_analysis.constants import ProfileConfig
from terrain_analysis.core.dem_sampler import DemSampler
from terrain_analysis.core.geo_calculator import GeoCalculator
from terrain_analysis.model.dem_data import DemData
from terrain_analysis.model.failure import AnalysisFailure, FailureReason
from terrain_analysis.model.geometry import line_coordinates
from terrain_analysis.model.profile import Profile, ProfileSample

logger = logging.getLogger(__name__)


class ProfileExtractor:
    """Builds distance/elevation profiles from a DEM.

    Example:
        result = ProfileExtractor.extract(line=feature, dem=dem)
        if isinstance(result, AnalysisFailure):
            print(result.message)
        else:
            print(f"{len(result)} samples over {result.length_m:.0f}m")
    """

    @staticmethod
    def segment_sample_count(segment_km: float, total_km: float, sample_budget: int) -> int:
        """Number of samples allotted to one segment.

        Args:
            segment_km: Segment length
            total_km: Whole line length (> 0)
            sample_budget: Total samples for the line

        Returns:
            max(MIN_SEGMENT_SAMPLES, ceil(sample_budget * segment_km / total_km))
        """
        return max(ProfileConfig.MIN_SEGMENT_SAMPLES, ceil(sample_budget * (segment_km / total_km)))

    @staticmethod
    def extract(
        line: Any,
        dem: DemData,
        sample_budget: int = ProfileConfig.DEFAULT_SAMPLE_BUDGET,
    ) -> Profile | AnalysisFailure:
        """Sample the DEM along a line.

        The start vertex is sampled first at distance 0. Each segment then gets
        its share of the budget at fractions t = j/n (j = 1..n), so segment end
        vertices are sampled exactly once.

        Args:
            line: LineString as shapely geometry, GeoJSON geometry or Feature
            dem: DEM snapshot to sample
            sample_budget: Approximate total number of samples

        Returns:
            Profile, or AnalysisFailure with DEGENERATE_LINE (zero length) or
            INSUFFICIENT_COVERAGE (fewer than two samples on the DEM).

        Raises:
            ValueError: If sample_budget < 1.
            TypeError: If line is not a LineString.
        """
        if sample_budget < 1:
            raise ValueError(f"sample_budget must be >= 1, got {sample_budget}")

        coords = line_coordinates(line)
        total_km = GeoCalculator.line_length_km(coords)
        if total_km == 0:
            failure = AnalysisFailure(reason=FailureReason.DEGENERATE_LINE, detail="Line has zero length")
            logger.warning(f"Profile failed: {failure.message}")
            return failure

        samples: list[ProfileSample] = []

        start_elev = DemSampler.sample(lon=coords[0][0], lat=coords[0][1], dem=dem)
        if start_elev is not None:
            samples.append(ProfileSample(distance_m=0.0, elevation=start_elev))

        accumulated_km = 0.0
        for i in range(len(coords) - 1):
            start_lon, start_lat = coords[i]
            end_lon, end_lat = coords[i + 1]
            segment_km = GeoCalculator.haversine_distance_km(
                lon1=start_lon,
                lat1=start_lat,
                lon2=end_lon,
                lat2=end_lat,
            )
            n = ProfileExtractor.segment_sample_count(
                segment_km=segment_km,
                total_km=total_km,
                sample_budget=sample_budget,
            )

            for j in range(1, n + 1):
                t = j / n
                elev = DemSampler.sample(
                    lon=start_lon + (end_lon - start_lon) * t,
                    lat=start_lat + (end_lat - start_lat) * t,
                    dem=dem,
                )
                if elev is not None:
                    samples.append(ProfileSample(distance_m=(accumulated_km + segment_km * t) * 1000, elevation=elev))

            accumulated_km += segment_km

        if len(samples) < ProfileConfig.MIN_VALID_SAMPLES:
            failure = AnalysisFailure(
                reason=FailureReason.INSUFFICIENT_COVERAGE,
                detail=f"Only {len(samples)} sample(s) on the DEM; the line may be outside the DEM extent",
            )
            logger.warning(f"Profile failed: {failure.message}")
            return failure

        logger.info(f"Profile extracted: {len(samples)} samples over {total_km * 1000:.0f}m")
        return Profile(samples=tuple(samples))

    @staticmethod
    def extract_or_none(
        line: Any,
        dem: DemData,
        sample_budget: int = ProfileConfig.DEFAULT_SAMPLE_BUDGET,
    ) -> Optional[Profile]:
        """Same as extract(), collapsing any failure to None."""
        result = ProfileExtractor.extract(line=line, dem=dem, sample_budget=sample_budget)
        return None if isinstance(result, AnalysisFailure) else result
