"""Profile - Elevation series along a drawn line.

A Profile is the output of ProfileExtractor: distance along the path
(meters from the line start) paired with the DEM elevation at that spot.
Distances never decrease; samples that hit no data are simply absent.

Reference: DETAILS.md Section 3
"""

from dataclasses import dataclass

from terrain_analysis.constants import ProfileConfig


@dataclass(frozen=True)
class ProfileSample:
    """One point of an elevation profile.

    Attributes:
        distance_m: Along-path distance from the line start in meters
        elevation: DEM elevation in meters
    """

    distance_m: float
    elevation: float

    def __repr__(self) -> str:
        return f"ProfileSample({self.distance_m:.1f}m, elev={self.elevation:.1f}m)"


@dataclass(frozen=True)
class Profile:
    """Ordered elevation samples along a path.

    Attributes:
        samples: At least two samples with non-decreasing distance

    Computed Properties:
        length_m: Distance of the last sample
        min_elevation / max_elevation: Elevation range
        total_ascent_m / total_descent_m: Summed climbs and drops between samples
    """

    samples: tuple[ProfileSample, ...]

    def __post_init__(self) -> None:
        """Validate sample count and ordering."""
        object.__setattr__(self, "samples", tuple(self.samples))
        if len(self.samples) < ProfileConfig.MIN_VALID_SAMPLES:
            raise ValueError(f"Profile needs at least {ProfileConfig.MIN_VALID_SAMPLES} samples, got {len(self.samples)}")
        for prev, curr in zip(self.samples, self.samples[1:]):
            if curr.distance_m < prev.distance_m:
                raise ValueError(f"Profile distances must not decrease: {prev.distance_m} -> {curr.distance_m}")

    def __len__(self) -> int:
        return len(self.samples)

    def __iter__(self):
        return iter(self.samples)

    def __getitem__(self, index: int) -> ProfileSample:
        return self.samples[index]

    @property
    def distances(self) -> list[float]:
        return [s.distance_m for s in self.samples]

    @property
    def elevations(self) -> list[float]:
        return [s.elevation for s in self.samples]

    @property
    def length_m(self) -> float:
        """Along-path distance covered by the profile."""
        return self.samples[-1].distance_m

    @property
    def min_elevation(self) -> float:
        return min(self.elevations)

    @property
    def max_elevation(self) -> float:
        return max(self.elevations)

    @property
    def total_ascent_m(self) -> float:
        """Sum of all positive elevation steps."""
        return sum(max(0.0, b - a) for a, b in zip(self.elevations, self.elevations[1:]))

    @property
    def total_descent_m(self) -> float:
        """Sum of all negative elevation steps, as a positive number."""
        return sum(max(0.0, a - b) for a, b in zip(self.elevations, self.elevations[1:]))

    def to_records(self) -> list[dict[str, float]]:
        """Chart-friendly list of {"distance": m, "elevation": m} dicts."""
        return [{"distance": s.distance_m, "elevation": s.elevation} for s in self.samples]
