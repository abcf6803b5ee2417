"""AnalysisFailure - Explicit "no result" outcomes with a reason code.

Expected failures (the line left the DEM, the fit is singular, ...) are
returned to the caller as values, never raised, so that missing data can
not silently turn into a default elevation.
Use isinstance(result, AnalysisFailure) to tell them apart from results.

Caller contract violations are different: they raise
InvalidMethodArgumentsError before any DEM access.

Reference: DETAILS.md Section 5
"""

from dataclasses import dataclass
from enum import Enum


class FailureReason(str, Enum):
    """Why an analysis produced no result."""

    OUT_OF_EXTENT = "out_of_extent"
    NO_DATA = "no_data"
    DEGENERATE_LINE = "degenerate_line"
    INSUFFICIENT_COVERAGE = "insufficient_coverage"
    DEGENERATE_FIT = "degenerate_fit"


@dataclass(frozen=True)
class AnalysisFailure:
    """A failed analysis.

    Attributes:
        reason: Machine-readable failure category
        detail: Human-readable explanation for logs and UI messages
    """

    reason: FailureReason
    detail: str

    @property
    def message(self) -> str:
        return f"{self.reason.value}: {self.detail}"

    def __str__(self) -> str:
        return self.message


class InvalidMethodArgumentsError(ValueError):
    """Raised when a volume method is requested with missing or unknown arguments."""
