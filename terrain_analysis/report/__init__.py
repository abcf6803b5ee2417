"""Presentation helpers for analysis results.

- ProfileChart: Plotly elevation profile figure
- VolumeReport: Labelled cut/fill summary
"""

from terrain_analysis.report.profile_chart import ProfileChart
from terrain_analysis.report.volume_report import VolumeReport, describe_base_plane

__all__ = [
    "ProfileChart",
    "VolumeReport",
    "describe_base_plane",
]
