"""ProfileChart - Plotly elevation profile rendering.

Renders extracted profiles showing:
- Terrain elevation over along-path distance
- Shaded area under the profile
- Length / elevation range / ascent / descent summary

Reference: DETAILS.md Section 3
"""

import logging
from typing import Optional

import plotly.graph_objects as go

from terrain_analysis.constants import ChartConfig, StyleConfig
from terrain_analysis.core.geo_calculator import GeoCalculator
from terrain_analysis.model.profile import Profile

logger = logging.getLogger(__name__)


class ProfileChart:
    """Renders elevation profiles using Plotly.

    Example:
        chart = ProfileChart()
        fig = chart.render_profile(profile=profile)
        fig.show()
    """

    def __init__(
        self,
        width: int = ChartConfig.DEFAULT_WIDTH,
        height: int = ChartConfig.PROFILE_HEIGHT,
    ) -> None:
        """Initialize profile chart renderer.

        Args:
            width: Chart width in pixels
            height: Chart height in pixels
        """
        self.width = width
        self.height = height

    def render_profile(
        self,
        profile: Profile,
        title: Optional[str] = None,
    ) -> go.Figure:
        """Render an elevation profile.

        Args:
            profile: Extracted profile to visualize
            title: Optional chart title (defaults to "Elevation Profile")

        Returns:
            Plotly Figure object.
        """
        distances = profile.distances
        elevations = profile.elevations

        # Y-axis range hugs the data instead of starting at 0
        min_elev = profile.min_elevation
        max_elev = profile.max_elevation
        padding = max(
            (max_elev - min_elev) * ChartConfig.ELEVATION_PADDING_FACTOR,
            ChartConfig.ELEVATION_PADDING_MIN_M,
        )

        color = StyleConfig.PROFILE_LINE_COLOR
        fig = go.Figure()
        fig.add_trace(
            go.Scatter(
                x=distances,
                y=elevations,
                fill="tozeroy",
                fillcolor=f"rgba{self._hex_to_rgba(hex_color=color, alpha=StyleConfig.PROFILE_FILL_ALPHA)}",
                line=dict(color=color, width=2),
                mode="lines",
                name="Elevation",
                hovertemplate="Distance: %{x:.0f}m<br>Elevation: %{y:.0f}m<extra></extra>",
            )
        )

        fig.update_layout(
            title=dict(text=title or "Elevation Profile", x=0.5),
            xaxis=dict(
                title="Distance (m)",
                showgrid=True,
                gridcolor=StyleConfig.GRID_COLOR,
                range=[distances[0], distances[-1]],
            ),
            yaxis=dict(
                title="Elevation (m)",
                showgrid=True,
                gridcolor=StyleConfig.GRID_COLOR,
                range=[min_elev - padding, max_elev + padding],
            ),
            showlegend=False,
            width=self.width,
            height=self.height,
            margin=dict(l=50, r=30, t=50, b=50),
            plot_bgcolor="white",
        )

        fig.add_annotation(
            xref="paper",
            yref="paper",
            x=0.5,
            y=-0.15,
            text=self.stats_text(profile=profile),
            showarrow=False,
            font=dict(size=11),
        )

        logger.debug(f"Rendered profile chart with {len(profile)} samples")
        return fig

    @staticmethod
    def stats_text(profile: Profile) -> str:
        """One-line summary shown under the chart."""
        return (
            f"Length: {GeoCalculator.format_distance(profile.length_m / 1000)} | "
            f"Min: {profile.min_elevation:.0f}m | "
            f"Max: {profile.max_elevation:.0f}m | "
            f"Ascent: {profile.total_ascent_m:.0f}m | "
            f"Descent: {profile.total_descent_m:.0f}m"
        )

    def _hex_to_rgba(self, hex_color: str, alpha: float) -> tuple:
        """Convert hex color to RGBA tuple."""
        hex_color = hex_color.lstrip("#")
        r = int(hex_color[0:2], 16)
        g = int(hex_color[2:4], 16)
        b = int(hex_color[4:6], 16)
        return (r, g, b, alpha)
