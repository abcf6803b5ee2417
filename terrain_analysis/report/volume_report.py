"""Volume summary text for display and reporting.

Turns a VolumeResult into labelled lines:
method, base plane, cut, fill, net and sampled area.
"""

from dataclasses import asdict, dataclass

from terrain_analysis.core.geo_calculator import GeoCalculator
from terrain_analysis.model.base_plane import BasePlane, FlatPlane, TiltedPlane
from terrain_analysis.model.volume_result import VolumeResult

NOTE = (
    "Volume is calculated by summing the volume of DEM cells above (fill) "
    "or below (cut) a defined base plane within the polygon."
)


def describe_base_plane(plane: BasePlane) -> str:
    """Base elevation for flat planes, coefficient summary for tilted ones."""
    if isinstance(plane, (FlatPlane, TiltedPlane)):
        return plane.description
    raise TypeError(f"Unknown base plane type: {type(plane).__name__}")


@dataclass(frozen=True)
class VolumeReport:
    """Display-ready rendering of a VolumeResult.

    Example:
        report = VolumeReport(result=result)
        print("\\n".join(report.lines()))
    """

    result: VolumeResult

    @property
    def method_label(self) -> str:
        return self.result.method.label

    @property
    def base_plane_text(self) -> str:
        return describe_base_plane(plane=self.result.base_plane)

    def lines(self) -> list[str]:
        r = self.result
        return [
            f"Method: {self.method_label}",
            f"Base Elevation: {self.base_plane_text}",
            f"Cut Volume: {r.cut:.2f} m³",
            f"Fill Volume: {r.fill:.2f} m³",
            f"Net Volume: {r.net:.2f} m³",
            f"Sampled Area: {GeoCalculator.format_area(r.sampled_area_m2)}",
        ]

    def to_dict(self) -> dict:
        """Plain dict for annotation storage.

        The base plane is stored with its full coefficients (plane_type plus
        elevation, or a, b and c) so it can be rebuilt; its display text is
        kept separately under base_plane_text.
        """
        r = self.result
        return {
            "method": r.method.value,
            "method_label": self.method_label,
            "base_plane": asdict(r.base_plane),
            "base_plane_text": self.base_plane_text,
            "cut": r.cut,
            "fill": r.fill,
            "net": r.net,
            "sampled_area_m2": r.sampled_area_m2,
        }

    def __str__(self) -> str:
        return "\n".join(self.lines())
