"""Aggregated video maps and run summary artifacts."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from .catalog import MapSpec
from .coordinates import GeoPoint
from .geojson_extract import flatten_segments


@dataclass
class VideoMap:
    """Line geometry of one display name, plus its catalog metadata."""

    name: str
    label: str
    group: int
    stars_id: Optional[int] = None
    lines: list[list[GeoPoint]] = field(default_factory=list)
    sources: list[Path] = field(default_factory=list)

    @classmethod
    def from_spec(cls, spec: MapSpec, lines: list[list[GeoPoint]], source: Path) -> "VideoMap":
        return cls(
            name=spec.name,
            label=spec.short_name,
            group=spec.group,
            stars_id=spec.stars_id,
            lines=lines,
            sources=[source],
        )

    @property
    def segments(self) -> list[GeoPoint]:
        return flatten_segments(self.lines)

    @property
    def num_points(self) -> int:
        return sum(len(line) for line in self.lines)

    def to_binary_dict(self) -> dict[str, Any]:
        return {
            "group": self.group,
            "label": self.label,
            "name": self.name,
            "id": self.stars_id,
            "lines": [[p.as_tuple() for p in line] for line in self.lines],
        }


def _path_for_summary(path: Path) -> str:
    try:
        return str(Path(path).relative_to(Path.cwd()))
    except ValueError:
        return str(path)


@dataclass
class ConversionArtifacts:
    """Outcome of one facility conversion."""

    facility: str
    output_format: str
    num_catalog_maps: int = 0
    video_maps: dict[str, VideoMap] = field(default_factory=dict)
    documents_read: list[Path] = field(default_factory=list)
    output_files: list[Path] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "facility": self.facility,
            "output_format": self.output_format,
            "num_catalog_maps": self.num_catalog_maps,
            "video_maps": {
                name: {"lines": len(vm.lines), "points": vm.num_points}
                for name, vm in self.video_maps.items()
            },
            "documents_read": [_path_for_summary(p) for p in self.documents_read],
            "output_files": [_path_for_summary(p) for p in self.output_files],
            "warnings": list(self.warnings),
        }
