"""Configuration models for video-map conversion runs."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
import json
from pathlib import Path
from typing import Any


SUPPORTED_OUTPUT_FORMATS = ("json", "binary")
SUPPORTED_TRAVERSALS = ("scan", "direct")
SUPPORTED_MALFORMED_GEOMETRY_POLICIES = ("warn", "abort")
SUPPORTED_DUPLICATE_POLICIES = ("overwrite", "append", "abort")


def _serialize_paths(payload: Any) -> Any:
    if isinstance(payload, Path):
        return str(payload)
    if isinstance(payload, list):
        return [_serialize_paths(v) for v in payload]
    if isinstance(payload, dict):
        return {k: _serialize_paths(v) for k, v in payload.items()}
    return payload


def _validate_choice(field_name: str, value: str, allowed: tuple[str, ...]) -> None:
    if value not in allowed:
        allowed_str = ", ".join(allowed)
        raise ValueError(f"Invalid `{field_name}`: {value!r}. Allowed values: {allowed_str}.")


@dataclass
class SourceConfig:
    """Where the installed facility data lives."""

    facility: str = ""
    root: Path = Path(".")
    catalog_dir: str = "ARTCCs"
    videomaps_dir: str = "VideoMaps"
    geometry_suffix: str = ".geojson"

    @property
    def catalog_path(self) -> Path:
        return self.root / self.catalog_dir / f"{self.facility}.json"

    @property
    def videomaps_root(self) -> Path:
        return self.root / self.videomaps_dir

    @property
    def facility_videomaps_dir(self) -> Path:
        return self.videomaps_root / self.facility

    def geometry_path(self, map_id: str) -> Path:
        return self.facility_videomaps_dir / f"{map_id}{self.geometry_suffix}"


@dataclass
class OutputConfig:
    """Output encoding and destination."""

    format: str = "json"
    output_dir: Path = Path(".")
    plot_output: bool = False
    binary_suffix: str = ".pkl"

    def __post_init__(self) -> None:
        _validate_choice("format", self.format, SUPPORTED_OUTPUT_FORMATS)


@dataclass
class PolicyConfig:
    """How the pipeline locates geometry and which problems are fatal."""

    traversal: str = "scan"  # scan | direct.
    malformed_geometry: str = "warn"  # warn | abort.
    duplicate_names: str = "overwrite"  # overwrite | append | abort.

    def __post_init__(self) -> None:
        _validate_choice("traversal", self.traversal, SUPPORTED_TRAVERSALS)
        _validate_choice(
            "malformed_geometry",
            self.malformed_geometry,
            SUPPORTED_MALFORMED_GEOMETRY_POLICIES,
        )
        _validate_choice("duplicate_names", self.duplicate_names, SUPPORTED_DUPLICATE_POLICIES)


@dataclass
class ConversionConfig:
    """Top-level config for one facility conversion."""

    source: SourceConfig
    output: OutputConfig = field(default_factory=OutputConfig)
    policy: PolicyConfig = field(default_factory=PolicyConfig)

    def __post_init__(self) -> None:
        if not self.source.facility.strip():
            raise ValueError("`source.facility` must be non-empty.")

    @property
    def facility(self) -> str:
        return self.source.facility

    @classmethod
    def json_export(
        cls,
        facility: str,
        root: Path = Path("."),
        output_dir: Path = Path("."),
    ) -> "ConversionConfig":
        """
        Preset for the scenario JSON export: scan the facility's video-map
        directory and keep going past malformed documents.
        """
        return cls(
            source=SourceConfig(facility=facility, root=root),
            output=OutputConfig(format="json", output_dir=output_dir),
            policy=PolicyConfig(traversal="scan", malformed_geometry="warn"),
        )

    @classmethod
    def binary_export(
        cls,
        facility: str,
        root: Path = Path("."),
        output_dir: Path = Path("."),
    ) -> "ConversionConfig":
        """
        Preset for the binary export: every catalog entry must have its
        geometry document and any malformed document aborts the run.
        """
        return cls(
            source=SourceConfig(facility=facility, root=root),
            output=OutputConfig(format="binary", output_dir=output_dir),
            policy=PolicyConfig(traversal="direct", malformed_geometry="abort"),
        )

    def to_dict(self) -> dict[str, Any]:
        return _serialize_paths(asdict(self))

    def to_json(self, output_path: Path) -> None:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(json.dumps(self.to_dict(), indent=2))

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "ConversionConfig":
        source_raw = dict(payload.get("source", {}))
        output_raw = dict(payload.get("output", {}))
        policy_raw = dict(payload.get("policy", {}))
        if "root" in source_raw:
            source_raw["root"] = Path(source_raw["root"])
        if "output_dir" in output_raw:
            output_raw["output_dir"] = Path(output_raw["output_dir"])
        return cls(
            source=SourceConfig(**source_raw),
            output=OutputConfig(**output_raw),
            policy=PolicyConfig(**policy_raw),
        )

    @classmethod
    def from_json(cls, input_path: Path) -> "ConversionConfig":
        payload = json.loads(input_path.read_text())
        return cls.from_dict(payload)
