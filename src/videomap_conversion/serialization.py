"""Writers (and matching readers) for the two output encodings."""

from __future__ import annotations

import json
import logging
from pathlib import Path
import pickle
from typing import Any

from .artifacts import VideoMap
from .catalog import Catalog
from .coordinates import encode_point
from .errors import OutputWriteError

logger = logging.getLogger(__name__)


def _write_bytes(path: Path, payload: bytes) -> Path:
    logger.info("Writing %s", path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(payload)
    except OSError as exc:
        raise OutputWriteError(f"{path}: unable to write file: {exc}") from exc
    return path


def _dump_json(payload: Any) -> bytes:
    return (json.dumps(payload, indent=4, ensure_ascii=False) + "\n").encode("utf-8")


def json_output_paths(output_dir: Path, facility: str) -> tuple[Path, Path]:
    return output_dir / f"{facility}-videomaps.json", output_dir / f"{facility}.info"


def binary_output_paths(output_dir: Path, facility: str, suffix: str = ".pkl") -> tuple[Path, Path]:
    return (
        output_dir / f"{facility}-videomaps{suffix}",
        output_dir / f"{facility}-manifest{suffix}",
    )


def encode_segments_payload(video_maps: dict[str, VideoMap]) -> dict[str, list[str]]:
    """Display name -> flattened segment endpoints as sexagesimal strings."""
    return {
        name: [encode_point(p) for p in video_map.segments]
        for name, video_map in sorted(video_maps.items())
    }


def write_json_outputs(
    video_maps: dict[str, VideoMap],
    catalog: Catalog,
    output_dir: Path,
) -> list[Path]:
    """Write ``<facility>-videomaps.json`` and ``<facility>.info``."""
    maps_path, info_path = json_output_paths(output_dir, catalog.facility)
    return [
        _write_bytes(maps_path, _dump_json(encode_segments_payload(video_maps))),
        _write_bytes(info_path, _dump_json(catalog.info_entries())),
    ]


def write_binary_outputs(
    video_maps: dict[str, VideoMap],
    catalog: Catalog,
    output_dir: Path,
    suffix: str = ".pkl",
) -> list[Path]:
    """
    Write the pickled map list and the pickled manifest of display names.

    Both payloads hold builtins only, so readers do not need this package.
    """
    maps_path, manifest_path = binary_output_paths(output_dir, catalog.facility, suffix)
    maps_payload = [vm.to_binary_dict() for vm in video_maps.values()]
    manifest_payload = set(video_maps)
    return [
        _write_bytes(maps_path, pickle.dumps(maps_payload, protocol=pickle.HIGHEST_PROTOCOL)),
        _write_bytes(manifest_path, pickle.dumps(manifest_payload, protocol=pickle.HIGHEST_PROTOCOL)),
    ]


def read_video_maps_json(path: Path) -> dict[str, list[str]]:
    return json.loads(path.read_text(encoding="utf-8"))


def read_video_maps_binary(path: Path) -> list[dict[str, Any]]:
    with path.open("rb") as f:
        return pickle.load(f)


def read_manifest(path: Path) -> set[str]:
    with path.open("rb") as f:
        return pickle.load(f)
