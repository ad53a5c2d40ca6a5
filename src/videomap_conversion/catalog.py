"""Facility video-map catalog (``ARTCCs/<facility>.json``) parsing."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

from .errors import CatalogError, decode_json_bytes, expect_type


@dataclass(frozen=True)
class MapSpec:
    """One configured video map."""

    id: str  # geometry document base filename
    name: str  # display name, aggregation key
    short_name: str  # compact label for the display control bar
    category: str  # brightness category "A" | "B"
    stars_id: Optional[int] = None

    @property
    def group(self) -> int:
        return 0 if self.category == "A" else 1

    def info_entry(self) -> dict[str, Any]:
        return {"group": self.group, "label": self.short_name, "name": self.name}


@dataclass(frozen=True)
class Catalog:
    facility: str
    maps: tuple[MapSpec, ...]

    @property
    def id_to_name(self) -> dict[str, str]:
        return {spec.id: spec.name for spec in self.maps}

    @property
    def specs_by_id(self) -> dict[str, MapSpec]:
        # Later entries win when an id is repeated, matching id_to_name.
        return {spec.id: spec for spec in self.maps}

    def by_id(self, map_id: str) -> Optional[MapSpec]:
        return self.specs_by_id.get(map_id)

    def info_entries(self) -> list[dict[str, Any]]:
        return [spec.info_entry() for spec in self.maps]

    def __len__(self) -> int:
        return len(self.maps)


def _string_field(raw: dict[str, Any], key: str, path: str, source: Union[str, Path]) -> str:
    value = raw.get(key)
    if value is None:
        return ""
    expect_type(value, str, f"{path}.{key}", CatalogError, source)
    return value


def _parse_map_spec(raw: Any, index: int, source: Union[str, Path]) -> MapSpec:
    path = f"videoMaps[{index}]"
    expect_type(raw, dict, path, CatalogError, source)
    stars_id = raw.get("starsId")
    if stars_id is not None:
        expect_type(stars_id, int, f"{path}.starsId", CatalogError, source)
    return MapSpec(
        id=_string_field(raw, "id", path, source),
        name=_string_field(raw, "name", path, source),
        short_name=_string_field(raw, "shortName", path, source),
        category=_string_field(raw, "starsBrightnessCategory", path, source),
        stars_id=stars_id,
    )


def parse_catalog(
    data: Union[bytes, str],
    facility: str,
    source: Union[str, Path] = "<catalog>",
) -> Catalog:
    """Decode the facility configuration, keeping video maps in document order."""
    payload = decode_json_bytes(data, source, CatalogError)
    expect_type(payload, dict, "<root>", CatalogError, source)
    raw_maps = payload.get("videoMaps")
    if raw_maps is None:
        raw_maps = []
    expect_type(raw_maps, list, "videoMaps", CatalogError, source)
    maps = tuple(_parse_map_spec(raw, i, source) for i, raw in enumerate(raw_maps))
    return Catalog(facility=facility, maps=maps)


def load_catalog(path: Path, facility: str) -> Catalog:
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise CatalogError(f"{path}: unable to read facility definition: {exc}") from exc
    return parse_catalog(data, facility=facility, source=path)
