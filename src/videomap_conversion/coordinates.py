"""Geographic points and their sexagesimal text encoding."""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Iterable

import numpy as np


_SEXAGESIMAL_RE = re.compile(r"^([NSEW])(\d+)\.(\d+)\.(\d+)\.(\d+)$")

# (multiplier, zero-padded width) for minutes, seconds and thousandths of a second.
_SUBDIVISIONS = ((60, 2), (60, 2), (1000, 3))


@dataclass(frozen=True)
class GeoPoint:
    """Longitude/latitude pair in decimal degrees, stored as float32."""

    longitude: np.float32
    latitude: np.float32

    def __post_init__(self) -> None:
        object.__setattr__(self, "longitude", np.float32(self.longitude))
        object.__setattr__(self, "latitude", np.float32(self.latitude))

    def as_tuple(self) -> tuple[float, float]:
        return (float(self.longitude), float(self.latitude))


def format_degrees(value: float) -> str:
    """
    Format an unsigned angle as ``DDD.MM.SS.fff``.

    Each stage keeps the integer part and carries the fractional remainder to
    the next one in float32 arithmetic. Stages are truncated, never rounded.
    """
    v = np.float32(abs(np.float32(value)))
    parts = [f"{int(v):03d}"]
    for multiplier, width in _SUBDIVISIONS:
        v = (v - np.floor(v)) * np.float32(multiplier)
        parts.append(f"{int(v):0{width}d}")
    return ".".join(parts)


def encode_point(point: GeoPoint) -> str:
    """Encode as ``N040.38.09.500,W073.46.30.000`` (latitude first)."""
    lat_hemisphere = "N" if point.latitude > 0 else "S"
    lon_hemisphere = "E" if point.longitude > 0 else "W"
    return (
        f"{lat_hemisphere}{format_degrees(point.latitude)},"
        f"{lon_hemisphere}{format_degrees(point.longitude)}"
    )


def parse_sexagesimal(text: str) -> float:
    """Parse one ``<hemisphere>DDD.MM.SS.fff`` component back to signed degrees."""
    match = _SEXAGESIMAL_RE.match(text.strip())
    if match is None:
        raise ValueError(f"Invalid sexagesimal coordinate: {text!r}.")
    hemisphere, degrees, minutes, seconds, fraction = match.groups()
    value = (
        int(degrees)
        + int(minutes) / 60.0
        + int(seconds) / 3600.0
        + int(fraction) / 3_600_000.0
    )
    return -value if hemisphere in ("S", "W") else value


def decode_point(text: str) -> GeoPoint:
    """Inverse of :func:`encode_point` (up to truncation error)."""
    parts = text.strip().strip('"').split(",")
    if len(parts) != 2:
        raise ValueError(f"Invalid encoded point: {text!r}.")
    lat_text, lon_text = parts
    if lat_text[:1] not in ("N", "S") or lon_text[:1] not in ("E", "W"):
        raise ValueError(f"Invalid hemisphere markers in encoded point: {text!r}.")
    return GeoPoint(longitude=parse_sexagesimal(lon_text), latitude=parse_sexagesimal(lat_text))


def points_to_array(points: Iterable[GeoPoint]) -> np.ndarray:
    """Stack points into an ``(n, 2)`` float32 array of (lon, lat)."""
    arr = np.array([(p.longitude, p.latitude) for p in points], dtype=np.float32)
    return arr.reshape(-1, 2)
