"""GeoJSON video-map documents -> line geometry."""

from __future__ import annotations

from dataclasses import dataclass, field
from numbers import Real
from pathlib import Path
from typing import Any, Iterator, Optional, Union

import numpy as np

from .coordinates import GeoPoint
from .errors import GeometryDocumentError, decode_json_bytes, expect_type


@dataclass(frozen=True)
class LineCoordinates:
    """Coordinates that decoded as a flat sequence of points."""

    points: tuple[GeoPoint, ...]


@dataclass(frozen=True)
class UnrecognizedShape:
    """Coordinates of any other shape (point, polygon rings, garbage...)."""

    raw_kind: str


CoordinateShape = Union[LineCoordinates, UnrecognizedShape]


@dataclass(frozen=True)
class GeometryFeature:
    type: str
    geometry_type: str
    coordinates: CoordinateShape

    @property
    def is_line_string(self) -> bool:
        return self.type == "Feature" and self.geometry_type == "LineString"

    @property
    def points_or_empty(self) -> tuple[GeoPoint, ...]:
        if isinstance(self.coordinates, LineCoordinates):
            return self.coordinates.points
        return ()


@dataclass(frozen=True)
class GeometryDocument:
    type: str = ""
    features: tuple[GeometryFeature, ...] = field(default_factory=tuple)


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _as_float32(value: Any) -> Optional[np.float32]:
    """float32 value of a JSON number, or None when it is not finite as float32."""
    try:
        with np.errstate(over="ignore", invalid="ignore"):
            converted = np.float32(float(value))
    except OverflowError:
        return None
    return converted if np.isfinite(converted) else None


def _raw_kind(raw: Any) -> str:
    if isinstance(raw, list):
        if raw and isinstance(raw[0], list) and raw[0] and isinstance(raw[0][0], list):
            return "nested_array"
        if raw and _is_number(raw[0]):
            return "position"
        return "array"
    return type(raw).__name__


def decode_coordinates(raw: Any) -> CoordinateShape:
    """
    Decode ``coordinates`` as a flat list of ``[lon, lat, ...]`` positions.

    Never raises: any other shape, or a value that is not finite as float32,
    yields :class:`UnrecognizedShape`. Extra ordinates (altitude) are ignored
    and ``null`` decodes to an empty line.
    """
    if raw is None:
        return LineCoordinates(points=())
    if not isinstance(raw, list):
        return UnrecognizedShape(raw_kind=_raw_kind(raw))

    points: list[GeoPoint] = []
    for position in raw:
        if (
            not isinstance(position, list)
            or len(position) < 2
            or not _is_number(position[0])
            or not _is_number(position[1])
        ):
            return UnrecognizedShape(raw_kind=_raw_kind(raw))
        longitude, latitude = _as_float32(position[0]), _as_float32(position[1])
        if longitude is None or latitude is None:
            return UnrecognizedShape(raw_kind="non_finite")
        points.append(GeoPoint(longitude=longitude, latitude=latitude))
    return LineCoordinates(points=tuple(points))


def _parse_feature(raw: Any, index: int, source: Union[str, Path]) -> GeometryFeature:
    path = f"features[{index}]"
    expect_type(raw, dict, path, GeometryDocumentError, source)
    feature_type = raw.get("type", "")
    expect_type(feature_type, str, f"{path}.type", GeometryDocumentError, source)

    geometry = raw.get("geometry")
    if geometry is None:
        return GeometryFeature(type=feature_type, geometry_type="", coordinates=LineCoordinates(points=()))
    expect_type(geometry, dict, f"{path}.geometry", GeometryDocumentError, source)
    geometry_type = geometry.get("type", "")
    expect_type(geometry_type, str, f"{path}.geometry.type", GeometryDocumentError, source)

    return GeometryFeature(
        type=feature_type,
        geometry_type=geometry_type,
        coordinates=decode_coordinates(geometry.get("coordinates")),
    )


def parse_geometry_document(
    data: Union[bytes, str],
    source: Union[str, Path] = "<geojson>",
) -> GeometryDocument:
    """
    Decode a GeoJSON document into a :class:`GeometryDocument`.

    Raises :class:`GeometryDocumentError` on JSON syntax errors (with a
    line/character diagnostic) and on structural mismatches of the
    type/features/geometry fields. In the latter case the error's ``partial``
    attribute holds every feature that decoded cleanly.
    """
    payload = decode_json_bytes(data, source, GeometryDocumentError)
    expect_type(payload, dict, "<root>", GeometryDocumentError, source)

    problems: list[str] = []
    doc_type = payload.get("type", "")
    try:
        expect_type(doc_type, str, "type", GeometryDocumentError, source)
    except GeometryDocumentError as exc:
        problems.append(str(exc))
        doc_type = ""

    raw_features = payload.get("features")
    if raw_features is None:
        raw_features = []
    expect_type(raw_features, list, "features", GeometryDocumentError, source)

    features: list[GeometryFeature] = []
    for i, raw in enumerate(raw_features):
        try:
            features.append(_parse_feature(raw, i, source))
        except GeometryDocumentError as exc:
            problems.append(str(exc))

    document = GeometryDocument(type=doc_type, features=tuple(features))
    if problems:
        extra = f" (and {len(problems) - 1} more)" if len(problems) > 1 else ""
        raise GeometryDocumentError(f"{problems[0]}{extra}", partial=document)
    return document


def load_geometry_document(path: Path) -> GeometryDocument:
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise GeometryDocumentError(f"{path}: unable to read file: {exc}") from exc
    return parse_geometry_document(data, source=path)


def iter_line_strings(document: GeometryDocument) -> Iterator[tuple[GeoPoint, ...]]:
    """Yield the point sequence of every ``Feature``/``LineString`` entry."""
    for feature in document.features:
        if not feature.is_line_string:
            continue
        if isinstance(feature.coordinates, UnrecognizedShape):
            continue
        yield feature.coordinates.points


def extract_lines(document: GeometryDocument) -> list[list[GeoPoint]]:
    """Per-feature point sequences, one entry per LineString feature."""
    return [list(points) for points in iter_line_strings(document)]


def flatten_segments(lines: list[list[GeoPoint]]) -> list[GeoPoint]:
    """Concatenate the consecutive point pairs of every line (2(n-1) points each)."""
    segments: list[GeoPoint] = []
    for points in lines:
        for i in range(len(points) - 1):
            segments.append(points[i])
            segments.append(points[i + 1])
    return segments


def extract_segments(document: GeometryDocument) -> list[GeoPoint]:
    return flatten_segments(extract_lines(document))
