"""Convert CRC facility video maps into ATC simulator scenario inputs."""

from .artifacts import ConversionArtifacts, VideoMap
from .catalog import Catalog, MapSpec, load_catalog, parse_catalog
from .config import ConversionConfig, OutputConfig, PolicyConfig, SourceConfig
from .coordinates import GeoPoint, decode_point, encode_point, format_degrees, parse_sexagesimal
from .errors import (
    CatalogError,
    ConversionError,
    DuplicateMapError,
    GeometryDocumentError,
    MissingGeometryError,
    OutputWriteError,
)
from .geojson_extract import (
    GeometryDocument,
    LineCoordinates,
    UnrecognizedShape,
    decode_coordinates,
    extract_lines,
    extract_segments,
    flatten_segments,
    parse_geometry_document,
)
from .pipeline import aggregate, register_traversal, run

__all__ = [
    "aggregate",
    "Catalog",
    "CatalogError",
    "ConversionArtifacts",
    "ConversionConfig",
    "ConversionError",
    "decode_coordinates",
    "decode_point",
    "DuplicateMapError",
    "encode_point",
    "extract_lines",
    "extract_segments",
    "flatten_segments",
    "format_degrees",
    "GeoPoint",
    "GeometryDocument",
    "GeometryDocumentError",
    "LineCoordinates",
    "load_catalog",
    "MapSpec",
    "MissingGeometryError",
    "OutputConfig",
    "OutputWriteError",
    "parse_catalog",
    "parse_geometry_document",
    "parse_sexagesimal",
    "PolicyConfig",
    "register_traversal",
    "run",
    "SourceConfig",
    "UnrecognizedShape",
    "VideoMap",
]
