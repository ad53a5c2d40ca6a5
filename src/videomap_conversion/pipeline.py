"""Facility conversion pipeline: catalog -> geometry documents -> outputs."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterator

from .artifacts import ConversionArtifacts, VideoMap
from .catalog import Catalog, MapSpec, load_catalog
from .config import ConversionConfig
from .coordinates import GeoPoint
from .errors import DuplicateMapError, GeometryDocumentError, MissingGeometryError
from .geojson_extract import GeometryDocument, extract_lines, load_geometry_document
from .serialization import write_binary_outputs, write_json_outputs

logger = logging.getLogger(__name__)


Traversal = Callable[[ConversionConfig, Catalog], Iterator[tuple[MapSpec, Path]]]


def iter_scan_sources(config: ConversionConfig, catalog: Catalog) -> Iterator[tuple[MapSpec, Path]]:
    """
    Walk the facility's video-map directory in lexical order.

    Geometry documents whose stem is not a catalog id are not used by the
    facility and are skipped.
    """
    source = config.source
    root = source.facility_videomaps_dir
    if not root.is_dir():
        raise MissingGeometryError(f"{root}: video map directory not found")

    specs = catalog.specs_by_id
    for path in sorted(root.rglob("*")):
        if not path.is_file() or path.suffix != source.geometry_suffix:
            continue
        if source.facility not in path.relative_to(source.videomaps_root).as_posix():
            continue
        spec = specs.get(path.stem)
        if spec is None:
            logger.debug("Skipping %s: not used by %s", path, source.facility)
            continue
        yield spec, path


def iter_direct_sources(config: ConversionConfig, catalog: Catalog) -> Iterator[tuple[MapSpec, Path]]:
    """Resolve ``<videomaps>/<facility>/<id><suffix>`` for every catalog entry."""
    for spec in catalog.maps:
        path = config.source.geometry_path(spec.id)
        if not path.is_file():
            raise MissingGeometryError(
                f"{path}: geometry document for video map {spec.name!r} not found"
            )
        yield spec, path


TRAVERSALS: dict[str, Traversal] = {
    "scan": iter_scan_sources,
    "direct": iter_direct_sources,
}


def register_traversal(name: str, traversal: Traversal) -> None:
    """Register or override a geometry traversal strategy at runtime."""
    TRAVERSALS[name] = traversal


def _read_lines(
    path: Path,
    config: ConversionConfig,
    artifacts: ConversionArtifacts,
) -> list[list[GeoPoint]]:
    try:
        document = load_geometry_document(path)
    except GeometryDocumentError as exc:
        if config.policy.malformed_geometry == "abort":
            raise
        logger.warning("warning: %s", exc)
        artifacts.warnings.append(str(exc))
        document = exc.partial if exc.partial is not None else GeometryDocument()
    return extract_lines(document)


def _merge(
    artifacts: ConversionArtifacts,
    spec: MapSpec,
    lines: list[list[GeoPoint]],
    path: Path,
    duplicate_policy: str,
) -> None:
    existing = artifacts.video_maps.get(spec.name)
    if existing is None:
        artifacts.video_maps[spec.name] = VideoMap.from_spec(spec, lines, path)
        return

    if duplicate_policy == "abort":
        raise DuplicateMapError(
            f"{spec.name}: multiple definitions ({existing.sources[-1]} and {path})"
        )
    message = f"{spec.name}: multiple definitions"
    logger.warning("%s", message)
    artifacts.warnings.append(message)

    if duplicate_policy == "append":
        merged = VideoMap.from_spec(spec, existing.lines + lines, path)
        merged.sources = existing.sources + [path]
        artifacts.video_maps[spec.name] = merged
    else:
        artifacts.video_maps[spec.name] = VideoMap.from_spec(spec, lines, path)


def aggregate(config: ConversionConfig, catalog: Catalog) -> ConversionArtifacts:
    """Collect the line geometry of every catalog map found by the traversal."""
    traversal = TRAVERSALS.get(config.policy.traversal)
    if traversal is None:
        allowed = ", ".join(sorted(TRAVERSALS))
        raise ValueError(f"Unknown traversal: {config.policy.traversal!r}. Allowed values: {allowed}.")

    artifacts = ConversionArtifacts(
        facility=config.facility,
        output_format=config.output.format,
        num_catalog_maps=len(catalog),
    )
    for spec, path in traversal(config, catalog):
        logger.info("Reading %s", path)
        lines = _read_lines(path, config, artifacts)
        artifacts.documents_read.append(path)
        _merge(artifacts, spec, lines, path, config.policy.duplicate_names)

    logger.info(
        "Read %d video maps from %d documents",
        len(artifacts.video_maps),
        len(artifacts.documents_read),
    )
    return artifacts


def run(config: ConversionConfig) -> ConversionArtifacts:
    """Run one full facility conversion and write its outputs."""
    catalog = load_catalog(config.source.catalog_path, facility=config.facility)
    logger.info(
        "Read facility definition: %s (%d video maps)",
        config.source.catalog_path,
        len(catalog),
    )

    artifacts = aggregate(config, catalog)

    output = config.output
    if output.format == "binary":
        written = write_binary_outputs(
            artifacts.video_maps, catalog, output.output_dir, suffix=output.binary_suffix
        )
    else:
        written = write_json_outputs(artifacts.video_maps, catalog, output.output_dir)
    artifacts.output_files.extend(written)

    if output.plot_output and artifacts.video_maps:
        from .visualization import plot_video_maps

        plot_path = output.output_dir / f"{config.facility}-videomaps.png"
        plot_video_maps(artifacts.video_maps, output_path=plot_path, title=config.facility)
        artifacts.output_files.append(plot_path)

    return artifacts
