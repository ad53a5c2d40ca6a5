"""Command-line entrypoint for videomap_conversion."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
import sys
from importlib import metadata

from .config import (
    SUPPORTED_DUPLICATE_POLICIES,
    SUPPORTED_MALFORMED_GEOMETRY_POLICIES,
    SUPPORTED_OUTPUT_FORMATS,
    SUPPORTED_TRAVERSALS,
    ConversionConfig,
)
from .errors import ConversionError
from .pipeline import run


def _package_version() -> str:
    try:
        return metadata.version("crc-videomap-converter")
    except metadata.PackageNotFoundError:
        return "0.1.0"


def _configure_logging(log_level: str) -> None:
    level_name = (log_level or "INFO").upper()
    level = getattr(logging, level_name, None)
    if not isinstance(level, int):
        raise ValueError(
            f"Invalid --log-level: {log_level!r}. "
            "Allowed values: DEBUG, INFO, WARNING, ERROR, CRITICAL."
        )
    logging.basicConfig(level=level, format="%(message)s", force=True)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vmconvert",
        description=(
            "Convert a facility's CRC video maps (ARTCCs/<facility>.json and "
            "VideoMaps/<facility>/*.geojson) into simulator scenario inputs."
        ),
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "facility",
        type=str,
        help="Facility (ARTCC) code, e.g. ZNY.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"vmconvert {_package_version()}",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Python logging level.",
    )
    parser.add_argument(
        "--root",
        type=Path,
        default=None,
        help="Directory holding ARTCCs/ and VideoMaps/ (default: current directory).",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory for output artifacts (default: current directory).",
    )
    parser.add_argument(
        "--format",
        choices=SUPPORTED_OUTPUT_FORMATS,
        default=None,
        help="Output encoding. `binary` also defaults to direct lookup and aborting on malformed maps.",
    )
    parser.add_argument(
        "--traversal",
        choices=SUPPORTED_TRAVERSALS,
        default=None,
        help="Locate geometry by scanning the facility directory or by direct id lookup.",
    )
    parser.add_argument(
        "--on-malformed-geometry",
        choices=SUPPORTED_MALFORMED_GEOMETRY_POLICIES,
        default=None,
        help="Skip malformed geometry documents with a warning, or abort the run.",
    )
    parser.add_argument(
        "--on-duplicate",
        choices=SUPPORTED_DUPLICATE_POLICIES,
        default=None,
        help="Handling of two geometry documents resolving to one display name.",
    )
    parser.add_argument(
        "--config-json",
        type=Path,
        default=None,
        help="Optional JSON file serialized from ConversionConfig.",
    )
    parser.add_argument(
        "--plot",
        action="store_true",
        help="Also write a PNG preview of the converted video maps (needs matplotlib).",
    )
    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    return _build_parser().parse_args(argv)


def build_config(args: argparse.Namespace) -> ConversionConfig:
    if args.config_json is not None:
        payload = json.loads(args.config_json.read_text())
        payload.setdefault("source", {})["facility"] = args.facility
        config = ConversionConfig.from_dict(payload)
    elif args.format == "binary":
        config = ConversionConfig.binary_export(args.facility)
    else:
        config = ConversionConfig.json_export(args.facility)

    if args.root is not None:
        config.source.root = args.root
    if args.output_dir is not None:
        config.output.output_dir = args.output_dir
    if args.format is not None:
        config.output.format = args.format
    if args.traversal is not None:
        config.policy.traversal = args.traversal
    if args.on_malformed_geometry is not None:
        config.policy.malformed_geometry = args.on_malformed_geometry
    if args.on_duplicate is not None:
        config.policy.duplicate_names = args.on_duplicate
    if getattr(args, "plot", False):
        config.output.plot_output = True

    config.__post_init__()
    config.output.__post_init__()
    config.policy.__post_init__()
    return config


def _run(args: argparse.Namespace) -> None:
    config = build_config(args)
    artifacts = run(config)

    print(f"Facility: {artifacts.facility}")
    print(
        f"Video maps: {len(artifacts.video_maps)} converted, "
        f"{artifacts.num_catalog_maps} in catalog"
    )
    for path in artifacts.output_files:
        print(f"  Wrote {path}")
    if artifacts.warnings:
        print("Warnings:")
        for warning in artifacts.warnings:
            print(f"  - {warning}")


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    try:
        _configure_logging(getattr(args, "log_level", "INFO"))
        _run(args)
    except KeyboardInterrupt:
        print("Interrupted.", file=sys.stderr)
        raise SystemExit(130) from None
    except ConversionError as exc:
        logging.getLogger(__name__).error("Error: %s", exc)
        raise SystemExit(1) from None
    except Exception as exc:  # noqa: BLE001
        logger = logging.getLogger(__name__)
        if logging.getLogger().handlers:
            logger.error("Error: %s", exc)
            if logger.isEnabledFor(logging.DEBUG):
                logger.exception("Detailed traceback")
        else:
            print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(2) from None


if __name__ == "__main__":
    main()
