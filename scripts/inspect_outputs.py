#!/usr/bin/env python3
"""Summarize converted video-map outputs (JSON or binary variant)."""

from __future__ import annotations

import argparse
from pathlib import Path
import sys


def _resolve_src_dir() -> Path:
    return Path(__file__).resolve().parents[1] / "src"


SRC_DIR = _resolve_src_dir()
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from videomap_conversion.serialization import (  # noqa: E402
    read_manifest,
    read_video_maps_binary,
    read_video_maps_json,
)


def main() -> None:
    parser = argparse.ArgumentParser(description="Summarize converted video-map outputs")
    parser.add_argument("path", type=Path, help="-videomaps.json, -videomaps.pkl or -manifest.pkl file.")
    args = parser.parse_args()

    path: Path = args.path
    if path.suffix == ".json":
        payload = read_video_maps_json(path)
        for name, points in payload.items():
            print(f"{name}: {len(points) // 2} segments")
    elif path.stem.endswith("-manifest"):
        for name in sorted(read_manifest(path)):
            print(name)
    else:
        for item in read_video_maps_binary(path):
            num_points = sum(len(line) for line in item["lines"])
            print(
                f"{item['name']} [{item['label']}] group={item['group']} "
                f"lines={len(item['lines'])} points={num_points}"
            )


if __name__ == "__main__":
    main()
