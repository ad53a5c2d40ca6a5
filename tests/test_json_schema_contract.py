from __future__ import annotations

import json
from pathlib import Path
import tempfile
import unittest
import sys


SRC_DIR = Path(__file__).resolve().parents[1] / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

try:
    from jsonschema import ValidationError, validate

    _HAS_JSONSCHEMA = True
except Exception:
    _HAS_JSONSCHEMA = False

from videomap_conversion.config import ConversionConfig
from videomap_conversion.pipeline import run


@unittest.skipUnless(_HAS_JSONSCHEMA, "jsonschema package is required for schema-contract tests")
class JsonSchemaContractTest(unittest.TestCase):
    def _load_schema(self, name: str) -> dict:
        repo_root = Path(__file__).resolve().parents[1]
        schema_path = repo_root / "docs" / "schema" / name
        self.assertTrue(schema_path.exists(), f"Missing schema file: {schema_path}")
        return json.loads(schema_path.read_text())

    def test_example_facility_validates(self) -> None:
        repo_root = Path(__file__).resolve().parents[1]
        payload = json.loads((repo_root / "examples" / "crc" / "ARTCCs" / "ZNY.json").read_text())
        validate(instance=payload, schema=self._load_schema("facility.schema.json"))

    def test_json_outputs_validate(self) -> None:
        repo_root = Path(__file__).resolve().parents[1]
        with tempfile.TemporaryDirectory() as tmp_dir:
            out = Path(tmp_dir)
            run(ConversionConfig.json_export("ZNY", root=repo_root / "examples" / "crc", output_dir=out))
            videomaps = json.loads((out / "ZNY-videomaps.json").read_text())
            info = json.loads((out / "ZNY.info").read_text())

        validate(instance=videomaps, schema=self._load_schema("videomaps.schema.json"))
        validate(instance=info, schema=self._load_schema("videomaps-info.schema.json"))

    def test_invalid_info_fails_schema_validation(self) -> None:
        invalid = [{"group": 2, "label": "X", "name": "Y"}]
        with self.assertRaises(ValidationError):
            validate(instance=invalid, schema=self._load_schema("videomaps-info.schema.json"))

    def test_rounded_coordinate_text_fails_schema_validation(self) -> None:
        invalid = {"MAP": ["N40.5,W73.75"]}
        with self.assertRaises(ValidationError):
            validate(instance=invalid, schema=self._load_schema("videomaps.schema.json"))


if __name__ == "__main__":
    unittest.main()
