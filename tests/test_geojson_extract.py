from __future__ import annotations

import json
from pathlib import Path
import tempfile
import unittest
import warnings
import sys


SRC_DIR = Path(__file__).resolve().parents[1] / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from videomap_conversion.coordinates import GeoPoint
from videomap_conversion.errors import GeometryDocumentError, offset_to_line_char
from videomap_conversion.geojson_extract import (
    LineCoordinates,
    UnrecognizedShape,
    decode_coordinates,
    extract_lines,
    extract_segments,
    flatten_segments,
    load_geometry_document,
    parse_geometry_document,
)


def _feature(geometry_type: str, coordinates, feature_type: str = "Feature") -> dict:
    return {
        "type": feature_type,
        "geometry": {"type": geometry_type, "coordinates": coordinates},
        "properties": {},
    }


def _document(*features: dict) -> bytes:
    return json.dumps({"type": "FeatureCollection", "features": list(features)}).encode("utf-8")


class DecodeCoordinatesTest(unittest.TestCase):
    def test_line_of_positions(self) -> None:
        shape = decode_coordinates([[1.0, 2.0], [3, 4]])
        self.assertIsInstance(shape, LineCoordinates)
        self.assertEqual(shape.points, (GeoPoint(1.0, 2.0), GeoPoint(3.0, 4.0)))

    def test_altitude_ordinate_is_ignored(self) -> None:
        shape = decode_coordinates([[1.0, 2.0, 150.0]])
        self.assertEqual(shape, LineCoordinates(points=(GeoPoint(1.0, 2.0),)))

    def test_null_is_an_empty_line(self) -> None:
        self.assertEqual(decode_coordinates(None), LineCoordinates(points=()))

    def test_point_and_polygon_are_unrecognized(self) -> None:
        point = decode_coordinates([1.0, 2.0])
        polygon = decode_coordinates([[[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 0.0]]])
        self.assertIsInstance(point, UnrecognizedShape)
        self.assertEqual(point.raw_kind, "position")
        self.assertIsInstance(polygon, UnrecognizedShape)
        self.assertEqual(polygon.raw_kind, "nested_array")

    def test_non_numeric_values_are_unrecognized(self) -> None:
        self.assertIsInstance(decode_coordinates([["a", "b"]]), UnrecognizedShape)
        self.assertIsInstance(decode_coordinates([[True, False]]), UnrecognizedShape)
        self.assertIsInstance(decode_coordinates([[1.0]]), UnrecognizedShape)
        self.assertIsInstance(decode_coordinates("nope"), UnrecognizedShape)

    def test_values_not_finite_as_float32_are_unrecognized(self) -> None:
        cases = [
            [[1e39, 0], [0, 0]],
            [[0, 0], [0, -1e39]],
            [[float("nan"), 1], [2, 3]],
            [[float("inf"), 1], [2, 3]],
            [[10**400, 1], [2, 3]],
        ]
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            for raw in cases:
                shape = decode_coordinates(raw)
                self.assertIsInstance(shape, UnrecognizedShape, raw)
                self.assertEqual(shape.raw_kind, "non_finite")
        self.assertEqual([w for w in caught if issubclass(w.category, RuntimeWarning)], [])

    def test_largest_float32_value_is_kept(self) -> None:
        shape = decode_coordinates([[3.0e38, -3.0e38], [0, 0]])
        self.assertIsInstance(shape, LineCoordinates)
        self.assertEqual(len(shape.points), 2)


class ExtractSegmentsTest(unittest.TestCase):
    def test_single_line_yields_adjacent_pairs(self) -> None:
        for n in range(0, 7):
            coords = [[float(i), float(i) + 0.5] for i in range(n)]
            document = parse_geometry_document(_document(_feature("LineString", coords)))
            segments = extract_segments(document)
            self.assertEqual(len(segments), 2 * (n - 1) if n >= 2 else 0)
            for k in range(0, len(segments), 2):
                self.assertEqual(segments[k].longitude + 1, segments[k + 1].longitude)

    def test_segments_concatenate_across_features(self) -> None:
        document = parse_geometry_document(
            _document(
                _feature("LineString", [[0, 0], [1, 1], [2, 2]]),
                _feature("LineString", [[5, 5], [6, 6]]),
            )
        )
        segments = extract_segments(document)
        self.assertEqual(
            [p.as_tuple() for p in segments],
            [(0, 0), (1, 1), (1, 1), (2, 2), (5, 5), (6, 6)],
        )

    def test_per_feature_lines_are_kept_separate(self) -> None:
        document = parse_geometry_document(
            _document(
                _feature("LineString", [[0, 0], [1, 1], [2, 2]]),
                _feature("LineString", [[5, 5]]),
            )
        )
        lines = extract_lines(document)
        self.assertEqual([len(line) for line in lines], [3, 1])
        self.assertEqual(flatten_segments(lines), extract_segments(document))

    def test_point_or_polygon_only_yields_nothing(self) -> None:
        document = parse_geometry_document(
            _document(
                _feature("Point", [1.0, 2.0]),
                _feature("Polygon", [[[0, 0], [1, 0], [1, 1], [0, 0]]]),
            )
        )
        self.assertEqual(len(document.features), 2)
        self.assertEqual(extract_lines(document), [])
        self.assertEqual(extract_segments(document), [])

    def test_other_feature_and_geometry_kinds_are_filtered(self) -> None:
        document = parse_geometry_document(
            _document(
                _feature("MultiLineString", [[[0, 0], [1, 1]]]),
                _feature("LineString", [[0, 0], [1, 1]], feature_type="NotAFeature"),
                _feature("LineString", [[2, 2], [3, 3]]),
            )
        )
        self.assertEqual([p.as_tuple() for p in extract_segments(document)], [(2, 2), (3, 3)])

    def test_line_string_with_polygon_shaped_coordinates_is_skipped(self) -> None:
        document = parse_geometry_document(
            _document(_feature("LineString", [[[0, 0], [1, 1]]]))
        )
        feature = document.features[0]
        self.assertIsInstance(feature.coordinates, UnrecognizedShape)
        self.assertEqual(feature.points_or_empty, ())
        self.assertEqual(extract_lines(document), [])

    def test_missing_geometry_and_features(self) -> None:
        document = parse_geometry_document(b'{"type": "FeatureCollection", "features": [{"type": "Feature"}]}')
        self.assertEqual(extract_lines(document), [])
        empty = parse_geometry_document(b'{"type": "FeatureCollection"}')
        self.assertEqual(empty.features, ())


class MalformedDocumentTest(unittest.TestCase):
    def test_syntax_error_reports_line_and_character(self) -> None:
        data = b'{\n  "type": "FeatureCollection",\n  "features": [,]\n}\n'
        with self.assertRaises(GeometryDocumentError) as ctx:
            parse_geometry_document(data, source="maps/bad.geojson")
        message = str(ctx.exception)
        self.assertIn("maps/bad.geojson", message)
        self.assertIn("Error at line 3, character 16", message)
        self.assertIsNone(ctx.exception.partial)

    def test_non_standard_constants_are_syntax_errors(self) -> None:
        for literal in ("NaN", "Infinity", "-Infinity"):
            text = (
                '{\n "features": [\n'
                '  {"type": "Feature", "properties": {"note": "NaN or Infinity"}, '
                '"geometry": {"type": "LineString", "coordinates": [[' + literal + ", 1], [2, 3]]}}\n"
                " ]\n}\n"
            )
            expected_char = text.splitlines()[2].index(literal + ",") + 1
            with self.assertRaises(GeometryDocumentError) as ctx:
                parse_geometry_document(text.encode("utf-8"), source="bad.geojson")
            self.assertIn(f"Error at line 3, character {expected_char}", str(ctx.exception))
            self.assertIn(literal, str(ctx.exception))
            self.assertIsNone(ctx.exception.partial)

    def test_byte_order_mark_is_rejected(self) -> None:
        data = b'\xef\xbb\xbf{"type": "FeatureCollection", "features": []}'
        with self.assertRaises(GeometryDocumentError) as ctx:
            parse_geometry_document(data, source="bom.geojson")
        self.assertIn("Error at line 1, character 1", str(ctx.exception))

    def test_type_mismatch_keeps_well_formed_features(self) -> None:
        data = _document(
            _feature("LineString", [[0, 0], [1, 1]]),
            {"type": "Feature", "geometry": {"type": 7, "coordinates": []}},
        )
        with self.assertRaises(GeometryDocumentError) as ctx:
            parse_geometry_document(data, source="x.geojson")
        self.assertIn("features[1].geometry.type", str(ctx.exception))
        partial = ctx.exception.partial
        self.assertIsNotNone(partial)
        self.assertEqual(len(extract_lines(partial)), 1)

    def test_features_must_be_an_array(self) -> None:
        with self.assertRaises(GeometryDocumentError) as ctx:
            parse_geometry_document(b'{"type": "FeatureCollection", "features": {}}')
        self.assertIn("`features`", str(ctx.exception))

    def test_top_level_must_be_an_object(self) -> None:
        with self.assertRaises(GeometryDocumentError):
            parse_geometry_document(b"[1, 2, 3]")

    def test_unreadable_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            missing = Path(tmp_dir) / "missing.geojson"
            with self.assertRaises(GeometryDocumentError) as ctx:
                load_geometry_document(missing)
        self.assertIn("unable to read file", str(ctx.exception))

    def test_offset_scan(self) -> None:
        self.assertEqual(offset_to_line_char("ab\ncd", 0), (1, 1))
        self.assertEqual(offset_to_line_char("ab\ncd", 2), (1, 3))
        self.assertEqual(offset_to_line_char("ab\ncd", 3), (2, 1))
        self.assertEqual(offset_to_line_char("ab\ncd", 4), (2, 2))


if __name__ == "__main__":
    unittest.main()
