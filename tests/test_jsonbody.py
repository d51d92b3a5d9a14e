from __future__ import annotations

import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from bodynorm.errors import BodyError  # noqa: E402
from bodynorm.jsonbody import JSONObject, JSONObjectList, encode_canonical, json_shape, normalize_json  # noqa: E402


class TestNormalizeJSON(unittest.TestCase):
    def test_object_is_returned_unchanged(self) -> None:
        out = normalize_json(b'{"a": {"b": [1, "x"]}, "n": null}')
        self.assertIsInstance(out, JSONObject)
        self.assertEqual(out.payload(), {"a": {"b": [1, "x"]}, "n": None})

    def test_array_of_objects(self) -> None:
        out = normalize_json(b'[{"i": 0}, {}, {"i": 2}]')
        self.assertIsInstance(out, JSONObjectList)
        self.assertEqual(out.payload(), [{"i": 0}, {}, {"i": 2}])

    def test_empty_array_is_an_empty_list(self) -> None:
        out = normalize_json(b"[]")
        self.assertEqual(out, JSONObjectList([]))

    def test_array_item_errors_name_first_bad_index(self) -> None:
        cases = {
            b"[[]]": 0,
            b'[{}, "x", 1]': 1,
            b"[{}, {}, null]": 2,
        }
        for body, index in cases.items():
            with self.subTest(body=body):
                with self.assertRaises(BodyError) as cm:
                    normalize_json(body)
                self.assertEqual(cm.exception.type, "shape_error")
                self.assertEqual(str(cm.exception), f"invalid JSON array item at index {index}")

    def test_unsupported_top_level_shapes(self) -> None:
        cases = {b"null": "null", b"true": "boolean", b"1.5": "number", b'"s"': "string"}
        for body, shape in cases.items():
            with self.subTest(body=body):
                with self.assertRaises(BodyError) as cm:
                    normalize_json(body)
                self.assertEqual(str(cm.exception), f"unsupported JSON structure: {shape}")

    def test_syntax_errors(self) -> None:
        for body in (b'{"invalid": json}', b"{", b'{"a": NaN}', b"[1e999]", b"\xef\xbb\xbf{}"):
            with self.subTest(body=body):
                with self.assertRaises(BodyError) as cm:
                    normalize_json(body)
                self.assertEqual(cm.exception.type, "syntax_error")
                self.assertEqual(cm.exception.message, "failed to parse body")

    def test_duplicate_keys_keep_last_value(self) -> None:
        self.assertEqual(normalize_json(b'{"a": 1, "a": 2}').payload(), {"a": 2})


class TestEncodeCanonical(unittest.TestCase):
    def test_compact_sorted_utf8(self) -> None:
        self.assertEqual(encode_canonical({"b": 1, "a": ["é", None]}), '{"a":["é",null],"b":1}'.encode("utf-8"))
        self.assertEqual(encode_canonical("Hello"), b'"Hello"')

    def test_unencodable_values_raise_serialization_error(self) -> None:
        for value in ({"bad": "\udcff"}, {"n": float("nan")}, {"o": object()}):
            with self.subTest(value=repr(value)):
                with self.assertRaises(BodyError) as cm:
                    encode_canonical(value)
                self.assertEqual(cm.exception.type, "serialization_error")
                self.assertEqual(cm.exception.message, "failed to encode body")

    def test_json_shape_names(self) -> None:
        self.assertEqual(json_shape([]), "array")
        self.assertEqual(json_shape({}), "object")
        self.assertEqual(json_shape(3), "number")


if __name__ == "__main__":
    unittest.main()
