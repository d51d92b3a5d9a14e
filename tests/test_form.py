from __future__ import annotations

import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from bodynorm.form import decode_form  # noqa: E402
from bodynorm.testkit import encode_form  # noqa: E402


class TestDecodeForm(unittest.TestCase):
    def test_single_values_stay_scalar(self) -> None:
        self.assertEqual(decode_form(b"name=John&age=30"), {"name": "John", "age": "30"})

    def test_repeated_keys_collect_in_order(self) -> None:
        out = decode_form(b"tag=b&x=1&tag=a&tag=b")
        self.assertEqual(out, {"tag": ["b", "a", "b"], "x": "1"})
        self.assertEqual(list(out), ["tag", "x"])

    def test_percent_and_plus_decoding(self) -> None:
        out = decode_form(b"greeting=hello+world&path=%2Fa%2Fb&caf%C3%A9=%E2%9C%93")
        self.assertEqual(out, {"greeting": "hello world", "path": "/a/b", "café": "✓"})

    def test_empty_segments_and_missing_values(self) -> None:
        self.assertEqual(decode_form(b"&a=&&b&=c"), {"a": "", "b": "", "": "c"})
        self.assertEqual(decode_form(b""), {})

    def test_round_trips_encoded_pairs(self) -> None:
        body = encode_form([("q", "a&b=c"), ("q", "100%")])
        self.assertEqual(decode_form(body), {"q": ["a&b=c", "100%"]})

    def test_invalid_escape_is_rejected(self) -> None:
        for body in (b"a=%zz", b"a=%4", b"%=1", b"ok=1&bad=%"):
            with self.subTest(body=body):
                with self.assertRaisesRegex(ValueError, "invalid URL escape"):
                    decode_form(body)

    def test_semicolon_separator_is_rejected(self) -> None:
        with self.assertRaisesRegex(ValueError, "semicolon"):
            decode_form(b"a=1;b=2")


if __name__ == "__main__":
    unittest.main()
