from __future__ import annotations

import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from bodynorm.logger import NoOpLogger, StructuredLogger, get_logger, set_logger  # noqa: E402
from bodynorm.processor import BodyProcessor  # noqa: E402
from bodynorm.testkit import RecordingLogger  # noqa: E402


class TestLogger(unittest.TestCase):
    def tearDown(self) -> None:
        set_logger(None)

    def test_default_logger_is_noop(self) -> None:
        logger = get_logger()
        self.assertIsInstance(logger, NoOpLogger)
        self.assertIsNone(logger.debug("ignored", {"k": "v"}))

    def test_set_logger_replaces_and_resets(self) -> None:
        custom = RecordingLogger()
        self.assertIsInstance(custom, StructuredLogger)
        set_logger(custom)
        self.assertIs(get_logger(), custom)

        set_logger(None)
        self.assertIsInstance(get_logger(), NoOpLogger)

    def test_processor_uses_global_logger_at_call_time(self) -> None:
        proc = BodyProcessor()
        custom = RecordingLogger()
        set_logger(custom)

        proc.process({}, "text/plain", b"hi", {})
        self.assertEqual(custom.messages("debug"), ["request body decoded"])
        self.assertEqual(custom.entries[0].fields, {"branch": "text", "bytes": 4})

    def test_recording_logger_merges_field_dicts(self) -> None:
        logger = RecordingLogger()
        logger.warn("hello", {"n": 1}, {"k": "v"})
        self.assertEqual(logger.entries[0].fields, {"n": 1, "k": "v"})
        self.assertEqual(logger.messages("warn"), ["hello"])
        self.assertEqual(logger.messages("debug"), [])


if __name__ == "__main__":
    unittest.main()
