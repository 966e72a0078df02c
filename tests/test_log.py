import logging
import tempfile
import unittest
from pathlib import Path

from wintune.log import ROOT_LOGGER, configure_logging, transcript


class TestLogging(unittest.TestCase):
    def test_configure_is_idempotent(self) -> None:
        logger = configure_logging(logging.INFO)
        configure_logging(logging.WARNING)
        consoles = [h for h in logger.handlers if getattr(h, "_wintune_console", False)]
        self.assertEqual(len(consoles), 1)
        self.assertEqual(logger.level, logging.WARNING)

    def test_transcript_captures_and_detaches(self) -> None:
        logger = logging.getLogger(ROOT_LOGGER)
        before = list(logger.handlers)
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "transcript.log"
            with transcript(path):
                logging.getLogger("wintune.engine.executor").debug("first")
            with transcript(path):
                logging.getLogger("wintune.manager").info("second")

            text = path.read_text(encoding="utf-8")
        self.assertIn("first", text)
        self.assertIn("second", text)
        self.assertEqual(logger.handlers, before)


if __name__ == "__main__":
    unittest.main()
