"""Tests for trialbench.logging."""

from __future__ import annotations

import logging
import tempfile
import unittest
from pathlib import Path

from trialbench.logging import setup_logging


class TestSetupLogging(unittest.TestCase):
    def tearDown(self) -> None:
        logger = logging.getLogger("trialbench")
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()

    def test_console_levels(self) -> None:
        for kwargs, level in [
            ({}, logging.INFO),
            ({"verbose": True}, logging.DEBUG),
            ({"quiet": True}, logging.WARNING),
            ({"verbose": True, "quiet": True}, logging.DEBUG),
        ]:
            logger = setup_logging(**kwargs)
            self.assertEqual(len(logger.handlers), 1)
            self.assertEqual(logger.handlers[0].level, level)

    def test_log_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "bench.log"
            logger = setup_logging(quiet=True, log_file=path)
            logger.debug("detail line")
            for handler in logger.handlers:
                handler.flush()
            self.assertIn("detail line", path.read_text())
            self.tearDown()


if __name__ == "__main__":
    unittest.main()
