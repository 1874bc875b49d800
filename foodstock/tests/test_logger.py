import logging
import tempfile
import unittest
from logging.handlers import RotatingFileHandler
from pathlib import Path

from foodstock.utilities.logger import category_logger, setup_logger


class TestLogger(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.logger = setup_logger("foodstock_test_logger", "DEBUG", log_dir=Path(self.tmp.name))
        self.addCleanup(self._close_handlers)

    def _close_handlers(self):
        for handler in list(self.logger.handlers):
            handler.close()
            self.logger.removeHandler(handler)

    def test_console_and_rotating_file_handlers(self):
        self.assertEqual(len(self.logger.handlers), 2)
        self.assertTrue(any(isinstance(h, RotatingFileHandler) for h in self.logger.handlers))
        self.logger.info("hello")
        for handler in self.logger.handlers:
            handler.flush()
        self.assertIn("hello", (Path(self.tmp.name) / "app.log").read_text(encoding="utf-8"))

    def test_setup_is_idempotent(self):
        setup_logger("foodstock_test_logger", "DEBUG", log_dir=Path(self.tmp.name))
        self.assertEqual(len(self.logger.handlers), 2)

    def test_category_logger_is_a_child_of_the_app_logger(self):
        self.assertEqual(category_logger("AlertsController").name, "foodstock.AlertsController")
        self.assertIs(category_logger("AlertsController").parent, logging.getLogger("foodstock"))
