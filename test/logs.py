# python
"""
Logging helpers tests.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import io
import logging
import unittest
from unittest import TestCase

from rich.console import Console
from rich.logging import RichHandler

from argtree import ArgumentParser, get_logger, setup_logging


class TestLogs(TestCase):
    """Behavioral tests for the argtree logger namespace."""

    def tearDown(self):
        logger = logging.getLogger("argtree")
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)

    def testLoggerNamespace(self):
        self.assertEqual(get_logger("parser").name, "argtree.parser")
        self.assertEqual(get_logger("argtree.parser").name, "argtree.parser")
        self.assertEqual(get_logger("argtree").name, "argtree")

    def testLoggerNameMustBeString(self):
        with self.assertRaises(TypeError):
            get_logger(1)

    def testSetupReplacesHandler(self):
        console = Console(file=io.StringIO(), width=200)
        setup_logging(console=console)
        setup_logging(console=console)
        handlers = logging.getLogger("argtree").handlers
        self.assertEqual(len(handlers), 1)
        self.assertIsInstance(handlers[0], RichHandler)

    def testParseTracesAtDebug(self):
        console = Console(file=io.StringIO(), width=200)
        setup_logging(logging.DEBUG, console=console)
        ArgumentParser("prog").add_argument("--name").parse("--name value")
        self.assertIn("binding", console.file.getvalue())


if __name__ == "__main__":
    unittest.main()
