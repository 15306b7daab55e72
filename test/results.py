# python
"""
Results behavioral tests (lookups, subcommands, explicit registration).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from dataclasses import dataclass
from unittest import TestCase

from argtree import ArgumentParser, Boolean, ParsedArguments, field, into


@dataclass
class Options:
    verbose: bool
    jobs: int


class TestParsedArguments(TestCase):
    """Behavioral tests for ParsedArguments lookups."""

    def setUp(self):
        child = ParsedArguments("build", {"jobs": 4}, used=("jobs",))
        self.parsed = ParsedArguments("prog", {"verbose": True, "name": None}, used=("verbose",), child=child)

    def testItemAndContains(self):
        self.assertIs(self.parsed["verbose"], True)
        self.assertIn("name", self.parsed)
        self.assertNotIn("missing", self.parsed)
        self.assertIn("build.jobs", self.parsed)

    def testDottedAndSplitPaths(self):
        self.assertEqual(self.parsed.get("build.jobs"), 4)
        self.assertEqual(self.parsed.get("build", "jobs"), 4)

    def testMissingPath(self):
        with self.assertRaises(KeyError):
            self.parsed.get("deploy.jobs")
        with self.assertRaises(KeyError):
            self.parsed["missing"]
        self.assertEqual(self.parsed.get("deploy.jobs", default=0), 0)

    def testSubcommand(self):
        self.assertEqual(self.parsed.subcommand("build").name, "build")
        self.assertIsNone(self.parsed.subcommand("deploy"))

    def testValuesAreReadOnly(self):
        with self.assertRaises(TypeError):
            self.parsed.values["verbose"] = False

    def testIterationAndUsed(self):
        self.assertEqual(list(self.parsed), ["verbose", "name"])
        self.assertEqual(len(self.parsed), 2)
        self.assertEqual(self.parsed.used, frozenset({"verbose"}))

    def testEmptyPathRejected(self):
        with self.assertRaises(TypeError):
            self.parsed.get()


class TestRegistration(TestCase):
    """Behavioral tests for field()/into()."""

    def setUp(self):
        self.parser = ArgumentParser("prog").add_argument("-v", "--verbose", type=Boolean)
        self.parser.command("build").add_argument("-j", "--jobs", type=int, default=1)

    def testIntoWithFields(self):
        report = self.parser.parse("-v build -j 8")
        options = report.parsed.into(Options, verbose="verbose", jobs=field("build.jobs"))
        self.assertEqual(options, Options(True, 8))

    def testFieldDefaultWhenSubcommandNotTaken(self):
        report = self.parser.parse("")
        options = into(report.parsed, Options, verbose="verbose", jobs=field("build.jobs", default=0))
        self.assertEqual(options, Options(False, 0))

    def testFieldExtract(self):
        report = self.parser.parse("build -j 8")
        options = report.parsed.into(Options, verbose="verbose", jobs=field("build.jobs", extract=lambda x: x * 2))
        self.assertEqual(options.jobs, 16)

    def testFieldExtractAppliesToValueEqualToDefault(self):
        report = self.parser.parse("build -j 1")
        values = into(report.parsed, dict, jobs=field("build.jobs", extract=str, default=1))
        self.assertEqual(values, {"jobs": "1"})

    def testFieldExtractSkippedForMissingPath(self):
        report = self.parser.parse("")
        values = into(report.parsed, dict, jobs=field("build.jobs", extract=str, default=1))
        self.assertEqual(values, {"jobs": 1})

    def testMissingFieldRaises(self):
        report = self.parser.parse("")
        with self.assertRaises(KeyError):
            report.parsed.into(Options, verbose="verbose", jobs="build.jobs")

    def testInvalidDeclarations(self):
        with self.assertRaises(TypeError):
            field("")
        with self.assertRaises(TypeError):
            field("jobs", extract=1)
        with self.assertRaises(TypeError):
            into({}, Options)
        with self.assertRaises(TypeError):
            self.parser.parse("").parsed.into(Options, verbose=1, jobs="verbose")


if __name__ == "__main__":
    unittest.main()
