# python
"""
Commands module behavioral tests (tree construction, inheritance, reuse).

Scope
- Validate command names, error codes and tuple characters.
- Validate argument and subcommand registration (duplicates, ownership).
- Validate inherited settings and repeated parses over one tree.

Conventions
- Test method names follow CamelCase per project convention.
- Tests use the public API (ArgumentParser, Command, Argument, argument).
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argtree import (
    Argument,
    ArgumentParser,
    Boolean,
    Command,
    TupleChars,
    UnmatchedTokenError,
    argument,
)


class TestCommandConstruction(TestCase):
    """Behavioral tests for Command metadata."""

    def testNameMustBeAlphabetic(self):
        for name in ("b4d", "two words", "dry-run"):
            with self.subTest(name=name), self.assertRaises(ValueError):
                Command(name)

    def testNameMustBeString(self):
        with self.assertRaises(TypeError):
            Command(12)

    def testParserNameIsLenient(self):
        self.assertEqual(ArgumentParser("my-tool.py").name, "my-tool.py")

    def testErrorCodeValidation(self):
        with self.assertRaises(ValueError):
            Command("run", error_code=0)
        with self.assertRaises(TypeError):
            Command("run", error_code=True)
        with self.assertRaises(TypeError):
            Command("run").set_error_code("2")

    def testTupleCharsFromPair(self):
        self.assertIs(Command("run", tuple_chars=("{", "}")).tuple_chars, TupleChars.BRACES)
        with self.assertRaises(ValueError):
            Command("run", tuple_chars=("[", ")"))

    def testFluentConfiguration(self):
        command = Command("run")
        self.assertIs(command.set_error_code(4), command)
        self.assertIs(command.set_tuple_chars(TupleChars.ANGLE_BRACKETS), command)
        self.assertIs(command.add_argument("--name"), command)
        self.assertIs(command.add_command(Command("sub")), command)
        self.assertEqual(command.error_code, 4)

    def testDescrValidation(self):
        self.assertIsNone(Command("run").descr)
        with self.assertRaises(ValueError):
            Command("run", descr=" ")

    def testRepr(self):
        self.assertTrue(repr(Command("run")).startswith("command(name='run'"))


class TestCommandTree(TestCase):
    """Behavioral tests for arguments and subcommands registration."""

    def testDuplicateArgumentRejected(self):
        command = Command("run").add_argument("-v", "--verbose", type=Boolean)
        with self.assertRaises(ValueError):
            command.add_argument(Argument("--verbose"))
        with self.assertRaises(ValueError):
            command.add_argument("-v")

    def testAddArgumentForms(self):
        @argument("--jobs", type=int)
        def onJobs(jobs): ...

        command = Command("run").add_argument(Argument("--name")).add_argument(argument("--flag", type=Boolean))
        command.add_argument(onJobs)
        self.assertEqual([a.identifier for a in command.arguments], ["name", "flag", "jobs"])

    def testAddArgumentRejectsOtherObjects(self):
        with self.assertRaises(TypeError):
            Command("run").add_argument(42)
        with self.assertRaises(TypeError):
            Command("run").add_argument(Argument("--name"), type=int)

    def testDuplicateSubcommandRejected(self):
        command = Command("run").add_command(Command("sub"))
        with self.assertRaises(ValueError):
            command.add_command(Command("sub"))

    def testSubcommandOwnership(self):
        sub = Command("sub")
        Command("run").add_command(sub)
        with self.assertRaises(ValueError):
            Command("other").add_command(sub)

    def testCyclesRejected(self):
        run = Command("run")
        with self.assertRaises(ValueError):
            run.add_command(run)
        sub = run.command("sub")
        with self.assertRaises(ValueError):
            sub.add_command(run)

    def testParserCannotBeSubcommand(self):
        with self.assertRaises(TypeError):
            Command("run").add_command(ArgumentParser("prog"))

    def testPathAndRoot(self):
        parser = ArgumentParser("prog")
        leaf = parser.command("run").command("sub")
        self.assertEqual(leaf.path, ("prog", "run", "sub"))
        self.assertIs(leaf.root, parser)
        self.assertIs(leaf.parent.parent, parser)
        self.assertEqual(list(parser.children), ["run"])


class TestInheritance(TestCase):
    """Settings resolved from the nearest ancestor."""

    def testDefaults(self):
        command = Command("run")
        self.assertEqual(command.error_code, 1)
        self.assertIs(command.tuple_chars, TupleChars.SQUARE_BRACKETS)
        self.assertTrue(command.colorful)
        self.assertFalse(command.fancy)

    def testInheritedFromAncestor(self):
        parser = ArgumentParser("prog", error_code=9, tuple_chars=TupleChars.PARENTHESIS, fancy=True)
        leaf = parser.command("run").command("sub")
        self.assertEqual(leaf.error_code, 9)
        self.assertIs(leaf.tuple_chars, TupleChars.PARENTHESIS)
        self.assertTrue(leaf.fancy)

    def testOwnSettingWins(self):
        parser = ArgumentParser("prog", error_code=9)
        run = parser.command("run", error_code=2)
        self.assertEqual(run.command("sub").error_code, 2)


class TestRepeatedParses(TestCase):
    """One tree, many parses."""

    def setUp(self):
        self.parser = ArgumentParser("prog").add_argument("first").add_argument("--flag", type=Boolean)
        self.parser.command("run").add_argument("--name")

    def testParsesAreIndependent(self):
        first = self.parser.parse("a --flag run --name x")
        second = self.parser.parse("b")
        self.assertEqual(first.parsed["first"], "a")
        self.assertEqual(second.parsed["first"], "b")
        self.assertIs(second.parsed["flag"], False)
        self.assertIsNone(second.parsed.subcommand("run"))
        self.assertEqual(first.parsed.get("run.name"), "x")

    def testErrorsDoNotLeakBetweenParses(self):
        failed = self.parser.parse("a b")
        self.assertEqual([type(diagnostic) for diagnostic in failed.diagnostics], [UnmatchedTokenError])
        self.assertEqual(self.parser.parse("a").diagnostics, ())


if __name__ == "__main__":
    unittest.main()
