# python
"""
Arguments module behavioral tests (names, metadata, values, decorator).

Scope
- Validate name sanitization: short/long/positional names, prefixes, identifiers.
- Validate metadata: value types, nargs shorthand, repeatable/default fallbacks.
- Validate value parsing outcomes and finalization.
- Validate the argument() decorator (single binding, __argument__ hook).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argtree import (
    Argument,
    Arity,
    Boolean,
    Choice,
    Counter,
    InvalidValueError,
    Multiple,
    RequiredArgumentError,
    argument,
)


class TestArgumentNames(TestCase):
    """Behavioral tests for name validation."""

    def testShortAndLongNames(self):
        a = Argument("-v", "--verbose")
        self.assertEqual(a.shorts, ("-v",))
        self.assertEqual(a.longs, ("--verbose",))
        self.assertEqual(a.prefix, "-")
        self.assertEqual(a.identifier, "verbose")
        self.assertFalse(a.positional)

    def testIdentifierFromShortName(self):
        self.assertEqual(Argument("-k").identifier, "k")

    def testDashedLongName(self):
        self.assertEqual(Argument("--dry-run").identifier, "dry-run")

    def testCustomPrefix(self):
        a = Argument("+x", "++extra")
        self.assertEqual(a.prefix, "+")
        self.assertTrue(a.match_name("+", "x"))
        self.assertFalse(a.match_name("-", "x"))
        self.assertTrue(a.match_alias("++extra"))

    def testPositionalName(self):
        a = Argument("file")
        self.assertTrue(a.positional)
        self.assertIsNone(a.prefix)
        self.assertEqual(a.display(), "FILE")

    def testNamesRequired(self):
        with self.assertRaises(TypeError):
            Argument()

    def testSingleprefixMultiCharRejected(self):
        with self.assertRaises(ValueError):
            Argument("-ab")

    def testMixedPrefixesRejected(self):
        with self.assertRaises(ValueError):
            Argument("-v", "++verbose")

    def testPositionalTakesOneName(self):
        with self.assertRaises(ValueError):
            Argument("file", "other")
        with self.assertRaises(ValueError):
            Argument("file", "-f")

    def testDuplicateNamesRejected(self):
        with self.assertRaises(ValueError):
            Argument("-v", "-v")

    def testMalformedNamesRejected(self):
        for name in ("", "  ", "--", "-", "9lives", "-v x"):
            with self.subTest(name=name), self.assertRaises(ValueError):
                Argument(name)

    def testNonStringNameRejected(self):
        with self.assertRaises(TypeError):
            Argument(1)

    def testConflicts(self):
        self.assertTrue(Argument("-v", "--verbose").conflicts(Argument("--verbose")))
        self.assertTrue(Argument("--name").conflicts(Argument("-n", "--name")))
        self.assertFalse(Argument("-v").conflicts(Argument("-x")))


class TestArgumentMetadata(TestCase):
    """Behavioral tests for value types and flags."""

    def testDefaultTypeTakesOneValue(self):
        self.assertEqual(Argument("--name").arity, Arity.ONE)

    def testBooleanTakesNoValue(self):
        a = Argument("--flag", type=Boolean)
        self.assertTrue(a.arity.zero)
        self.assertIs(a.default, False)

    def testCounterIsRepeatable(self):
        self.assertTrue(Argument("-v", type=Counter).repeatable)
        self.assertFalse(Argument("--name").repeatable)

    def testNargsWrapsSingleValueType(self):
        a = Argument("--ints", type=int, nargs="+")
        self.assertIsInstance(a.type, Multiple)
        self.assertEqual(a.arity, Arity.AT_LEAST_ONE)
        self.assertEqual(a.default, ())

    def testNargsOnSwitchRejected(self):
        with self.assertRaises(TypeError):
            Argument("--flag", type=Boolean, nargs=2)

    def testInvalidNargsRejected(self):
        with self.assertRaises(TypeError):
            Argument("--name", nargs="!")

    def testInvalidTypeRejected(self):
        with self.assertRaises(TypeError):
            Argument("--name", type=42)

    def testExplicitDefault(self):
        self.assertEqual(Argument("--name", default="x").default, "x")

    def testDescrValidation(self):
        self.assertIsNone(Argument("--name").descr)
        self.assertEqual(Argument("--name", descr=" who ").descr, "who")
        with self.assertRaises(ValueError):
            Argument("--name", descr="  ")
        with self.assertRaises(TypeError):
            Argument("--name", descr=1)

    def testCallbackMustBeCallable(self):
        with self.assertRaises(TypeError):
            Argument("--name", callback="nope")

    def testRepr(self):
        self.assertTrue(repr(Argument("--name")).startswith("argument(identifier='name'"))


class TestArgumentValues(TestCase):
    """Behavioral tests for parse_values/finalize/invoke outcomes."""

    def testParseValues(self):
        outcome = Argument("--n", type=int).parse_values(["12"], index=3)
        self.assertTrue(outcome.ok)
        self.assertEqual(outcome.unpack(), 12)

    def testParseValuesFailure(self):
        outcome = Argument("--mode", type=Choice("fast", "slow")).parse_values(["medium"], index=3)
        self.assertFalse(outcome.ok)
        diagnostic, = outcome.diagnostics
        self.assertIsInstance(diagnostic, InvalidValueError)
        self.assertEqual(diagnostic.index, 3)

    def testFinalizeRequired(self):
        outcome = Argument("--out", required=True).finalize([], index=5)
        diagnostic, = outcome.diagnostics
        self.assertIsInstance(diagnostic, RequiredArgumentError)
        self.assertEqual(diagnostic.index, 5)

    def testFinalizeCombinesRepeatedValues(self):
        self.assertEqual(Argument("-v", type=Counter).finalize([1, 1, 1]).unpack(), 3)
        self.assertEqual(Argument("--n", repeatable=True).finalize(["a", "b"]).unpack(), "b")

    def testInvokeWithoutCallback(self):
        self.assertTrue(Argument("--n").invoke("x").ok)


class TestArgumentDecorator(TestCase):
    """Behavioral tests for the argument() decorator."""

    def testDecoratorBindsCallback(self):
        received = []

        @argument("--threads", "-t", type=int)
        def onThreads(threads):
            received.append(threads)

        self.assertIsInstance(onThreads, Argument)
        onThreads.invoke(4)
        self.assertEqual(received, [4])

    def testSupportsArgumentHook(self):
        decorator = argument("--name")
        self.assertIsInstance(decorator.__argument__(), Argument)

    def testDecoratorAppliedOnce(self):
        decorator = argument("--name")
        decorator(print)
        with self.assertRaises(TypeError):
            decorator(print)

    def testDecoratorRejectsCallbackKeyword(self):
        with self.assertRaises(TypeError):
            argument("--name", callback=print)


if __name__ == "__main__":
    unittest.main()
