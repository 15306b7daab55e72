# python
"""
Arity behavioral tests (construction, shorthand, membership, messages).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argtree import Arity, UNBOUNDED


class TestArity(TestCase):
    """Behavioral tests for value-count contracts."""

    def testSingleBoundIsExact(self):
        arity = Arity(2)
        self.assertEqual((arity.min, arity.max), (2, 2))
        self.assertFalse(arity.range)

    def testUnboundedMax(self):
        arity = Arity(1, UNBOUNDED)
        self.assertTrue(arity.unbounded)
        self.assertIn(1000, arity)
        self.assertNotIn(0, arity)

    def testZero(self):
        self.assertTrue(Arity.NONE.zero)
        self.assertFalse(Arity.OPTIONAL.zero)

    def testUnboundedMinRejected(self):
        with self.assertRaises(ValueError):
            Arity(UNBOUNDED)

    def testNegativeRejected(self):
        with self.assertRaises(ValueError):
            Arity(-1)

    def testMinGreaterThanMaxRejected(self):
        with self.assertRaises(ValueError):
            Arity(3, 1)

    def testNonIntegerRejected(self):
        with self.assertRaises(TypeError):
            Arity(True)
        with self.assertRaises(TypeError):
            Arity(1, 2.5)

    def testShorthand(self):
        self.assertEqual(Arity.of("?"), Arity(0, 1))
        self.assertEqual(Arity.of("*"), Arity(0, UNBOUNDED))
        self.assertEqual(Arity.of("+"), Arity(1, UNBOUNDED))
        self.assertEqual(Arity.of(3), Arity(3))
        self.assertIs(Arity.of(Arity.ONE), Arity.ONE)

    def testInvalidShorthandRejected(self):
        with self.assertRaises(TypeError):
            Arity.of("!")
        with self.assertRaises(TypeError):
            Arity.of(False)

    def testMessages(self):
        self.assertEqual(Arity.ONE.message(), "1 value")
        self.assertEqual(Arity(2).message(), "2 values")
        self.assertEqual(Arity(0, 2).message(), "from 0 to 2 values")
        self.assertEqual(Arity.ANY.message(), "from 0 to any number of values")

    def testPatterns(self):
        self.assertEqual(Arity.ONE.pattern(), "{1}")
        self.assertEqual(Arity(0, 2).pattern(), "{0, 2}")
        self.assertEqual(repr(Arity.AT_LEAST_ONE), "arity{1, ...}")


if __name__ == "__main__":
    unittest.main()
