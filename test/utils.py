"""
Utility tests (sentinel, coalesce, rename, mirrors, introspective types).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from commandry.utils import IntrospectiveType, Unset, UnsetType, coalesce, mirror, rename


class Point(metaclass=IntrospectiveType):
    __introspectable__ = ("x", "tags")

    def __init__(self, x, tags):
        self._x = x
        self._tags = tags


class TestUnset(TestCase):

    def testSingletonAndFalsey(self):
        self.assertIs(UnsetType(), Unset)
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testNotSubclassable(self):
        with self.assertRaises(TypeError):
            type("Other", (UnsetType,), {})

    def testUnion(self):
        self.assertIsInstance("x", str | Unset)
        self.assertIsInstance(Unset, str | Unset)

    def testCoalesce(self):
        self.assertEqual(coalesce(Unset, 1), 1)
        self.assertIsNone(coalesce(Unset))
        self.assertEqual(coalesce(0, 1), 0)
        self.assertIsNone(coalesce(None, 1))


class TestRename(TestCase):

    def testReturnsSameCallable(self):
        def f():
            pass

        self.assertIs(rename("g")(f), f)
        self.assertEqual(f.__name__, "g")
        self.assertEqual(f.__qualname__, "g")

    def testDecorator(self):
        @rename("h")
        def f():
            pass

        self.assertEqual(f.__name__, "h")

    def testBuiltinRejected(self):
        with self.assertRaises(TypeError):
            rename("size")(len)

    def testNameMustBeString(self):
        with self.assertRaises(TypeError):
            rename(3)
        with self.assertRaises(TypeError):
            rename("x")("not callable")


class TestIntrospectiveType(TestCase):

    def testTypename(self):
        self.assertEqual(Point.__typename__, "point")

        class ParseResultLike(metaclass=IntrospectiveType):
            pass

        self.assertEqual(ParseResultLike.__typename__, "parse-result-like")

    def testMirrorsAreReadOnlyCopies(self):
        point = Point(1, ["a"])
        point.tags.append("b")
        self.assertEqual(point.tags, ["a"])
        with self.assertRaises(AttributeError):
            point.x = 2

    def testRepr(self):
        self.assertEqual(repr(Point(1, ("a",))), "point(x=1, tags=['a'])")
        self.assertEqual(list(Point(1, []).__rich_repr__()), [("x", 1), ("tags", [])])

    def testMirrorNeedsString(self):
        with self.assertRaises(TypeError):
            mirror(3)


if __name__ == "__main__":
    unittest.main()
