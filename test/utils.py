"""
Utility tests.

Scope
- Unset sentinel and coalesce().
- rename() and mirror() helpers.

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from unittest import TestCase

from sextant.utils import Unset, UnsetType, coalesce, rename, mirror


class TestUnset(TestCase):
    """Sentinel behavior."""

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalseyAndPrintable(self):
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testCannotBeSubclassed(self):
        with self.assertRaises(TypeError):
            type("Subclass", (UnsetType,), {})

    def testUnionWithTypes(self):
        self.assertTrue(isinstance(Unset, str | Unset))
        self.assertTrue(isinstance("text", str | Unset))
        self.assertFalse(isinstance(1, str | Unset))

    def testCoalesce(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))
        self.assertEqual(coalesce("", "fallback"), "")
        self.assertIsNone(coalesce(None, "fallback"))


class TestHelpers(TestCase):
    """rename() and mirror()."""

    def testRenameInPlace(self):
        def function():
            pass
        self.assertIs(rename(function, "renamed"), function)
        self.assertEqual(function.__name__, "renamed")

    def testRenameDecorator(self):
        @rename("renamed")
        def function():
            pass
        self.assertEqual(function.__qualname__, "renamed")

    def testRenameArity(self):
        with self.assertRaises(TypeError):
            rename()

    def testMirrorServesCopies(self):
        class Holder:
            items = mirror("items")

            def __init__(self):
                self._items = ["a", "b"]

        holder = Holder()
        self.assertEqual(holder.items, ("a", "b"))
        with self.assertRaises(AttributeError):
            holder.items = ()


if __name__ == "__main__":
    unittest.main()
