# python
"""
Utility helpers tests (sentinel, coalesce, rename, mirror, SpecType).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argz.utils import SpecType, Unset, UnsetType, coalesce, mirror, rename


class TestUnset(TestCase):

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testUnion(self):
        self.assertIsInstance("x", str | Unset)
        self.assertIsInstance(Unset, str | Unset)

    def testNotSubclassable(self):
        with self.assertRaises(TypeError):
            type("Derived", (UnsetType,), {})

    def testCoalesce(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 1), 0)


class TestRename(TestCase):

    def testDirectForm(self):
        function = rename(lambda: None, "named")
        self.assertEqual((function.__name__, function.__qualname__), ("named", "named"))

    def testDecoratorForm(self):
        @rename("other")
        def function():
            pass

        self.assertEqual(function.__name__, "other")

    def testArguments(self):
        with self.assertRaises(TypeError):
            rename(1, "name")
        with self.assertRaises(TypeError):
            rename()


class TestSpecType(TestCase):

    def setUp(self):
        class SampleSpec(metaclass=SpecType):
            __introspectable__ = ("slot",)

            def __init__(self, slot):
                self._slot = slot

        self.type = SampleSpec

    def testTypename(self):
        self.assertEqual(self.type.__typename__, "sample-spec")

    def testMirrorReturnsSameObject(self):
        storage = []
        spec = self.type(storage)
        self.assertIs(spec.slot, storage)
        with self.assertRaises(AttributeError):
            spec.slot = []

    def testRepr(self):
        self.assertEqual(repr(self.type([1])), "sample-spec(slot=[1])")

    def testMirrorRequiresName(self):
        with self.assertRaises(TypeError):
            mirror(1)


if __name__ == "__main__":
    unittest.main()
