# python
"""
Bindings module behavioral tests (slots, tagged union, coercion, rendering).

Scope
- Validate slot references (Ref, attr, item) alias caller storage.
- Validate Binding construction rules and sealing.
- Validate per-kind coercion, narrowing policy, and failure atomicity.
- Validate display rendering.

Conventions
- Test method names follow CamelCase per project convention.
- Tests use the public API (argz and argz.bindings).
"""

from __future__ import annotations

import math
import unittest
import warnings
from pathlib import Path
from types import SimpleNamespace
from unittest import TestCase

from argz import (
    Binding,
    Kind,
    Ref,
    attr,
    item,
    boolean,
    int32,
    uint32,
    int64,
    uint64,
    double,
    string,
    path,
    coerce,
    render,
    MalformedNumberError,
    RangeOverflowError,
    NarrowingWarning,
)


class TestSlots(TestCase):
    """Behavioral tests for caller-owned slot references."""

    def testRefDefaultsToNone(self):
        self.assertIsNone(Ref().value)

    def testRefGetSet(self):
        ref = Ref(1)
        ref.set(2)
        self.assertEqual(ref.get(), 2)
        self.assertEqual(ref.value, 2)

    def testAttrAliasesObject(self):
        namespace = SimpleNamespace(count=0)
        coerce("12", int32(attr(namespace, "count")))
        self.assertEqual(namespace.count, 12)

    def testItemAliasesMapping(self):
        settings = {}
        coerce("out.txt", string(item(settings, "output")))
        self.assertEqual(settings, {"output": "out.txt"})

    def testItemMissingKeyReadsNone(self):
        self.assertIsNone(item({}, "missing").get())

    def testItemRejectsImmutableMapping(self):
        with self.assertRaises(TypeError):
            item((), "key")


class TestBinding(TestCase):
    """Behavioral tests for the Binding tagged union."""

    def testFactoriesSetKind(self):
        ref = Ref()
        for factory, kind in (
                (int32, Kind.INT32),
                (uint32, Kind.UINT32),
                (int64, Kind.INT64),
                (uint64, Kind.UINT64),
                (double, Kind.DOUBLE),
                (string, Kind.STRING),
                (path, Kind.PATH),
        ):
            self.assertIs(factory(ref).kind, kind)
            self.assertTrue(factory(ref, optional=True).optional)
            self.assertEqual(factory.__name__, kind.value)

    def testBindingKeepsReference(self):
        ref = Ref(0)
        self.assertIs(int32(ref).ref, ref)

    def testBooleanCannotBeOptional(self):
        with self.assertRaises(TypeError):
            boolean(Ref(False), optional=True)

    def testKindMustBeKind(self):
        with self.assertRaises(TypeError):
            Binding("int32", Ref())

    def testRefMustHaveAccessors(self):
        with self.assertRaises(TypeError):
            Binding(Kind.INT32, 0)

    def testPropertiesAreReadOnly(self):
        binding = int32(Ref())
        with self.assertRaises(AttributeError):
            binding.kind = Kind.STRING

    def testBindingIsSealed(self):
        with self.assertRaises(TypeError):
            type("Derived", (Binding,), {})

    def testRepr(self):
        self.assertEqual(repr(int32(Ref(3))), "binding(kind=<Kind.INT32: 'int32'>, ref=Ref(3), optional=False)")


class TestCoerce(TestCase):
    """Behavioral tests for token coercion."""

    def testStringVerbatim(self):
        ref = Ref("")
        coerce("  spaced value ", string(ref))
        self.assertEqual(ref.value, "  spaced value ")

    def testPathConstructsPath(self):
        ref = Ref()
        coerce("build", path(ref))
        self.assertEqual(ref.value, Path("build"))

    def testBooleanLiteralTrue(self):
        ref = Ref(False)
        coerce("true", boolean(ref))
        self.assertIs(ref.value, True)

    def testBooleanAnythingElseIsFalse(self):
        for token in ("false", "1", "", "True", "yes"):
            ref = Ref(True)
            coerce(token, boolean(ref))
            self.assertIs(ref.value, False, token)

    def testIntegerParses(self):
        ref = Ref(0)
        coerce("42", int32(ref))
        self.assertEqual(ref.value, 42)

    def testIntegerPrefixSemantics(self):
        ref = Ref(0)
        coerce("  -7", int32(ref))
        self.assertEqual(ref.value, -7)
        coerce("42abc", int32(ref))
        self.assertEqual(ref.value, 42)
        coerce("+0x10", int64(ref))
        self.assertEqual(ref.value, 0)

    def testMalformedIntegerLeavesSlot(self):
        ref = Ref(5)
        with self.assertRaises(MalformedNumberError):
            coerce("abc", int32(ref))
        self.assertEqual(ref.value, 5)

    def testMalformedNumberIsValueError(self):
        with self.assertRaises(ValueError):
            coerce("", uint64(Ref(0)))

    def testNarrowingWrapsAndWarns(self):
        cases = (
            (int32, "4294967297", 1),
            (int32, "2147483648", -2147483648),
            (uint32, "-1", 4294967295),
            (uint64, "-1", 18446744073709551615),
        )
        for factory, token, expected in cases:
            ref = Ref(0)
            with self.assertWarns(NarrowingWarning):
                coerce(token, factory(ref))
            self.assertEqual(ref.value, expected, token)

    def testFittingValueDoesNotWarn(self):
        ref = Ref(0)
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            coerce("4294967295", uint32(ref))
            coerce("-9223372036854775808", int64(ref))
        self.assertEqual(caught, [])
        self.assertEqual(ref.value, -9223372036854775808)

    def testStrictNarrowingRaises(self):
        ref = Ref(3)
        with self.assertRaises(RangeOverflowError):
            coerce("4294967297", int32(ref), strict=True)
        self.assertEqual(ref.value, 3)

    def testWideParseOverflowRaises(self):
        with self.assertRaises(OverflowError):
            coerce("9223372036854775808", int64(Ref(0)))

    def testDoubleParses(self):
        ref = Ref(0.0)
        coerce("1.5", double(ref))
        self.assertEqual(ref.value, 1.5)
        coerce("1e3", double(ref))
        self.assertEqual(ref.value, 1000.0)
        coerce(".5x", double(ref))
        self.assertEqual(ref.value, 0.5)
        coerce("0x1p3", double(ref))
        self.assertEqual(ref.value, 8.0)
        coerce("-inf", double(ref))
        self.assertEqual(ref.value, -math.inf)
        coerce("nan", double(ref))
        self.assertTrue(math.isnan(ref.value))

    def testMalformedDoubleLeavesSlot(self):
        ref = Ref(2.5)
        with self.assertRaises(MalformedNumberError):
            coerce("abc", double(ref))
        self.assertEqual(ref.value, 2.5)

    def testDoubleOverflowRaises(self):
        with self.assertRaises(RangeOverflowError):
            coerce("1e999", double(Ref(0.0)))

    def testOptionalBecomesPresent(self):
        ref = Ref()
        coerce("10", int32(ref, optional=True))
        self.assertEqual(ref.value, 10)

    def testOptionalEmptyStringIsPresent(self):
        ref = Ref()
        coerce("", string(ref, optional=True))
        self.assertEqual(ref.value, "")

    def testOptionalMalformedStaysAbsent(self):
        ref = Ref()
        with self.assertRaises(MalformedNumberError):
            coerce("ten", double(ref, optional=True))
        self.assertIsNone(ref.value)

    def testNoneTokenIsNoop(self):
        ref = Ref(4)
        coerce(None, int32(ref))
        self.assertEqual(ref.value, 4)

    def testNonStringTokenRejected(self):
        with self.assertRaises(TypeError):
            coerce(4, int32(Ref()))


class TestRender(TestCase):
    """Behavioral tests for display rendering."""

    def testBoolean(self):
        self.assertEqual(render(boolean(Ref(False))), "false")
        self.assertEqual(render(boolean(Ref(True))), "true")

    def testNumbers(self):
        self.assertEqual(render(int32(Ref(-3))), "-3")
        self.assertEqual(render(double(Ref(1.5))), "1.5")

    def testTextual(self):
        self.assertEqual(render(string(Ref("abc"))), "abc")
        self.assertEqual(render(path(Ref(Path("out")))), "out")

    def testOptional(self):
        self.assertEqual(render(int32(Ref(), optional=True)), "")
        self.assertEqual(render(int32(Ref(0), optional=True)), "0")


if __name__ == "__main__":
    unittest.main()
