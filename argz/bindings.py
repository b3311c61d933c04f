r"""
Argz bindings: typed, non-owning handles over caller storage.

Overview
- Slots (caller-owned storage)
  • Ref[_T]: a standalone mutable cell; the caller keeps it and reads .value.
  • attr(object, name): the attribute `name` of an existing object.
  • item(mapping, key): one key of a mutable mapping.
  Every slot answers get()/set(value); nothing else is required from it.

- Binding
  • A closed tagged union: Kind (boolean, int32, uint32, int64, uint64, double,
    string, path) plus an `optional` marker, over one slot.
  • Never owns or copies the slot; writing through a Binding mutates the
    caller's storage in place.
  • Factories: boolean(), int32(), uint32(), int64(), uint64(), double(),
    string(), path(). All but boolean() accept optional=True.

- Coercion
  • coerce(token, binding): turn one raw token into the slot's typed value.
  • render(binding): best-effort text form of the current value (help output).

Coercion rules
- string: verbatim. path: pathlib.Path(token).
- boolean: True iff the token is exactly "true" (case-sensitive); anything else
  is False.
- integers: base-10 prefix parse with strtol semantics (leading blanks, sign,
  digits; trailing text ignored), checked against the signed 64-bit range, then
  narrowed to the slot width with two's complement wrap-around. A narrowing that
  changes the value warns (NarrowingWarning) or, with strict=True, raises
  RangeOverflowError.
- double: strtod-like prefix parse (decimal, exponent, hex, inf, nan).
- optional kinds: parsed into a temporary plain slot of the same kind, then
  stored as present. None is "absent".
- A failed coercion leaves the slot untouched.

Quick example:
    >>> from argz.bindings import Ref, int32, coerce
    >>> count = Ref(0)
    >>> coerce("42", int32(count))
    >>> count.value
    42
"""
import enum
import math
import os
import pathlib
import re
from collections.abc import MutableMapping
from typing import Generic, TypeVar

from .faults import *
from .utils import SpecType, rename

_T = TypeVar("_T")


class Ref(Generic[_T]):
    """
    Standalone mutable cell used as caller-owned storage.

    The caller creates the cell, hands it to a binding factory, and reads
    `.value` back after parsing. An optional slot starts as None (absent).
    """
    __slots__ = ("value",)

    def __init__(self, value=None):
        self.value = value

    def get(self):
        return self.value

    def set(self, value):
        self.value = value

    def __repr__(self):
        return f"Ref({self.value!r})"


class AttributeRef:
    """
    Slot that aliases one attribute of an existing object.
    """
    __slots__ = ("object", "name")

    def __init__(self, object, name):
        if not isinstance(name, str):
            raise TypeError("attr() second argument must be a string")
        self.object = object
        self.name = name

    def get(self):
        return getattr(self.object, self.name)

    def set(self, value):
        setattr(self.object, self.name, value)

    def __repr__(self):
        return f"attr({type(self.object).__name__}, {self.name!r})"


class ItemRef:
    """
    Slot that aliases one key of a mutable mapping. A missing key reads as None.
    """
    __slots__ = ("mapping", "key")

    def __init__(self, mapping, key):
        if not isinstance(mapping, MutableMapping):
            raise TypeError("item() first argument must be a mutable mapping")
        self.mapping = mapping
        self.key = key

    def get(self):
        return self.mapping.get(self.key)

    def set(self, value):
        self.mapping[self.key] = value

    def __repr__(self):
        return f"item({type(self.mapping).__name__}, {self.key!r})"


def attr(object, name, /):
    """
    Bind to `object.name` (dataclass fields, SimpleNamespace attributes, ...).
    """
    return AttributeRef(object, name)


def item(mapping, key, /):
    """
    Bind to `mapping[key]`.
    """
    return ItemRef(mapping, key)


class Kind(enum.Enum):
    """
    The closed set of primitive slot kinds.
    """
    BOOLEAN = "boolean"
    INT32 = "int32"
    UINT32 = "uint32"
    INT64 = "int64"
    UINT64 = "uint64"
    DOUBLE = "double"
    STRING = "string"
    PATH = "path"


# (bits, signed) for every integer kind.
_WIDTHS = {
    Kind.INT32: (32, True),
    Kind.UINT32: (32, False),
    Kind.INT64: (64, True),
    Kind.UINT64: (64, False),
}

# Range of the wide parse (a C `long` on LP64 platforms).
_LONG_MIN = -(1 << 63)
_LONG_MAX = (1 << 63) - 1

_INTEGER = re.compile(r"\s*([+-]?[0-9]+)")
_DOUBLE = re.compile(
    r"\s*([+-]?)("
    r"0[xX](?:[0-9a-fA-F]+\.?[0-9a-fA-F]*|\.[0-9a-fA-F]+)(?:[pP][+-]?[0-9]+)?"
    r"|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?"
    r"|inf(?:inity)?"
    r"|nan"
    r")",
    re.IGNORECASE,
)


class Binding(metaclass=SpecType):
    """
    Non-owning handle associating a kind with one caller-owned slot.

    Properties
    - kind: Kind
    - ref: the slot (anything with get()/set())
    - optional: bool; optional slots distinguish absent (None) from present.

    There is no optional boolean: a boolean flag is presence-only.
    """

    __introspectable__ = (
        "kind",
        "ref",
        "optional",
    )

    def __init__(self, kind, ref, /, *, optional=False):
        if not isinstance(kind, Kind):
            raise TypeError(f"{type(self).__typename__} 'kind' must be a Kind")
        if not (callable(getattr(ref, "get", None)) and callable(getattr(ref, "set", None))):
            raise TypeError(f"{type(self).__typename__} 'ref' must provide get() and set() methods")
        if optional and kind is Kind.BOOLEAN:
            raise TypeError(f"{type(self).__typename__} of kind 'boolean' cannot be optional")
        self._kind = kind
        self._ref = ref
        self._optional = bool(optional)

    def __init_subclass__(cls, **options):
        raise TypeError("type 'Binding' is not an acceptable base type")


def _factory(kind, /):
    @rename(kind.value)
    def factory(ref, /, optional=False):
        return Binding(kind, ref, optional=optional)

    if kind is Kind.BOOLEAN:
        factory.__doc__ = "Bind `ref` as a presence-only boolean slot."
    else:
        factory.__doc__ = f"Bind `ref` as a {kind.value} slot (optional=True: absent until bound)."
    return factory


boolean = _factory(Kind.BOOLEAN)
int32 = _factory(Kind.INT32)
uint32 = _factory(Kind.UINT32)
int64 = _factory(Kind.INT64)
uint64 = _factory(Kind.UINT64)
double = _factory(Kind.DOUBLE)
string = _factory(Kind.STRING)
path = _factory(Kind.PATH)


def _parse_integer(token, kind):
    if not (match := _INTEGER.match(token)):
        raise MalformedNumberError(
            "malformed number %r for %s slot" % (token, kind.value),
            title="malformed number",
            code=FaultCode.MALFORMED_NUMBER,
            hint="pass a base-10 integer (for example: 42)",
            token=token,
            docs=getdoc(FaultCode.MALFORMED_NUMBER),
        )
    value = int(match[1])
    if not _LONG_MIN <= value <= _LONG_MAX:
        raise RangeOverflowError(
            "number %r is out of range for %s slot" % (token, kind.value),
            title="number out of range",
            code=FaultCode.RANGE_OVERFLOW,
            hint="pass a value between %d and %d" % (_LONG_MIN, _LONG_MAX),
            token=token,
            docs=getdoc(FaultCode.RANGE_OVERFLOW),
        )
    return value


def _narrow(token, value, kind, *, strict):
    bits, signed = _WIDTHS[kind]
    narrowed = value & ((1 << bits) - 1)
    if signed and narrowed >= 1 << (bits - 1):
        narrowed -= 1 << bits
    if narrowed == value:
        return value

    low, high = (-(1 << (bits - 1)), (1 << (bits - 1)) - 1) if signed else (0, (1 << bits) - 1)
    if strict:
        raise RangeOverflowError(
            "number %r is out of range for %s slot" % (token, kind.value),
            title="number out of range",
            code=FaultCode.RANGE_OVERFLOW,
            hint="pass a value between %d and %d" % (low, high),
            token=token,
            docs=getdoc(FaultCode.RANGE_OVERFLOW),
        )
    trigger(NarrowingWarning(
        "number %r does not fit in %s slot and was narrowed to %d" % (token, kind.value, narrowed),
        title="narrowed value",
        code=FaultCode.NARROWED_VALUE,
        hint="pass a value between %d and %d" % (low, high),
        token=token,
        docs=getdoc(FaultCode.NARROWED_VALUE),
    ), stacklevel=6)
    return narrowed


def _parse_double(token):
    if not (match := _DOUBLE.match(token)):
        raise MalformedNumberError(
            "malformed number %r for double slot" % token,
            title="malformed number",
            code=FaultCode.MALFORMED_NUMBER,
            hint="pass a decimal number (for example: 0.5 or 1e-3)",
            token=token,
            docs=getdoc(FaultCode.MALFORMED_NUMBER),
        )
    sign, digits = match[1], match[2]
    try:
        if digits[:2].lower() == "0x":
            value = float.fromhex(sign + digits + "p0" * ("p" not in digits.lower()))
        else:
            value = float(sign + digits)
    except OverflowError:
        value = math.inf
    if math.isinf(value) and not digits[:1].isalpha():
        raise RangeOverflowError(
            "number %r is out of range for double slot" % token,
            title="number out of range",
            code=FaultCode.RANGE_OVERFLOW,
            hint="pass a finite value or 'inf' explicitly",
            token=token,
            docs=getdoc(FaultCode.RANGE_OVERFLOW),
        )
    return value


def coerce(token, binding, /, *, strict=False):
    """
    Coerce one raw token into the slot aliased by `binding`.

    Parameters
    - token: str | None
      The raw token. None is a no-op.
    - binding: Binding
      Target handle; the slot is written through binding.ref.set().
    - strict: bool
      Raise RangeOverflowError instead of narrowing integers that do not fit.

    Raises
    - MalformedNumberError: non-numeric token for an integer/double slot.
    - RangeOverflowError: value outside the signed 64-bit parse range, or
      outside the slot width when strict=True.
    - TypeError: token is not a string, or binding is not a Binding.

    Notes
    - The slot is only written after a successful parse.
    - Optional kinds recurse into the plain kind against a temporary slot and
      then store the temporary's value as present.
    """
    if token is None:
        return
    if not isinstance(token, str):
        raise TypeError("coerce() first argument must be a string")
    if not isinstance(binding, Binding):
        raise TypeError("coerce() second argument must be a binding")

    if binding.optional:
        temporary = Ref()
        coerce(token, Binding(binding.kind, temporary), strict=strict)
        binding.ref.set(temporary.value)
        return

    match binding.kind:
        case Kind.STRING:
            value = token
        case Kind.PATH:
            value = pathlib.Path(token)
        case Kind.BOOLEAN:
            value = token == "true"
        case Kind.DOUBLE:
            value = _parse_double(token)
        case Kind.INT32 | Kind.UINT32 | Kind.INT64 | Kind.UINT64:
            value = _narrow(token, _parse_integer(token, binding.kind), binding.kind, strict=strict)
    binding.ref.set(value)


def render(binding, /):
    """
    Render the slot's current value for display (never for round-tripping).

    - boolean: "true" / "false"
    - integers, double: str(value)
    - string: verbatim; path: os.fspath(value)
    - absent optional (or a slot still holding None): ""
    """
    if not isinstance(binding, Binding):
        raise TypeError("render() argument must be a binding")
    if (value := binding.ref.get()) is None:
        return ""
    match binding.kind:
        case Kind.BOOLEAN:
            return "true" if value else "false"
        case Kind.STRING:
            return str(value)
        case Kind.PATH:
            return os.fspath(value)
        case _:
            return str(value)


__all__ = (
    # Slots
    "Ref",
    "attr",
    "item",

    # Union
    "Kind",
    "Binding",

    # Factories
    "boolean",
    "int32",
    "uint32",
    "int64",
    "uint64",
    "double",
    "string",
    "path",

    # Coercion
    "coerce",
    "render",
)
