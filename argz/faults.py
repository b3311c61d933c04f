"""
Argz faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue.
- ArgzException / ArgzWarning: base types that carry a message plus options and
  know how to render themselves (rich) and how to surface themselves (raise,
  warn, or print-and-exit).
- trigger(): central entry point to surface any fault with runtime options.
- getdoc(): optional description lookup for a code from the host application.

Shell vs. library mode
- Library mode (shell=False, the default): exceptions are raised and warnings are
  emitted through the warnings module. The caller decides what an error means
  for the process.
- Shell mode (shell=True): the fault is printed to stderr with rich; errors then
  terminate the process with exit status 1.

Recognized options
- code, title, hint, docs: copy shown by the renderer.
- token, index, option, prog: where the fault happened.
- shell, colorful: surfacing policy.
"""
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - scanning (1011x): EXPECTED_FLAG_PREFIX, UNKNOWN_ALIAS, MISSING_VALUE
    - coercion (1012x): MALFORMED_NUMBER, RANGE_OVERFLOW
    - warnings (2012x): NARROWED_VALUE
    """
    # --- scanning errors (1011x) ---
    EXPECTED_FLAG_PREFIX = 10111
    UNKNOWN_ALIAS        = 10112
    MISSING_VALUE        = 10113

    # --- coercion errors (1012x) ---
    MALFORMED_NUMBER     = 10121
    RANGE_OVERFLOW       = 10122

    # --- warnings (2012x) ---
    NARROWED_VALUE       = 20121

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(self, palette):
    main = __import__("__main__")
    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))
    colorful = self.options.get("colorful", False)

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        return Text(str(fragment), styles[style])

    header = Text.assemble(
        "[ ",
        text(self.options.get("prog") or getattr(main, "__prog__", "argz"), "prog-name"),
        " - ",
        text(self.options["code"].normalize() if "code" in self.options else "?", "code"),
        " | ",
        text(str(self.options.get("title", type(self).__name__)).title(), "title"),
        " ]",
    )
    renders = [header, text(self.message, "message")]
    if hint := self.options.get("hint"):
        renders.append(Text.assemble(text(" -> ", "hint-arrow"), text(hint, "hint")))
    return Group(*renders)


class ArgzException(Exception):
    """
    Base class for every error raised while binding arguments.

    The message is the first positional argument (str(error) returns it); any
    keyword becomes a read-only entry of `error.options`.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "title": "bold #FF4DA6",
            "message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        })

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class ExpectedFlagPrefixError(ArgzException): ...
class UnknownAliasError(ArgzException): ...
class MissingValueError(ArgzException): ...
class MalformedNumberError(ArgzException, ValueError): ...
class RangeOverflowError(ArgzException, OverflowError): ...


class ArgzWarning(Warning):
    """
    Base class for non-fatal conditions found while binding arguments.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #FFB400",
            "title": "bold #FFC2E0",
            "message": "#D6D6DE",
            "hint-arrow": "#B8EFAF dim",
            "hint": "italic #B8EFAF",
        })

    def __trigger__(self):
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=self.options.get("stacklevel", 2))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class NarrowingWarning(ArgzWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into a copy of the fault via __replace__(**options)
      before triggering; the original fault is left untouched.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode members; returns None when no entry exists.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "ArgzException",
    "ExpectedFlagPrefixError",
    "UnknownAliasError",
    "MissingValueError",
    "MalformedNumberError",
    "RangeOverflowError",
    "ArgzWarning",
    "NarrowingWarning",
    "trigger",
    "getdoc",
)
