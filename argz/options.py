r"""
Argz option table and run context.

Overview
- Option: one declared flag identity (long id, optional one-character alias),
  the Binding it writes to, and its help text.
- Options: the ordered, immutable option table scanned by argz.parser.parse().
- Context: per-run metadata (description, version, policies) plus the two
  sticky flags telling the caller that help or version text was printed.

Table semantics
- Order matters: lookups return the first match in declaration order.
- Duplicate ids and duplicate aliases are accepted; the first declared option
  shadows later ones.
- "-h/--help" and "-v/--version" are built in and cannot be declared.

Quick example:
    >>> from argz import Option, Options, Ref, int32, boolean
    >>> count, verbose = Ref(1), Ref(False)
    >>> options = Options(
    ...     Option("count", int32(count), "number of runs", alias="c"),
    ...     Option("verbose", boolean(verbose), "chatty output"),
    ... )
    >>> options.resolve("c")
    'count'
"""
from collections.abc import Iterable, Sequence

from .bindings import Binding
from .utils import SpecType, Unset, coalesce

# Built-in flag identities; never user-declarable.
RESERVED_IDS = frozenset({"help", "version"})
RESERVED_ALIASES = frozenset({"h", "v"})


class Option(metaclass=SpecType):
    """
    Named option bound to one caller-owned slot.

    Parameters
    - id: str
      Long identifier matched by "--id" (or "-id"). Non-empty, no leading '-'.
    - binding: Binding
      Where the value goes.
    - help: str
      Help text; may be empty.
    - alias: Unset | str
      Single-character short form matched by "-x".

    Raises
    - TypeError: wrong types for id/binding/help/alias.
    - ValueError: empty id, leading '-', multi-character alias, or a reserved
      built-in name ("help", "version", "h", "v").
    """

    __introspectable__ = (
        "id",
        "alias",
        "binding",
        "help",
    )

    def __init__(self, id, binding, /, help="", *, alias=Unset):
        typename = type(self).__typename__
        if not isinstance(id, str):
            raise TypeError(f"{typename} 'id' must be a string")
        elif not (id := id.strip()):
            raise ValueError(f"{typename} 'id' cannot be empty")
        elif id.startswith("-"):
            raise ValueError(f"{typename} 'id' must be given without leading dashes")
        elif id in RESERVED_IDS:
            raise ValueError(f"{typename} 'id' {id!r} is reserved for the built-in --{id}")

        if not isinstance(alias, str | Unset):
            raise TypeError(f"{typename} 'alias' must be a string")
        elif isinstance(alias, str) and (len(alias) != 1 or alias == "-" or alias.isspace()):
            raise ValueError(f"{typename} 'alias' must be a single character")
        elif alias in RESERVED_ALIASES:
            raise ValueError(f"{typename} 'alias' {alias!r} is reserved for a built-in flag")

        if not isinstance(binding, Binding):
            raise TypeError(f"{typename} 'binding' must be a binding")
        if not isinstance(help, str):
            raise TypeError(f"{typename} 'help' must be a string")

        self._id = id
        self._alias = coalesce(alias)
        self._binding = binding
        self._help = help

    def __init_subclass__(cls, **options):
        raise TypeError("type 'Option' is not an acceptable base type")


class Options(Sequence):
    """
    Ordered, immutable option table.

    Only the bound values change during a scan; the table itself (identity,
    order, shape) never does.
    """
    __slots__ = ("_options",)

    def __init__(self, *options):
        for option in options:
            if not isinstance(option, Option):
                raise TypeError("options entries must be Option instances")
        self._options = options

    @classmethod
    def of(cls, options, /):
        """
        Return `options` as an Options table, wrapping any iterable of Option.
        """
        if isinstance(options, cls):
            return options
        if not isinstance(options, Iterable):
            raise TypeError("options must be an iterable of Option instances")
        return cls(*options)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return type(self)(*self._options[index])
        return self._options[index]

    def __len__(self):
        return len(self._options)

    def __repr__(self):
        return f"options({', '.join(map(repr, self._options))})"

    def resolve(self, alias, /):
        """
        Long id of the first option declaring `alias`, or None.
        """
        for option in self._options:
            if option.alias == alias:
                return option.id
        return None

    def lookup(self, id, /):
        """
        First option whose long id equals `id`, or None.
        """
        for option in self._options:
            if option.id == id:
                return option
        return None


class Context:
    """
    Transient parse-session metadata.

    Fields
    - description, version: text used by the help/version output.
    - print_help_when_no_options: print help when argv holds only the program name.
    - shell: render faults with rich and exit(1) instead of raising.
    - colorful: style help/version/fault output.
    - strict: raise RangeOverflowError instead of narrowing integers.
    - printed_help, printed_version: sticky, set the first time the
      corresponding text is written; cleared only by reset().
    """

    def __init__(
            self,
            description="",
            version="",
            print_help_when_no_options=True,
            *,
            shell=False,
            colorful=False,
            strict=False,
    ):
        if not isinstance(description, str):
            raise TypeError("context 'description' must be a string")
        if not isinstance(version, str):
            raise TypeError("context 'version' must be a string")
        self.description = description
        self.version = version
        self.print_help_when_no_options = bool(print_help_when_no_options)
        self.shell = bool(shell)
        self.colorful = bool(colorful)
        self.strict = bool(strict)
        self.printed_help = False
        self.printed_version = False

    def reset(self):
        """
        Clear the sticky output flags before reusing the context.
        """
        self.printed_help = False
        self.printed_version = False

    def __repr__(self):
        return (
            f"context(description={self.description!r}, version={self.version!r}, "
            f"printed_help={self.printed_help!r}, printed_version={self.printed_version!r})"
        )


__all__ = (
    "Option",
    "Options",
    "Context",
)
