"""
Argz scanner: walk argv, resolve flags, and coerce values into bound slots.

What this module provides
- parse(context, options, argv): the scanner. Mutates the slots bound in
  `options` and the sticky flags of `context`; returns nothing.
- help(context, options): write the help block (and set printed_help).
- version(context): write "Version: <version>" (and set printed_version).
- invoke(context, options, prompt): process boundary helper reading sys.argv
  (or a shell-like string) and telling the caller whether to exit early.

Scanning rules
- argv[0] is the program name and is never scanned.
- argv == [prog]: print help iff context.print_help_when_no_options.
- Every scanned token must start with '-' (ExpectedFlagPrefixError).
- One or two leading dashes are stripped, whatever the id length.
- "h"/"help" and "v"/"version" print and keep scanning.
- A one-character name is an alias; an undeclared alias is an error
  (UnknownAliasError).
- An empty name ("-" or "--") stops the scan.
- The first option with a matching id wins:
  • boolean: set True, no value consumed.
  • otherwise: the next token is the value (MissingValueError when absent).
- A long name no option declares is ignored.

Output
- Help/version go to an injected rich Console (stdout by default), so tests
  and hosts can capture or redirect them.
- Faults carry the ordinal position of the offending token ("at second
  position") and the program name.

Quick start
    import sys
    from argz import Context, Option, Ref, int32, boolean, parse

    count, verbose = Ref(1), Ref(False)
    context = Context("Example tool", "1.0.0")
    parse(context, [
        Option("count", int32(count), "number of runs", alias="c"),
        Option("verbose", boolean(verbose), "chatty output"),
    ], sys.argv)
    if context.printed_help or context.printed_version:
        sys.exit(0)
"""
import functools
import os.path
import shlex
import sys
import warnings
from collections import defaultdict
from collections.abc import Iterable
from warnings import catch_warnings

from rich.console import Console
from rich.text import Text

from .bindings import Kind, coerce, render
from .faults import *
from .options import Context, Options
from .utils import Unset


@functools.cache
def _ordinal(number):
    """
    Return a human-friendly ordinal label for a 1-based position.

    - 1..10 are rendered as words ("first"..."tenth").
    - Other numbers use numeric ordinals with English suffixes.
    """
    try:
        return {
            1: "first",
            2: "second",
            3: "third",
            4: "fourth",
            5: "fifth",
            6: "sixth",
            7: "seventh",
            8: "eighth",
            9: "ninth",
            10: "tenth",
        }[number]
    except KeyError:
        pass

    # 11th, 12th, 13th (and 111th, 112th, 113th, ...)
    if 10 < number % 100 < 20:
        return f"{number}th"

    return f'{number}%s' % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


def _styler(context):
    """
    Build the text() helper used by the renderers.

    Palette keys
    - description-section, version-label, version-section
    - builtin-name, option-name, argument-description, default-label, default-value

    Define a mapping named __styles__ in __main__ to override any entry. When
    context.colorful is False, no style is applied.
    """
    styles = defaultdict(str, {
        "description-section": "italic #A3A3A3",
        "version-label": "bold #FFFFFF",
        "version-section": "bold #00E6FF",
        "builtin-name": "bold #22C55E",
        "option-name": "bold #00E6FF",
        "argument-description": "#9CA3AF",
        "default-label": "#737373",
        "default-value": "bold #FFD600",
    } | getattr(__import__("__main__"), "__styles__", {}))

    def text(fragment, style=""):
        if not context.colorful:
            return Text(str(fragment))
        return Text(str(fragment), styles[style])

    return text


def _names(option):
    if option.alias is not None:
        return "-%s, --%s" % (option.alias, option.id)
    return ("-" if len(option.id) == 1 else "--") + option.id


def help(context, options, /, *, console=Unset):
    """
    Write the help block and set context.printed_help.

    Layout
        <description>
        Version: <version>

        -h, --help       write help to console
        -v, --version    write the version to console
        <names>    <help>[, default: <rendered value>]
        ...
        (blank line)

    <names> is "-a, --id" when the option has an alias, otherwise "-i" for a
    one-character id and "--id" for longer ones. The default is the slot's
    current value, shown only when it renders to a non-empty string.
    """
    if not isinstance(context, Context):
        raise TypeError("help() first argument must be a context")
    options = Options.of(options)
    console = Console() if console is Unset else console
    text = _styler(context)

    lines = [
        text(context.description, "description-section"),
        Text.assemble(text("Version:", "version-label"), " ", text(context.version, "version-section")),
        Text(),
        Text.assemble(text("-h, --help", "builtin-name"), "       ", text("write help to console", "argument-description")),
        Text.assemble(text("-v, --version", "builtin-name"), "    ", text("write the version to console", "argument-description")),
    ]
    for option in options:
        line = Text.assemble(text(_names(option), "option-name"), "    ", text(option.help, "argument-description"))
        if default := render(option.binding):
            line.append_text(Text.assemble(text(", default:", "default-label"), " ", text(default, "default-value")))
        lines.append(line)
    lines.append(Text())

    context.printed_help = True
    console.print(Text("\n").join(lines), soft_wrap=True)


def version(context, /, *, console=Unset):
    """
    Write "Version: <version>" and set context.printed_version.
    """
    if not isinstance(context, Context):
        raise TypeError("version() first argument must be a context")
    console = Console() if console is Unset else console
    text = _styler(context)

    context.printed_version = True
    console.print(
        Text.assemble(text("Version:", "version-label"), " ", text(context.version, "version-section")),
        soft_wrap=True,
    )


def _sanitized(argv):
    if isinstance(argv, str) or not isinstance(argv, Iterable):
        raise TypeError("parse() argv must be a sequence of strings")
    tokens = list(argv)
    for token in tokens:
        if not isinstance(token, str):
            raise TypeError("parse() argv must be a sequence of strings")
    return tokens


def parse(context, options, argv, /, *, console=Unset):
    """
    Scan `argv` and write matching values into the slots bound in `options`.

    Parameters
    - context: Context
      Run metadata and policies; printed_help/printed_version are set here.
    - options: Options | Iterable[Option]
      The option table (first match wins on duplicate ids/aliases).
    - argv: Sequence[str]
      Full argument vector; argv[0] is the program name.
    - console: rich Console
      Destination of help/version output (stdout console by default).

    Raises (library mode; in shell mode the fault is printed and exit(1) follows)
    - ExpectedFlagPrefixError: a scanned token does not start with '-'.
    - UnknownAliasError: "-x" where no option declares alias "x".
    - MissingValueError: a value-bearing flag is the last token.
    - MalformedNumberError / RangeOverflowError: coercion failures.
    - TypeError: wrong argument types.

    Slots are mutated as the scan goes; a failure part-way leaves the slots
    already bound in their new state.
    """
    if not isinstance(context, Context):
        raise TypeError("parse() first argument must be a context")
    options = Options.of(options)
    argv = _sanitized(argv)
    console = Console() if console is Unset else console

    surface = {
        "shell": context.shell,
        "colorful": context.colorful,
        "prog": os.path.basename(argv[0]) if argv else "",
    }

    if len(argv) == 1:
        if context.print_help_when_no_options:
            help(context, options, console=console)
        return

    index = 1
    while index < len(argv):
        token = argv[index]
        if not token.startswith("-"):
            trigger(ExpectedFlagPrefixError(
                "expected a flag but got %r at %s position" % (token, _ordinal(index)),
                title="expected flag",
                code=FaultCode.EXPECTED_FLAG_PREFIX,
                hint="flags start with '-' or '--' (for example: --name value); values follow their flag",
                token=token,
                index=index,
                docs=getdoc(FaultCode.EXPECTED_FLAG_PREFIX),
            ), **surface)

        name = token[2:] if token.startswith("--") else token[1:]

        if name in ("h", "help"):
            help(context, options, console=console)
            index += 1
            continue
        if name in ("v", "version"):
            version(context, console=console)
            index += 1
            continue

        if len(name) == 1:
            if (resolved := options.resolve(name)) is None:
                trigger(UnknownAliasError(
                    "unknown alias %r at %s position" % (token, _ordinal(index)),
                    title="unknown alias",
                    code=FaultCode.UNKNOWN_ALIAS,
                    hint="use one of the declared aliases or the long form (run with --help to list them)",
                    token=token,
                    index=index,
                    docs=getdoc(FaultCode.UNKNOWN_ALIAS),
                ), **surface)
            name = resolved

        if not name:
            break

        if (option := options.lookup(name)) is None:
            index += 1
            continue

        binding = option.binding
        if binding.kind is Kind.BOOLEAN:
            binding.ref.set(True)
            index += 1
            continue

        start, index = index, index + 1
        if index >= len(argv):
            trigger(MissingValueError(
                "option %r at %s position expects a value" % (token, _ordinal(start)),
                title="missing value",
                code=FaultCode.MISSING_VALUE,
                hint="pass the value right after the flag (for example: %s <value>)" % token,
                token=token,
                index=start,
                option=option.id,
                docs=getdoc(FaultCode.MISSING_VALUE),
            ), **surface)

        try:
            with catch_warnings(record=True) as caught:
                warnings.simplefilter("always")
                coerce(argv[index], binding, strict=context.strict)
        except ArgzException as fault:
            trigger(type(fault)(
                "%s (value of %r at %s position)" % (fault.message, token, _ordinal(index)),
                **fault.options
            ), index=index, option=option.id, **surface)

        for warning in map(lambda record: record.message, caught):
            if isinstance(warning, ArgzWarning):
                trigger(type(warning)(
                    "%s (value of %r at %s position)" % (warning.message, token, _ordinal(index)),
                    **warning.options
                ), index=index, option=option.id, stacklevel=4, **surface)
            else:
                warnings.warn(warning, stacklevel=2)

        index += 1


def invoke(context, options, prompt=Unset, /, *, console=Unset):
    """
    Run parse() at the process boundary.

    Parameters
    - prompt:
      • Unset: use sys.argv as-is.
      • str: split with shlex.split; the program name (basename of
        sys.argv[0]) is prepended.
      • Iterable[str]: the full argv, program name included.

    Returns
    - True when help or version text was printed (the caller usually exits),
      False otherwise.
    """
    if prompt is Unset:
        argv = list(sys.argv)
    elif isinstance(prompt, str):
        argv = [os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "argz", *shlex.split(prompt)]
    elif isinstance(prompt, Iterable):
        argv = list(prompt)
    else:
        raise TypeError("invoke() prompt must be a string or an iterable of strings")

    parse(context, options, argv, console=console)
    return context.printed_help or context.printed_version


__all__ = (
    "parse",
    "help",
    "version",
    "invoke",
)
