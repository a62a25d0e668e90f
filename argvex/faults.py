"""
Argvex faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue.
- ExitStatus: the process exit statuses a host program maps faults onto.
- CommandException / CommandWarning: base types that carry message + options and
  know how to render themselves in a friendly, lowercased, and actionable way.
- ParseError: the closed family of faults the parser itself produces
  (unknown option, missing value, invalid value shape, ambiguous bundle character).
- ConfigError: raised at construction time for a badly declared option table.
- trigger(): central entry point to surface any fault (raise, or print and exit in shell mode).
- getdoc(): optional description lookup for a code from the host application.

UX goals
- Position-first messages: parse faults include the ordinal position of the
  offending token (“at second position”).
- Short titles, one-sentence bodies, a single clear hint.

Integration
- parse() never raises parse faults; it returns them inside ParseResult.error.
- Program runners call trigger(fault, **ctx). In non-shell mode the fault is
  raised; in shell mode it is rendered via rich and the process exits with
  the fault's status.
"""
import copy
import inspect
import sys
import warnings
from abc import ABC
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the parser (stable identifiers).

    grouping (by high-level domain)
    - switches (options) (1111x/1112x)
      • UNKNOWN_OPTION, MISSING_VALUE, INVALID_VALUE_SHAPE, AMBIGUOUS_BUNDLE_CHAR
    - positionals (1112x)
      • UNEXPECTED_POSITIONAL, MISSING_POSITIONALS
    - delegated errors/warnings (11131 / 12131)
      • DELEGATED_ERROR, DELEGATED_WARNING

    normalize() allows host remapping to custom labels while keeping code-stability.
    """
    # --- option errors (11xxx) ---
    UNKNOWN_OPTION              = 11112
    MISSING_VALUE               = 11117
    INVALID_VALUE_SHAPE         = 11124
    AMBIGUOUS_BUNDLE_CHAR       = 11126

    # --- positional errors (11xxx) ---
    UNEXPECTED_POSITIONAL       = 11121
    MISSING_POSITIONALS         = 11125

    # --- delegated errors (11xxx) ---
    DELEGATED_ERROR             = 11131

    # --- warnings (12xxx) ---
    DELEGATED_WARNING           = 12131

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class ExitStatus(IntEnum):
    """
    exit statuses a host program terminates with when surfacing a fault.

    - SUCCESS            0: nothing went wrong.
    - FAILURE            1: general or unspecified failure (e.g., a handler raised).
    - USAGE              2: usage error (unknown option, wrong positional count).
    - INVALID_ARGUMENT  22: an option value is missing or has the wrong shape.
    """
    SUCCESS          = 0
    FAILURE          = 1
    USAGE            = 2
    INVALID_ARGUMENT = 22


class ConfigError(ValueError):
    """
    a caller declared an inconsistent option table (colliding or missing names).

    detected when the table is built, never while parsing.
    """


def _renderer(fault, palette):
    """
    build the rich renderable shared by exceptions and warnings.

    layout
    - header: "[ prog — code | title ]"
    - body:   message
    - hint:   " → hint"
    - docs:   optional host documentation for the code (see getdoc())
    """
    main = __import__("__main__")
    options = fault.options
    colorful = options.get("colorful", False)
    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), styles[style])

    prog = text(options.get("prog") or getattr(main, "__prog__", "argvex"), "prog-name")

    header = Text.assemble(
        "[ ",
        prog,
        " — ",
        text(fault.code.normalize(), "code"),
        " | ",
        text(fault.title.title(), "title"),
        " ]"
    )
    body = [text(fault.message, "message")]
    if fault.hint:
        body.append(Text.assemble(text(" → ", "hint-arrow"), text(fault.hint, "hint")))
    if docs := getdoc(fault.code):
        body.append(text(docs, "docs"))

    if options.get("fancy", False):
        return Panel(Group(*body), title=header, title_align="left")
    return Group(header, *body)


class CommandException(Exception):
    """
    base class of every error fault.

    class-level defaults
    - code:   FaultCode identifying the fault.
    - status: ExitStatus the host should exit with.
    - title:  short lowercased title used in the rendered header.

    instance state
    - message: one-sentence description (lowercased tone).
    - options: read-only mapping of context (token, index, hint, prog, shell, ...).
    """
    code = FaultCode.DELEGATED_ERROR
    status = ExitStatus.FAILURE
    title = "unexpected failure"

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def hint(self):
        return self.options.get("hint")

    @property
    def token(self):
        return self.options.get("token")

    @property
    def index(self):
        return self.options.get("index")

    def __rich__(self):
        return _renderer(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "title": "bold #FF4DA6",
            "message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
            "docs": "#6B6F7A",
        })

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(int(self.status))

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})

    def __repr__(self):
        return "%s(%r)" % (type(self).__name__, self.token if self.token is not None else self.message)


class ParseError(CommandException):
    """
    a token stream could not be parsed against an option table.

    the family is closed: UnknownOptionError, MissingValueError,
    InvalidValueShapeError and AmbiguousBundleCharError. every instance carries
    the offending raw token (and for shape faults the value and expected shape).
    """
    status = ExitStatus.USAGE


class UnknownOptionError(ParseError):
    code = FaultCode.UNKNOWN_OPTION
    status = ExitStatus.USAGE
    title = "unknown option"


class MissingValueError(ParseError):
    code = FaultCode.MISSING_VALUE
    status = ExitStatus.INVALID_ARGUMENT
    title = "missing value"


class InvalidValueShapeError(ParseError):
    code = FaultCode.INVALID_VALUE_SHAPE
    status = ExitStatus.INVALID_ARGUMENT
    title = "invalid value"

    @property
    def value(self):
        return self.options.get("value")

    @property
    def shape(self):
        return self.options.get("shape")


class AmbiguousBundleCharError(ParseError):
    code = FaultCode.AMBIGUOUS_BUNDLE_CHAR
    status = ExitStatus.USAGE
    title = "ambiguous bundle"

    @property
    def char(self):
        return self.options.get("char")


class UnexpectedPositionalError(CommandException):
    code = FaultCode.UNEXPECTED_POSITIONAL
    status = ExitStatus.USAGE
    title = "unexpected positional"


class MissingPositionalsError(CommandException):
    code = FaultCode.MISSING_POSITIONALS
    status = ExitStatus.USAGE
    title = "missing positionals"


class DelegatedError(CommandException):
    code = FaultCode.DELEGATED_ERROR
    status = ExitStatus.FAILURE
    title = "delegated error"

    @property
    def exception(self):
        return self.options.get("exception")


class CommandWarning(ABC, Warning):
    """
    base class of every warning fault (never changes the exit status).
    """
    code = FaultCode.DELEGATED_WARNING
    title = "warning"

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def hint(self):
        return self.options.get("hint")

    def __rich__(self):
        return _renderer(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #FFB400",
            "title": "bold #FFC2E0",
            "message": "#D6D6DE",
            "hint-arrow": "#B8EFAF dim",
            "hint": "italic #B8EFAF",
            "docs": "#6B6F7A",
        })

    def __trigger__(self):
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class DelegatedWarning(CommandWarning):
    code = FaultCode.DELEGATED_WARNING
    title = "delegated warning"


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via copy.replace(fault, **options) before triggering.
    - in shell mode, rendering happens via the rich console (and errors exit with
      their status); otherwise, errors are raised and warnings are emitted.

    typical options
    - prog, shell, fancy, colorful, hint, and any other context the reporter may
      want to show (e.g., token/index/value).
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    when not found, returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "ExitStatus",
    "ConfigError",
    "CommandException",
    "ParseError",
    "UnknownOptionError",
    "MissingValueError",
    "InvalidValueShapeError",
    "AmbiguousBundleCharError",
    "UnexpectedPositionalError",
    "MissingPositionalsError",
    "DelegatedError",
    "CommandWarning",
    "DelegatedWarning",
    "trigger",
    "getdoc",
)
