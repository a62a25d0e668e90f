"""
Argvex token stream driver: turn an argument vector into a ParseResult.

What happens per token (head of the stream)
- "--"                  → every remaining token becomes positional, verbatim; stop.
- "--name" (known)      → record it; a value-taking option validates and consumes
                          the next token as its value.
- "-c" (known)          → same as above.
- "-abc" (bundle)       → check every character, then push "-a", "-b", "-c" back onto
                          the front of the stream and keep scanning. Only the last
                          character may take a value; it is then served by the
                          ordinary short-option path and takes the next token.
- any other "-" token   → UnknownOptionError (a lone "-" included).
- anything else         → positional.

The first fault stops the walk. parse() never raises parse faults: the partial
result collected so far is returned with `error` set.

Every iteration consumes the head token or replaces a bundle with strictly
shorter tokens, so the walk always terminates.

Quick example
    >>> table = OptionTable(
    ...     OptionSpec("--output", "-o", takes_value=True),
    ...     OptionSpec("-v", repeatable=True),
    ... )
    >>> result = parse(["-vvo", "result.txt", "input.txt"], table)
    >>> dict(result.values), result.positionals
    ({'v': 2, 'output': 'result.txt'}, ('input.txt',))
"""
import difflib
from collections.abc import Iterable
from enum import Enum

from .disaggregator import is_bundle, disaggregate
from .faults import ParseError, UnknownOptionError, AmbiguousBundleCharError
from .results import Collector
from .stream import TokenStream
from .utils import ordinal
from .validator import validate_value


class State(Enum):
    SCANNING = "scanning"
    AWAITING_VALUE = "awaiting-value"
    TERMINATED = "terminated"
    FAILED = "failed"


class Parser:
    """
    single-use driver over one token stream.

    the table is only read; the stream and the collector belong to this parser
    and are never shared, so independent parses can run side by side.
    """
    __slots__ = ("_table", "_stream", "_collector", "_state")

    def __init__(self, table, argv, /):
        self._table = table
        self._stream = TokenStream(argv)
        self._collector = Collector(spec.key for spec in table)
        self._state = State.SCANNING

    @property
    def state(self):
        return self._state

    def run(self):
        """
        walk the stream once and return the finalized ParseResult.
        """
        if self._state is not State.SCANNING:
            raise RuntimeError("parser has already run")
        try:
            self._parseargs()
        except ParseError as error:
            self._state = State.FAILED
            return self._collector.finalize(error)
        self._state = State.TERMINATED
        return self._collector.finalize()

    def _parseargs(self):
        while self._stream:
            index = self._stream.index
            token = self._stream.popfront()

            if token == "--":
                self._collector.positional(*self._stream.drain())
                return

            if token.startswith("--"):
                if (spec := self._table.lookup_long(token[2:])) is None:
                    raise self._unknown(token, index)
                self._accept(spec, token, index)
            elif token.startswith("-") and len(token) == 2:
                if (spec := self._table.lookup_short(token[1])) is None:
                    raise self._unknown(token, index)
                self._accept(spec, token, index)
            elif is_bundle(token):
                self._expand(token, index)
            elif token.startswith("-"):
                raise self._unknown(token, index)
            else:
                self._collector.positional(token)

    def _accept(self, spec, token, index):
        """
        record a recognized option, consuming its value when it takes one.
        """
        if not spec.takes_value:
            self._collector.record(spec, token, index=index)
            return
        self._state = State.AWAITING_VALUE
        if fault := validate_value(spec, self._stream.peek(), token, index=index):
            raise fault
        self._collector.record(spec, token, self._stream.popfront(), index=index)
        self._state = State.SCANNING

    def _expand(self, token, index):
        """
        guard a bundle and push its single-character tokens back onto the stream.
        """
        expanded = disaggregate(token, self._table, index=index)

        # a value-taking character can only close the bundle, otherwise the next
        # character would be read as its value
        for char in token[1:-1]:
            if (spec := self._table.lookup_short(char)).takes_value:
                raise AmbiguousBundleCharError(
                    "option %r takes a value and cannot sit inside bundle %r at %s position" % (
                        "-" + char, token, ordinal(index)
                    ),
                    token=token,
                    index=index,
                    char=char,
                    hint="move %r to the end of the bundle or pass it separately (for example: %s %s <%s>)" % (
                        "-" + char, "-" + token[1:].replace(char, "", 1), "-" + char, spec.metavar
                    ),
                )

        self._stream.pushfront(*expanded)

    def _unknown(self, token, index):
        known = [name for spec in self._table for name in spec.names]
        suggestions = difflib.get_close_matches(token, known, 5)
        if suggestions:
            hint = "did you mean %r?" % suggestions[0]
        else:
            hint = "check the option spelling or pass '--' before positionals that start with '-'"
        return UnknownOptionError(
            "unknown option %r at %s position" % (token, ordinal(index)),
            token=token,
            index=index,
            suggestions=suggestions,
            hint=hint,
        )


def parse(argv, table, /):
    """
    parse an argument vector (program name excluded) against an option table.

    parameters
    - argv: iterable of str (a bare str is rejected; split it first).
    - table: OptionTable.

    returns
    - ParseResult; on failure its `error` is set and the values/positionals
      reflect only the tokens processed before the failure.
    """
    if isinstance(argv, str) or not isinstance(argv, Iterable):
        raise TypeError("parse() first argument must be an iterable of strings")
    if not hasattr(table, "lookup_short") or not hasattr(table, "lookup_long"):
        raise TypeError("parse() second argument must be an option table")
    return Parser(table, argv).run()


__all__ = (
    "State",
    "Parser",
    "parse",
)
