"""
Result collection for a single parse.

Collector accumulates what the parser recognizes while it walks the token
stream; finalize() freezes it into a ParseResult. A result produced after a
failure keeps whatever was collected before the failure (partial result, no
rollback) and carries the error.

Values
- value-taking option: the raw value string (the last occurrence wins).
- value-less option: True.
- repeatable value-less option: the number of occurrences (int).
"""
from collections import namedtuple
from types import MappingProxyType

from .faults import ExitStatus
from .utils import Unset, mirror

Event = namedtuple("Event", ("spec", "token", "value", "index"))
Event.__doc__ = """
one recognized option occurrence, in argv order.

- spec:  the OptionSpec that matched.
- token: the token as classified (bundle members appear as "-c").
- value: the consumed value, or None for value-less options.
- index: 1-based ordinal of the token in the original argument vector.
"""


class ParseResult:
    """
    frozen outcome of a parse.

    attributes
    - values: read-only mapping from option key to str | bool | int.
    - positionals: tuple of positional tokens in argv order.
    - events: tuple of Event, every option occurrence in argv order.
    - error: ParseError | None.
    - status: ExitStatus the host should exit with for this result.
    """
    __slots__ = ("_values", "_positionals", "_events", "_error", "_aliases", "_keys")

    values = mirror("values")
    positionals = mirror("positionals")
    events = mirror("events")

    def __init__(self, values, positionals, events, error=None, /, *, aliases=None, keys=()):
        self._values = dict(values)
        self._positionals = tuple(positionals)
        self._events = tuple(events)
        self._error = error
        self._aliases = dict(aliases or {})
        self._keys = frozenset(keys)

    @property
    def error(self):
        return self._error

    @property
    def ok(self):
        return self._error is None

    @property
    def status(self):
        return ExitStatus.SUCCESS if self._error is None else self._error.status

    def get(self, name, default=None, /):
        """
        look a value up by key, long name or short character.

        a name that is the key of some option never falls back to another
        option's short character (e.g. "--o" next to "--output/-o").
        """
        try:
            return self._values[name]
        except KeyError:
            if name in self._keys:
                return default
        try:
            return self._values[self._aliases[name]]
        except KeyError:
            return default

    def __getitem__(self, name, /):
        if (value := self.get(name, Unset)) is Unset:
            raise KeyError(name)
        return value

    def __contains__(self, name, /):
        return self.get(name, Unset) is not Unset

    def __repr__(self):
        return "parse-result(values=%r, positionals=%r, error=%r)" % (
            self._values, list(self._positionals), self._error
        )

    def __rich_repr__(self):
        yield "values", MappingProxyType(self._values)
        yield "positionals", self._positionals
        yield "error", self._error


class Collector:
    """
    mutable accumulator used by the parser while walking the token stream.

    once finalize() has run the collector is closed; further records raise
    RuntimeError so nothing sneaks in after a failure.
    """
    __slots__ = ("_values", "_positionals", "_events", "_aliases", "_keys", "_closed")

    def __init__(self, keys=(), /):
        self._values = {}
        self._positionals = []
        self._events = []
        self._aliases = {}
        # result keys of every option in the table
        self._keys = frozenset(keys)
        self._closed = False

    def record(self, spec, token, value=None, /, *, index=None):
        """
        record one option occurrence.

        - value-taking specs store `value` (last occurrence wins).
        - repeatable value-less specs increment an integer counter.
        - other value-less specs store True.
        """
        if self._closed:
            raise RuntimeError("collector is already finalized")
        key = spec.key
        if spec.takes_value:
            self._values[key] = value
        elif spec.repeatable:
            self._values[key] = self._values.get(key, 0) + 1
        else:
            self._values[key] = True
        for name in (spec.long, spec.short):
            if name is not None and name != key:
                self._aliases[name] = key
        self._events.append(Event(spec, token, value if spec.takes_value else None, index))

    def positional(self, *tokens):
        """
        append positional tokens, preserving their order.
        """
        if self._closed:
            raise RuntimeError("collector is already finalized")
        self._positionals.extend(tokens)

    def finalize(self, error=None, /):
        """
        close the collector and freeze its state into a ParseResult.
        """
        self._closed = True
        return ParseResult(self._values, self._positionals, self._events, error, aliases=self._aliases, keys=self._keys)


__all__ = (
    "Event",
    "ParseResult",
    "Collector",
)
