"""
Value shapes for value-taking options.

A shape answers one question: does this raw string have the form the option
declares? Shapes never convert; accepted values are kept as the raw string.

Shapes
- Freeform: any string, including the empty string.
- UnsignedInteger: one or more ASCII decimal digits, no sign, and no leading
  zero followed by another digit ("0" is fine, "00" and "01" are not; a
  leading zero reads as octal in the shell world and is rejected).
- OneOf(*choices): exact, case-sensitive membership in a fixed set of strings.

Freeform and UnsignedInteger are process-wide singletons; OneOf compares by
its set of choices.

Quick example
    >>> UnsignedInteger.accepts("10"), UnsignedInteger.accepts("010")
    (True, False)
    >>> OneOf("fast", "safe").accepts("Fast")
    False
"""
import functools
import re
from abc import ABC, abstractmethod
from typing import final


class Shape(ABC):
    """
    abstract value shape.

    subclasses implement accepts(value) and describe(); metavar is the
    placeholder shown in hints (e.g., "--depth <N>").
    """
    metavar = "VALUE"

    @abstractmethod
    def accepts(self, value, /):
        ...

    @abstractmethod
    def describe(self):
        ...

    def __rich_repr__(self):
        yield from ()


@final
class FreeformType(Shape):
    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def accepts(self, value, /):
        return isinstance(value, str)

    def describe(self):
        return "any text"

    def __repr__(self):
        return "Freeform"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __reduce__(self):
        return "Freeform"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'FreeformType' is not an acceptable base type")


@final
class UnsignedIntegerType(Shape):
    metavar = "N"

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def accepts(self, value, /):
        # ASCII digits only: str.isdigit() and \d accept other scripts' digits.
        return isinstance(value, str) and re.fullmatch(r"0|[1-9][0-9]*", value) is not None

    def describe(self):
        return "an unsigned integer without leading zeros"

    def __repr__(self):
        return "UnsignedInteger"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __reduce__(self):
        return "UnsignedInteger"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsignedIntegerType' is not an acceptable base type")


@final
class OneOf(Shape):
    """
    enumerated shape: the value must equal one of the declared choices.

    choices
    - one or more strings, declared in display order.
    - duplicates are rejected; membership is exact and case-sensitive.
    """
    __slots__ = ("_choices",)

    def __init__(self, *choices):
        if not choices:
            raise TypeError("OneOf() must specify at least one choice")
        sanitized = []
        for choice in choices:
            if not isinstance(choice, str):
                raise TypeError("OneOf() choices must be strings")
            if choice in sanitized:
                raise ValueError("OneOf() choices cannot contain duplicates")
            sanitized.append(choice)
        self._choices = tuple(sanitized)

    @property
    def choices(self):
        return self._choices

    @property
    def metavar(self):
        return "{%s}" % ",".join(self._choices)

    def accepts(self, value, /):
        return value in self._choices

    def describe(self):
        return "one of %s" % ", ".join(map(repr, self._choices))

    def __eq__(self, other):
        if not isinstance(other, OneOf):
            return NotImplemented
        return frozenset(self._choices) == frozenset(other._choices)

    def __hash__(self):
        return hash((OneOf, frozenset(self._choices)))

    def __repr__(self):
        return "OneOf(%s)" % ", ".join(map(repr, self._choices))

    def __rich_repr__(self):
        yield from self._choices

    def __init_subclass__(cls, **options):
        raise TypeError("type 'OneOf' is not an acceptable base type")


Freeform = FreeformType()
UnsignedInteger = UnsignedIntegerType()


__all__ = (
    "Shape",
    "FreeformType",
    "UnsignedIntegerType",
    "OneOf",
    "Freeform",
    "UnsignedInteger",
)
