"""
Option table: the caller-supplied catalogue of recognized options.

The table is built once, validated once, and then only read. Lookups are pure
and total: an unknown name yields None, never an exception. Name collisions
and nameless specs are configuration errors reported by ConfigError while the
table is being built, so parsing never has to worry about them.

Quick example
    >>> table = OptionTable(
    ...     OptionSpec("--output", "-o", takes_value=True),
    ...     OptionSpec("-v", repeatable=True),
    ... )
    >>> table.lookup_short("o").key
    'output'
    >>> table.lookup_long("missing") is None
    True
"""
from collections.abc import Iterable
from types import MappingProxyType

from .faults import ConfigError
from .utils import mirror


class OptionTable:
    """
    ordered, immutable set of OptionSpec keyed by long name and short character.

    invariants
    - no two specs share a long name; no two specs share a short character.
    - every spec declares at least one name (guaranteed by OptionSpec itself).
    - iteration yields specs in declaration order.
    """
    __slots__ = ("_specs", "_longs", "_shorts")

    specs = mirror("specs")

    def __init__(self, *specs):
        ordered = []
        longs = {}
        shorts = {}
        for spec in specs:
            if not hasattr(spec, "__option__") or not callable(spec.__option__):
                raise TypeError("option table entries must be option specs")
            spec = spec.__option__()
            if spec in ordered:
                raise ConfigError("option %s is declared twice" % spec.display)
            ordered.append(spec)
            if spec.long is None and spec.short is None:
                raise ConfigError("option spec must declare a long name or a short character")
            if spec.long is not None:
                if (other := longs.setdefault(spec.long, spec)) is not spec:
                    raise ConfigError("long name %r is declared by both %s and %s" % (
                        spec.long, other.display, spec.display
                    ))
            if spec.short is not None:
                if (other := shorts.setdefault(spec.short, spec)) is not spec:
                    raise ConfigError("short character %r is declared by both %s and %s" % (
                        spec.short, other.display, spec.display
                    ))

        object.__setattr__(self, "_specs", tuple(ordered))
        object.__setattr__(self, "_longs", MappingProxyType(longs))
        object.__setattr__(self, "_shorts", MappingProxyType(shorts))

    @classmethod
    def build(cls, specs, /):
        """
        build a table from an iterable of specs (alternate constructor).

        raises ConfigError on collisions, TypeError on non-spec entries.
        """
        if not isinstance(specs, Iterable):
            raise TypeError("build() argument must be an iterable of option specs")
        return cls(*specs)

    def lookup_long(self, name, /):
        """
        return the spec whose long name is `name` (without the leading "--"), or None.
        """
        return self._longs.get(name)

    def lookup_short(self, char, /):
        """
        return the spec whose short character is `char` (without the leading "-"), or None.
        """
        return self._shorts.get(char)

    def lookup(self, name, /):
        """
        resolve a long name or a short character, long names first.
        """
        spec = self._longs.get(name)
        return spec if spec is not None else self._shorts.get(name)

    def __iter__(self):
        return iter(self._specs)

    def __len__(self):
        return len(self._specs)

    def __contains__(self, spec, /):
        return spec in self._specs

    def __setattr__(self, name, value, /):
        raise AttributeError("option tables are read-only")

    def __repr__(self):
        return "option-table(%s)" % ", ".join(spec.display for spec in self._specs)

    def __rich_repr__(self):
        yield from self._specs


__all__ = (
    "OptionTable",
)
