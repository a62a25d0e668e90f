r"""
Argvex option specifications and the @option decorator.

Overview
- OptionSpec: one entry of an option table. Declares a long name (--name),
  a short character (-n), or both; whether the option takes a value and which
  shape that value must have; whether a value-less option is counted when
  repeated (-vvv); and an optional handler routed to after parsing.

- @option(...): build an OptionSpec and bind the decorated function as its handler.
  The returned spec's __call__ forwards to the bound handler.

Metadata (sanitized on construction)
- names: one "--long" and/or one "-c" form. Long names must match
  r"--[^\W\d_](-?[^\W_]+)*"; short forms are a single non-dash, non-space character.
- takes_value: bool. When True, shape defaults to Freeform.
- shape: Freeform | UnsignedInteger | OneOf(...); only allowed with takes_value.
- repeatable: bool; only allowed for value-less options.
- dashed: bool; only allowed with takes_value. Lets the option take a value that
  looks like another option (e.g., --pattern -v).
- metavar: Unset | str (placeholder in hints, defaults to the shape's metavar).
- descr: Unset | str (short description), non-empty when provided.

Dynamic calling
- _invoker(takes_value) builds a cached __call__ that no-ops while no handler is
  bound and otherwise forwards the value (or nothing, for value-less options).

Quick example
    >>> from argvex import option, OptionSpec, UnsignedInteger
    >>> depth = OptionSpec("--depth", takes_value=True, shape=UnsignedInteger)
    >>> @option("-v", "--verbose", repeatable=True)
    ... def on_verbose(): ...
"""
import builtins
import functools
import operator
import re
import textwrap
from types import MethodType

from rich.text import Text

from .shapes import Shape, Freeform
from .utils import *


@functools.cache
def _invoker(takes_value, /):
    """
    Build and cache a tailored __call__ method for a value-taking or value-less spec.

    The generated trampoline:
    - No-ops when self._handler is Unset (silently returns None).
    - Otherwise forwards the received value (if any) to self._handler unchanged.

    Signature shape
    - takes_value: __call__(self, value, /)
    - value-less:  __call__(self)
    """
    signature = ["self"]
    arguments = []

    if takes_value:
        signature.extend(("value", "/"))
        arguments.append("value")

    # exec keeps an introspectable signature that matches the declared arity
    exec(textwrap.dedent(f"""
        @rename("__call__")
        def __call__({", ".join(signature)}):
            if self._handler is Unset:
                return
            return self._handler({", ".join(arguments)})
    """), globals(), namespace := locals())

    namespace["__call__"].__doc__ = textwrap.dedent(f"""
        Dynamically generated __call__ for takes_value={takes_value!r}.

        Behavior
        - If no handler is bound, returns None (no-op).
        - Otherwise forwards {"the raw value" if takes_value else "nothing"} to the handler.
    """)

    return namespace["__call__"]


class SpecType(type):
    """
    Metaclass that turns option specs into callable, introspectable descriptors.

    Responsibilities
    - Inject a tailored __call__ when constructing factory-backed spec classes.
    - Provide stable __repr__/__rich_repr__ implementations for diagnostics.
    - Expose the fields listed in __introspectable__ as read-only properties.
    - Seal factory-backed spec classes against subclassing.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        if options.get("factory", False):
            namespace["__call__"] = _invoker(options.get("takes_value", False))

        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - option-spec(names=('--verbose', '-v'), takes_value=False, ...)
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        if options.get("factory", False):
            @rename("__init_subclass__")
            def __init_subclass__(cls, **options):  # NOQA: F-841
                raise TypeError(f"type {self.__name__!r} is not an acceptable base type")
            self.__init_subclass__ = classmethod(__init_subclass__)

        return self


def _sanitize_names(cls, metadata, /):
    r"""
    Internal: validate the declared names and split them into long/short forms.

    Rules
    - at least one name is required.
    - long form: r"--[^\W\d_](-?[^\W_]+)*" (unicode letters allowed, no underscores).
    - short form: "-" followed by exactly one character that is neither "-" nor whitespace.
    - at most one long and one short form per spec.

    Side effects
    - replaces metadata["names"] with a tuple (long first) and sets
      metadata["long"] / metadata["short"] to the bare name or None.
    """
    long = short = None
    if not metadata["names"]:
        raise TypeError(f"{cls.__typename__} must specify at least one name")

    for name in metadata["names"]:
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        elif not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} names cannot be empty-strings")
        elif re.fullmatch(r"--[^\W\d_](-?[^\W_]+)*", name):
            if long is not None:
                raise ValueError(f"{cls.__typename__} cannot declare more than one long name")
            long = name[2:]
        elif re.fullmatch(r"-[^-\s]", name):
            if short is not None:
                raise ValueError(f"{cls.__typename__} cannot declare more than one short name")
            short = name[1:]
        else:
            raise ValueError(f"{cls.__typename__} names must be '--long' or '-c' forms, got {name!r}")

    metadata["long"] = long
    metadata["short"] = short
    metadata["names"] = tuple(
        prefix + name for prefix, name in (("--", long), ("-", short)) if name is not None
    )


def _sanitize_value_metadata(cls, metadata, /):
    """
    Internal: validate the value-related switches and their combinations.

    Rules
    - shape must be Unset or a Shape, and only with takes_value (defaults to Freeform).
    - repeatable is only meaningful for value-less options.
    - dashed is only meaningful for value-taking options.
    - metavar must be Unset or a non-empty string, and only with takes_value.
    """
    takes_value = metadata["takes_value"]

    if not isinstance(shape := metadata["shape"], Shape | Unset):
        raise TypeError(f"{cls.__typename__} 'shape' must be a value shape")
    if shape and not takes_value:
        raise TypeError(f"value-less {cls.__typename__} cannot declare a 'shape'")
    metadata["shape"] = coalesce(shape, Freeform) if takes_value else None

    if metadata["repeatable"] and takes_value:
        raise TypeError(f"value-taking {cls.__typename__} cannot be 'repeatable'")
    if metadata["dashed"] and not takes_value:
        raise TypeError(f"value-less {cls.__typename__} cannot be 'dashed'")

    if not isinstance(metavar := metadata["metavar"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'metavar' must be a string")
    elif isinstance(metavar, str) and not (metavar := metavar.strip()):
        raise ValueError(f"{cls.__typename__} 'metavar' cannot be empty")
    if metavar and not takes_value:
        raise TypeError(f"value-less {cls.__typename__} cannot declare a 'metavar'")
    metadata["metavar"] = coalesce(metavar, metadata["shape"].metavar) if takes_value else None

    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)


class OptionSpec(metaclass=SpecType):
    """
    Named option specification (one entry of an OptionTable).

    Highlights
    - Aliases: one long ("--output") and/or one short ("-o") form.
    - Value-taking options validate their value against a shape; value-less
      options record presence (True) or, when repeatable, a count.
    - key: the result key, the long name when declared, otherwise the short char.
    - A handler may be bound via @option(...); calling the spec forwards to it.

    Properties
    - The names listed in __introspectable__ are exposed as read-only attributes.
    """

    __introspectable__ = (
        "names",
        "long",
        "short",
        "takes_value",
        "shape",
        "repeatable",
        "dashed",
        "metavar",
        "descr",
    )

    __displayable__ = (
        "names",
        "takes_value",
        "shape",
        "repeatable",
    )

    def __new__(
            cls,
            *names,
            takes_value=False,
            shape=Unset,
            repeatable=False,
            dashed=False,
            metavar=Unset,
            descr=Unset,
    ):
        """
        Construct an OptionSpec with the provided metadata.

        Parameters
        - names: "--long" and/or "-c"
        - takes_value: bool, the option consumes the next token as its value.
        - shape: Shape, expected form of the value (Freeform when omitted).
        - repeatable: bool, count repeated occurrences of a value-less option.
        - dashed: bool, accept an option-looking token as the value.
        - metavar: Unset | str, placeholder used in hints.
        - descr: Unset | str, short description.

        Raises
        - TypeError for wrong types or meaningless combinations.
        - ValueError for malformed, duplicated or empty names/strings.
        """
        metadata = {
            "names": names,
            "takes_value": bool(takes_value),
            "shape": shape,
            "repeatable": bool(repeatable),
            "dashed": bool(dashed),
            "metavar": metavar,
            "descr": descr,
        }
        _sanitize_names(cls, metadata)
        _sanitize_value_metadata(cls, metadata)

        # Sealed, factory-backed instance with a generated __call__.
        self = super().__new__(builtins.type(cls)(cls.__name__, (cls,), dict(cls.__dict__), factory=True, **metadata))
        self._handler = Unset  # Bound by @option(...) later.

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

        return self

    @property
    def key(self):
        """
        Result key under which parsed values are stored (long name first).
        """
        return self._long if self._long is not None else self._short

    @property
    def display(self):
        """
        Human-facing spelling used in messages (e.g., "--output/-o").
        """
        return "/".join(self._names)

    @property
    def handler(self):
        return coalesce(self._handler)

    def __option__(self):
        """
        Introspection hook: identify this object as an OptionSpec.
        """
        return self


def option(*args, **kwargs):
    """
    Decorator/factory for defining an option with a handler.

    Usage
    - value-taking:
        @option("-o", "--output", takes_value=True)
        def on_output(value): ...
    - value-less:
        @option("-v", "--verbose", repeatable=True)
        def on_verbose(): ...

    Behavior
    - Validates that it decorates a callable and enforces single application.
    - Binds the provided function as the spec's handler and returns the spec.
    """
    spec = OptionSpec(*args, **kwargs)

    @rename("option")
    def wrapper(handler, /):
        if not callable(handler):
            raise TypeError("@option() must be applied to a callable")
        if spec._handler is not Unset:  # NOQA: E-501
            raise TypeError("@option() must be applied only once")
        spec._handler = handler
        return spec

    wrapper.__option__ = MethodType(rename(lambda self: spec, "__option__"), wrapper)
    return wrapper


__all__ = (
    # Classes (specifications)
    "OptionSpec",

    # Decorators
    "option",
)

del SpecType
