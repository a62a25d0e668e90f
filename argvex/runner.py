"""
Argvex runner layer: parse, check, dispatch, and exit.

What this module provides
- Program: binds an option table to a final callback and runs one argument
  vector through it:
  • parse the tokens (argvex.parser.parse);
  • surface the parse fault, if any;
  • check the positional count against the declared arity;
  • route every recognized option occurrence to its handler, in argv order;
  • call the callback with the ParseResult.
- program(table, ...): decorator that turns a callback into a Program.
- invoke(obj, prompt): convenience runner for programs.

Fault surfacing
- shell=False (default, library/test use): faults are raised as exceptions.
- shell=True: faults are printed with rich on stderr and the process exits
  with the fault's status (2 usage, 22 invalid value, 1 handler failure).

Quick start
    from argvex import OptionSpec, OneOf, option, program, invoke

    @option("-v", "--verbose", repeatable=True)
    def on_verbose():
        ...

    @program([on_verbose, OptionSpec("--mode", takes_value=True, shape=OneOf("fast", "safe"))],
             positionals=1, shell=True)
    def tool(result):
        print(result.get("mode"), result.positionals[0])

    if __name__ == "__main__":
        invoke(tool)
"""
import os.path
import shlex
import sys
from collections.abc import Iterable
from warnings import catch_warnings, simplefilter

from .faults import *
from .parser import parse
from .table import OptionTable
from .utils import *


def _sanitize_positionals(positionals, /):
    """
    Internal: normalize the declared positional arity.

    - Unset: any count.
    - int n >= 0: exactly n.
    - range with step 1 and start >= 0: any count inside the range.
    """
    if positionals is Unset:
        return positionals
    if isinstance(positionals, bool) or not isinstance(positionals, int | range):
        raise TypeError("program 'positionals' must be an integer or a range")
    if isinstance(positionals, int):
        if positionals < 0:
            raise ValueError("program 'positionals' cannot be negative")
        return range(positionals, positionals + 1)
    if positionals.step != 1 or positionals.start < 0 or not positionals:
        raise ValueError("program 'positionals' range must be non-empty, non-negative and contiguous")
    return positionals


class Program:
    """
    runnable pairing of an option table, option handlers and a final callback.

    properties
    - name: program name used in rendered faults.
    - table: the OptionTable (built from an iterable of specs when needed).
    - positionals: None (any count) or the range of accepted counts.
    - shell / fancy / colorful: fault surfacing and rendering switches.
    """
    __slots__ = ("_name", "_table", "_callback", "_positionals", "_shell", "_fancy", "_colorful")

    name = mirror("name")
    table = mirror("table")
    shell = mirror("shell")
    fancy = mirror("fancy")
    colorful = mirror("colorful")

    @property
    def positionals(self):
        return self._positionals

    def __init__(
            self,
            table,
            /,
            callback=Unset,
            *,
            name=Unset,
            positionals=Unset,
            shell=False,
            fancy=False,
            colorful=False,
    ):
        if not isinstance(table, OptionTable):
            table = OptionTable.build(table)
        if callback is not Unset and not callable(callback):
            raise TypeError("program 'callback' must be callable")
        if not isinstance(name, str | Unset):
            raise TypeError("program 'name' must be a string")
        elif isinstance(name, str) and not (name := name.strip()):
            raise ValueError("program 'name' cannot be empty")

        self._table = table
        self._callback = callback
        self._name = coalesce(name, getattr(callback, "__name__", None) or os.path.basename(sys.argv[0]))
        self._positionals = coalesce(_sanitize_positionals(positionals))
        self._shell = bool(shell)
        self._fancy = bool(fancy)
        self._colorful = bool(colorful)

    def trigger(self, fault, /, **options):
        """
        surface a fault with this program's rendering context merged in.
        """
        trigger(fault, **options, prog=self._name, shell=self._shell, fancy=self._fancy, colorful=self._colorful)

    def _check_positionals(self, result):
        if self._positionals is None:
            return
        count = len(result.positionals)
        accepted = self._positionals
        expected = str(accepted.start) if len(accepted) == 1 else "%d to %d" % (accepted.start, accepted[-1])
        if count > accepted[-1]:
            self.trigger(UnexpectedPositionalError(
                "unexpected %s positional %r" % (
                    ordinal(accepted[-1] + 1), result.positionals[accepted[-1]]
                ),
                token=result.positionals[accepted[-1]],
                leftover=result.positionals[accepted[-1]:],
                hint="remove the extra values; %s expects %s positional%s" % (
                    self._name, expected, "" if expected == "1" else "s"
                ),
            ))
        elif count < accepted.start:
            self.trigger(MissingPositionalsError(
                "%d positional%s given, %s expected" % (count, "" if count == 1 else "s", expected),
                hint="add the missing positional values after the options",
            ))

    def _handle(self, event):
        """
        run the handler of one option occurrence and surface delegated faults.

        - warnings emitted by the handler become DelegatedWarning.
        - any exception raised by the handler becomes DelegatedError (status 1).
        """
        spec, token, value, index = event
        where = "option %r at %s position" % (token, ordinal(index)) if index else "option %r" % token
        try:
            with catch_warnings(record=True) as caught:
                simplefilter("always")
                if spec.takes_value:
                    spec(value)
                else:
                    spec()
        except Exception as exception:
            self.trigger(DelegatedError(
                "something occurred in %s" % where,
                token=token,
                index=index,
                exception=exception,
                hint="%s: %s" % (type(exception).__name__, exception),
            ))
            return

        for warning in map(lambda x: x.message, caught):
            self.trigger(DelegatedWarning(
                "something occurred in %s" % where,
                token=token,
                index=index,
                warning=warning,
                hint=str(warning),
            ))

    def __invoke__(self, prompt=Unset):
        """
        Execute this program with a token stream.

        Parameters
        - prompt:
          • Unset: read tokens from sys.argv[1:].
          • str: shell-like string; will be split via shlex.split.
          • Iterable[str]: pre-tokenized sequence, used as-is.

        Returns
        - ExitStatus.SUCCESS once the callback has run. Faults are raised, or
          printed with an exit in shell mode.
        """
        if prompt is Unset:
            tokens = sys.argv[1:]
        elif isinstance(prompt, str):
            tokens = shlex.split(prompt)
        elif isinstance(prompt, Iterable):
            tokens = list(prompt)
            if not all(isinstance(token, str) for token in tokens):
                raise TypeError("__invoke__() argument must be a string or an iterable of strings")
        else:
            raise TypeError("__invoke__() argument must be a string or an iterable of strings")

        result = parse(tokens, self._table)
        if result.error is not None:
            self.trigger(result.error)

        self._check_positionals(result)

        for event in result.events:
            self._handle(event)

        if self._callback is not Unset:
            self._callback(result)
        return ExitStatus.SUCCESS

    def __repr__(self):
        return "program(name=%r, table=%r, positionals=%r)" % (self._name, self._table, self._positionals)

    def __rich_repr__(self):
        yield "name", self._name
        yield "table", self._table
        yield "positionals", self._positionals


def program(table, /, **kwargs):
    """
    Decorator that builds a Program around the decorated callback.

    Usage
        @program([OptionSpec("-v", repeatable=True)], positionals=range(0, 2))
        def tool(result): ...

    Parameters
    - table: OptionTable or iterable of specs.
    - **kwargs: forwarded to Program (name, positionals, shell, fancy, colorful).
    """
    @rename("program")
    def wrapper(callback, /):
        if not callable(callback):
            raise TypeError("@program() must be applied to a callable")
        return Program(table, callback, **kwargs)

    return wrapper


def invoke(object, prompt=Unset, /):
    """
    Convenience runner for programs.

    - If 'object' implements __invoke__, call it with prompt and return its status.
    - Otherwise raise TypeError.

    In shell mode a fault ends the process with sys.exit(status); in library
    mode it propagates as an exception.
    """
    if hasattr(object, "__invoke__") and callable(object.__invoke__):
        return object.__invoke__(prompt)

    target = "argument" if prompt is Unset else "first argument"
    raise TypeError(f"invoke() {target} must implement __invoke__ method") from None


__all__ = (
    "Program",
    "program",
    "invoke",
)
