"""
Value validation for option specs.

validate_value(spec, candidate) is a pure classifier: it returns None when the
candidate is acceptable as the option's value and a ParseError describing the
problem otherwise. It never consumes anything and never raises parse faults.

Rules, in order
- value-less spec: the candidate is irrelevant (it will not be consumed).
- candidate missing, or option-shaped while the spec is not dashed → MissingValueError.
  An accidental adjacent option is never swallowed as a value.
- UnsignedInteger: an empty candidate is a MissingValueError; anything that is not
  "0" or a digit run without a leading zero is an InvalidValueShapeError.
- OneOf: exact, case-sensitive membership, else InvalidValueShapeError.
- Freeform: anything, including "".

Option-shaped means any token that starts with the introducer "-": the
terminator, "-v", "--verbose", but also "-1", "-?" and a lone "-", since short
options may be digits or symbols. Options that must take such values (negative
numbers, stdin as "-") declare dashed=True.
"""
from .faults import MissingValueError, InvalidValueShapeError
from .shapes import UnsignedInteger
from .utils import Unset, coalesce, ordinal


def is_option_shaped(token, /):
    """
    tell whether a raw token would be read as an option (or the terminator).
    """
    if not isinstance(token, str):
        raise TypeError("is_option_shaped() argument must be a string")
    return token.startswith("-")


def validate_value(spec, candidate=None, /, token=Unset, *, index=None):
    """
    classify `candidate` as a value for `spec`.

    parameters
    - spec: OptionSpec being satisfied.
    - candidate: str | None, the token that would be consumed (None at end of input).
    - token: the raw option token as written by the user (defaults to the
      spec's first name); used in messages and carried by the fault.
    - index: optional 1-based ordinal of the option token, for position-first messages.

    returns
    - None when the candidate is accepted (or irrelevant for value-less specs).
    - MissingValueError / InvalidValueShapeError otherwise.
    """
    if candidate is not None and not isinstance(candidate, str):
        raise TypeError("validate_value() candidate must be a string or None")
    if not spec.takes_value:
        return None

    token = coalesce(token, spec.names[0])
    where = " at %s position" % ordinal(index) if index else ""

    if candidate is None or (not spec.dashed and is_option_shaped(candidate)) or (
            not candidate and spec.shape is UnsignedInteger):
        return MissingValueError(
            "option %r%s requires a value" % (token, where),
            token=token,
            index=index,
            hint="pass a value after the option (for example: %s <%s>)" % (token, spec.metavar),
        )

    if not spec.shape.accepts(candidate):
        return InvalidValueShapeError(
            "option %r%s got %r, expected %s" % (token, where, candidate, spec.shape.describe()),
            token=token,
            index=index,
            value=candidate,
            shape=spec.shape,
            hint="pass %s (for example: %s <%s>)" % (spec.shape.describe(), token, spec.metavar),
        )

    return None


__all__ = (
    "is_option_shaped",
    "validate_value",
)
