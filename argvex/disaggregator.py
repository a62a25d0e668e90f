"""
Bundle disaggregation: "-vvo" → ["-v", "-v", "-o"].

A bundle is a single token holding several short options after one introducer.
Expanding it is a plain walk over the characters of the token; nothing else is
involved (no helper process, no text filter, no regular expression split).

Contract
- is_bundle(token): starts with "-", not with "--", and is longer than two characters.
- disaggregate(token, table): ["-" + char for each char after the introducer], in
  order. Raises UnknownOptionError for the whole token if any character is not a
  known short option; nothing is partially expanded.

Value-taking characters are not this module's concern: the parser checks where
they sit in the bundle before asking for an expansion.
"""
from .faults import UnknownOptionError
from .utils import ordinal


def is_bundle(token, /):
    """
    tell whether a raw token has the shape of a short-option bundle.
    """
    if not isinstance(token, str):
        raise TypeError("is_bundle() argument must be a string")
    return len(token) > 2 and token[0] == "-" and token[1] != "-"


def disaggregate(token, table, /, *, index=None):
    """
    expand a bundle token into single-character option tokens.

    parameters
    - token: str, a token for which is_bundle() holds.
    - table: OptionTable used for the character-set guard.
    - index: optional 1-based ordinal of the bundle, for position-first messages.

    returns
    - list[str] with exactly len(token) - 1 tokens.

    raises
    - ValueError when the token is not bundle-shaped (caller error).
    - UnknownOptionError naming the whole bundle when a character is unknown.
    """
    if not is_bundle(token):
        raise ValueError("disaggregate() argument must be a short-option bundle, got %r" % token)

    expanded = []
    for char in token[1:]:
        if table.lookup_short(char) is None:
            where = " at %s position" % ordinal(index) if index else ""
            raise UnknownOptionError(
                "unknown option %r in bundle %r%s" % ("-" + char, token, where),
                token=token,
                index=index,
                char=char,
                hint="split the bundle or check the option spelling (for example: %s)" % " ".join(
                    "-" + char for char in token[1:]
                ),
            )
        expanded.append("-" + char)
    return expanded


__all__ = (
    "is_bundle",
    "disaggregate",
)
