"""
Token stream: the remaining raw tokens of one parse invocation.

A TokenStream is created from the argument vector, consumed from the front,
and discarded once the parse finishes. Bundle expansion pushes synthesized
tokens back onto the front so they are classified like any other token.

Positions
- index is the 1-based ordinal, in the original argument vector, of the token
  that popfront() returns next. Synthesized tokens keep the position of the
  bundle they came from, so messages point at what the user actually typed.
"""
from collections import deque


class TokenStream:
    __slots__ = ("_tokens", "_origins", "_index")

    def __init__(self, tokens=(), /, *, index=1):
        tokens = list(tokens)
        for token in tokens:
            if not isinstance(token, str):
                raise TypeError("token stream items must be strings")
        self._tokens = deque(tokens)
        # original ordinal of each queued token
        self._origins = deque(range(index, index + len(tokens)))
        self._index = index

    @property
    def index(self):
        """
        ordinal of the head token in the original argument vector.
        """
        return self._origins[0] if self._origins else self._index

    def peek(self):
        """
        return the head token without consuming it (None when exhausted).
        """
        return self._tokens[0] if self._tokens else None

    def popfront(self):
        """
        consume and return the head token; IndexError when exhausted.
        """
        token = self._tokens.popleft()
        self._index = self._origins.popleft() + 1
        return token

    def pushfront(self, *tokens):
        """
        put tokens back at the front, preserving their order.

        the pushed tokens share the ordinal of the token consumed last.
        """
        for token in tokens:
            if not isinstance(token, str):
                raise TypeError("token stream items must be strings")
        origin = self._index - 1
        self._tokens.extendleft(reversed(tokens))
        self._origins.extendleft([origin] * len(tokens))

    def drain(self):
        """
        consume and return every remaining token in order.
        """
        tokens = list(self._tokens)
        if self._origins:
            self._index = self._origins[-1] + 1
        self._tokens.clear()
        self._origins.clear()
        return tokens

    def __len__(self):
        return len(self._tokens)

    def __bool__(self):
        return bool(self._tokens)

    def __iter__(self):
        return iter(tuple(self._tokens))

    def __repr__(self):
        return "token-stream(%s)" % ", ".join(map(repr, self._tokens))


__all__ = (
    "TokenStream",
)
