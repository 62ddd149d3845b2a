"""
Splits HTML-ish text into markup and text tokens.

This is not an HTML parser: it only recognizes where tags, comments and
processing instructions begin and end. Joining the values of all tokens
always gives back the original string.
"""
import re
from enum import Enum
from typing import NamedTuple


class TokenKind(Enum):
    MARKUP = "markup"
    TEXT = "text"


class Token(NamedTuple):
    """A run of markup (never rewritten) or of text (eligible for rewriting)."""
    kind: TokenKind
    value: str

    @property
    def is_markup(self) -> bool:
        return self.kind is TokenKind.MARKUP


# Comments first (they may contain '>'), then processing instructions, then any tag.
MARKUP_RE = re.compile(r'<!--.*?-->|<\?.*?\?>|<[^>]*>', re.DOTALL)


def tokenize(text: str) -> tuple[Token, ...]:
    """
    Returns the tokens comprising `text`, in order.

    Each markup match becomes a MARKUP token, each non-empty stretch between
    matches becomes a TEXT token. An empty string gives an empty tuple.
    """
    tokens = []
    pos = 0

    for match in MARKUP_RE.finditer(text):
        if pos < match.start():
            tokens.append(Token(TokenKind.TEXT, text[pos:match.start()]))
        tokens.append(Token(TokenKind.MARKUP, match.group(0)))
        pos = match.end()

    if pos < len(text):
        tokens.append(Token(TokenKind.TEXT, text[pos:]))

    return tuple(tokens)
