"""
Educates straight quotes into curly ones.

Quotes are resolved by an ordered series of regex passes. Narrow special cases
run first and the broad catch-all passes last, so each pass only sees the
quotes that earlier passes left straight. Patterns use lookaheads and capture
groups only (no look-behind).
"""
import re
from typing import NamedTuple

from .rules import LSQUO, RSQUO, LDQUO, RDQUO, EM_DASH, EN_DASH

# Our own "punctuation" class, POSIX [:punct:] has no `re` equivalent
PUNCT_CLASS = r"""[!"#$%'()*+,\-./:;<=>?@\[\\\]^_`{|}~]"""

# Anything that puts the quote after a word, i.e. the quote is closing
CLOSE_CLASS = r"""[^\ \t\r\n\[\{\(\-]"""

# Contexts after which a quote followed by a word opens
OPEN_CONTEXT = rf"""
    (
        \s          |   # a whitespace char, or
        &nbsp;      |   # a non-breaking space entity, or
        --          |   # dashes, or
        &[mn]dash;  |   # named dash entities, or
        {EN_DASH}   |   # literal dashes, or
        {EM_DASH}   |
        &\#x201[34];    # hex dash entities
    )
"""


class QuotePass(NamedTuple):
    """One global substitution in the quote pipeline."""
    name: str
    pattern: re.Pattern
    replacement: str

    def apply(self, text: str) -> str:
        return self.pattern.sub(self.replacement, text)


def _pass(name, pattern, replacement, flags=0) -> QuotePass:
    return QuotePass(name, re.compile(pattern, flags), replacement)


QUOTE_PASSES: tuple[QuotePass, ...] = (
    # A leading quote followed by punctuation at a non-word-break is closing,
    # e.g. the quote ending a sentence right after an <em> tag.
    _pass("leading single", rf"^'(?={PUNCT_CLASS}\B)", RSQUO),
    _pass("leading double", rf'^"(?={PUNCT_CLASS}\B)', RDQUO),

    # Nested quotes: He said, "'Quoted' words in a larger quote."
    _pass("double-single", r""""'(?=\w)""", LDQUO + LSQUO),
    _pass("single-double", r"""'"(?=\w)""", LSQUO + LDQUO),

    # Decade abbreviations: the '80s
    _pass("decade", r"'(?=\d\d)", RSQUO),

    # Single quotes
    _pass("opening single", OPEN_CONTEXT + r"' (?=\w)", r'\1' + LSQUO, re.VERBOSE),
    _pass("closing single", rf"({CLOSE_CLASS})'", r'\1' + RSQUO),
    # Otherwise closing only before whitespace or a word-final "s", to handle
    # things like "<i>Custer</i>'s Last Stand."
    _pass("closing single lookahead", r"'(?=\s|s\b)", RSQUO),
    _pass("remaining single", r"'", LSQUO),

    # Double quotes
    _pass("opening double", OPEN_CONTEXT + r'" (?=\w)', r'\1' + LDQUO, re.VERBOSE),
    _pass("closing double", rf'({CLOSE_CLASS})"', r'\1' + RDQUO),
    _pass("closing double lookahead", r'"(?=\s)', RDQUO),
    _pass("remaining double", r'"', LDQUO),
)


def educate_quotes(text: str) -> str:
    """
    Returns the string with straight quotes replaced by curly ones.

    Example input:  "Isn't this fun?"
    Example output: “Isn’t this fun?”
    """
    for quote_pass in QUOTE_PASSES:
        text = quote_pass.apply(text)
    return text


def educate_quote_char(char: str, prev_last_char: str) -> str:
    """
    Curls a text run that is a lone ' or ".

    A lone quote has no context of its own (e.g. `<b>Hello</b>"`), so the last
    character of the previous text run decides: after a non-space it closes,
    otherwise it opens.
    """
    closing = bool(prev_last_char) and not prev_last_char.isspace()
    if char == "'":
        return RSQUO if closing else LSQUO
    if char == '"':
        return RDQUO if closing else LDQUO
    return char
