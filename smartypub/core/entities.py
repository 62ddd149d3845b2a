"""
Passes over already-typographic text.

normalize_entities() maps curly quotes, dashes and ellipses, whether written as
characters or as HTML entities, to their canonical code points.
stupefy() maps them back to plain ASCII.

Neither is markup-aware: they only touch typographic characters and their
entity spellings, which never form tag boundaries.
"""
import re

from ..utils.config import SmartyConfig, DashStyle, BacktickStyle, resolve_mode
from .rules import EM_DASH, EN_DASH, ELLIPSIS, LSQUO, RSQUO, LDQUO, RDQUO

# canonical char -> named entity
_NAMED = {
    EN_DASH: 'ndash',
    EM_DASH: 'mdash',
    LSQUO: 'lsquo',
    RSQUO: 'rsquo',
    LDQUO: 'ldquo',
    RDQUO: 'rdquo',
    ELLIPSIS: 'hellip',
}

DASH_CHARS = (EN_DASH, EM_DASH)
QUOTE_CHARS = (LSQUO, RSQUO, LDQUO, RDQUO)


def _spellings_re(char: str) -> re.Pattern:
    """Matches `char` itself and its named, decimal and hex entity forms."""
    code = ord(char)
    # IGNORECASE for hex digits (&#x201D; and &#x201d;)
    return re.compile(
        rf'{re.escape(char)}|&{_NAMED[char]};|&\#0*{code};|&\#x0*{code:x};',
        re.IGNORECASE,
    )


_SPELLINGS = {char: _spellings_re(char) for char in _NAMED}


def _quotes_on(config: SmartyConfig) -> bool:
    return config.quotes or config.backticks is not BacktickStyle.OFF


def _enabled_chars(config: SmartyConfig) -> list[str]:
    """Typographic characters whose rule family is switched on in `config`."""
    chars = []
    if config.dashes is not DashStyle.OFF:
        chars.extend(DASH_CHARS)
    if _quotes_on(config):
        chars.extend(QUOTE_CHARS)
    if config.ellipses:
        chars.append(ELLIPSIS)
    return chars


def normalize_entities(text: str, mode: str | int = "1") -> str:
    """
    Returns `text` with each typographic character of the enabled rule families,
    and each entity spelling of it, replaced by the canonical code point.

    Example input:  &ldquo;Hello &#8212; world.&#x201D;
    Example output: “Hello — world.”
    """
    config = resolve_mode(mode)
    if not config.enabled:
        return text

    for char in _enabled_chars(config):
        text = _SPELLINGS[char].sub(char, text)
    return text


# em, en per dash style
_ASCII_DASHES = {
    DashStyle.STANDARD: ('--', '-'),
    DashStyle.OLD_SCHOOL: ('---', '--'),
    DashStyle.OLD_SCHOOL_INVERTED: ('--', '---'),
}

_ASCII_QUOTES = {LSQUO: "'", RSQUO: "'", LDQUO: '"', RDQUO: '"'}


def stupefy(text: str, mode: str | int = "1") -> str:
    """
    Returns `text` with typographic characters (and their entities) turned
    back into the ASCII that the same mode would have educated.

    Example input:  “Hello — world.”
    Example output: "Hello -- world."
    """
    config = resolve_mode(mode)
    if not config.enabled:
        return text

    text = normalize_entities(text, mode)

    if config.dashes is not DashStyle.OFF:
        em, en = _ASCII_DASHES[config.dashes]
        text = text.replace(EM_DASH, em).replace(EN_DASH, en)

    if _quotes_on(config):
        for char, ascii_char in _ASCII_QUOTES.items():
            text = text.replace(char, ascii_char)

    if config.ellipses:
        text = text.replace(ELLIPSIS, '...')

    return text
