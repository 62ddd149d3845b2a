"""
Drives the rewrite rules over tokenized markup.

Markup is passed through untouched. Text is rewritten unless it sits inside
one of the skip elements (pre, code, kbd, script, math).
"""
import re

from ..utils.config import SmartyConfig, resolve_mode
from . import rules
from .quotes import educate_quotes, educate_quote_char
from .tokenizer import tokenize

SKIP_TAGS = ('pre', 'code', 'kbd', 'script', 'math')

# A start or end tag of a skip element; group 1 is "/" for end tags
SKIP_TAG_RE = re.compile(rf'^<(/?)(?:{"|".join(SKIP_TAGS)})(?=[\s/>])', re.IGNORECASE)


class SmartyPants:
    """
    State for one left-to-right pass over a document.

    Feed it markup and text in document order. It tracks whether we're inside a
    skip element and remembers the last character of the previous text run,
    which is the only context a lone quote token has.

    The skip flag is a single boolean, not a stack: any skip start tag sets it,
    any skip end tag clears it, so nested skip elements end at the first
    closing tag.
    """

    def __init__(self, config: SmartyConfig):
        self.config = config
        self.in_skip = False
        self.prev_last_char = ''

    def markup(self, raw: str) -> str:
        """Registers a markup token and returns it unchanged."""
        match = SKIP_TAG_RE.match(raw)
        if match:
            if match.group(1) == '/':
                self.close_tag()
            else:
                self.open_tag()
        return raw

    def open_tag(self):
        self.in_skip = True

    def close_tag(self):
        self.in_skip = False

    def text(self, t: str) -> str:
        """Rewrites a text token, unless inside a skip element."""
        # Remember last char of this token before processing
        last_char = t[-1:]
        if not self.in_skip:
            t = self._educate(t)
        self.prev_last_char = last_char
        return t

    def _educate(self, t: str) -> str:
        config = self.config
        t = rules.process_escapes(t)

        if config.convert_quot:
            t = rules.convert_quot(t)

        t = rules.educate_dashes_for(t, config.dashes)

        if config.ellipses:
            t = rules.educate_ellipses(t)

        # Backticks need to be processed before quotes
        t = rules.educate_backticks_for(t, config.backticks)

        if config.quotes:
            if t in ("'", '"'):
                t = educate_quote_char(t, self.prev_last_char)
            else:
                t = educate_quotes(t)
        return t


def transform(text: str, mode: str | int = "1") -> str:
    """
    Returns `text` with ASCII punctuation educated into typographic punctuation.

    Args:
        text: HTML-ish markup or plain text.
        mode: which rules to apply, see `resolve_mode`. Mode "0" returns
            `text` unchanged.

    Example input:  <p>"Isn't this fun?"</p>
    Example output: <p>“Isn’t this fun?”</p>
    """
    config = resolve_mode(mode)
    if not config.enabled:
        return text

    state = SmartyPants(config)
    result = []
    for token in tokenize(text):
        if token.is_markup:
            result.append(state.markup(token.value))
        else:
            result.append(state.text(token.value))

    return ''.join(result)
