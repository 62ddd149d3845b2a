"""
Simple rewrite rules applied to text runs: backslash escapes, &quot; entities,
dashes, ellipses and ``backtick'' quotes.

Every rule takes a string and returns a new one. The quote rule lives in
quotes.py.
"""
import re

from ..utils.config import BacktickStyle, DashStyle

EM_DASH = '—'
EN_DASH = '–'
ELLIPSIS = '…'
LSQUO = '‘'
RSQUO = '’'
LDQUO = '“'
RDQUO = '”'

# One left-to-right scan: "\\" is consumed as a pair, so the backslash it
# yields can't start another escape.
ESCAPE_RE = re.compile(r'\\([\\"\'.\-`])')

SPACED_ELLIPSIS_RE = re.compile(r'\. \. \.')


def process_escapes(text: str) -> str:
    r"""
    Resolves backslash escapes, for when a "dumb" character is wanted:

        Escape  Value
        ------  -----
        \\      \
        \"      "
        \'      '
        \.      .
        \-      -
        \`      `
    """
    return ESCAPE_RE.sub(r'\1', text)


def convert_quot(text: str) -> str:
    """Turns &quot; entities into plain " so the quote rule can educate them."""
    return text.replace('&quot;', '"')


def educate_dashes(text: str) -> str:
    """Each "--" becomes an em dash."""
    return text.replace('--', EM_DASH)


def educate_dashes_oldschool(text: str) -> str:
    """Each "---" becomes an em dash, each remaining "--" an en dash."""
    text = text.replace('---', EM_DASH)
    return text.replace('--', EN_DASH)


def educate_dashes_oldschool_inverted(text: str) -> str:
    """
    Each "---" becomes an en dash, each remaining "--" an em dash.
    Em dashes are the more common of the two, so they get the shorter shortcut.
    """
    text = text.replace('---', EN_DASH)
    return text.replace('--', EM_DASH)


_DASH_RULES = {
    DashStyle.STANDARD: educate_dashes,
    DashStyle.OLD_SCHOOL: educate_dashes_oldschool,
    DashStyle.OLD_SCHOOL_INVERTED: educate_dashes_oldschool_inverted,
}


def educate_dashes_for(text: str, style: DashStyle) -> str:
    """Applies the dash rule selected by `style` (OFF leaves text as is)."""
    rule = _DASH_RULES.get(style)
    return rule(text) if rule else text


def educate_ellipses(text: str) -> str:
    """
    "..." and ". . ." become an ellipsis.

    Example input:  Huh...?
    Example output: Huh…?
    """
    text = text.replace('...', ELLIPSIS)
    return SPACED_ELLIPSIS_RE.sub(ELLIPSIS, text)


def educate_backticks(text: str) -> str:
    """
    ``Double'' backtick quotes become curly double quotes.

    Example input:  ``Isn't this fun?''
    Example output: “Isn't this fun?”
    """
    text = text.replace('``', LDQUO)
    return text.replace("''", RDQUO)


def educate_single_backticks(text: str) -> str:
    """
    `Single' backtick quotes become curly single quotes. Every remaining
    apostrophe is treated as closing.

    Example input:  `Isn't this fun?'
    Example output: ‘Isn’t this fun?’
    """
    text = text.replace('`', LSQUO)
    return text.replace("'", RSQUO)


def educate_backticks_for(text: str, style: BacktickStyle) -> str:
    if style is BacktickStyle.OFF:
        return text
    text = educate_backticks(text)
    if style is BacktickStyle.DOUBLE_AND_SINGLE:
        text = educate_single_backticks(text)
    return text
