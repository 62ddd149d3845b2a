"""
Defines configuration and settings for the rewriting engine and for file processing.
"""
import logging
import re
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path


log = logging.getLogger("smartypub")

WHITESPACE_RE = re.compile(r'\s')


class BacktickStyle(Enum):
    """Which ``backtick'' conventions are educated."""
    OFF = auto()
    DOUBLE = auto()             # ``double'' only
    DOUBLE_AND_SINGLE = auto()  # ``double'' and `single'


class DashStyle(Enum):
    """Which hyphen runs become which dashes."""
    OFF = auto()
    STANDARD = auto()               # -- em
    OLD_SCHOOL = auto()             # --- em, -- en
    OLD_SCHOOL_INVERTED = auto()    # --- en, -- em


@dataclass(frozen=True)
class SmartyConfig:
    """
    Immutable set of rule flags, resolved once per call from a mode value.
    `enabled` is False only for mode "0", which bypasses every rule.
    """
    quotes: bool = False
    backticks: BacktickStyle = BacktickStyle.OFF
    dashes: DashStyle = DashStyle.OFF
    ellipses: bool = False
    convert_quot: bool = False
    enabled: bool = True


_PRESETS = {
    "0": SmartyConfig(enabled=False),
    "1": SmartyConfig(quotes=True, backticks=BacktickStyle.DOUBLE, dashes=DashStyle.STANDARD, ellipses=True),
    "2": SmartyConfig(quotes=True, backticks=BacktickStyle.DOUBLE, dashes=DashStyle.OLD_SCHOOL, ellipses=True),
    "3": SmartyConfig(quotes=True, backticks=BacktickStyle.DOUBLE, dashes=DashStyle.OLD_SCHOOL_INVERTED, ellipses=True),
}

# Per-character flags: char -> (field, value)
_FLAGS = {
    'q': ('quotes', True),
    'b': ('backticks', BacktickStyle.DOUBLE),
    'B': ('backticks', BacktickStyle.DOUBLE_AND_SINGLE),
    'd': ('dashes', DashStyle.STANDARD),
    'D': ('dashes', DashStyle.OLD_SCHOOL),
    'i': ('dashes', DashStyle.OLD_SCHOOL_INVERTED),
    'e': ('ellipses', True),
    'w': ('convert_quot', True),
}


def normalize_mode(mode: str | int) -> str:
    """Returns the mode as a string with all whitespace removed."""
    # bool is an int subclass but "True" is no mode at all
    if isinstance(mode, bool) or not isinstance(mode, (str, int)):
        raise TypeError(f"Mode must be a string or an integer, got {type(mode).__name__}")
    if isinstance(mode, int):
        return str(mode)
    return WHITESPACE_RE.sub('', mode)


def resolve_mode(mode: str | int = "1") -> SmartyConfig:
    """
    Parses a mode value into a SmartyConfig.

    Mode values:
        0 : do nothing
        1 : set all
        2 : set all, using old school en- and em- dash shortcuts
        3 : set all, using inverted old school en- and em- dash shortcuts

    Any other value is read character by character, starting with every rule off:
        q : quotes
        b : backtick quotes (``double'' only)
        B : backtick quotes (``double'' and `single')
        d : dashes
        D : old school dashes
        i : inverted old school dashes
        e : ellipses
        w : convert &quot; entities to "

    Unknown characters are ignored.
    """
    attr = normalize_mode(mode)
    if attr in _PRESETS:
        return _PRESETS[attr]

    flags = {}
    for c in attr:
        if c in _FLAGS:
            field, value = _FLAGS[c]
            flags[field] = value
        else:
            log.debug(f"Ignoring unknown mode character: {c!r}")
    return SmartyConfig(**flags)


class Action(Enum):
    """What a processing run does to each input."""
    SMARTEN = auto()    # ASCII -> typographic
    NORMALIZE = auto()  # typographic chars and entities -> canonical code points
    STUPEFY = auto()    # typographic -> ASCII


@dataclass
class ProcessingConfig:
    """
    A container for all settings related to a processing task.
    This object is created by the CLI and passed to the ProcessingPipeline.
    """
    mode: str = "1"
    action: Action = Action.SMARTEN
    # Output folder, or output filename for a single input.
    # None places each output next to its input (see `suffix`).
    output_path: Path | None = None
    in_place: bool = False
    suffix: str = ".smart"
    num_threads: int = 0  # 0 means os.cpu_count()
