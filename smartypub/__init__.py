"""
smartypub: educates ASCII punctuation in HTML into typographic punctuation.
"""
from .core.entities import normalize_entities, stupefy
from .core.smartypants import transform, SmartyPants
from .core.tokenizer import tokenize, Token, TokenKind
from .post_processing.tree import smarten_tree
from .utils.config import resolve_mode, SmartyConfig, BacktickStyle, DashStyle

__all__ = [
    "transform", "normalize_entities", "stupefy", "smarten_tree",
    "tokenize", "Token", "TokenKind", "SmartyPants",
    "resolve_mode", "SmartyConfig", "BacktickStyle", "DashStyle",
]
