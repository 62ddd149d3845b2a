"""
Educates punctuation inside an lxml element tree.

Text nodes (.text and .tail) are visited in document order and fed to the
same SmartyPants state that transform() uses, so skip elements and lone
quote tokens behave the same way as on serialized markup.
"""
import logging

from lxml import etree

from ..core.smartypants import SmartyPants, SKIP_TAGS
from ..utils.config import resolve_mode
from ..utils import xml_utils as xu


log = logging.getLogger("smartypub")


def smarten_tree(element: etree._Element, mode: str | int = "1") -> etree._Element:
    """
    Rewrites the text content of `element` and its descendants in place.

    The tail of `element` itself is left alone: it is outside the element.
    Comments and processing instructions keep their content, their tails are
    regular text.

    Returns:
        etree._Element: the same element, for chaining.
    """
    config = resolve_mode(mode)
    if not config.enabled:
        return element

    state = SmartyPants(config)
    _educate_node(element, state)
    return element


def _educate_node(node: etree._Element, state: SmartyPants):
    """Text order: node.text, then children (recursively), then each child's tail."""
    skip = xu.is_element(node) and xu.get_tag_name(node) in SKIP_TAGS
    if skip:
        state.open_tag()

    if xu.is_element(node) and node.text:
        node.text = state.text(node.text)

    for child in node:
        _educate_node(child, state)
        if child.tail:
            child.tail = state.text(child.tail)

    if skip:
        state.close_tag()
        log.debug(f"Left <{xu.get_tag_name(node)}> content untouched.")
