from lxml import etree


def is_element(node) -> bool:
    """False for comments, processing instructions and entities, whose .tag isn't a string."""
    return isinstance(node.tag, str)


def get_tag_name(element: etree._Element) -> str:
    """Returns lowercase tag name without a namespace prefix."""
    return etree.QName(element.tag).localname.lower()
