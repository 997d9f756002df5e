"""Convert XML documents into a compact nested dict form.

Every element becomes a dict. Child elements are keyed by their local
name (the namespace is dropped) and collapse into a list when a name
repeats. Attributes live under ``_attributes`` and direct text under
``_text``::

    >>> xml_to_dict('<spine toc="ncx"><itemref idref="a"/></spine>')
    {'spine': {'_attributes': {'toc': 'ncx'}, 'itemref': {'_attributes': {'idref': 'a'}}}}
"""

from typing import Any

from lxml import etree

ATTRIBUTES = "_attributes"
TEXT = "_text"


def xml_to_dict(data: str | bytes, recover: bool = True) -> dict[str, Any]:
    """Parse ``data`` and return ``{root_name: root_node}``.

    Bytes are decoded by lxml according to their byte order mark or XML
    declaration. Text is parsed as is, whatever its declaration says.
    """
    encoding = None
    if isinstance(data, str):
        data = data.encode("utf-8")
        encoding = "utf-8"
    parser = etree.XMLParser(
        encoding=encoding,
        recover=recover,
        resolve_entities=False,
        remove_comments=True,
        remove_pis=True,
    )
    root = etree.fromstring(data, parser)
    if root is None:
        raise ValueError("XML document is empty")
    return {etree.QName(root).localname: _element_to_dict(root)}


def _element_to_dict(element) -> dict[str, Any]:
    node: dict[str, Any] = {}

    attributes = {
        etree.QName(name).localname: value for name, value in element.attrib.items()
    }
    if attributes:
        node[ATTRIBUTES] = attributes

    text = "".join(
        [element.text or ""] + [child.tail or "" for child in element]
    ).strip()
    if text:
        node[TEXT] = text

    for child in element:
        if not isinstance(child.tag, str):
            continue
        key = etree.QName(child).localname
        value = _element_to_dict(child)
        if key not in node:
            node[key] = value
        elif isinstance(node[key], list):
            node[key].append(value)
        else:
            node[key] = [node[key], value]

    return node


def to_list(value: Any) -> list:
    """Normalize a "one or many" value to a list."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def attributes_of(node: Any) -> dict[str, str]:
    """Attributes of a compact node, empty when it has none."""
    if isinstance(node, dict):
        return node.get(ATTRIBUTES, {})
    return {}


def text_of(node: Any) -> str | None:
    """Text of a compact node, the first one when a list is given."""
    if isinstance(node, list):
        node = node[0] if node else None
    if isinstance(node, str):
        return node
    if isinstance(node, dict):
        return node.get(TEXT)
    return None
