"""Namespace map and the generic tree API used to edit every part.

All document mutation goes through these functions. Tags and attribute
names are given in prefixed form (``"p:sldId"``, ``"r:id"``) and resolved
against ``NAMESPACES``; unprefixed names are used as-is. The helpers do not
validate against the schema: callers emit structurally complete fragments.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from lxml import etree

from pptx_export.errors import NodeNotFound

NAMESPACES = {
    "a": "http://schemas.openxmlformats.org/drawingml/2006/main",
    "p": "http://schemas.openxmlformats.org/presentationml/2006/main",
    "r": "http://schemas.openxmlformats.org/officeDocument/2006/relationships",
    "ct": "http://schemas.openxmlformats.org/package/2006/content-types",
    "pr": "http://schemas.openxmlformats.org/package/2006/relationships",
    "ep": "http://schemas.openxmlformats.org/officeDocument/2006/extended-properties",
    "vt": "http://schemas.openxmlformats.org/officeDocument/2006/docPropsVTypes",
    "cp": "http://schemas.openxmlformats.org/package/2006/metadata/core-properties",
    "dc": "http://purl.org/dc/elements/1.1/",
    "dcterms": "http://purl.org/dc/terms/",
    "dcmitype": "http://purl.org/dc/dcmitype/",
    "xsi": "http://www.w3.org/2001/XMLSchema-instance",
}

_PARSER = etree.XMLParser(remove_blank_text=True, resolve_entities=False)

Element = etree._Element
AttributePairs = Mapping[str, Any] | Iterable[tuple[str, Any]]


def qn(name: str) -> str:
    """Turn ``"prefix:local"`` into Clark notation ``"{uri}local"``."""
    if ":" not in name:
        return name
    prefix, local = name.split(":", 1)
    return f"{{{NAMESPACES[prefix]}}}{local}"


def parse_xml(data: bytes) -> Element:
    return etree.fromstring(data, _PARSER)


def serialize_xml(root: Element) -> bytes:
    return etree.tostring(root, xml_declaration=True, encoding="UTF-8", standalone=True)


def _attr_value(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


# ---------------------------------------------------------------------------
# Mutation
# ---------------------------------------------------------------------------

def set_attributes(node: Element, pairs: AttributePairs | None) -> Element:
    """Set every ``(name, value)`` pair on ``node``; numbers are stringified."""
    if not pairs:
        return node
    items = pairs.items() if isinstance(pairs, Mapping) else pairs
    for name, value in items:
        node.set(qn(name), _attr_value(value))
    return node


def create_child(parent: Element, tag: str, attrs: AttributePairs | None = None,
                 *, index: int | None = None) -> Element:
    """Create ``tag`` under ``parent``, appended or inserted at ``index``."""
    child = parent.makeelement(qn(tag), {})
    if index is None:
        parent.append(child)
    else:
        parent.insert(index, child)
    return set_attributes(child, attrs)


def append_text(node: Element, text: Any) -> Element:
    text = _attr_value(text)
    if len(node):
        node[-1].tail = (node[-1].tail or "") + text
    else:
        node.text = (node.text or "") + text
    return node


def set_text(root: Element, target: Element | str, value: Any) -> Element:
    """Replace the text of ``target`` (a node, or the first match of a tag)."""
    node = find_first(root, target) if isinstance(target, str) else target
    node.text = _attr_value(value)
    return node


def remove_node(root: Element, target: Element | str) -> Element:
    """Detach ``target`` from its parent and return the parent."""
    node = find_first(root, target) if isinstance(target, str) else target
    parent = node.getparent()
    if parent is None:
        raise NodeNotFound("Cannot remove the document root")
    parent.remove(node)
    return parent


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------

def find_all(root: Element, tag: str) -> list[Element]:
    """Every element named ``tag`` in document order, ``root`` included."""
    return list(root.iter(qn(tag)))


def find_first(root: Element, tag: str) -> Element:
    for node in root.iter(qn(tag)):
        return node
    raise NodeNotFound(f"No <{tag}> element found under <{etree.QName(root).localname}>")


def has_node(root: Element, tag: str) -> bool:
    return next(root.iter(qn(tag)), None) is not None


def get_text(root: Element, tag: str, default: str = "") -> str:
    """Text of the first ``tag`` element, or ``default`` when absent/empty."""
    node = next(root.iter(qn(tag)), None)
    if node is None or node.text is None:
        return default
    return node.text
