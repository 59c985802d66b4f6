"""Template markup parsing with the tree-sitter HTML grammar."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

import tree_sitter_html
from tree_sitter import Language, Node, Parser

AttributeValue = Union[str, bool]

ELEMENT_TYPES = frozenset({"element", "script_element", "style_element"})
_TAG_PARTS = frozenset({"start_tag", "end_tag", "self_closing_tag", "erroneous_end_tag"})

# an interpolation never spans a closing tag
_INTERPOLATION = re.compile(rb"\{\{((?:(?!</|\}\}).)*)\}\}", re.DOTALL)
_NOT_NEWLINE = re.compile(rb"[^\n]")
_BARE_AMPERSAND = re.compile(rb"&(?![#a-zA-Z0-9]+;)")

_parser: Optional[Parser] = None


@dataclass
class TemplateNode:
    """One node of a parsed template: an element when ``tag`` is set."""

    kind: str
    tag: Optional[str] = None
    children: List["TemplateNode"] = field(default_factory=list)


def get_html_parser() -> Parser:
    global _parser
    if _parser is None:
        _parser = Parser(Language(tree_sitter_html.language()))
    return _parser


def mask_template_text(data: bytes) -> bytes:
    """Blank out ``{{ ... }}`` bodies and stray ``&`` so the HTML grammar sees plain text.

    The result has the same length as ``data``, so byte offsets taken from a
    tree parsed over the masked text still slice the original.
    """
    masked = _INTERPOLATION.sub(
        lambda match: b"{{" + _NOT_NEWLINE.sub(b" ", match.group(1)) + b"}}", data
    )
    return _BARE_AMPERSAND.sub(b" ", masked)


def parse_template_markup(text: str) -> TemplateNode:
    """Parse template text into a tree of :class:`TemplateNode` objects.

    Vue templates are not strict HTML, so regions the grammar cannot place
    are recovered rather than rejected: elements found inside them are kept.
    """
    data = text.encode("utf-8")
    tree = get_html_parser().parse(mask_template_text(data))
    return _convert(tree.root_node, data)


def _convert(node: Node, data: bytes) -> TemplateNode:
    if node.type == "ERROR":
        return TemplateNode(kind=node.type, children=_recovered_children(node, data))
    tag = element_tag_name(node, data) if node.type in ELEMENT_TYPES else None
    children = [
        _convert(child, data) for child in node.named_children if child.type not in _TAG_PARTS
    ]
    return TemplateNode(kind=node.type, tag=tag, children=children)


def _recovered_children(node: Node, data: bytes) -> List[TemplateNode]:
    # an opening tag left outside any element still names one
    children: List[TemplateNode] = []
    for child in node.named_children:
        if child.type in ("start_tag", "self_closing_tag"):
            tag = _tag_name(child, data)
            if tag is not None:
                children.append(TemplateNode(kind="element", tag=tag))
        elif child.type not in _TAG_PARTS:
            children.append(_convert(child, data))
    return children


def opening_tag(element: Node) -> Optional[Node]:
    for child in element.children:
        if child.type in ("start_tag", "self_closing_tag"):
            return child
    return None


def element_tag_name(element: Node, data: bytes) -> Optional[str]:
    tag = opening_tag(element)
    if tag is None:
        return None
    return _tag_name(tag, data)


def _tag_name(tag: Node, data: bytes) -> Optional[str]:
    for child in tag.named_children:
        if child.type == "tag_name":
            return _text(child, data)
    return None


def element_attributes(element: Node, data: bytes) -> Dict[str, AttributeValue]:
    """Return the attributes of an element's opening tag; bare flags map to True."""
    tag = opening_tag(element)
    attrs: Dict[str, AttributeValue] = {}
    if tag is None:
        return attrs
    for attribute in tag.named_children:
        if attribute.type != "attribute":
            continue
        name: Optional[str] = None
        value: AttributeValue = True
        for part in attribute.named_children:
            if part.type == "attribute_name":
                name = _text(part, data)
            elif part.type == "attribute_value":
                value = _text(part, data)
            elif part.type == "quoted_attribute_value":
                inner = [c for c in part.named_children if c.type == "attribute_value"]
                value = _text(inner[0], data) if inner else ""
        if name is not None and name not in attrs:
            attrs[name] = value
    return attrs


def _text(node: Node, data: bytes) -> str:
    return data[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


__all__ = [
    "AttributeValue",
    "TemplateNode",
    "element_attributes",
    "element_tag_name",
    "get_html_parser",
    "mask_template_text",
    "parse_template_markup",
]
