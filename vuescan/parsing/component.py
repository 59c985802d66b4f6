"""Splits single-file components into their script, template and style blocks."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from tree_sitter import Node

from .markup import (
    AttributeValue,
    element_attributes,
    element_tag_name,
    get_html_parser,
    mask_template_text,
)


@dataclass
class Section:
    """Raw text of one top-level block plus the attributes of its opening tag."""

    content: str
    attrs: Dict[str, AttributeValue] = field(default_factory=dict)

    @property
    def lang(self) -> Optional[str]:
        value = self.attrs.get("lang")
        return value.lower() if isinstance(value, str) else None


@dataclass
class ComponentSections:
    """Blocks of a component file. The first block of each singular kind wins."""

    script: Optional[Section] = None
    script_setup: Optional[Section] = None
    template: Optional[Section] = None
    styles: List[Section] = field(default_factory=list)


def decompose_component_file(text: str) -> ComponentSections:
    data = text.encode("utf-8")
    root = get_html_parser().parse(mask_template_text(data)).root_node
    sections = ComponentSections()

    for node in _top_level_blocks(root):
        if node.type == "script_element":
            section = _raw_text_section(node, data)
            if "setup" in section.attrs:
                if sections.script_setup is None:
                    sections.script_setup = section
            elif sections.script is None:
                sections.script = section
        elif node.type == "style_element":
            sections.styles.append(_raw_text_section(node, data))
        elif node.type == "element" and sections.template is None:
            if element_tag_name(node, data) == "template":
                sections.template = _inner_section(node, data)

    return sections


def _top_level_blocks(root: Node) -> Iterator[Node]:
    for node in root.named_children:
        if node.type == "ERROR":
            yield from _top_level_blocks(node)
        else:
            yield node


def _raw_text_section(node: Node, data: bytes) -> Section:
    content = ""
    for child in node.named_children:
        if child.type == "raw_text":
            content = data[child.start_byte : child.end_byte].decode("utf-8", errors="replace")
            break
    return Section(content=content, attrs=element_attributes(node, data))


def _inner_section(node: Node, data: bytes) -> Section:
    attrs = element_attributes(node, data)
    start: Optional[int] = None
    end = node.end_byte
    for child in node.children:
        if child.type == "self_closing_tag":
            return Section(content="", attrs=attrs)
        if child.type == "start_tag":
            start = child.end_byte
        elif child.type == "end_tag":
            end = child.start_byte
    if start is None:
        return Section(content="", attrs=attrs)
    content = data[start:end].decode("utf-8", errors="replace")
    return Section(content=content, attrs=attrs)


__all__ = ["ComponentSections", "Section", "decompose_component_file"]
