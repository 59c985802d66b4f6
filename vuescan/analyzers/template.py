"""Collects element and component names used in a template."""

from __future__ import annotations

from typing import Dict, List

from ..parsing import TemplateNode, parse_template_markup


def collect_template_tags(root: TemplateNode) -> List[str]:
    """Return unique tag names of ``root`` in pre-order, first encounter first."""
    tags: Dict[str, None] = {}
    _walk(root, tags)
    return list(tags)


def extract_template_tags(text: str) -> List[str]:
    return collect_template_tags(parse_template_markup(text))


def _walk(node: TemplateNode, tags: Dict[str, None]) -> None:
    if node.tag:
        tags.setdefault(node.tag, None)
    for child in node.children:
        _walk(child, tags)


__all__ = ["collect_template_tags", "extract_template_tags"]
