"""Semantic extraction over parsed scripts, templates and style blocks."""

from __future__ import annotations

from .exports import classify_exports, classify_imports, collect_exports, collect_imports
from .props import PROPS_CALLEE, collect_props, extract_props
from .styles import classify_selectors, classify_token
from .template import collect_template_tags, extract_template_tags
from .types import render_type, type_from_node

__all__ = [
    "PROPS_CALLEE",
    "classify_exports",
    "classify_imports",
    "classify_selectors",
    "classify_token",
    "collect_exports",
    "collect_imports",
    "collect_props",
    "collect_template_tags",
    "extract_props",
    "extract_template_tags",
    "render_type",
    "type_from_node",
]
