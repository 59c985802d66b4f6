"""Extraction of typed component props from ``defineProps<{...}>()`` calls."""

from __future__ import annotations

import re
from typing import Iterable, Iterator, List, Optional, Tuple

from tree_sitter import Node

from ..logging import get_logger
from ..models import PropItem
from ..parsing import ParseError, SyntaxTree, parse_source
from .types import property_member, render_type

PROPS_CALLEE = "defineProps"

_DEFAULT_TAGS = ("@default", "@defaultValue")
_DOC_LINE_PREFIX = re.compile(r"^\s*\*?\s?")

logger = get_logger("analyzers.props")


def collect_props(tree: SyntaxTree) -> List[PropItem]:
    """Return the props declared by top-level ``defineProps`` calls in ``tree``."""
    props: List[PropItem] = []
    for node in tree.root.named_children:
        for call in _candidate_calls(node):
            props.extend(_props_from_call(call, tree))
    return props


def extract_props(text: str, *, extensions: Iterable[str] = ()) -> List[PropItem]:
    """Parse a script and return its props; parse failures yield no props."""
    try:
        tree = parse_source(text, typed_language=True, extensions=extensions)
    except ParseError as exc:
        logger.error("Error parsing props: %s", exc)
        return []
    return collect_props(tree)


def _candidate_calls(node: Node) -> Iterator[Node]:
    if node.type == "expression_statement":
        for child in node.named_children:
            if child.type == "call_expression":
                yield child
    elif node.type in ("lexical_declaration", "variable_declaration"):
        for declarator in node.named_children:
            if declarator.type != "variable_declarator":
                continue
            value = declarator.child_by_field_name("value")
            if value is not None and value.type == "call_expression":
                yield value


def _props_from_call(call: Node, tree: SyntaxTree) -> List[PropItem]:
    callee = call.child_by_field_name("function")
    if callee is None or callee.type != "identifier" or tree.node_text(callee) != PROPS_CALLEE:
        return []
    arguments = call.child_by_field_name("type_arguments")
    if arguments is None:
        return []
    type_args = [arg for arg in arguments.named_children if arg.type != "comment"]
    if len(type_args) != 1 or type_args[0].type != "object_type":
        return []

    props: List[PropItem] = []
    for member_node in type_args[0].named_children:
        member = property_member(member_node, tree)
        if member is None:
            continue
        description, default = _doc_comment(member_node, tree)
        props.append(
            PropItem(
                name=member.name,
                type=render_type(member.type, tree.text) if member.type is not None else None,
                required=not member.optional,
                default=default,
                description=description,
            )
        )
    return props


def _doc_comment(member: Node, tree: SyntaxTree) -> Tuple[Optional[str], Optional[str]]:
    """Read the ``/** ... */`` comment directly above a property signature."""
    comment = member.prev_named_sibling
    if comment is None or comment.type != "comment":
        return None, None
    text = tree.node_text(comment)
    if not text.startswith("/**"):
        return None, None
    previous = comment.prev_named_sibling
    if previous is not None and previous.end_point[0] == comment.start_point[0]:
        # trailing comment of the previous member
        return None, None

    body = text[3:-2] if text.endswith("*/") else text[3:]
    description: List[str] = []
    default: Optional[str] = None
    in_tags = False
    for raw in body.splitlines():
        line = _DOC_LINE_PREFIX.sub("", raw, count=1).strip()
        if not line:
            continue
        if line.startswith("@"):
            in_tags = True
            tag, _, value = line.partition(" ")
            if tag in _DEFAULT_TAGS and value.strip() and default is None:
                default = value.strip()
            continue
        if not in_tags:
            description.append(line)
    return (" ".join(description) or None), default


__all__ = ["PROPS_CALLEE", "collect_props", "extract_props"]
