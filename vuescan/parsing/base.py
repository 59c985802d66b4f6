"""Shared error type and helpers for the tree-sitter parsing adapters."""

from __future__ import annotations

from typing import Optional

from tree_sitter import Node


class ParseError(ValueError):
    """Raised when source text cannot be turned into a syntax tree."""

    def __init__(
        self, message: str, *, line: Optional[int] = None, column: Optional[int] = None
    ) -> None:
        super().__init__(message)
        self.line = line
        self.column = column


def first_error_node(root: Node) -> Optional[Node]:
    """Return the first ERROR or MISSING node in document order."""
    stack = [root]
    while stack:
        node = stack.pop()
        if node.is_error or node.is_missing:
            return node
        flagged = [child for child in node.children if child.has_error or child.is_missing]
        stack.extend(reversed(flagged))
    return None


def raise_for_errors(root: Node, what: str = "source") -> None:
    """Raise ParseError when the tree under ``root`` contains syntax errors."""
    if not root.has_error:
        return
    node = first_error_node(root)
    if node is None:
        raise ParseError(f"Invalid {what}")
    line = node.start_point[0] + 1
    column = node.start_point[1] + 1
    if node.is_missing:
        message = f"Invalid {what}: missing {node.type!r} at line {line}, column {column}"
    else:
        message = f"Invalid {what}: unexpected syntax at line {line}, column {column}"
    raise ParseError(message, line=line, column=column)


__all__ = ["ParseError", "first_error_node", "raise_for_errors"]
