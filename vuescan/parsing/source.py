"""Script parsing on top of the tree-sitter TypeScript and JavaScript grammars."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional

import tree_sitter_javascript
import tree_sitter_typescript
from tree_sitter import Language, Node, Parser, Tree

from .base import raise_for_errors

KNOWN_EXTENSIONS = frozenset({"jsx", "decorators"})

_GRAMMARS: Dict[str, Callable[[], object]] = {
    "typescript": tree_sitter_typescript.language_typescript,
    "tsx": tree_sitter_typescript.language_tsx,
    "javascript": tree_sitter_javascript.language,
}

_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}

_parsers: Dict[str, Parser] = {}


@dataclass(frozen=True)
class SyntaxTree:
    """Parsed script together with the text it was parsed from."""

    text: str
    data: bytes
    tree: Tree
    grammar: str

    @property
    def root(self) -> Node:
        return self.tree.root_node

    def node_text(self, node: Node) -> str:
        return self.data[node.start_byte : node.end_byte].decode("utf-8", errors="replace")

    def string_value(self, node: Node) -> str:
        """Return the cooked value of a string literal node."""
        parts: List[str] = []
        for child in node.named_children:
            if child.type == "string_fragment":
                parts.append(self.node_text(child))
            elif child.type == "escape_sequence":
                parts.append(_unescape(self.node_text(child)))
        if parts or node.named_child_count:
            return "".join(parts)
        raw = self.node_text(node)
        return raw[1:-1] if len(raw) >= 2 else raw


def parse_source(
    text: str,
    *,
    typed_language: bool = True,
    extensions: Iterable[str] = (),
) -> SyntaxTree:
    """Parse script text into a syntax tree.

    ``typed_language`` selects the TypeScript grammar; ``jsx`` in ``extensions``
    switches it to TSX. Untyped sources use the JavaScript grammar, which
    always accepts JSX. Decorators are part of every grammar, so the
    ``decorators`` extension is accepted without changing anything.
    """
    requested = set(extensions)
    unknown = requested - KNOWN_EXTENSIONS
    if unknown:
        raise ValueError(f"Unknown parser extensions: {', '.join(sorted(unknown))}")

    grammar = _grammar_for(typed_language, "jsx" in requested)
    data = text.encode("utf-8")
    tree = _get_parser(grammar).parse(data)
    raise_for_errors(tree.root_node)
    return SyntaxTree(text=text, data=data, tree=tree, grammar=grammar)


def _grammar_for(typed_language: bool, jsx: bool) -> str:
    if not typed_language:
        return "javascript"
    return "tsx" if jsx else "typescript"


def _get_parser(grammar: str) -> Parser:
    parser = _parsers.get(grammar)
    if parser is not None:
        return parser
    parser = Parser(Language(_GRAMMARS[grammar]()))
    _parsers[grammar] = parser
    return parser


def _unescape(sequence: str) -> str:
    body = sequence[1:]
    if not body:
        return ""
    if body[0] in ("x", "u") and len(body) > 1:
        digits = body[1:].strip("{}")
        try:
            return chr(int(digits, 16))
        except ValueError:
            return body
    if body[0] in ("\n", "\r"):
        return ""
    return _SIMPLE_ESCAPES.get(body, body)


def first_named_child(node: Node, *, skip_comments: bool = True) -> Optional[Node]:
    for child in node.named_children:
        if skip_comments and child.type == "comment":
            continue
        return child
    return None


__all__ = [
    "KNOWN_EXTENSIONS",
    "SyntaxTree",
    "first_named_child",
    "parse_source",
]
