"""Canonical string rendering of TypeScript type expressions.

Type nodes from the syntax tree are first converted into a small tagged union
(:data:`TypeExpr`) and then printed. Every node kind the converter does not
model structurally becomes a :class:`VerbatimSpan`, which prints as the exact
source text it covers, so rendering never fails on unfamiliar syntax.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple, Union

from tree_sitter import Node

from ..parsing.source import SyntaxTree, first_named_child

KEYWORDS = frozenset(
    {
        "number",
        "string",
        "boolean",
        "void",
        "null",
        "undefined",
        "any",
        "unknown",
        "never",
        "object",
        "symbol",
        "bigint",
    }
)

LiteralValue = Union[str, int, float, bool]


@dataclass(frozen=True)
class KeywordType:
    keyword: str


@dataclass(frozen=True)
class ArrayType:
    element: "TypeExpr"


@dataclass(frozen=True)
class FunctionParam:
    name: str
    type: Optional["TypeExpr"] = None


@dataclass(frozen=True)
class FunctionType:
    params: Tuple[FunctionParam, ...]
    returns: "TypeExpr"


@dataclass(frozen=True)
class LiteralType:
    value: LiteralValue


@dataclass(frozen=True)
class TypeReference:
    name: str
    args: Tuple["TypeExpr", ...] = ()


@dataclass(frozen=True)
class UnionType:
    members: Tuple["TypeExpr", ...]


@dataclass(frozen=True)
class IntersectionType:
    members: Tuple["TypeExpr", ...]


@dataclass(frozen=True)
class PropertyMember:
    name: str
    optional: bool = False
    type: Optional["TypeExpr"] = None


@dataclass(frozen=True)
class ObjectType:
    members: Tuple[PropertyMember, ...]


@dataclass(frozen=True)
class VerbatimSpan:
    """Byte span of the source that is printed as-is."""

    start: int
    end: int


TypeExpr = Union[
    KeywordType,
    ArrayType,
    FunctionType,
    LiteralType,
    TypeReference,
    UnionType,
    IntersectionType,
    ObjectType,
    VerbatimSpan,
]


# -- rendering ---------------------------------------------------------------


def render_type(expr: TypeExpr, source: str) -> str:
    """Render ``expr`` as a string; ``source`` backs verbatim spans."""
    return _RENDERERS[type(expr)](expr, source)


def _render_keyword(expr: KeywordType, source: str) -> str:
    return expr.keyword


def _render_array(expr: ArrayType, source: str) -> str:
    return f"{render_type(expr.element, source)}[]"


def _render_function(expr: FunctionType, source: str) -> str:
    params = ", ".join(
        f"{param.name}: {render_type(param.type, source)}"
        for param in expr.params
        if param.type is not None
    )
    return f"({params}) => {render_type(expr.returns, source)}"


def _render_literal(expr: LiteralType, source: str) -> str:
    return json.dumps(expr.value, ensure_ascii=False)


def _render_reference(expr: TypeReference, source: str) -> str:
    if not expr.args:
        return expr.name
    args = ", ".join(render_type(arg, source) for arg in expr.args)
    return f"{expr.name}<{args}>"


def _render_union(expr: UnionType, source: str) -> str:
    return " | ".join(render_type(member, source) for member in expr.members)


def _render_intersection(expr: IntersectionType, source: str) -> str:
    return " & ".join(render_type(member, source) for member in expr.members)


def _render_object(expr: ObjectType, source: str) -> str:
    members = []
    for member in expr.members:
        key = f"{member.name}?" if member.optional else member.name
        rendered = "undefined" if member.type is None else render_type(member.type, source)
        members.append(f"{key}: {rendered}")
    return f"{{ {'; '.join(members)} }}"


def _render_verbatim(expr: VerbatimSpan, source: str) -> str:
    return source.encode("utf-8")[expr.start : expr.end].decode("utf-8", errors="replace")


_RENDERERS: Dict[type, Callable[..., str]] = {
    KeywordType: _render_keyword,
    ArrayType: _render_array,
    FunctionType: _render_function,
    LiteralType: _render_literal,
    TypeReference: _render_reference,
    UnionType: _render_union,
    IntersectionType: _render_intersection,
    ObjectType: _render_object,
    VerbatimSpan: _render_verbatim,
}


# -- conversion from syntax nodes --------------------------------------------


def type_from_node(node: Node, tree: SyntaxTree) -> TypeExpr:
    """Convert a type node of the syntax tree into a :data:`TypeExpr`."""
    converter = _CONVERTERS.get(node.type)
    if converter is None:
        return _verbatim(node)
    return converter(node, tree)


def _verbatim(node: Node) -> VerbatimSpan:
    return VerbatimSpan(start=node.start_byte, end=node.end_byte)


def _unwrap(node: Node, tree: SyntaxTree) -> TypeExpr:
    # type annotations (": T") and parenthesized types print as their inner type
    inner = first_named_child(node)
    if inner is None:
        return _verbatim(node)
    return type_from_node(inner, tree)


def _from_predefined(node: Node, tree: SyntaxTree) -> TypeExpr:
    text = tree.node_text(node)
    if text in KEYWORDS:
        return KeywordType(text)
    return _verbatim(node)


def _from_identifier(node: Node, tree: SyntaxTree) -> TypeExpr:
    name = tree.node_text(node)
    if name in KEYWORDS:
        return KeywordType(name)
    return TypeReference(name)


def _from_array(node: Node, tree: SyntaxTree) -> TypeExpr:
    element = first_named_child(node)
    if element is None:
        return _verbatim(node)
    return ArrayType(type_from_node(element, tree))


def _from_function(node: Node, tree: SyntaxTree) -> TypeExpr:
    returns = node.child_by_field_name("return_type")
    if returns is None:
        return _verbatim(node)
    params = []
    parameters = node.child_by_field_name("parameters")
    if parameters is not None:
        for param in parameters.named_children:
            if param.type not in ("required_parameter", "optional_parameter"):
                continue
            pattern = param.child_by_field_name("pattern")
            if pattern is None or pattern.type not in ("identifier", "this"):
                continue
            annotation = param.child_by_field_name("type")
            params.append(
                FunctionParam(
                    name=tree.node_text(pattern),
                    type=type_from_node(annotation, tree) if annotation is not None else None,
                )
            )
    return FunctionType(params=tuple(params), returns=type_from_node(returns, tree))


def _from_literal(node: Node, tree: SyntaxTree) -> TypeExpr:
    literal = first_named_child(node)
    if literal is None:
        return _verbatim(node)
    kind = literal.type
    if kind in ("null", "undefined"):
        return KeywordType(kind)
    if kind == "true":
        return LiteralType(True)
    if kind == "false":
        return LiteralType(False)
    if kind == "string":
        return LiteralType(tree.string_value(literal))
    if kind == "number":
        value = _number_value(tree.node_text(literal))
        if value is not None:
            return LiteralType(value)
    return _verbatim(node)


def _number_value(text: str) -> Optional[Union[int, float]]:
    cleaned = text.replace("_", "")
    if cleaned.endswith("n"):
        return None
    try:
        if cleaned[:2].lower() in ("0x", "0o", "0b"):
            return int(cleaned, 0)
        value = float(cleaned)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    if value.is_integer() and abs(value) < 1e21:
        return int(value)
    return value


def _from_generic(node: Node, tree: SyntaxTree) -> TypeExpr:
    name = node.child_by_field_name("name")
    if name is None or name.type != "type_identifier":
        return _verbatim(node)
    arguments = node.child_by_field_name("type_arguments")
    args: Tuple[TypeExpr, ...] = ()
    if arguments is not None:
        args = tuple(
            type_from_node(arg, tree)
            for arg in arguments.named_children
            if arg.type != "comment"
        )
    return TypeReference(tree.node_text(name), args)


def _flatten(node: Node, tree: SyntaxTree) -> Tuple[TypeExpr, ...]:
    members = []
    for child in node.named_children:
        if child.type == "comment":
            continue
        if child.type == node.type:
            members.extend(_flatten(child, tree))
        else:
            members.append(type_from_node(child, tree))
    return tuple(members)


def _from_union(node: Node, tree: SyntaxTree) -> TypeExpr:
    return UnionType(_flatten(node, tree))


def _from_intersection(node: Node, tree: SyntaxTree) -> TypeExpr:
    return IntersectionType(_flatten(node, tree))


def _from_object(node: Node, tree: SyntaxTree) -> TypeExpr:
    members = []
    for child in node.named_children:
        member = property_member(child, tree)
        if member is not None:
            members.append(member)
    return ObjectType(tuple(members))


def property_member(node: Node, tree: SyntaxTree) -> Optional[PropertyMember]:
    """Return the member for an identifier-keyed property signature, else None."""
    if node.type != "property_signature":
        return None
    key = node.child_by_field_name("name")
    if key is None or key.type != "property_identifier":
        return None
    annotation = node.child_by_field_name("type")
    return PropertyMember(
        name=tree.node_text(key),
        optional=any(child.type == "?" for child in node.children),
        type=type_from_node(annotation, tree) if annotation is not None else None,
    )


_CONVERTERS: Dict[str, Callable[[Node, SyntaxTree], TypeExpr]] = {
    "type_annotation": _unwrap,
    "parenthesized_type": _unwrap,
    "predefined_type": _from_predefined,
    "type_identifier": _from_identifier,
    "array_type": _from_array,
    "function_type": _from_function,
    "literal_type": _from_literal,
    "generic_type": _from_generic,
    "union_type": _from_union,
    "intersection_type": _from_intersection,
    "object_type": _from_object,
}


__all__ = [
    "KEYWORDS",
    "ArrayType",
    "FunctionParam",
    "FunctionType",
    "IntersectionType",
    "KeywordType",
    "LiteralType",
    "ObjectType",
    "PropertyMember",
    "TypeExpr",
    "TypeReference",
    "UnionType",
    "VerbatimSpan",
    "property_member",
    "render_type",
    "type_from_node",
]
