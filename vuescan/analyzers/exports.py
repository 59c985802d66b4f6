"""Classification of top-level import and export declarations."""

from __future__ import annotations

from typing import Callable, Dict, Iterable, Iterator, List, Optional

from tree_sitter import Node

from ..logging import get_logger
from ..models import ExportAnalysis, ImportItem
from ..parsing import ParseError, SyntaxTree, parse_source

MODULE_EXTENSIONS = ("decorators",)

FUNCTION_VALUES = frozenset(
    {"arrow_function", "function_expression", "function", "generator_function"}
)
_FUNCTION_DECLARATIONS = frozenset({"function_declaration", "generator_function_declaration"})
_CLASS_DECLARATIONS = frozenset({"class_declaration", "abstract_class_declaration"})

logger = get_logger("analyzers.exports")

_Handler = Callable[[Node, SyntaxTree, ExportAnalysis], None]


def collect_exports(tree: SyntaxTree) -> ExportAnalysis:
    """Bucket every exported top-level declaration of ``tree`` by kind."""
    exports = ExportAnalysis()
    for node in tree.root.named_children:
        if node.type != "export_statement":
            continue
        declaration = node.child_by_field_name("declaration")
        if _is_default_export(node):
            target = declaration if declaration is not None else node.child_by_field_name("value")
            handlers = _DEFAULT_HANDLERS
        else:
            target = declaration
            handlers = _NAMED_HANDLERS
        if target is None:
            continue
        handler = handlers.get(target.type)
        if handler is not None:
            handler(target, tree, exports)
    return exports


def collect_imports(tree: SyntaxTree) -> List[ImportItem]:
    """Return one :class:`ImportItem` per binding introduced by an import."""
    items: List[ImportItem] = []
    for node in tree.root.named_children:
        if node.type != "import_statement":
            continue
        source_node = node.child_by_field_name("source")
        if source_node is None:
            continue
        source = tree.string_value(source_node)
        for local_name in _import_bindings(node, tree):
            items.append(ImportItem(imported_item=local_name, source=source))
    return items


def classify_exports(
    text: str, *, extensions: Iterable[str] = MODULE_EXTENSIONS
) -> ExportAnalysis:
    """Parse ``text`` and classify its exports; parse failures yield no exports."""
    try:
        tree = parse_source(text, typed_language=True, extensions=extensions)
    except ParseError as exc:
        logger.error("Error parsing exports: %s", exc)
        return ExportAnalysis()
    return collect_exports(tree)


def classify_imports(
    text: str, *, extensions: Iterable[str] = MODULE_EXTENSIONS
) -> List[ImportItem]:
    """Parse ``text`` and list its imports; parse failures yield no imports."""
    try:
        tree = parse_source(text, typed_language=True, extensions=extensions)
    except ParseError as exc:
        logger.error("Error parsing imports: %s", exc)
        return []
    return collect_imports(tree)


def _is_default_export(node: Node) -> bool:
    return any(child.type == "default" for child in node.children)


def _declared_name(node: Node, tree: SyntaxTree) -> Optional[str]:
    name = node.child_by_field_name("name")
    return tree.node_text(name) if name is not None else None


def _append(bucket: List[str], name: str) -> None:
    if name not in bucket:
        bucket.append(name)


def _named_function(node: Node, tree: SyntaxTree, exports: ExportAnalysis) -> None:
    name = _declared_name(node, tree)
    if name:
        _append(exports.functions, name)


def _named_variables(node: Node, tree: SyntaxTree, exports: ExportAnalysis) -> None:
    for declarator in node.named_children:
        if declarator.type != "variable_declarator":
            continue
        binding = declarator.child_by_field_name("name")
        if binding is None or binding.type != "identifier":
            continue
        value = declarator.child_by_field_name("value")
        if value is not None and value.type in FUNCTION_VALUES:
            _append(exports.functions, tree.node_text(binding))
        else:
            _append(exports.constants, tree.node_text(binding))


def _named_type(node: Node, tree: SyntaxTree, exports: ExportAnalysis) -> None:
    name = _declared_name(node, tree)
    if name:
        _append(exports.types, name)


def _named_class(node: Node, tree: SyntaxTree, exports: ExportAnalysis) -> None:
    name = _declared_name(node, tree)
    if name:
        _append(exports.classes, name)


def _default_function(node: Node, tree: SyntaxTree, exports: ExportAnalysis) -> None:
    _append(exports.functions, _declared_name(node, tree) or "default")


def _default_identifier(node: Node, tree: SyntaxTree, exports: ExportAnalysis) -> None:
    _append(exports.constants, tree.node_text(node))


def _default_class(node: Node, tree: SyntaxTree, exports: ExportAnalysis) -> None:
    _append(exports.classes, _declared_name(node, tree) or "default")


_NAMED_HANDLERS: Dict[str, _Handler] = {
    **{kind: _named_function for kind in _FUNCTION_DECLARATIONS},
    "lexical_declaration": _named_variables,
    "variable_declaration": _named_variables,
    "type_alias_declaration": _named_type,
    "interface_declaration": _named_type,
    **{kind: _named_class for kind in _CLASS_DECLARATIONS},
}

_DEFAULT_HANDLERS: Dict[str, _Handler] = {
    **{kind: _default_function for kind in _FUNCTION_DECLARATIONS | FUNCTION_VALUES},
    "identifier": _default_identifier,
    **{kind: _default_class for kind in _CLASS_DECLARATIONS | {"class"}},
}


def _import_bindings(node: Node, tree: SyntaxTree) -> Iterator[str]:
    for clause in node.named_children:
        if clause.type != "import_clause":
            continue
        for binding in clause.named_children:
            if binding.type == "identifier":
                yield tree.node_text(binding)
            elif binding.type == "namespace_import":
                for part in binding.named_children:
                    if part.type == "identifier":
                        yield tree.node_text(part)
            elif binding.type == "named_imports":
                for specifier in binding.named_children:
                    if specifier.type != "import_specifier":
                        continue
                    local = specifier.child_by_field_name("alias")
                    if local is None:
                        local = specifier.child_by_field_name("name")
                    if local is not None:
                        yield tree.node_text(local)


__all__ = [
    "MODULE_EXTENSIONS",
    "classify_exports",
    "classify_imports",
    "collect_exports",
    "collect_imports",
]
