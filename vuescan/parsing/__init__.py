"""Adapters turning raw text into syntax trees via tree-sitter grammars."""

from .base import ParseError
from .component import ComponentSections, Section, decompose_component_file
from .markup import TemplateNode, parse_template_markup
from .source import KNOWN_EXTENSIONS, SyntaxTree, parse_source

__all__ = [
    "KNOWN_EXTENSIONS",
    "ComponentSections",
    "ParseError",
    "Section",
    "SyntaxTree",
    "TemplateNode",
    "decompose_component_file",
    "parse_source",
    "parse_template_markup",
]
