"""Core data models shared across vuescan components."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional

SelectorType = Literal["class", "element", "pseudo", "other"]


@dataclass
class ImportItem:
    """One imported binding: its local name and the module it comes from."""

    imported_item: str
    source: str

    def to_dict(self) -> Dict[str, Any]:
        return {"importedItem": self.imported_item, "source": self.source}


@dataclass
class ExportAnalysis:
    """Exported names of a module grouped by kind, in declaration order."""

    functions: List[str] = field(default_factory=list)
    constants: List[str] = field(default_factory=list)
    types: List[str] = field(default_factory=list)
    classes: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "functions": list(self.functions),
            "constants": list(self.constants),
            "types": list(self.types),
            "classes": list(self.classes),
        }


@dataclass
class PropItem:
    """A typed component parameter declared through ``defineProps``."""

    name: str
    type: Optional[str] = None
    required: bool = True
    default: Optional[str] = None
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"name": self.name}
        if self.type is not None:
            payload["type"] = self.type
        payload["required"] = self.required
        if self.default is not None:
            payload["default"] = self.default
        if self.description is not None:
            payload["description"] = self.description
        return payload


@dataclass
class Selector:
    """A style selector token and its category."""

    type: SelectorType
    name: str

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "name": self.name}


@dataclass
class ComponentAnalysis:
    """Result of analyzing a single-file component."""

    imports: List[ImportItem] = field(default_factory=list)
    template_tags: List[str] = field(default_factory=list)
    props: List[PropItem] = field(default_factory=list)
    selectors: List[Selector] = field(default_factory=list)


@dataclass
class ModuleAnalysis:
    """Result of analyzing a plain script module."""

    imports: List[ImportItem] = field(default_factory=list)
    exports: ExportAnalysis = field(default_factory=ExportAnalysis)


@dataclass
class FileAnalysis:
    """Report record for one discovered file."""

    file: str
    imports: List[ImportItem] = field(default_factory=list)
    template_tags: List[str] = field(default_factory=list)
    exports: Optional[ExportAnalysis] = None
    props: List[PropItem] = field(default_factory=list)
    selectors: List[Selector] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "file": self.file,
            "imports": [item.to_dict() for item in self.imports],
            "templateTags": list(self.template_tags),
            "props": [prop.to_dict() for prop in self.props],
            "classes": [selector.to_dict() for selector in self.selectors],
        }
        if self.exports is not None:
            payload["exports"] = self.exports.to_dict()
        return payload
