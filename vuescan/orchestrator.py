"""Per-file and per-project analysis pipelines."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Tuple

from .analyzers import (
    classify_selectors,
    collect_exports,
    collect_imports,
    collect_props,
    collect_template_tags,
)
from .config import AnalysisConfig
from .logging import get_logger
from .models import ComponentAnalysis, FileAnalysis, ModuleAnalysis
from .parsing import (
    ComponentSections,
    Section,
    SyntaxTree,
    TemplateNode,
    decompose_component_file,
    parse_source,
    parse_template_markup,
)
from .report import ReportSummary, summarize, write_report
from .repo_scanner import DiscoveredFile, RepoScanner, parse_options

SourceParser = Callable[..., SyntaxTree]
Decomposer = Callable[[str], ComponentSections]
TemplateParser = Callable[[str], TemplateNode]

_JSX_LANGS = {"tsx", "jsx"}


@dataclass
class RunResult:
    """Outcome of a full project run."""

    analyses: List[FileAnalysis]
    output: Path
    summary: ReportSummary


class Orchestrator:
    """Analyzes component and module files and assembles the project report.

    The parsing collaborators default to the tree-sitter adapters in
    :mod:`vuescan.parsing` and may be replaced, e.g. by test doubles.
    Per-file failures never propagate: each one is logged once and the file
    is reported with empty results.
    """

    def __init__(
        self,
        config: AnalysisConfig | None = None,
        *,
        scanner: RepoScanner | None = None,
        source_parser: SourceParser | None = None,
        decomposer: Decomposer | None = None,
        template_parser: TemplateParser | None = None,
    ) -> None:
        self.config = config or AnalysisConfig(root=Path.cwd())
        self.scanner = scanner or RepoScanner()
        self.source_parser = source_parser or parse_source
        self.decomposer = decomposer or decompose_component_file
        self.template_parser = template_parser or parse_template_markup
        self.logger = get_logger("orchestrator")

    async def analyze_component_file(self, path: Path) -> ComponentAnalysis:
        """Analyze a single-file component: imports, props, template tags and selectors."""
        try:
            content = await self._read_text(path)
            sections = self.decomposer(content)
            script = _active_script(sections)

            template_tags: List[str] = []
            if sections.template is not None and sections.template.content:
                template_tags = collect_template_tags(
                    self.template_parser(sections.template.content)
                )

            selectors = classify_selectors(sections.styles) if sections.styles else []

            imports, props = [], []
            if script is not None:
                tree = self.source_parser(
                    script.content,
                    typed_language=True,
                    extensions=_script_extensions(script),
                )
                imports = collect_imports(tree)
                props = collect_props(tree)
        except Exception as exc:
            self._report_failure("component", path, exc)
            return ComponentAnalysis()

        return ComponentAnalysis(
            imports=imports,
            template_tags=template_tags,
            props=props,
            selectors=selectors,
        )

    async def analyze_module_file(
        self,
        path: Path,
        *,
        typed_language: bool | None = None,
        extensions: Iterable[str] | None = None,
    ) -> ModuleAnalysis:
        """Analyze a plain module: imports and exports from a single parse."""
        default_typed, default_extensions = parse_options(path)
        try:
            content = await self._read_text(path)
            tree = self.source_parser(
                content,
                typed_language=default_typed if typed_language is None else typed_language,
                extensions=tuple(default_extensions if extensions is None else extensions),
            )
            imports = collect_imports(tree)
            exports = collect_exports(tree)
        except Exception as exc:
            self._report_failure("module", path, exc)
            return ModuleAnalysis()

        return ModuleAnalysis(imports=imports, exports=exports)

    async def analyze_file(self, discovered: DiscoveredFile) -> FileAnalysis:
        if discovered.kind == "component":
            component = await self.analyze_component_file(discovered.path)
            return FileAnalysis(
                file=discovered.relative,
                imports=component.imports,
                template_tags=component.template_tags,
                props=component.props,
                selectors=component.selectors,
            )
        module = await self.analyze_module_file(
            discovered.path,
            typed_language=discovered.typed_language,
            extensions=discovered.extensions,
        )
        return FileAnalysis(file=discovered.relative, imports=module.imports, exports=module.exports)

    async def analyze_project(self, root: str | Path | None = None) -> List[FileAnalysis]:
        """Analyze every discovered file concurrently; results follow discovery order."""
        project_root = Path(root) if root is not None else self.config.root
        files = self.scanner.scan(project_root, self.config)
        self.logger.info("Analyzing %d file(s) under %s", len(files), project_root)

        semaphore = asyncio.Semaphore(self.config.max_concurrency)

        async def _bounded(discovered: DiscoveredFile) -> FileAnalysis:
            async with semaphore:
                self.logger.debug("Analyzing %s", discovered.relative)
                return await self.analyze_file(discovered)

        results = await asyncio.gather(*(_bounded(discovered) for discovered in files))
        return list(results)

    def run(self, root: str | Path | None = None, *, output: Path | None = None) -> RunResult:
        """Analyze a project and write the JSON report."""
        analyses = asyncio.run(self.analyze_project(root))
        output_path = output if output is not None else Path(self.config.output)
        write_report(analyses, output_path)
        self.logger.info("Wrote %d record(s) to %s", len(analyses), output_path)
        return RunResult(analyses=analyses, output=output_path, summary=summarize(analyses))

    async def _read_text(self, path: Path) -> str:
        return await asyncio.to_thread(Path(path).read_text, encoding="utf-8")

    def _report_failure(self, kind: str, path: Path, exc: Exception) -> None:
        self.logger.error(
            "Error analyzing %s file %s: %s",
            kind,
            path,
            exc,
            exc_info=exc if self.config.debug else None,
        )


def _active_script(sections: ComponentSections) -> Optional[Section]:
    for section in (sections.script, sections.script_setup):
        if section is not None and section.content:
            return section
    return None


def _script_extensions(script: Section) -> Tuple[str, ...]:
    if script.lang in _JSX_LANGS:
        return ("jsx", "decorators")
    return ("decorators",)


__all__ = ["Orchestrator", "RunResult"]
