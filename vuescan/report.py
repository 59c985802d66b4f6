"""Serialization of analysis results and run summaries."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence

from .models import FileAnalysis


@dataclass
class ReportSummary:
    """Aggregate counts printed after a run."""

    files: int
    components: int
    modules: int
    imports: int
    props: int

    def lines(self) -> List[str]:
        return [
            "Summary:",
            f" - Vue components: {self.components}",
            f" - TypeScript files: {self.modules}",
            f" - Total imports: {self.imports}",
            f" - Total props: {self.props}",
        ]


def render_report(analyses: Sequence[FileAnalysis]) -> str:
    return json.dumps([analysis.to_dict() for analysis in analyses], indent=2, ensure_ascii=False)


def write_report(analyses: Sequence[FileAnalysis], path: Path) -> Path:
    """Write ``analyses`` as a JSON array to ``path`` and return the path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_report(analyses) + "\n", encoding="utf-8")
    return path


def summarize(analyses: Sequence[FileAnalysis]) -> ReportSummary:
    return ReportSummary(
        files=len(analyses),
        components=sum(1 for analysis in analyses if analysis.template_tags),
        modules=sum(1 for analysis in analyses if analysis.exports is not None),
        imports=sum(len(analysis.imports) for analysis in analyses),
        props=sum(len(analysis.props) for analysis in analyses),
    )


__all__ = ["ReportSummary", "render_report", "summarize", "write_report"]
