"""Tests for report serialization and run summaries."""

from __future__ import annotations

import json
from pathlib import Path

from vuescan.models import ExportAnalysis, FileAnalysis, ImportItem, PropItem, Selector
from vuescan.report import render_report, summarize, write_report


def _analyses() -> list[FileAnalysis]:
    return [
        FileAnalysis(
            file="src/Card.vue",
            imports=[ImportItem(imported_item="ref", source="vue")],
            template_tags=["div"],
            props=[
                PropItem(name="title", type="string"),
                PropItem(name="dense", type="boolean", required=False, default="false"),
            ],
            selectors=[Selector(type="class", name=".card")],
        ),
        FileAnalysis(
            file="src/api.ts",
            imports=[
                ImportItem(imported_item="axios", source="axios"),
                ImportItem(imported_item="Card", source="./Card.vue"),
            ],
            exports=ExportAnalysis(functions=["fetchAll"], types=["Item"]),
        ),
        FileAnalysis(file="src/Empty.vue"),
    ]


def test_file_analysis_to_dict_uses_report_keys() -> None:
    component, module, empty = (analysis.to_dict() for analysis in _analyses())

    assert component == {
        "file": "src/Card.vue",
        "imports": [{"importedItem": "ref", "source": "vue"}],
        "templateTags": ["div"],
        "props": [
            {"name": "title", "type": "string", "required": True},
            {"name": "dense", "type": "boolean", "required": False, "default": "false"},
        ],
        "classes": [{"type": "class", "name": ".card"}],
    }
    assert module["exports"] == {
        "functions": ["fetchAll"],
        "constants": [],
        "types": ["Item"],
        "classes": [],
    }
    assert "exports" not in empty


def test_prop_without_type_omits_key() -> None:
    assert PropItem(name="loose").to_dict() == {"name": "loose", "required": True}


def test_summarize_counts() -> None:
    summary = summarize(_analyses())

    assert (summary.files, summary.components, summary.modules) == (3, 1, 1)
    assert summary.imports == 3
    assert summary.props == 2
    assert summary.lines() == [
        "Summary:",
        " - Vue components: 1",
        " - TypeScript files: 1",
        " - Total imports: 3",
        " - Total props: 2",
    ]


def test_write_report_creates_parent_directories(tmp_path: Path) -> None:
    target = tmp_path / "reports" / "files-analysis.json"

    written = write_report(_analyses(), target)

    assert written == target
    text = target.read_text(encoding="utf-8")
    assert text.endswith("]\n")
    assert text.startswith('[\n  {\n    "file": "src/Card.vue"')
    assert json.loads(text)[1]["file"] == "src/api.ts"


def test_render_empty_report() -> None:
    assert render_report([]) == "[]"


def test_component_without_template_tags_is_not_counted() -> None:
    summary = summarize(
        [FileAnalysis(file="Empty.vue"), FileAnalysis(file="Card.vue", template_tags=["div"])]
    )
    assert summary.components == 1
    assert summary.modules == 0
