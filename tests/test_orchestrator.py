"""Tests for the per-file and per-project analysis pipelines."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

import pytest

from tests._fixtures.project_builder import ProjectBuilder
from vuescan.config import AnalysisConfig
from vuescan.models import ComponentAnalysis, ImportItem, ModuleAnalysis, PropItem, Selector
from vuescan.orchestrator import Orchestrator

BUTTON_SFC = """
<script setup lang="ts">
import { computed } from 'vue'
import BaseIcon from './BaseIcon.vue'
import type { Size } from './types'

const props = defineProps<{
  label: string
  size?: Size
  tags: string[]
}>()
</script>

<template>
  <button class="btn">
    <BaseIcon />
    <span>{{ props.label }}</span>
  </button>
</template>

<style scoped>
.btn { color: red; }
button span { margin: 0; }
</style>
"""


def _orchestrator(builder: ProjectBuilder, **kwargs) -> Orchestrator:
    return Orchestrator(AnalysisConfig(root=builder.path()), **kwargs)


def _errors(caplog: pytest.LogCaptureFixture) -> list[logging.LogRecord]:
    return [record for record in caplog.records if record.levelno >= logging.ERROR]


def test_component_file_analysis(project_builder: ProjectBuilder) -> None:
    project_builder.write({"Button.vue": BUTTON_SFC})
    orchestrator = _orchestrator(project_builder)

    result = asyncio.run(orchestrator.analyze_component_file(project_builder.path("Button.vue")))

    assert result.imports == [
        ImportItem(imported_item="computed", source="vue"),
        ImportItem(imported_item="BaseIcon", source="./BaseIcon.vue"),
        ImportItem(imported_item="Size", source="./types"),
    ]
    assert result.props == [
        PropItem(name="label", type="string", required=True),
        PropItem(name="size", type="Size", required=False),
        PropItem(name="tags", type="string[]", required=True),
    ]
    assert result.template_tags == ["button", "BaseIcon", "span"]
    assert result.selectors == [
        Selector(type="class", name=".btn"),
        Selector(type="element", name="button"),
        Selector(type="element", name="span"),
    ]


def test_plain_script_takes_precedence_over_script_setup(project_builder: ProjectBuilder) -> None:
    project_builder.write(
        {
            "Both.vue": """
            <script lang="ts">
            import { defineComponent } from 'vue'
            </script>
            <script setup lang="ts">
            import Other from './Other.vue'
            defineProps<{ hidden: boolean }>()
            </script>
            """
        }
    )
    orchestrator = _orchestrator(project_builder)

    result = asyncio.run(orchestrator.analyze_component_file(project_builder.path("Both.vue")))

    assert result.imports == [ImportItem(imported_item="defineComponent", source="vue")]
    assert result.props == []
    assert result.template_tags == []


def test_component_without_script_or_style(project_builder: ProjectBuilder) -> None:
    project_builder.write({"Static.vue": "<template><p>Hi</p></template>\n"})
    orchestrator = _orchestrator(project_builder)

    result = asyncio.run(orchestrator.analyze_component_file(project_builder.path("Static.vue")))

    assert result == ComponentAnalysis(template_tags=["p"])


def test_malformed_script_yields_empty_component(
    project_builder: ProjectBuilder, caplog: pytest.LogCaptureFixture
) -> None:
    project_builder.write(
        {
            "Broken.vue": """
            <script setup lang="ts">
            const = defineProps<{ a: string }>(
            </script>
            <template><div /></template>
            <style>.a { color: red; }</style>
            """
        }
    )
    orchestrator = _orchestrator(project_builder)

    with caplog.at_level(logging.ERROR, logger="vuescan"):
        result = asyncio.run(
            orchestrator.analyze_component_file(project_builder.path("Broken.vue"))
        )

    assert result == ComponentAnalysis()
    errors = _errors(caplog)
    assert len(errors) == 1
    assert "Broken.vue" in errors[0].getMessage()


def test_decomposer_failure_is_reported_once(
    project_builder: ProjectBuilder, caplog: pytest.LogCaptureFixture
) -> None:
    project_builder.write({"Odd.vue": "<template><div /></template>\n"})

    def _explode(text: str):
        raise RuntimeError("cannot split")

    orchestrator = _orchestrator(project_builder, decomposer=_explode)

    with caplog.at_level(logging.ERROR, logger="vuescan"):
        result = asyncio.run(orchestrator.analyze_component_file(project_builder.path("Odd.vue")))

    assert result == ComponentAnalysis()
    errors = _errors(caplog)
    assert len(errors) == 1
    assert "cannot split" in errors[0].getMessage()
    assert errors[0].exc_info is None


def test_debug_attaches_traceback(
    project_builder: ProjectBuilder, caplog: pytest.LogCaptureFixture
) -> None:
    project_builder.write({"util.ts": "export const a = 1\n"})

    def _explode(text: str, **kwargs):
        raise RuntimeError("parser down")

    orchestrator = Orchestrator(
        AnalysisConfig(root=project_builder.path(), debug=True), source_parser=_explode
    )

    with caplog.at_level(logging.ERROR, logger="vuescan"):
        result = asyncio.run(orchestrator.analyze_module_file(project_builder.path("util.ts")))

    assert result == ModuleAnalysis()
    (error,) = _errors(caplog)
    assert error.exc_info is not None
    assert error.exc_info[0] is RuntimeError


def test_module_file_analysis(project_builder: ProjectBuilder) -> None:
    project_builder.write(
        {
            "format.ts": """
            import dayjs from 'dayjs'
            import * as path from 'path'

            export const formatDate = (value: Date) => dayjs(value).format()
            export const SEPARATOR = '/'
            export interface Options { locale: string }
            export class Formatter {}
            export default function format() {}
            """
        }
    )
    orchestrator = _orchestrator(project_builder)

    result = asyncio.run(orchestrator.analyze_module_file(project_builder.path("format.ts")))

    assert result.imports == [
        ImportItem(imported_item="dayjs", source="dayjs"),
        ImportItem(imported_item="path", source="path"),
    ]
    assert result.exports.functions == ["formatDate", "format"]
    assert result.exports.constants == ["SEPARATOR"]
    assert result.exports.types == ["Options"]
    assert result.exports.classes == ["Formatter"]


def test_module_parse_options_follow_suffix(project_builder: ProjectBuilder) -> None:
    project_builder.write({"view.tsx": "export const View = () => <div />\n"})
    seen: list[tuple[bool, tuple[str, ...]]] = []

    def _parser(text: str, *, typed_language: bool, extensions):
        seen.append((typed_language, tuple(extensions)))
        raise ValueError("stop")

    orchestrator = _orchestrator(project_builder, source_parser=_parser)
    asyncio.run(orchestrator.analyze_module_file(project_builder.path("view.tsx")))

    assert seen == [(True, ("jsx", "decorators"))]


def test_missing_module_file_yields_empty_result(
    project_builder: ProjectBuilder, caplog: pytest.LogCaptureFixture
) -> None:
    orchestrator = _orchestrator(project_builder)

    with caplog.at_level(logging.ERROR, logger="vuescan"):
        result = asyncio.run(orchestrator.analyze_module_file(project_builder.path("gone.ts")))

    assert result == ModuleAnalysis()
    assert len(_errors(caplog)) == 1


def test_analyze_project_keeps_discovery_order(project_builder: ProjectBuilder) -> None:
    project_builder.write(
        {
            "src/main.ts": "import App from './App.vue'\n",
            "src/App.vue": BUTTON_SFC,
            "src/lib/math.ts": "export function add(a: number, b: number) { return a + b }\n",
        }
    )
    orchestrator = Orchestrator(AnalysisConfig(root=project_builder.path(), max_concurrency=1))

    analyses = asyncio.run(orchestrator.analyze_project())

    assert [analysis.file for analysis in analyses] == [
        "src/App.vue",
        "src/main.ts",
        "src/lib/math.ts",
    ]
    assert analyses[0].exports is None
    assert analyses[2].exports is not None
    assert analyses[2].exports.functions == ["add"]


def test_run_writes_report(project_builder: ProjectBuilder, tmp_path: Path) -> None:
    project_builder.write(
        {
            "App.vue": BUTTON_SFC,
            "store.ts": "import { ref } from 'vue'\nexport const count = ref(0)\n",
        }
    )
    output = tmp_path / "out" / "report.json"
    orchestrator = _orchestrator(project_builder)

    result = orchestrator.run(output=output)

    assert result.output == output
    records = json.loads(output.read_text(encoding="utf-8"))
    component, module = records
    assert list(component) == ["file", "imports", "templateTags", "props", "classes"]
    assert component["file"] == "App.vue"
    assert component["props"][1] == {"name": "size", "type": "Size", "required": False}
    assert list(module) == ["file", "imports", "templateTags", "props", "classes", "exports"]
    assert module["exports"] == {
        "functions": [],
        "constants": ["count"],
        "types": [],
        "classes": [],
    }
    assert result.summary.files == 2
    assert result.summary.components == 1
    assert result.summary.modules == 1
    assert result.summary.imports == 4
    assert result.summary.props == 3


def test_component_with_expression_operators_in_template(project_builder: ProjectBuilder) -> None:
    project_builder.write(
        {
            "Profile.vue": """
            <script setup lang="ts">
            import { ref } from 'vue'
            defineProps<{ name: string }>()
            </script>

            <template>
              <div v-if="ready">{{ user && user.name }}</div>
              <p>{{ count < limit }} Tom & Jerry</p>
            </template>

            <style>
            .profile { color: red; }
            </style>
            """
        }
    )
    orchestrator = _orchestrator(project_builder)

    result = asyncio.run(orchestrator.analyze_component_file(project_builder.path("Profile.vue")))

    assert result.imports == [ImportItem(imported_item="ref", source="vue")]
    assert result.props == [PropItem(name="name", type="string", required=True)]
    assert result.template_tags == ["div", "p"]
    assert result.selectors == [Selector(type="class", name=".profile")]
