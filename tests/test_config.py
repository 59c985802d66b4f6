"""Tests for vuescan.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from vuescan.config import AnalysisConfig, ConfigError, load_config


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, AnalysisConfig)
    assert config.root == tmp_path.resolve()
    assert config.extensions == [".vue", ".ts"]
    assert config.exclude_paths == ["node_modules", "dist"]
    assert config.ignore_files == []
    assert config.output == "files-analysis.json"
    assert config.max_concurrency == 16
    assert config.debug is False


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    (tmp_path / ".vuescan.yml").write_text(
        """
extensions: [vue, ".TS", .tsx]
exclude_paths:
  - node_modules
  - "coverage/"
ignore_files: index.ts
output: reports/inventory.json
max_concurrency: "4"
debug: yes
""",
        encoding="utf-8",
    )

    config = load_config(tmp_path)

    assert config.extensions == [".vue", ".ts", ".tsx"]
    assert config.exclude_paths == ["node_modules", "coverage/"]
    assert config.ignore_files == ["index.ts"]
    assert config.output == "reports/inventory.json"
    assert config.max_concurrency == 4
    assert config.debug is True


def test_empty_exclude_list_disables_defaults(tmp_path: Path) -> None:
    (tmp_path / ".vuescan.yml").write_text("exclude_paths: []\n", encoding="utf-8")
    assert load_config(tmp_path).exclude_paths == []


def test_load_config_accepts_explicit_file(tmp_path: Path) -> None:
    custom = tmp_path / "ci" / "scan.yml"
    custom.parent.mkdir()
    custom.write_text("debug: true\n", encoding="utf-8")

    config = load_config(custom)

    assert config.debug is True
    assert config.root == custom.parent.resolve()


def test_empty_file_uses_defaults(tmp_path: Path) -> None:
    (tmp_path / ".vuescan.yml").write_text("\n", encoding="utf-8")
    assert load_config(tmp_path) == AnalysisConfig(root=tmp_path.resolve())


@pytest.mark.parametrize(
    "content",
    [
        "- just\n- a list\n",
        "extensions: [.vue\n",
        "max_concurrency: 0\n",
        "max_concurrency: many\n",
    ],
)
def test_invalid_config_raises(tmp_path: Path, content: str) -> None:
    (tmp_path / ".vuescan.yml").write_text(content, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(tmp_path)
