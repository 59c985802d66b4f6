"""Configuration loading for vuescan (.vuescan.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".vuescan.yml"

DEFAULT_EXTENSIONS = (".vue", ".ts")
DEFAULT_EXCLUDE_PATHS = ("node_modules", "dist")
DEFAULT_OUTPUT = "files-analysis.json"
DEFAULT_MAX_CONCURRENCY = 16


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be read or parsed."""


@dataclass
class AnalysisConfig:
    """Settings for one analysis run, from .vuescan.yml and CLI overrides."""

    root: Path
    extensions: List[str] = field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    exclude_paths: List[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE_PATHS))
    ignore_files: List[str] = field(default_factory=list)
    output: str = DEFAULT_OUTPUT
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY
    debug: bool = False


def load_config(config_path: Path) -> AnalysisConfig:
    """Load configuration from a project directory or an explicit file."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return AnalysisConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")

    config = AnalysisConfig(root=root)

    if "extensions" in data:
        config.extensions = [_normalise_extension(ext) for ext in _as_str_list(data["extensions"])]
    if "exclude_paths" in data:
        config.exclude_paths = _as_str_list(data["exclude_paths"])
    if "ignore_files" in data:
        config.ignore_files = _as_str_list(data["ignore_files"])

    output = _as_str(data.get("output"))
    if output:
        config.output = output

    if data.get("max_concurrency") is not None:
        max_concurrency = _as_int(data.get("max_concurrency"))
        if max_concurrency is None or max_concurrency < 1:
            raise ConfigError("max_concurrency must be a positive integer")
        config.max_concurrency = max_concurrency

    debug = _as_bool(data.get("debug"))
    if debug is not None:
        config.debug = debug

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _normalise_extension(value: str) -> str:
    value = value.strip().lower()
    return value if value.startswith(".") else f".{value}"


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "AnalysisConfig",
    "ConfigError",
    "DEFAULT_EXCLUDE_PATHS",
    "DEFAULT_EXTENSIONS",
    "DEFAULT_MAX_CONCURRENCY",
    "DEFAULT_OUTPUT",
    "load_config",
]
