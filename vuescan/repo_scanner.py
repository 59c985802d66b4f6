"""Discovery of component and module files in a project tree."""

from __future__ import annotations

import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterator, List, Literal, Sequence, Tuple

from .config import AnalysisConfig, ConfigError, load_config
from .logging import get_logger

FileKind = Literal["component", "module"]

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    "__pycache__",
    ".idea",
    ".vscode",
    ".nuxt",
    ".output",
}

# suffix -> (kind, typed language, parser extensions)
_KINDS_BY_SUFFIX: dict[str, Tuple[FileKind, bool, Tuple[str, ...]]] = {
    ".vue": ("component", True, ()),
    ".ts": ("module", True, ("decorators",)),
    ".mts": ("module", True, ("decorators",)),
    ".cts": ("module", True, ("decorators",)),
    ".tsx": ("module", True, ("jsx", "decorators")),
    ".js": ("module", False, ("decorators",)),
    ".mjs": ("module", False, ("decorators",)),
    ".cjs": ("module", False, ("decorators",)),
    ".jsx": ("module", False, ("jsx", "decorators")),
}

logger = get_logger("scanner")


@dataclass(frozen=True)
class DiscoveredFile:
    """A file selected for analysis and how its source should be parsed."""

    path: Path
    relative: str
    kind: FileKind
    typed_language: bool
    extensions: Tuple[str, ...]


@dataclass
class IgnoreRule:
    """Represents an ignore rule parsed from .gitignore or the exclude_paths setting."""

    pattern: str
    directory_only: bool
    anchored: bool
    negate: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False

        if self.anchored or self.has_slash:
            if fnmatchcase(rel_path, self.pattern):
                return True
            return self.directory_only and rel_path.startswith(f"{self.pattern}/")

        return any(fnmatchcase(part, self.pattern) for part in rel_path.split("/"))


def build_ignore_rule(pattern: str, negate: bool = False) -> IgnoreRule | None:
    pattern = pattern.strip()
    if not pattern:
        return None

    directory_only = pattern.endswith("/")
    if directory_only:
        pattern = pattern[:-1]

    anchored = pattern.startswith("/")
    if anchored:
        pattern = pattern[1:]

    return IgnoreRule(
        pattern=pattern,
        directory_only=directory_only,
        anchored=anchored,
        negate=negate,
        has_slash="/" in pattern,
    )


def parse_options(path: Path) -> Tuple[bool, Tuple[str, ...]]:
    """Return ``(typed_language, extensions)`` for parsing a module at ``path``."""
    entry = _KINDS_BY_SUFFIX.get(path.suffix.lower())
    if entry is None:
        return True, ("decorators",)
    return entry[1], entry[2]


def _parse_gitignore(path: Path) -> List[IgnoreRule]:
    if not path.exists():
        return []

    rules: List[IgnoreRule] = []
    for raw_line in path.read_text(encoding="utf-8", errors="replace").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        negate = line.startswith("!")
        if negate:
            line = line[1:]
        rule = build_ignore_rule(line, negate=negate)
        if rule is not None:
            rules.append(rule)
    return rules


def _load_ignore_rules(root: Path, config: AnalysisConfig) -> List[IgnoreRule]:
    rules = _parse_gitignore(root / ".gitignore")
    for pattern in config.exclude_paths:
        rule = build_ignore_rule(pattern)
        if rule is not None:
            rules.append(rule)
    return rules


def _should_ignore(rel_path: str, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    ignored = False
    for rule in rules:
        if rule.matches(rel_path, is_dir):
            ignored = not rule.negate
    return ignored


def _iter_files(root: Path, rules: Sequence[IgnoreRule]) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(root):
        current_dir = Path(dirpath)
        rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

        kept_dirs = []
        for name in sorted(dirnames):
            if name in _EXCLUDED_DIRS:
                continue
            rel_path = f"{rel_dir}/{name}" if rel_dir else name
            if _should_ignore(rel_path, True, rules):
                continue
            kept_dirs.append(name)
        dirnames[:] = kept_dirs

        for filename in sorted(filenames):
            rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
            if _should_ignore(rel_path, False, rules):
                continue
            yield current_dir / filename


class RepoScanner:
    """Walks a project tree and selects the files vuescan can analyze."""

    def scan(self, root: str | Path, config: AnalysisConfig | None = None) -> List[DiscoveredFile]:
        """Return discovered files in deterministic (sorted, top-down) order."""
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            raise FileNotFoundError(f"Project path not found: {root}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Project path is not a directory: {root}")

        if config is None:
            try:
                config = load_config(root_path)
            except ConfigError as exc:
                logger.warning("Ignoring unreadable configuration: %s", exc)
                config = AnalysisConfig(root=root_path)

        extensions = {ext.lower() for ext in config.extensions}
        ignored_names = set(config.ignore_files)
        rules = _load_ignore_rules(root_path, config)

        discovered: List[DiscoveredFile] = []
        for path in _iter_files(root_path, rules):
            suffix = path.suffix.lower()
            if suffix not in extensions or path.name in ignored_names:
                continue
            entry = _KINDS_BY_SUFFIX.get(suffix)
            if entry is None:
                logger.debug("Skipping %s: no analyzer for %s files", path, suffix)
                continue
            kind, typed_language, parse_extensions = entry
            discovered.append(
                DiscoveredFile(
                    path=path,
                    relative=path.relative_to(root_path).as_posix(),
                    kind=kind,
                    typed_language=typed_language,
                    extensions=parse_extensions,
                )
            )

        logger.debug("Discovered %d file(s) under %s", len(discovered), root_path)
        return discovered


__all__ = [
    "DiscoveredFile",
    "FileKind",
    "IgnoreRule",
    "RepoScanner",
    "build_ignore_rule",
    "parse_options",
]
