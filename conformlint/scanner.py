"""Project walking and file classification."""

from __future__ import annotations

import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path, PurePosixPath
from typing import Callable, Iterator, List, Sequence

from .config import DEFAULT_MAX_FILE_SIZE
from .errors import AccessError, EmptyProjectError
from .logging import get_logger
from .models import (
    ROLE_BACKEND_ROUTE,
    ROLE_CONFIG,
    ROLE_FRONTEND_COMPONENT,
    ROLE_OTHER,
    ROLE_SCHEMA,
    ROLE_TEST,
    ClassifiedFile,
)

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    "venv",
    "node_modules",
    "__pycache__",
    ".pytest_cache",
    ".mypy_cache",
    ".idea",
    ".vscode",
    "dist",
    "build",
    "coverage",
}

_EXCLUDED_FILES = {
    ".DS_Store",
    "Thumbs.db",
}

_SCRIPT_SUFFIXES = {".ts", ".tsx", ".js", ".jsx", ".mjs"}
_COMPONENT_SUFFIXES = {".tsx", ".jsx"}
_CONFIG_SUFFIXES = {".json", ".jsonc", ".yaml", ".yml", ".toml", ".ini"}
_CONFIG_NAMES = {
    "package.json",
    "deno.json",
    "deno.jsonc",
    "tsconfig.json",
    "import_map.json",
    "vite.config.ts",
    "vite.config.js",
    ".npmrc",
}
_ENTRYPOINT_STEMS = {"index", "main", "server", "app"}
_TEST_SEGMENTS = {"test", "tests", "__tests__"}
_DATA_SEGMENTS = {"database", "migrations"}
_SCHEMA_STEM_SEGMENTS = _DATA_SEGMENTS | {"shared"}

_BINARY_SNIFF_BYTES = 8192


@dataclass
class IgnoreRule:
    """Represents an ignore rule parsed from .gitignore or exclude_paths."""

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

        target = rel_path
        if self.anchored or self.has_slash:
            if fnmatchcase(target, self.pattern):
                return True
            if self.directory_only and target.startswith(f"{self.pattern}/"):
                return True
            return False

        for part in target.split("/"):
            if fnmatchcase(part, self.pattern):
                return True
        return False


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


def _parse_gitignore(path: Path) -> List[IgnoreRule]:
    if not path.is_file():
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


def _should_ignore(rel_path: str, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    ignored = False
    for rule in rules:
        if rule.matches(rel_path, is_dir):
            ignored = not rule.negate
    return ignored


# ----------------------------------------------------------------------
# Classification heuristics


def _is_backend_route(path: PurePosixPath) -> bool:
    parts = path.parts[:-1]
    if "backend" not in parts or path.suffix.lower() not in _SCRIPT_SUFFIXES:
        return False
    return path.stem.lower() in _ENTRYPOINT_STEMS or "routes" in parts


def _is_schema(path: PurePosixPath) -> bool:
    suffix = path.suffix.lower()
    if suffix == ".sql":
        return True
    if suffix not in _SCRIPT_SUFFIXES:
        return False
    parts = set(path.parts[:-1])
    if parts & _DATA_SEGMENTS:
        return True
    stem = path.stem.lower()
    return ("schema" in stem or "migration" in stem) and bool(parts & _SCHEMA_STEM_SEGMENTS)


def _is_frontend_component(path: PurePosixPath) -> bool:
    return "frontend" in path.parts[:-1] and path.suffix.lower() in _COMPONENT_SUFFIXES


def _is_config(path: PurePosixPath) -> bool:
    name = path.name.lower()
    if name in _CONFIG_NAMES or name == ".env" or name.startswith(".env."):
        return True
    if path.suffix.lower() in _CONFIG_SUFFIXES:
        return True
    return "config" in path.parts[:-1]


def _is_test(path: PurePosixPath) -> bool:
    if any(part in _TEST_SEGMENTS for part in path.parts[:-1]):
        return True
    name = path.name.lower()
    return ".test." in name or ".spec." in name or name.startswith("test_")


_ROLE_HEURISTICS: tuple[tuple[str, Callable[[PurePosixPath], bool]], ...] = (
    (ROLE_BACKEND_ROUTE, _is_backend_route),
    (ROLE_SCHEMA, _is_schema),
    (ROLE_FRONTEND_COMPONENT, _is_frontend_component),
    (ROLE_CONFIG, _is_config),
    (ROLE_TEST, _is_test),
)


def classify(relative_path: str) -> str:
    """Return the role of a POSIX relative path; the first matching heuristic wins."""
    path = PurePosixPath(relative_path)
    for role, predicate in _ROLE_HEURISTICS:
        if predicate(path):
            return role
    return ROLE_OTHER


def _is_binary(raw: bytes) -> bool:
    return b"\x00" in raw[:_BINARY_SNIFF_BYTES]


class FileScanner:
    """Walks a project tree and returns classified files in a stable order."""

    def __init__(
        self,
        *,
        exclude_paths: Sequence[str] = (),
        allow_empty: bool = False,
        max_file_size: int = DEFAULT_MAX_FILE_SIZE,
    ) -> None:
        self.exclude_paths = list(exclude_paths)
        self.allow_empty = allow_empty
        self.max_file_size = max_file_size
        self.logger = get_logger("scanner")

    def scan(self, root: str | Path) -> List[ClassifiedFile]:
        """Return the classified files under ``root``, sorted by walk order."""
        root_path = Path(root).expanduser()
        self._check_root(root_path)
        root_path = root_path.resolve()

        rules = _parse_gitignore(root_path / ".gitignore")
        for pattern in self.exclude_paths:
            rule = build_ignore_rule(pattern)
            if rule is not None:
                rules.append(rule)

        files: List[ClassifiedFile] = []
        for path in self._iter_files(root_path, rules):
            rel_path = path.relative_to(root_path).as_posix()
            classified = self._load(path, rel_path)
            if classified is not None:
                files.append(classified)

        self.logger.debug("Scanner classified %d files under %s", len(files), root_path)
        if not files and not self.allow_empty:
            raise EmptyProjectError(root_path)
        return files

    def _check_root(self, root_path: Path) -> None:
        if not root_path.exists():
            raise AccessError(root_path, "path does not exist")
        if not root_path.is_dir():
            raise AccessError(root_path, "path is not a directory")
        if not os.access(root_path, os.R_OK | os.X_OK):
            raise AccessError(root_path, "permission denied")
        try:
            with os.scandir(root_path):
                pass
        except OSError as exc:
            raise AccessError(root_path, exc.strerror or str(exc)) from exc

    def _iter_files(self, root: Path, rules: Sequence[IgnoreRule]) -> Iterator[Path]:
        def _on_error(exc: OSError) -> None:
            if Path(exc.filename or "") == root:
                raise AccessError(root, exc.strerror or str(exc)) from exc
            self.logger.warning("Skipping unreadable directory %s: %s", exc.filename, exc.strerror)

        for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
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
                if filename in _EXCLUDED_FILES:
                    continue
                rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
                if _should_ignore(rel_path, False, rules):
                    continue
                yield current_dir / filename

    def _load(self, path: Path, rel_path: str) -> ClassifiedFile | None:
        try:
            size = path.stat().st_size
            if size > self.max_file_size:
                self.logger.debug("Skipping %s (%d bytes exceeds limit)", rel_path, size)
                return None
            raw = path.read_bytes()
        except OSError as exc:
            self.logger.warning("Skipping unreadable file %s: %s", rel_path, exc)
            return None

        if _is_binary(raw):
            self.logger.debug("Skipping binary file %s", rel_path)
            return None

        return ClassifiedFile(
            path=rel_path,
            role=classify(rel_path),
            content=raw.decode("utf-8", errors="replace"),
            size=size,
        )


__all__ = ["FileScanner", "IgnoreRule", "build_ignore_rule", "classify"]
