"""Declarative check variants and the interpreter that builds them."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional

from ..config import _as_bool
from ..errors import ConfigError
from ..models import ClassifiedFile


@dataclass(frozen=True)
class CheckOutcome:
    """Result of running a single check against a file."""

    passed: bool
    message: Optional[str] = None
    line: Optional[int] = None


PASS = CheckOutcome(passed=True)


class Check(ABC):
    """Contract for checks; implementations must be pure functions of the file."""

    kind: str = ""

    @abstractmethod
    def run(self, file: ClassifiedFile) -> CheckOutcome:
        """Return the outcome of applying this check to ``file``."""


def _compile(pattern: str, ignore_case: bool = False, multiline: bool = True) -> re.Pattern[str]:
    flags = re.MULTILINE if multiline else 0
    if ignore_case:
        flags |= re.IGNORECASE
    try:
        return re.compile(pattern, flags)
    except re.error as exc:
        raise ConfigError(f"Invalid regular expression {pattern!r}: {exc}") from exc


def _line_of(text: str, offset: int) -> int:
    return text.count("\n", 0, offset) + 1


class RequirePattern(Check):
    """Fails when the pattern never matches the file content."""

    kind = "require_pattern"

    def __init__(self, pattern: str, *, ignore_case: bool = False, message: str | None = None) -> None:
        self.pattern = pattern
        self._regex = _compile(pattern, ignore_case)
        self.message = message or f"Missing required pattern: {pattern}"

    def run(self, file: ClassifiedFile) -> CheckOutcome:
        if self._regex.search(file.content):
            return PASS
        return CheckOutcome(passed=False, message=self.message)


class ForbidPattern(Check):
    """Fails on the first match of the pattern, reporting its line."""

    kind = "forbid_pattern"

    def __init__(self, pattern: str, *, ignore_case: bool = False, message: str | None = None) -> None:
        self.pattern = pattern
        self._regex = _compile(pattern, ignore_case)
        self.message = message or f"Forbidden pattern found: {pattern}"

    def run(self, file: ClassifiedFile) -> CheckOutcome:
        match = self._regex.search(file.content)
        if match is None:
            return PASS
        line = _line_of(file.content, match.start())
        snippet = match.group(0).strip()
        if len(snippet) > 80:
            snippet = snippet[:77].rstrip() + "..."
        return CheckOutcome(passed=False, message=f"{self.message} ({snippet})", line=line)


class RequireHeader(Check):
    """Fails unless the pattern matches within the first non-blank lines."""

    kind = "require_header"

    def __init__(
        self,
        pattern: str,
        *,
        max_lines: int = 5,
        ignore_case: bool = False,
        message: str | None = None,
    ) -> None:
        if max_lines < 1:
            raise ConfigError("require_header max_lines must be at least 1")
        self.pattern = pattern
        self.max_lines = max_lines
        self._regex = _compile(pattern, ignore_case, multiline=False)
        self.message = message or f"Header must match {pattern} within the first {max_lines} lines"

    def run(self, file: ClassifiedFile) -> CheckOutcome:
        seen = 0
        for line in file.content.splitlines():
            if not line.strip():
                continue
            if self._regex.search(line):
                return PASS
            seen += 1
            if seen >= self.max_lines:
                break
        return CheckOutcome(passed=False, message=self.message, line=1)


class MaxLines(Check):
    """Fails when the file is longer than ``limit`` lines."""

    kind = "max_lines"

    def __init__(self, limit: int, *, message: str | None = None) -> None:
        if limit < 1:
            raise ConfigError("max_lines limit must be at least 1")
        self.limit = limit
        self.message = message

    def run(self, file: ClassifiedFile) -> CheckOutcome:
        count = len(file.content.splitlines())
        if count <= self.limit:
            return PASS
        message = self.message or f"File has {count} lines (limit {self.limit})"
        return CheckOutcome(passed=False, message=message, line=self.limit + 1)


def _pattern_params(params: Mapping[str, Any]) -> Dict[str, Any]:
    pattern = params.get("pattern")
    if not isinstance(pattern, str) or not pattern:
        raise ConfigError("Pattern checks require a non-empty 'pattern' string")
    return {
        "ignore_case": _bool_param(params, "ignore_case"),
        "message": params.get("message") if isinstance(params.get("message"), str) else None,
    }


def _bool_param(params: Mapping[str, Any], key: str, default: bool = False) -> bool:
    if key not in params:
        return default
    value = _as_bool(params[key])
    if value is None:
        raise ConfigError(f"Check parameter '{key}' must be a boolean")
    return value


def _int_param(params: Mapping[str, Any], key: str, default: int | None = None) -> int:
    value = params.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"Check parameter '{key}' must be an integer")
    return value


def _build_require(params: Mapping[str, Any]) -> Check:
    options = _pattern_params(params)
    return RequirePattern(params["pattern"], **options)


def _build_forbid(params: Mapping[str, Any]) -> Check:
    options = _pattern_params(params)
    return ForbidPattern(params["pattern"], **options)


def _build_header(params: Mapping[str, Any]) -> Check:
    options = _pattern_params(params)
    return RequireHeader(params["pattern"], max_lines=_int_param(params, "max_lines", 5), **options)


def _build_max_lines(params: Mapping[str, Any]) -> Check:
    message = params.get("message")
    return MaxLines(
        _int_param(params, "limit"),
        message=message if isinstance(message, str) else None,
    )


_CHECK_BUILDERS: dict[str, Callable[[Mapping[str, Any]], Check]] = {
    RequirePattern.kind: _build_require,
    ForbidPattern.kind: _build_forbid,
    RequireHeader.kind: _build_header,
    MaxLines.kind: _build_max_lines,
}


def check_kinds() -> tuple[str, ...]:
    return tuple(_CHECK_BUILDERS)


def build_check(kind: str, params: Mapping[str, Any]) -> Check:
    """Interpret a tagged check variant into a runnable check."""
    builder = _CHECK_BUILDERS.get(kind)
    if builder is None:
        known = ", ".join(sorted(_CHECK_BUILDERS))
        raise ConfigError(f"Unknown check kind '{kind}' (expected one of: {known})")
    return builder(params)


__all__ = [
    "Check",
    "CheckOutcome",
    "ForbidPattern",
    "MaxLines",
    "RequireHeader",
    "RequirePattern",
    "build_check",
    "check_kinds",
]
