"""Error taxonomy for conformlint runs."""

from __future__ import annotations

from pathlib import Path


class ConformLintError(RuntimeError):
    """Base class for every error raised by conformlint."""


class AccessError(ConformLintError):
    """Raised when the project root cannot be read."""

    def __init__(self, path: Path | str, reason: str) -> None:
        super().__init__(f"Cannot read project root {path}: {reason}")
        self.path = str(path)
        self.reason = reason


class EmptyProjectError(ConformLintError):
    """Raised when a scan discovers no files to check."""

    def __init__(self, path: Path | str) -> None:
        super().__init__(f"No files found to check under {path}")
        self.path = str(path)


class RuleCheckError(ConformLintError):
    """Wraps an unexpected exception raised inside a single rule check."""

    def __init__(self, rule_id: str, path: str, cause: BaseException) -> None:
        super().__init__(
            f"Rule '{rule_id}' failed internally on {path}: {type(cause).__name__}: {cause}"
        )
        self.rule_id = rule_id
        self.path = path
        self.cause = cause


class ConfigError(ConformLintError):
    """Raised when the configuration file cannot be parsed or is invalid."""


class RegistryError(ConformLintError):
    """Raised on duplicate rule ids or mutation of a frozen registry."""


__all__ = [
    "AccessError",
    "ConfigError",
    "ConformLintError",
    "EmptyProjectError",
    "RegistryError",
    "RuleCheckError",
]
