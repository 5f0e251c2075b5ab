"""Core data models shared across conformlint components."""

from dataclasses import dataclass
from typing import Optional

ROLE_FRONTEND_COMPONENT = "frontend-component"
ROLE_BACKEND_ROUTE = "backend-route"
ROLE_SCHEMA = "schema"
ROLE_CONFIG = "config"
ROLE_TEST = "test"
ROLE_OTHER = "other"

# Classification priority, highest first.
ROLES = (
    ROLE_BACKEND_ROUTE,
    ROLE_SCHEMA,
    ROLE_FRONTEND_COMPONENT,
    ROLE_CONFIG,
    ROLE_TEST,
    ROLE_OTHER,
)

SEVERITY_ERROR = "error"
SEVERITY_WARNING = "warning"
SEVERITIES = (SEVERITY_ERROR, SEVERITY_WARNING)


@dataclass(frozen=True)
class ClassifiedFile:
    """A project file tagged with its inferred structural role."""

    path: str
    role: str
    content: str
    size: int = 0


@dataclass(frozen=True)
class Finding:
    """Pass/fail result for one (rule, file) pair."""

    rule_id: str
    path: str
    passed: bool
    severity: str
    message: Optional[str] = None
    line: Optional[int] = None
    internal_error: bool = False

    def to_dict(self) -> dict:
        return {
            "rule_id": self.rule_id,
            "path": self.path,
            "passed": self.passed,
            "severity": self.severity,
            "message": self.message,
            "line": self.line,
            "internal_error": self.internal_error,
        }
