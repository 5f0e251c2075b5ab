"""Built-in rule table for the platform's project conventions."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from ..config import CustomRuleConfig, LintConfig
from ..errors import ConfigError, RegistryError
from ..models import (
    ROLE_BACKEND_ROUTE,
    ROLE_CONFIG,
    ROLE_FRONTEND_COMPONENT,
    ROLE_OTHER,
    ROLE_SCHEMA,
    SEVERITIES,
)
from .base import Rule, RuleRegistry
from .checks import build_check

_ENTRYPOINT_PATHS = ("backend/index.*", "*/backend/index.*")

BUILTIN_RULES: tuple[Dict[str, Any], ...] = (
    {
        "id": "frontend-jsx-import-source",
        "description": "Frontend components declare the esm.sh React JSX import source pragma.",
        "roles": (ROLE_FRONTEND_COMPONENT,),
        "severity": "error",
        "kind": "require_header",
        "params": {
            "pattern": r"@jsxImportSource\s+https://esm\.sh/react",
            "max_lines": 3,
            "message": "Missing '/** @jsxImportSource https://esm.sh/react */' pragma at the top of the file",
        },
    },
    {
        "id": "frontend-no-browser-dialogs",
        "description": "Frontend components do not use alert(), prompt() or confirm().",
        "roles": (ROLE_FRONTEND_COMPONENT,),
        "severity": "warning",
        "kind": "forbid_pattern",
        "params": {
            "pattern": r"(?<![\w.])(?:window\.)?(?:alert|prompt|confirm)\s*\(",
            "message": "Browser dialogs are not supported; render the message in the UI instead",
        },
    },
    {
        "id": "frontend-esm-imports",
        "description": "Frontend components import packages through https://esm.sh URLs.",
        "roles": (ROLE_FRONTEND_COMPONENT,),
        "severity": "warning",
        "kind": "forbid_pattern",
        "params": {
            "pattern": r"^[ \t]*import\s[^;]*?\bfrom\s+[\"'](?![./]|https?:|npm:|jsr:)[^\"']+[\"']",
            "message": "Bare package specifier; import from https://esm.sh instead",
        },
    },
    {
        "id": "backend-export-fetch",
        "description": "The backend entry point exports the app's fetch handler as default.",
        "roles": (ROLE_BACKEND_ROUTE,),
        "paths": _ENTRYPOINT_PATHS,
        "severity": "error",
        "kind": "require_pattern",
        "params": {
            "pattern": r"^[ \t]*export\s+default\s+app\.fetch\b",
            "message": "Backend entry point must end with 'export default app.fetch'",
        },
    },
    {
        "id": "backend-no-serve-static",
        "description": "Backend routes do not import Hono's serveStatic middleware.",
        "roles": (ROLE_BACKEND_ROUTE,),
        "severity": "error",
        "kind": "forbid_pattern",
        "params": {
            "pattern": r"import\s*\{[^}]*\bserveStatic\b[^}]*\}\s*from\s*[\"'][^\"']*hono",
            "message": "serveStatic middleware is unavailable; serve files with the platform's utilities",
        },
    },
    {
        "id": "backend-no-cors-middleware",
        "description": "Backend routes do not add Hono's CORS middleware.",
        "roles": (ROLE_BACKEND_ROUTE,),
        "severity": "warning",
        "kind": "forbid_pattern",
        "params": {
            "pattern": r"from\s+[\"'][^\"']*hono[^\"']*/cors[\"']",
            "message": "CORS is handled by the platform; remove the cors middleware import",
        },
    },
    {
        "id": "backend-error-unwrap",
        "description": "The backend entry point registers an app.onError handler that rethrows.",
        "roles": (ROLE_BACKEND_ROUTE,),
        "paths": _ENTRYPOINT_PATHS,
        "severity": "warning",
        "kind": "require_pattern",
        "params": {
            "pattern": r"\bapp\.onError\s*\(",
            "message": "Register app.onError so errors surface with full stack traces",
        },
    },
    {
        "id": "no-deno-kv",
        "description": "Server code does not use the Deno KV store.",
        "roles": (ROLE_BACKEND_ROUTE, ROLE_SCHEMA, ROLE_OTHER),
        "severity": "error",
        "kind": "forbid_pattern",
        "params": {
            "pattern": r"\bDeno\.openKv\s*\(",
            "message": "Deno KV is unavailable; use the SQLite or blob storage modules",
        },
    },
    {
        "id": "schema-versioned-tables",
        "description": "Schema files create tables with a _v<N> suffix so migrations can add new versions.",
        "roles": (ROLE_SCHEMA,),
        "severity": "warning",
        "kind": "forbid_pattern",
        "params": {
            "pattern": (
                r"create\s+table\s+(?:if\s+not\s+exists\s+)?(?!if\s+not\s)"
                r"[`\"']?(?!\w*_v\d+\b)\w+"
            ),
            "ignore_case": True,
            "message": "Table name lacks a version suffix such as _v1",
        },
    },
    {
        "id": "config-no-inline-secrets",
        "description": "Configuration files reference secrets through environment variables.",
        "roles": (ROLE_CONFIG,),
        "severity": "error",
        "kind": "forbid_pattern",
        "params": {
            "pattern": (
                r"^[ \t]*[\"']?[\w.-]*(?:api[_-]?key|secret|token|password)[\"']?[ \t]*[:=][ \t]*"
                r"[\"']?[A-Za-z0-9_\-./+]{16,}"
            ),
            "ignore_case": True,
            "message": "Inline secret value; read it from an environment variable",
        },
    },
)


def _rule_from_entry(entry: Dict[str, Any]) -> Rule:
    return Rule(
        id=entry["id"],
        description=entry["description"],
        roles=frozenset(entry["roles"]),
        check=build_check(entry["kind"], entry["params"]),
        severity=entry["severity"],
        paths=tuple(entry.get("paths", ())),
    )


def _rule_from_custom(custom: CustomRuleConfig) -> Rule:
    try:
        return Rule(
            id=custom.id,
            description=custom.description,
            roles=frozenset(custom.roles),
            check=build_check(custom.kind, custom.params),
            severity=custom.severity,
            paths=tuple(custom.paths),
        )
    except RegistryError as exc:
        raise ConfigError(f"Invalid custom rule '{custom.id}': {exc}") from exc


def builtin_rules() -> List[Rule]:
    return [_rule_from_entry(entry) for entry in BUILTIN_RULES]


def _check_known(ids: Sequence[str], known: Sequence[str], setting: str) -> None:
    unknown = sorted(set(ids) - set(known))
    if unknown:
        raise ConfigError(f"{setting} references unknown rules: {', '.join(unknown)}")


def default_registry(config: Optional[LintConfig] = None) -> RuleRegistry:
    """Build the frozen registry from built-ins plus configuration adjustments."""
    rules = builtin_rules()
    if config is None:
        return RuleRegistry(rules).freeze()

    rule_config = config.rules
    customs = [_rule_from_custom(item) for item in rule_config.custom]
    known = [rule.id for rule in rules] + [rule.id for rule in customs]

    _check_known(rule_config.disabled, known, "rules.disabled")
    _check_known(list(rule_config.severity), known, "rules.severity")
    for rule_id, level in rule_config.severity.items():
        if level not in SEVERITIES:
            raise ConfigError(
                f"rules.severity for '{rule_id}' must be one of: {', '.join(SEVERITIES)}"
            )

    disabled = set(rule_config.disabled)
    registry = RuleRegistry()
    for rule in [*rules, *customs]:
        if rule.id in disabled:
            continue
        override = rule_config.severity.get(rule.id)
        if override is not None:
            rule = rule.with_severity(override)
        try:
            registry.register(rule)
        except RegistryError as exc:
            raise ConfigError(str(exc)) from exc
    return registry.freeze()


__all__ = ["BUILTIN_RULES", "builtin_rules", "default_registry"]
