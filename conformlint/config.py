"""Configuration loading for conformlint (.conformlint.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .errors import ConfigError

CONFIG_FILENAME = ".conformlint.yml"
DEFAULT_MAX_FILE_SIZE = 1024 * 1024


@dataclass
class ScanConfig:
    """Scanner behaviour settings."""

    allow_empty: bool = False
    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    jobs: int = 1


@dataclass
class CustomRuleConfig:
    """A declarative rule supplied by the project configuration."""

    id: str
    description: str
    severity: str
    roles: List[str]
    kind: str
    params: Dict[str, Any] = field(default_factory=dict)
    paths: List[str] = field(default_factory=list)


@dataclass
class RuleConfig:
    """Rule enablement, severity overrides and custom rules."""

    disabled: List[str] = field(default_factory=list)
    severity: Dict[str, str] = field(default_factory=dict)
    custom: List[CustomRuleConfig] = field(default_factory=list)


@dataclass
class LintConfig:
    """Represents the settings defined in .conformlint.yml."""

    root: Path
    scan: ScanConfig = field(default_factory=ScanConfig)
    rules: RuleConfig = field(default_factory=RuleConfig)
    exclude_paths: List[str] = field(default_factory=list)
    source: Optional[Path] = None


def load_config(config_path: Path, *, required: bool = False) -> LintConfig:
    """Load configuration from disk.

    ``config_path`` may be a project directory or a YAML file. A missing file
    yields defaults unless ``required`` is set.
    """
    if required:
        config_file = Path(config_path).expanduser().resolve()
    else:
        config_file = _resolve_config_path(Path(config_path))
    root = config_file.parent.resolve()

    if not config_file.is_file():
        if required:
            raise ConfigError(f"Configuration file not found: {config_file}")
        return LintConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")

    scan_data = _as_dict(data.get("scan"))
    scan = ScanConfig()
    if scan_data:
        allow_empty = _as_bool(scan_data.get("allow_empty"))
        if allow_empty is not None:
            scan.allow_empty = allow_empty
        max_file_size = _as_int(scan_data.get("max_file_size"))
        if max_file_size is not None:
            if max_file_size <= 0:
                raise ConfigError("scan.max_file_size must be a positive integer")
            scan.max_file_size = max_file_size
        jobs = _as_int(scan_data.get("jobs"))
        if jobs is not None:
            if jobs < 1:
                raise ConfigError("scan.jobs must be at least 1")
            scan.jobs = jobs

    rules_data = _as_dict(data.get("rules"))
    rules = RuleConfig()
    if rules_data:
        rules.disabled = _as_str_list(rules_data.get("disabled"))
        severity_data = _as_dict(rules_data.get("severity"))
        rules.severity = {
            str(rule_id): str(level).lower() for rule_id, level in severity_data.items()
        }
        raw_custom = rules_data.get("custom")
        if raw_custom is not None and not isinstance(raw_custom, list):
            raise ConfigError("rules.custom must be a list of rule definitions")
        rules.custom = [_parse_custom_rule(item, index) for index, item in enumerate(raw_custom or [])]

    return LintConfig(
        root=root,
        scan=scan,
        rules=rules,
        exclude_paths=_as_str_list(data.get("exclude_paths")),
        source=config_file,
    )


def load_project_config(root: Path) -> LintConfig:
    """Load the configuration of the project rooted at ``root``.

    Only a directory root is searched for a config file; any other path gets
    defaults and is left for the scanner to reject.
    """
    root = Path(root).expanduser()
    if not root.is_dir():
        return LintConfig(root=root.resolve())
    return load_config(root)


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.suffix.lower() not in {".yml", ".yaml"}:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _parse_custom_rule(item: Any, index: int) -> CustomRuleConfig:
    if not isinstance(item, dict):
        raise ConfigError(f"rules.custom[{index}] must be a mapping")
    missing = [key for key in ("id", "kind", "roles") if key not in item]
    if missing:
        raise ConfigError(f"rules.custom[{index}] is missing: {', '.join(missing)}")

    rule_id = _as_str(item.get("id"))
    kind = _as_str(item.get("kind"))
    if not rule_id or not kind:
        raise ConfigError(f"rules.custom[{index}] needs non-empty 'id' and 'kind'")
    roles = _as_str_list(item.get("roles"))
    if not roles:
        raise ConfigError(f"rules.custom[{index}] ('{rule_id}') must target at least one role")

    params = {
        key: value
        for key, value in item.items()
        if key not in {"id", "description", "severity", "roles", "kind", "paths"}
    }
    return CustomRuleConfig(
        id=rule_id,
        description=_as_str(item.get("description")) or rule_id,
        severity=(_as_str(item.get("severity")) or "error").lower(),
        roles=roles,
        kind=kind,
        params=params,
        paths=_as_str_list(item.get("paths")),
    )


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


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
