"""Tests for conformlint.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from conformlint.config import DEFAULT_MAX_FILE_SIZE, LintConfig, load_config, load_project_config
from conformlint.errors import ConfigError


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, LintConfig)
    assert config.root == tmp_path.resolve()
    assert config.source is None
    assert config.exclude_paths == []
    assert config.scan.allow_empty is False
    assert config.scan.max_file_size == DEFAULT_MAX_FILE_SIZE
    assert config.scan.jobs == 1
    assert config.rules.disabled == []
    assert config.rules.severity == {}
    assert config.rules.custom == []


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".conformlint.yml"
    config_file.write_text(
        """
exclude_paths:
  - "vendor/"
scan:
  allow_empty: true
  max_file_size: 2048
  jobs: 4
rules:
  disabled: [frontend-esm-imports]
  severity:
    backend-error-unwrap: ERROR
  custom:
    - id: no-console-log
      description: Backend routes do not log with console.log.
      roles: [backend-route]
      severity: warning
      kind: forbid_pattern
      pattern: '\\bconsole\\.log\\('
      paths: ["backend/**"]
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.source == config_file.resolve()
    assert config.exclude_paths == ["vendor/"]
    assert config.scan.allow_empty is True
    assert config.scan.max_file_size == 2048
    assert config.scan.jobs == 4
    assert config.rules.disabled == ["frontend-esm-imports"]
    assert config.rules.severity == {"backend-error-unwrap": "error"}

    (custom,) = config.rules.custom
    assert custom.id == "no-console-log"
    assert custom.roles == ["backend-route"]
    assert custom.severity == "warning"
    assert custom.kind == "forbid_pattern"
    assert custom.params == {"pattern": r"\bconsole\.log\("}
    assert custom.paths == ["backend/**"]


def test_load_config_from_project_directory(tmp_path: Path) -> None:
    (tmp_path / ".conformlint.yml").write_text("exclude_paths: dist/\n", encoding="utf-8")

    config = load_config(tmp_path)

    assert config.exclude_paths == ["dist/"]


def test_load_config_empty_file_returns_defaults(tmp_path: Path) -> None:
    (tmp_path / ".conformlint.yml").write_text("\n", encoding="utf-8")

    config = load_config(tmp_path)

    assert config.rules.custom == []


def test_load_config_rejects_non_mapping(tmp_path: Path) -> None:
    (tmp_path / ".conformlint.yml").write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_rejects_invalid_yaml(tmp_path: Path) -> None:
    (tmp_path / ".conformlint.yml").write_text("rules: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Failed to parse"):
        load_config(tmp_path)


def test_load_config_rejects_bad_jobs(tmp_path: Path) -> None:
    (tmp_path / ".conformlint.yml").write_text("scan:\n  jobs: 0\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="scan.jobs"):
        load_config(tmp_path)


def test_load_config_rejects_custom_rule_without_roles(tmp_path: Path) -> None:
    (tmp_path / ".conformlint.yml").write_text(
        "rules:\n  custom:\n    - id: x\n      kind: forbid_pattern\n      pattern: foo\n",
        encoding="utf-8",
    )

    with pytest.raises(ConfigError, match="roles"):
        load_config(tmp_path)


def test_load_config_required_file_must_exist(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        load_config(tmp_path / "custom.yml", required=True)


def test_load_config_ignores_non_yaml_path(tmp_path: Path) -> None:
    source = tmp_path / "index.ts"
    source.write_text("export default app.fetch;\n", encoding="utf-8")

    config = load_config(source)

    assert config.root == tmp_path.resolve()
    assert config.source is None


def test_load_project_config_ignores_yaml_file_roots(tmp_path: Path) -> None:
    root = tmp_path / "proj.yml"
    root.write_text("- not\n- a mapping\n", encoding="utf-8")

    config = load_project_config(root)

    assert config.source is None
    assert config.root == root.resolve()
    assert config.rules.custom == []


def test_load_project_config_reads_directory_config(tmp_path: Path) -> None:
    (tmp_path / ".conformlint.yml").write_text("scan:\n  jobs: 2\n", encoding="utf-8")

    config = load_project_config(tmp_path)

    assert config.scan.jobs == 2
    assert config.source == (tmp_path / ".conformlint.yml").resolve()
