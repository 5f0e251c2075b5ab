"""CLI parser behaviour and exit status tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from conformlint.cli import EXIT_FAILING, EXIT_FATAL, EXIT_PASSING, _build_parser, main


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "check"])
    assert args.verbose is True
    assert args.command == "check"
    assert args.path == "."


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["check", "--verbose"])
    assert args.verbose is True


def test_cli_check_options() -> None:
    parser = _build_parser()
    args = parser.parse_args(
        ["check", "proj", "--format", "json", "--allow-empty", "--jobs", "3", "-o", "out.json"]
    )
    assert args.path == "proj"
    assert args.format == "json"
    assert args.allow_empty is True
    assert args.jobs == 3
    assert args.output == "out.json"


def test_cli_allow_empty_defaults_to_config() -> None:
    args = _build_parser().parse_args(["check"])
    assert args.allow_empty is None


def test_check_passing_project_exits_zero(tmp_path: Path, capsys) -> None:
    _write(tmp_path / "backend" / "index.ts", "app.onError((e) => { throw e; });\nexport default app.fetch;\n")

    code = main(["check", str(tmp_path)])

    assert code == EXIT_PASSING
    assert "Result: PASSING" in capsys.readouterr().out


def test_check_failing_project_exits_one_with_json(tmp_path: Path, capsys) -> None:
    _write(tmp_path / "backend" / "index.ts", "Deno.serve(app.fetch);\n")

    code = main(["check", str(tmp_path), "--format", "json"])

    assert code == EXIT_FAILING
    payload = json.loads(capsys.readouterr().out)
    assert payload["passing"] is False
    failed = [record["rule_id"] for record in payload["findings"] if not record["passed"]]
    assert "backend-export-fetch" in failed


def test_check_writes_output_file(tmp_path: Path, capsys) -> None:
    project = tmp_path / "project"
    _write(project / "README.md", "# demo\n")
    output = tmp_path / "report.txt"

    code = main(["check", str(project), "--output", str(output)])

    assert code == EXIT_PASSING
    assert capsys.readouterr().out == ""
    assert output.read_text(encoding="utf-8").endswith("Result: PASSING\n")


def test_check_missing_project_is_fatal(tmp_path: Path, capsys) -> None:
    missing = tmp_path / "missing"

    with pytest.raises(SystemExit) as excinfo:
        main(["check", str(missing)])

    assert excinfo.value.code == EXIT_FATAL
    assert str(missing) in capsys.readouterr().err


def test_check_empty_project_is_fatal_unless_allowed(tmp_path: Path) -> None:
    empty = tmp_path / "empty"
    empty.mkdir()

    with pytest.raises(SystemExit) as excinfo:
        main(["check", str(empty)])
    assert excinfo.value.code == EXIT_FATAL

    assert main(["check", str(empty), "--allow-empty"]) == EXIT_PASSING


def test_check_invalid_config_is_fatal(tmp_path: Path, capsys) -> None:
    _write(tmp_path / "README.md", "# demo\n")
    _write(tmp_path / ".conformlint.yml", "rules:\n  severity:\n    no-deno-kv: fatal\n")

    with pytest.raises(SystemExit) as excinfo:
        main(["check", str(tmp_path)])

    assert excinfo.value.code == EXIT_FATAL
    assert "invalid configuration" in capsys.readouterr().err


def test_rules_command_lists_effective_rules(tmp_path: Path, capsys) -> None:
    _write(tmp_path / ".conformlint.yml", "rules:\n  disabled: [no-deno-kv]\n")

    code = main(["rules", str(tmp_path), "--format", "json"])

    assert code == EXIT_PASSING
    ids = [rule["id"] for rule in json.loads(capsys.readouterr().out)]
    assert "no-deno-kv" not in ids
    assert ids[0] == "frontend-jsx-import-source"


def test_check_yaml_file_root_reports_not_a_directory(tmp_path: Path, capsys) -> None:
    root = tmp_path / "proj.yml"
    root.write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        main(["check", str(root)])

    assert excinfo.value.code == EXIT_FATAL
    err = capsys.readouterr().err
    assert "not a directory" in err
    assert "invalid configuration" not in err


def test_check_unwritable_output_is_fatal(tmp_path: Path, capsys) -> None:
    project = tmp_path / "project"
    _write(project / "README.md", "# demo\n")
    output = tmp_path / "missing-dir" / "report.txt"

    with pytest.raises(SystemExit) as excinfo:
        main(["check", str(project), "--output", str(output)])

    assert excinfo.value.code == EXIT_FATAL
    assert "cannot write report" in capsys.readouterr().err


def test_unopenable_log_file_is_fatal(tmp_path: Path, capsys) -> None:
    log_file = tmp_path / "missing-dir" / "conformlint.log"

    with pytest.raises(SystemExit) as excinfo:
        main(["--log-file", str(log_file), "rules", str(tmp_path)])

    assert excinfo.value.code == EXIT_FATAL
    assert "cannot open log file" in capsys.readouterr().err


def test_cli_accepts_quiet_flag() -> None:
    args = _build_parser().parse_args(["--quiet", "rules"])
    assert args.quiet is True
    assert args.verbose is False
