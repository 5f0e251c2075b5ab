"""Text and JSON renderers for reports and rule listings."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List, Sequence, Tuple

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ..models import SEVERITIES, Finding
from ..rules.base import Rule
from .report import Report

FORMATS = ("text", "json")

_TEMPLATES_DIR = Path(__file__).with_name("templates")


def _create_env(templates_dir: Path) -> Environment:
    return Environment(
        loader=FileSystemLoader(str(templates_dir)),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )


_ENV = _create_env(_TEMPLATES_DIR)


def _group(findings: Sequence[Finding]) -> List[Tuple[str, List[Finding]]]:
    grouped: Dict[str, List[Finding]] = {}
    for finding in findings:
        grouped.setdefault(finding.path, []).append(finding)
    return list(grouped.items())


def render_text(report: Report, *, show_passed: bool = False) -> str:
    """Render a human-readable summary with failing rule/file pairs."""
    template = _ENV.get_template("report.txt.j2")
    severity_counts = [
        (severity, report.summary.failed_by_severity.get(severity, 0)) for severity in SEVERITIES
    ]
    passes = [finding for finding in report.findings if finding.passed]
    return template.render(
        root=report.root,
        summary=report.summary,
        severity_counts=severity_counts,
        failures_by_file=_group(report.failures),
        passes_by_file=_group(passes),
        show_passed=show_passed,
        passing=report.passing,
    )


def render_json(report: Report) -> str:
    """Render the machine-readable form; key order is fixed for stable diffs."""
    return json.dumps(report.to_dict(), indent=2, sort_keys=True) + "\n"


def render(report: Report, fmt: str = "text", *, show_passed: bool = False) -> str:
    if fmt == "json":
        return render_json(report)
    if fmt == "text":
        return render_text(report, show_passed=show_passed)
    raise ValueError(f"Unsupported report format: {fmt}")


def render_rules(rules: Sequence[Rule], fmt: str = "text") -> str:
    """Render the effective rule table in registry order."""
    if fmt == "json":
        payload = [
            {
                "id": rule.id,
                "description": rule.description,
                "severity": rule.severity,
                "roles": sorted(rule.roles),
                "paths": list(rule.paths),
                "kind": rule.check.kind,
            }
            for rule in rules
        ]
        return json.dumps(payload, indent=2, sort_keys=True) + "\n"
    if fmt != "text":
        raise ValueError(f"Unsupported rules format: {fmt}")

    lines: List[str] = []
    width = max((len(rule.id) for rule in rules), default=0)
    for rule in rules:
        roles = ", ".join(sorted(rule.roles))
        lines.append(f"{rule.id.ljust(width)}  {rule.severity:<7}  [{roles}]  {rule.description}")
    return "\n".join(lines) + "\n" if lines else ""


__all__ = ["FORMATS", "render", "render_json", "render_rules", "render_text"]
