"""Immutable scan report and its builder."""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Tuple

from ..models import SEVERITIES, SEVERITY_ERROR, Finding


@dataclass(frozen=True)
class ReportSummary:
    """Counts derived from a report's findings."""

    total: int
    passed: int
    failed: int
    failed_by_severity: Mapping[str, int]
    files_scanned: int
    rules_evaluated: int

    def to_dict(self) -> Dict[str, object]:
        return {
            "total": self.total,
            "passed": self.passed,
            "failed": self.failed,
            "failed_by_severity": dict(self.failed_by_severity),
            "files_scanned": self.files_scanned,
            "rules_evaluated": self.rules_evaluated,
        }


@dataclass(frozen=True)
class Report:
    """Final snapshot of a scan: ordered findings plus summary counts."""

    root: str
    findings: Tuple[Finding, ...]
    summary: ReportSummary = field(compare=False)

    @property
    def passing(self) -> bool:
        return self.summary.failed_by_severity.get(SEVERITY_ERROR, 0) == 0

    @property
    def failures(self) -> Tuple[Finding, ...]:
        return tuple(finding for finding in self.findings if not finding.passed)

    def by_rule(self) -> "OrderedDict[str, List[Finding]]":
        """Group findings by rule id, keeping first-seen order."""
        grouped: "OrderedDict[str, List[Finding]]" = OrderedDict()
        for finding in self.findings:
            grouped.setdefault(finding.rule_id, []).append(finding)
        return grouped

    def by_file(self) -> "OrderedDict[str, List[Finding]]":
        """Group findings by file path, keeping scan order."""
        grouped: "OrderedDict[str, List[Finding]]" = OrderedDict()
        for finding in self.findings:
            grouped.setdefault(finding.path, []).append(finding)
        return grouped

    def to_dict(self) -> Dict[str, object]:
        return {
            "root": self.root,
            "passing": self.passing,
            "summary": self.summary.to_dict(),
            "findings": [finding.to_dict() for finding in self.findings],
        }


def build_report(
    findings: Iterable[Finding],
    *,
    root: str = "",
    files_scanned: int = 0,
    rules_evaluated: int = 0,
) -> Report:
    """Aggregate findings into an immutable report."""
    ordered = tuple(findings)
    failed_by_severity: Dict[str, int] = {severity: 0 for severity in SEVERITIES}
    passed = 0
    for finding in ordered:
        if finding.passed:
            passed += 1
        else:
            failed_by_severity[finding.severity] = failed_by_severity.get(finding.severity, 0) + 1

    summary = ReportSummary(
        total=len(ordered),
        passed=passed,
        failed=len(ordered) - passed,
        failed_by_severity=MappingProxyType(failed_by_severity),
        files_scanned=files_scanned,
        rules_evaluated=rules_evaluated,
    )
    return Report(root=root, findings=ordered, summary=summary)


__all__ = ["Report", "ReportSummary", "build_report"]
