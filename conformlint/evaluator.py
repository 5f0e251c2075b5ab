"""Applies registry rules to classified files."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import List, Sequence

from .errors import RuleCheckError
from .logging import get_logger
from .models import ClassifiedFile, Finding
from .rules.base import Rule

_LOGGER = get_logger("evaluator")


def _run_rule(rule: Rule, file: ClassifiedFile) -> Finding:
    try:
        outcome = rule.check.run(file)
    except Exception as exc:
        error = RuleCheckError(rule.id, file.path, exc)
        _LOGGER.warning("%s", error)
        return Finding(
            rule_id=rule.id,
            path=file.path,
            passed=False,
            severity=rule.severity,
            message=str(error),
            internal_error=True,
        )
    return Finding(
        rule_id=rule.id,
        path=file.path,
        passed=outcome.passed,
        severity=rule.severity,
        message=None if outcome.passed else outcome.message,
        line=None if outcome.passed else outcome.line,
    )


def evaluate_file(file: ClassifiedFile, rules: Sequence[Rule]) -> List[Finding]:
    """Return one finding per applicable rule, in rule order."""
    return [_run_rule(rule, file) for rule in rules if rule.applies_to(file)]


def evaluate(
    files: Sequence[ClassifiedFile],
    rules: Sequence[Rule],
    *,
    jobs: int = 1,
) -> List[Finding]:
    """Evaluate every file against every applicable rule.

    Findings are ordered file-major (scan order) and rule-minor (registry
    order). With ``jobs > 1`` files are evaluated on a thread pool and the
    per-file results are reassembled in scan order, so the output matches a
    sequential run.
    """
    rules = list(rules)
    if jobs <= 1 or len(files) <= 1:
        per_file = [evaluate_file(file, rules) for file in files]
    else:
        with ThreadPoolExecutor(max_workers=jobs) as pool:
            per_file = list(pool.map(lambda file: evaluate_file(file, rules), files))

    findings: List[Finding] = []
    for file_findings in per_file:
        findings.extend(file_findings)
    _LOGGER.debug("Evaluated %d files into %d findings", len(files), len(findings))
    return findings


__all__ = ["evaluate", "evaluate_file"]
