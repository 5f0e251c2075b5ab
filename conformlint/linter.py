"""Pipeline orchestration: scan, evaluate, report."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

from .config import LintConfig, load_config, load_project_config
from .evaluator import evaluate
from .logging import get_logger
from .models import ClassifiedFile, Finding
from .reporting.report import Report, build_report
from .rules.base import RuleRegistry
from .rules.builtin import default_registry
from .scanner import FileScanner


class PipelineState(str, Enum):
    IDLE = "idle"
    SCANNING = "scanning"
    EVALUATING = "evaluating"
    REPORTED = "reported"


_ORDER = (
    PipelineState.IDLE,
    PipelineState.SCANNING,
    PipelineState.EVALUATING,
    PipelineState.REPORTED,
)


@dataclass
class LintRun:
    """State of one linter invocation; never reused across runs."""

    root: Path
    state: PipelineState = PipelineState.IDLE
    files: List[ClassifiedFile] = field(default_factory=list)
    findings: List[Finding] = field(default_factory=list)
    report: Optional[Report] = None

    def advance(self, target: PipelineState) -> None:
        if _ORDER.index(target) != _ORDER.index(self.state) + 1:
            raise RuntimeError(f"Invalid pipeline transition {self.state.value} -> {target.value}")
        self.state = target


class Linter:
    """Coordinates the scan -> evaluate -> report pipeline."""

    def __init__(
        self,
        registry: RuleRegistry | None = None,
        scanner: FileScanner | None = None,
        *,
        config: LintConfig | None = None,
        jobs: int | None = None,
    ) -> None:
        self.config = config
        self.registry = registry if registry is not None else default_registry(config)
        if scanner is None:
            if config is None:
                scanner = FileScanner()
            else:
                scanner = FileScanner(
                    exclude_paths=config.exclude_paths,
                    allow_empty=config.scan.allow_empty,
                    max_file_size=config.scan.max_file_size,
                )
        self.scanner = scanner
        if jobs is None:
            jobs = config.scan.jobs if config is not None else 1
        self.jobs = max(1, jobs)
        self.logger = get_logger("linter")
        self.last_run: Optional[LintRun] = None

    @classmethod
    def from_path(
        cls,
        root: str | Path,
        *,
        config_path: str | Path | None = None,
        allow_empty: bool | None = None,
        jobs: int | None = None,
    ) -> "Linter":
        """Build a linter from the project's configuration file."""
        if config_path:
            config = load_config(Path(config_path), required=True)
        else:
            config = load_project_config(Path(root))
        if allow_empty is not None:
            config.scan.allow_empty = allow_empty
        return cls(config=config, jobs=jobs)

    def run(self, root: str | Path) -> Report:
        """Check the project under ``root`` and return its report."""
        run = LintRun(root=Path(root).expanduser())
        self.last_run = run
        rules = self.registry.list_rules()

        run.advance(PipelineState.SCANNING)
        self.logger.info("Scanning %s", run.root)
        run.files = self.scanner.scan(run.root)
        self.logger.debug("Scanner discovered %d files", len(run.files))

        run.advance(PipelineState.EVALUATING)
        self.logger.info("Evaluating %d rules against %d files", len(rules), len(run.files))
        run.findings = evaluate(run.files, rules, jobs=self.jobs)

        run.report = build_report(
            run.findings,
            root=str(run.root.resolve()),
            files_scanned=len(run.files),
            rules_evaluated=len(rules),
        )
        run.advance(PipelineState.REPORTED)
        self.logger.info(
            "Report ready: %d checks, %d failed (%s)",
            run.report.summary.total,
            run.report.summary.failed,
            "passing" if run.report.passing else "failing",
        )
        return run.report


__all__ = ["LintRun", "Linter", "PipelineState"]
