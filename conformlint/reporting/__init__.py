"""Report construction and rendering."""

from .render import FORMATS, render, render_json, render_rules, render_text
from .report import Report, ReportSummary, build_report

__all__ = [
    "FORMATS",
    "Report",
    "ReportSummary",
    "build_report",
    "render",
    "render_json",
    "render_rules",
    "render_text",
]
