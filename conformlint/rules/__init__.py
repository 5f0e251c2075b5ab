"""Rule definitions, check variants and the built-in registry."""

from .base import Rule, RuleRegistry
from .builtin import BUILTIN_RULES, builtin_rules, default_registry
from .checks import Check, CheckOutcome, build_check, check_kinds

__all__ = [
    "BUILTIN_RULES",
    "Check",
    "CheckOutcome",
    "Rule",
    "RuleRegistry",
    "build_check",
    "builtin_rules",
    "check_kinds",
    "default_registry",
]
