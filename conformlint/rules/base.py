"""Rule definitions and the ordered rule registry."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from fnmatch import fnmatchcase
from typing import Dict, FrozenSet, Iterable, List, Tuple

from ..errors import RegistryError
from ..models import ROLES, SEVERITIES, ClassifiedFile
from .checks import Check


@dataclass(frozen=True)
class Rule:
    """A named check with an applicability predicate and a severity.

    A rule applies to a file when the file's role is one of ``roles`` and,
    if ``paths`` is non-empty, the file path matches at least one glob.
    """

    id: str
    description: str
    roles: FrozenSet[str]
    check: Check = field(compare=False)
    severity: str = "error"
    paths: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.id:
            raise RegistryError("Rule id must be a non-empty string")
        if self.severity not in SEVERITIES:
            raise RegistryError(
                f"Rule '{self.id}' has unknown severity '{self.severity}' "
                f"(expected one of: {', '.join(SEVERITIES)})"
            )
        unknown = sorted(set(self.roles) - set(ROLES))
        if unknown:
            raise RegistryError(f"Rule '{self.id}' targets unknown roles: {', '.join(unknown)}")

    def applies_to(self, file: ClassifiedFile) -> bool:
        if file.role not in self.roles:
            return False
        if not self.paths:
            return True
        return any(fnmatchcase(file.path, pattern) for pattern in self.paths)

    def with_severity(self, severity: str) -> "Rule":
        return replace(self, severity=severity)


class RuleRegistry:
    """Ordered, append-only table of rules; registration order is evaluation order."""

    def __init__(self, rules: Iterable[Rule] = ()) -> None:
        self._rules: List[Rule] = []
        self._index: Dict[str, Rule] = {}
        self._frozen = False
        for rule in rules:
            self.register(rule)

    def register(self, rule: Rule) -> None:
        if self._frozen:
            raise RegistryError(f"Cannot register '{rule.id}': registry is frozen")
        if rule.id in self._index:
            raise RegistryError(f"Duplicate rule id: {rule.id}")
        self._rules.append(rule)
        self._index[rule.id] = rule

    def freeze(self) -> "RuleRegistry":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def list_rules(self) -> Tuple[Rule, ...]:
        return tuple(self._rules)

    def get(self, rule_id: str) -> Rule:
        try:
            return self._index[rule_id]
        except KeyError:
            raise KeyError(f"Unknown rule id: {rule_id}") from None

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._index

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self):
        return iter(self.list_rules())


__all__ = ["Rule", "RuleRegistry"]
