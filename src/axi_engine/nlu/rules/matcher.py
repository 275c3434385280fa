"""
Rule Matcher
============

Ordered, first-match-wins pattern rules.

Each rule is a plain function ``fn(analysis) -> Optional[InterpretationResult]``.
Rules are tried in registration order. A rule that raises is logged and
skipped so a single faulty rule cannot break interpretation.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional

from ..signals import Analysis, analyze
from ..types import InterpretationResult, LayerHit, LayerMiss, LayerOutcome, Source

logger = logging.getLogger(__name__)

RuleFn = Callable[[Analysis], Optional[InterpretationResult]]


def hit(intent: str, confidence: float = 1.0, **entities) -> InterpretationResult:
    """Build a rule result. ``None`` entity values are dropped."""
    return InterpretationResult(
        intent=intent,
        confidence=confidence,
        source=Source.RULES,
        entities={k: v for k, v in entities.items() if v is not None},
    )


@dataclass(frozen=True)
class Rule:
    """A named rule function belonging to a domain."""
    name: str
    domain: str
    fn: RuleFn

    @property
    def qualified_name(self) -> str:
        return f"{self.domain}/{self.name}"


class RuleMatcher:
    """
    Holds the ordered rule list.

    Example:
        matcher = RuleMatcher(DEFAULT_RULES)
        outcome = matcher.match(analyze("open youtube"))
    """

    def __init__(self, rules: Optional[Iterable[Rule]] = None):
        self._rules: List[Rule] = []
        self.last_errors: List[str] = []
        for rule in rules or []:
            self.add(rule)

    @property
    def rules(self) -> List[Rule]:
        return list(self._rules)

    def add(self, rule: Rule, index: Optional[int] = None) -> None:
        """Add a rule at the end (or at ``index``)."""
        if not callable(rule.fn):
            raise TypeError(f"Rule {rule.qualified_name} is not callable")
        if any(r.qualified_name == rule.qualified_name for r in self._rules):
            raise ValueError(f"Rule already registered: {rule.qualified_name}")
        if index is None:
            self._rules.append(rule)
        else:
            self._rules.insert(index, rule)

    def remove(self, name: str) -> bool:
        """Remove a rule by plain or qualified name. Returns True if removed."""
        before = len(self._rules)
        self._rules = [
            r for r in self._rules if name not in (r.name, r.qualified_name)
        ]
        return len(self._rules) < before

    def match(self, analysis: Analysis) -> LayerOutcome:
        """Run rules in order; the first non-None result wins."""
        if isinstance(analysis, str):
            analysis = analyze(analysis)

        self.last_errors = []
        for rule in self._rules:
            try:
                result = rule.fn(analysis)
            except Exception as e:
                logger.warning(f"Rule {rule.qualified_name} failed: {e}")
                self.last_errors.append(rule.qualified_name)
                continue

            if result is not None:
                logger.debug(f"Rule {rule.qualified_name} matched -> {result.intent}")
                return LayerHit(result)

        return LayerMiss("no rule matched")
