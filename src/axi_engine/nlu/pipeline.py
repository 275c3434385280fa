"""
Interpretation Pipeline
=======================

Runs the three layers over one clause and hands the outcomes to the
decision engine:

    text -> analyze -> rules ──(hit)──────────────> decide
                         └─(miss)-> semantic + classifier -> decide
"""

import logging
from typing import Any, Callable, Dict, Optional

from ..config import EngineConfig
from .classifier import IntentScorer
from .decision import DecisionEngine, resolve_conflicts
from .rules import RuleMatcher, default_matcher
from .segmenter import segment
from .semantic import SemanticMatcher
from .signals import analyze
from .types import Decision, LayerError, LayerHit, LayerMiss, LayerOutcome, describe_outcome, outcome_result

logger = logging.getLogger(__name__)


def run_layer(name: str, fn: Callable[[], LayerOutcome]) -> LayerOutcome:
    """Run a layer, converting an unexpected exception into a LayerError."""
    try:
        return fn()
    except Exception as e:
        logger.error(f"{name} layer failed: {e}")
        return LayerError(e, layer=name)


class InterpretationPipeline:
    """
    Rule, semantic and classifier layers plus the decision engine.

    Any layer may be None (disabled); it then contributes nothing.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        rules: Optional[RuleMatcher] = None,
        semantic: Optional[SemanticMatcher] = None,
        classifier: Optional[IntentScorer] = None,
    ):
        self.config = config or EngineConfig()
        self.rules = rules if rules is not None else default_matcher()
        self.semantic = semantic
        self.classifier = classifier
        self.engine = DecisionEngine(self.config)

    def _rules(self, analysis) -> LayerOutcome:
        return run_layer("rules", lambda: self.rules.match(analysis))

    def _semantic(self, text: str) -> LayerOutcome:
        if self.semantic is None:
            return LayerMiss("semantic layer disabled")
        return run_layer("semantic", lambda: self.semantic.match(text))

    def _classifier(self, text: str) -> LayerOutcome:
        if self.classifier is None:
            return LayerMiss("classifier disabled")
        return run_layer("classifier", lambda: self.classifier.classify(text))

    def interpret(self, text: str) -> Decision:
        """Interpret a single clause. Rule hits skip the other layers."""
        if not text or not text.strip():
            return self.engine.unknown()

        analysis = analyze(text)
        rules = self._rules(analysis)
        if isinstance(rules, LayerHit):
            return self.engine.decide(rules=rules)

        return self.engine.decide(
            rules=rules,
            semantic=self._semantic(text),
            classifier=self._classifier(text),
        )

    def trace(self, text: str) -> Dict[str, Any]:
        """Run every layer (no short-circuit) and report each outcome."""
        analysis = analyze(text or "")
        outcomes = {
            "rules": self._rules(analysis),
            "semantic": self._semantic(text or ""),
            "classifier": self._classifier(text or ""),
        }
        candidates = [r for r in (outcome_result(o) for o in outcomes.values()) if r is not None]
        winner = resolve_conflicts(candidates)
        decision = self.interpret(text or "")
        segmentation = segment(text or "")

        return {
            "input": text,
            "normalized": analysis.normalized,
            "signals": {
                "is_question": analysis.signals.is_question,
                "question_type": analysis.signals.question_type,
                "is_command": analysis.signals.is_command,
                "has_negation": analysis.signals.has_negation,
                "sentiment": analysis.signals.sentiment,
            },
            "entities": analysis.entities,
            "layers": {name: describe_outcome(o) for name, o in outcomes.items()},
            "rule_errors": list(self.rules.last_errors),
            "top_semantic": self.semantic.top_matches(text or "") if self.semantic else [],
            "winner": winner.to_dict() if winner else None,
            "segments": segmentation.segments,
            "decision": decision.to_dict(),
            "explanation": decision.explain(),
        }
