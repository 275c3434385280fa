"""
Decision Engine
===============

Merges rule, semantic and classifier outcomes into one Decision.

Priority:
1. A rule result always outranks the other layers. An exact rule match
   (confidence 1.0) executes outright; a weaker rule result is graded by
   the thresholds on its own.
2. Semantic at or above the execute threshold.
3. Classifier at or above the execute threshold.
4. Best remaining candidate (semantic preferred when within the close
   margin of the classifier): confirm, clarify, or unknown.

Destructive intents are checked last: an Execute below the destructive
floor becomes Confirm.
"""

import logging
from typing import Any, Dict, Iterable, Optional

from ..config import EngineConfig
from .types import (
    Decision,
    DecisionKind,
    InterpretationResult,
    LayerError,
    LayerOutcome,
    Source,
    outcome_result,
)

logger = logging.getLogger(__name__)

UNKNOWN_PROMPT = "I'm not sure what you'd like me to do. Could you rephrase that?"

CONFIRMATION_PROMPTS = {
    "open_youtube": "Did you want me to open YouTube?",
    "play": "Should I start playing music?",
    "pause": "Would you like me to pause?",
    "volume_up": "Increase the volume?",
    "volume_down": "Decrease the volume?",
    "mute": "Should I mute the sound?",
    "search_youtube": "Search YouTube for that?",
    "delete_file": "Are you sure you want to delete that file?",
    "delete_folder": "Are you sure you want to delete that folder?",
    "shutdown_system": "Should I shut down the computer?",
    "restart_system": "Should I restart the computer?",
    "git_commit": "Commit the current changes?",
    "git_push": "Push your commits to the remote?",
}

SOURCE_PRIORITY = {Source.RULES: 0, Source.SEMANTIC: 1, Source.CLASSIFIER: 2}


def generate_confirmation(intent: str, entities: Optional[Dict[str, Any]] = None) -> str:
    """Yes/no prompt for a candidate intent."""
    entities = entities or {}
    if intent == "delete_file" and entities.get("filename"):
        return f"Are you sure you want to delete {entities['filename']}?"
    if intent == "delete_folder" and entities.get("folder"):
        return f"Are you sure you want to delete the folder {entities['folder']}?"
    return CONFIRMATION_PROMPTS.get(intent, f'I think you want: "{intent}". Is that correct?')


def generate_clarification(intent: Optional[str]) -> str:
    if intent and intent != "unknown":
        return f'I\'m not quite sure - did you mean "{intent}" or something else?'
    return "I didn't quite catch that. Could you say it differently?"


def resolve_conflicts(candidates: Iterable[InterpretationResult]) -> Optional[InterpretationResult]:
    """Pick one candidate: rules > semantic > classifier, then confidence."""
    ranked = sorted(
        candidates,
        key=lambda c: (SOURCE_PRIORITY.get(c.source, 3), -c.confidence),
    )
    return ranked[0] if ranked else None


class DecisionEngine:
    """
    Threshold arithmetic over layer outcomes.

    Example:
        engine = DecisionEngine(config)
        decision = engine.decide(rules=LayerMiss(), semantic=hit, classifier=None)
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()

    def is_safe_to_execute(self, intent: str, confidence: float) -> bool:
        if self.config.is_destructive(intent):
            return confidence >= self.config.destructive_threshold
        return confidence >= self.config.execute_threshold

    def select_best_candidate(
        self,
        semantic: Optional[InterpretationResult],
        classifier: Optional[InterpretationResult],
    ) -> Optional[InterpretationResult]:
        """Semantic wins when within the close margin of the classifier."""
        if semantic is None:
            return classifier
        if classifier is None:
            return semantic
        if semantic.confidence >= classifier.confidence - self.config.semantic_close_margin:
            return semantic
        return classifier

    def decide(
        self,
        rules: Optional[LayerOutcome] = None,
        semantic: Optional[LayerOutcome] = None,
        classifier: Optional[LayerOutcome] = None,
    ) -> Decision:
        for outcome in (rules, semantic, classifier):
            if isinstance(outcome, LayerError):
                logger.warning(f"Layer {outcome.layer or '?'} errored: {outcome.error}")

        decision = self._decide(
            outcome_result(rules),
            outcome_result(semantic),
            outcome_result(classifier),
        )
        decision = self._apply_destructive_floor(decision)
        logger.info(
            f"Decision: {decision.kind.value} {decision.intent} "
            f"({decision.confidence:.2f}, {decision.source.value})"
        )
        return decision

    def _decide(
        self,
        rule: Optional[InterpretationResult],
        semantic: Optional[InterpretationResult],
        classifier: Optional[InterpretationResult],
    ) -> Decision:
        config = self.config

        if rule is not None:
            if rule.confidence >= 1.0:
                return self._execute(rule, "Exact rule match")
            return self._grade(rule, "rule")

        if semantic is not None and semantic.confidence >= config.execute_threshold:
            return self._execute(semantic, "High semantic similarity")

        if classifier is not None and classifier.confidence >= config.execute_threshold:
            return self._execute(classifier, "High classifier confidence")

        best = self.select_best_candidate(semantic, classifier)
        if best is None:
            return self.unknown(0.0)
        return self._grade(best, best.source.value)

    def _grade(self, candidate: InterpretationResult, label: str) -> Decision:
        """Map a single candidate to a decision by threshold band."""
        config = self.config
        if candidate.confidence >= config.execute_threshold:
            return self._execute(candidate, f"High {label} confidence")

        if candidate.confidence >= config.confirm_threshold:
            return Decision(
                kind=DecisionKind.CONFIRM,
                intent=candidate.intent,
                confidence=candidate.confidence,
                source=candidate.source,
                reason="Medium confidence - confirmation recommended",
                prompt=generate_confirmation(candidate.intent, candidate.entities),
                entities=dict(candidate.entities),
                matched_example=candidate.matched_example,
            )

        if candidate.confidence >= config.clarify_threshold:
            return Decision(
                kind=DecisionKind.CLARIFY,
                intent=candidate.intent,
                confidence=candidate.confidence,
                source=candidate.source,
                reason="Low confidence - clarification needed",
                prompt=generate_clarification(candidate.intent),
                entities=dict(candidate.entities),
                matched_example=candidate.matched_example,
            )

        return self.unknown(candidate.confidence, intent=candidate.intent)

    def _execute(self, candidate: InterpretationResult, reason: str) -> Decision:
        return Decision(
            kind=DecisionKind.EXECUTE,
            intent=candidate.intent,
            confidence=candidate.confidence,
            source=candidate.source,
            reason=reason,
            entities=dict(candidate.entities),
            matched_example=candidate.matched_example,
        )

    def unknown(self, confidence: float = 0.0, intent: str = "unknown") -> Decision:
        return Decision(
            kind=DecisionKind.UNKNOWN,
            intent=intent,
            confidence=confidence,
            source=Source.NONE,
            reason="Could not determine intent",
            prompt=UNKNOWN_PROMPT,
        )

    def from_context(self, result: InterpretationResult, reason: str) -> Decision:
        """Decision for a follow-up detected by the context store."""
        decision = self._grade(result, "context")
        if decision.kind is DecisionKind.EXECUTE:
            decision = Decision(
                kind=DecisionKind.EXECUTE,
                intent=result.intent,
                confidence=result.confidence,
                source=result.source,
                reason=reason,
                entities=dict(result.entities),
            )
        return self._apply_destructive_floor(decision)

    def _apply_destructive_floor(self, decision: Decision) -> Decision:
        if decision.kind is not DecisionKind.EXECUTE:
            return decision
        if self.is_safe_to_execute(decision.intent, decision.confidence):
            return decision

        logger.info(
            f"Destructive intent {decision.intent} at {decision.confidence:.2f} "
            f"downgraded to confirm"
        )
        return Decision(
            kind=DecisionKind.CONFIRM,
            intent=decision.intent,
            confidence=decision.confidence,
            source=decision.source,
            reason=f"Destructive intent requires {self.config.destructive_threshold:.2f} confidence",
            prompt=generate_confirmation(decision.intent, decision.entities),
            entities=dict(decision.entities),
            matched_example=decision.matched_example,
        )
