"""
Tests for the Decision Engine
=============================

Threshold bands, layer priority, the destructive floor and prompts.
"""

import pytest

from axi_engine.config import EngineConfig
from axi_engine.nlu.decision import (
    UNKNOWN_PROMPT,
    DecisionEngine,
    generate_confirmation,
    resolve_conflicts,
)
from axi_engine.nlu.types import (
    DecisionKind,
    InterpretationResult,
    LayerError,
    LayerHit,
    LayerMiss,
    Source,
)


def candidate(intent, confidence, source=Source.SEMANTIC, **entities):
    return LayerHit(InterpretationResult(intent, confidence, source, entities))


@pytest.fixture
def engine():
    return DecisionEngine(EngineConfig())


# =============================================================================
# Threshold Bands
# =============================================================================

class TestThresholds:
    """Test execute/confirm/clarify/unknown bands."""

    @pytest.mark.parametrize("confidence,kind", [
        (0.80, DecisionKind.EXECUTE),
        (0.95, DecisionKind.EXECUTE),
        (0.79, DecisionKind.CONFIRM),
        (0.55, DecisionKind.CONFIRM),
        (0.54, DecisionKind.CLARIFY),
        (0.35, DecisionKind.CLARIFY),
        (0.34, DecisionKind.UNKNOWN),
    ])
    def test_semantic_bands(self, engine, confidence, kind):
        decision = engine.decide(semantic=candidate("play", confidence))
        assert decision.kind is kind

    def test_nothing_is_unknown(self, engine):
        decision = engine.decide(rules=LayerMiss(), semantic=LayerMiss(), classifier=LayerMiss())
        assert decision.kind is DecisionKind.UNKNOWN
        assert decision.prompt == UNKNOWN_PROMPT
        assert decision.source is Source.NONE

    def test_confirm_carries_prompt(self, engine):
        decision = engine.decide(semantic=candidate("open_youtube", 0.6))
        assert decision.prompt == "Did you want me to open YouTube?"
        assert decision.reason

    def test_clarify_carries_prompt(self, engine):
        decision = engine.decide(classifier=candidate("play", 0.4, Source.CLASSIFIER))
        assert decision.kind is DecisionKind.CLARIFY
        assert decision.prompt == 'I\'m not quite sure - did you mean "play" or something else?'

    def test_custom_thresholds(self):
        engine = DecisionEngine(EngineConfig(execute_threshold=0.9, destructive_threshold=0.97))
        assert engine.decide(semantic=candidate("play", 0.85)).kind is DecisionKind.CONFIRM


# =============================================================================
# Layer Priority
# =============================================================================

class TestPriority:
    """Test how layers are merged."""

    def test_rule_outranks_everything(self, engine):
        decision = engine.decide(
            rules=candidate("pause", 1.0, Source.RULES),
            semantic=candidate("play", 1.0),
            classifier=candidate("play", 1.0, Source.CLASSIFIER),
        )
        assert decision.intent == "pause"
        assert decision.source is Source.RULES
        assert decision.kind is DecisionKind.EXECUTE
        assert decision.reason == "Exact rule match"

    def test_weak_rule_still_outranks(self, engine):
        decision = engine.decide(
            rules=candidate("ambiguous", 0.3, Source.RULES),
            semantic=candidate("play", 0.99),
        )
        assert decision.intent == "ambiguous"
        assert decision.kind is DecisionKind.UNKNOWN

    def test_semantic_execute_before_classifier(self, engine):
        decision = engine.decide(
            semantic=candidate("play", 0.85),
            classifier=candidate("pause", 0.99, Source.CLASSIFIER),
        )
        assert decision.intent == "play"

    def test_classifier_execute(self, engine):
        decision = engine.decide(
            semantic=candidate("play", 0.5),
            classifier=candidate("pause", 0.9, Source.CLASSIFIER),
        )
        assert decision.intent == "pause"
        assert decision.kind is DecisionKind.EXECUTE

    def test_semantic_preferred_within_margin(self, engine):
        decision = engine.decide(
            semantic=candidate("play", 0.62),
            classifier=candidate("pause", 0.70, Source.CLASSIFIER),
        )
        assert decision.intent == "play"
        assert decision.kind is DecisionKind.CONFIRM

    def test_classifier_when_clearly_better(self, engine):
        decision = engine.decide(
            semantic=candidate("play", 0.40),
            classifier=candidate("pause", 0.70, Source.CLASSIFIER),
        )
        assert decision.intent == "pause"

    def test_layer_error_is_absence(self, engine):
        decision = engine.decide(
            rules=LayerError(RuntimeError("boom"), "rules"),
            semantic=candidate("play", 0.9),
        )
        assert decision.intent == "play"
        assert decision.kind is DecisionKind.EXECUTE

    def test_resolve_conflicts(self):
        winner = resolve_conflicts([
            InterpretationResult("b", 0.99, Source.CLASSIFIER),
            InterpretationResult("a", 0.5, Source.RULES),
            InterpretationResult("c", 0.9, Source.SEMANTIC),
        ])
        assert winner.intent == "a"
        assert resolve_conflicts([]) is None


# =============================================================================
# Destructive Floor
# =============================================================================

class TestDestructiveFloor:
    """Destructive intents never execute below 0.95."""

    @pytest.mark.parametrize("confidence", [0.55, 0.7, 0.8, 0.9, 0.949])
    def test_below_floor_is_confirm(self, engine, confidence):
        decision = engine.decide(semantic=candidate("delete_file", confidence, filename="a.txt"))
        assert decision.kind is DecisionKind.CONFIRM
        assert decision.prompt == "Are you sure you want to delete a.txt?"

    @pytest.mark.parametrize("confidence", [0.95, 0.99])
    def test_at_floor_executes(self, engine, confidence):
        decision = engine.decide(semantic=candidate("delete_file", confidence))
        assert decision.kind is DecisionKind.EXECUTE

    def test_exact_rule_executes(self, engine):
        decision = engine.decide(rules=candidate("shutdown_system", 1.0, Source.RULES))
        assert decision.kind is DecisionKind.EXECUTE

    def test_follow_up_respects_floor(self, engine):
        result = InterpretationResult("delete_file", 0.85, Source.CONTEXT)
        assert engine.from_context(result, "test").kind is DecisionKind.CONFIRM

    def test_is_safe_to_execute(self, engine):
        assert engine.is_safe_to_execute("play", 0.8)
        assert not engine.is_safe_to_execute("git_push", 0.9)
        assert engine.is_safe_to_execute("git_push", 0.95)


class TestDecision:
    """Test the Decision value itself."""

    def test_explain(self, engine):
        explanation = engine.decide(semantic=candidate("play", 0.876)).explain()
        assert explanation == {
            "action": "execute",
            "intent": "play",
            "confidence": "87.6%",
            "source": "semantic",
            "reason": "High semantic similarity",
        }

    def test_immutable(self, engine):
        decision = engine.decide(semantic=candidate("play", 0.9))
        with pytest.raises(Exception):
            decision.intent = "pause"

    def test_confidence_clamped(self):
        assert InterpretationResult("x", 1.7, Source.RULES).confidence == 1.0
        assert InterpretationResult("x", -0.2, Source.RULES).confidence == 0.0

    def test_default_confirmation_prompt(self):
        assert generate_confirmation("lock_screen") == 'I think you want: "lock_screen". Is that correct?'
