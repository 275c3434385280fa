"""
Interpretation Types
====================

Data types shared by every interpretation layer.

- InterpretationResult: one layer's proposal (intent + confidence + entities)
- LayerHit / LayerMiss / LayerError: explicit outcome of running a layer
- Decision: the final, immutable outcome of interpretation
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Union


class Source(Enum):
    """Which layer produced an interpretation."""
    RULES = "rules"
    SEMANTIC = "semantic"
    CLASSIFIER = "classifier"
    CONTEXT = "context"
    NONE = "none"


class DecisionKind(Enum):
    """What the router should do with a decision."""
    EXECUTE = "execute"    # High confidence, run the handler
    CONFIRM = "confirm"    # Medium confidence, ask yes/no first
    CLARIFY = "clarify"    # Low confidence, offer a guess
    UNKNOWN = "unknown"    # No usable candidate


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


@dataclass(frozen=True)
class InterpretationResult:
    """A single layer's interpretation of an utterance."""
    intent: str
    confidence: float
    source: Source
    entities: Dict[str, Any] = field(default_factory=dict)
    matched_example: Optional[str] = None

    def __post_init__(self):
        # Confidence is always kept within [0, 1]
        object.__setattr__(self, "confidence", _clamp(self.confidence))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "intent": self.intent,
            "confidence": self.confidence,
            "source": self.source.value,
            "entities": dict(self.entities),
            "matched_example": self.matched_example,
        }


@dataclass(frozen=True)
class LayerHit:
    """A layer produced a candidate."""
    result: InterpretationResult


@dataclass(frozen=True)
class LayerMiss:
    """A layer found nothing. Not an error."""
    reason: str = "no match"


@dataclass(frozen=True)
class LayerError:
    """A layer failed while looking for a candidate."""
    error: Exception
    layer: str = ""


LayerOutcome = Union[LayerHit, LayerMiss, LayerError]


def outcome_result(outcome: Optional[LayerOutcome]) -> Optional[InterpretationResult]:
    """Unwrap an outcome to its result, or None for misses and errors."""
    if isinstance(outcome, LayerHit):
        return outcome.result
    return None


def describe_outcome(outcome: Optional[LayerOutcome]) -> Dict[str, Any]:
    """Render an outcome for traces."""
    if isinstance(outcome, LayerHit):
        return {"status": "hit", **outcome.result.to_dict()}
    if isinstance(outcome, LayerError):
        return {"status": "error", "layer": outcome.layer, "error": str(outcome.error)}
    if isinstance(outcome, LayerMiss):
        return {"status": "miss", "reason": outcome.reason}
    return {"status": "skipped"}


@dataclass(frozen=True)
class Decision:
    """Terminal output of interpretation."""
    kind: DecisionKind
    intent: str
    confidence: float
    source: Source
    reason: str
    prompt: Optional[str] = None
    entities: Dict[str, Any] = field(default_factory=dict)
    matched_example: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "confidence", _clamp(self.confidence))

    @property
    def is_actionable(self) -> bool:
        return self.kind is not DecisionKind.UNKNOWN

    def explain(self) -> Dict[str, Any]:
        """Decision explanation for debugging/logging."""
        return {
            "action": self.kind.value,
            "intent": self.intent,
            "confidence": f"{self.confidence * 100:.1f}%",
            "source": self.source.value,
            "reason": self.reason,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "intent": self.intent,
            "confidence": self.confidence,
            "source": self.source.value,
            "reason": self.reason,
            "prompt": self.prompt,
            "entities": dict(self.entities),
            "matched_example": self.matched_example,
        }
