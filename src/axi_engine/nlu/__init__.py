"""
Natural language understanding: preprocessing, the three interpretation
layers, decision merging and multi-intent segmentation.
"""

from .types import (
    Decision,
    DecisionKind,
    InterpretationResult,
    LayerError,
    LayerHit,
    LayerMiss,
    Source,
)
from .preprocessor import preprocess, PreprocessResult
from .signals import analyze, extract_entities, extract_signals, Analysis, Signals
from .rules import DEFAULT_RULES, Rule, RuleMatcher
from .semantic import IntentVectorSet, SemanticMatcher, cosine_similarity
from .classifier import FeedForwardScorer, IntentScorer, KeywordScorer, create_scorer
from .decision import DecisionEngine, resolve_conflicts
from .segmenter import segment, SegmentationResult
from .pipeline import InterpretationPipeline

__all__ = [
    "Decision",
    "DecisionKind",
    "InterpretationResult",
    "LayerError",
    "LayerHit",
    "LayerMiss",
    "Source",
    "preprocess",
    "PreprocessResult",
    "analyze",
    "extract_entities",
    "extract_signals",
    "Analysis",
    "Signals",
    "DEFAULT_RULES",
    "Rule",
    "RuleMatcher",
    "IntentVectorSet",
    "SemanticMatcher",
    "cosine_similarity",
    "FeedForwardScorer",
    "IntentScorer",
    "KeywordScorer",
    "create_scorer",
    "DecisionEngine",
    "resolve_conflicts",
    "segment",
    "SegmentationResult",
    "InterpretationPipeline",
]
