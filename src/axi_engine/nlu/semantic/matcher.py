"""
Semantic Matcher
================

Compares input against every stored example vector (not only centroids,
so intents with varied phrasing still match) and reports the best intent
together with the example it matched.

A missing or corrupt vector artifact disables the matcher; ``match`` then
always returns a miss.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import numpy as np

from ...errors import ArtifactError
from ..types import InterpretationResult, LayerHit, LayerMiss, LayerOutcome, Source
from .similarity import batch_cosine
from .vectors import IntentVectorSet, load_intent_examples

logger = logging.getLogger(__name__)


class SemanticMatcher:
    """
    TF-IDF similarity matcher.

    Example:
        matcher = SemanticMatcher(vectors_path="data/intent-vectors.json")
        outcome = matcher.match("could you put on some tunes")
    """

    def __init__(
        self,
        threshold: float = 0.75,
        vectors: Optional[IntentVectorSet] = None,
        vectors_path: Optional[str | Path] = None,
        intents_dir: Optional[str | Path] = None,
        build_if_missing: bool = True,
    ):
        self.threshold = threshold
        self.vectors_path = Path(vectors_path) if vectors_path else None
        self.intents_dir = Path(intents_dir) if intents_dir else None
        self.build_if_missing = build_if_missing
        self.vectors = vectors
        if self.vectors is None:
            self.reload()

    @property
    def available(self) -> bool:
        return self.vectors is not None and len(self.vectors) > 0

    def reload(self) -> bool:
        """Replace the vector set from disk (or rebuild). Returns availability."""
        self.vectors = self._load_vectors()
        if self.available:
            logger.info(f"Semantic vectors ready ({len(self.vectors)} intents)")
        else:
            logger.warning("Semantic matching disabled: no intent vectors")
        return self.available

    def _load_vectors(self) -> Optional[IntentVectorSet]:
        if self.vectors_path is not None:
            try:
                return IntentVectorSet.load(self.vectors_path)
            except ArtifactError as e:
                logger.warning(str(e))

        if self.build_if_missing and self.intents_dir is not None:
            examples = load_intent_examples(self.intents_dir)
            if examples:
                return IntentVectorSet.build(examples)
        return None

    # =========================================================================
    # MATCHING
    # =========================================================================

    def _score_examples(self, text: str) -> List[Dict[str, Any]]:
        """Best example per intent, sorted by similarity (descending)."""
        if not self.available or not text or not text.strip():
            return []

        query = self.vectors.vectorize(text)
        if not np.any(query):
            return []

        scored = []
        for intent, vectors in self.vectors.intents.items():
            if vectors.count == 0:
                continue
            scores = batch_cosine(query, vectors.embeddings)
            best = int(np.argmax(scores))
            scored.append({
                "intent": intent,
                "confidence": float(scores[best]),
                "matched_example": vectors.examples[best],
            })

        scored.sort(key=lambda m: m["confidence"], reverse=True)
        return scored

    def match(self, text: str) -> LayerOutcome:
        if not self.available:
            return LayerMiss("semantic vectors unavailable")

        ranked = self._score_examples(text)
        if not ranked:
            return LayerMiss("no known terms")

        best = ranked[0]
        if best["confidence"] < self.threshold:
            logger.debug(
                f"Semantic best {best['intent']} ({best['confidence']:.3f}) below threshold"
            )
            return LayerMiss(f"best similarity {best['confidence']:.3f} below {self.threshold}")

        return LayerHit(InterpretationResult(
            intent=best["intent"],
            confidence=best["confidence"],
            source=Source.SEMANTIC,
            matched_example=best["matched_example"],
        ))

    def top_matches(self, text: str, n: int = 5) -> List[Dict[str, Any]]:
        """Ranked candidates, reported even when none clears the threshold."""
        return self._score_examples(text)[:n]

    def debug(self, text: str) -> Dict[str, Any]:
        if not self.available:
            return {"input": text, "error": "No intent vectors loaded"}
        top = self.top_matches(text, 5)
        return {
            "input": text,
            "top_matches": top,
            "best_match": top[0] if top else None,
            "would_match": bool(top) and top[0]["confidence"] >= self.threshold,
        }
