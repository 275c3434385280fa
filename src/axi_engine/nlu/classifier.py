"""
Statistical Classifier
======================

Pluggable scorers behind a single contract: text -> score per intent label.

The decision engine only sees ``classify(text) -> LayerOutcome``, so the
model family can change without touching anything downstream.

Scorers:
- FeedForwardScorer: small trained network loaded from a JSON artifact
- KeywordScorer: keyword overlap, usable without trained artifacts
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

import numpy as np

from ..errors import ArtifactError
from .preprocessor import normalize, preprocess
from .types import InterpretationResult, LayerError, LayerHit, LayerMiss, LayerOutcome, Source

logger = logging.getLogger(__name__)


@runtime_checkable
class IntentScorer(Protocol):
    """Anything that can score text against intent labels."""

    @property
    def available(self) -> bool: ...

    def score(self, text: str) -> Dict[str, float]: ...

    def classify(self, text: str) -> LayerOutcome: ...


def _best_outcome(scores: Dict[str, float], name: str) -> LayerOutcome:
    if not scores:
        return LayerMiss(f"{name}: no scores")
    intent, confidence = max(scores.items(), key=lambda kv: kv[1])
    if confidence <= 0:
        return LayerMiss(f"{name}: all scores zero")
    return LayerHit(InterpretationResult(
        intent=intent,
        confidence=confidence,
        source=Source.CLASSIFIER,
    ))


# =============================================================================
# FEED-FORWARD SCORER
# =============================================================================

def _sigmoid(x: np.ndarray) -> np.ndarray:
    return 1.0 / (1.0 + np.exp(-x))


class FeedForwardScorer:
    """
    Bag-of-tokens feed-forward network with sigmoid activations.

    Artifact format (JSON)::

        {
          "vocab": ["open", "youtub", ...],
          "labels": ["open_youtube", "play", ...],
          "layers": [
            {"weights": [[...], ...], "biases": [...]},   # input -> hidden
            ...
            {"weights": [[...], ...], "biases": [...]}    # hidden -> labels
          ]
        }

    ``weights`` of each layer has shape ``(inputs, outputs)``. Features are
    binary token presence over ``vocab`` after stopword removal and
    lemmatization.
    """

    def __init__(self, path: Optional[str | Path] = None):
        self.path = Path(path) if path else None
        self.vocab: List[str] = []
        self.labels: List[str] = []
        self.layers: List[tuple] = []
        self._index: Dict[str, int] = {}
        if self.path is not None:
            self.reload()

    @property
    def available(self) -> bool:
        return bool(self.layers)

    def reload(self) -> bool:
        """Load weights from ``path``; a missing or bad artifact disables scoring."""
        self.vocab, self.labels, self.layers, self._index = [], [], [], {}
        if self.path is None:
            return False
        try:
            self.load(self.path)
        except ArtifactError as e:
            logger.warning(f"Classifier disabled: {e}")
            return False
        return True

    def load(self, path: str | Path) -> None:
        path = Path(path)
        if not path.exists():
            raise ArtifactError(f"Classifier model not found: {path}", path=str(path))
        try:
            with open(path) as f:
                data = json.load(f)
            self.load_dict(data)
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            raise ArtifactError(f"Corrupt classifier model {path}: {e}", path=str(path)) from e
        logger.info(f"Loaded classifier ({len(self.labels)} labels, {len(self.vocab)} features)")

    def load_dict(self, data: Dict[str, Any]) -> None:
        vocab = list(data["vocab"])
        labels = list(data["labels"])
        layers = [
            (np.array(layer["weights"], dtype=float), np.array(layer["biases"], dtype=float))
            for layer in data["layers"]
        ]
        if not layers:
            raise ValueError("model has no layers")

        size = len(vocab)
        for weights, biases in layers:
            if weights.ndim != 2 or weights.shape[0] != size or biases.shape != (weights.shape[1],):
                raise ValueError("layer shapes do not chain")
            size = weights.shape[1]
        if size != len(labels):
            raise ValueError(f"output size {size} != {len(labels)} labels")

        self.vocab, self.labels, self.layers = vocab, labels, layers
        self._index = {token: i for i, token in enumerate(vocab)}

    def features(self, text: str) -> np.ndarray:
        x = np.zeros(len(self.vocab))
        for token in preprocess(text).tokens:
            i = self._index.get(token)
            if i is not None:
                x[i] = 1.0
        return x

    def score(self, text: str) -> Dict[str, float]:
        if not self.available:
            return {}
        x = self.features(text)
        if not np.any(x):
            return {}
        for weights, biases in self.layers:
            x = _sigmoid(x @ weights + biases)
        return {label: float(value) for label, value in zip(self.labels, x)}

    def classify(self, text: str) -> LayerOutcome:
        if not self.available:
            return LayerMiss("classifier unavailable")
        try:
            return _best_outcome(self.score(text), "classifier")
        except Exception as e:
            logger.error(f"Classifier failed: {e}")
            return LayerError(e, layer="classifier")


# =============================================================================
# KEYWORD SCORER
# =============================================================================

DEFAULT_INTENT_KEYWORDS = {
    "open_youtube": {"keywords": ["youtube", "videos", "video site", "yt"], "weight": 1.0},
    "search_youtube": {"keywords": ["search youtube", "find video", "look up video", "youtube search"], "weight": 1.0},
    "open_website": {"keywords": ["website", "site", "browser", "webpage", "url"], "weight": 0.8},
    "play": {"keywords": ["play", "music", "song", "tunes", "playlist", "track"], "weight": 1.0},
    "pause": {"keywords": ["pause", "hold", "stop music", "stop playing"], "weight": 1.0},
    "next": {"keywords": ["next", "skip", "following track"], "weight": 1.0},
    "volume_up": {"keywords": ["louder", "volume up", "turn up", "increase volume", "crank"], "weight": 1.0},
    "volume_down": {"keywords": ["quieter", "volume down", "turn down", "lower volume", "softer"], "weight": 1.0},
    "mute": {"keywords": ["mute", "silence", "no sound"], "weight": 1.0},
    "tell_time": {"keywords": ["time", "clock", "hour", "o'clock"], "weight": 1.0},
    "tell_joke": {"keywords": ["joke", "funny", "laugh", "humor"], "weight": 1.0},
    "greeting": {"keywords": ["hello", "hi", "hey", "good morning", "good evening"], "weight": 1.0},
    "list_files": {"keywords": ["files", "directory", "folder contents", "list"], "weight": 0.8},
    "delete_file": {"keywords": ["delete", "remove", "erase", "trash"], "weight": 0.8},
    "git_status": {"keywords": ["git", "repo", "repository", "changes"], "weight": 0.8},
    "take_screenshot": {"keywords": ["screenshot", "capture", "screen grab"], "weight": 1.0},
}


class KeywordScorer:
    """
    Keyword-overlap scorer.

    ``score = matches / len(keywords) * weight``, scaled x2 and capped at 1.0.
    Keywords match as whole words or phrases.
    """

    def __init__(self, keywords: Optional[Dict[str, Dict[str, Any]]] = None):
        self.keywords = keywords if keywords is not None else DEFAULT_INTENT_KEYWORDS

    @property
    def available(self) -> bool:
        return bool(self.keywords)

    def score(self, text: str) -> Dict[str, float]:
        padded = f" {normalize(text).replace('_', ' ')} "
        scores = {}
        for intent, entry in self.keywords.items():
            keywords = entry["keywords"]
            weight = entry.get("weight", 1.0)
            matches = sum(1 for kw in keywords if f" {kw} " in padded)
            if matches > 0:
                score = (matches / len(keywords)) * weight
                scores[intent] = min(1.0, score * 2)
        return scores

    def classify(self, text: str) -> LayerOutcome:
        try:
            return _best_outcome(self.score(text), "keyword scorer")
        except Exception as e:
            logger.error(f"Keyword scorer failed: {e}")
            return LayerError(e, layer="classifier")


def create_scorer(backend: str = "feedforward", path: Optional[str | Path] = None) -> IntentScorer:
    """Build the configured scorer backend."""
    if backend == "keyword":
        return KeywordScorer()
    if backend == "feedforward":
        return FeedForwardScorer(path)
    raise ValueError(f"Unknown classifier backend: {backend}")
