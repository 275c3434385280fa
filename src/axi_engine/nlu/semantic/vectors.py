"""
Intent Vectors
==============

TF-IDF vectors for intent example phrases.

Built offline from ``config/intents/*.yaml`` and stored as JSON:

    {
      "model": "tfidf",
      "generated_at": "...",
      "vocabulary": [...],           # sorted
      "idf_weights": {token: idf},
      "intents": {
        "open_youtube": {
          "examples": [...],
          "embeddings": [[...], ...],  # L2-normalized, one per example
          "centroid": [...],
          "count": 12
        }
      }
    }
"""

import json
import logging
import math
import re
from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import numpy as np
import yaml

from ...errors import ArtifactError
from .similarity import l2_normalize

logger = logging.getLogger(__name__)

_DISALLOWED = re.compile(r"[^a-z0-9\s'-]")
_WHITESPACE = re.compile(r"\s+")


def tokenize(text: str) -> List[str]:
    """Lowercase, strip punctuation, drop single-character tokens."""
    if not text or not isinstance(text, str):
        return []
    text = _WHITESPACE.sub(" ", _DISALLOWED.sub(" ", text.lower())).strip()
    return [token for token in text.split(" ") if len(token) > 1]


@dataclass
class IntentVectors:
    """Example phrases and their vectors for one intent."""
    examples: List[str]
    embeddings: np.ndarray
    centroid: np.ndarray

    @property
    def count(self) -> int:
        return len(self.examples)


class IntentVectorSet:
    """
    Vocabulary, IDF weights and per-intent example vectors.

    Read-only at runtime; replaced wholesale on reload.
    """

    def __init__(
        self,
        vocabulary: List[str],
        idf_weights: Dict[str, float],
        intents: Dict[str, IntentVectors],
        generated_at: Optional[str] = None,
    ):
        self.vocabulary = list(vocabulary)
        self.index = {token: i for i, token in enumerate(self.vocabulary)}
        self.idf_weights = dict(idf_weights)
        self.intents = intents
        self.generated_at = generated_at

    def __len__(self) -> int:
        return len(self.intents)

    def vectorize(self, text: str) -> np.ndarray:
        """TF-IDF vector of ``text`` against this vocabulary (not normalized)."""
        vector = np.zeros(len(self.vocabulary))
        tokens = tokenize(text)
        if not tokens:
            return vector

        counts = Counter(tokens)
        total = len(tokens)
        for token, count in counts.items():
            i = self.index.get(token)
            if i is not None:
                vector[i] = (count / total) * self.idf_weights.get(token, 1.0)
        return vector

    # =========================================================================
    # BUILD
    # =========================================================================

    @classmethod
    def build(
        cls,
        examples: Dict[str, List[str]],
        max_examples_per_intent: int = 50,
        min_word_frequency: int = 2,
    ) -> "IntentVectorSet":
        """
        Build vectors from ``{intent: [utterances]}``.

        Vocabulary keeps tokens seen at least ``min_word_frequency`` times;
        IDF is ``ln(N / df) + 1`` over all kept examples.
        """
        limited = {
            intent: list(phrases)[:max_examples_per_intent]
            for intent, phrases in examples.items()
            if phrases
        }
        documents = [tokenize(p) for phrases in limited.values() for p in phrases]

        frequency = Counter(token for doc in documents for token in doc)
        vocabulary = sorted(t for t, n in frequency.items() if n >= min_word_frequency)

        doc_freq = Counter(token for doc in documents for token in set(doc))
        n_docs = len(documents)
        idf_weights = {
            token: math.log(n_docs / doc_freq[token]) + 1.0 for token in vocabulary
        }

        vector_set = cls(vocabulary, idf_weights, {}, generated_at=datetime.now().isoformat())
        for intent, phrases in limited.items():
            embeddings = np.array([l2_normalize(vector_set.vectorize(p)) for p in phrases])
            centroid = l2_normalize(embeddings.mean(axis=0))
            vector_set.intents[intent] = IntentVectors(phrases, embeddings, centroid)

        logger.info(
            f"Built vectors for {len(vector_set.intents)} intents "
            f"({n_docs} examples, {len(vocabulary)} terms)"
        )
        return vector_set

    # =========================================================================
    # PERSISTENCE
    # =========================================================================

    def to_dict(self) -> Dict[str, Any]:
        return {
            "model": "tfidf",
            "generated_at": self.generated_at,
            "vocabulary": self.vocabulary,
            "idf_weights": self.idf_weights,
            "intents": {
                intent: {
                    "examples": vectors.examples,
                    "embeddings": vectors.embeddings.tolist(),
                    "centroid": vectors.centroid.tolist(),
                    "count": vectors.count,
                }
                for intent, vectors in self.intents.items()
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "IntentVectorSet":
        vocabulary = data["vocabulary"]
        intents = {}
        for intent, entry in data.get("intents", {}).items():
            embeddings = np.array(entry["embeddings"], dtype=float)
            if embeddings.size and embeddings.shape[1] != len(vocabulary):
                raise ValueError(f"Vector size mismatch for intent '{intent}'")
            intents[intent] = IntentVectors(
                examples=list(entry["examples"]),
                embeddings=embeddings,
                centroid=np.array(entry["centroid"], dtype=float),
            )
        return cls(vocabulary, data.get("idf_weights", {}), intents, data.get("generated_at"))

    def save(self, path: str | Path) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.to_dict(), f)
        logger.info(f"Saved intent vectors to {path}")
        return path

    @classmethod
    def load(cls, path: str | Path) -> "IntentVectorSet":
        """
        Load vectors from JSON.

        Raises:
            ArtifactError: If the file is missing or malformed
        """
        path = Path(path)
        if not path.exists():
            raise ArtifactError(f"Intent vectors not found: {path}", path=str(path))
        try:
            with open(path) as f:
                return cls.from_dict(json.load(f))
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            raise ArtifactError(f"Corrupt intent vectors {path}: {e}", path=str(path)) from e


def load_intent_examples(intents_dir: str | Path) -> Dict[str, List[str]]:
    """
    Read ``*.yaml`` example files of ``{intent: [utterances]}``.

    Files are read in name order; an intent appearing in several files has
    its examples merged (duplicates dropped). Unreadable files are logged
    and skipped.
    """
    intents_dir = Path(intents_dir)
    examples: Dict[str, List[str]] = {}

    if not intents_dir.is_dir():
        logger.warning(f"Intents directory not found: {intents_dir}")
        return examples

    for example_file in sorted(intents_dir.glob("*.yaml")):
        try:
            with open(example_file) as f:
                data = yaml.safe_load(f) or {}
            if not isinstance(data, dict):
                raise ValueError("expected a mapping of intent -> utterances")

            for intent, phrases in data.items():
                merged = examples.setdefault(str(intent), [])
                for phrase in phrases or []:
                    phrase = str(phrase).strip()
                    if phrase and phrase not in merged:
                        merged.append(phrase)
        except Exception as e:
            logger.error(f"Error loading intent file {example_file}: {e}")

    logger.debug(f"Loaded examples for {len(examples)} intents from {intents_dir}")
    return examples
