"""TF-IDF semantic matching."""

from .similarity import cosine_similarity, l2_normalize
from .vectors import IntentVectorSet, IntentVectors, load_intent_examples, tokenize
from .matcher import SemanticMatcher

__all__ = [
    "cosine_similarity",
    "l2_normalize",
    "IntentVectorSet",
    "IntentVectors",
    "load_intent_examples",
    "tokenize",
    "SemanticMatcher",
]
