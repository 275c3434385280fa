"""
Text Preprocessor
=================

Normalization, tokenization, stopword removal and suffix-stripping
lemmatization. Every function here is pure: identical input always yields
identical output.
"""

import re
from dataclasses import dataclass
from typing import List, Optional

STOPWORDS = frozenset([
    "a", "an", "the", "is", "are", "was", "were", "be", "been", "being",
    "have", "has", "had", "do", "does", "did", "will", "would", "could",
    "should", "may", "might", "must", "shall", "can", "need", "dare",
    "to", "of", "in", "for", "on", "with", "at", "by", "from", "as",
    "into", "through", "during", "before", "after", "above", "below",
    "between", "under", "again", "further", "then", "once", "here",
    "there", "when", "where", "why", "how", "all", "each", "few",
    "more", "most", "other", "some", "such", "only", "own", "same",
    "so", "than", "too", "very", "just", "also",
])

# (suffix, replacement), tried in order; first match wins
LEMMA_RULES = [
    ("ing", ""),
    ("ed", ""),
    ("es", ""),
    ("s", ""),
    ("ly", ""),
    ("ies", "y"),
]

_DISALLOWED = re.compile(r"[^a-z0-9\s'-]")
_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class PreprocessResult:
    """Output of the preprocessing pipeline."""
    original: Optional[List[str]]
    tokens: List[str]
    cleaned: str
    word_count: int


def normalize(text: str) -> str:
    """Lowercase, strip punctuation outside the whitelist, collapse whitespace."""
    if not text:
        return ""
    text = _DISALLOWED.sub(" ", text.lower())
    return _WHITESPACE.sub(" ", text).strip()


def tokenize(text: str) -> List[str]:
    return [token for token in text.split() if token]


def remove_stopwords(tokens: List[str]) -> List[str]:
    return [token for token in tokens if token not in STOPWORDS]


def lemmatize(word: str) -> str:
    """Strip the first matching suffix, keeping at least three characters."""
    for suffix, replacement in LEMMA_RULES:
        if word.endswith(suffix) and len(word) > len(suffix) + 2:
            return word[: -len(suffix)] + replacement
    return word


def preprocess(
    text: str,
    remove_stops: bool = True,
    lemma: bool = True,
    keep_original: bool = True,
) -> PreprocessResult:
    """
    Full preprocessing pipeline.

    Args:
        text: Raw user input
        remove_stops: Drop tokens in ``STOPWORDS``
        lemma: Apply suffix-stripping lemmatization
        keep_original: Include the pre-filter token list in the result

    Returns:
        PreprocessResult (empty token list for empty input)
    """
    tokens = tokenize(normalize(text or ""))
    original = list(tokens)

    if remove_stops:
        tokens = remove_stopwords(tokens)
    if lemma:
        tokens = [lemmatize(token) for token in tokens]

    return PreprocessResult(
        original=original if keep_original else None,
        tokens=tokens,
        cleaned=" ".join(tokens),
        word_count=len(tokens),
    )
