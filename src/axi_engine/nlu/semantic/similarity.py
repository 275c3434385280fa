"""Vector similarity helpers."""

from typing import Sequence, Union

import numpy as np

VectorLike = Union[Sequence[float], np.ndarray]


def cosine_similarity(a: VectorLike, b: VectorLike) -> float:
    """
    Cosine similarity ``dot(a, b) / (|a| * |b|)``.

    Returns 0.0 when either vector has zero magnitude or the lengths differ.
    """
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    if a.shape != b.shape or a.size == 0:
        return 0.0

    norm_a = np.linalg.norm(a)
    norm_b = np.linalg.norm(b)
    if norm_a == 0 or norm_b == 0:
        return 0.0

    # Round off float noise so cos(v, v) is exactly 1.0
    score = round(float(np.dot(a, b) / (norm_a * norm_b)), 12)
    return max(-1.0, min(1.0, score))


def l2_normalize(vector: VectorLike) -> np.ndarray:
    vector = np.asarray(vector, dtype=float)
    norm = np.linalg.norm(vector)
    if norm == 0:
        return vector
    return vector / norm


def batch_cosine(query: np.ndarray, matrix: np.ndarray) -> np.ndarray:
    """Cosine of ``query`` against every row of ``matrix``."""
    if matrix.size == 0:
        return np.zeros(0)
    query_norm = np.linalg.norm(query)
    row_norms = np.linalg.norm(matrix, axis=1)
    if query_norm == 0:
        return np.zeros(matrix.shape[0])
    denom = row_norms * query_norm
    scores = np.divide(matrix @ query, denom, out=np.zeros(matrix.shape[0]), where=denom > 0)
    return np.clip(scores, -1.0, 1.0)
