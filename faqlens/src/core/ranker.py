"""
FAQLens - Similarity Ranker
============================
Pure scoring helpers: cosine similarity between two vectors and
selection of the closest cached FAQ for a query embedding.

Both vectors must come from the same embedding model, so their
dimensions always agree; the ranker does not re-check it.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from faqlens.src.core.models import EmbeddedFaqEntry, ScoredFaqEntry


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Return the cosine similarity of *a* and *b* in ``[-1.0, 1.0]``.

    A zero-magnitude vector has no direction; its similarity to
    anything is ``0.0``.
    """
    vec_a = np.asarray(a, dtype=np.float64)
    vec_b = np.asarray(b, dtype=np.float64)

    norm_a = np.linalg.norm(vec_a)
    norm_b = np.linalg.norm(vec_b)
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0

    # float() so scores stay plain Python numbers in the pydantic models
    return float(np.dot(vec_a, vec_b) / (norm_a * norm_b))


def score_candidates(query: Sequence[float], candidates: Sequence[EmbeddedFaqEntry]) -> list[ScoredFaqEntry]:
    """
    Score every candidate against *query*, best first.

    ``list.sort`` is stable, so candidates with equal similarity keep
    their original relative order.
    """
    scored = [ScoredFaqEntry(question=c.question, answer=c.answer, embedding=c.embedding, similarity=cosine_similarity(query, c.embedding)) for c in candidates]
    scored.sort(key=lambda s: s.similarity, reverse=True)
    return scored


def rank(query: Sequence[float], candidates: Sequence[EmbeddedFaqEntry]) -> ScoredFaqEntry | None:
    """Return the candidate most similar to *query*, or ``None`` if there are none."""
    scored = score_candidates(query, candidates)
    return scored[0] if scored else None
