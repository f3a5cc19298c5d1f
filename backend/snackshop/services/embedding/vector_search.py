"""Vector Search - cosine-similarity ranking over product embeddings.

A linear scan: every candidate is scored against the query vector. The
cache holds at most a few hundred products, so no index is needed.
"""

import logging
from typing import Optional, Sequence, Tuple

import numpy as np

from ...domain.shop import SnackProduct

logger = logging.getLogger(__name__)


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine of the angle between two vectors.

    Dot product divided by the product of the L2 norms. A zero vector has no
    direction, so any comparison involving one scores 0.0.

    Args:
        a: First vector
        b: Second vector

    Returns:
        Similarity in [-1.0, 1.0]

    Raises:
        ValueError: If the vectors differ in length

    Example:
        >>> cosine_similarity([1.0, 0.0], [1.0, 0.0])
        1.0
        >>> cosine_similarity([1.0, 0.0], [0.0, 1.0])
        0.0
    """
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)

    if va.shape != vb.shape:
        raise ValueError(f"Vectors must have same length ({va.size} != {vb.size})")

    norm_a = np.linalg.norm(va)
    norm_b = np.linalg.norm(vb)
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0

    return float(np.dot(va, vb) / (norm_a * norm_b))


def rank_by_similarity(
    query_vector: Sequence[float],
    candidates: Sequence[SnackProduct],
    top_k: int = 10,
    exclude_id: Optional[str] = None,
    min_similarity: Optional[float] = None,
) -> list[Tuple[SnackProduct, float]]:
    """Rank candidates by cosine similarity to a query vector.

    Args:
        query_vector: Query embedding
        candidates: Products to score; those without an embedding are skipped
        top_k: Maximum number of results
        exclude_id: Product id to leave out (the query product itself)
        min_similarity: Optional floor on the similarity score

    Returns:
        List of (product, similarity) sorted by similarity descending.
        Empty when there are no candidates.

    Notes:
        - Ties keep candidate order (stable sort)
        - Candidates embedded at another dimension (another model) are skipped
    """
    if top_k <= 0:
        return []

    dimension = len(query_vector)
    scored = []
    skipped = []
    for candidate in candidates:
        if candidate.embedding is None or candidate.id == exclude_id:
            continue
        if len(candidate.embedding) != dimension:
            skipped.append(candidate.id)
            continue
        scored.append((candidate, cosine_similarity(query_vector, candidate.embedding)))

    if skipped:
        logger.warning(
            f"Skipped {len(skipped)} products with {dimension}-incompatible embeddings: {skipped[:5]}"
        )

    scored.sort(key=lambda item: item[1], reverse=True)

    if min_similarity is not None:
        scored = [item for item in scored if item[1] >= min_similarity]

    return scored[:top_k]
