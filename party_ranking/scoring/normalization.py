"""
Vector normalization before aggregation.

Member vectors are completed over a common title set and sorted into the
same canonical order, so the aggregator can line them up by position.
Ordering is plain Python string comparison (code points), which does not
depend on the process locale.
"""

import logging
from typing import Dict, Iterable, List, Sequence

from .member_scorer import BASE_RATING

logger = logging.getLogger(__name__)


def sort_by_title(vector: Dict[str, float]) -> Dict[str, float]:
    """Return a copy of ``vector`` with keys in canonical title order."""
    return {title: vector[title] for title in sorted(vector)}


def collect_titles(
    vectors: Sequence[Dict[str, float]],
    candidate_titles: Iterable[str] = ()
) -> List[str]:
    """
    Union of all titles across vectors and the candidate set, sorted.

    Args:
        vectors: Member rating vectors
        candidate_titles: Full party title set

    Returns:
        Sorted list of distinct titles
    """
    titles = set(candidate_titles)
    for vector in vectors:
        titles.update(vector)
    return sorted(titles)


def pad_vector(
    vector: Dict[str, float],
    titles: Iterable[str],
    base_rating: float = BASE_RATING
) -> Dict[str, float]:
    """
    Fill missing titles with the baseline rating.

    Existing ratings are kept untouched, including titles not in ``titles``.
    The result is in canonical title order.

    Args:
        vector: Member rating vector
        titles: Titles the result must cover
        base_rating: Rating used for missing titles

    Returns:
        New padded and sorted vector
    """
    padded = dict(vector)
    for title in titles:
        if title not in padded:
            padded[title] = base_rating
    return sort_by_title(padded)


def normalize_vectors(
    vectors: Sequence[Dict[str, float]],
    candidate_titles: Iterable[str] = (),
    base_rating: float = BASE_RATING
) -> List[Dict[str, float]]:
    """
    Complete and align member vectors for aggregation.

    Every output vector covers the union of titles seen in any input
    vector plus ``candidate_titles``, in the same canonical order. Input
    vectors are not modified, and output order matches input order.

    Args:
        vectors: Member rating vectors keyed by title
        candidate_titles: Full party title set
        base_rating: Rating used to fill gaps

    Returns:
        List of padded, sorted vectors
    """
    titles = collect_titles(vectors, candidate_titles)
    normalized = [pad_vector(vector, titles, base_rating) for vector in vectors]

    n_padded = sum(len(titles) - len(vector) for vector in vectors)
    if n_padded:
        logger.debug(f"Padded {n_padded} missing entries with baseline {base_rating}")

    return normalized
