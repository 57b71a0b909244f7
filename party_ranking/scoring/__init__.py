"""Per-member scoring, vector normalization and swipe tallies."""

from .schema import (
    Candidate,
    Swipe,
    SwipeDirection,
    SwipeTally,
    RankedCandidate,
    RatingValidationError,
    DuplicateTitleError,
    InvalidSwipeError,
    validate_candidates
)
from .member_scorer import EloConfig, MemberScorer, score_member, BASE_RATING, K_FACTOR
from .normalization import normalize_vectors, pad_vector, sort_by_title
from .tallies import compute_swipe_tallies

__all__ = [
    "Candidate",
    "Swipe",
    "SwipeDirection",
    "SwipeTally",
    "RankedCandidate",
    "RatingValidationError",
    "DuplicateTitleError",
    "InvalidSwipeError",
    "validate_candidates",
    "EloConfig",
    "MemberScorer",
    "score_member",
    "BASE_RATING",
    "K_FACTOR",
    "normalize_vectors",
    "pad_vector",
    "sort_by_title",
    "compute_swipe_tallies"
]
