"""
Input and output types for party scoring.

Candidates and swipes arrive already fetched and validated by the caller;
the types here only coerce loosely-typed values (strings from CSV rows or
database rows) into their canonical form.

Title is the join key between member vectors, so every candidate title
must be unique within a party. That precondition is checked by
``validate_candidates`` before any scoring happens.
"""

import math
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any, Iterable, List, Optional, Tuple


class RatingValidationError(ValueError):
    """Raised when candidate data would produce a non-finite rating."""


class DuplicateTitleError(RatingValidationError):
    """Raised when two candidates in the same party share a title."""


class InvalidSwipeError(ValueError):
    """Raised when a swipe direction cannot be parsed."""


class SwipeDirection(Enum):
    """Swipe direction; values match the stored left/right strings."""
    ACCEPT = "right"
    REJECT = "left"

    @property
    def outcome(self) -> float:
        """Actual score used by the Elo update (1.0 accept, 0.0 reject)."""
        return 1.0 if self is SwipeDirection.ACCEPT else 0.0

    @classmethod
    def parse(cls, value: Any) -> "SwipeDirection":
        """
        Parse a direction from its stored value or its name.

        Accepts "right"/"left" and "accept"/"reject", case-insensitive.

        Raises:
            InvalidSwipeError: If the value is not a known direction
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            for member in cls:
                if key == member.value or key == member.name.lower():
                    return member
        raise InvalidSwipeError(f"Unknown swipe direction: {value!r}")


@dataclass(frozen=True)
class Candidate:
    """
    A movie eligible for ranking within one party.

    Attributes:
        candidate_id: Stable movie identifier
        title: Display title, used as the join key across member vectors
        genres: Genre tags
        expected_score: Prior probability of acceptance in [0, 1]
    """
    candidate_id: str
    title: str
    genres: Tuple[str, ...] = ()
    expected_score: float = 0.5

    def __post_init__(self):
        """Normalize genres to a tuple and expected_score to a float."""
        if not isinstance(self.genres, tuple):
            object.__setattr__(self, "genres", tuple(self.genres or ()))
        object.__setattr__(self, "expected_score", float(self.expected_score))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "candidate_id": self.candidate_id,
            "title": self.title,
            "genres": list(self.genres),
            "expected_score": self.expected_score
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Candidate":
        """Create from dictionary (accepts ``movie_id`` as the id key)."""
        return cls(
            candidate_id=str(data.get("candidate_id", data.get("movie_id"))),
            title=data["title"],
            genres=tuple(data.get("genres") or ()),
            expected_score=data.get("expected_score", 0.5)
        )


@dataclass(frozen=True)
class Swipe:
    """
    One member's accept/reject decision on one candidate.

    Attributes:
        member_id: Party member who swiped
        candidate_id: Candidate that was swiped on
        direction: SwipeDirection (strings are coerced)
    """
    member_id: str
    candidate_id: str
    direction: SwipeDirection

    def __post_init__(self):
        object.__setattr__(self, "direction", SwipeDirection.parse(self.direction))

    def to_dict(self) -> Dict[str, str]:
        """Convert to dictionary with the stored direction value."""
        return {
            "member_id": self.member_id,
            "candidate_id": self.candidate_id,
            "direction": self.direction.value
        }


@dataclass
class SwipeTally:
    """Swipe counts for one candidate across the whole party."""
    candidate_id: str
    total_swipes: int = 0
    right_swipes: int = 0
    left_swipes: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "candidate_id": self.candidate_id,
            "total_swipes": self.total_swipes,
            "right_swipes": self.right_swipes,
            "left_swipes": self.left_swipes
        }


@dataclass
class RankedCandidate:
    """
    One row of the final party ranking.

    Attributes:
        rank: 1-based position in the consensus order
        candidate_id: Stable movie identifier (persistence key)
        title: Display title
        genres: Genre tags
        rating: Consensus rating
        tally: Party-wide swipe counts for this candidate
    """
    rank: int
    candidate_id: str
    title: str
    rating: float
    genres: Tuple[str, ...] = ()
    tally: Optional[SwipeTally] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a flat dictionary (tally counts inlined)."""
        result = {
            "rank": self.rank,
            "candidate_id": self.candidate_id,
            "title": self.title,
            "genres": list(self.genres),
            "rating": float(self.rating)
        }
        if self.tally:
            result["total_swipes"] = self.tally.total_swipes
            result["right_swipes"] = self.tally.right_swipes
            result["left_swipes"] = self.tally.left_swipes
        return result


def validate_candidates(candidates: Iterable[Candidate]) -> List[Candidate]:
    """
    Check the candidate set before scoring.

    Args:
        candidates: Candidates for one party

    Returns:
        The candidates as a list, in their original order

    Raises:
        RatingValidationError: If an expected score is non-finite or outside [0, 1]
        DuplicateTitleError: If two candidates share a title
    """
    candidates = list(candidates)

    for candidate in candidates:
        e = candidate.expected_score
        if not math.isfinite(e) or not 0.0 <= e <= 1.0:
            raise RatingValidationError(
                f"expected_score must be a finite value in [0, 1], "
                f"got {e} for candidate {candidate.candidate_id!r}"
            )

    title_counts = Counter(c.title for c in candidates)
    duplicates = sorted(t for t, n in title_counts.items() if n > 1)
    if duplicates:
        raise DuplicateTitleError(f"Candidate titles must be unique within a party: {duplicates}")

    return candidates
