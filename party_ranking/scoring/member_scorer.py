"""
Per-member Elo scoring.

Each member's swipe log is replayed over the party's candidate set,
starting every candidate from the same baseline rating.

Update Formula:
    rating[c] += k_factor * (outcome - c.expected_score)

where outcome is 1.0 for a right swipe and 0.0 for a left swipe. The
expected score is the candidate's fixed prior, not a live opponent rating,
so updates to one candidate are additive and commute with each other.
"""

import json
import logging
import math
from dataclasses import dataclass, asdict
from typing import Dict, Any, Iterable, Optional

from .schema import Candidate, Swipe, RatingValidationError, validate_candidates

logger = logging.getLogger(__name__)

BASE_RATING = 1200.0
K_FACTOR = 32.0


@dataclass
class EloConfig:
    """
    Configuration for per-member Elo scoring.

    Attributes:
        base_rating: Starting (and imputed) rating for every candidate
        k_factor: Step size applied to each swipe
    """
    base_rating: float = BASE_RATING
    k_factor: float = K_FACTOR

    def validate(self) -> None:
        """Validate configuration values."""
        if not math.isfinite(self.base_rating):
            raise ValueError(f"base_rating must be finite, got {self.base_rating}")
        if not math.isfinite(self.k_factor) or self.k_factor <= 0:
            raise ValueError(f"k_factor must be a positive finite number, got {self.k_factor}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "EloConfig":
        """Create from dictionary."""
        return cls(**d)

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "EloConfig":
        """Create from main config dictionary."""
        elo_config = config.get("elo") or {}
        return cls(
            base_rating=float(elo_config.get("base_rating", BASE_RATING)),
            k_factor=float(elo_config.get("k_factor", K_FACTOR))
        )

    def save(self, filepath: str) -> None:
        """Save to JSON file."""
        with open(filepath, "w") as f:
            json.dump(self.to_dict(), f, indent=2)
        logger.info(f"Saved Elo config to {filepath}")


class MemberScorer:
    """
    Converts one member's swipe log into a rating vector keyed by title.

    The scorer holds only its configuration; every call to ``score`` builds
    a fresh vector, so one instance can be shared across threads scoring
    different members.

    Attributes:
        config: EloConfig with scoring parameters
    """

    def __init__(self, config: Optional[EloConfig] = None):
        self.config = config or EloConfig()
        self.config.validate()

    def score(
        self,
        candidates: Iterable[Candidate],
        swipes: Iterable[Swipe]
    ) -> Dict[str, float]:
        """
        Replay a member's swipes over the candidate set.

        Swipes are applied in the order given. Swipes on candidate ids that
        are not in the candidate set are skipped.

        Args:
            candidates: Party candidates (titles must be unique)
            swipes: One member's swipes in chronological order

        Returns:
            Dictionary mapping every candidate title to its rating

        Raises:
            RatingValidationError: If an expected score is invalid or a
                rating ends up non-finite
            DuplicateTitleError: If two candidates share a title
        """
        candidates = validate_candidates(candidates)
        by_id = {c.candidate_id: c for c in candidates}
        ratings = {c.candidate_id: self.config.base_rating for c in candidates}

        applied = 0
        skipped = 0
        for swipe in swipes:
            candidate = by_id.get(swipe.candidate_id)
            if candidate is None:
                skipped += 1
                logger.debug(f"Ignoring swipe on unknown candidate {swipe.candidate_id!r}")
                continue
            delta = self.config.k_factor * (swipe.direction.outcome - candidate.expected_score)
            ratings[candidate.candidate_id] += delta
            applied += 1

        if skipped:
            logger.debug(f"Applied {applied} swipes, ignored {skipped} on unknown candidates")

        vector = {}
        for candidate in candidates:
            rating = ratings[candidate.candidate_id]
            if not math.isfinite(rating):
                raise RatingValidationError(
                    f"Non-finite rating {rating} for candidate {candidate.candidate_id!r}"
                )
            vector[candidate.title] = rating

        return vector


def score_member(
    candidates: Iterable[Candidate],
    swipes: Iterable[Swipe],
    config: Optional[EloConfig] = None
) -> Dict[str, float]:
    """
    Score one member's swipes with a one-off MemberScorer.

    Args:
        candidates: Party candidates
        swipes: One member's swipes in chronological order
        config: Optional EloConfig (defaults: base 1200, K 32)

    Returns:
        Rating vector keyed by title
    """
    return MemberScorer(config).score(candidates, swipes)
