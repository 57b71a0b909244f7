"""
Rank aggregation across party members.

This module merges the normalized rating vectors of every member into one
consensus rating per title. Aggregation happens at the rating level: each
title's consensus value is a symmetric function of the members' ratings
for that title.

Aggregation Modes:
- mean (default): consensus = average of member ratings
- median: consensus = median of member ratings

Both modes are anonymous (only the multiset of ratings per title matters)
and strictly monotonic: if every member rates A above B, the consensus
ranks A above B. Baseline ratings imputed during normalization count
exactly like observed ones.

Combining is done in exact rational arithmetic. The float ratings
returned by ``aggregate`` are the exact values correctly rounded, so two
titles can share a float rating while their exact values differ; ranking
therefore uses the exact values (see ``RankAggregator.rank``).
"""

import json
import logging
from dataclasses import dataclass, asdict
from fractions import Fraction
from typing import Dict, Any, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

AGGREGATION_MODES = ("mean", "median")


@dataclass
class AggregationConfig:
    """
    Configuration for rank aggregation.

    Attributes:
        mode: "mean" or "median"
    """
    mode: str = "mean"

    def validate(self) -> None:
        """Validate configuration values."""
        if self.mode not in AGGREGATION_MODES:
            raise ValueError(f"Unknown aggregation mode: {self.mode}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "AggregationConfig":
        """Create from dictionary."""
        return cls(**d)

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "AggregationConfig":
        """Create from main config dictionary."""
        aggregation_config = config.get("aggregation") or {}
        return cls(mode=aggregation_config.get("mode", "mean"))

    def save(self, filepath: str) -> None:
        """Save to JSON file."""
        with open(filepath, "w") as f:
            json.dump(self.to_dict(), f, indent=2)
        logger.info(f"Saved aggregation config to {filepath}")

    @classmethod
    def load(cls, filepath: str) -> "AggregationConfig":
        """Load from JSON file."""
        with open(filepath, "r") as f:
            d = json.load(f)
        return cls.from_dict(d)


class RankAggregator:
    """
    Combines member rating vectors into a consensus rating vector.

    Attributes:
        config: AggregationConfig with the combining policy
    """

    def __init__(self, config: Optional[AggregationConfig] = None):
        """
        Initialize the aggregator.

        Args:
            config: AggregationConfig instance (defaults to mean)
        """
        self.config = config or AggregationConfig()
        self.config.validate()
        logger.info(f"Initialized RankAggregator with mode={self.config.mode}")

    def aggregate(self, vectors: Sequence[Dict[str, float]]) -> Dict[str, float]:
        """
        Merge member vectors into one consensus vector.

        Args:
            vectors: Normalized member vectors, all over the same title set

        Returns:
            Dictionary mapping each title to its consensus rating, in
            canonical title order. Empty when no vectors are given.

        Raises:
            ValueError: If the vectors do not share the same title set
        """
        return {title: float(value) for title, value in self.aggregate_exact(vectors).items()}

    def aggregate_exact(self, vectors: Sequence[Dict[str, float]]) -> Dict[str, Fraction]:
        """
        Merge member vectors into exact consensus values.

        Args:
            vectors: Normalized member vectors, all over the same title set

        Returns:
            Dictionary mapping each title to its exact consensus value, in
            canonical title order. Empty when no vectors are given.

        Raises:
            ValueError: If the vectors do not share the same title set
        """
        if len(vectors) == 0:
            return {}

        titles = sorted(vectors[0])
        expected = set(titles)
        for i, vector in enumerate(vectors[1:], start=1):
            if set(vector) != expected:
                missing = sorted(expected - set(vector))
                extra = sorted(set(vector) - expected)
                raise ValueError(
                    f"Vector {i} does not cover the same titles as vector 0 "
                    f"(missing: {missing}, extra: {extra}); normalize vectors first"
                )

        if self.config.mode == "mean":
            combine = self._combine_mean
        elif self.config.mode == "median":
            combine = self._combine_median
        else:
            raise ValueError(f"Unknown aggregation mode: {self.config.mode}")

        consensus = {}
        for title in titles:
            ratings = sorted(Fraction(vector[title]) for vector in vectors)
            consensus[title] = combine(ratings)
        return consensus

    def rank(self, vectors: Sequence[Dict[str, float]]) -> List[Tuple[str, float]]:
        """
        Aggregate and order titles by their exact consensus values.

        Args:
            vectors: Normalized member vectors, all over the same title set

        Returns:
            List of (title, rating) tuples in final ranking order
        """
        exact = self.aggregate_exact(vectors)
        consensus = {title: float(value) for title, value in exact.items()}
        return rank_titles(consensus, exact=exact)

    def _combine_mean(self, ratings: List[Fraction]) -> Fraction:
        """Arithmetic mean of one title's sorted ratings."""
        return sum(ratings, Fraction(0)) / len(ratings)

    def _combine_median(self, ratings: List[Fraction]) -> Fraction:
        """Median of one title's sorted ratings."""
        middle = len(ratings) // 2
        if len(ratings) % 2:
            return ratings[middle]
        return (ratings[middle - 1] + ratings[middle]) / 2


def rank_titles(
    consensus: Dict[str, float],
    exact: Optional[Dict[str, Fraction]] = None
) -> List[Tuple[str, float]]:
    """
    Order titles by consensus rating.

    Highest rating first; equal ratings fall back to ascending title order.
    When ``exact`` is given, titles are compared by their exact consensus
    values instead of the rounded floats.

    Args:
        consensus: Consensus ratings keyed by title
        exact: Optional exact consensus values keyed by title

    Returns:
        List of (title, rating) tuples in final ranking order
    """
    if exact is None:
        return sorted(consensus.items(), key=lambda item: (-item[1], item[0]))
    return sorted(consensus.items(), key=lambda item: (-exact[item[0]], item[0]))


def create_aggregator_from_config(config: Dict[str, Any]) -> RankAggregator:
    """
    Factory function to create RankAggregator from config.

    Args:
        config: Main configuration dictionary

    Returns:
        Configured RankAggregator instance
    """
    return RankAggregator(AggregationConfig.from_config(config))
