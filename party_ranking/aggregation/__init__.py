"""Rank aggregation module for combining member rating vectors."""

from .rank_aggregator import (
    RankAggregator,
    AggregationConfig,
    rank_titles,
    create_aggregator_from_config
)

__all__ = [
    "RankAggregator",
    "AggregationConfig",
    "rank_titles",
    "create_aggregator_from_config"
]
