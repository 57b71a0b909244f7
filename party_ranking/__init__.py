"""
Party Ranking - consensus movie ranking for swipe parties

This package turns independent left/right swipes from the members of a party
into a single consensus ranking of the party's candidate movies.

Key Design Decisions:
- Each member is scored independently with an Elo-style update per swipe
- Member vectors are padded to a common title set and sorted canonically
- A symmetric, monotonic combiner merges member vectors into one consensus
- Everything in scoring/aggregation is pure; I/O lives in loaders and the CLI
"""

__version__ = "1.0.0"
