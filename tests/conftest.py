"""Shared fixtures for party ranking tests."""

from __future__ import annotations

from typing import List

import pytest

from party_ranking.scoring import Candidate, Swipe


@pytest.fixture
def two_candidates() -> List[Candidate]:
    """Candidates A (expected 0.5) and B (expected 0.8)."""
    return [
        Candidate(candidate_id="a", title="A", genres=("Drama",), expected_score=0.5),
        Candidate(candidate_id="b", title="B", genres=("Comedy",), expected_score=0.8),
    ]


@pytest.fixture
def two_member_swipes() -> List[Swipe]:
    """Member 1 accepts A and rejects B; member 2 rejects A only."""
    return [
        Swipe(member_id="m1", candidate_id="a", direction="right"),
        Swipe(member_id="m2", candidate_id="a", direction="left"),
        Swipe(member_id="m1", candidate_id="b", direction="left"),
    ]
