"""Party-wide swipe counts per candidate."""

from typing import Dict, Iterable

from .schema import Candidate, Swipe, SwipeDirection, SwipeTally


def compute_swipe_tallies(
    candidates: Iterable[Candidate],
    swipes: Iterable[Swipe]
) -> Dict[str, SwipeTally]:
    """
    Count total, right and left swipes for each candidate.

    Every candidate gets a tally, zero when nobody swiped on it. Swipes on
    unknown candidate ids are ignored.

    Args:
        candidates: Party candidates
        swipes: Swipes from all members

    Returns:
        Dictionary mapping candidate id to SwipeTally
    """
    tallies = {c.candidate_id: SwipeTally(candidate_id=c.candidate_id) for c in candidates}

    for swipe in swipes:
        tally = tallies.get(swipe.candidate_id)
        if tally is None:
            continue
        tally.total_swipes += 1
        if swipe.direction is SwipeDirection.ACCEPT:
            tally.right_swipes += 1
        else:
            tally.left_swipes += 1

    return tallies
