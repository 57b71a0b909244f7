"""
Party ranking runner.

Computes the final consensus ranking for one party from its candidates and
swipe log, and provides a batch entrypoint over CSV exports.

Usage:
    python -m party_ranking.run --config configs/config.yaml

The computation performs the following steps:
1. Validate candidates (unique titles, expected scores in [0, 1])
2. Group swipes per active member, keeping chronological order
3. Score each member with the Elo scorer
4. Normalize member vectors to a common, sorted title set
5. Aggregate into consensus ratings and rank them
6. Join ratings back to candidate ids and attach swipe tallies
"""

import argparse
import json
import logging
import sys
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Any, Iterable, List, Optional, Sequence

import pandas as pd

from .aggregation import AggregationConfig, RankAggregator, rank_titles
from .evaluation import AgreementReport, create_agreement_report
from .scoring import (
    Candidate,
    Swipe,
    RankedCandidate,
    EloConfig,
    MemberScorer,
    normalize_vectors,
    compute_swipe_tallies,
    validate_candidates
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def setup_logging(log_level: str) -> None:
    """Configure logging level from config."""
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.getLogger().setLevel(level)


@dataclass
class PartyRankingResult:
    """
    Final ranking for one party.

    Attributes:
        consensus: Consensus ratings keyed by title
        ratings_by_id: Consensus ratings keyed by candidate id (persistence key)
        rankings: Candidates in final order, best first
        member_vectors: Normalized member vectors keyed by member id
        agreement: Optional agreement diagnostics
    """
    consensus: Dict[str, float] = field(default_factory=dict)
    ratings_by_id: Dict[str, float] = field(default_factory=dict)
    rankings: List[RankedCandidate] = field(default_factory=list)
    member_vectors: Dict[str, Dict[str, float]] = field(default_factory=dict)
    agreement: Optional[AgreementReport] = None

    @property
    def is_empty(self) -> bool:
        """True when there was nothing to rank."""
        return not self.rankings

    def top(self, n: int = 5) -> List[RankedCandidate]:
        """Best ``n`` candidates."""
        return self.rankings[:n]

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "rankings": [r.to_dict() for r in self.rankings],
            "ratings_by_id": dict(self.ratings_by_id),
            "n_members": len(self.member_vectors)
        }
        if self.agreement:
            result["agreement"] = self.agreement.to_dict()
        return result

    def to_frame(self) -> pd.DataFrame:
        """Rankings as a DataFrame, one row per candidate."""
        columns = ["rank", "candidate_id", "title", "genres", "rating",
                   "total_swipes", "right_swipes", "left_swipes"]
        rows = []
        for ranked in self.rankings:
            row = ranked.to_dict()
            row["genres"] = "|".join(row["genres"])
            rows.append(row)
        return pd.DataFrame(rows, columns=columns)

    def save(self, output_dir: str) -> Dict[str, str]:
        """
        Write rankings.csv, rankings.json and agreement_report.json.

        Args:
            output_dir: Directory to write into (created if missing)

        Returns:
            Dictionary mapping artifact name to file path
        """
        out = Path(output_dir)
        out.mkdir(parents=True, exist_ok=True)

        paths = {
            "rankings_csv": str(out / "rankings.csv"),
            "rankings_json": str(out / "rankings.json")
        }
        self.to_frame().to_csv(paths["rankings_csv"], index=False)
        with open(paths["rankings_json"], "w") as f:
            json.dump(self.to_dict(), f, indent=2)

        if self.agreement:
            paths["agreement_report"] = str(out / "agreement_report.json")
            self.agreement.save(paths["agreement_report"])

        logger.info(f"Saved party rankings to {out}")
        return paths


def group_swipes_by_member(
    swipes: Iterable[Swipe],
    member_ids: Optional[Sequence[str]] = None
) -> Dict[str, List[Swipe]]:
    """
    Split the party swipe log into per-member logs.

    Order within each member's log is the order of ``swipes``.

    Args:
        swipes: Party swipe log in chronological order
        member_ids: Active members. Each gets an entry even with no swipes,
            and swipes from anyone else are dropped. When None, members are
            taken from the log in first-appearance order.

    Returns:
        Dictionary mapping member id to that member's swipes
    """
    if member_ids is not None:
        by_member = {member_id: [] for member_id in member_ids}
        dropped = 0
        for swipe in swipes:
            if swipe.member_id in by_member:
                by_member[swipe.member_id].append(swipe)
            else:
                dropped += 1
        if dropped:
            logger.info(f"Ignored {dropped} swipes from inactive members")
        return by_member

    by_member = {}
    for swipe in swipes:
        by_member.setdefault(swipe.member_id, []).append(swipe)
    return by_member


def compute_party_rankings(
    candidates: Iterable[Candidate],
    swipes: Iterable[Swipe],
    member_ids: Optional[Sequence[str]] = None,
    elo_config: Optional[EloConfig] = None,
    aggregation_config: Optional[AggregationConfig] = None,
    max_workers: int = 1,
    with_agreement: bool = True
) -> PartyRankingResult:
    """
    Compute the consensus ranking for one party.

    Args:
        candidates: Party candidates (titles must be unique)
        swipes: Party swipe log in chronological order
        member_ids: Active members (see ``group_swipes_by_member``)
        elo_config: Per-member scoring parameters
        aggregation_config: Aggregation policy
        max_workers: Threads used to score members (1 = sequential)
        with_agreement: Whether to build the agreement report

    Returns:
        PartyRankingResult; empty when there are no candidates

    Raises:
        RatingValidationError: On invalid expected scores or non-finite ratings
        DuplicateTitleError: If two candidates share a title
        ValueError: If max_workers is not a positive integer
    """
    if isinstance(max_workers, bool) or not isinstance(max_workers, int) or max_workers < 1:
        raise ValueError(f"max_workers must be a positive integer, got {max_workers!r}")

    candidates = validate_candidates(candidates)
    swipes = list(swipes)
    elo_config = elo_config or EloConfig()

    if not candidates:
        logger.info("No candidates in party; nothing to rank")
        return PartyRankingResult()

    scorer = MemberScorer(elo_config)
    aggregator = RankAggregator(aggregation_config)

    swipes_by_member = group_swipes_by_member(swipes, member_ids)
    member_order = list(swipes_by_member)
    logger.info(f"Scoring {len(member_order)} members over {len(candidates)} candidates")

    def _score(member_id: str) -> Dict[str, float]:
        return scorer.score(candidates, swipes_by_member[member_id])

    if max_workers > 1 and len(member_order) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            raw_vectors = list(executor.map(_score, member_order))
    else:
        raw_vectors = [_score(member_id) for member_id in member_order]

    titles = [c.title for c in candidates]
    normalized = normalize_vectors(raw_vectors, titles, elo_config.base_rating)
    member_vectors = dict(zip(member_order, normalized))

    if normalized:
        exact = aggregator.aggregate_exact(normalized)
        consensus = {title: float(value) for title, value in exact.items()}
    else:
        logger.warning("No active members; every candidate keeps the baseline rating")
        exact = None
        consensus = {title: elo_config.base_rating for title in sorted(titles)}
    ranked_titles = rank_titles(consensus, exact=exact)

    by_title = {c.title: c for c in candidates}
    tallies = compute_swipe_tallies(candidates, swipes)
    rankings = []
    for position, (title, rating) in enumerate(ranked_titles, start=1):
        candidate = by_title[title]
        rankings.append(RankedCandidate(
            rank=position,
            candidate_id=candidate.candidate_id,
            title=title,
            rating=rating,
            genres=candidate.genres,
            tally=tallies[candidate.candidate_id]
        ))

    agreement = None
    if with_agreement:
        agreement = create_agreement_report(
            member_vectors, consensus, ranking=[title for title, _ in ranked_titles]
        )

    return PartyRankingResult(
        consensus=consensus,
        ratings_by_id={r.candidate_id: r.rating for r in rankings},
        rankings=rankings,
        member_vectors=member_vectors,
        agreement=agreement
    )


def run_from_config(
    config_path: str,
    candidates_path: Optional[str] = None,
    swipes_path: Optional[str] = None,
    members_path: Optional[str] = None,
    output_dir: Optional[str] = None,
    top_n: Optional[int] = None
) -> Dict[str, Any]:
    """
    Run party ranking over CSV exports described by a config file.

    Args:
        config_path: Path to the configuration YAML file
        candidates_path: Overrides data.candidates.path
        swipes_path: Overrides data.swipes.path
        members_path: Overrides data.members.path
        output_dir: Overrides global.output_dir
        top_n: Overrides evaluation.top_n

    Returns:
        Dictionary with run status, artifact paths and the top rankings
    """
    from .configs import load_config, validate_config, get_config_value
    from .data_loading import load_candidates, load_swipes, load_members

    logger.info("=" * 60)
    logger.info("PARTY RANKING")
    logger.info("=" * 60)

    config = load_config(config_path)
    for issue in validate_config(config):
        logger.warning(f"Config issue: {issue}")

    setup_logging(get_config_value(config, "global.log_level", "INFO"))

    candidates_path = candidates_path or get_config_value(config, "data.candidates.path")
    swipes_path = swipes_path or get_config_value(config, "data.swipes.path")
    members_path = members_path or get_config_value(config, "data.members.path")
    effective_output_dir = output_dir or get_config_value(config, "global.output_dir", "artifacts")
    effective_top_n = top_n if top_n is not None else get_config_value(config, "evaluation.top_n", 5)

    if not candidates_path or not swipes_path:
        raise ValueError("Both a candidates file and a swipes file are required")

    candidates = load_candidates(candidates_path)
    swipes = load_swipes(swipes_path)
    member_ids = load_members(members_path) if members_path else None

    result = compute_party_rankings(
        candidates,
        swipes,
        member_ids=member_ids,
        elo_config=EloConfig.from_config(config),
        aggregation_config=AggregationConfig.from_config(config),
        max_workers=get_config_value(config, "scoring.max_workers", 1)
    )

    paths = result.save(effective_output_dir)

    logger.info(f"\nTop {effective_top_n}:")
    for ranked in result.top(effective_top_n):
        logger.info(f"  {ranked.rank}. {ranked.title} ({ranked.rating:.1f})")
    if result.agreement:
        logger.info("\n" + result.agreement.summary())

    return {
        "success": True,
        "output_dir": effective_output_dir,
        "artifacts": paths,
        "top": [r.to_dict() for r in result.top(effective_top_n)]
    }


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the party ranking runner."""
    parser = argparse.ArgumentParser(
        description="Compute consensus movie rankings for a party"
    )
    parser.add_argument(
        "--config",
        type=str,
        default="configs/config.yaml",
        help="Path to configuration file"
    )
    parser.add_argument("--candidates", type=str, default=None, help="Candidates CSV (overrides config)")
    parser.add_argument("--swipes", type=str, default=None, help="Swipes CSV (overrides config)")
    parser.add_argument("--members", type=str, default=None, help="Active members CSV (overrides config)")
    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Output directory for artifacts (overrides config)"
    )
    parser.add_argument("--top", type=int, default=None, help="Number of top candidates to log")

    args = parser.parse_args(argv)

    try:
        result = run_from_config(
            args.config,
            candidates_path=args.candidates,
            swipes_path=args.swipes,
            members_path=args.members,
            output_dir=args.output_dir,
            top_n=args.top
        )
        if result["success"]:
            logger.info("\nParty ranking completed successfully!")
            return 0
        else:
            logger.error("\nParty ranking failed!")
            return 1
    except Exception as e:
        logger.exception(f"Party ranking failed with error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
