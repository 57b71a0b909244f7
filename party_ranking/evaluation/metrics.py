"""
Agreement diagnostics for a party consensus.

A consensus is only useful if members can recognise their own preferences
in it. This module reports:
1. Consensus rating distribution
2. Per-member rank agreement with the consensus (Spearman)
3. Unanimity check: pairs every member orders the same way must keep
   that order in the consensus

These diagnostics describe the aggregation; they are not persisted as
ratings.
"""

import json
import logging
import math
from dataclasses import dataclass, field
from itertools import combinations
from typing import Dict, List, Any, Optional, Sequence

import numpy as np
from scipy.stats import spearmanr

logger = logging.getLogger(__name__)


@dataclass
class RatingDistributionStats:
    """Statistics about consensus rating distribution."""
    mean: float
    std: float
    min: float
    max: float
    quantiles: Dict[str, float]  # e.g., {"p10": 1190.0, "p50": 1200.0}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mean": float(self.mean),
            "std": float(self.std),
            "min": float(self.min),
            "max": float(self.max),
            "quantiles": {k: float(v) for k, v in self.quantiles.items()}
        }


@dataclass
class UnanimityCheck:
    """Results of the unanimous-order sanity check."""
    n_unanimous_pairs: int
    n_violations: int
    violations: List[List[str]] = field(default_factory=list)

    @property
    def is_monotonic(self) -> bool:
        return self.n_violations == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "n_unanimous_pairs": int(self.n_unanimous_pairs),
            "n_violations": int(self.n_violations),
            "is_monotonic": bool(self.is_monotonic),
            "violations": [list(pair) for pair in self.violations]
        }


@dataclass
class AgreementReport:
    """
    Agreement report for one party consensus.

    Attributes:
        n_members: Number of member vectors aggregated
        n_candidates: Number of titles ranked
        distribution_stats: Consensus distribution (None when nothing ranked)
        member_agreement: Spearman correlation per member (None if undefined)
        unanimity_check: Unanimous-order check results
    """
    n_members: int
    n_candidates: int
    distribution_stats: Optional[RatingDistributionStats] = None
    member_agreement: Dict[str, Optional[float]] = field(default_factory=dict)
    unanimity_check: Optional[UnanimityCheck] = None

    @property
    def mean_agreement(self) -> Optional[float]:
        values = [v for v in self.member_agreement.values() if v is not None]
        return float(np.mean(values)) if values else None

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "n_members": self.n_members,
            "n_candidates": self.n_candidates,
            "member_agreement": dict(self.member_agreement),
            "mean_agreement": self.mean_agreement
        }
        if self.distribution_stats:
            result["distribution_stats"] = self.distribution_stats.to_dict()
        if self.unanimity_check:
            result["unanimity_check"] = self.unanimity_check.to_dict()
        return result

    def save(self, filepath: str) -> None:
        """Save report to JSON file."""
        with open(filepath, "w") as f:
            json.dump(self.to_dict(), f, indent=2)
        logger.info(f"Saved agreement report to {filepath}")

    def summary(self) -> str:
        """Generate text summary of the report."""
        lines = [
            f"Agreement Report: {self.n_members} members, {self.n_candidates} candidates",
            "=" * 50,
        ]

        if self.distribution_stats:
            lines.extend([
                "",
                "Consensus Distribution:",
                f"  Mean: {self.distribution_stats.mean:.2f}",
                f"  Std:  {self.distribution_stats.std:.2f}",
                f"  Min:  {self.distribution_stats.min:.2f}",
                f"  Max:  {self.distribution_stats.max:.2f}",
            ])

        if self.member_agreement:
            lines.extend(["", "Member Agreement (Spearman):"])
            for member_id, rho in self.member_agreement.items():
                rho_text = "n/a" if rho is None else f"{rho:.4f}"
                lines.append(f"  {member_id}: {rho_text}")

        if self.unanimity_check:
            lines.extend([
                "",
                "Unanimity Check:",
                f"  Unanimous pairs: {self.unanimity_check.n_unanimous_pairs}",
                f"  Violations: {self.unanimity_check.n_violations}",
            ])

        return "\n".join(lines)


def compute_rating_distribution_stats(
    ratings: Dict[str, float],
    quantiles: List[float] = [0.1, 0.25, 0.5, 0.75, 0.9]
) -> Optional[RatingDistributionStats]:
    """
    Compute distribution statistics for consensus ratings.

    Args:
        ratings: Consensus ratings keyed by title
        quantiles: Quantile values to compute (default: p10, p25, p50, p75, p90)

    Returns:
        RatingDistributionStats instance, or None when there are no ratings
    """
    if not ratings:
        return None

    values = np.array(list(ratings.values()), dtype=float)
    quantile_dict = {
        f"p{int(q * 100)}": float(np.percentile(values, q * 100))
        for q in quantiles
    }

    return RatingDistributionStats(
        mean=float(np.mean(values)),
        std=float(np.std(values)),
        min=float(np.min(values)),
        max=float(np.max(values)),
        quantiles=quantile_dict
    )


def compute_member_agreement(
    member_vectors: Dict[str, Dict[str, float]],
    consensus: Dict[str, float]
) -> Dict[str, Optional[float]]:
    """
    Spearman correlation between each member vector and the consensus.

    The correlation is undefined (None) with fewer than two titles or when
    either side is constant, e.g. a member who never swiped.

    Args:
        member_vectors: Normalized vectors keyed by member id
        consensus: Consensus ratings keyed by title

    Returns:
        Dictionary mapping member id to correlation or None
    """
    titles = sorted(consensus)
    consensus_values = np.array([consensus[t] for t in titles], dtype=float)
    agreement = {}

    for member_id, vector in member_vectors.items():
        member_values = np.array([vector[t] for t in titles], dtype=float)
        if (
            len(titles) < 2
            or np.ptp(member_values) == 0
            or np.ptp(consensus_values) == 0
        ):
            agreement[member_id] = None
            continue
        rho, _ = spearmanr(member_values, consensus_values)
        agreement[member_id] = None if math.isnan(rho) else float(rho)

    return agreement


def check_unanimous_order(
    member_vectors: Dict[str, Dict[str, float]],
    consensus: Dict[str, float],
    ranking: Optional[Sequence[str]] = None
) -> UnanimityCheck:
    """
    Check that the consensus keeps every unanimous pairwise preference.

    A pair (A, B) is unanimous when every member rates A strictly above B.
    The consensus violates it unless it also rates A strictly above B,
    or, when ``ranking`` is given, places A before B in that ranking.

    Args:
        member_vectors: Normalized vectors keyed by member id
        consensus: Consensus ratings keyed by title
        ranking: Optional final title order, best first

    Returns:
        UnanimityCheck instance
    """
    vectors = list(member_vectors.values())
    position = {title: i for i, title in enumerate(ranking)} if ranking is not None else None
    n_unanimous = 0
    violations = []

    if vectors:
        for a, b in combinations(sorted(consensus), 2):
            if all(v[a] > v[b] for v in vectors):
                higher, lower = a, b
            elif all(v[b] > v[a] for v in vectors):
                higher, lower = b, a
            else:
                continue
            n_unanimous += 1
            if position is not None:
                kept = position[higher] < position[lower]
            else:
                kept = consensus[higher] > consensus[lower]
            if not kept:
                violations.append([higher, lower])

    if violations:
        logger.warning(f"Consensus violates {len(violations)} unanimous member preferences")

    return UnanimityCheck(
        n_unanimous_pairs=n_unanimous,
        n_violations=len(violations),
        violations=violations
    )


def create_agreement_report(
    member_vectors: Dict[str, Dict[str, float]],
    consensus: Dict[str, float],
    ranking: Optional[Sequence[str]] = None,
    quantiles: List[float] = [0.1, 0.25, 0.5, 0.75, 0.9]
) -> AgreementReport:
    """
    Create a complete agreement report.

    Args:
        member_vectors: Normalized vectors keyed by member id
        consensus: Consensus ratings keyed by title
        ranking: Optional final title order, best first
        quantiles: Quantiles to compute

    Returns:
        AgreementReport instance
    """
    return AgreementReport(
        n_members=len(member_vectors),
        n_candidates=len(consensus),
        distribution_stats=compute_rating_distribution_stats(consensus, quantiles),
        member_agreement=compute_member_agreement(member_vectors, consensus),
        unanimity_check=check_unanimous_order(member_vectors, consensus, ranking)
    )
