"""Evaluation module for consensus agreement analysis."""

from .metrics import (
    compute_rating_distribution_stats,
    compute_member_agreement,
    check_unanimous_order,
    AgreementReport,
    create_agreement_report
)

__all__ = [
    "compute_rating_distribution_stats",
    "compute_member_agreement",
    "check_unanimous_order",
    "AgreementReport",
    "create_agreement_report"
]
