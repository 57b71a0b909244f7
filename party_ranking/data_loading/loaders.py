"""
Data loading functions for party ranking.

This module reads party exports from CSV and converts rows into the
scoring types. No scoring is done here; that's handled by the scoring
module.
"""

import logging
from pathlib import Path
from typing import List, Optional

import pandas as pd

from ..scoring.schema import Candidate, Swipe

logger = logging.getLogger(__name__)

CANDIDATE_COLUMNS = ["movie_id", "title", "expected_score"]
SWIPE_COLUMNS = ["user_id", "movie_id", "direction"]
GENRE_SEPARATOR = "|"


def load_candidates(filepath: str, delimiter: str = ",") -> List[Candidate]:
    """
    Load party candidates from CSV.

    The file should contain:
    - movie_id: stable candidate identifier
    - title: display title (unique within the party)
    - expected_score: prior acceptance probability in [0, 1]
    - genres (optional): genre tags separated by "|"

    Args:
        filepath: Path to the candidates CSV
        delimiter: Field delimiter (default: comma)

    Returns:
        List of Candidate, in file order (empty for a header-only file)

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If required columns are missing or a title is blank
    """
    df = _read_csv(filepath, delimiter, "Candidates", allow_empty=True)

    missing = validate_columns(df, CANDIDATE_COLUMNS)
    if missing:
        raise ValueError(f"Candidates file {filepath} missing columns: {missing}")

    blank_titles = df["title"].fillna("").map(lambda title: not str(title).strip())
    if blank_titles.any():
        rows = [int(i) + 2 for i in df.index[blank_titles]]
        raise ValueError(f"Candidates file {filepath} has blank titles on lines {rows}")

    candidates = []
    for row in df.itertuples(index=False):
        genres = getattr(row, "genres", None)
        candidates.append(Candidate(
            candidate_id=str(row.movie_id),
            title=str(row.title),
            genres=_split_genres(genres),
            expected_score=float(row.expected_score)
        ))

    logger.info(f"Loaded {len(candidates)} candidates")
    return candidates


def load_swipes(filepath: str, delimiter: str = ",") -> List[Swipe]:
    """
    Load the party swipe log from CSV.

    Rows must already be in chronological order; they are returned in
    file order and never re-sorted.

    Args:
        filepath: Path to the swipes CSV (user_id, movie_id, direction)
        delimiter: Field delimiter (default: comma)

    Returns:
        List of Swipe, in file order

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If required columns are missing
        InvalidSwipeError: If a direction is not left/right/accept/reject
    """
    df = _read_csv(filepath, delimiter, "Swipes", allow_empty=True)

    missing = validate_columns(df, SWIPE_COLUMNS)
    if missing:
        raise ValueError(f"Swipes file {filepath} missing columns: {missing}")

    swipes = [
        Swipe(
            member_id=str(row.user_id),
            candidate_id=str(row.movie_id),
            direction=str(row.direction)
        )
        for row in df.itertuples(index=False)
    ]

    logger.info(f"Loaded {len(swipes)} swipes from {df['user_id'].nunique()} members")
    return swipes


def load_members(filepath: str, delimiter: str = ",") -> List[str]:
    """
    Load active party member ids from CSV.

    When a ``status`` column exists only rows with status "active" are kept.

    Args:
        filepath: Path to the members CSV (user_id[, status])
        delimiter: Field delimiter (default: comma)

    Returns:
        List of member ids, in file order, without duplicates

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the user_id column is missing
    """
    df = _read_csv(filepath, delimiter, "Members", allow_empty=True)

    missing = validate_columns(df, ["user_id"])
    if missing:
        raise ValueError(f"Members file {filepath} missing columns: {missing}")

    if "status" in df.columns:
        n_total = len(df)
        df = df[df["status"].astype(str).str.lower() == "active"]
        logger.info(f"Keeping {len(df)} active members out of {n_total}")

    return list(dict.fromkeys(df["user_id"].astype(str)))


def validate_columns(df: pd.DataFrame, required_columns: List[str]) -> List[str]:
    """
    Validate that required columns exist in the DataFrame.

    Args:
        df: Loaded DataFrame
        required_columns: Column names that must be present

    Returns:
        List of missing column names (empty if all present)
    """
    return [c for c in required_columns if c not in df.columns]


def _read_csv(
    filepath: str,
    delimiter: str,
    label: str,
    allow_empty: bool = False
) -> pd.DataFrame:
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"{label} file not found: {filepath}")

    logger.info(f"Loading {label.lower()} from {filepath} (delimiter: {repr(delimiter)})")
    # Ids and titles stay strings so "007" and "7", or "1917" and "1917.0", are not conflated
    df = pd.read_csv(filepath, sep=delimiter, dtype={"movie_id": str, "user_id": str, "title": str})

    if df.empty and not allow_empty:
        raise ValueError(f"{label} file is empty: {filepath}")

    return df


def _split_genres(value: Optional[object]) -> tuple:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return ()
    return tuple(g.strip() for g in str(value).split(GENRE_SEPARATOR) if g.strip())
