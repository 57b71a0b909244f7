"""Tests for party-level orchestration and the batch runner."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from party_ranking.aggregation import AggregationConfig
from party_ranking.run import compute_party_rankings, group_swipes_by_member, main, run_from_config
from party_ranking.scoring import BASE_RATING, Candidate, DuplicateTitleError, Swipe


def test_end_to_end_two_member_party(two_candidates, two_member_swipes) -> None:
    result = compute_party_rankings(two_candidates, two_member_swipes)

    assert result.member_vectors["m1"] == pytest.approx({"A": 1216.0, "B": 1174.4})
    assert result.member_vectors["m2"] == pytest.approx({"A": 1184.0, "B": 1200.0})
    assert result.consensus == pytest.approx({"A": 1200.0, "B": 1187.2})
    assert [r.title for r in result.rankings] == ["A", "B"]
    assert [r.rank for r in result.rankings] == [1, 2]
    assert result.ratings_by_id == pytest.approx({"a": 1200.0, "b": 1187.2})


def test_rankings_carry_swipe_tallies(two_candidates, two_member_swipes) -> None:
    result = compute_party_rankings(two_candidates, two_member_swipes)
    tally_a = result.rankings[0].tally
    tally_b = result.rankings[1].tally
    assert (tally_a.total_swipes, tally_a.right_swipes, tally_a.left_swipes) == (2, 1, 1)
    assert (tally_b.total_swipes, tally_b.right_swipes, tally_b.left_swipes) == (1, 0, 1)


def test_active_members_without_swipes_get_baseline_vectors(two_candidates, two_member_swipes) -> None:
    result = compute_party_rankings(two_candidates, two_member_swipes, member_ids=["m1", "m3"])
    assert list(result.member_vectors) == ["m1", "m3"]
    assert result.member_vectors["m3"] == {"A": BASE_RATING, "B": BASE_RATING}
    assert result.consensus["A"] == pytest.approx((1216.0 + 1200.0) / 2)


def test_no_members_keeps_baseline(two_candidates) -> None:
    result = compute_party_rankings(two_candidates, [], member_ids=[])
    assert result.consensus == {"A": BASE_RATING, "B": BASE_RATING}
    assert [r.title for r in result.rankings] == ["A", "B"]


def test_empty_candidate_set_is_nothing_to_rank() -> None:
    result = compute_party_rankings([], [Swipe("m1", "x", "right")])
    assert result.is_empty
    assert result.consensus == {}
    assert result.to_frame().empty


def test_tied_candidates_rank_by_title() -> None:
    candidates = [
        Candidate(candidate_id="z", title="Zodiac", expected_score=0.5),
        Candidate(candidate_id="a", title="Alien", expected_score=0.5),
    ]
    swipes = [Swipe("m1", "z", "right"), Swipe("m1", "a", "right")]
    for _ in range(3):
        result = compute_party_rankings(candidates, swipes)
        assert [r.candidate_id for r in result.rankings] == ["a", "z"]


def test_threaded_scoring_matches_sequential(two_candidates, two_member_swipes) -> None:
    sequential = compute_party_rankings(two_candidates, two_member_swipes)
    threaded = compute_party_rankings(two_candidates, two_member_swipes, max_workers=4)
    assert threaded.consensus == sequential.consensus
    assert list(threaded.member_vectors) == list(sequential.member_vectors)


def test_median_policy_is_used_when_configured(two_candidates) -> None:
    swipes = [
        Swipe("m1", "a", "right"),
        Swipe("m2", "a", "left"),
        Swipe("m3", "a", "left"),
    ]
    result = compute_party_rankings(
        two_candidates, swipes, aggregation_config=AggregationConfig(mode="median")
    )
    assert result.consensus["A"] == pytest.approx(1184.0)


def test_duplicate_titles_fail_before_scoring() -> None:
    candidates = [
        Candidate(candidate_id="1", title="Heat", expected_score=0.5),
        Candidate(candidate_id="2", title="Heat", expected_score=0.5),
    ]
    with pytest.raises(DuplicateTitleError):
        compute_party_rankings(candidates, [])


def test_group_swipes_keeps_order_and_drops_inactive_members() -> None:
    swipes = [
        Swipe("m2", "a", "left"),
        Swipe("m1", "b", "right"),
        Swipe("m9", "a", "right"),
        Swipe("m2", "b", "right"),
    ]
    grouped = group_swipes_by_member(swipes, member_ids=["m1", "m2"])
    assert [s.candidate_id for s in grouped["m2"]] == ["a", "b"]
    assert "m9" not in grouped

    inferred = group_swipes_by_member(swipes)
    assert list(inferred) == ["m2", "m1", "m9"]


def test_result_serialization(two_candidates, two_member_swipes, tmp_path: Path) -> None:
    result = compute_party_rankings(two_candidates, two_member_swipes)
    assert [r.title for r in result.top(1)] == ["A"]

    frame = result.to_frame()
    assert list(frame["title"]) == ["A", "B"]
    assert list(frame["genres"]) == ["Drama", "Comedy"]

    paths = result.save(str(tmp_path / "out"))
    payload = json.loads(Path(paths["rankings_json"]).read_text())
    assert payload["n_members"] == 2
    assert payload["rankings"][0]["candidate_id"] == "a"
    assert Path(paths["agreement_report"]).exists()


def _write_party(tmp_path: Path) -> Path:
    (tmp_path / "candidates.csv").write_text(
        "movie_id,title,genres,expected_score\n"
        "a,A,Drama,0.5\n"
        "b,B,Comedy|Drama,0.8\n"
    )
    (tmp_path / "swipes.csv").write_text(
        "user_id,movie_id,direction\n"
        "m1,a,right\n"
        "m2,a,left\n"
        "m1,b,left\n"
    )
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "global:\n"
        "  log_level: INFO\n"
        f"  output_dir: {tmp_path / 'artifacts'}\n"
        "data:\n"
        f"  candidates: {{path: {tmp_path / 'candidates.csv'}}}\n"
        f"  swipes: {{path: {tmp_path / 'swipes.csv'}}}\n"
        "elo: {base_rating: 1200, k_factor: 32}\n"
        "aggregation: {mode: mean}\n"
    )
    return config_path


def test_cli_writes_rankings(tmp_path: Path) -> None:
    config_path = _write_party(tmp_path)
    assert main(["--config", str(config_path), "--top", "1"]) == 0

    payload = json.loads((tmp_path / "artifacts" / "rankings.json").read_text())
    assert [r["title"] for r in payload["rankings"]] == ["A", "B"]
    assert payload["ratings_by_id"]["b"] == pytest.approx(1187.2)
    assert (tmp_path / "artifacts" / "rankings.csv").exists()


def test_cli_returns_error_code_on_missing_config(tmp_path: Path) -> None:
    assert main(["--config", str(tmp_path / "missing.yaml")]) == 1


def test_cli_header_only_candidates_is_nothing_to_rank(tmp_path: Path) -> None:
    config_path = _write_party(tmp_path)
    (tmp_path / "candidates.csv").write_text("movie_id,title,genres,expected_score\n")

    assert main(["--config", str(config_path)]) == 0

    payload = json.loads((tmp_path / "artifacts" / "rankings.json").read_text())
    assert payload["rankings"] == []
    assert payload["ratings_by_id"] == {}


def test_top_zero_is_honoured(tmp_path: Path) -> None:
    config_path = _write_party(tmp_path)
    assert run_from_config(str(config_path), top_n=0)["top"] == []
    assert len(run_from_config(str(config_path))["top"]) == 2


@pytest.mark.parametrize("max_workers", ["4", 0, 2.0, True])
def test_invalid_max_workers_is_rejected(two_candidates, two_member_swipes, max_workers) -> None:
    with pytest.raises(ValueError, match="max_workers"):
        compute_party_rankings(two_candidates, two_member_swipes, max_workers=max_workers)


def test_cli_returns_error_code_on_non_integer_max_workers(tmp_path: Path) -> None:
    config_path = _write_party(tmp_path)
    with open(config_path, "a") as f:
        f.write("scoring: {max_workers: four}\n")
    assert main(["--config", str(config_path)]) == 1
