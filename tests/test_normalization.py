"""Tests for padding and canonical ordering of member vectors."""

from __future__ import annotations

from party_ranking.scoring import BASE_RATING, normalize_vectors, pad_vector, sort_by_title


def test_vectors_are_completed_over_union_of_titles() -> None:
    vectors = [{"B": 1174.4, "A": 1216.0}, {"A": 1184.0}, {"C": 1210.0}]
    normalized = normalize_vectors(vectors)

    for vector in normalized:
        assert list(vector) == ["A", "B", "C"]
    assert normalized[1] == {"A": 1184.0, "B": BASE_RATING, "C": BASE_RATING}
    assert normalized[2]["C"] == 1210.0


def test_candidate_titles_are_included_even_if_nobody_rated_them() -> None:
    normalized = normalize_vectors([{"A": 1216.0}], candidate_titles=["A", "Z"])
    assert normalized == [{"A": 1216.0, "Z": BASE_RATING}]


def test_computed_ratings_are_never_altered() -> None:
    vectors = [{"A": 1.5, "B": 2.5}, {"B": 3.5}]
    normalized = normalize_vectors(vectors, base_rating=0.0)
    assert normalized[0] == {"A": 1.5, "B": 2.5}
    assert normalized[1] == {"A": 0.0, "B": 3.5}


def test_inputs_are_not_mutated() -> None:
    vector = {"B": 1.0}
    normalize_vectors([vector], candidate_titles=["A"])
    assert vector == {"B": 1.0}


def test_padding_a_complete_vector_is_a_no_op() -> None:
    vector = {"A": 1216.0, "B": 1174.4}
    padded = pad_vector(vector, vector.keys())
    assert padded == vector
    assert list(padded) == ["A", "B"]


def test_ordering_is_code_point_lexicographic() -> None:
    vector = {"b": 1.0, "B": 2.0, "a": 3.0, "Á": 4.0, "A": 5.0}
    assert list(sort_by_title(vector)) == ["A", "B", "a", "b", "Á"]


def test_empty_inputs() -> None:
    assert normalize_vectors([]) == []
    assert normalize_vectors([{}]) == [{}]
