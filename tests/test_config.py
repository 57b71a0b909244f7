"""Tests for configuration loading and validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from party_ranking.configs import get_config_value, load_config, validate_config

PROJECT_ROOT = Path(__file__).parent.parent


def test_shipped_config_is_valid() -> None:
    config = load_config(str(PROJECT_ROOT / "configs" / "config.yaml"))
    assert validate_config(config) == []
    assert get_config_value(config, "elo.k_factor") == 32


def test_load_config_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "missing.yaml"))


def test_load_config_empty_file(tmp_path: Path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("")
    with pytest.raises(ValueError):
        load_config(str(path))


def test_validate_config_reports_issues() -> None:
    issues = validate_config({
        "global": {},
        "elo": {"k_factor": -1},
        "aggregation": {"mode": "borda"},
        "data": {"candidates": {"path": "c.csv"}},
        "scoring": {"max_workers": 0},
    })
    assert "Missing data.swipes.path" in issues
    assert any("k_factor" in issue for issue in issues)
    assert "Unknown aggregation mode: borda" in issues
    assert any("max_workers" in issue for issue in issues)


def test_validate_config_missing_sections() -> None:
    issues = validate_config({})
    assert "Missing required section: elo" in issues
    assert "Missing required section: data" in issues


def test_get_config_value_default() -> None:
    config = {"a": {"b": {"c": 1}}}
    assert get_config_value(config, "a.b.c") == 1
    assert get_config_value(config, "a.x.c", default=5) == 5
