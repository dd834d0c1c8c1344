"""Tests for ${ENV_VAR} interpolation."""

import pytest

from skill_duel.config.infrastructure.env_interpolation import (
    collect_missing_vars,
    interpolate,
)


class TestCollectMissingVars:
    """All unset required references are reported, each once."""

    def test_reports_every_missing_var_once(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("SD_ONE", raising=False)
        monkeypatch.delenv("SD_TWO", raising=False)
        data = {"a": "${SD_ONE}", "b": ["${SD_TWO}", "${SD_ONE}"]}

        assert collect_missing_vars(data) == ["SD_ONE", "SD_TWO"]

    def test_set_vars_are_not_missing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SD_SET", "value")
        assert collect_missing_vars({"a": "${SD_SET}"}) == []

    def test_fallback_reference_is_never_missing(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("SD_OPTIONAL", raising=False)
        assert collect_missing_vars({"a": "${SD_OPTIONAL:-x}"}) == []

    def test_non_string_scalars_are_ignored(self) -> None:
        assert collect_missing_vars({"a": 1, "b": True, "c": None}) == []


class TestInterpolate:
    """References are substituted recursively; other values pass through."""

    def test_substitutes_nested_values(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SD_KEY", "secret")
        data = {"outer": {"inner": ["key=${SD_KEY}"]}, "n": 3}

        assert interpolate(data) == {"outer": {"inner": ["key=secret"]}, "n": 3}

    def test_uses_fallback_when_unset(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("SD_URL", raising=False)
        assert interpolate("${SD_URL:-http://localhost:3001}") == "http://localhost:3001"

    def test_env_value_beats_fallback(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SD_URL", "http://render:9000")
        assert interpolate("${SD_URL:-http://localhost:3001}") == "http://render:9000"

    def test_empty_fallback_is_allowed(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("SD_EMPTY", raising=False)
        assert interpolate("${SD_EMPTY:-}") == ""
