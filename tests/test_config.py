"""Tests for environment-driven settings."""

from __future__ import annotations

import dataclasses

import pytest

from planner_extractor.config import DEFAULT_GAMMES, Settings


class TestSettings:
    def test_defaults(self, monkeypatch) -> None:
        for name in ("API_KEY", "IKEA_GAMMES", "NAVIGATION_TIMEOUT_MS", "BROWSER_LOCALE", "PORT"):
            monkeypatch.delenv(name, raising=False)
        s = Settings()
        assert s.api_key is None
        assert s.gammes == DEFAULT_GAMMES
        assert len(s.gammes) == 19
        assert s.navigation_timeout_ms == 30000
        assert s.browser_locale == "fr-FR"
        assert s.port == 3000

    def test_environment_overrides(self, monkeypatch) -> None:
        monkeypatch.setenv("API_KEY", "k")
        monkeypatch.setenv("IKEA_GAMMES", "metod, voxtorp ,")
        monkeypatch.setenv("MODAL_TIMEOUT_MS", "15000")
        monkeypatch.setenv("ALLOW_ANONYMOUS", "yes")
        s = Settings()
        assert s.api_key == "k"
        assert s.gammes == ("METOD", "VOXTORP")
        assert s.modal_timeout_ms == 15000
        assert s.allow_anonymous is True

    def test_empty_api_key_means_unset(self, monkeypatch) -> None:
        monkeypatch.setenv("API_KEY", "")
        assert Settings().api_key is None

    def test_is_immutable(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            Settings().api_key = "changed"  # type: ignore[misc]
