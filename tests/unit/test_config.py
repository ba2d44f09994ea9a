"""Tests for app.config — environment-driven settings and startup validation."""

from __future__ import annotations

import pytest

from app.config import Settings
from app.exceptions import ConfigurationError


class TestDefaults:
    def test_polling_defaults(self, settings):
        assert settings.POLL_INTERVAL_SEC == 2
        assert settings.AVATAR_POLL_MAX_ATTEMPTS == 120

    def test_api_base_has_no_trailing_slash(self, monkeypatch):
        monkeypatch.setenv("REPLICATE_API_BASE", "https://proxy.local/v1/")
        assert Settings().REPLICATE_API_BASE == "https://proxy.local/v1"

    def test_persistence_flag(self, monkeypatch):
        monkeypatch.setenv("RESULTS_PERSIST_ENABLE", "TRUE")
        assert Settings().RESULTS_PERSIST_ENABLE is True


class TestValidate:
    def test_valid_settings_pass(self, settings):
        settings.validate()

    def test_missing_token_fails_fast(self, monkeypatch):
        monkeypatch.setenv("REPLICATE_API_TOKEN", "   ")
        with pytest.raises(ConfigurationError):
            Settings().validate()

    @pytest.mark.parametrize("name", ["POLL_MAX_ATTEMPTS", "PROVIDER_GET_ATTEMPTS", "PROVIDER_MAX_CONCURRENCY"])
    def test_non_positive_budgets_rejected(self, monkeypatch, name):
        monkeypatch.setenv("REPLICATE_API_TOKEN", "r8_x")
        monkeypatch.setenv(name, "0")
        with pytest.raises(ConfigurationError):
            Settings().validate()

    def test_negative_interval_rejected(self, monkeypatch):
        monkeypatch.setenv("REPLICATE_API_TOKEN", "r8_x")
        monkeypatch.setenv("POLL_INTERVAL_SEC", "-1")
        with pytest.raises(ConfigurationError):
            Settings().validate()
