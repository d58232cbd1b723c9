"""
Settings Tests

Environment overrides, validation, and their effect on the engine.
"""

import logging

import pytest
from pydantic import ValidationError

from schoolbook.config import Settings, configure_logging, get_settings, reset_settings
from schoolbook.errors import SearchExhaustedError
from schoolbook.modular import find_group_generator, generate_prime


class TestDefaults:
    """Tests for default values."""

    def test_defaults(self, monkeypatch):
        for name in Settings.model_fields:
            monkeypatch.delenv("SCHOOLBOOK_" + name.upper(), raising=False)
        reset_settings()
        settings = get_settings()
        assert settings.miller_rabin_rounds == 5
        assert settings.generator_window == 1_000_000
        assert settings.max_prime_probes == 100_000
        assert settings.max_generator_candidates == 10_000
        assert settings.log_level == "WARNING"

    def test_cached(self):
        assert get_settings() is get_settings()


class TestEnvironment:
    """Tests for SCHOOLBOOK_* overrides."""

    def test_override(self, monkeypatch):
        monkeypatch.setenv("SCHOOLBOOK_MILLER_RABIN_ROUNDS", "12")
        monkeypatch.setenv("SCHOOLBOOK_LOG_LEVEL", "debug")
        reset_settings()
        settings = get_settings()
        assert settings.miller_rabin_rounds == 12
        assert settings.log_level == "DEBUG"

    def test_invalid_values_rejected(self, monkeypatch):
        monkeypatch.setenv("SCHOOLBOOK_MAX_PRIME_PROBES", "0")
        reset_settings()
        with pytest.raises(ValidationError):
            get_settings()

    def test_unknown_log_level_rejected(self):
        with pytest.raises(ValidationError):
            Settings(log_level="LOUD")

    def test_setting_bounds_search(self, monkeypatch):
        monkeypatch.setenv("SCHOOLBOOK_MAX_GENERATOR_CANDIDATES", "1")
        reset_settings()
        # 2 has order 8 modulo 17
        with pytest.raises(SearchExhaustedError):
            find_group_generator(17)

    def test_explicit_argument_wins(self, monkeypatch):
        monkeypatch.setenv("SCHOOLBOOK_MAX_GENERATOR_CANDIDATES", "1")
        reset_settings()
        assert find_group_generator(17, max_candidates=10) == 3


class TestLogging:
    """Tests for logging setup and emitted events."""

    def test_configure_logging(self):
        configure_logging("INFO")

    def test_exhausted_search_logs_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="schoolbook.modular"):
            with pytest.raises(SearchExhaustedError):
                find_group_generator(17, max_candidates=1)
        assert "no generator found for p=17" in caplog.text

    def test_prime_found_logged_at_debug(self, caplog, rng):
        with caplog.at_level(logging.DEBUG, logger="schoolbook.modular"):
            generate_prime(16, rng=rng)
        assert "16-bit prime" in caplog.text
