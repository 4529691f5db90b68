"""Tests for codestral_mcp.config module."""

import logging
import os
import pytest
from unittest.mock import patch

from codestral_mcp.config import (
    CODESTRAL_API_BASE,
    DEFAULT_CHAT_TEMPERATURE,
    DEFAULT_FIM_TEMPERATURE,
    DEFAULT_MAX_TOKENS,
    MIN_REQUEST_INTERVAL_SECONDS,
    MISTRAL_API_BASE,
    REQUEST_TIMEOUT_SECONDS,
    ConfigError,
    get_api_key,
    get_codestral_base_url,
    get_log_level,
    get_mistral_base_url,
    should_validate_key,
)


def _env_without(*keys):
    env = os.environ.copy()
    for key in keys:
        env.pop(key, None)
    return env


class TestGetApiKey:
    """Tests for get_api_key()."""

    def test_returns_key(self):
        with patch.dict(os.environ, {"MISTRAL_API_KEY": "abc123"}):
            assert get_api_key() == "abc123"

    def test_strips_whitespace(self):
        with patch.dict(os.environ, {"MISTRAL_API_KEY": "  abc123\n"}):
            assert get_api_key() == "abc123"

    def test_missing(self):
        with patch.dict(os.environ, _env_without("MISTRAL_API_KEY"), clear=True):
            with pytest.raises(ConfigError, match="MISTRAL_API_KEY"):
                get_api_key()

    def test_blank(self):
        with patch.dict(os.environ, {"MISTRAL_API_KEY": "   "}):
            with pytest.raises(ConfigError):
                get_api_key()


class TestBaseUrls:
    """Tests for endpoint overrides."""

    def test_defaults(self):
        env = _env_without("CODESTRAL_API_BASE", "MISTRAL_API_BASE")
        with patch.dict(os.environ, env, clear=True):
            assert get_codestral_base_url() == CODESTRAL_API_BASE
            assert get_mistral_base_url() == MISTRAL_API_BASE

    def test_general_endpoint_is_api_mistral_ai(self):
        assert MISTRAL_API_BASE == "https://api.mistral.ai/v1"

    def test_override_trailing_slash_removed(self):
        with patch.dict(os.environ, {
            "CODESTRAL_API_BASE": "http://localhost:9000/v1/",
            "MISTRAL_API_BASE": "http://proxy.internal/v1",
        }):
            assert get_codestral_base_url() == "http://localhost:9000/v1"
            assert get_mistral_base_url() == "http://proxy.internal/v1"

    def test_blank_override_ignored(self):
        with patch.dict(os.environ, {"CODESTRAL_API_BASE": "  "}):
            assert get_codestral_base_url() == CODESTRAL_API_BASE


class TestShouldValidateKey:
    def test_default_true(self):
        with patch.dict(os.environ, _env_without("CODESTRAL_VALIDATE_KEY"), clear=True):
            assert should_validate_key() is True

    @pytest.mark.parametrize("value", ["0", "false", "No", "OFF"])
    def test_disabled(self, value):
        with patch.dict(os.environ, {"CODESTRAL_VALIDATE_KEY": value}):
            assert should_validate_key() is False

    def test_enabled_explicitly(self):
        with patch.dict(os.environ, {"CODESTRAL_VALIDATE_KEY": "1"}):
            assert should_validate_key() is True


class TestGetLogLevel:
    def test_default(self):
        with patch.dict(os.environ, _env_without("CODESTRAL_LOG_LEVEL"), clear=True):
            assert get_log_level() == logging.WARNING

    def test_by_name(self):
        with patch.dict(os.environ, {"CODESTRAL_LOG_LEVEL": "debug"}):
            assert get_log_level() == logging.DEBUG

    def test_by_number(self):
        with patch.dict(os.environ, {"CODESTRAL_LOG_LEVEL": "20"}):
            assert get_log_level() == 20

    def test_unknown_falls_back(self):
        with patch.dict(os.environ, {"CODESTRAL_LOG_LEVEL": "chatty"}):
            assert get_log_level(default=logging.ERROR) == logging.ERROR


class TestConstants:
    """Sanity checks on request defaults."""

    def test_temperatures_in_range(self):
        assert 0 <= DEFAULT_FIM_TEMPERATURE <= DEFAULT_CHAT_TEMPERATURE <= 1

    def test_fim_is_deterministic(self):
        assert DEFAULT_FIM_TEMPERATURE == 0

    def test_max_tokens_positive(self):
        assert DEFAULT_MAX_TOKENS == 1000

    def test_timeout_and_interval(self):
        assert REQUEST_TIMEOUT_SECONDS == 30
        assert MIN_REQUEST_INTERVAL_SECONDS == pytest.approx(0.1)
