"""
Configuration constants and environment loading for codestral-mcp.
"""

import logging
import os
from typing import Optional


class ConfigError(Exception):
    """Required configuration is missing or unusable."""
    pass


# ─────────────────────────────────────────────────────────────────────
# UPSTREAM ENDPOINTS
# ─────────────────────────────────────────────────────────────────────

CODESTRAL_API_BASE: str = "https://codestral.mistral.ai/v1"
MISTRAL_API_BASE: str = "https://api.mistral.ai/v1"

CHAT_COMPLETIONS_PATH: str = "/chat/completions"
FIM_COMPLETIONS_PATH: str = "/fim/completions"


# ─────────────────────────────────────────────────────────────────────
# REQUEST DEFAULTS
# ─────────────────────────────────────────────────────────────────────

DEFAULT_CHAT_TEMPERATURE: float = 0.7
# FIM is a structural completion, so it samples deterministically.
DEFAULT_FIM_TEMPERATURE: float = 0.0
DEFAULT_TOP_P: float = 1.0
DEFAULT_MAX_TOKENS: int = 1000

REQUEST_TIMEOUT_SECONDS: float = 30.0
MIN_REQUEST_INTERVAL_SECONDS: float = 0.1


# ─────────────────────────────────────────────────────────────────────
# ENVIRONMENT LOADING
# ─────────────────────────────────────────────────────────────────────

def get_api_key() -> str:
    """
    Get the Mistral API key from environment.

    Set MISTRAL_API_KEY in .env. The same key authenticates against
    both the Codestral and the general Mistral endpoints.

    Raises:
        ConfigError: If the variable is unset or blank
    """
    value = os.environ.get("MISTRAL_API_KEY", "")
    if not value.strip():
        raise ConfigError(
            "Mistral API key required. Set MISTRAL_API_KEY environment variable."
        )
    return value.strip()


def get_codestral_base_url() -> str:
    """Codestral endpoint, overridable with CODESTRAL_API_BASE."""
    return _url_from_env("CODESTRAL_API_BASE", CODESTRAL_API_BASE)


def get_mistral_base_url() -> str:
    """General Mistral endpoint, overridable with MISTRAL_API_BASE."""
    return _url_from_env("MISTRAL_API_BASE", MISTRAL_API_BASE)


def _url_from_env(key: str, default: str) -> str:
    value = os.environ.get(key, "").strip()
    return value.rstrip("/") if value else default


def should_validate_key() -> bool:
    """
    Whether the server probes the API key at startup.

    Set CODESTRAL_VALIDATE_KEY=0 (or false/no/off) to skip the probe,
    e.g. when starting offline.
    """
    value = os.environ.get("CODESTRAL_VALIDATE_KEY", "1").strip().lower()
    return value not in ("0", "false", "no", "off")


def get_log_level(default: int = logging.WARNING) -> int:
    """
    Get logging level from CODESTRAL_LOG_LEVEL (name or number).

    Unknown values fall back to the default.
    """
    value: Optional[str] = os.environ.get("CODESTRAL_LOG_LEVEL")
    if not value:
        return default
    value = value.strip()
    if value.isdigit():
        return int(value)
    level = logging.getLevelName(value.upper())
    return level if isinstance(level, int) else default
