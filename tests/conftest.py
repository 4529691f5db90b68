"""Shared test fixtures for codestral-mcp tests."""

import copy

import pytest


# ─────────────────────────────────────────────────────────────────────
# MOCK DATA
# ─────────────────────────────────────────────────────────────────────

MOCK_API_KEY = "test-key-123"

CODESTRAL_URL = "https://codestral.mistral.ai/v1"
MISTRAL_URL = "https://api.mistral.ai/v1"

CODESTRAL_CHAT_URL = f"{CODESTRAL_URL}/chat/completions"
CODESTRAL_FIM_URL = f"{CODESTRAL_URL}/fim/completions"
MISTRAL_CHAT_URL = f"{MISTRAL_URL}/chat/completions"

MOCK_COMPLETION_RESPONSE = {
    "id": "cmpl-e5cc70bb28c444948073e77776eb30ef",
    "object": "chat.completion",
    "created": 1702256327,
    "model": "codestral-latest",
    "choices": [
        {
            "index": 0,
            "message": {
                "role": "assistant",
                "content": "The capital of France is Paris."
            },
            "finish_reason": "stop"
        }
    ],
    "usage": {
        "prompt_tokens": 16,
        "completion_tokens": 8,
        "total_tokens": 24
    }
}


def make_completion(content: str, model: str = "codestral-latest") -> dict:
    """Build a valid completion body with the given first-choice content."""
    body = copy.deepcopy(MOCK_COMPLETION_RESPONSE)
    body["model"] = model
    body["choices"][0]["message"]["content"] = content
    return body


def make_client(**kwargs):
    """MistralClient with pacing disabled so tests don't sleep."""
    from codestral_mcp.client import MistralClient
    from codestral_mcp.pacer import RequestPacer

    kwargs.setdefault("pacer", RequestPacer(min_interval=0))
    return MistralClient(MOCK_API_KEY, **kwargs)


# ─────────────────────────────────────────────────────────────────────
# FIXTURES
# ─────────────────────────────────────────────────────────────────────

@pytest.fixture
def completion_response():
    """Return a deep copy of the mock completion body."""
    return copy.deepcopy(MOCK_COMPLETION_RESPONSE)


@pytest.fixture
def mistral_env(monkeypatch):
    """Environment with an API key and no overrides."""
    monkeypatch.setenv("MISTRAL_API_KEY", MOCK_API_KEY)
    monkeypatch.delenv("CODESTRAL_API_BASE", raising=False)
    monkeypatch.delenv("MISTRAL_API_BASE", raising=False)
    monkeypatch.delenv("CODESTRAL_VALIDATE_KEY", raising=False)
    monkeypatch.delenv("CODESTRAL_LOG_LEVEL", raising=False)
    return monkeypatch
