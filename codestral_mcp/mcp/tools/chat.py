"""MCP tool: chat - general-purpose conversation with Mistral models.

Reasoning, analysis and planning go to the general models
(mistral-large by default). The reply is returned verbatim; no code
extraction.
"""

from typing import Optional

from codestral_mcp.client import MistralClient
from codestral_mcp.models import DEFAULT_CHAT_MODEL


async def chat(
    client: MistralClient,
    messages: list[dict],
    model: Optional[str] = None,
    temperature: Optional[float] = None,
    top_p: Optional[float] = None,
    max_tokens: Optional[int] = None,
    stop: Optional[list[str]] = None,
) -> str:
    """
    Get a chat reply.

    Args:
        client: Connected MistralClient
        messages: OpenAI-format messages [{"role": "...", "content": "..."}]
        model: General model id (default mistral-large-latest)

    Raises:
        UpstreamError: On any API failure, EmptyChoices if no reply
    """
    completion = await client.chat_completion(
        messages,
        model=model or DEFAULT_CHAT_MODEL,
        temperature=temperature,
        top_p=top_p,
        max_tokens=max_tokens,
        stop=stop,
    )
    return completion.first_content()
