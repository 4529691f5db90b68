"""MCP tool: list_models - the models this server can route to.

No network call: the catalog is static and grouped by upstream target.

Usage:
    result = await list_models()
    print(result["models"])  # ["codestral-latest", ...]
"""

from codestral_mcp.models import catalog


async def list_models() -> dict:
    """
    List known models grouped by upstream target.

    Returns:
        {
            "models": ["codestral-latest", ...],
            "targets": {"codestral": {...}, "mistral": {...}},
            "defaults": {"code": "codestral-latest", "chat": "mistral-large-latest"},
        }
    """
    return catalog()
