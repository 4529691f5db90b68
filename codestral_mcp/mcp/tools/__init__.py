"""MCP tool implementations.

Each tool is a self-contained async function. Tools that call the API
take the MistralClient explicitly; the server owns its lifetime.
"""

from codestral_mcp.mcp.tools.chat import chat
from codestral_mcp.mcp.tools.code_completion import code_completion
from codestral_mcp.mcp.tools.list_models import list_models

__all__ = [
    "chat",
    "code_completion",
    "list_models",
]
