"""
codestral-mcp MCP server package.

Exposes Codestral and Mistral chat as MCP tools.

Usage:
    python -m codestral_mcp.mcp

Requires MISTRAL_API_KEY in the environment (or a .env file).
"""
