"""
Run codestral-mcp as MCP server.

Usage:
    python -m codestral_mcp.mcp

Requires:
    MISTRAL_API_KEY in the environment (or a .env file)
"""

from codestral_mcp.mcp.server import run

if __name__ == "__main__":
    run()
