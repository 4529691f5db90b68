"""
codestral-mcp: Mistral Codestral and Mistral chat as MCP tools.
"""

__version__ = "1.0.0"
