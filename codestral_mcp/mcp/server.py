"""MCP protocol server for codestral-mcp.

Exposes Codestral code tasks and Mistral chat over MCP stdio transport.
MCP clients (Claude Desktop, IDE agents, any MCP host) launch this as a
subprocess and call tools via JSON-RPC.

Entry points:
    codestral-mcp               (console script)
    python -m codestral_mcp.mcp
"""

import asyncio
import json
import logging
import sys
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Literal, Optional

from dotenv import load_dotenv
from mcp.server import FastMCP
from mcp.server.fastmcp import Context
from pydantic import Field

from codestral_mcp.client import MistralClient
from codestral_mcp.config import ConfigError, get_log_level, should_validate_key
from codestral_mcp.errors import UpstreamError
from codestral_mcp.mcp import tools
from codestral_mcp.models import catalog
from codestral_mcp.pacer import RequestPacer
from codestral_mcp.schema import ChatMessage

logger = logging.getLogger(__name__)

CodeModel = Literal["codestral-latest", "codestral-mamba-latest"]
ChatModel = Literal[
    "mistral-large-latest",
    "mistral-small-latest",
    "ministral-8b-latest",
    "ministral-3b-latest",
]


# ─────────────────────────────────────────────────────────────────────
# CLIENT LIFETIME
# ─────────────────────────────────────────────────────────────────────

# Shared by the startup probe and the serving client so the first tool
# call is paced against the probe.
PACER = RequestPacer()


@dataclass
class ServerState:
    """Lifespan state shared by all tool calls."""
    client: MistralClient


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncIterator[ServerState]:
    """Own one MistralClient (two upstream connections) for the server lifetime."""
    client = MistralClient.from_env(pacer=PACER)
    logger.info("Mistral client ready")
    try:
        yield ServerState(client=client)
    finally:
        await client.aclose()


def _client(ctx: Context) -> MistralClient:
    return ctx.request_context.lifespan_context.client


# ─────────────────────────────────────────────────────────────────────
# TOOLS
# ─────────────────────────────────────────────────────────────────────

async def code_completion(
    ctx: Context,
    code: str = Field(description="The code to process"),
    task: Literal["complete", "fix", "test", "fim"] = Field(
        description=(
            "Type of task: 'complete' for code completion, 'fix' for bug fixing, "
            "'test' for test generation, 'fim' for fill-in-the-middle"
        ),
    ),
    language: Optional[str] = Field(default=None, description="Programming language (optional)"),
    model: Optional[CodeModel] = Field(
        default=None,
        description="Model to use (optional, defaults to codestral-latest)",
    ),
    suffix: Optional[str] = Field(
        default=None,
        description="Code that should come after the completion (for FIM task)",
    ),
    temperature: Optional[float] = Field(
        default=None, ge=0, le=1,
        description="Sampling temperature (optional, defaults to 0.7, or 0 for FIM)",
    ),
    top_p: Optional[float] = Field(
        default=None, ge=0, le=1,
        description="Nucleus sampling threshold (optional, defaults to 1)",
    ),
    max_tokens: Optional[int] = Field(
        default=None, gt=0,
        description="Maximum number of tokens to generate (optional, defaults to 1000)",
    ),
    stop: Optional[list[str]] = Field(
        default=None, description="Stop sequences to end generation (optional)",
    ),
    outputPath: Optional[str] = Field(
        default=None, description="Path to save the generated code (optional)",
    ),
    streamToFile: bool = Field(
        default=False,
        description="If true, saves result to file and returns success message only (optional)",
    ),
) -> str:
    """Complete code, fix bugs, or generate tests using Mistral Codestral."""
    return await tools.code_completion(
        _client(ctx),
        code=code,
        task=task,
        language=language,
        model=model,
        suffix=suffix,
        temperature=temperature,
        top_p=top_p,
        max_tokens=max_tokens,
        stop=stop,
        output_path=outputPath,
        stream_to_file=streamToFile,
    )


async def chat(
    ctx: Context,
    messages: list[ChatMessage] = Field(description="Array of conversation messages"),
    model: Optional[ChatModel] = Field(
        default=None,
        description="Model to use (optional, defaults to mistral-large-latest)",
    ),
    temperature: Optional[float] = Field(
        default=None, ge=0, le=1,
        description="Sampling temperature (optional, defaults to 0.7)",
    ),
    top_p: Optional[float] = Field(
        default=None, ge=0, le=1,
        description="Nucleus sampling threshold (optional, defaults to 1)",
    ),
    max_tokens: Optional[int] = Field(
        default=None, gt=0,
        description="Maximum number of tokens to generate (optional, defaults to 1000)",
    ),
    stop: Optional[list[str]] = Field(
        default=None, description="Stop sequences to end generation (optional)",
    ),
) -> str:
    """General-purpose chat completion for reasoning, analysis, planning, and understanding using Mistral's general models."""
    return await tools.chat(
        _client(ctx),
        messages=[m.model_dump() for m in messages],
        model=model,
        temperature=temperature,
        top_p=top_p,
        max_tokens=max_tokens,
        stop=stop,
    )


# ─────────────────────────────────────────────────────────────────────
# SERVER
# ─────────────────────────────────────────────────────────────────────

mcp = FastMCP(
    "codestral",
    instructions=(
        "Code completion, bug fixing, test generation and fill-in-the-middle "
        "with Mistral Codestral, plus general chat with Mistral models."
    ),
    lifespan=lifespan,
)

# FastMCP builds the JSON schemas from the annotations above and
# validates arguments before the tool body runs.
mcp.add_tool(code_completion)
mcp.add_tool(chat)
mcp.add_tool(tools.list_models)


@mcp.resource("codestral://models", mime_type="application/json")
def models_resource() -> str:
    """Model catalog grouped by upstream endpoint."""
    return json.dumps(catalog(), indent=2)


# ─────────────────────────────────────────────────────────────────────
# ENTRY POINT
# ─────────────────────────────────────────────────────────────────────

async def startup_check() -> None:
    """
    Fail fast on bad configuration before serving.

    Raises:
        ConfigError: If MISTRAL_API_KEY is missing
        CredentialConfigError: If the key is rejected
        UpstreamError: If the probe fails for another reason
    """
    async with MistralClient.from_env(pacer=PACER) as client:
        if should_validate_key():
            await client.validate_api_key()
        else:
            logger.info("Skipping API key validation (CODESTRAL_VALIDATE_KEY disabled)")


def run():
    """Entry point for codestral MCP server."""
    load_dotenv()
    # stdout carries the MCP stdio transport; logs go to stderr
    logging.basicConfig(level=get_log_level(), format="%(name)s %(message)s", stream=sys.stderr)

    try:
        asyncio.run(startup_check())
    except (ConfigError, UpstreamError, ValueError) as e:
        logger.error(f"Failed to initialize Mistral API: {e}")
        sys.exit(1)

    logger.info("Mistral Codestral MCP Server running on stdio")
    mcp.run(transport="stdio")


if __name__ == "__main__":
    run()
