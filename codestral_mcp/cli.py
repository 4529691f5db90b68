"""CLI entry point for codestral-mcp.

Runs the same tool operations as the MCP server, without an MCP host.
Useful for checking credentials and scripting one-off completions.

Entry point:
    codestral-cli models [--json]
    codestral-cli check-key
    codestral-cli complete --task fix --file buggy.py [--language python] [-o fixed.py]
    codestral-cli chat "Explain this stack trace" [--system TEXT] [--model ID]
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from codestral_mcp.client import MistralClient
from codestral_mcp.config import ConfigError
from codestral_mcp.errors import UpstreamError
from codestral_mcp.models import CODE_MODELS, GENERAL_MODELS
from codestral_mcp.output import OutputWriteError

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────
# ARGUMENT PARSING
# ─────────────────────────────────────────────────────────────────────


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="codestral-cli",
        description="Codestral code tasks and Mistral chat from the terminal.",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    sub = parser.add_subparsers(dest="command")

    # models
    models_p = sub.add_parser("models", help="List known models")
    models_p.add_argument(
        "--json", action="store_true", dest="json_output",
        help="Full JSON output (models, targets, defaults)",
    )

    # check-key
    sub.add_parser("check-key", help="Validate MISTRAL_API_KEY against Codestral")

    # complete
    complete_p = sub.add_parser("complete", help="Run a code task")
    complete_p.add_argument(
        "--task", required=True, choices=["complete", "fix", "test", "fim"],
    )
    complete_p.add_argument("--file", default=None, help="Input code file (default: stdin)")
    complete_p.add_argument("--language", default=None, help="Programming language")
    complete_p.add_argument("--model", default=None, choices=list(CODE_MODELS))
    complete_p.add_argument("--suffix", default=None, help="Code that follows the gap (fim)")
    complete_p.add_argument("--temperature", type=float, default=None)
    complete_p.add_argument("--max-tokens", type=int, default=None)
    complete_p.add_argument("-o", "--output", default=None, help="Write result to this file")

    # chat
    chat_p = sub.add_parser("chat", help="Chat with a general Mistral model")
    chat_p.add_argument("message", help="User message")
    chat_p.add_argument("--system", default=None, help="Optional system prompt")
    chat_p.add_argument("--model", default=None, choices=list(GENERAL_MODELS))
    chat_p.add_argument("--temperature", type=float, default=None)
    chat_p.add_argument("--max-tokens", type=int, default=None)

    return parser


# ─────────────────────────────────────────────────────────────────────
# COMMANDS
# ─────────────────────────────────────────────────────────────────────


async def _cmd_models(json_output: bool = False) -> int:
    """List known models. Returns exit code."""
    from codestral_mcp.mcp.tools.list_models import list_models

    result = await list_models()

    if json_output:
        json.dump(result, sys.stdout, indent=2)
        sys.stdout.write("\n")
    else:
        for name, target in result["targets"].items():
            fim = ", fim" if target["supports_fim"] else ""
            print(f"{name} ({target['base_url']}{fim})")
            for model_id in target["models"]:
                print(f"  {model_id}")

    return 0


async def _cmd_check_key() -> int:
    async with MistralClient.from_env() as client:
        await client.validate_api_key()
    print("API key OK", file=sys.stderr)
    return 0


async def _cmd_complete(
    task: str,
    file: Optional[str],
    language: Optional[str],
    model: Optional[str],
    suffix: Optional[str],
    temperature: Optional[float],
    max_tokens: Optional[int],
    output: Optional[str],
) -> int:
    from codestral_mcp.mcp.tools.code_completion import code_completion

    code = Path(file).read_text(encoding="utf-8") if file else sys.stdin.read()

    async with MistralClient.from_env() as client:
        result = await code_completion(
            client,
            code=code,
            task=task,
            language=language,
            model=model,
            suffix=suffix,
            temperature=temperature,
            max_tokens=max_tokens,
            output_path=output,
            stream_to_file=bool(output),
        )

    if output:
        print(result, file=sys.stderr)
    else:
        sys.stdout.write(result)
        sys.stdout.write("\n")
    return 0


async def _cmd_chat(
    message: str,
    system: Optional[str],
    model: Optional[str],
    temperature: Optional[float],
    max_tokens: Optional[int],
) -> int:
    from codestral_mcp.mcp.tools.chat import chat

    messages = []
    if system:
        messages.append({"role": "system", "content": system})
    messages.append({"role": "user", "content": message})

    async with MistralClient.from_env() as client:
        reply = await chat(
            client,
            messages,
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
        )

    sys.stdout.write(reply)
    sys.stdout.write("\n")
    return 0


# ─────────────────────────────────────────────────────────────────────
# ENTRY POINT
# ─────────────────────────────────────────────────────────────────────


def main():
    parser = _build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    # Logging
    level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(name)s %(message)s", stream=sys.stderr)

    load_dotenv()

    try:
        if args.command == "models":
            code = asyncio.run(_cmd_models(json_output=args.json_output))
        elif args.command == "check-key":
            code = asyncio.run(_cmd_check_key())
        elif args.command == "complete":
            code = asyncio.run(_cmd_complete(
                task=args.task,
                file=args.file,
                language=args.language,
                model=args.model,
                suffix=args.suffix,
                temperature=args.temperature,
                max_tokens=args.max_tokens,
                output=args.output,
            ))
        elif args.command == "chat":
            code = asyncio.run(_cmd_chat(
                message=args.message,
                system=args.system,
                model=args.model,
                temperature=args.temperature,
                max_tokens=args.max_tokens,
            ))
        else:
            parser.print_help()
            code = 1
    except UpstreamError as e:
        detail = e.to_dict()
        hint = ", retryable" if detail["retryable"] else ""
        print(f"Error ({detail['kind']}{hint}): {detail['message']}", file=sys.stderr)
        code = 1
    except (ConfigError, OutputWriteError, OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        code = 1

    sys.exit(code)


if __name__ == "__main__":
    main()
