"""MCP tool: code_completion - complete, fix, test, or fill-in-the-middle.

Routing:
    task == "fim"  -> Codestral /fim/completions (prefix=code, suffix=suffix)
    otherwise      -> /chat/completions with a task-specific prompt

Fenced code is extracted from the reply. With `output_path` the result is
also written to disk; with `stream_to_file` only a confirmation is returned.

Usage:
    async with MistralClient(api_key) as client:
        code = await code_completion(
            client,
            code="def add(a, b):\\n    ",
            task="fim",
            suffix="return a + b",
        )
"""

import logging
from typing import Optional

from codestral_mcp.client import MistralClient
from codestral_mcp.extraction import extract_code
from codestral_mcp.output import write_output
from codestral_mcp.prompts import Task, build_prompt

logger = logging.getLogger(__name__)


async def code_completion(
    client: MistralClient,
    code: str,
    task: Task,
    language: Optional[str] = None,
    model: Optional[str] = None,
    suffix: Optional[str] = None,
    temperature: Optional[float] = None,
    top_p: Optional[float] = None,
    max_tokens: Optional[int] = None,
    stop: Optional[list[str]] = None,
    output_path: Optional[str] = None,
    stream_to_file: bool = False,
) -> str:
    """
    Run a code task against Codestral.

    Args:
        client: Connected MistralClient
        code: The code to process (the prefix, for fim)
        task: "complete", "fix", "test" or "fim"
        language: Language tag for the prompt fences (chat tasks only)
        model: Code model for chat tasks; fim always uses codestral-latest
        suffix: Code that must follow the completion (fim)
        temperature, top_p, max_tokens, stop: Sampling overrides
        output_path: If set, save the result here
        stream_to_file: With output_path, return a confirmation instead
            of the code

    Returns:
        Extracted code, or "Successfully saved to <path>"

    Raises:
        UpstreamError: On any API failure
        OutputWriteError: If output_path cannot be written
    """
    if task == "fim":
        completion = await client.fim_completion(
            code,
            suffix=suffix,
            temperature=temperature,
            top_p=top_p,
            max_tokens=max_tokens,
            stop=stop,
        )
    else:
        messages = build_prompt(code, language, task, suffix)
        completion = await client.chat_completion(
            messages,
            model=model,
            temperature=temperature,
            top_p=top_p,
            max_tokens=max_tokens,
            stop=stop,
        )

    result = extract_code(completion.first_content())
    logger.debug(f"code_completion task={task} -> {len(result)} chars")

    if output_path:
        write_output(output_path, result)
        if stream_to_file:
            return f"Successfully saved to {output_path}"

    return result
