"""
Prompt construction for the code tasks routed through chat completions.
"""

from typing import Literal, Optional

Task = Literal["complete", "fix", "test", "fim"]

SYSTEM_PROMPTS: dict[str, str] = {
    "complete": "You are an expert programmer. Continue or complete the provided code according to best practices.",
    "fix": "You are an expert programmer. Analyze the code for bugs and provide a corrected version with explanations of the fixes.",
    "test": "You are an expert programmer. Generate comprehensive unit tests for the provided code using appropriate testing frameworks.",
    "fim": "You are an expert programmer. Complete the code between the given start and end sections, ensuring it flows naturally.",
}


def _fence(body: str, language: Optional[str]) -> str:
    return f"```{language or ''}\n{body}\n```"


def build_prompt(
    code: str,
    language: Optional[str],
    task: Task,
    suffix: Optional[str] = None,
) -> list[dict]:
    """
    Build the system + user message pair for a code task.

    The suffix block is only appended for the fim task; other tasks
    ignore it.

    Raises:
        ValueError: If task is not one of complete/fix/test/fim
    """
    if task not in SYSTEM_PROMPTS:
        raise ValueError(f"Unknown task '{task}'. Expected one of {sorted(SYSTEM_PROMPTS)}")

    lang_str = f" {language}" if language else ""
    user_content = f"Here is the{lang_str} code:\n\n{_fence(code, language)}"

    if task == "fim" and suffix:
        user_content += f"\n\nThe code should end with:\n\n{_fence(suffix, language)}"

    return [
        {"role": "system", "content": SYSTEM_PROMPTS[task]},
        {"role": "user", "content": user_content},
    ]
