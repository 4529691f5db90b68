"""
Code extraction from model output.

Models wrap code in markdown fences, often with prose around it. Tools
return only the code when there is any.
"""

import re

# Opening fence with optional language tag, lazily up to the next bare fence
CODE_BLOCK_PATTERN = re.compile(r"```\w*\n(.*?)```", re.DOTALL)


def find_code_blocks(text: str) -> list[str]:
    """Return the stripped contents of every fenced block, in order."""
    return [match.strip() for match in CODE_BLOCK_PATTERN.findall(text)]


def extract_code(text: str) -> str:
    """
    Extract fenced code from model output.

    Multiple blocks are joined with a blank line. Text without fences is
    returned unchanged.
    """
    blocks = find_code_blocks(text)
    if blocks:
        return "\n\n".join(blocks)
    return text
