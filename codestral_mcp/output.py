"""
Writing generated code to disk.
"""

import logging
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)


class OutputWriteError(Exception):
    """Generated text could not be saved. Never an upstream failure."""

    def __init__(self, path: Union[str, Path], reason: str):
        super().__init__(f"Error saving to file: {reason}")
        self.path = str(path)
        self.reason = reason


def write_output(path: Union[str, Path], text: str) -> Path:
    """
    Write text as UTF-8, creating parent directories as needed.

    Raises:
        OutputWriteError: On any filesystem error
    """
    target = Path(path).expanduser()
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text, encoding="utf-8")
    except OSError as e:
        raise OutputWriteError(path, str(e)) from e
    logger.info(f"Wrote {len(text)} chars to {target}")
    return target
