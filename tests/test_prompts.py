"""Tests for codestral_mcp.prompts - task prompt construction."""

import pytest

from codestral_mcp.prompts import SYSTEM_PROMPTS, build_prompt


class TestBuildPrompt:
    """Tests for build_prompt()."""

    def test_fix_without_language(self):
        messages = build_prompt("x", None, "fix")

        assert len(messages) == 2
        assert messages[0] == {
            "role": "system",
            "content": "You are an expert programmer. Analyze the code for bugs and provide a corrected version with explanations of the fixes.",
        }
        assert messages[1]["role"] == "user"
        assert messages[1]["content"] == "Here is the code:\n\n```\nx\n```"

    def test_language_tag_on_fence(self):
        messages = build_prompt("print(1)", "python", "complete")

        assert messages[1]["content"] == "Here is the python code:\n\n```python\nprint(1)\n```"

    def test_fim_with_suffix(self):
        messages = build_prompt("x", "python", "fim", "y")

        content = messages[1]["content"]
        assert "```python\nx\n```" in content
        assert "The code should end with:\n\n```python\ny\n```" in content
        assert messages[0]["content"] == SYSTEM_PROMPTS["fim"]

    def test_suffix_ignored_outside_fim(self):
        messages = build_prompt("x", "python", "test", "y")

        assert "should end with" not in messages[1]["content"]
        assert messages[0]["content"] == SYSTEM_PROMPTS["test"]

    def test_fim_without_suffix(self):
        messages = build_prompt("x", None, "fim")

        assert "should end with" not in messages[1]["content"]

    @pytest.mark.parametrize("task", ["complete", "fix", "test", "fim"])
    def test_one_system_one_user(self, task):
        messages = build_prompt("code", "go", task)

        assert [m["role"] for m in messages] == ["system", "user"]
        assert messages[0]["content"] == SYSTEM_PROMPTS[task]

    def test_deterministic(self):
        assert build_prompt("a", "rust", "fim", "b") == build_prompt("a", "rust", "fim", "b")

    def test_unknown_task_rejected(self):
        with pytest.raises(ValueError, match="Unknown task"):
            build_prompt("x", None, "refactor")
