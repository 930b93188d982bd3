"""StackQuest utilities."""

from .prompt_loader import load_prompt, format_prompt, PROMPTS_DIR

__all__ = ["load_prompt", "format_prompt", "PROMPTS_DIR"]
