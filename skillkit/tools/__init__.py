"""Model-callable tools for skill access."""

from skillkit.tools.base import ToolDefinition, ToolResult
from skillkit.tools.skill_tools import SkillTools

__all__ = [
    "ToolDefinition",
    "ToolResult",
    "SkillTools",
]
