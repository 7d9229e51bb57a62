"""Tool call shapes shared by the skill tools and their host."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from skillkit.skills.errors import SkillError


class ToolDefinition(BaseModel):
    """A model-callable tool, described with a JSON Schema for its arguments."""

    name: str
    description: str
    parameters: dict[str, Any]  # JSON Schema

    def to_openai_format(self) -> dict[str, Any]:
        """Convert to OpenAI tool format."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }


class ToolResult(BaseModel):
    """Outcome of one tool call.

    Failures carry the ``code`` of the SkillError behind them so a host can
    branch on the kind of failure (``no_such_package``, ``path_escape``, ...)
    without parsing the message shown to the model.
    """

    success: bool
    output: Any
    error: str | None = None
    code: str | None = None

    @classmethod
    def ok(cls, output: Any) -> "ToolResult":
        return cls(success=True, output=output)

    @classmethod
    def fail(cls, error: str, code: str = "tool_error") -> "ToolResult":
        return cls(success=False, output=None, error=error, code=code)

    @classmethod
    def from_error(cls, exc: SkillError, message: str | None = None) -> "ToolResult":
        """Fail with ``exc.code``; ``message`` replaces the exception text if given."""
        return cls.fail(message or str(exc), code=exc.code)
