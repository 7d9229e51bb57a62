"""Model-callable tools that drive the progressive loader.

Provides two tools:
- load_skill: Load full instructions for a skill by name (body tier)
- read_skill_file: Read a specific file from a skill package (resource tier)
"""

from __future__ import annotations

from typing import Any

from skillkit.skills.errors import NoSuchPackageError, PathEscapeError, ResourceNotFoundError, SkillError
from skillkit.skills.loader import ProgressiveLoader
from skillkit.tools.base import ToolDefinition, ToolResult
from skillkit.utils import get_logger

logger = get_logger(__name__)


class SkillTools:
    """Provides load_skill and read_skill_file tools backed by a ProgressiveLoader."""

    def __init__(self, loader: ProgressiveLoader):
        self.loader = loader

    def get_tools(self) -> list[ToolDefinition]:
        return [
            ToolDefinition(
                name="load_skill",
                description=(
                    "Load the full instructions for a skill by name. "
                    "Call this when the task matches a skill from the skill index."
                ),
                parameters={
                    "type": "object",
                    "properties": {
                        "skill_name": {
                            "type": "string",
                            "description": "Name of the skill to load",
                        }
                    },
                    "required": ["skill_name"],
                },
            ),
            ToolDefinition(
                name="read_skill_file",
                description=(
                    "Read a specific file from a skill package. "
                    "Use for references, scripts or assets listed in skill instructions."
                ),
                parameters={
                    "type": "object",
                    "properties": {
                        "skill_name": {
                            "type": "string",
                            "description": "Name of the skill",
                        },
                        "file_path": {
                            "type": "string",
                            "description": (
                                "Path of the file relative to the skill directory, "
                                "e.g. references/guide.md"
                            ),
                        },
                    },
                    "required": ["skill_name", "file_path"],
                },
            ),
        ]

    def get_tool(self, name: str) -> ToolDefinition | None:
        for tool in self.get_tools():
            if tool.name == name:
                return tool
        return None

    def openai_tools(self) -> list[dict[str, Any]]:
        """Tool definitions ready to pass as an OpenAI-style ``tools`` list."""
        return [tool.to_openai_format() for tool in self.get_tools()]

    async def execute(self, tool_name: str, arguments: dict[str, Any]) -> ToolResult:
        if tool_name == "load_skill":
            return self._load_skill(arguments.get("skill_name", ""))
        elif tool_name == "read_skill_file":
            return self._read_skill_file(
                arguments.get("skill_name", ""),
                arguments.get("file_path", ""),
            )
        return ToolResult.fail(f"Unknown tool: {tool_name}", code="unknown_tool")

    def _load_skill(self, skill_name: str) -> ToolResult:
        try:
            body = self.loader.load_body(skill_name)
        except NoSuchPackageError as e:
            available = ", ".join(self.loader.registry.index.names())
            return ToolResult.from_error(
                e, f"Skill '{skill_name}' not found. Available skills: {available}"
            )
        except SkillError as e:
            logger.error("Failed to load skill '%s': %s", skill_name, e)
            return ToolResult.from_error(e, f"Failed to load skill '{skill_name}': {e}")

        package = self.loader.registry.index.lookup(skill_name)
        resources = package.resources if package else ()
        return ToolResult.ok(self._format_instructions(skill_name, body, resources))

    def _read_skill_file(self, skill_name: str, file_path: str) -> ToolResult:
        try:
            content = self.loader.load_resource(skill_name, file_path)
        except NoSuchPackageError as e:
            return ToolResult.from_error(e, f"Skill '{skill_name}' not found.")
        except PathEscapeError as e:
            return ToolResult.from_error(e)
        except ResourceNotFoundError as e:
            package = self.loader.registry.index.lookup(skill_name)
            available = list(package.resources) if package else []
            return ToolResult.from_error(
                e,
                f"File '{file_path}' not found in skill '{skill_name}'. "
                f"Available files: {available}"
            )
        except SkillError as e:
            logger.error("Failed to read file from skill '%s': %s", skill_name, e)
            return ToolResult.from_error(e, f"Failed to read file: {e}")

        try:
            return ToolResult.ok(content.decode("utf-8"))
        except UnicodeDecodeError:
            return ToolResult.fail(
                f"File '{file_path}' is binary and cannot be shown as text.", code="binary_file"
            )

    def _format_instructions(self, skill_name: str, body: str, resources: tuple[str, ...]) -> str:
        """Format skill content for LLM consumption."""
        parts = [f"# Skill: {skill_name}\n", body]
        if resources:
            parts.append("\n\n## Available Files")
            for path in resources:
                parts.append(f"- {path}")
            parts.append(
                "\nUse the read_skill_file tool to read any of these files, "
                "passing the path as shown above."
            )
        return "\n".join(parts)
