"""Data models for skill packages."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from skillkit.skills.errors import MetadataError


class LoadTier(str, Enum):
    """How much of a package is resident in the host's context."""
    METADATA = "metadata"
    BODY = "body"
    RESOURCE = "resource"


class SkillMetadata(BaseModel):
    """Front-matter of a skill's entry document (always resident).

    Only name + description are shown to the model up front, so the
    per-skill cost is bounded by the validator's length limits.
    """
    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    license: str | None = None
    compatibility: str | None = None
    allowed_tools: str | None = None
    metadata: dict[str, str] = Field(default_factory=dict)


class SkillPackage(BaseModel):
    """One discovered skill directory."""
    model_config = ConfigDict(frozen=True)

    metadata: SkillMetadata
    root: Path
    body_path: Path
    resources: tuple[str, ...] = ()

    @property
    def name(self) -> str:
        return self.metadata.name

    def read_body(self) -> str:
        """Read the instructions that follow the front-matter block."""
        from skillkit.skills.frontmatter import read_skill_document

        _, body = read_skill_document(self.body_path)
        return body


class DiscoveryError(BaseModel):
    """A skill directory that was left out of the index, and why."""
    model_config = ConfigDict(frozen=True)

    directory: Path
    code: str
    message: str
    field: str | None = None
    constraint: str | None = None

    @classmethod
    def from_exception(cls, directory: Path, exc: MetadataError) -> "DiscoveryError":
        return cls(
            directory=directory,
            code=exc.code,
            message=str(exc),
            field=exc.field,
            constraint=exc.constraint,
        )

    def __str__(self) -> str:
        return f"{self.directory}: [{self.code}] {self.message}"
