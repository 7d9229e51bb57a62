"""Skill package discovery, validation and progressive loading.

Skills are directories holding a SKILL.md entry document. Metadata is
always resident, the body is loaded when a task triggers the skill, and
bundled files are read one at a time on request.
"""

from skillkit.skills.errors import (
    BodyTooLargeError,
    DuplicateNameError,
    InvalidDescriptionError,
    InvalidNameError,
    MalformedMetadataError,
    MetadataError,
    MissingFieldError,
    NoSuchPackageError,
    NoSuchResourceError,
    PathEscapeError,
    ResourceNotFoundError,
    ResourceTooLargeError,
    SkillError,
    UnreadableDocumentError,
)
from skillkit.skills.frontmatter import parse_metadata, split_frontmatter
from skillkit.skills.index import SkillIndex, SkillRegistry, build_index
from skillkit.skills.loader import (
    ProgressiveLoader,
    TaskContext,
    Transition,
    explicit_matcher,
    mention_matcher,
)
from skillkit.skills.models import DiscoveryError, LoadTier, SkillMetadata, SkillPackage
from skillkit.skills.resources import resolve_resource
from skillkit.skills.validation import validate_metadata

__all__ = [
    "BodyTooLargeError",
    "DiscoveryError",
    "DuplicateNameError",
    "InvalidDescriptionError",
    "InvalidNameError",
    "LoadTier",
    "MalformedMetadataError",
    "MetadataError",
    "MissingFieldError",
    "NoSuchPackageError",
    "NoSuchResourceError",
    "PathEscapeError",
    "ProgressiveLoader",
    "ResourceNotFoundError",
    "ResourceTooLargeError",
    "SkillError",
    "SkillIndex",
    "SkillMetadata",
    "SkillPackage",
    "SkillRegistry",
    "TaskContext",
    "Transition",
    "UnreadableDocumentError",
    "build_index",
    "explicit_matcher",
    "mention_matcher",
    "parse_metadata",
    "resolve_resource",
    "split_frontmatter",
    "validate_metadata",
]
