"""Naming and size rules for skill metadata.

Shared by index discovery and the authoring tools, so a skill that passes
``skillkit validate`` is guaranteed to be indexable.
"""

from __future__ import annotations

import re

from skillkit.skills.errors import InvalidDescriptionError, InvalidNameError, MetadataError
from skillkit.skills.models import SkillMetadata

MAX_NAME_LENGTH = 64
MAX_DESCRIPTION_LENGTH = 1024

# lowercase letters, digits and hyphens only
NAME_RE = re.compile(r"[a-z0-9-]{1,64}")

FORBIDDEN_DESCRIPTION_CHARS = ("<", ">")


def validate_name(name: str) -> str:
    if not name:
        raise InvalidNameError("name must not be empty", field="name", constraint="empty")
    if len(name) > MAX_NAME_LENGTH:
        raise InvalidNameError(
            f"name is {len(name)} characters, maximum is {MAX_NAME_LENGTH}",
            field="name",
            constraint="length",
        )
    if not NAME_RE.fullmatch(name):
        raise InvalidNameError(
            f"Invalid name '{name}': use lowercase letters, digits and hyphens only",
            field="name",
            constraint="pattern",
        )
    return name


def validate_description(description: str) -> str:
    if not description:
        raise InvalidDescriptionError(
            "description must not be empty", field="description", constraint="empty"
        )
    if len(description) > MAX_DESCRIPTION_LENGTH:
        raise InvalidDescriptionError(
            f"description exceeds {MAX_DESCRIPTION_LENGTH} characters ({len(description)})",
            field="description",
            constraint="length",
        )
    if any(ch in description for ch in FORBIDDEN_DESCRIPTION_CHARS):
        raise InvalidDescriptionError(
            "description must not contain angle brackets (< or >)",
            field="description",
            constraint="angle_brackets",
        )
    return description


def validate_metadata(metadata: SkillMetadata) -> SkillMetadata:
    """Validate metadata, returning it unchanged on success."""
    validate_name(metadata.name)
    validate_description(metadata.description)
    return metadata


def collect_errors(metadata: SkillMetadata) -> list[MetadataError]:
    """Return every rule violation instead of stopping at the first."""
    errors: list[MetadataError] = []
    for check, value in (
        (validate_name, metadata.name),
        (validate_description, metadata.description),
    ):
        try:
            check(value)
        except MetadataError as e:
            errors.append(e)
    return errors
