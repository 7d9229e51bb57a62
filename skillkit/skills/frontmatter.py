"""SKILL.md front-matter parser."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from skillkit.skills.errors import MalformedMetadataError, MissingFieldError, UnreadableDocumentError
from skillkit.skills.models import SkillMetadata
from skillkit.utils import get_logger

logger = get_logger(__name__)

START_MARKER = "---"
END_MARKERS = ("---", "...")

REQUIRED_FIELDS = ("name", "description")
OPTIONAL_FIELDS = {
    "license": "license",
    "compatibility": "compatibility",
    "allowed-tools": "allowed_tools",
}


def split_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Split a document into (frontmatter_dict, body_markdown).

    The block must open on the very first line with ``---`` and close on a
    line holding only ``---`` or ``...`` starting in column 0. Indented
    markers belong to YAML block scalars and do not close the block.
    """
    lines = text.lstrip("\ufeff").splitlines()
    if not lines or lines[0].rstrip() != START_MARKER:
        raise MalformedMetadataError("Document does not start with a '---' front-matter block")

    for end, line in enumerate(lines[1:], start=1):
        if line.rstrip() in END_MARKERS:
            break
    else:
        raise MalformedMetadataError("Front-matter block is not terminated")

    try:
        data = yaml.safe_load("\n".join(lines[1:end]))
    except yaml.YAMLError as e:
        raise MalformedMetadataError(f"Invalid YAML in front-matter: {e}") from e

    if not isinstance(data, dict):
        raise MalformedMetadataError("Front-matter is not a key/value mapping")

    body = "\n".join(lines[end + 1:]).strip()
    return data, body


def _scalar(fm: dict[str, Any], key: str) -> str | None:
    value = fm.get(key)
    if value is None:
        return None
    if isinstance(value, (dict, list)):
        raise MalformedMetadataError(f"Field '{key}' must be a scalar", field=key, constraint="scalar")
    return str(value)


def metadata_from_dict(fm: dict[str, Any]) -> SkillMetadata:
    """Build SkillMetadata from a parsed front-matter mapping (no validation)."""
    values: dict[str, Any] = {}
    for key in REQUIRED_FIELDS:
        value = _scalar(fm, key)
        if value is None:
            raise MissingFieldError(key)
        values[key] = value

    for key, attr in OPTIONAL_FIELDS.items():
        value = _scalar(fm, key)
        if value is not None:
            values[attr] = value

    extra = fm.get("metadata")
    if isinstance(extra, dict):
        values["metadata"] = {str(k): str(v) for k, v in extra.items()}
    elif extra is not None:
        raise MalformedMetadataError("Field 'metadata' must be a mapping", field="metadata", constraint="mapping")

    unknown = set(fm) - set(REQUIRED_FIELDS) - set(OPTIONAL_FIELDS) - {"metadata"}
    if unknown:
        logger.debug("Ignoring unknown front-matter fields: %s", sorted(unknown))

    return SkillMetadata(**values)


def parse_metadata(text: str) -> SkillMetadata:
    """Parse the metadata block of a skill entry document."""
    fm, _ = split_frontmatter(text)
    return metadata_from_dict(fm)


def read_skill_document(path: Path) -> tuple[SkillMetadata, str]:
    """Read an entry document and return (metadata, body).

    Raises:
        UnreadableDocumentError: the file vanished or cannot be opened.
        MalformedMetadataError: the file is not UTF-8 or has no valid block.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise MalformedMetadataError(f"{path.name} is not valid UTF-8") from e
    except OSError as e:
        raise UnreadableDocumentError(path, e) from e
    fm, body = split_frontmatter(text)
    return metadata_from_dict(fm), body
