"""Error types raised while discovering, validating and loading skills."""

from __future__ import annotations

from pathlib import Path


class SkillError(Exception):
    """Base class for all skillkit errors."""

    code = "skill_error"


class MetadataError(SkillError):
    """A single skill package failed validation.

    These are collected during discovery instead of aborting the scan.
    """

    code = "metadata_error"

    def __init__(self, message: str, field: str | None = None, constraint: str | None = None):
        super().__init__(message)
        self.field = field
        self.constraint = constraint


class MalformedMetadataError(MetadataError):
    code = "malformed_metadata"


class MissingFieldError(MetadataError):
    code = "missing_field"

    def __init__(self, field: str):
        super().__init__(f"Missing required field: {field}", field=field, constraint="required")


class InvalidNameError(MetadataError):
    code = "invalid_name"


class InvalidDescriptionError(MetadataError):
    code = "invalid_description"


class BodyTooLargeError(MetadataError):
    code = "body_too_large"

    def __init__(self, path: Path, size: int, limit: int):
        super().__init__(
            f"{path.name} is {size} bytes, limit is {limit}",
            field="body",
            constraint="max_bytes",
        )
        self.size = size
        self.limit = limit


class UnreadableDocumentError(MetadataError):
    """The entry document could not be opened, e.g. it was removed after indexing."""

    code = "unreadable_document"

    def __init__(self, path: Path, cause: OSError):
        reason = cause.strerror or str(cause)
        super().__init__(f"Cannot read {path}: {reason}", field="body", constraint="readable")
        self.path = path


class DuplicateNameError(SkillError):
    """Two packages declare the same name. Fatal to an index build."""

    code = "duplicate_name"

    def __init__(self, name: str, first: Path, second: Path):
        super().__init__(f"Skill name '{name}' is declared by both {first} and {second}")
        self.name = name
        self.directories = (first, second)


class PathEscapeError(SkillError, ValueError):
    """A resource path points outside its package directory."""

    code = "path_escape"


class ResourceNotFoundError(SkillError):
    code = "resource_not_found"


class ResourceTooLargeError(SkillError):
    code = "resource_too_large"


class NoSuchPackageError(SkillError):
    code = "no_such_package"

    def __init__(self, name: str):
        super().__init__(f"Skill '{name}' is not indexed")
        self.name = name


class NoSuchResourceError(ResourceNotFoundError):
    code = "no_such_resource"
