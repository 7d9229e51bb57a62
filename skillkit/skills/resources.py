"""Sandboxed access to files bundled inside a skill package.

Containment is checked on every call, not only when the index is built,
because files can be added to a package directory after discovery.
"""

from __future__ import annotations

import posixpath
from pathlib import Path

from skillkit.skills.errors import PathEscapeError, ResourceNotFoundError, ResourceTooLargeError
from skillkit.skills.models import SkillPackage


def is_within(path: Path, base_dir: Path) -> bool:
    """Check that ``path`` resolves inside ``base_dir``, following symlinks."""
    try:
        path.resolve().relative_to(base_dir.resolve())
        return True
    except ValueError:
        return False
    except (OSError, RuntimeError):
        # unresolvable, e.g. a symlink loop
        return False


def normalize_resource_path(relative_path: str) -> str:
    """Collapse ``.``/``..`` segments and reject anything leaving the package."""
    raw = relative_path.replace("\\", "/")
    drive = len(raw) > 1 and raw[0].isalpha() and raw[1] == ":"
    if raw.startswith("/") or drive:
        raise PathEscapeError(f"Resource path must be relative to the skill: '{relative_path}'")

    normalized = posixpath.normpath(raw)
    if normalized == ".." or normalized.startswith("../"):
        raise PathEscapeError(f"Resource path '{relative_path}' escapes the skill directory")
    return normalized


def resolve_resource_path(package: SkillPackage, relative_path: str) -> Path:
    """Map a relative resource path to a file inside ``package.root``."""
    normalized = normalize_resource_path(relative_path)
    candidate = package.root / normalized

    if not is_within(candidate, package.root):
        raise PathEscapeError(
            f"Resource path '{relative_path}' resolves outside skill '{package.name}'"
        )
    if not candidate.is_file():
        raise ResourceNotFoundError(
            f"Resource '{normalized}' not found in skill '{package.name}'"
        )
    return candidate


def resolve_resource(package: SkillPackage, relative_path: str, *, max_bytes: int | None = None) -> bytes:
    """Read a bundled resource's bytes."""
    path = resolve_resource_path(package, relative_path)
    if max_bytes is not None:
        size = path.stat().st_size
        if size > max_bytes:
            raise ResourceTooLargeError(
                f"Resource '{relative_path}' is {size} bytes, limit is {max_bytes}"
            )
    return path.read_bytes()
