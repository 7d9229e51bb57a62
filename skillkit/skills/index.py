"""Skill discovery and the in-memory skill index."""

from __future__ import annotations

import threading
from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING

from skillkit.skills.errors import BodyTooLargeError, DuplicateNameError, MetadataError, UnreadableDocumentError
from skillkit.skills.frontmatter import read_skill_document
from skillkit.skills.models import DiscoveryError, SkillMetadata, SkillPackage
from skillkit.skills.resources import is_within
from skillkit.skills.validation import validate_metadata
from skillkit.utils import get_logger

if TYPE_CHECKING:
    from skillkit.config import SkillsConfig

logger = get_logger(__name__)

DEFAULT_ENTRY_DOCUMENT = "SKILL.md"
DEFAULT_MAX_BODY_BYTES = 512 * 1024

SKIPPED_NAMES = {"__pycache__", "node_modules"}


def is_skipped(part: str) -> bool:
    """Hidden files and build caches are never part of a package."""
    return part.startswith(".") or part in SKIPPED_NAMES


def walk_package(root: Path) -> Iterator[tuple[str, Path]]:
    """Yield ``(posix_path, path)`` for every file a package may ship.

    Hidden files and build caches are left out. Entries are not checked for
    containment; callers decide what to do with links that leave ``root``.
    """
    for path in sorted(root.rglob("*")):
        rel = path.relative_to(root)
        if any(is_skipped(part) for part in rel.parts) or not path.is_file():
            continue
        yield rel.as_posix(), path


def list_resources(root: Path, entry_document: str = DEFAULT_ENTRY_DOCUMENT) -> tuple[str, ...]:
    """List bundled files under a package root as sorted POSIX paths."""
    resources: list[str] = []
    for rel, path in walk_package(root):
        if rel == entry_document:
            continue
        if not is_within(path, root):
            logger.warning("Ignoring resource %s: resolves outside %s", rel, root)
            continue
        resources.append(rel)
    return tuple(resources)


def load_package(
    directory: Path,
    entry_document: str = DEFAULT_ENTRY_DOCUMENT,
    max_body_bytes: int = DEFAULT_MAX_BODY_BYTES,
) -> SkillPackage:
    """Parse and validate one skill directory.

    Raises:
        MetadataError: if the entry document is oversized, malformed or invalid.
    """
    root = directory.resolve()
    entry = root / entry_document
    try:
        size = entry.stat().st_size
        if size > max_body_bytes:
            raise BodyTooLargeError(entry, size, max_body_bytes)
        metadata, _ = read_skill_document(entry)
    except OSError as e:
        raise UnreadableDocumentError(entry, e) from e

    validate_metadata(metadata)
    return SkillPackage(
        metadata=metadata,
        root=root,
        body_path=entry,
        resources=list_resources(root, entry_document),
    )


class _MetadataView:
    """Restartable, finite view over an index's metadata."""

    def __init__(self, packages: Mapping[str, SkillPackage]):
        self._packages = packages

    def __iter__(self) -> Iterator[SkillMetadata]:
        return (package.metadata for package in self._packages.values())

    def __len__(self) -> int:
        return len(self._packages)


class SkillIndex:
    """Immutable snapshot of discovered skills, keyed by name.

    Iteration order is unspecified; sort by name when a stable order matters.
    """

    def __init__(self, packages: Mapping[str, SkillPackage] | None = None):
        self._packages = MappingProxyType(dict(packages or {}))

    def lookup(self, name: str) -> SkillPackage | None:
        return self._packages.get(name)

    def names(self) -> list[str]:
        return sorted(self._packages)

    @property
    def packages(self) -> Mapping[str, SkillPackage]:
        return self._packages

    def __len__(self) -> int:
        return len(self._packages)

    def __contains__(self, name: object) -> bool:
        return name in self._packages

    def __iter__(self) -> Iterator[SkillPackage]:
        return iter(self._packages.values())

    def list(self) -> _MetadataView:
        """Metadata of every indexed skill (the always-resident tier)."""
        return _MetadataView(self._packages)


def _unique_roots(roots: str | Path | Iterable[str | Path]) -> list[Path]:
    if isinstance(roots, (str, Path)):
        roots = [roots]
    unique: list[Path] = []
    seen: set[Path] = set()
    for root in roots:
        path = Path(root).expanduser()
        key = path.resolve()
        if key not in seen:
            seen.add(key)
            unique.append(path)
    return unique


def build_index(
    roots: str | Path | Iterable[str | Path],
    entry_document: str = DEFAULT_ENTRY_DOCUMENT,
    max_body_bytes: int = DEFAULT_MAX_BODY_BYTES,
    disabled: Iterable[str] = (),
) -> tuple[SkillIndex, list[DiscoveryError]]:
    """Scan root directories for skill packages.

    Every immediate subdirectory holding ``entry_document`` is a candidate.
    Invalid candidates are reported as DiscoveryError and left out; the
    rest of the scan continues.

    Raises:
        DuplicateNameError: if two valid packages declare the same name.
    """
    packages: dict[str, SkillPackage] = {}
    errors: list[DiscoveryError] = []

    for base in _unique_roots(roots):
        if not base.is_dir():
            logger.warning("Skill root does not exist: %s", base)
            continue
        for child in sorted(base.iterdir()):
            if not child.is_dir() or is_skipped(child.name):
                continue
            if not (child / entry_document).is_file():
                continue
            try:
                package = load_package(child, entry_document, max_body_bytes)
            except MetadataError as e:
                logger.warning(
                    "Skipping skill directory %s: %s", child, e,
                    extra={"code": e.code},
                )
                errors.append(DiscoveryError.from_exception(child, e))
                continue

            existing = packages.get(package.name)
            if existing is not None:
                raise DuplicateNameError(package.name, existing.root, package.root)
            packages[package.name] = package

    for name in set(disabled) & packages.keys():
        logger.info("Skill '%s' is disabled", name)
        del packages[name]

    logger.info(
        "Indexed %d skill(s)", len(packages),
        extra={"skills": sorted(packages), "discovery_errors": len(errors)},
    )
    return SkillIndex(packages), errors


class SkillRegistry:
    """Owns the current SkillIndex snapshot for a host session.

    Readers grab ``registry.index`` without locking; ``rebuild`` publishes a
    new snapshot by swapping one reference, so a failed or in-flight rebuild
    is never visible.

    Example:
        >>> registry = SkillRegistry(["./skills"])
        >>> errors = registry.rebuild()
        >>> package = registry.index.lookup("spring-boot")
    """

    def __init__(
        self,
        roots: str | Path | Iterable[str | Path],
        entry_document: str = DEFAULT_ENTRY_DOCUMENT,
        max_body_bytes: int = DEFAULT_MAX_BODY_BYTES,
        disabled: Iterable[str] = (),
    ):
        self.roots = _unique_roots(roots)
        self.entry_document = entry_document
        self.max_body_bytes = max_body_bytes
        self.disabled = frozenset(disabled)
        self._snapshot: tuple[SkillIndex, tuple[DiscoveryError, ...]] = (SkillIndex(), ())
        self._write_lock = threading.Lock()

    @classmethod
    def from_config(cls, config: "SkillsConfig") -> "SkillRegistry":
        return cls(
            roots=config.roots,
            entry_document=config.entry_document,
            max_body_bytes=config.max_body_bytes,
            disabled=config.disabled_skills,
        )

    @property
    def index(self) -> SkillIndex:
        return self._snapshot[0]

    @property
    def errors(self) -> tuple[DiscoveryError, ...]:
        """Diagnostics from the build that produced the current index."""
        return self._snapshot[1]

    def rebuild(self) -> list[DiscoveryError]:
        """Rescan all roots and publish the result.

        Raises:
            DuplicateNameError: the previous index stays in place.
        """
        with self._write_lock:
            index, errors = build_index(
                self.roots,
                entry_document=self.entry_document,
                max_body_bytes=self.max_body_bytes,
                disabled=self.disabled,
            )
            self._snapshot = (index, tuple(errors))
        return errors
