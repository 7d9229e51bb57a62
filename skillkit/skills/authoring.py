"""Authoring helpers: scaffold, validate and package a skill directory."""

from __future__ import annotations

import zipfile
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from skillkit.skills.errors import BodyTooLargeError, MetadataError, SkillError
from skillkit.skills.frontmatter import read_skill_document
from skillkit.skills.index import DEFAULT_ENTRY_DOCUMENT, DEFAULT_MAX_BODY_BYTES, walk_package
from skillkit.skills.resources import is_within
from skillkit.skills.validation import collect_errors, validate_description, validate_name
from skillkit.utils import get_logger

logger = get_logger(__name__)

PACKAGE_SUFFIX = ".skill"
RESOURCE_DIRS = ("references", "scripts", "assets")

SKILL_TEMPLATE = """\
---
{frontmatter}---

# {title}

## When to use this skill

Describe the tasks and requests this skill should be loaded for.

## Instructions

Step-by-step guidance goes here. Keep this file focused; move long
reference material into `references/` and link to it by relative path.

## Bundled files

- `references/` documents loaded on demand
- `scripts/` helper scripts
- `assets/` templates and other files used in output
"""

REFERENCE_TEMPLATE = """\
# {title} reference

Detailed reference material for {name}. This file is only loaded when the
skill instructions ask for it.
"""


class PackagingError(SkillError):
    code = "packaging_error"


@dataclass
class ValidationReport:
    """Outcome of quick_validate."""

    skill_dir: Path
    errors: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors


def _title(name: str) -> str:
    return " ".join(part.capitalize() for part in name.split("-") if part)


def init_skill(name: str, parent_dir: str | Path = ".", description: str | None = None) -> Path:
    """Create a new skill directory from the template.

    Raises:
        InvalidNameError: ``name`` breaks the naming rules.
        InvalidDescriptionError: ``description`` breaks the description rules.
        FileExistsError: the target directory already exists.
    """
    validate_name(name)
    description = description or f"Describe what {name} does and when to use it."
    validate_description(description)
    skill_dir = Path(parent_dir) / name
    if skill_dir.exists():
        raise FileExistsError(f"Skill directory already exists: {skill_dir}")

    title = _title(name)
    frontmatter = yaml.safe_dump(
        {"name": name, "description": description}, sort_keys=False, allow_unicode=True
    )
    skill_dir.mkdir(parents=True)
    (skill_dir / DEFAULT_ENTRY_DOCUMENT).write_text(
        SKILL_TEMPLATE.format(frontmatter=frontmatter, title=title),
        encoding="utf-8",
    )
    for sub in RESOURCE_DIRS:
        (skill_dir / sub).mkdir()
    (skill_dir / "references" / "README.md").write_text(
        REFERENCE_TEMPLATE.format(name=name, title=title), encoding="utf-8"
    )

    logger.info("Initialized skill '%s' at %s", name, skill_dir)
    return skill_dir


def quick_validate(
    skill_dir: str | Path,
    entry_document: str = DEFAULT_ENTRY_DOCUMENT,
    max_body_bytes: int = DEFAULT_MAX_BODY_BYTES,
) -> ValidationReport:
    """Check a skill directory against the same rules used at discovery."""
    skill_dir = Path(skill_dir)
    report = ValidationReport(skill_dir=skill_dir)

    entry = skill_dir / entry_document
    if not entry.is_file():
        report.errors.append(f"{entry_document} not found in {skill_dir}")
        return report

    size = entry.stat().st_size
    if size > max_body_bytes:
        report.errors.append(str(BodyTooLargeError(entry, size, max_body_bytes)))

    try:
        metadata, _ = read_skill_document(entry)
    except MetadataError as e:
        report.errors.append(str(e))
        return report

    report.errors.extend(str(e) for e in collect_errors(metadata))
    report.errors.extend(
        f"{rel} resolves outside the skill directory"
        for rel, path in walk_package(skill_dir)
        if not is_within(path, skill_dir)
    )
    return report


def _package_files(skill_dir: Path) -> list[Path]:
    """Files to archive. Links leading out of ``skill_dir`` are never followed."""
    files = []
    for rel, path in walk_package(skill_dir):
        if not is_within(path, skill_dir):
            logger.warning("Not packaging %s: resolves outside %s", rel, skill_dir)
            continue
        files.append(path)
    return files


def package_skill(skill_dir: str | Path, output_dir: str | Path | None = None) -> Path:
    """Validate a skill and write it to ``<name>.skill`` (a zip archive).

    Archive entries are prefixed with the skill directory name.

    Raises:
        PackagingError: validation failed.
    """
    skill_dir = Path(skill_dir).resolve()
    report = quick_validate(skill_dir)
    if not report.valid:
        raise PackagingError(
            f"Cannot package {skill_dir.name}: " + "; ".join(report.errors)
        )

    output = Path(output_dir) if output_dir is not None else Path.cwd()
    output.mkdir(parents=True, exist_ok=True)
    archive = output / f"{skill_dir.name}{PACKAGE_SUFFIX}"

    files = [path for path in _package_files(skill_dir) if path.resolve() != archive.resolve()]
    with zipfile.ZipFile(archive, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for path in files:
            arcname = Path(skill_dir.name) / path.relative_to(skill_dir)
            zf.write(path, arcname.as_posix())

    logger.info("Packaged skill %s -> %s", skill_dir.name, archive)
    return archive
