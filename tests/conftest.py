"""Shared fixtures for skillkit tests."""

from __future__ import annotations

from pathlib import Path

import pytest


def write_skill(
    root: Path,
    dir_name: str,
    name: str | None = None,
    description: str = "A test skill for unit tests.",
    body: str = "# Instructions\n\nThese are the full instructions.\n",
    resources: dict[str, str] | None = None,
) -> Path:
    """Create a skill directory with a SKILL.md and optional resource files."""
    skill = root / dir_name
    skill.mkdir(parents=True)
    (skill / "SKILL.md").write_text(
        "---\n"
        f"name: {name or dir_name}\n"
        f"description: {description}\n"
        "---\n\n"
        f"{body}"
    )
    for rel, content in (resources or {}).items():
        path = skill / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    return skill


@pytest.fixture
def spring_root(tmp_path: Path) -> Path:
    """Root with a single spring-boot skill and one reference document."""
    root = tmp_path / "skills"
    write_skill(
        root,
        "spring-boot",
        description='"Spring Boot patterns"',
        body="# Spring Boot\n\nUse constructor injection.\n",
        resources={"references/spring-boot-4.md": "# Spring Boot 4\nWhat's new.\n"},
    )
    return root


@pytest.fixture
def mixed_root(tmp_path: Path) -> Path:
    """Root with two valid skills, one invalid one, and a non-skill directory."""
    root = tmp_path / "skills"
    write_skill(root, "spring-boot", description="Spring Boot patterns")
    write_skill(
        root,
        "jpa-patterns",
        description="JPA entity and repository patterns",
        resources={"scripts/check.py": "print('ok')\n"},
    )
    write_skill(root, "my-skill", name="My_Skill", description="Bad name.")
    (root / "not-a-skill").mkdir()
    (root / "not-a-skill" / "README.md").write_text("nothing here\n")
    return root


@pytest.fixture
def make_skill():
    return write_skill
