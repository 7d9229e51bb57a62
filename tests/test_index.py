"""Tests for skill discovery, the index snapshot and the registry."""

from __future__ import annotations

from pathlib import Path

import pytest

from skillkit.config import SkillsConfig
from skillkit.skills.errors import DuplicateNameError
from skillkit.skills.index import SkillIndex, SkillRegistry, build_index, list_resources


class TestBuildIndex:
    def test_spring_boot_scenario(self, spring_root: Path):
        index, errors = build_index(spring_root)
        assert errors == []
        assert len(index) == 1

        pkg = index.lookup("spring-boot")
        assert pkg is not None
        assert pkg.metadata.description == "Spring Boot patterns"
        assert pkg.resources == ("references/spring-boot-4.md",)
        assert pkg.body_path == pkg.root / "SKILL.md"

    def test_invalid_sibling_does_not_block_valid_ones(self, mixed_root: Path):
        index, errors = build_index(mixed_root)
        assert index.names() == ["jpa-patterns", "spring-boot"]
        assert len(errors) == 1
        assert errors[0].code == "invalid_name"
        assert errors[0].field == "name"
        assert errors[0].constraint == "pattern"
        assert errors[0].directory.name == "my-skill"
        assert "My_Skill" in errors[0].message

    def test_directories_without_entry_document_are_ignored(self, mixed_root: Path):
        index, errors = build_index(mixed_root)
        assert "not-a-skill" not in index
        assert all(e.directory.name != "not-a-skill" for e in errors)

    def test_collects_each_error_kind(self, tmp_path: Path, make_skill):
        make_skill(tmp_path, "long-desc", description="x" * 1025)
        make_skill(tmp_path, "angle", description="use <b>bold</b>")
        bad = tmp_path / "no-frontmatter"
        bad.mkdir()
        (bad / "SKILL.md").write_text("Just plain text.\n")
        missing = tmp_path / "missing"
        missing.mkdir()
        (missing / "SKILL.md").write_text("---\ndescription: no name\n---\n")

        index, errors = build_index(tmp_path)
        assert len(index) == 0
        codes = {e.directory.name: e.code for e in errors}
        assert codes == {
            "angle": "invalid_description",
            "long-desc": "invalid_description",
            "missing": "missing_field",
            "no-frontmatter": "malformed_metadata",
        }
        constraints = {e.directory.name: e.constraint for e in errors}
        assert constraints == {
            "angle": "angle_brackets",
            "long-desc": "length",
            "missing": "required",
            "no-frontmatter": None,
        }

    def test_body_too_large(self, tmp_path: Path, make_skill):
        make_skill(tmp_path, "big", body="x" * 2048)
        make_skill(tmp_path, "small")
        index, errors = build_index(tmp_path, max_body_bytes=1024)
        assert index.names() == ["small"]
        assert [(e.code, e.field, e.constraint) for e in errors] == [("body_too_large", "body", "max_bytes")]

    def test_duplicate_name_is_fatal(self, tmp_path: Path, make_skill):
        make_skill(tmp_path, "first", name="shared-name")
        make_skill(tmp_path, "second", name="shared-name")
        with pytest.raises(DuplicateNameError) as exc_info:
            build_index(tmp_path)
        assert exc_info.value.name == "shared-name"

    def test_duplicate_across_roots(self, tmp_path: Path, make_skill):
        make_skill(tmp_path / "a", "spring-boot")
        make_skill(tmp_path / "b", "spring-boot")
        with pytest.raises(DuplicateNameError):
            build_index([tmp_path / "a", tmp_path / "b"])

    def test_same_root_twice_is_scanned_once(self, spring_root: Path):
        index, _ = build_index([spring_root, str(spring_root)])
        assert len(index) == 1

    def test_missing_root(self, tmp_path: Path):
        index, errors = build_index(tmp_path / "nope")
        assert len(index) == 0
        assert errors == []

    def test_disabled_skills(self, mixed_root: Path):
        index, _ = build_index(mixed_root, disabled=["spring-boot"])
        assert index.names() == ["jpa-patterns"]

    def test_custom_entry_document(self, tmp_path: Path):
        skill = tmp_path / "custom"
        skill.mkdir()
        (skill / "skill.md").write_text("---\nname: custom\ndescription: lower-case entry\n---\n")
        index, _ = build_index(tmp_path, entry_document="skill.md")
        assert index.names() == ["custom"]


class TestListResources:
    def test_skips_entry_hidden_and_caches(self, tmp_path: Path, make_skill):
        skill = make_skill(
            tmp_path,
            "res",
            resources={
                "references/guide.md": "g",
                "scripts/run.py": "r",
                "assets/logo.txt": "l",
                ".hidden/secret": "s",
                "scripts/__pycache__/run.cpython-312.pyc": "c",
            },
        )
        assert list_resources(skill) == (
            "assets/logo.txt",
            "references/guide.md",
            "scripts/run.py",
        )

    def test_drops_symlink_escaping_package(self, tmp_path: Path, make_skill):
        outside = tmp_path / "outside.md"
        outside.write_text("secret")
        skill = make_skill(tmp_path / "root", "linky", resources={"references/ok.md": "ok"})
        (skill / "references" / "leak.md").symlink_to(outside)

        assert list_resources(skill) == ("references/ok.md",)


class TestSkillIndex:
    def test_list_is_restartable(self, mixed_root: Path):
        index, _ = build_index(mixed_root)
        view = index.list()
        first = sorted(m.name for m in view)
        second = sorted(m.name for m in view)
        assert first == second == ["jpa-patterns", "spring-boot"]
        assert len(view) == 2

    def test_lookup_missing(self, spring_root: Path):
        index, _ = build_index(spring_root)
        assert index.lookup("nope") is None

    def test_snapshot_is_read_only(self, spring_root: Path):
        index, _ = build_index(spring_root)
        with pytest.raises(TypeError):
            index.packages["other"] = index.lookup("spring-boot")

    def test_empty(self):
        index = SkillIndex()
        assert len(index) == 0
        assert list(index.list()) == []


class TestSkillRegistry:
    def test_starts_empty_until_rebuilt(self, spring_root: Path):
        registry = SkillRegistry(spring_root)
        assert len(registry.index) == 0
        assert registry.rebuild() == []
        assert "spring-boot" in registry.index

    def test_failed_rebuild_keeps_previous_index(self, tmp_path: Path, make_skill):
        make_skill(tmp_path, "first", name="shared-name")
        registry = SkillRegistry(tmp_path)
        registry.rebuild()
        before = registry.index

        make_skill(tmp_path, "second", name="shared-name")
        with pytest.raises(DuplicateNameError):
            registry.rebuild()

        assert registry.index is before
        assert registry.index.names() == ["shared-name"]

    def test_rebuild_publishes_new_snapshot(self, tmp_path: Path, make_skill):
        make_skill(tmp_path, "one")
        registry = SkillRegistry(tmp_path)
        registry.rebuild()
        old = registry.index

        make_skill(tmp_path, "two")
        make_skill(tmp_path, "broken", name="Broken")
        errors = registry.rebuild()

        assert old.names() == ["one"]
        assert registry.index.names() == ["one", "two"]
        assert [e.code for e in errors] == ["invalid_name"]
        assert registry.errors == tuple(errors)

    def test_from_config(self, mixed_root: Path):
        config = SkillsConfig(roots=[str(mixed_root)], disabled_skills=["jpa-patterns"])
        registry = SkillRegistry.from_config(config)
        registry.rebuild()
        assert registry.index.names() == ["spring-boot"]
