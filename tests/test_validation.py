"""Tests for metadata naming and size rules."""

from __future__ import annotations

import pytest

from skillkit.skills.errors import InvalidDescriptionError, InvalidNameError
from skillkit.skills.frontmatter import parse_metadata
from skillkit.skills.models import SkillMetadata
from skillkit.skills.validation import (
    collect_errors,
    validate_description,
    validate_metadata,
    validate_name,
)


def meta(name: str = "my-skill", description: str = "Does something.") -> SkillMetadata:
    return SkillMetadata(name=name, description=description)


class TestValidateName:
    @pytest.mark.parametrize("name", ["a", "my-skill", "spring-boot-4", "0-9", "-", "x" * 64])
    def test_valid(self, name: str):
        assert validate_name(name) == name

    @pytest.mark.parametrize("name", ["My_Skill", "UPPER", "has space", "dots.in.name", "ünï", "name\n"])
    def test_pattern(self, name: str):
        with pytest.raises(InvalidNameError) as exc_info:
            validate_name(name)
        assert exc_info.value.field == "name"
        assert exc_info.value.constraint == "pattern"

    def test_too_long(self):
        with pytest.raises(InvalidNameError) as exc_info:
            validate_name("x" * 65)
        assert exc_info.value.constraint == "length"

    def test_empty(self):
        with pytest.raises(InvalidNameError):
            validate_name("")


class TestValidateDescription:
    def test_exactly_1024_characters(self):
        assert validate_description("x" * 1024)

    def test_1025_characters(self):
        with pytest.raises(InvalidDescriptionError, match="exceeds 1024") as exc_info:
            validate_description("x" * 1025)
        assert exc_info.value.field == "description"
        assert exc_info.value.constraint == "length"

    @pytest.mark.parametrize("description", ["use <tag>", "a > b", "<"])
    def test_angle_brackets(self, description: str):
        with pytest.raises(InvalidDescriptionError) as exc_info:
            validate_description(description)
        assert exc_info.value.constraint == "angle_brackets"

    def test_empty(self):
        with pytest.raises(InvalidDescriptionError):
            validate_description("")


class TestValidateMetadata:
    def test_returns_metadata_unchanged(self):
        original = meta()
        assert validate_metadata(original) is original

    def test_parse_then_validate_round_trip(self):
        description = "Spring Boot patterns, " + "y" * 1000
        doc = f"---\nname: spring-boot\ndescription: {description}\n---\nbody\n"
        result = validate_metadata(parse_metadata(doc))
        assert result.name == "spring-boot"
        assert result.description == description

    def test_collect_errors_reports_all(self):
        errors = collect_errors(meta(name="Bad_Name", description="<html>"))
        assert [type(e) for e in errors] == [InvalidNameError, InvalidDescriptionError]

    def test_collect_errors_valid(self):
        assert collect_errors(meta()) == []
