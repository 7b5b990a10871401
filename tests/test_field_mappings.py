"""
Unit Tests for the Field Mapping Table

Mapping-level validation, lookups, clarification templates and
questionnaire visibility rules.
"""

import re

import pytest

from factfind.exceptions import UnknownQuestionError
from factfind.schemas.extraction import DataCategory
from factfind.services.extractors import ExtractorKey
from factfind.services.field_mappings import (
    CLARIFICATION_TEMPLATES,
    FieldMapping,
    ValidationRules,
    build_default_mapping_table,
    clarification_question,
    validate_field,
)


@pytest.fixture
def table():
    return build_default_mapping_table()


# =============================================================================
# validate_field
# =============================================================================

class TestValidateField:
    """Tests for mapping-level validation rules."""

    @pytest.mark.parametrize("value", [None, ""])
    def test_required(self, value):
        result = validate_field(value, ValidationRules(required=True))
        assert result.is_valid is False
        assert result.error == "This field is required"

    def test_false_satisfies_required(self):
        assert validate_field(False, ValidationRules(required=True)).is_valid is True

    def test_min_length(self):
        result = validate_field("ab", ValidationRules(min_length=3))
        assert result.error == "Minimum length is 3"

    def test_max_length(self):
        result = validate_field("abcdef", ValidationRules(max_length=5))
        assert result.error == "Maximum length is 5"

    def test_pattern(self):
        result = validate_field("abc", ValidationRules(pattern=re.compile(r"^\d+$")))
        assert result.error == "Invalid format"

    def test_length_rules_skip_non_strings(self):
        assert validate_field(5, ValidationRules(min_length=3)).is_valid is True

    def test_custom_predicate(self):
        rules = ValidationRules(custom=lambda value: value > 10)
        assert validate_field(11, rules).is_valid is True
        assert validate_field(3, rules).error == "Custom validation failed"

    def test_raising_custom_predicate_is_a_failure(self):
        def explode(value):
            raise TypeError("bad value")

        result = validate_field("x", ValidationRules(custom=explode))
        assert result.is_valid is False
        assert result.error == "Custom validation failed"


# =============================================================================
# FieldMappingTable
# =============================================================================

class TestFieldMappingTable:
    """Tests for table lookups."""

    def test_default_table(self, table):
        assert len(table) == 10
        assert all(m.data_category == DataCategory.PERSONAL for m in table)

    def test_by_field(self, table):
        mapping = table.by_field("height")
        assert mapping.question_id == "height"
        assert mapping.extractor_key == ExtractorKey.HEIGHT
        assert table.by_field("favouriteColour") is None

    def test_by_question(self, table):
        assert table.by_question("has_dependents").data_field == "hasDependents"

    def test_unknown_question_raises(self, table):
        with pytest.raises(UnknownQuestionError) as exc_info:
            table.by_question("favourite_colour")
        assert exc_info.value.message == "Unknown question ID: favourite_colour"

    def test_required_fields(self, table):
        assert [m.data_field for m in table.required()] == [
            "ukResident",
            "maritalStatus",
            "hasDependents",
            "employmentStatus",
            "smokingStatus",
            "height",
            "weight",
        ]

    def test_every_mapping_has_a_template(self, table):
        assert {m.question_id for m in table} == set(CLARIFICATION_TEMPLATES)


# =============================================================================
# Clarification and visibility
# =============================================================================

class TestClarificationAndVisibility:

    def test_template(self, table):
        assert clarification_question(table.by_field("ukResident")) == (
            "Are you UK domiciled and a UK tax resident?"
        )

    def test_template_fallback(self):
        mapping = FieldMapping(
            question_id="pension_value",
            data_category=DataCategory.FINANCIAL,
            data_field="pensionValue",
            extractor_key=ExtractorKey.NUMBER,
        )
        assert clarification_question(mapping) == (
            "Could you provide information about pensionValue?"
        )

    def test_dependent_questions_follow_has_dependents(self, table):
        num_dependents = table.by_field("numDependents")
        assert num_dependents.is_visible({}) is False
        assert num_dependents.is_visible({"hasDependents": False}) is False
        assert num_dependents.is_visible({"hasDependents": True}) is True

    def test_unconditional_questions_always_visible(self, table):
        assert table.by_field("height").is_visible({}) is True
