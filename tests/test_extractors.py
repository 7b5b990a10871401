"""
Unit Tests for the Field Extractor Registry

Covers the per-field rules, the match → validate → format pipeline and
registry lookups.
"""

import re

import pytest

from factfind.exceptions import UnknownExtractorError
from factfind.schemas.extraction import FailureReason
from factfind.services.extractors import (
    ExtractorKey,
    ExtractorPattern,
    ExtractorRegistry,
    FieldExtractor,
    height_to_cm,
    normalize_message,
    weight_to_kg,
)


def run(registry, key, message):
    return registry.extract(key, message)


# =============================================================================
# Pipeline
# =============================================================================

class TestExtractionPipeline:
    """Tests for the generic extractor contract."""

    def test_normalize_message(self):
        assert normalize_message("  I’M Fine ") == "i'm fine"

    def test_empty_group_falls_back_to_whole_match(self):
        pattern = ExtractorPattern(re.compile(r"(a)?b"), value_group=1)
        match = pattern.regex.search("b")
        assert pattern.raw_value(match) == "b"

    def test_group_zero_is_whole_match(self):
        pattern = ExtractorPattern(re.compile(r"(\d+)\s*cm"), value_group=0)
        match = pattern.regex.search("175 cm")
        assert pattern.raw_value(match) == "175 cm"

    def test_format_never_runs_when_validation_fails(self):
        calls = []

        def fmt(value, matched):
            calls.append(value)
            return value

        extractor = FieldExtractor(
            key=ExtractorKey.NUMBER,
            pattern=ExtractorPattern(re.compile(r"(\d+)")),
            validate=lambda value: False,
            format=fmt,
        )
        result = extractor.extract("42")

        assert result.success is False
        assert result.reason_code == FailureReason.VALIDATION_FAILED
        assert result.original == "42"
        assert calls == []

    def test_default_confidence(self):
        extractor = FieldExtractor(
            key=ExtractorKey.NUMBER,
            pattern=ExtractorPattern(re.compile(r"(\d+)")),
            validate=lambda value: True,
            format=lambda value, matched: int(value),
        )
        result = extractor.extract("42")
        assert result.success is True
        assert result.value == 42
        assert result.confidence == 0.8

    def test_no_match_reports_suggestions(self, registry):
        result = run(registry, ExtractorKey.UK_RESIDENT, "maybe")
        assert result.success is False
        assert result.reason_code == FailureReason.NO_MATCHING_PATTERN
        assert result.reason == "No matching pattern found"
        assert len(result.suggestions) == 2

    def test_same_input_same_output(self, registry):
        first = run(registry, ExtractorKey.HEIGHT, "5ft 8in")
        second = run(registry, ExtractorKey.HEIGHT, "5ft 8in")
        assert first == second


# =============================================================================
# Registry
# =============================================================================

class TestRegistry:
    """Tests for ExtractorRegistry lookups."""

    def test_has_all_ten_extractors(self, registry):
        assert len(registry) == 10
        assert registry.keys() == [key.value for key in ExtractorKey]

    def test_contains_accepts_enum_and_string(self, registry):
        assert ExtractorKey.HEIGHT in registry
        assert "height" in registry
        assert "favouriteColour" not in registry

    def test_unknown_key_raises(self, registry):
        with pytest.raises(UnknownExtractorError) as exc_info:
            registry.get("favouriteColour")
        assert exc_info.value.message == "Unknown extractor: favouriteColour"
        assert exc_info.value.status_code == 404

    def test_partial_registry(self, registry):
        partial = ExtractorRegistry([registry.get(ExtractorKey.AGE)])
        assert partial.keys() == ["age"]
        assert ExtractorKey.HEIGHT not in partial


# =============================================================================
# Field rules
# =============================================================================

class TestUkResident:

    def test_affirmative(self, registry):
        result = run(registry, ExtractorKey.UK_RESIDENT, "Yes, I am a UK resident")
        assert result.value is True
        assert result.confidence >= 0.9

    def test_uk_place(self, registry):
        result = run(registry, ExtractorKey.UK_RESIDENT, "I live in England")
        assert result.value is True
        assert result.confidence == 0.9

    def test_explicit_negation(self, registry):
        result = run(registry, ExtractorKey.UK_RESIDENT, "No, I'm not a UK resident")
        assert result.value is False

    def test_does_not_live_in_uk(self, registry):
        result = run(registry, ExtractorKey.UK_RESIDENT, "I don't live in the UK")
        assert result.value is False


class TestMaritalStatus:

    @pytest.mark.parametrize("message,expected", [
        ("I am divorced", "Divorced"),
        ("married", "Married"),
        ("I'm single", "Single"),
        ("not married", "Single"),
        ("I'm a widower", "Widowed"),
        ("we're separated", "Separated"),
        ("I have a partner", "In a relationship"),
        ("civil partnership", "Civil Partnership"),
    ])
    def test_canonical_values(self, registry, message, expected):
        assert run(registry, ExtractorKey.MARITAL_STATUS, message).value == expected

    def test_category_word_confidence(self, registry):
        assert run(registry, ExtractorKey.MARITAL_STATUS, "I am divorced").confidence == 0.95

    def test_relationship_phrasing_confidence(self, registry):
        assert run(registry, ExtractorKey.MARITAL_STATUS, "I have a partner").confidence == 0.7


class TestBooleanResponse:

    def test_yes(self, registry):
        result = run(registry, ExtractorKey.BOOLEAN_RESPONSE, "Yes")
        assert result.value is True
        assert result.confidence == 0.95

    def test_no(self, registry):
        result = run(registry, ExtractorKey.BOOLEAN_RESPONSE, "No")
        assert result.value is False
        assert result.confidence == 0.95

    def test_single_implies_no_dependents(self, registry):
        result = run(registry, ExtractorKey.BOOLEAN_RESPONSE, "I am single")
        assert result.value is False
        assert result.confidence == 0.75

    def test_have_children(self, registry):
        result = run(registry, ExtractorKey.BOOLEAN_RESPONSE, "I have two children")
        assert result.value is True
        assert result.confidence == 0.9

    def test_have_numeric_count_of_children(self, registry):
        result = run(registry, ExtractorKey.BOOLEAN_RESPONSE, "I have 3 children")
        assert result.value is True

    def test_zero_children_is_not_a_yes(self, registry):
        result = run(registry, ExtractorKey.BOOLEAN_RESPONSE, "I have 0 children")
        assert not (result.success and result.value is True)
        assert result.value is False
        assert result.confidence == 0.9


class TestNumber:

    @pytest.mark.parametrize("message,expected,confidence", [
        ("2", 2, 0.9),
        ("I have two children", 2, 0.85),
        ("seventeen", 17, 0.7),
        ("none", 0, 0.8),
    ])
    def test_values(self, registry, message, expected, confidence):
        result = run(registry, ExtractorKey.NUMBER, message)
        assert result.success is True
        assert result.value == expected
        assert result.confidence == confidence


class TestAge:

    def test_plain_age(self, registry):
        result = run(registry, ExtractorKey.AGE, "25 years old")
        assert result.value == 25
        assert result.confidence == 0.9

    def test_range(self, registry):
        assert run(registry, ExtractorKey.AGE, "5 to 10").value == "5-10"

    def test_approximate(self, registry):
        result = run(registry, ExtractorKey.AGE, "around 8")
        assert result.value == "~8"
        assert result.confidence == 0.7

    def test_bucket(self, registry):
        result = run(registry, ExtractorKey.AGE, "she's a toddler")
        assert result.value == "1-3"
        assert result.confidence == 0.6

    def test_three_digit_number_is_not_an_age(self, registry):
        assert run(registry, ExtractorKey.AGE, "150").success is False


class TestEmploymentStatus:

    @pytest.mark.parametrize("message,expected", [
        ("I'm self-employed", "Self-employed"),
        ("I'm not working at the moment", "Unemployed"),
        ("I work part-time", "Part-time employed"),
        ("I'm retired", "Retired"),
        ("I'm a student", "Student"),
        ("I work at a bank", "Employed"),
        ("I'm a freelancer", "Self-employed"),
        ("I'm a full-time student", "Student"),
        ("I'm a part-time student", "Student"),
        ("I work full-time", "Employed"),
    ])
    def test_canonical_values(self, registry, message, expected):
        assert run(registry, ExtractorKey.EMPLOYMENT_STATUS, message).value == expected

    def test_confidence(self, registry):
        assert run(registry, ExtractorKey.EMPLOYMENT_STATUS, "I'm retired").confidence == 0.9
        assert run(registry, ExtractorKey.EMPLOYMENT_STATUS, "I work at a bank").confidence == 0.7


class TestOccupation:

    def test_intro_phrase(self, registry):
        result = run(registry, ExtractorKey.OCCUPATION, "I am a teacher")
        assert result.value == "teacher"
        assert result.confidence == 0.9

    def test_stops_at_employer(self, registry):
        result = run(registry, ExtractorKey.OCCUPATION, "I work as a software engineer at Google")
        assert result.value == "software engineer"

    def test_stopword_fails_validation(self, registry):
        result = run(registry, ExtractorKey.OCCUPATION, "I'm a yes man")
        assert result.success is False
        assert result.reason_code == FailureReason.VALIDATION_FAILED


class TestSmokingStatus:

    @pytest.mark.parametrize("message,expected", [
        ("I don't smoke", "Never smoked"),
        ("I'm a non-smoker", "Never smoked"),
        ("I used to smoke", "Former smoker"),
        ("I quit smoking last year", "Former smoker"),
        ("I vape", "Vaper"),
        ("Yes, I smoke", "Current smoker"),
        ("no", "Never smoked"),
    ])
    def test_canonical_values(self, registry, message, expected):
        assert run(registry, ExtractorKey.SMOKING_STATUS, message).value == expected


class TestHeight:

    def test_feet_and_inches(self, registry):
        result = run(registry, ExtractorKey.HEIGHT, "5ft 8in")
        assert result.value == "5'8\""
        assert result.confidence == 0.9
        assert height_to_cm(result.original) == pytest.approx(172.72)

    def test_centimetres(self, registry):
        assert run(registry, ExtractorKey.HEIGHT, "175cm").value == "175cm"

    def test_symbols(self, registry):
        result = run(registry, ExtractorKey.HEIGHT, "5'8\"")
        assert result.value == "5'8\""
        assert result.confidence == 0.85

    def test_decimal_metres(self, registry):
        result = run(registry, ExtractorKey.HEIGHT, "1.8m")
        assert result.value == "1.8m"
        assert height_to_cm("1.8m") == pytest.approx(180.0)

    def test_out_of_range(self, registry):
        result = run(registry, ExtractorKey.HEIGHT, "400cm")
        assert result.success is False
        assert result.reason_code == FailureReason.VALIDATION_FAILED
        assert result.original == "400cm"


class TestWeight:

    def test_stone_and_pounds(self, registry):
        result = run(registry, ExtractorKey.WEIGHT, "12 stone 5 pounds")
        assert result.value == "12st 5lb"
        assert weight_to_kg(result.original) == pytest.approx(78.47, abs=0.01)

    def test_kilograms(self, registry):
        result = run(registry, ExtractorKey.WEIGHT, "80kg")
        assert result.value == "80kg"
        assert result.confidence == 0.9

    def test_kilos(self, registry):
        result = run(registry, ExtractorKey.WEIGHT, "80 kilos")
        assert result.value == "80kg"
        assert result.confidence == 0.9

    def test_decimal_kilograms(self, registry):
        assert run(registry, ExtractorKey.WEIGHT, "72.5 kg").value == "72.5kg"

    def test_pounds(self, registry):
        result = run(registry, ExtractorKey.WEIGHT, "165 lbs")
        assert result.value == "165lb"
        assert result.confidence == 0.8

    def test_out_of_range(self, registry):
        assert run(registry, ExtractorKey.WEIGHT, "1000 kg").success is False
