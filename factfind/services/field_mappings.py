"""
Field Mapping Table.

Static links between fact-find questions and the record fields they fill:
which data category and field a question populates, which extractor reads
the answer, the mapping-level validation rules, and the questionnaire's
conditional-visibility rule for the question.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Iterable, Iterator, Mapping, Optional

from factfind.exceptions import UnknownQuestionError
from factfind.logging_config import get_logger
from factfind.schemas.extraction import DataCategory
from factfind.services.extractors import ExtractorKey

logger = get_logger(__name__)


@dataclass(frozen=True)
class ValidationRules:
    required: bool = False
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    pattern: Optional[re.Pattern[str]] = None
    custom: Optional[Callable[[Any], bool]] = None


@dataclass(frozen=True)
class FieldValidation:
    is_valid: bool
    error: Optional[str] = None


@dataclass(frozen=True)
class FieldMapping:
    """A question and the field, extractor and rules used to answer it."""
    question_id: str
    data_category: DataCategory
    data_field: str
    extractor_key: ExtractorKey
    validation_rules: ValidationRules = field(default_factory=ValidationRules)
    # Questionnaire visibility rule, evaluated against collected answers
    visible_when: Optional[Callable[[Mapping[str, Any]], bool]] = None

    def is_visible(self, collected: Mapping[str, Any]) -> bool:
        if self.visible_when is None:
            return True
        return bool(self.visible_when(collected))


def validate_field(value: Any, rules: ValidationRules) -> FieldValidation:
    """
    Check a formatted value against a mapping's validation rules.

    Length and pattern rules only apply to string values. A custom predicate
    that raises is reported as a failed validation.
    """
    if rules.required and (value is None or value == ""):
        return FieldValidation(False, "This field is required")

    if isinstance(value, str):
        if rules.min_length is not None and len(value) < rules.min_length:
            return FieldValidation(False, f"Minimum length is {rules.min_length}")
        if rules.max_length is not None and len(value) > rules.max_length:
            return FieldValidation(False, f"Maximum length is {rules.max_length}")
        if rules.pattern is not None and not rules.pattern.search(value):
            return FieldValidation(False, "Invalid format")

    if rules.custom is not None:
        try:
            passed = bool(rules.custom(value))
        except Exception as e:
            logger.warning("custom_validator_error", value=repr(value), error=str(e))
            passed = False
        if not passed:
            return FieldValidation(False, "Custom validation failed")

    return FieldValidation(True)


def _has_dependents(collected: Mapping[str, Any]) -> bool:
    return collected.get("hasDependents") is True


QUESTION_FIELD_MAPPINGS: tuple[FieldMapping, ...] = (
    FieldMapping(
        question_id="uk_resident",
        data_category=DataCategory.PERSONAL,
        data_field="ukResident",
        extractor_key=ExtractorKey.UK_RESIDENT,
        validation_rules=ValidationRules(required=True),
    ),
    FieldMapping(
        question_id="marital_status",
        data_category=DataCategory.PERSONAL,
        data_field="maritalStatus",
        extractor_key=ExtractorKey.MARITAL_STATUS,
        validation_rules=ValidationRules(required=True),
    ),
    FieldMapping(
        question_id="has_dependents",
        data_category=DataCategory.PERSONAL,
        data_field="hasDependents",
        extractor_key=ExtractorKey.BOOLEAN_RESPONSE,
        validation_rules=ValidationRules(required=True),
    ),
    FieldMapping(
        question_id="num_dependents",
        data_category=DataCategory.PERSONAL,
        data_field="numDependents",
        extractor_key=ExtractorKey.NUMBER,
        visible_when=_has_dependents,
    ),
    FieldMapping(
        question_id="dependent_ages",
        data_category=DataCategory.PERSONAL,
        data_field="dependentAges",
        extractor_key=ExtractorKey.AGE,
        visible_when=_has_dependents,
    ),
    FieldMapping(
        question_id="employment_status",
        data_category=DataCategory.PERSONAL,
        data_field="employmentStatus",
        extractor_key=ExtractorKey.EMPLOYMENT_STATUS,
        validation_rules=ValidationRules(required=True),
    ),
    FieldMapping(
        question_id="occupation",
        data_category=DataCategory.PERSONAL,
        data_field="occupation",
        extractor_key=ExtractorKey.OCCUPATION,
    ),
    FieldMapping(
        question_id="smoking_status",
        data_category=DataCategory.PERSONAL,
        data_field="smokingStatus",
        extractor_key=ExtractorKey.SMOKING_STATUS,
        validation_rules=ValidationRules(required=True),
    ),
    FieldMapping(
        question_id="height",
        data_category=DataCategory.PERSONAL,
        data_field="height",
        extractor_key=ExtractorKey.HEIGHT,
        validation_rules=ValidationRules(required=True),
    ),
    FieldMapping(
        question_id="weight",
        data_category=DataCategory.PERSONAL,
        data_field="weight",
        extractor_key=ExtractorKey.WEIGHT,
        validation_rules=ValidationRules(required=True),
    ),
)

CLARIFICATION_TEMPLATES: Mapping[str, str] = MappingProxyType({
    "uk_resident": "Are you UK domiciled and a UK tax resident?",
    "marital_status": "What is your marital status?",
    "has_dependents": "Do you have any dependents?",
    "num_dependents": "How many dependents do you have?",
    "dependent_ages": "What are the ages of your dependents?",
    "employment_status": "What is your employment status?",
    "occupation": "What is your occupation?",
    "smoking_status": "Do you smoke?",
    "height": "What is your height?",
    "weight": "What is your weight?",
})


def clarification_question(mapping: FieldMapping) -> str:
    return CLARIFICATION_TEMPLATES.get(
        mapping.question_id,
        f"Could you provide information about {mapping.data_field}?",
    )


class FieldMappingTable:
    """Immutable, ordered collection of field mappings."""

    def __init__(self, mappings: Iterable[FieldMapping]) -> None:
        self._mappings = tuple(mappings)
        self._by_field = MappingProxyType({m.data_field: m for m in self._mappings})
        self._by_question = MappingProxyType({m.question_id: m for m in self._mappings})

    def __iter__(self) -> Iterator[FieldMapping]:
        return iter(self._mappings)

    def __len__(self) -> int:
        return len(self._mappings)

    def by_field(self, data_field: str) -> Optional[FieldMapping]:
        return self._by_field.get(data_field)

    def by_question(self, question_id: str) -> FieldMapping:
        mapping = self._by_question.get(question_id)
        if mapping is None:
            raise UnknownQuestionError(question_id)
        return mapping

    def required(self) -> tuple[FieldMapping, ...]:
        return tuple(m for m in self._mappings if m.validation_rules.required)


def build_default_mapping_table() -> FieldMappingTable:
    return FieldMappingTable(QUESTION_FIELD_MAPPINGS)
