"""
Data Extraction Service.

Turns one user utterance into an advisory ``SmartExtractionResult``: small
talk is filtered out, the relevance selector narrows the candidate fields,
each candidate's extractor runs, formatted values are re-validated against
the mapping rules, and clarification questions are generated for required
fields that are still missing.

The service holds only read-only tables, so one instance can serve any
number of callers.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Iterable, Optional

from factfind.config import get_settings
from factfind.exceptions import MappingConfigurationError, UnknownExtractorError, UnknownQuestionError
from factfind.logging_config import extraction_log_context, get_logger
from factfind.schemas.extraction import (
    ExtractionContext,
    ExtractionResult,
    FailureReason,
    SmartExtractionResult,
)
from factfind.services.casual_filter import casual_result, is_casual_utterance
from factfind.services.extractors import ExtractorKey, ExtractorRegistry, build_default_registry
from factfind.services.field_mappings import (
    FieldMappingTable,
    build_default_mapping_table,
    clarification_question,
    validate_field,
)
from factfind.services.relevance import RelevanceSelector

settings = get_settings()
logger = get_logger(__name__)

# Below this overall confidence the result asks for clarification
CLARIFICATION_THRESHOLD = 0.7
# Used when an extractor reports success without a score
FALLBACK_FIELD_CONFIDENCE = 0.5


class DataExtractionService:
    """
    Orchestrates extraction for the fact-find interview.

    Args:
        registry: Extractor registry; defaults to the built-in extractors.
        mappings: Field mapping table; defaults to the built-in questionnaire mappings.
        filter_by_visibility: Skip clarification questions for fields whose
            visibility rule is false. Defaults to the configured setting.

    Raises:
        MappingConfigurationError: A mapping names an extractor the registry lacks.
    """

    def __init__(
        self,
        registry: Optional[ExtractorRegistry] = None,
        mappings: Optional[FieldMappingTable] = None,
        filter_by_visibility: Optional[bool] = None,
    ) -> None:
        self.registry = registry if registry is not None else build_default_registry()
        self.mappings = mappings if mappings is not None else build_default_mapping_table()
        if filter_by_visibility is None:
            filter_by_visibility = settings.filter_clarifications_by_visibility
        self.filter_by_visibility = filter_by_visibility
        self.selector = RelevanceSelector(self.mappings)

        missing = [
            (m.question_id, m.extractor_key.value)
            for m in self.mappings
            if m.extractor_key not in self.registry
        ]
        if missing:
            raise MappingConfigurationError(missing)

    def available_extractors(self) -> list[str]:
        return self.registry.keys()

    def extract_data_from_message(
        self,
        message: str,
        extractor_key: ExtractorKey | str,
    ) -> ExtractionResult:
        """Run a single extractor against a message."""
        try:
            extractor = self.registry.get(extractor_key)
        except UnknownExtractorError as e:
            logger.warning("extractor_unknown", extractor_key=e.extractor_key)
            return ExtractionResult(
                success=False,
                reason_code=FailureReason.UNKNOWN_EXTRACTOR,
                reason=e.message,
                suggestions=["Check available extractors"],
            )
        return extractor.extract(message)

    def test_extractor(self, extractor_key: ExtractorKey | str, sample: str) -> ExtractionResult:
        """Try one extractor on sample text (diagnostics and the CLI)."""
        return self.extract_data_from_message(sample, extractor_key)

    def extract_for_question(self, message: str, question_id: str) -> ExtractionResult:
        """Run the extractor mapped to a known question."""
        try:
            mapping = self.mappings.by_question(question_id)
        except UnknownQuestionError as e:
            return ExtractionResult(
                success=False,
                reason_code=FailureReason.UNKNOWN_QUESTION,
                reason=e.message,
            )
        return self.extract_data_from_message(message, mapping.extractor_key)

    def smart_extract(
        self,
        message: str,
        context: Optional[ExtractionContext] = None,
    ) -> SmartExtractionResult:
        """
        Extract every field the utterance plausibly answers.

        Args:
            message: The latest user utterance.
            context: Conversation state supplied by the caller.

        Returns:
            SmartExtractionResult with accepted values, their mean confidence,
            clarification questions and mapping-level validation errors.
        """
        context = context if context is not None else ExtractionContext()
        with extraction_log_context(context.current_question_id):
            return self._extract(message, context)

    def _extract(self, message: str, context: ExtractionContext) -> SmartExtractionResult:
        if is_casual_utterance(message):
            logger.info("casual_utterance_detected", message_length=len(message))
            return casual_result()

        candidates = self.selector.select(message, context)
        logger.debug(
            "relevant_mappings_selected",
            fields=[m.data_field for m in candidates],
        )

        extracted: dict[str, object] = {}
        field_confidences: dict[str, float] = {}
        validation_errors: list[str] = []

        for mapping in candidates:
            result = self.registry.extract(mapping.extractor_key, message)
            if not result.success or result.value is None:
                continue

            validation = validate_field(result.value, mapping.validation_rules)
            if validation.is_valid:
                extracted[mapping.data_field] = result.value
                field_confidences[mapping.data_field] = (
                    result.confidence if result.confidence is not None else FALLBACK_FIELD_CONFIDENCE
                )
            else:
                validation_errors.append(f"{mapping.data_field}: {validation.error}")

        confidence = _avg_confidence(field_confidences.values())
        clarification_questions = self._missing_field_questions(extracted, context)

        result = SmartExtractionResult(
            extracted=extracted,
            confidence=confidence,
            needs_clarification=(
                bool(clarification_questions)
                or bool(validation_errors)
                or confidence < CLARIFICATION_THRESHOLD
            ),
            clarification_questions=clarification_questions,
            validation_errors=validation_errors,
            field_confidences=field_confidences,
        )

        logger.info(
            "smart_extraction_complete",
            candidates=len(candidates),
            fields_extracted=len(extracted),
            confidence=confidence,
            validation_errors=len(validation_errors),
            needs_clarification=result.needs_clarification,
        )
        return result

    def _missing_field_questions(
        self,
        extracted: dict[str, object],
        context: ExtractionContext,
    ) -> list[str]:
        """Clarification prompts for required fields absent from this turn and all earlier ones."""
        collected = {**context.previous_answers.merged(), **extracted}
        questions: list[str] = []

        for mapping in self.mappings.required():
            if mapping.data_field in extracted:
                continue
            if context.previous_answers.lookup(mapping.data_field) is not None:
                continue
            if self.filter_by_visibility and not mapping.is_visible(collected):
                continue
            questions.append(clarification_question(mapping))

        return questions


def _avg_confidence(scores: Iterable[float]) -> float:
    scores = list(scores)
    if not scores:
        return 0.0
    return round(sum(scores) / len(scores), 3)


@lru_cache(maxsize=1)
def get_extraction_service() -> DataExtractionService:
    """Process-wide service built from the default registry and mapping table."""
    return DataExtractionService()
