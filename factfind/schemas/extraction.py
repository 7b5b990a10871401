"""
Data models for extraction inputs and results.

Every model serialises with camelCase aliases (``needsClarification``,
``previousAnswers``) and accepts either spelling on input.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class DataCategory(str, Enum):
    """Top-level buckets of the collected fact-find record."""
    PERSONAL = "personal"
    FINANCIAL = "financial"
    INSURANCE = "insurance"
    PREFERENCES = "preferences"


class FailureReason(str, Enum):
    UNKNOWN_EXTRACTOR = "unknown_extractor"
    UNKNOWN_QUESTION = "unknown_question"
    NO_MATCHING_PATTERN = "no_matching_pattern"
    VALIDATION_FAILED = "validation_failed"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ExtractionResult(_CamelModel):
    """Outcome of applying one extractor to one message."""
    success: bool
    value: Any = None
    confidence: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    original: Optional[str] = None  # Raw matched value, before formatting
    reason_code: Optional[FailureReason] = None
    reason: Optional[str] = None
    suggestions: list[str] = Field(default_factory=list)


class PreviousAnswers(_CamelModel):
    """Answers collected on earlier turns, grouped by data category."""
    personal: dict[str, Any] = Field(default_factory=dict)
    financial: dict[str, Any] = Field(default_factory=dict)
    insurance: dict[str, Any] = Field(default_factory=dict)
    preferences: dict[str, Any] = Field(default_factory=dict)

    def lookup(self, data_field: str) -> Any:
        """First collected value for the field across all categories, or None."""
        for category in DataCategory:
            value = getattr(self, category.value).get(data_field)
            if value is not None and value != "":
                return value
        return None

    def merged(self) -> dict[str, Any]:
        """Flatten all categories into one map; earlier categories win."""
        merged: dict[str, Any] = {}
        for category in reversed(list(DataCategory)):
            merged.update(getattr(self, category.value))
        return merged


class ExtractionContext(_CamelModel):
    """Ambient conversation state supplied by the caller on every turn."""
    current_question_id: str = ""
    previous_answers: PreviousAnswers = Field(default_factory=PreviousAnswers)
    conversation_history: list[str] = Field(default_factory=list)
    last_assistant_message: str = ""

    @property
    def previous_assistant_message(self) -> str:
        """The assistant turn the user is replying to."""
        if self.last_assistant_message:
            return self.last_assistant_message
        if len(self.conversation_history) >= 2:
            return self.conversation_history[-2]
        return ""


class SmartExtractionResult(_CamelModel):
    """Aggregate, advisory outcome for one utterance."""
    extracted: dict[str, Any] = Field(default_factory=dict)
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    needs_clarification: bool = False
    clarification_questions: list[str] = Field(default_factory=list)
    validation_errors: list[str] = Field(default_factory=list)
    field_confidences: dict[str, float] = Field(default_factory=dict)
