"""
Exception hierarchy for the extraction engine.

User-facing extraction failures are returned as ``ExtractionResult`` values,
never raised. The exceptions here mark lookups of things that do not exist
and configuration mistakes in the static tables.
"""

from __future__ import annotations

from typing import Any, Optional


class FactFindError(Exception):
    """Base exception carrying a message, details and an HTTP status code."""

    def __init__(
        self,
        message: str = "Fact-find error",
        details: Optional[dict[str, Any]] = None,
        status_code: int = 500,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.status_code = status_code

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message, "details": self.details}


class UnknownExtractorError(FactFindError):
    """Requested extractor key is not registered."""

    def __init__(self, extractor_key: str) -> None:
        super().__init__(
            message=f"Unknown extractor: {extractor_key}",
            details={"extractor_key": extractor_key},
            status_code=404,
        )
        self.extractor_key = extractor_key


class UnknownQuestionError(FactFindError):
    """No field mapping exists for the question ID."""

    def __init__(self, question_id: str) -> None:
        super().__init__(
            message=f"Unknown question ID: {question_id}",
            details={"question_id": question_id},
            status_code=404,
        )
        self.question_id = question_id


class MappingConfigurationError(FactFindError):
    """The field mapping table references extractors the registry lacks."""

    def __init__(self, missing: list[tuple[str, str]]) -> None:
        super().__init__(
            message="Field mappings reference unregistered extractors",
            details={"missing": [{"question_id": q, "extractor_key": k} for q, k in missing]},
            status_code=500,
        )
        self.missing = missing
