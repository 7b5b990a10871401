"""
API Router — Extraction Endpoints.

Exposes the extraction engine over HTTP: whole-utterance extraction,
single-extractor and single-question runs, and the caller-side
accept / confirm / ignore split.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import Field

from factfind.logging_config import get_logger
from factfind.schemas.extraction import (
    ExtractionContext,
    ExtractionResult,
    SmartExtractionResult,
    _CamelModel,
)
from factfind.services.acceptance import AcceptancePolicy, FieldDecisions
from factfind.services.data_extraction import DataExtractionService, get_extraction_service

logger = get_logger(__name__)
router = APIRouter(prefix="/extraction", tags=["Extraction"])


class MessageRequest(_CamelModel):
    message: str


class SmartExtractionRequest(_CamelModel):
    message: str
    context: ExtractionContext = Field(default_factory=ExtractionContext)


class DecisionResponse(_CamelModel):
    result: SmartExtractionResult
    decisions: FieldDecisions


def get_acceptance_policy() -> AcceptancePolicy:
    return AcceptancePolicy.from_settings()


@router.get("/extractors")
async def list_extractors(
    service: DataExtractionService = Depends(get_extraction_service),
) -> dict[str, Any]:
    """List registered extractor keys."""
    extractors = service.available_extractors()
    return {"data": extractors, "total": len(extractors)}


@router.post("/smart", response_model=SmartExtractionResult, response_model_by_alias=True)
async def smart_extract(
    body: SmartExtractionRequest,
    service: DataExtractionService = Depends(get_extraction_service),
) -> SmartExtractionResult:
    """Extract every field the utterance plausibly answers."""
    return service.smart_extract(body.message, body.context)


@router.post(
    "/extractors/{extractor_key}",
    response_model=ExtractionResult,
    response_model_by_alias=True,
)
async def run_extractor(
    extractor_key: str,
    body: MessageRequest,
    service: DataExtractionService = Depends(get_extraction_service),
) -> ExtractionResult:
    """Run one extractor against a message. Unknown keys are a 404."""
    extractor = service.registry.get(extractor_key)
    return extractor.extract(body.message)


@router.post(
    "/questions/{question_id}",
    response_model=ExtractionResult,
    response_model_by_alias=True,
)
async def extract_for_question(
    question_id: str,
    body: MessageRequest,
    service: DataExtractionService = Depends(get_extraction_service),
) -> ExtractionResult:
    """Run the extractor mapped to a question. Unknown question IDs are a 404."""
    mapping = service.mappings.by_question(question_id)
    return service.extract_data_from_message(body.message, mapping.extractor_key)


@router.post("/decision", response_model=DecisionResponse, response_model_by_alias=True)
async def decide(
    body: SmartExtractionRequest,
    service: DataExtractionService = Depends(get_extraction_service),
    policy: AcceptancePolicy = Depends(get_acceptance_policy),
) -> DecisionResponse:
    """Extract, then split the fields into accept / confirm / ignore."""
    result = service.smart_extract(body.message, body.context)
    decisions = policy.partition(result)

    logger.info(
        "extraction_decision",
        accepted=len(decisions.accepted),
        to_confirm=len(decisions.to_confirm),
        ignored=len(decisions.ignored),
    )
    return DecisionResponse(result=result, decisions=decisions)
