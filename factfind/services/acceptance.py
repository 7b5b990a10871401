"""
Caller-side acceptance policy.

The extraction engine only reports confidence; whether a value is applied,
confirmed with the user first, or dropped is the dialogue manager's call.
Thresholds come from settings so they can be tuned without touching the
extraction rules.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from pydantic import Field

from factfind.config import Settings, get_settings
from factfind.logging_config import get_logger
from factfind.schemas.extraction import SmartExtractionResult, _CamelModel

logger = get_logger(__name__)


class AcceptanceDecision(str, Enum):
    ACCEPT = "accept"      # Apply directly
    CONFIRM = "confirm"    # Apply, but check with the user
    IGNORE = "ignore"      # Too uncertain to act on


class FieldDecisions(_CamelModel):
    accepted: dict[str, Any] = Field(default_factory=dict)
    to_confirm: dict[str, Any] = Field(default_factory=dict)
    ignored: dict[str, Any] = Field(default_factory=dict)


@dataclass(frozen=True)
class AcceptancePolicy:
    accept_threshold: float = 0.85
    confirm_threshold: float = 0.75

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "AcceptancePolicy":
        settings = settings or get_settings()
        return cls(
            accept_threshold=settings.accept_threshold,
            confirm_threshold=settings.confirm_threshold,
        )

    def decide(self, confidence: float) -> AcceptanceDecision:
        if confidence > self.accept_threshold:
            return AcceptanceDecision.ACCEPT
        if confidence > self.confirm_threshold:
            return AcceptanceDecision.CONFIRM
        return AcceptanceDecision.IGNORE

    def partition(self, result: SmartExtractionResult) -> FieldDecisions:
        """Split extracted fields by decision, scoring each field on its own confidence."""
        decisions = FieldDecisions()
        buckets = {
            AcceptanceDecision.ACCEPT: decisions.accepted,
            AcceptanceDecision.CONFIRM: decisions.to_confirm,
            AcceptanceDecision.IGNORE: decisions.ignored,
        }

        for data_field, value in result.extracted.items():
            score = result.field_confidences.get(data_field, result.confidence)
            buckets[self.decide(score)][data_field] = value

        logger.debug(
            "acceptance_partitioned",
            accepted=list(decisions.accepted),
            to_confirm=list(decisions.to_confirm),
            ignored=list(decisions.ignored),
        )
        return decisions
