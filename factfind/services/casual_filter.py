"""
Casual-Utterance Filter.

Recognises pleasantries so they never reach field extraction. Each pattern
must match the whole normalised message, not a substring of it.
"""

from __future__ import annotations

import re

from factfind.schemas.extraction import SmartExtractionResult
from factfind.services.extractors import normalize_message

CASUAL_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(source, re.IGNORECASE)
    for source in (
        r"(hi|hello|hey|good morning|good afternoon|good evening)",
        r"(i am fine|i'm fine|fine|good|great|okay|ok)",
        r"(how are you|what's up|how's it going)",
        r"(thanks|thank you|cheers)",
        r"(bye|goodbye|see you|talk soon)",
    )
)

# The seven core fact-find questions, in interview order
CORE_QUESTIONS: tuple[str, ...] = (
    "Are you UK domiciled and a UK tax resident?",
    "What is your marital status?",
    "Do you have any dependents?",
    "What is your employment status?",
    "Do you smoke?",
    "What is your height?",
    "What is your weight?",
)


def is_casual_utterance(message: str) -> bool:
    text = normalize_message(message)
    return any(pattern.fullmatch(text) for pattern in CASUAL_PATTERNS)


def casual_result() -> SmartExtractionResult:
    """The short-circuit result returned for small talk."""
    return SmartExtractionResult(
        extracted={},
        confidence=0.0,
        needs_clarification=True,
        clarification_questions=list(CORE_QUESTIONS),
        validation_errors=[],
    )
