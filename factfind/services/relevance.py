"""
Relevance Selector.

Decides which field mappings a user utterance is plausibly answering, using
topic keywords, the assistant question the user is replying to, and a few
cross-topic inferences. Candidates accumulate across rules; the result is
ordered and deduplicated, and empty when nothing points anywhere.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from factfind.schemas.extraction import ExtractionContext
from factfind.services.extractors import normalize_message
from factfind.services.field_mappings import FieldMapping, FieldMappingTable

# Units typed straight after a number ("175cm", "80kg") have no word boundary
_UNIT = r"(?:\b|(?<=\d))"


@dataclass(frozen=True)
class TopicRule:
    topic: str
    keywords: re.Pattern[str]
    data_fields: tuple[str, ...]


def _rule(topic: str, source: str, *data_fields: str) -> TopicRule:
    return TopicRule(topic, re.compile(source, re.IGNORECASE), data_fields)


TOPIC_RULES: tuple[TopicRule, ...] = (
    _rule(
        "uk_residency",
        r"\b(uk|united kingdom|britain|british|england|scotland|wales|northern ireland"
        r"|resident|residency|domiciled|tax resident)\b",
        "ukResident",
    ),
    _rule(
        "marital_status",
        r"\b(single|married|divorced|widowed|separated|civil partnership|partner"
        r"|relationship|marital|marriage)\b",
        "maritalStatus",
    ),
    _rule(
        "dependents",
        r"\b(children|kids|dependents|child|kid|dependent|family|son|daughter|childless)\b",
        "hasDependents", "numDependents", "dependentAges",
    ),
    _rule(
        "employment",
        r"\b(work|working|job|employed|employment|unemployed|retired|self[- ]?employed"
        r"|freelance|occupation|career|profession|student|studying|homemaker"
        r"|part[- ]?time|full[- ]?time)\b",
        "employmentStatus", "occupation",
    ),
    _rule(
        "smoking",
        r"\b(smoke|smokes|smoking|smoker|cigarettes?|tobacco|vape|vaping|non-smoker|never smoked)\b",
        "smokingStatus",
    ),
    _rule(
        "height",
        rf"{_UNIT}(height|tall|feet|foot|inches|cm|centimeters|centimetres|metres|meters|ft|in)\b"
        r"|\d+\s*['′]\s*\d+|\d+\s*[.,]\s*\d+\s*m\b",
        "height",
    ),
    _rule(
        "weight",
        rf"{_UNIT}(weight|weigh|kg|kgs|kilograms|kilos|pounds|lbs|lb|stone|st)\b",
        "weight",
    ),
)

_BARE_YES_NO = re.compile(r"\b(yes|no|yeah|nope|yep|nah)\b", re.IGNORECASE)

# Cues in the previous assistant turn for a bare yes/no reply; first hit wins
_YES_NO_TOPICS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\b(uk|resident|domiciled|tax)\b", re.IGNORECASE), "ukResident"),
    (re.compile(r"\b(dependents|children|kids)\b", re.IGNORECASE), "hasDependents"),
    (re.compile(r"\b(smoke|smoking)\b", re.IGNORECASE), "smokingStatus"),
)

_ASKED_ABOUT_DEPENDENTS = re.compile(r"\b(dependents|children|kids)\b", re.IGNORECASE)
_MARITAL_ANSWER = re.compile(r"\b(single|married|divorced|widowed|separated)\b", re.IGNORECASE)
_ASKED_ABOUT_MARITAL = re.compile(r"\b(married|single|marital|relationship)\b", re.IGNORECASE)
_DEPENDENTS_ANSWER = re.compile(
    r"\b(children|kids|dependents|no children|no kids|no dependents)\b", re.IGNORECASE
)


class RelevanceSelector:
    """Selects candidate field mappings for one utterance."""

    def __init__(self, mappings: FieldMappingTable) -> None:
        self._mappings = mappings

    def select(self, message: str, context: ExtractionContext) -> list[FieldMapping]:
        text = normalize_message(message)
        selected: list[FieldMapping] = []

        def add(data_field: str) -> None:
            mapping = self._mappings.by_field(data_field)
            if mapping is not None and mapping not in selected:
                selected.append(mapping)

        for rule in TOPIC_RULES:
            if rule.keywords.search(text):
                for data_field in rule.data_fields:
                    add(data_field)

        if not selected and _BARE_YES_NO.search(text):
            history = context.conversation_history
            asked = history[-2] if len(history) >= 2 else ""
            for cue, data_field in _YES_NO_TOPICS:
                if cue.search(asked):
                    add(data_field)
                    break

        asked = context.previous_assistant_message
        if _ASKED_ABOUT_DEPENDENTS.search(asked) and _MARITAL_ANSWER.search(text):
            add("hasDependents")
        if _ASKED_ABOUT_MARITAL.search(asked) and _DEPENDENTS_ANSWER.search(text):
            add("maritalStatus")

        return selected
