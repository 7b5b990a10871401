"""
Field Extractor Registry.

Rule-based extractors that turn a free-text answer into a typed field value.
Each extractor owns an ordered list of patterns (primary first, then
alternates), a validator, a formatter and a confidence scorer. The registry
is built once per process and never mutated.

Extraction contract for a single pattern: the raw value is the capture group
named by ``ExtractorPattern.value_group`` (``0`` means the whole match). If
that group did not take part in the match, or matched nothing, the whole
match is used instead.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping, Optional

from factfind.exceptions import UnknownExtractorError
from factfind.schemas.extraction import ExtractionResult, FailureReason

DEFAULT_CONFIDENCE = 0.8


class ExtractorKey(str, Enum):
    """Closed set of extractor kinds; values are the wire-level keys."""
    UK_RESIDENT = "ukResident"
    MARITAL_STATUS = "maritalStatus"
    BOOLEAN_RESPONSE = "booleanResponse"
    NUMBER = "number"
    AGE = "age"
    EMPLOYMENT_STATUS = "employmentStatus"
    OCCUPATION = "occupation"
    SMOKING_STATUS = "smokingStatus"
    HEIGHT = "height"
    WEIGHT = "weight"


def normalize_message(message: str) -> str:
    """Trim and lowercase; curly apostrophes become straight ones."""
    return message.strip().lower().replace("’", "'")


def _has(pattern: str, text: str) -> bool:
    return re.search(pattern, text, re.IGNORECASE) is not None


@dataclass(frozen=True)
class ExtractorPattern:
    regex: re.Pattern[str]
    value_group: int = 1

    def raw_value(self, match: re.Match[str]) -> str:
        if 0 < self.value_group <= (self.regex.groups or 0):
            value = match.group(self.value_group)
            if value:
                return value
        return match.group(0)


def _pattern(source: str, value_group: int = 1) -> ExtractorPattern:
    return ExtractorPattern(re.compile(source, re.IGNORECASE), value_group)


@dataclass(frozen=True)
class FieldExtractor:
    """One extraction rule: match → validate → format → confidence."""
    key: ExtractorKey
    pattern: ExtractorPattern
    validate: Callable[[str], bool]
    format: Callable[[str, str], Any]
    alternate_patterns: tuple[ExtractorPattern, ...] = ()
    confidence: Optional[Callable[[str], float]] = None
    suggestions: tuple[str, ...] = ("Please provide more specific information",)

    @property
    def patterns(self) -> tuple[ExtractorPattern, ...]:
        return (self.pattern, *self.alternate_patterns)

    def extract(self, message: str) -> ExtractionResult:
        text = normalize_message(message)

        for candidate in self.patterns:
            match = candidate.regex.search(text)
            if match:
                break
        else:
            return ExtractionResult(
                success=False,
                reason_code=FailureReason.NO_MATCHING_PATTERN,
                reason="No matching pattern found",
                suggestions=list(self.suggestions),
            )

        matched_text = match.group(0)
        raw_value = candidate.raw_value(match)

        if not self.validate(raw_value):
            return ExtractionResult(
                success=False,
                reason_code=FailureReason.VALIDATION_FAILED,
                reason="Validation failed",
                original=raw_value,
                suggestions=list(self.suggestions),
            )

        score = self.confidence(matched_text) if self.confidence else DEFAULT_CONFIDENCE
        return ExtractionResult(
            success=True,
            value=self.format(raw_value, matched_text),
            confidence=score,
            original=raw_value,
        )


def _non_empty(value: str) -> bool:
    return len(value) > 0


# ── Unit conversions shared by height and weight ─────────────────

_FT_IN = r"(\d+)\s*(?:feet|foot|ft)\s*(?:(\d+)\s*(?:inches|inch|in|\")?)?"
_FT_IN_SYMBOL = r"(\d+)\s*['′]\s*(\d+)\s*[\"″]?"
_CM = r"(\d+)\s*(?:centimetres?|centimeters?|cm)"
_METRES = r"(\d+)\s*[.,]\s*(\d+)\s*(?:metres?|meters?|m)"

_ST_LB = r"(\d+)\s*(?:stone|st)\s*(?:(\d+)\s*(?:pounds?|lbs?)?)?"
_KG = r"(\d+)(?:\s*[.,]\s*(\d+))?\s*(?:kilograms?|kilos?|kgs?)"
_LB = r"(\d+)\s*(?:pounds?|lbs?)"

CM_PER_INCH = 2.54
KG_PER_STONE = 6.35029
KG_PER_POUND = 0.453592


def height_to_cm(text: str) -> float:
    """Convert feet/inches, centimetres or decimal metres to centimetres (0 if unparseable)."""
    for source in (_FT_IN, _FT_IN_SYMBOL):
        match = re.search(source, text, re.IGNORECASE)
        if match:
            feet = int(match.group(1))
            inches = int(match.group(2)) if match.group(2) else 0
            return (feet * 12 + inches) * CM_PER_INCH

    match = re.search(_CM, text, re.IGNORECASE)
    if match:
        return float(match.group(1))

    match = re.search(_METRES, text, re.IGNORECASE)
    if match:
        return float(f"{match.group(1)}.{match.group(2)}") * 100

    return 0.0


def weight_to_kg(text: str) -> float:
    """Convert stone/pounds, kilograms or pounds to kilograms (0 if unparseable)."""
    match = re.search(_ST_LB, text, re.IGNORECASE)
    if match:
        stone = int(match.group(1))
        pounds = int(match.group(2)) if match.group(2) else 0
        return stone * KG_PER_STONE + pounds * KG_PER_POUND

    match = re.search(_KG, text, re.IGNORECASE)
    if match:
        fraction = match.group(2) or "0"
        return float(f"{match.group(1)}.{fraction}")

    match = re.search(_LB, text, re.IGNORECASE)
    if match:
        return int(match.group(1)) * KG_PER_POUND

    return 0.0


# ── UK residency ─────────────────────────────────────────────────

_AFFIRMATIVE = r"yes|yeah|yep|y|true|correct|indeed|absolutely|definitely|of course"
_UK_PLACES = r"uk|united kingdom|britain|british|england|scotland|wales|northern ireland"
_UK_NEGATION = (
    r"(?:i'm |i am )?not (?:a )?(?:uk |british )?(?:tax )?(?:resident|domiciled)"
    rf"|(?:don't|do not) live in (?:the )?(?:{_UK_PLACES})"
    r"|live (?:abroad|overseas)"
)
_NEGATIVE = r"not really|nope|no|n|false|incorrect|negative"


def _format_uk_resident(value: str, matched: str) -> bool:
    text = matched or value
    if _has(rf"\b(?:{_UK_NEGATION}|{_NEGATIVE})\b", text):
        return False
    return _has(rf"\b(?:{_AFFIRMATIVE}|{_UK_PLACES})\b", text)


def _uk_resident_confidence(matched: str) -> float:
    if _has(r"\b(yes|absolutely|definitely|of course)\b", matched):
        return 0.95
    if _has(rf"\b({_UK_PLACES})\b", matched):
        return 0.9
    if _has(r"\b(yeah|yep|y|true)\b", matched):
        return 0.8
    return 0.6


# ── Marital status ───────────────────────────────────────────────

_NEVER_MARRIED = r"not married|unmarried|never (?:been )?married"


def _format_marital_status(value: str, matched: str) -> str:
    text = (matched or value).lower()
    if _has(rf"\b(single|{_NEVER_MARRIED})\b", text):
        return "Single"
    if _has(r"\b(married|marriage)\b", text):
        return "Married"
    if _has(r"\b(divorced|divorce)\b", text):
        return "Divorced"
    if _has(r"\b(widowed|widow|widower)\b", text):
        return "Widowed"
    if _has(r"\b(separated|separation)\b", text):
        return "Separated"
    if _has(r"\b(civil partnership|civil union|domestic partnership)\b", text):
        return "Civil Partnership"
    if _has(r"\b(partner|relationship|with someone|have a partner)\b", text):
        return "In a relationship"
    return value


def _marital_status_confidence(matched: str) -> float:
    if _has(r"\b(single|married|divorced|widowed|separated|civil partnership)\b", matched):
        return 0.95
    return 0.7


# ── Generic yes/no (dependents and similar) ──────────────────────

_ZERO_DEPENDENTS = r"0 (?:children|kids|dependents)"
_HAVE_DEPENDENTS = (
    r"i have (?:(?:a|an|one|two|three|four|five|six|seven|eight|nine|ten|[1-9]\d*) )?"
    r"(?:children|child|kids|kid|dependents|dependent)"
)


def _format_boolean(value: str, matched: str) -> bool:
    text = (matched or value).lower()
    # "I'm single" in reply to a dependents question reads as "no dependents"
    if _has(r"\bsingle\b", text):
        return False
    return _has(
        r"\b(yes|yeah|yep|y|true|correct|indeed|absolutely|definitely|of course|sure|i do have|i have)\b",
        text,
    )


def _boolean_confidence(matched: str) -> float:
    if _has(r"\b(yes|absolutely|definitely|of course)\b", matched):
        return 0.95
    if _has(r"\b(no|never|none)\b", matched):
        return 0.95
    if _has(rf"\b{_HAVE_DEPENDENTS}\b", matched):
        return 0.9
    if _has(rf"\b(no children|no kids|no dependents|{_ZERO_DEPENDENTS}|don't have any|haven't got any|childless)\b", matched):
        return 0.9
    if _has(r"\bsingle\b", matched):
        return 0.75
    if _has(r"\b(yeah|yep|sure)\b", matched):
        return 0.8
    return 0.6


# ── Numbers ──────────────────────────────────────────────────────

WORD_NUMBERS: Mapping[str, int] = MappingProxyType({
    "zero": 0, "one": 1, "two": 2, "three": 3, "four": 4, "five": 5,
    "six": 6, "seven": 7, "eight": 8, "nine": 9, "ten": 10,
    "eleven": 11, "twelve": 12, "thirteen": 13, "fourteen": 14, "fifteen": 15,
    "sixteen": 16, "seventeen": 17, "eighteen": 18, "nineteen": 19, "twenty": 20,
})
_WORD_NUMBER_ALTERNATION = "|".join(WORD_NUMBERS)
_NONE_PHRASES = r"none|not any|don't have any|no"


def _validate_number(value: str) -> bool:
    value = value.strip()
    return value.isdigit() or value in WORD_NUMBERS or _has(rf"\b(zero|{_NONE_PHRASES})\b", value)


def _format_number(value: str, matched: str) -> int:
    text = (matched or value).lower()
    if _has(rf"\b({_NONE_PHRASES}|zero)\b", text):
        return 0
    for word, number in WORD_NUMBERS.items():
        if _has(rf"\b{word}\b", text):
            return number
    digits = re.search(r"\d+", text)
    return int(digits.group(0)) if digits else 0


def _number_confidence(matched: str) -> float:
    if _has(r"\d+", matched):
        return 0.9
    if _has(r"\b(zero|one|two|three|four|five)\b", matched):
        return 0.85
    if _has(r"\b(none|no|not any)\b", matched):
        return 0.8
    return 0.7


# ── Ages ─────────────────────────────────────────────────────────

_AGE_HEDGE = r"under|over|about|around|approximately|roughly"
_AGE_SOFT_HEDGE = r"about|around|approximately|roughly"

AGE_BUCKETS: Mapping[str, str] = MappingProxyType({
    "baby": "0-1",
    "infant": "0-1",
    "toddler": "1-3",
    "child": "4-12",
    "teen": "13-19",
    "teenager": "13-19",
})


def _validate_age(value: str) -> bool:
    value = value.strip()
    if value.isdigit():
        return 0 <= int(value) <= 120
    return value in AGE_BUCKETS


def _format_age(value: str, matched: str) -> Any:
    text = matched or value

    age_range = re.search(r"(\d{1,2})\s*(?:to|-)\s*(\d{1,2})", text)
    if age_range:
        return f"{int(age_range.group(1))}-{int(age_range.group(2))}"

    approximate = re.search(rf"(?:{_AGE_HEDGE})\s*(\d{{1,2}})", text, re.IGNORECASE)
    if approximate:
        return f"~{approximate.group(1)}"

    for word, bucket in AGE_BUCKETS.items():
        if _has(rf"\b{word}\b", text):
            return bucket

    age = re.search(r"\d{1,2}", text)
    return int(age.group(0)) if age else value


def _age_confidence(matched: str) -> float:
    hedged = _has(rf"\b({_AGE_SOFT_HEDGE})\b", matched)
    if _has(r"\d{1,2}", matched) and not hedged:
        return 0.9
    if hedged:
        return 0.7
    if _has(rf"\b({'|'.join(AGE_BUCKETS)})\b", matched):
        return 0.6
    return 0.5


# ── Employment status ────────────────────────────────────────────

_UNEMPLOYED_CUES = (
    r"unemployed|not (?:currently )?(?:employed|working)|out of work|between jobs"
    r"|looking for work|job hunting|lost my job|redundant"
)
_SELF_EMPLOYED_CUES = (
    r"self[- ]?employed|own business|run a business|run my own|entrepreneur"
    r"|freelancer|freelance|contractor|sole trader"
)


def _format_employment_status(value: str, matched: str) -> str:
    text = (matched or value).lower()
    if _has(rf"\b({_UNEMPLOYED_CUES})\b", text):
        return "Unemployed"
    if _has(rf"\b({_SELF_EMPLOYED_CUES})\b", text):
        return "Self-employed"
    if _has(r"\bpart[- ]?time\b", text):
        return "Part-time employed"
    if _has(r"\b(retired|retirement)\b", text):
        return "Retired"
    if _has(r"\b(student|studying|university|college|school)\b", text):
        return "Student"
    if _has(r"\b(homemaker|housewife|househusband|stay[- ]?at[- ]?home)\b", text):
        return "Homemaker"
    if _has(r"\b(disabled|disability|unable to work)\b", text):
        return "Disabled"
    if _has(r"\b(employed|work|working|job|career|company|business|full[- ]?time)\b", text):
        return "Employed"
    return value


def _employment_status_confidence(matched: str) -> float:
    if _has(r"\b(employed|unemployed|self[- ]?employed|retired|student)\b", matched):
        return 0.9
    return 0.7


# ── Occupation ───────────────────────────────────────────────────

_CONFIDENT_JOBS = (
    "teacher|nurse|doctor|engineer|manager|developer|programmer|accountant|lawyer"
    "|chef|driver|cleaner|builder|electrician|plumber|mechanic"
)
_COMMON_JOBS = (
    f"{_CONFIDENT_JOBS}|sales|marketing|admin|secretary|consultant|analyst"
    "|designer|writer|artist|musician"
)
_OCCUPATION_STOPWORDS = r"yes|no|the|and|or|but|if|when|where|what|how|why"


def _validate_occupation(value: str) -> bool:
    value = value.strip()
    return len(value) > 2 and not _has(rf"\b({_OCCUPATION_STOPWORDS})\b", value)


def _format_occupation(value: str, matched: str) -> str:
    return re.sub(r"^(a|an|the)\s+", "", value.strip(), flags=re.IGNORECASE)


def _occupation_confidence(matched: str) -> float:
    if _has(rf"\b({_CONFIDENT_JOBS})\b", matched):
        return 0.9
    if _has(r"\b(i am an?|i'm an?|i work as)\b", matched):
        return 0.8
    return 0.6


# ── Smoking status ───────────────────────────────────────────────

_NEVER_SMOKED = r"never smoked|never been a smoker|non[- ]?smoker|(?:don't|do not) smoke|not a smoker"
_FORMER_SMOKER = (
    r"used to smoke|used to|former smoker|ex[- ]?smoker|previously smoked"
    r"|quit smoking|stopped smoking|gave up smoking|gave up|quit"
)
_VAPING = r"vape|vaping|vaper|e[- ]?cigarettes?|e[- ]?cigs?"
_SMOKING = r"current smoker|smoker|smokes|smoke|smoking|cigarettes?|tobacco"


def _format_smoking_status(value: str, matched: str) -> str:
    text = (matched or value).lower()
    if _has(rf"\b({_NEVER_SMOKED}|no|nope|nah|never)\b", text):
        return "Never smoked"
    if _has(rf"\b({_FORMER_SMOKER})\b", text):
        return "Former smoker"
    if _has(rf"\b({_VAPING})\b", text):
        return "Vaper"
    if _has(rf"\b({_SMOKING}|yes|yeah|yep)\b", text) and not _has(
        r"\b(don't|never|quit|stopped|gave up|used to|former|ex)\b", text
    ):
        return "Current smoker"
    return value


def _smoking_status_confidence(matched: str) -> float:
    if _has(r"\b(never smoked|non[- ]?smoker|current smoker|former smoker)\b", matched):
        return 0.9
    if _has(r"\b(smoke|don't smoke|quit smoking)\b", matched):
        return 0.8
    return 0.6


# ── Height ───────────────────────────────────────────────────────

def _validate_height(value: str) -> bool:
    return 50 <= height_to_cm(value) <= 250


def _format_height(value: str, matched: str) -> str:
    text = matched or value

    for source in (_FT_IN, _FT_IN_SYMBOL):
        match = re.search(source, text, re.IGNORECASE)
        if match:
            inches = int(match.group(2)) if match.group(2) else 0
            return f"{int(match.group(1))}'{inches}\""

    match = re.search(_CM, text, re.IGNORECASE)
    if match:
        return f"{match.group(1)}cm"

    match = re.search(_METRES, text, re.IGNORECASE)
    if match:
        return f"{match.group(1)}.{match.group(2)}m"

    return value


def _height_confidence(matched: str) -> float:
    if _has(r"\d+\s*(?:feet|foot|ft)", matched):
        return 0.9
    if _has(r"\d+\s*(?:centimetres?|centimeters?|cm)", matched):
        return 0.9
    if _has(r"\d+\s*['′]\s*\d*", matched):
        return 0.85
    return 0.7


# ── Weight ───────────────────────────────────────────────────────

def _validate_weight(value: str) -> bool:
    return 20 <= weight_to_kg(value) <= 300


def _format_weight(value: str, matched: str) -> str:
    text = matched or value

    match = re.search(_ST_LB, text, re.IGNORECASE)
    if match:
        stone = int(match.group(1))
        pounds = int(match.group(2)) if match.group(2) else 0
        return f"{stone}st {pounds}lb" if pounds > 0 else f"{stone}st"

    match = re.search(_KG, text, re.IGNORECASE)
    if match:
        if match.group(2):
            return f"{match.group(1)}.{match.group(2)}kg"
        return f"{match.group(1)}kg"

    match = re.search(_LB, text, re.IGNORECASE)
    if match:
        return f"{match.group(1)}lb"

    return value


def _weight_confidence(matched: str) -> float:
    if _has(r"\d+\s*(?:stone|st)\b", matched):
        return 0.9
    if _has(r"\d+(?:\s*[.,]\s*\d+)?\s*(?:kilograms?|kilos?|kgs?)", matched):
        return 0.9
    if _has(r"\d+\s*(?:pounds?|lbs?)", matched):
        return 0.8
    return 0.7


DEFAULT_EXTRACTORS: tuple[FieldExtractor, ...] = (
    FieldExtractor(
        key=ExtractorKey.UK_RESIDENT,
        pattern=_pattern(rf"\b({_AFFIRMATIVE})\b"),
        alternate_patterns=(
            _pattern(rf"\b({_UK_NEGATION})\b"),
            _pattern(rf"\b({_NEGATIVE})\b"),
            _pattern(rf"\b({_UK_PLACES})\b"),
        ),
        validate=_non_empty,
        format=_format_uk_resident,
        confidence=_uk_resident_confidence,
        suggestions=(
            'Try answering with "yes" or "no"',
            'You can say "I am UK resident" or "I live in the UK"',
        ),
    ),
    FieldExtractor(
        key=ExtractorKey.MARITAL_STATUS,
        pattern=_pattern(rf"\b({_NEVER_MARRIED})\b"),
        alternate_patterns=(
            _pattern(
                r"\b(single|married|divorced|widowed|widower|widow|separated"
                r"|civil partnership|partner|relationship)\b"
            ),
            _pattern(r"\b(in a relationship|with someone|have a partner)\b"),
            _pattern(r"\b(civil union|domestic partnership)\b"),
        ),
        validate=_non_empty,
        format=_format_marital_status,
        confidence=_marital_status_confidence,
        suggestions=(
            "Please specify: single, married, divorced, widowed, or separated",
            "You can say \"I am married\" or \"I'm single\"",
        ),
    ),
    FieldExtractor(
        key=ExtractorKey.BOOLEAN_RESPONSE,
        pattern=_pattern(
            r"\b(yes|yeah|yep|y|true|correct|indeed|absolutely|definitely|of course|sure)\b"
        ),
        alternate_patterns=(
            _pattern(r"\b(no|nope|n|false|incorrect|not really|negative|nah|never)\b"),
            _pattern(rf"\b(i do have|{_HAVE_DEPENDENTS})\b"),
            _pattern(
                r"\b(i don't have any|i don't have|i haven't got any|i haven't got"
                r"|no children|no kids|no dependents|none|zero|don't have any"
                rf"|haven't got any|childless|no family|{_ZERO_DEPENDENTS})\b"
            ),
            _pattern(r"\b(i am single|i'm single|single)\b"),
        ),
        validate=_non_empty,
        format=_format_boolean,
        confidence=_boolean_confidence,
        suggestions=(
            'Please answer with "yes" or "no"',
            "You can say \"I do\" or \"I don't\"",
        ),
    ),
    FieldExtractor(
        key=ExtractorKey.NUMBER,
        pattern=_pattern(r"\b(\d+)\b"),
        alternate_patterns=(
            _pattern(rf"\b({_WORD_NUMBER_ALTERNATION})\b"),
            _pattern(rf"\b({_NONE_PHRASES})\b"),
        ),
        validate=_validate_number,
        format=_format_number,
        confidence=_number_confidence,
        suggestions=(
            "Please provide a number",
            'You can write it as digits (e.g., "2") or words (e.g., "two")',
            "Say \"none\" or \"zero\" if you don't have any",
        ),
    ),
    FieldExtractor(
        key=ExtractorKey.AGE,
        pattern=_pattern(
            rf"\b(?:(?:{_AGE_HEDGE})\s*)?(\d{{1,2}})(?:\s*(?:to|-)\s*\d{{1,2}})?"
            r"\s*(?:years?\s*old|yrs?\s*old|y\.?o\.?)?\b"
        ),
        alternate_patterns=(
            _pattern(r"\b(baby|infant|toddler|child|teenager|teen)\b"),
        ),
        validate=_validate_age,
        format=_format_age,
        confidence=_age_confidence,
        suggestions=(
            "Please provide age in years",
            'You can say "25 years old" or just "25"',
            'For ranges, say "5 to 10" or "around 8"',
        ),
    ),
    FieldExtractor(
        key=ExtractorKey.EMPLOYMENT_STATUS,
        pattern=_pattern(
            r"\b(not (?:currently )?(?:employed|working)|out of work|between jobs"
            r"|self[- ]?employed|unemployed|employed|retired|student|homemaker|disabled)\b"
        ),
        alternate_patterns=(
            _pattern(r"\b(looking for work|job hunting|lost my job|redundant)\b"),
            _pattern(
                r"\b(own business|run a business|run my own|entrepreneur|freelancer"
                r"|freelance|contractor|sole trader)\b"
            ),
            _pattern(
                r"\b(studying|at university|at college|stay[- ]?at[- ]?home|housewife"
                r"|househusband|unable to work|retirement)\b"
            ),
            _pattern(r"\b(part[- ]?time|full[- ]?time)\b"),
            _pattern(r"\b(working|work|job|career|business|company)\b"),
        ),
        validate=_non_empty,
        format=_format_employment_status,
        confidence=_employment_status_confidence,
        suggestions=(
            "Please specify: employed, unemployed, self-employed, retired, student, etc.",
            "You can say \"I work\" or \"I'm retired\"",
        ),
    ),
    FieldExtractor(
        key=ExtractorKey.OCCUPATION,
        pattern=_pattern(
            r"\b(?:i am an?|i'm an?|i work as(?: an?)?|my job is(?: an?)?"
            r"|i'm employed as(?: an?)?|i am employed as(?: an?)?)\s+"
            r"([a-z][a-z\s]*?)(?:\.|,|$|\s+(?:at|for|in|with)\b)"
        ),
        alternate_patterns=(
            _pattern(rf"\b({_COMMON_JOBS})\b"),
            _pattern(r"\b([a-z][a-z\s]*?)\s+(?:by profession|as a career|for a living)\b"),
        ),
        validate=_validate_occupation,
        format=_format_occupation,
        confidence=_occupation_confidence,
        suggestions=(
            "Please specify your job title or profession",
            'You can say "I am a teacher" or "I work as an engineer"',
        ),
    ),
    FieldExtractor(
        key=ExtractorKey.SMOKING_STATUS,
        pattern=_pattern(rf"\b({_NEVER_SMOKED})\b"),
        alternate_patterns=(
            _pattern(rf"\b({_FORMER_SMOKER})\b"),
            _pattern(rf"\b({_VAPING})\b"),
            _pattern(rf"\b({_SMOKING})\b"),
            _pattern(r"\b(nope|nah|never|no)\b"),
            _pattern(r"\b(yes|yeah|yep)\b"),
        ),
        validate=_non_empty,
        format=_format_smoking_status,
        confidence=_smoking_status_confidence,
        suggestions=(
            "Please answer: do you smoke, never smoked, or used to smoke?",
            "You can say \"I don't smoke\" or \"I quit smoking\"",
        ),
    ),
    FieldExtractor(
        key=ExtractorKey.HEIGHT,
        pattern=_pattern(rf"\b{_FT_IN}\b", value_group=0),
        alternate_patterns=(
            _pattern(rf"\b{_CM}\b", value_group=0),
            _pattern(rf"\b{_FT_IN_SYMBOL}", value_group=0),
            _pattern(rf"\b{_METRES}\b", value_group=0),
        ),
        validate=_validate_height,
        format=_format_height,
        confidence=_height_confidence,
        suggestions=(
            'Please provide height in feet/inches (e.g., "5ft 8in") or centimeters (e.g., "175cm")',
            "You can use symbols like 5'8\" or write it out",
        ),
    ),
    FieldExtractor(
        key=ExtractorKey.WEIGHT,
        pattern=_pattern(rf"\b{_ST_LB}\b", value_group=0),
        alternate_patterns=(
            _pattern(rf"\b{_KG}\b", value_group=0),
            _pattern(rf"\b{_LB}\b", value_group=0),
        ),
        validate=_validate_weight,
        format=_format_weight,
        confidence=_weight_confidence,
        suggestions=(
            'Please provide weight in stone/pounds (e.g., "12st 5lb") or kilograms (e.g., "80kg")',
            'You can say "12 stone" or "80 kilos"',
        ),
    ),
)


class ExtractorRegistry:
    """Read-only lookup from ``ExtractorKey`` to ``FieldExtractor``."""

    def __init__(self, extractors: Iterable[FieldExtractor]) -> None:
        self._extractors: Mapping[ExtractorKey, FieldExtractor] = MappingProxyType(
            {extractor.key: extractor for extractor in extractors}
        )

    def __contains__(self, key: object) -> bool:
        try:
            return ExtractorKey(key) in self._extractors
        except ValueError:
            return False

    def __len__(self) -> int:
        return len(self._extractors)

    def keys(self) -> list[str]:
        return [key.value for key in self._extractors]

    def get(self, key: ExtractorKey | str) -> FieldExtractor:
        """Return the extractor for ``key`` or raise ``UnknownExtractorError``."""
        try:
            extractor = self._extractors.get(ExtractorKey(key))
        except ValueError:
            extractor = None
        if extractor is None:
            raise UnknownExtractorError(getattr(key, "value", str(key)))
        return extractor

    def extract(self, key: ExtractorKey | str, message: str) -> ExtractionResult:
        return self.get(key).extract(message)


def build_default_registry() -> ExtractorRegistry:
    return ExtractorRegistry(DEFAULT_EXTRACTORS)
