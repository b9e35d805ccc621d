"""
Natural-language symptom extraction service.
"""
import re
from typing import Any, Dict, List, Optional, Tuple

from sympcheck.core.logging import analysis_logger, get_logger
from sympcheck.ml.generative import GenerativeClient, generate_json
from sympcheck.schemas.symptoms import ParseResult
from sympcheck.utils.symptom_utils import dedupe_symptoms

logger = get_logger(__name__)

NON_HEALTH_ERROR = (
    "This input does not appear to be related to health symptoms. "
    "Please describe any physical symptoms you are experiencing."
)

VAGUE_INPUT_WARNING = (
    "No recognizable symptoms found. Please describe specific symptoms "
    "like headache, fever, nausea, etc."
)

# Canonical symptom phrases with the colloquial aliases that map onto them.
KNOWN_SYMPTOMS: List[Tuple[str, Tuple[str, ...]]] = [
    ("headache", ()),
    ("fever", ()),
    ("cough", ()),
    ("nausea", ("nauseous",)),
    ("vomiting", ("vomit", "throw up", "throwing up", "threw up")),
    ("diarrhea", ("loose stool",)),
    ("fatigue", ()),
    ("dizziness", ()),
    ("chest pain", ()),
    ("abdominal pain", ("stomach ache", "stomachache", "tummy ache", "tummyache", "bellyache")),
    ("back pain", ()),
    ("sore throat", ()),
    ("runny nose", ()),
    ("congestion", ()),
    ("shortness of breath", ()),
    ("muscle aches", ()),
    ("joint pain", ()),
    ("rash", ()),
    ("itching", ()),
    ("swelling", ()),
    ("bloating", ()),
    ("constipation", ("can't poop", "cant poop")),
    ("insomnia", ()),
    ("anxiety", ()),
    ("depression", ()),
    ("loss of appetite", ()),
    ("weight loss", ()),
    ("weight gain", ()),
    ("blurred vision", ()),
    ("ear pain", ()),
    ("toothache", ()),
    ("heartburn", ()),
]

HEALTH_KEYWORDS = (
    "feel", "pain", "hurt", "sick", "ill", "symptom", "health",
    "medical", "doctor", "body", "ache",
)

EXTRACTION_PROMPT = """
You are a medical symptom parser. Your task is to extract individual symptoms from natural language input and validate if they are medical symptoms.

Input: "{input}"

Please analyze this input and:
1. Extract individual symptoms from the text
2. Normalize each symptom to standard medical terminology
3. Validate if each extracted item is actually a medical symptom
4. Provide warnings for any non-medical terms or unclear descriptions
5. If the input is completely unrelated to health/medical symptoms, provide an appropriate error message

Rules:
- Only extract actual medical symptoms (pain, fever, nausea, etc.)
- Ignore non-medical words (articles, conjunctions, etc.)
- Convert colloquial terms to medical terms (e.g., "tummy ache" -> "abdominal pain")
- Separate compound symptoms (e.g., "headache and nausea" -> ["headache", "nausea"])
- If no valid symptoms are found, mark as invalid
- If input is completely unrelated to health (e.g., about cars, weather, food recipes), include an error message instead of returning an empty list silently

Return your response as a JSON object with this exact structure:
{{
  "symptoms": ["symptom1", "symptom2"],
  "isValid": true,
  "warnings": ["warning1"],
  "confidence": 0.0,
  "error": "error message if input is completely unrelated to health"
}}

Examples:
- "I have a headache and vomit" -> {{"symptoms": ["headache", "vomiting"], "isValid": true, "warnings": [], "confidence": 0.95}}
- "I feel bad today" -> {{"symptoms": [], "isValid": false, "warnings": ["'feel bad' is too vague - please describe specific symptoms"], "confidence": 0.2}}
- "my car is broken" -> {{"symptoms": [], "isValid": false, "warnings": [], "confidence": 0.1, "error": "This input appears to be about car problems, not health symptoms. Please describe any physical symptoms you're experiencing."}}

Only return the JSON object, no additional text.
"""


def _word_start_pattern(phrase: str) -> "re.Pattern[str]":
    return re.compile(r"\b" + re.escape(phrase))


_SYMPTOM_PATTERNS = [
    (
        symptom,
        [_word_start_pattern(p) for p in (symptom, symptom.replace(" ", ""), *aliases)],
    )
    for symptom, aliases in KNOWN_SYMPTOMS
]

_HEALTH_KEYWORD_PATTERNS = [_word_start_pattern(keyword) for keyword in HEALTH_KEYWORDS]


def keyword_parse(text: str) -> ParseResult:
    """Deterministic dictionary-based extractor used when the collaborator is unavailable."""
    text_lower = text.lower()

    found = [
        symptom for symptom, patterns in _SYMPTOM_PATTERNS
        if any(pattern.search(text_lower) for pattern in patterns)
    ]
    symptoms = dedupe_symptoms(found)

    warnings = []
    if not symptoms:
        if not any(pattern.search(text_lower) for pattern in _HEALTH_KEYWORD_PATTERNS):
            return ParseResult(
                symptoms=[],
                is_valid=False,
                warnings=[],
                original_input=text,
                error=NON_HEALTH_ERROR,
            )
        warnings.append(VAGUE_INPUT_WARNING)

    return ParseResult(
        symptoms=symptoms,
        is_valid=bool(symptoms),
        warnings=warnings,
        original_input=text,
    )


def _as_string_list(value: Any) -> List[str]:
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if isinstance(item, (str, int, float)) and str(item).strip()]


class SymptomParserService:
    """Turns free text into a normalized symptom list."""

    def __init__(self, client: GenerativeClient):
        self.client = client

    def build_prompt(self, text: str) -> str:
        return EXTRACTION_PROMPT.format(input=text.replace('"', "'"))

    async def parse_symptoms(self, text: str) -> ParseResult:
        """Extract symptoms from free text, falling back to keyword matching."""
        result = await generate_json(
            self.client,
            self.build_prompt(text),
            on_text_fallback=lambda raw: self._fallback(text, "no JSON in response"),
            on_failure=lambda exc: self._fallback(text, str(exc)),
        )
        if isinstance(result.data, ParseResult):
            return result.data
        return self._from_collaborator(text, result.data)

    def _fallback(self, text: str, reason: str) -> ParseResult:
        analysis_logger.log_fallback("symptom_parser", reason)
        return keyword_parse(text)

    def _from_collaborator(self, text: str, parsed: Dict[str, Any]) -> ParseResult:
        """Sanitize a collaborator reply into a ParseResult."""
        symptoms = dedupe_symptoms(_as_string_list(parsed.get("symptoms")))
        warnings = _as_string_list(parsed.get("warnings"))

        error: Optional[str] = parsed.get("error")
        if not isinstance(error, str) or not error.strip():
            error = None

        if symptoms and error is not None:
            # Partial extraction: keep the collaborator's concern as a warning.
            warnings.append(error)
            error = None
        elif not symptoms and error is None and not warnings:
            warnings.append(VAGUE_INPUT_WARNING)

        return ParseResult(
            symptoms=symptoms,
            is_valid=bool(symptoms),
            warnings=warnings,
            original_input=text,
            error=error,
        )
