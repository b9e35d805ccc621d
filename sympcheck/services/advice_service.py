"""
Advice generation service for predicted conditions.
"""
import asyncio
import re
from typing import Any, Dict, List, Optional, Tuple

from sympcheck.core.logging import analysis_logger, get_logger, log_error
from sympcheck.ml.generative import (
    SOURCE_JSON,
    SOURCE_TEXT_FALLBACK,
    GenerativeClient,
    generate_json,
)
from sympcheck.schemas.symptoms import (
    DEFAULT_DISCLAIMER,
    AdviceSource,
    CriticalLevel,
    EnhancedPrediction,
    MedicalAdvice,
    Prediction,
)
from sympcheck.utils.symptom_utils import display_symptom

logger = get_logger(__name__)

HIGH_PROBABILITY_THRESHOLD = 80
LOW_PROBABILITY_THRESHOLD = 30

_HIGH_KEYWORDS_RE = re.compile(r"\b(high|urgent)", re.IGNORECASE)
_LOW_KEYWORDS_RE = re.compile(r"\b(low|mild)", re.IGNORECASE)

GENERIC_CARE = [
    "Monitor symptoms closely and track any changes",
    "Stay hydrated with water and clear fluids",
    "Get adequate rest and avoid strenuous activities",
    "Maintain good hygiene and wash hands frequently",
]

GENERIC_PRECAUTIONS = [
    "Do not ignore worsening symptoms",
    "Follow medical advice strictly if consulting a doctor",
    "Avoid self-medication without professional guidance",
]

GENERIC_NEXT_STEPS = (
    "Schedule an appointment with your healthcare provider for proper "
    "diagnosis and treatment plan."
)

ADVICE_PROMPT = """
As a medical AI assistant, provide comprehensive advice for a patient with the following information:

Predicted Disease: {disease}
Confidence Level: {probability}%
Reported Symptoms: {symptoms}
{age_info}

Please provide a structured response with the following sections:

1. General Care Instructions (3-4 specific bullet points)
2. When to Seek Medical Attention (specific guidance based on the disease)
3. Critical Level Assessment (Low/Medium/High)
4. Important Precautions (2-3 specific precautions)
5. Recommended Next Steps (specific actionable advice)

Keep the response medically accurate, concise, and actionable. Always emphasize consulting healthcare professionals for proper diagnosis and treatment.

Format your response as a JSON object with these exact keys:
{{
  "general_care": ["instruction1", "instruction2", "instruction3", "instruction4"],
  "seek_attention": "specific guidance text",
  "critical_level": "Low|Medium|High",
  "precautions": ["precaution1", "precaution2", "precaution3"],
  "next_steps": "recommended actions",
  "disclaimer": "medical disclaimer text"
}}

Only return the JSON object, no additional text.
"""


def threshold_critical_level(probability: float) -> CriticalLevel:
    """Urgency from probability alone: >80 High, <30 Low, else Medium."""
    if probability > HIGH_PROBABILITY_THRESHOLD:
        return CriticalLevel.HIGH
    if probability < LOW_PROBABILITY_THRESHOLD:
        return CriticalLevel.LOW
    return CriticalLevel.MEDIUM


def text_critical_level(text: str, probability: float) -> CriticalLevel:
    """Threshold default, overridden by urgency keywords found in ``text``."""
    if _HIGH_KEYWORDS_RE.search(text):
        return CriticalLevel.HIGH
    if _LOW_KEYWORDS_RE.search(text):
        return CriticalLevel.LOW
    return threshold_critical_level(probability)


def _format_probability(probability: float) -> str:
    return f"{probability:g}"


def fallback_advice(disease: str, probability: float,
                    critical_level: Optional[CriticalLevel] = None) -> MedicalAdvice:
    """Generic advice used when the collaborator gives nothing usable."""
    return MedicalAdvice(
        general_care=list(GENERIC_CARE),
        seek_attention=(
            f"Consult a healthcare provider for proper evaluation of {disease} "
            f"({_format_probability(probability)}% confidence)."
        ),
        critical_level=critical_level or threshold_critical_level(probability),
        precautions=list(GENERIC_PRECAUTIONS),
        next_steps=GENERIC_NEXT_STEPS,
        disclaimer=DEFAULT_DISCLAIMER,
    )


def _string_list(value: Any) -> Optional[List[str]]:
    if not isinstance(value, list):
        return None
    return [str(item) for item in value if isinstance(item, (str, int, float))]


def _non_empty_string(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value
    return None


def _critical_level(value: Any) -> Optional[CriticalLevel]:
    if not isinstance(value, str):
        return None
    for level in CriticalLevel:
        if value.strip().lower() == level.value.lower():
            return level
    return None


def advice_from_json(data: Dict[str, Any], disease: str, probability: float) -> MedicalAdvice:
    """Coerce a collaborator JSON object into MedicalAdvice.

    Missing or wrongly typed fields are filled from the generic fallback.
    """
    base = fallback_advice(disease, probability)

    general_care = _string_list(data.get("general_care"))
    precautions = _string_list(data.get("precautions"))

    return MedicalAdvice(
        general_care=general_care if general_care is not None else base.general_care,
        seek_attention=_non_empty_string(data.get("seek_attention")) or base.seek_attention,
        critical_level=_critical_level(data.get("critical_level")) or base.critical_level,
        precautions=precautions if precautions is not None else base.precautions,
        next_steps=_non_empty_string(data.get("next_steps")) or base.next_steps,
        disclaimer=_non_empty_string(data.get("disclaimer")) or base.disclaimer,
    )


class AdviceService:
    """Generates structured care guidance for each predicted condition."""

    def __init__(self, client: GenerativeClient, max_concurrency: int = 3):
        self.client = client
        self.max_concurrency = max_concurrency

    def build_prompt(self, disease: str, probability: float, symptoms: List[str],
                     age: Optional[str]) -> str:
        age_info = f"Patient Age: {age} years old" if age else "Age not provided"
        return ADVICE_PROMPT.format(
            disease=disease,
            probability=_format_probability(probability),
            symptoms=", ".join(display_symptom(s) for s in symptoms),
            age_info=age_info,
        )

    async def generate_advice(
        self,
        disease: str,
        probability: float,
        symptoms: List[str],
        age: Optional[str] = None
    ) -> Tuple[MedicalAdvice, AdviceSource]:
        """Generate advice for one condition; never raises for collaborator failures."""

        def on_text(raw_text: str) -> MedicalAdvice:
            analysis_logger.log_fallback("advice", f"unparsable response for {disease}")
            return fallback_advice(disease, probability, text_critical_level(raw_text, probability))

        def on_failure(exc: Exception) -> MedicalAdvice:
            analysis_logger.log_fallback("advice", f"{disease}: {exc}")
            return fallback_advice(disease, probability)

        result = await generate_json(
            self.client,
            self.build_prompt(disease, probability, symptoms, age),
            on_text_fallback=on_text,
            on_failure=on_failure,
        )

        if result.source == SOURCE_JSON:
            return advice_from_json(result.data, disease, probability), AdviceSource.GENERATED
        if result.source == SOURCE_TEXT_FALLBACK:
            return result.data, AdviceSource.TEXT_FALLBACK
        return result.data, AdviceSource.FALLBACK

    async def advise_all(
        self,
        predictions: List[Prediction],
        symptoms: List[str],
        age: Optional[str] = None
    ) -> List[EnhancedPrediction]:
        """Advise every prediction concurrently, returning results in rank order."""
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def advise_one(prediction: Prediction) -> EnhancedPrediction:
            async with semaphore:
                try:
                    advice, source = await self.generate_advice(
                        prediction.disease, prediction.probability, symptoms, age
                    )
                except Exception as e:
                    log_error(logger, e, f"advice generation for {prediction.disease}")
                    advice, source = fallback_advice(
                        prediction.disease, prediction.probability
                    ), AdviceSource.FALLBACK

            return EnhancedPrediction(
                disease=prediction.disease,
                probability=prediction.probability,
                medical_advice=advice,
                advice_source=source,
            )

        # gather preserves input order regardless of completion order
        return list(await asyncio.gather(*(advise_one(p) for p in predictions)))
