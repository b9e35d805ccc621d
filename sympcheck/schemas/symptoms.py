"""
Symptom analysis schemas.
"""
from datetime import datetime
from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, Field, field_validator

DEFAULT_DISCLAIMER = (
    "This is not professional medical advice. Please consult a healthcare "
    "provider for accurate diagnosis and treatment."
)

ANALYSIS_DISCLAIMER = (
    "This prediction is for informational purposes only. Always consult with "
    "healthcare professionals for medical advice."
)


class CriticalLevel(str, Enum):
    """Coarse urgency classification."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class AdviceSource(str, Enum):
    """Which path produced a piece of advice."""
    GENERATED = "generated"
    TEXT_FALLBACK = "text_fallback"
    FALLBACK = "fallback"


class ParseResult(BaseModel):
    """Outcome of natural-language symptom extraction."""
    symptoms: List[str] = Field(default_factory=list)
    is_valid: bool = False
    warnings: List[str] = Field(default_factory=list)
    original_input: str
    error: Optional[str] = None


class Prediction(BaseModel):
    """A ranked disease candidate."""
    disease: str
    probability: float = Field(..., ge=0, le=100)


class MedicalAdvice(BaseModel):
    """Structured care guidance for one predicted condition."""
    general_care: List[str] = Field(default_factory=list)
    seek_attention: str
    critical_level: CriticalLevel
    precautions: List[str] = Field(default_factory=list)
    next_steps: str
    disclaimer: str = DEFAULT_DISCLAIMER

    @field_validator('disclaimer')
    @classmethod
    def disclaimer_not_empty(cls, v):
        if not v or not v.strip():
            return DEFAULT_DISCLAIMER
        return v


class EnhancedPrediction(Prediction):
    """Prediction with its generated advice."""
    medical_advice: MedicalAdvice
    advice_source: AdviceSource = AdviceSource.GENERATED


class SymptomAnalysisRequest(BaseModel):
    """Schema for a symptom analysis request.

    Field types are checked by the analysis service so that wrong types are
    reported through the same error envelope as missing input.
    """
    symptoms: Optional[object] = Field(None, description="Free-text symptom description")
    symptom_list: Optional[object] = Field(None, description="Explicit list of symptom tokens")
    age: Optional[Union[str, int]] = Field(None, description="Patient age in years")


class SymptomParseRequest(BaseModel):
    """Schema for a parse-only request."""
    symptoms: Optional[object] = Field(None, description="Free-text symptom description")


class AnalysisResult(BaseModel):
    """Assembled analysis payload."""
    predictions: List[EnhancedPrediction]
    input_symptoms: List[str]
    original_input: str
    age: Optional[str] = None
    timestamp: datetime
    disclaimer: str = ANALYSIS_DISCLAIMER
    warnings: List[str] = Field(default_factory=list)
    saved_to_history: bool = False


class ParseOnlyResult(ParseResult):
    """Parse result plus the persistence outcome."""
    saved_to_history: bool = False
