"""
Symptom analysis API endpoints.
"""
from typing import Optional

from fastapi import APIRouter, Depends

from sympcheck.dependencies import get_analysis_service, get_optional_user, get_parse_service
from sympcheck.models.user import User
from sympcheck.schemas.common import success
from sympcheck.schemas.symptoms import SymptomAnalysisRequest, SymptomParseRequest
from sympcheck.services.analysis_service import AnalysisService

router = APIRouter()


@router.post("/analyze")
async def analyze_symptoms(
    request: SymptomAnalysisRequest,
    current_user: Optional[User] = Depends(get_optional_user),
    analysis_service: AnalysisService = Depends(get_analysis_service)
):
    """Analyze free-text or listed symptoms and return ranked predictions with advice."""
    result = await analysis_service.analyze(
        symptoms_text=request.symptoms,
        symptom_list=request.symptom_list,
        age=request.age,
        user=current_user,
    )

    return success(
        data=result.model_dump(mode="json"),
        message="Symptoms analyzed successfully",
        warnings=result.warnings,
    )


@router.post("/parse")
async def parse_symptoms(
    request: SymptomParseRequest,
    current_user: Optional[User] = Depends(get_optional_user),
    analysis_service: AnalysisService = Depends(get_parse_service)
):
    """Extract normalized symptoms from free text without predicting."""
    result = await analysis_service.parse_only(request.symptoms, user=current_user)

    message = "Symptoms parsed successfully" if result.is_valid else (
        result.error or "No valid symptoms could be identified in the input"
    )
    return success(
        data=result.model_dump(mode="json"),
        message=message,
        warnings=result.warnings,
    )
