"""
History and analytics schemas.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class HistoryResponse(BaseModel):
    """Schema for a stored history record."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    original_input: str
    processed_symptoms: List[str]
    predictions: Optional[List[Dict[str, Any]]] = None
    age: Optional[str] = None
    timestamp: datetime


class Pagination(BaseModel):
    """Pagination metadata."""
    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int


class HistoryListResponse(BaseModel):
    """Schema for history list response."""
    history: List[HistoryResponse]
    pagination: Pagination


class SymptomCount(BaseModel):
    symptom: str
    count: int


class DiseaseCount(BaseModel):
    disease: str
    count: int


class AnalyticsPeriod(BaseModel):
    """Window covered by an analytics summary."""
    model_config = ConfigDict(populate_by_name=True)

    from_: datetime = Field(..., alias="from")
    to: datetime
    months: int


class AnalyticsSummary(BaseModel):
    """Frequency and trend statistics over a user's history."""
    model_config = ConfigDict(populate_by_name=True)

    total_checks: int
    top_symptoms: List[SymptomCount]
    top_diseases: List[DiseaseCount]
    monthly_data: Dict[str, int]
    period: AnalyticsPeriod
