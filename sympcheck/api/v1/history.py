"""
Symptom history API endpoints.
"""
import math
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query

from sympcheck.core.config import Settings
from sympcheck.core.exceptions import NotFoundError
from sympcheck.dependencies import (
    get_analytics_service,
    get_app_settings,
    get_current_user,
    get_history_service,
)
from sympcheck.models.user import User
from sympcheck.schemas.common import success
from sympcheck.schemas.history import HistoryListResponse, HistoryResponse, Pagination
from sympcheck.services.analytics_service import AnalyticsService
from sympcheck.services.history_service import HistoryService

router = APIRouter()


@router.get("")
async def list_history(
    page: int = Query(1, ge=1),
    size: int = Query(10, ge=1, le=100),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    current_user: User = Depends(get_current_user),
    history_service: HistoryService = Depends(get_history_service)
):
    """List the current user's analyses, newest first."""
    records, total = history_service.get_user_history(
        user_id=current_user.id,
        page=page,
        size=size,
        start_date=start_date,
        end_date=end_date
    )

    response = HistoryListResponse(
        history=[HistoryResponse.model_validate(record) for record in records],
        pagination=Pagination(
            current_page=page,
            total_pages=math.ceil(total / size) if total else 0,
            total_items=total,
            items_per_page=size,
        ),
    )
    return success(data=response.model_dump(mode="json"))


@router.get("/analytics")
async def get_analytics(
    months: Optional[int] = Query(None, ge=1, le=60),
    current_user: User = Depends(get_current_user),
    settings: Settings = Depends(get_app_settings),
    analytics_service: AnalyticsService = Depends(get_analytics_service)
):
    """Symptom and disease frequencies over the trailing window."""
    summary = analytics_service.summarize(
        user_id=current_user.id,
        months=months or settings.ANALYTICS_DEFAULT_MONTHS
    )
    return success(data=summary.model_dump(mode="json", by_alias=True))


@router.get("/{record_id}")
async def get_history_record(
    record_id: int,
    current_user: User = Depends(get_current_user),
    history_service: HistoryService = Depends(get_history_service)
):
    """Get one of the current user's analyses."""
    record = history_service.get_record(record_id, current_user.id)
    if not record:
        raise NotFoundError("History record not found")

    return success(data=HistoryResponse.model_validate(record).model_dump(mode="json"))


@router.delete("/{record_id}")
async def delete_history_record(
    record_id: int,
    current_user: User = Depends(get_current_user),
    history_service: HistoryService = Depends(get_history_service)
):
    """Delete one of the current user's analyses."""
    if not history_service.delete_record(record_id, current_user.id):
        raise NotFoundError("History record not found")

    return success(message="History record deleted successfully")
