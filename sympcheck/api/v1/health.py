"""
Health check API endpoints.
"""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import text
from sqlalchemy.orm import Session

from sympcheck.core.config import Settings
from sympcheck.dependencies import get_app_settings, get_db, get_scorer
from sympcheck.ml.scoring.base import ScoringStrategy

router = APIRouter()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/")
async def health_check(settings: Settings = Depends(get_app_settings)):
    """Basic health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": _now(),
        "version": settings.APP_VERSION
    }


@router.get("/detailed")
async def detailed_health_check(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    scorer: ScoringStrategy = Depends(get_scorer)
):
    """Detailed health check including database connectivity and collaborator configuration."""
    health_status = {
        "status": "healthy",
        "timestamp": _now(),
        "version": settings.APP_VERSION,
        "services": {}
    }

    # Check database connectivity
    try:
        db.execute(text("SELECT 1"))
        health_status["services"]["database"] = {
            "status": "healthy",
            "url": settings.database_url_safe
        }
    except Exception as e:
        health_status["status"] = "unhealthy"
        health_status["services"]["database"] = {
            "status": "unhealthy",
            "error": str(e)
        }

    # Language collaborator falls back to keyword extraction when unconfigured
    health_status["services"]["language_model"] = {
        "status": "configured" if settings.gemini_enabled else "fallback_only",
        "model": settings.GEMINI_MODEL
    }

    health_status["services"]["scoring"] = {
        "status": "configured",
        "strategy": settings.SCORING_STRATEGY,
        "scorer": scorer.get_metadata()
    }

    if health_status["services"]["database"]["status"] != "healthy":
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database unavailable"
        )

    return health_status


@router.get("/ready")
async def readiness_check():
    """Readiness probe."""
    return {
        "status": "ready",
        "timestamp": _now()
    }


@router.get("/live")
async def liveness_check():
    """Liveness probe."""
    return {
        "status": "alive",
        "timestamp": _now()
    }
