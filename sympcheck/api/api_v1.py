"""
API router configuration - combines all API endpoints.
"""
from fastapi import APIRouter

from sympcheck.api.v1 import auth, health, history, symptoms

# Create main API router
api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(symptoms.router, prefix="/symptoms", tags=["symptoms"])
api_router.include_router(history.router, prefix="/history", tags=["history"])
api_router.include_router(health.router, prefix="/health", tags=["health"])


@api_router.get("/")
async def api_root():
    """API root endpoint."""
    return {
        "message": "SympCheck Backend API",
        "docs": "/docs",
        "health": "/api/v1/health/",
        "status": "operational"
    }
