"""
FastAPI dependencies for dependency injection.
"""
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from sympcheck.core.config import Settings, get_settings
from sympcheck.core.exceptions import AuthenticationError
from sympcheck.core.logging import get_logger, security_logger
from sympcheck.core.security import verify_token
from sympcheck.db.session import get_db
from sympcheck.ml.generative import GenerativeClient, client_for_settings
from sympcheck.ml.scoring.base import ScoringStrategy
from sympcheck.ml.scoring.loader import get_scoring_strategy
from sympcheck.models.user import User
from sympcheck.services.advice_service import AdviceService
from sympcheck.services.analysis_service import AnalysisService
from sympcheck.services.analytics_service import AnalyticsService
from sympcheck.services.auth_service import AuthService
from sympcheck.services.history_service import HistoryService
from sympcheck.services.prediction_service import PredictionService
from sympcheck.services.symptom_parser_service import SymptomParserService

logger = get_logger(__name__)

# Security scheme; missing credentials are reported through AuthenticationError
security = HTTPBearer(auto_error=False)


def get_app_settings() -> Settings:
    """Application settings."""
    return get_settings()


def _user_from_token(token: str, db: Session, settings: Settings) -> User:
    payload = verify_token(token, settings)
    if payload is None:
        security_logger.log_invalid_token("signature or expiry check failed")
        raise AuthenticationError()

    user_id = payload.get("sub")
    if user_id is None:
        security_logger.log_invalid_token("missing subject")
        raise AuthenticationError()

    try:
        user = AuthService(db, settings).get_user_by_id(int(user_id))
    except ValueError:
        security_logger.log_invalid_token(f"malformed subject {user_id!r}")
        raise AuthenticationError()

    if user is None or not user.is_active:
        raise AuthenticationError("User not found or inactive")

    return user


def get_current_user(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> User:
    """
    Get current authenticated user from JWT token.
    """
    if credentials is None:
        raise AuthenticationError("Access token required")
    return _user_from_token(credentials.credentials, db, settings)


def get_optional_user(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Optional[User]:
    """
    Get current user if authenticated, otherwise return None.
    Used for endpoints that work with or without authentication.
    """
    if credentials is None:
        return None
    try:
        return _user_from_token(credentials.credentials, db, settings)
    except AuthenticationError:
        return None


def get_generative_client(settings: Settings = Depends(get_app_settings)) -> GenerativeClient:
    """Language-understanding collaborator client."""
    return client_for_settings(settings)


def get_scorer(settings: Settings = Depends(get_app_settings)) -> ScoringStrategy:
    """Scoring strategy selected by settings."""
    return get_scoring_strategy(settings)


def get_history_service(db: Session = Depends(get_db)) -> HistoryService:
    return HistoryService(db)


def get_analytics_service(
    history_service: HistoryService = Depends(get_history_service)
) -> AnalyticsService:
    return AnalyticsService(history_service)


def get_auth_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings)
) -> AuthService:
    return AuthService(db, settings)


def get_parse_service(
    client: GenerativeClient = Depends(get_generative_client),
    history_service: HistoryService = Depends(get_history_service)
) -> AnalysisService:
    """Extraction-only pipeline; no scoring strategy is built."""
    return AnalysisService(
        parser=SymptomParserService(client),
        history_service=history_service,
    )


def get_analysis_service(
    settings: Settings = Depends(get_app_settings),
    client: GenerativeClient = Depends(get_generative_client),
    scorer: ScoringStrategy = Depends(get_scorer),
    history_service: HistoryService = Depends(get_history_service)
) -> AnalysisService:
    """Wire the analysis pipeline for one request."""
    return AnalysisService(
        parser=SymptomParserService(client),
        prediction_service=PredictionService(scorer, max_predictions=settings.MAX_PREDICTIONS),
        advice_service=AdviceService(client, max_concurrency=settings.MAX_CONCURRENT_ADVICE),
        history_service=history_service,
    )
