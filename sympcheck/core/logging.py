"""
Logging configuration for the symptom checking backend.
"""
import logging
import logging.handlers
from pathlib import Path
from typing import List, Optional

from sympcheck.core.config import Settings


def setup_logging(settings: Settings) -> None:
    """Configure application logging."""

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper()))

    # Clear existing handlers
    root_logger.handlers.clear()

    formatter = logging.Formatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # File handler with rotation
    if settings.LOG_FILE:
        log_dir = Path(settings.LOG_FILE).parent
        log_dir.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            filename=settings.LOG_FILE,
            maxBytes=settings.LOG_MAX_SIZE,
            backupCount=settings.LOG_BACKUP_COUNT,
            encoding='utf-8'
        )
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    # Console handler
    console_handler = logging.StreamHandler()
    if settings.DEBUG:
        console_handler.setLevel(logging.DEBUG)
    else:
        console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    setup_specific_loggers(settings)

    logging.info("Logging configuration completed")
    logging.info(f"Log level: {settings.LOG_LEVEL}")
    if settings.LOG_FILE:
        logging.info(f"Log file: {settings.LOG_FILE}")


def setup_specific_loggers(settings: Settings) -> None:
    """Configure specific module loggers."""

    # SQLAlchemy logging
    sqlalchemy_logger = logging.getLogger('sqlalchemy.engine')
    if settings.DEBUG:
        sqlalchemy_logger.setLevel(logging.INFO)
    else:
        sqlalchemy_logger.setLevel(logging.WARNING)

    logging.getLogger('uvicorn').setLevel(logging.INFO)

    # Application specific loggers
    logging.getLogger('sympcheck').setLevel(logging.INFO)
    logging.getLogger('sympcheck.analysis').setLevel(logging.INFO)
    logging.getLogger('sympcheck.ml').setLevel(logging.INFO)
    logging.getLogger('sympcheck.api').setLevel(logging.INFO)
    logging.getLogger('sympcheck.security').setLevel(logging.INFO)


class AnalysisLogger:
    """Specialized logger for symptom analysis events."""

    def __init__(self):
        self.logger = logging.getLogger('sympcheck.analysis')

    def log_analysis_start(self, user_id: Optional[int], source: str, symptom_count: int):
        """Log the start of an analysis request."""
        user_info = f"User {user_id}" if user_id else "Anonymous"
        self.logger.info(f"ANALYSIS_START - {user_info} - source={source} - symptoms={symptom_count}")

    def log_analysis_complete(self, user_id: Optional[int], prediction_count: int, processing_time: float):
        """Log a completed analysis."""
        user_info = f"User {user_id}" if user_id else "Anonymous"
        self.logger.info(
            f"ANALYSIS_COMPLETE - {user_info} - predictions={prediction_count} - "
            f"time={processing_time:.3f}s"
        )

    def log_analysis_error(self, user_id: Optional[int], error: str):
        """Log a failed analysis."""
        user_info = f"User {user_id}" if user_id else "Anonymous"
        self.logger.error(f"ANALYSIS_FAILED - {user_info} - {error}")

    def log_extraction_invalid(self, original_input: str, warnings: List[str], error: Optional[str]):
        """Log an extraction that yielded nothing usable."""
        self.logger.info(
            f"EXTRACTION_INVALID - input={original_input[:100]!r} - "
            f"warnings={warnings} - error={error}"
        )

    def log_fallback(self, component: str, reason: str):
        """Log a collaborator fallback."""
        self.logger.warning(f"FALLBACK - {component} - {reason}")

    def log_history_saved(self, user_id: int, record_id: int):
        """Log a persisted history record."""
        self.logger.info(f"HISTORY_SAVED - User {user_id} - Record {record_id}")

    def log_history_failed(self, user_id: int, error: Exception):
        """Log a history persistence failure."""
        self.logger.error(f"HISTORY_FAILED - User {user_id} - {error}", exc_info=True)


class SecurityLogger:
    """Specialized logger for authentication events."""

    def __init__(self):
        self.logger = logging.getLogger('sympcheck.security')

    def log_login_attempt(self, email: str, success: bool):
        """Log login attempt."""
        status = "SUCCESS" if success else "FAILED"
        self.logger.info(f"LOGIN_ATTEMPT - {status} - {email}")

    def log_user_auth(self, user_id: int, action: str):
        """Log an account event such as register or profile update."""
        self.logger.info(f"USER_AUTH - User {user_id} - {action}")

    def log_invalid_token(self, reason: str):
        """Log a rejected bearer token."""
        self.logger.warning(f"INVALID_TOKEN - {reason}")


# Global instances
analysis_logger = AnalysisLogger()
security_logger = SecurityLogger()


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(name)


def log_error(logger: logging.Logger, error: Exception, context: str = ""):
    """Log error with context."""
    context_str = f" in {context}" if context else ""
    logger.error(f"Error{context_str}: {error}", exc_info=True)


def log_performance_metric(logger: logging.Logger, operation: str, duration: float, **metrics):
    """Log performance metrics."""
    metric_str = ", ".join(f"{k}={v}" for k, v in metrics.items())
    logger.info(f"PERFORMANCE - {operation} took {duration:.3f}s - {metric_str}")
