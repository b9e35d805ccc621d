"""
Application exceptions for the symptom analysis pipeline.
"""
from typing import Any, Dict, List, Optional


class SympCheckError(Exception):
    """Base application exception."""

    def __init__(self, message: str, status_code: int = 500, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class InputValidationError(SympCheckError):
    """No usable symptom input, or input of the wrong type."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=400, details=details)


class ExtractionInvalidError(SympCheckError):
    """The extractor found nothing usable or flagged the input as non-health."""

    def __init__(
        self,
        original_input: str,
        warnings: Optional[List[str]] = None,
        error: Optional[str] = None,
        message: str = "No valid symptoms could be identified in the input"
    ):
        self.original_input = original_input
        self.warnings = list(warnings or [])
        self.error = error
        super().__init__(
            message,
            status_code=400,
            details={"original_input": original_input, "warnings": self.warnings, "error": error}
        )


class PredictionEngineError(SympCheckError):
    """The scoring collaborator failed or returned no candidates."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(f"ML Model Error: {message}", status_code=502, details=details)


class NotFoundError(SympCheckError):
    """Resource not found."""

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message, status_code=404)


class ConflictError(SympCheckError):
    """Resource conflict."""

    def __init__(self, message: str = "Resource conflict"):
        super().__init__(message, status_code=409)


class AuthenticationError(SympCheckError):
    """Missing or invalid credentials."""

    def __init__(self, message: str = "Could not validate credentials"):
        super().__init__(message, status_code=401)


class GenerativeCollaboratorError(Exception):
    """The language-understanding collaborator call failed."""


class ScoringCollaboratorError(Exception):
    """The scoring collaborator call failed."""
