"""
Response envelope shared by all endpoints.
"""
from typing import Any, List, Optional

from pydantic import BaseModel


class ResponseEnvelope(BaseModel):
    """``{status, data?, message?, warnings?, error?}``"""
    status: str
    data: Optional[Any] = None
    message: Optional[str] = None
    warnings: Optional[List[str]] = None
    error: Optional[str] = None

    def render(self) -> dict:
        """Dump to JSON-ready primitives, dropping unset top-level keys only."""
        dumped = self.model_dump(mode="json", by_alias=True)
        return {key: value for key, value in dumped.items() if value is not None}


def success(data: Any = None, message: Optional[str] = None, warnings: Optional[List[str]] = None) -> dict:
    """Build a success envelope."""
    return ResponseEnvelope(
        status="success", data=data, message=message, warnings=warnings or None
    ).render()


def failure(message: str, warnings: Optional[List[str]] = None, error: Optional[str] = None,
            data: Any = None) -> dict:
    """Build an error envelope."""
    return ResponseEnvelope(
        status="error", data=data, message=message, warnings=warnings or None, error=error
    ).render()
