"""
Scoring strategy interface for disease prediction.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List


class ScoringStrategy(ABC):
    """Abstract base class for disease scoring collaborators.

    ``score`` returns the raw collaborator payload
    ``{"predictions": [{"disease": str, "probability": number}], "error"?: str}``
    and raises ``ScoringCollaboratorError`` on transport-level failure.
    """

    name: str = "base"

    @abstractmethod
    async def score(self, symptoms: List[str]) -> Dict[str, Any]:
        """Score normalized symptoms against known conditions."""
        pass

    def get_metadata(self) -> Dict[str, Any]:
        """Get strategy metadata."""
        return {"name": self.name}
