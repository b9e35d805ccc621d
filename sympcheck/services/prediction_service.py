"""
Prediction service for ranking disease candidates.
"""
import math
import time
from typing import Any, Dict, List

from sympcheck.core.exceptions import PredictionEngineError, ScoringCollaboratorError
from sympcheck.core.logging import get_logger, log_performance_metric
from sympcheck.ml.scoring.base import ScoringStrategy
from sympcheck.schemas.symptoms import Prediction

logger = get_logger(__name__)


def clamp_probability(value: float) -> float:
    """Clamp a probability into the 0-100 percentage range."""
    return max(0.0, min(100.0, value))


def rank_predictions(predictions: List[Prediction]) -> List[Prediction]:
    """Sort descending by probability; ties keep upstream order."""
    return sorted(predictions, key=lambda p: p.probability, reverse=True)


class PredictionService:
    """Produces ranked disease probabilities from normalized symptoms."""

    def __init__(self, strategy: ScoringStrategy, max_predictions: int = 5):
        self.strategy = strategy
        self.max_predictions = max_predictions

    async def predict(self, symptoms: List[str]) -> List[Prediction]:
        """Score symptoms and return ranked predictions.

        Raises:
            PredictionEngineError: the collaborator failed, reported an error,
                or returned no usable candidates.
        """
        start_time = time.time()

        try:
            payload = await self.strategy.score(symptoms)
        except ScoringCollaboratorError as e:
            logger.error(f"Scoring collaborator failed: {e}")
            raise PredictionEngineError(str(e)) from e

        predictions = self._parse_payload(payload)
        ranked = rank_predictions(predictions)[:self.max_predictions]

        log_performance_metric(
            logger,
            "predict",
            time.time() - start_time,
            strategy=self.strategy.name,
            symptoms=len(symptoms),
            predictions=len(ranked),
        )
        return ranked

    def _parse_payload(self, payload: Dict[str, Any]) -> List[Prediction]:
        if payload.get("error"):
            raise PredictionEngineError(str(payload["error"]))

        raw_predictions = payload.get("predictions")
        if not isinstance(raw_predictions, list) or not raw_predictions:
            raise PredictionEngineError("No predictions returned")

        predictions = []
        for entry in raw_predictions:
            if not isinstance(entry, dict):
                raise PredictionEngineError(f"Malformed prediction entry: {entry!r}")

            disease = entry.get("disease")
            probability = entry.get("probability")
            if not isinstance(disease, str) or not disease.strip():
                raise PredictionEngineError(f"Prediction entry missing disease: {entry!r}")
            if isinstance(probability, bool) or not isinstance(probability, (int, float)) \
                    or math.isnan(probability):
                raise PredictionEngineError(f"Prediction entry has invalid probability: {entry!r}")

            predictions.append(Prediction(
                disease=disease.strip(),
                probability=clamp_probability(float(probability)),
            ))

        return predictions
