"""
Scoring strategy selection.
"""
import logging

from sympcheck.core.config import Settings
from sympcheck.ml.scoring.base import ScoringStrategy
from sympcheck.ml.scoring.process_scorer import ProcessScoringStrategy
from sympcheck.ml.scoring.rule_based import RuleBasedScoringStrategy

logger = logging.getLogger(__name__)


def get_scoring_strategy(settings: Settings) -> ScoringStrategy:
    """Build the scoring strategy named by ``SCORING_STRATEGY``."""
    if settings.SCORING_STRATEGY == "process":
        logger.info(f"Using process scoring strategy: {settings.SCORING_SCRIPT_PATH}")
        return ProcessScoringStrategy(
            script_path=settings.SCORING_SCRIPT_PATH,
            python_executable=settings.SCORING_PYTHON_EXECUTABLE,
            timeout=settings.SCORING_TIMEOUT_SECONDS,
        )

    logger.info("Using rule-based placeholder scoring strategy")
    return RuleBasedScoringStrategy()
