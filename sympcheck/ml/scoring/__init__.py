from sympcheck.ml.scoring.base import ScoringStrategy
from sympcheck.ml.scoring.loader import get_scoring_strategy
from sympcheck.ml.scoring.process_scorer import ProcessScoringStrategy
from sympcheck.ml.scoring.rule_based import RuleBasedScoringStrategy

__all__ = [
    "ScoringStrategy",
    "ProcessScoringStrategy",
    "RuleBasedScoringStrategy",
    "get_scoring_strategy",
]
