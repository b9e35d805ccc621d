"""
Deterministic placeholder scorer used when no trained model is available.
"""
from typing import Any, Dict, List, Tuple

from sympcheck.ml.scoring.base import ScoringStrategy

POINTS_PER_MATCH = 20
MAX_PROBABILITY = 100

UNSPECIFIED_CONDITION = "Unspecified condition"

# Condition -> characteristic symptoms (normalized form).
CONDITION_TABLE: List[Tuple[str, Tuple[str, ...]]] = [
    ("Common Cold", ("runny_nose", "congestion", "sore_throat", "cough", "fever", "headache")),
    ("Influenza", ("fever", "cough", "fatigue", "muscle_aches", "headache", "sore_throat")),
    ("Gastroenteritis", ("nausea", "vomiting", "diarrhea", "abdominal_pain", "fever")),
    ("Migraine", ("headache", "nausea", "blurred_vision", "dizziness", "vomiting")),
    ("Gastroesophageal Reflux Disease", ("heartburn", "chest_pain", "bloating", "nausea", "sore_throat")),
    ("Irritable Bowel Syndrome", ("abdominal_pain", "bloating", "constipation", "diarrhea")),
    ("Bronchitis", ("cough", "shortness_of_breath", "chest_pain", "fatigue", "fever")),
    ("Allergic Reaction", ("rash", "itching", "swelling", "runny_nose", "congestion")),
    ("Anxiety Disorder", ("anxiety", "insomnia", "dizziness", "chest_pain", "fatigue")),
    ("Depression", ("depression", "fatigue", "insomnia", "loss_of_appetite", "weight_loss", "weight_gain")),
    ("Arthritis", ("joint_pain", "swelling", "back_pain", "fatigue")),
    ("Otitis Media", ("ear_pain", "fever", "headache", "dizziness")),
    ("Dental Abscess", ("toothache", "swelling", "fever", "ear_pain")),
    ("Hypothyroidism", ("fatigue", "weight_gain", "constipation", "depression")),
]


def placeholder_probability(match_count: int) -> int:
    """Monotonic in the number of matched symptoms, capped at 100."""
    return min(MAX_PROBABILITY, match_count * POINTS_PER_MATCH)


class RuleBasedScoringStrategy(ScoringStrategy):
    """Scores each known condition by how many of its symptoms were reported.

    This is a transparent stand-in with the same contract as a real model
    collaborator; it makes no claim of clinical accuracy.
    """

    name = "rule_based"

    def __init__(self, conditions: List[Tuple[str, Tuple[str, ...]]] = None):
        self.conditions = conditions if conditions is not None else CONDITION_TABLE

    async def score(self, symptoms: List[str]) -> Dict[str, Any]:
        reported = set(symptoms)
        predictions = []
        for disease, characteristic in self.conditions:
            matched = len(reported.intersection(characteristic))
            if matched:
                predictions.append({
                    "disease": disease,
                    "probability": placeholder_probability(matched),
                })

        if not predictions and symptoms:
            predictions.append({
                "disease": UNSPECIFIED_CONDITION,
                "probability": placeholder_probability(len(reported)),
            })

        return {"predictions": predictions}

    def get_metadata(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "conditions": len(self.conditions),
            "points_per_match": POINTS_PER_MATCH,
        }
