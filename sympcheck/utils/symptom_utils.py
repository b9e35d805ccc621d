"""
Symptom normalization utilities.
"""
import re
from typing import Iterable, List

SYMPTOM_SEPARATOR = "_"

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_symptom(raw: str) -> str:
    """Canonicalize a symptom token.

    Lowercases, trims, and collapses internal whitespace runs into a single
    separator. ``normalize_symptom(normalize_symptom(x)) == normalize_symptom(x)``.
    """
    return _WHITESPACE_RE.sub(SYMPTOM_SEPARATOR, raw.strip().lower())


def dedupe_symptoms(items: Iterable[str]) -> List[str]:
    """Normalize every token, drop empties and duplicates, keep first-seen order."""
    seen = set()
    result = []
    for item in items:
        symptom = normalize_symptom(item)
        if symptom and symptom not in seen:
            seen.add(symptom)
            result.append(symptom)
    return result


def display_symptom(symptom: str) -> str:
    """Render a normalized symptom for prompts and messages."""
    return symptom.replace(SYMPTOM_SEPARATOR, " ")
