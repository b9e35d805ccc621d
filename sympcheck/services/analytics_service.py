"""
History analytics aggregation.
"""
from collections import Counter
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Tuple

from dateutil.relativedelta import relativedelta

from sympcheck.core.logging import get_logger
from sympcheck.schemas.history import (
    AnalyticsPeriod,
    AnalyticsSummary,
    DiseaseCount,
    SymptomCount,
)
from sympcheck.services.history_service import HistoryService
from sympcheck.utils.symptom_utils import normalize_symptom

logger = get_logger(__name__)

TOP_N = 10


def window_start(now: datetime, months: int) -> datetime:
    """``now`` minus ``months`` calendar months, day clamped to month length."""
    return now - relativedelta(months=months)


def month_key(timestamp: datetime) -> str:
    """UTC ``YYYY-MM`` bucket for a timestamp; naive values are taken as UTC."""
    if timestamp.tzinfo is not None:
        timestamp = timestamp.astimezone(timezone.utc)
    return timestamp.strftime("%Y-%m")


def top_counts(counter: Counter, limit: int = TOP_N) -> List[Tuple[str, int]]:
    """Top entries by descending count; ties keep first-insertion order."""
    return sorted(counter.items(), key=lambda item: item[1], reverse=True)[:limit]


def aggregate(records: Iterable) -> Tuple[int, Counter, Counter, Dict[str, int]]:
    """Reduce ascending history records into symptom, disease and month counters."""
    symptom_counter: Counter = Counter()
    disease_counter: Counter = Counter()
    monthly: Dict[str, int] = {}
    total = 0

    for record in records:
        total += 1

        for symptom in record.processed_symptoms or []:
            if not isinstance(symptom, str):
                continue
            normalized = normalize_symptom(symptom)
            if normalized:
                symptom_counter[normalized] += 1

        # Parse-only records carry no predictions
        if record.predictions is not None:
            for prediction in record.predictions:
                disease = prediction.get("disease") if isinstance(prediction, dict) else None
                if disease:
                    disease_counter[disease] += 1

        key = month_key(record.timestamp)
        monthly[key] = monthly.get(key, 0) + 1

    return total, symptom_counter, disease_counter, monthly


class AnalyticsService:
    """Summarizes a user's symptom history over a trailing window."""

    def __init__(self, history_service: HistoryService):
        self.history_service = history_service

    def summarize(self, user_id: int, months: int = 6,
                  now: Optional[datetime] = None) -> AnalyticsSummary:
        now = now or datetime.now(timezone.utc)
        start = window_start(now, months)

        records = self.history_service.get_records_since(user_id, start)
        total, symptoms, diseases, monthly = aggregate(records)

        logger.info(
            f"Analytics for user {user_id}: {total} records over {months} months"
        )

        return AnalyticsSummary(
            total_checks=total,
            top_symptoms=[
                SymptomCount(symptom=name, count=count) for name, count in top_counts(symptoms)
            ],
            top_diseases=[
                DiseaseCount(disease=name, count=count) for name, count in top_counts(diseases)
            ],
            monthly_data=monthly,
            period=AnalyticsPeriod(from_=start, to=now, months=months),
        )
