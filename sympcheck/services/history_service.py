"""
History service for persisting and retrieving symptom analyses.
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import and_, asc, desc
from sqlalchemy.orm import Session

from sympcheck.models.symptom_history import SymptomHistory


class HistoryService:
    """Service for managing a user's symptom history records."""

    def __init__(self, db: Session):
        self.db = db

    def create_record(
        self,
        user_id: int,
        original_input: str,
        processed_symptoms: List[str],
        predictions: Optional[List[Dict[str, Any]]] = None,
        age: Optional[str] = None,
        timestamp: Optional[datetime] = None
    ) -> SymptomHistory:
        """Create a new history record."""
        record = SymptomHistory(
            user_id=user_id,
            original_input=original_input,
            processed_symptoms=list(processed_symptoms),
            predictions=predictions,
            age=age,
            timestamp=timestamp or datetime.now(timezone.utc),
        )

        try:
            self.db.add(record)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(record)

        return record

    def get_record(self, record_id: int, user_id: int) -> Optional[SymptomHistory]:
        """Get a record by ID for a specific user."""
        return self.db.query(SymptomHistory).filter(
            and_(
                SymptomHistory.id == record_id,
                SymptomHistory.user_id == user_id
            )
        ).first()

    def get_user_history(
        self,
        user_id: int,
        page: int = 1,
        size: int = 10,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None
    ) -> Tuple[List[SymptomHistory], int]:
        """Get a user's records, newest first, with date filtering and pagination."""
        skip = (page - 1) * size

        query = self.db.query(SymptomHistory).filter(SymptomHistory.user_id == user_id)

        if start_date:
            query = query.filter(SymptomHistory.timestamp >= start_date)
        if end_date:
            query = query.filter(SymptomHistory.timestamp <= end_date)

        total = query.count()
        records = query.order_by(
            desc(SymptomHistory.timestamp), desc(SymptomHistory.id)
        ).offset(skip).limit(size).all()

        return records, total

    def get_records_since(self, user_id: int, since: datetime) -> List[SymptomHistory]:
        """Get a user's records with timestamp >= ``since``, oldest first."""
        return self.db.query(SymptomHistory).filter(
            and_(
                SymptomHistory.user_id == user_id,
                SymptomHistory.timestamp >= since
            )
        ).order_by(asc(SymptomHistory.timestamp), asc(SymptomHistory.id)).all()

    def delete_record(self, record_id: int, user_id: int) -> bool:
        """Delete a record owned by the user."""
        record = self.get_record(record_id, user_id)
        if not record:
            return False

        self.db.delete(record)
        self.db.commit()

        return True
