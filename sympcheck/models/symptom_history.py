"""
Symptom history model for storing completed analyses.
"""
from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from sympcheck.db.base import Base


class SymptomHistory(Base):
    """One persisted snapshot of a completed analysis, owned by a user.

    Records are written once and never updated; ``predictions`` is NULL for
    parse-only requests.
    """
    __tablename__ = "symptom_histories"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    original_input = Column(Text, nullable=False)
    processed_symptoms = Column(JSON, nullable=False)  # list of normalized symptoms
    predictions = Column(JSON, nullable=True)  # list of enhanced predictions
    age = Column(String(10))

    timestamp = Column(DateTime(timezone=True), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    user = relationship("User", back_populates="symptom_histories")

    def __repr__(self):
        return f"<SymptomHistory(id={self.id}, user_id={self.user_id}, timestamp='{self.timestamp}')>"
