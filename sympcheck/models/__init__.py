from sympcheck.models.user import User
from sympcheck.models.symptom_history import SymptomHistory

__all__ = ["User", "SymptomHistory"]
