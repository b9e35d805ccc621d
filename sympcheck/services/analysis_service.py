"""
Analysis orchestrator: extraction, prediction, advice and history persistence.
"""
import math
import time
from datetime import datetime, timezone
from typing import Any, List, Optional, Tuple

from sympcheck.core.exceptions import (
    ExtractionInvalidError,
    InputValidationError,
    PredictionEngineError,
)
from sympcheck.core.logging import analysis_logger, get_logger
from sympcheck.models.user import User
from sympcheck.schemas.symptoms import (
    AnalysisResult,
    EnhancedPrediction,
    ParseOnlyResult,
    ParseResult,
)
from sympcheck.services.advice_service import AdviceService
from sympcheck.services.history_service import HistoryService
from sympcheck.services.prediction_service import PredictionService
from sympcheck.services.symptom_parser_service import SymptomParserService
from sympcheck.utils.symptom_utils import dedupe_symptoms

logger = get_logger(__name__)

SOURCE_LIST = "symptom_list"
SOURCE_TEXT = "text"


def validate_age(age: Any) -> Optional[str]:
    """Return ``age`` as a numeric string, or None when not given."""
    if age is None:
        return None
    if isinstance(age, bool):
        raise InputValidationError("age must be a valid number")
    if isinstance(age, (int, float)):
        value = age
    elif isinstance(age, str):
        age = age.strip()
        if not age:
            return None
        try:
            value = float(age)
        except ValueError:
            raise InputValidationError("age must be a valid number")
    else:
        raise InputValidationError("age must be a valid number")

    if not math.isfinite(value) or value < 0:
        raise InputValidationError("age must be a non-negative number")
    return str(age)


def validate_symptom_input(symptoms_text: Any, symptom_list: Any) -> None:
    """Reject wrongly typed symptom input before anything else runs."""
    if symptoms_text is not None and not isinstance(symptoms_text, str):
        raise InputValidationError("symptoms must be a string")

    if symptom_list is not None:
        if not isinstance(symptom_list, list):
            raise InputValidationError("symptom_list must be an array")
        if not all(isinstance(item, str) for item in symptom_list):
            raise InputValidationError("symptom_list must contain only strings")


class AnalysisService:
    """Runs the symptom analysis pipeline for one request.

    ``parse_only`` needs only the parser; ``analyze`` also needs the
    prediction and advice services.
    """

    def __init__(
        self,
        parser: SymptomParserService,
        prediction_service: Optional[PredictionService] = None,
        advice_service: Optional[AdviceService] = None,
        history_service: Optional[HistoryService] = None
    ):
        self.parser = parser
        self.prediction_service = prediction_service
        self.advice_service = advice_service
        self.history_service = history_service

    async def resolve_symptoms(
        self,
        symptoms_text: Optional[str],
        symptom_list: Optional[List[str]]
    ) -> Tuple[List[str], str, List[str], str]:
        """Pick the symptom source and return (symptoms, original_input, warnings, source).

        A non-empty list wins over free text.
        """
        if symptom_list:
            symptoms = dedupe_symptoms(symptom_list)
            if symptoms:
                return symptoms, symptoms_text or ", ".join(symptom_list), [], SOURCE_LIST

        if symptoms_text is None or not symptoms_text.strip():
            raise InputValidationError(
                "Please provide symptoms as text or as a list of symptoms"
            )

        parsed = await self.parser.parse_symptoms(symptoms_text)
        if not parsed.is_valid or not parsed.symptoms:
            analysis_logger.log_extraction_invalid(symptoms_text, parsed.warnings, parsed.error)
            raise ExtractionInvalidError(
                original_input=parsed.original_input,
                warnings=parsed.warnings,
                error=parsed.error,
            )

        return parsed.symptoms, parsed.original_input, list(parsed.warnings), SOURCE_TEXT

    async def analyze(
        self,
        symptoms_text: Any = None,
        symptom_list: Any = None,
        age: Any = None,
        user: Optional[User] = None
    ) -> AnalysisResult:
        """Analyze symptoms and return ranked predictions with advice.

        Raises:
            InputValidationError: wrong input types or no usable input.
            ExtractionInvalidError: free text yielded no valid symptoms.
            PredictionEngineError: the scoring step failed.
        """
        start_time = time.time()
        user_id = user.id if user else None

        validate_symptom_input(symptoms_text, symptom_list)
        age = validate_age(age)

        symptoms, original_input, warnings, source = await self.resolve_symptoms(
            symptoms_text, symptom_list
        )
        analysis_logger.log_analysis_start(user_id, source, len(symptoms))

        try:
            predictions = await self.prediction_service.predict(symptoms)
        except PredictionEngineError as e:
            analysis_logger.log_analysis_error(user_id, e.message)
            raise

        enhanced = await self.advice_service.advise_all(predictions, symptoms, age)
        timestamp = datetime.now(timezone.utc)

        saved = False
        if user is not None:
            saved = self._save_history(
                user_id=user.id,
                original_input=original_input,
                symptoms=symptoms,
                predictions=enhanced,
                age=age,
                timestamp=timestamp,
            )

        analysis_logger.log_analysis_complete(user_id, len(enhanced), time.time() - start_time)

        return AnalysisResult(
            predictions=enhanced,
            input_symptoms=symptoms,
            original_input=original_input,
            age=age,
            timestamp=timestamp,
            warnings=warnings,
            saved_to_history=saved,
        )

    async def parse_only(self, text: Any, user: Optional[User] = None) -> ParseOnlyResult:
        """Extract symptoms from text without predicting."""
        if text is None or (isinstance(text, str) and not text.strip()):
            raise InputValidationError("Please provide a symptom description")
        if not isinstance(text, str):
            raise InputValidationError("symptoms must be a string")

        parsed: ParseResult = await self.parser.parse_symptoms(text)

        saved = False
        if user is not None and parsed.is_valid:
            saved = self._save_history(
                user_id=user.id,
                original_input=text,
                symptoms=parsed.symptoms,
                predictions=None,
                age=str(user.age) if user.age is not None else None,
                timestamp=datetime.now(timezone.utc),
            )

        return ParseOnlyResult(**parsed.model_dump(), saved_to_history=saved)

    def _save_history(
        self,
        user_id: int,
        original_input: str,
        symptoms: List[str],
        predictions: Optional[List[EnhancedPrediction]],
        age: Optional[str],
        timestamp: datetime
    ) -> bool:
        """Persist a history record; failures are logged and reported as False."""
        if self.history_service is None:
            return False

        try:
            record = self.history_service.create_record(
                user_id=user_id,
                original_input=original_input,
                processed_symptoms=symptoms,
                predictions=(
                    [p.model_dump(mode="json") for p in predictions]
                    if predictions is not None else None
                ),
                age=age,
                timestamp=timestamp,
            )
        except Exception as e:
            analysis_logger.log_history_failed(user_id, e)
            return False

        analysis_logger.log_history_saved(user_id, record.id)
        return True
