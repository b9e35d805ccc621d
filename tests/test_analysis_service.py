"""
Analysis orchestrator tests
"""
import json

import pytest

from sympcheck.core.exceptions import (
    ExtractionInvalidError,
    InputValidationError,
    PredictionEngineError,
)
from sympcheck.models.user import User
from sympcheck.schemas.symptoms import AdviceSource
from sympcheck.services.advice_service import AdviceService
from sympcheck.services.analysis_service import AnalysisService, validate_age
from sympcheck.services.prediction_service import PredictionService
from sympcheck.services.symptom_parser_service import NON_HEALTH_ERROR, SymptomParserService
from tests.conftest import (
    FailingHistoryService,
    FakeGenerativeClient,
    FakeScoringStrategy,
    RecordingHistoryService,
)

RANKED_PAYLOAD = {"predictions": [
    {"disease": "Common Cold", "probability": 50},
    {"disease": "Influenza", "probability": 90},
    {"disease": "Migraine", "probability": 70},
]}


def build_service(client=None, scorer=None, history=None) -> AnalysisService:
    client = client or FakeGenerativeClient()
    scorer = scorer or FakeScoringStrategy(payload=RANKED_PAYLOAD)
    return AnalysisService(
        parser=SymptomParserService(client),
        prediction_service=PredictionService(scorer),
        advice_service=AdviceService(client),
        history_service=history,
    )


@pytest.mark.unit
class TestAnalyze:
    """Test the analysis pipeline"""

    def setup_method(self):
        self.user = User(id=7, email="user@example.com", age=40)

    @pytest.mark.asyncio
    async def test_list_input_is_normalized_and_preferred_over_text(self):
        scorer = FakeScoringStrategy(payload=RANKED_PAYLOAD)
        client = FakeGenerativeClient()
        service = build_service(client=client, scorer=scorer)

        result = await service.analyze(
            symptoms_text="my car is broken",
            symptom_list=["Fever", "fever ", "Headache"],
        )

        assert scorer.calls == [["fever", "headache"]]
        assert result.input_symptoms == ["fever", "headache"]
        # No extraction prompt was sent; every prompt is an advice prompt
        assert all("Predicted Disease" in prompt for prompt in client.prompts)

    @pytest.mark.asyncio
    async def test_free_text_goes_through_extractor(self):
        scorer = FakeScoringStrategy(payload=RANKED_PAYLOAD)
        service = build_service(scorer=scorer)

        result = await service.analyze(symptoms_text="I have a headache and vomit", age=30)

        assert scorer.calls == [["headache", "vomiting"]]
        assert result.original_input == "I have a headache and vomit"
        assert result.age == "30"

    @pytest.mark.asyncio
    async def test_rank_order_preserved_end_to_end(self):
        result = await build_service().analyze(symptom_list=["fever"])

        assert [p.probability for p in result.predictions] == [90, 70, 50]
        assert [p.disease for p in result.predictions] == ["Influenza", "Migraine", "Common Cold"]
        assert all(p.advice_source == AdviceSource.FALLBACK for p in result.predictions)
        assert result.disclaimer

    @pytest.mark.asyncio
    async def test_extraction_warnings_are_propagated(self):
        reply = json.dumps({"symptoms": ["fever"], "warnings": ["'bad' is vague"]})
        client = FakeGenerativeClient(responses=[("medical symptom parser", reply)])

        result = await build_service(client=client).analyze(symptoms_text="fever and feel bad")

        assert result.warnings == ["'bad' is vague"]

    @pytest.mark.asyncio
    async def test_invalid_extraction_is_rejected(self):
        scorer = FakeScoringStrategy(payload=RANKED_PAYLOAD)
        history = RecordingHistoryService()
        service = build_service(scorer=scorer, history=history)

        with pytest.raises(ExtractionInvalidError) as exc_info:
            await service.analyze(symptoms_text="my car is broken", user=self.user)

        assert exc_info.value.original_input == "my car is broken"
        assert exc_info.value.error == NON_HEALTH_ERROR
        assert scorer.calls == []
        assert history.records == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("kwargs", [
        {},
        {"symptoms_text": "   "},
        {"symptom_list": []},
        {"symptom_list": ["  ", ""]},
        {"symptoms_text": 42},
        {"symptom_list": "fever"},
        {"symptom_list": ["fever", 3]},
        {"symptom_list": ["fever"], "age": "forty"},
        {"symptom_list": ["fever"], "age": True},
    ])
    async def test_validation_errors(self, kwargs):
        scorer = FakeScoringStrategy(payload=RANKED_PAYLOAD)

        with pytest.raises(InputValidationError):
            await build_service(scorer=scorer).analyze(**kwargs)

        assert scorer.calls == []

    @pytest.mark.asyncio
    async def test_engine_failure_writes_no_history(self):
        history = RecordingHistoryService()
        service = build_service(scorer=FakeScoringStrategy(payload={"error": "x"}), history=history)

        with pytest.raises(PredictionEngineError):
            await service.analyze(symptom_list=["fever"], user=self.user)

        assert history.records == []

    @pytest.mark.asyncio
    async def test_authenticated_analysis_is_saved(self):
        history = RecordingHistoryService()
        service = build_service(history=history)

        result = await service.analyze(symptom_list=["fever"], age="40", user=self.user)

        assert result.saved_to_history is True
        record = history.records[0]
        assert record.user_id == 7
        assert record.processed_symptoms == ["fever"]
        assert [p["disease"] for p in record.predictions] == [
            "Influenza", "Migraine", "Common Cold"
        ]
        assert record.age == "40"

    @pytest.mark.asyncio
    async def test_anonymous_analysis_is_not_saved(self):
        history = RecordingHistoryService()

        result = await build_service(history=history).analyze(symptom_list=["fever"])

        assert result.saved_to_history is False
        assert history.records == []

    @pytest.mark.asyncio
    async def test_persistence_failure_never_fails_the_request(self):
        history = FailingHistoryService()

        result = await build_service(history=history).analyze(
            symptom_list=["fever"], user=self.user
        )

        assert history.attempts == 1
        assert result.saved_to_history is False
        assert len(result.predictions) == 3


@pytest.mark.unit
class TestParseOnly:
    """Test the parse-only operation"""

    def setup_method(self):
        self.user = User(id=3, email="parse@example.com", age=25)

    @pytest.mark.asyncio
    async def test_saves_record_without_predictions(self):
        history = RecordingHistoryService()

        result = await build_service(history=history).parse_only(
            "I have a headache and vomit", user=self.user
        )

        assert result.is_valid is True
        assert result.saved_to_history is True
        assert history.records[0].predictions is None
        assert history.records[0].age == "25"

    @pytest.mark.asyncio
    async def test_invalid_input_is_returned_not_raised(self):
        history = RecordingHistoryService()

        result = await build_service(history=history).parse_only("my car is broken", user=self.user)

        assert result.is_valid is False
        assert result.error == NON_HEALTH_ERROR
        assert result.saved_to_history is False
        assert history.records == []

    @pytest.mark.asyncio
    async def test_persistence_failure_is_swallowed(self):
        result = await build_service(history=FailingHistoryService()).parse_only(
            "fever", user=self.user
        )

        assert result.is_valid is True
        assert result.saved_to_history is False

    @pytest.mark.asyncio
    async def test_requires_text(self):
        with pytest.raises(InputValidationError):
            await build_service().parse_only("  ")
        with pytest.raises(InputValidationError):
            await build_service().parse_only(["fever"])


@pytest.mark.unit
@pytest.mark.parametrize("age,expected", [
    (None, None),
    ("", None),
    (" 42 ", "42"),
    (42, "42"),
    ("7.5", "7.5"),
])
def test_validate_age(age, expected):
    assert validate_age(age) == expected


@pytest.mark.unit
@pytest.mark.parametrize("age", ["nan", "inf", "-Infinity", "-3", -1, float("nan"), float("inf")])
def test_validate_age_rejects_non_finite_and_negative(age):
    with pytest.raises(InputValidationError):
        validate_age(age)
