"""
Natural-language symptom extraction tests
"""
import json

import pytest

from sympcheck.core.exceptions import GenerativeCollaboratorError
from sympcheck.services.symptom_parser_service import (
    NON_HEALTH_ERROR,
    VAGUE_INPUT_WARNING,
    SymptomParserService,
    keyword_parse,
)
from tests.conftest import FakeGenerativeClient


@pytest.mark.unit
class TestKeywordParse:
    """Test the deterministic keyword extractor"""

    def test_headache_and_vomit(self):
        result = keyword_parse("I have a headache and vomit")

        assert result.is_valid is True
        assert "headache" in result.symptoms
        assert "vomiting" in result.symptoms
        assert result.error is None

    def test_unrelated_input(self):
        result = keyword_parse("my car is broken")

        assert result.is_valid is False
        assert result.symptoms == []
        assert result.error == NON_HEALTH_ERROR
        assert "health" in result.error

    def test_vague_health_input_warns(self):
        result = keyword_parse("I feel terrible today")

        assert result.is_valid is False
        assert result.error is None
        assert result.warnings == [VAGUE_INPUT_WARNING]

    def test_aliases_map_to_canonical_symptoms(self):
        result = keyword_parse("Tummy ache, feeling nauseous, and I threw up twice")

        assert result.symptoms == ["nausea", "vomiting", "abdominal_pain"]

    def test_multiword_symptoms_are_normalized(self):
        result = keyword_parse("sore throat with a runny nose")

        assert result.symptoms == ["sore_throat", "runny_nose"]

    def test_health_keyword_must_start_a_word(self):
        # "ill" inside "pillow" and "feel" inside "feeling" differ: only the latter counts
        assert keyword_parse("my pillow is flat").error == NON_HEALTH_ERROR
        assert keyword_parse("I am feeling off").error is None

    def test_original_input_is_preserved(self):
        text = "  Headache!!  "
        assert keyword_parse(text).original_input == text


@pytest.mark.unit
class TestSymptomParserService:
    """Test extraction through the language collaborator"""

    @pytest.mark.asyncio
    async def test_collaborator_json_is_sanitized(self):
        reply = json.dumps({
            "symptoms": ["Headache", "headache", "Abdominal Pain", 42, ""],
            "isValid": False,
            "warnings": "check spelling",
            "confidence": 0.9,
        })
        service = SymptomParserService(FakeGenerativeClient(default=f"```json\n{reply}\n```"))

        result = await service.parse_symptoms("head hurts and tummy ache")

        assert result.symptoms == ["headache", "abdominal_pain", "42"]
        assert result.is_valid is True
        assert result.warnings == ["check spelling"]
        assert result.original_input == "head hurts and tummy ache"

    @pytest.mark.asyncio
    async def test_collaborator_error_for_non_health_input(self):
        reply = json.dumps({
            "symptoms": [],
            "isValid": False,
            "warnings": [],
            "error": "This input appears to be about car problems, not health symptoms.",
        })
        service = SymptomParserService(FakeGenerativeClient(default=reply))

        result = await service.parse_symptoms("my car is broken")

        assert result.is_valid is False
        assert result.symptoms == []
        assert "car problems" in result.error

    @pytest.mark.asyncio
    async def test_falls_back_when_collaborator_unreachable(self):
        service = SymptomParserService(FakeGenerativeClient(default=None))

        result = await service.parse_symptoms("I have a headache and vomit")

        assert result.is_valid is True
        assert "headache" in result.symptoms
        assert "vomiting" in result.symptoms

    @pytest.mark.asyncio
    async def test_falls_back_on_transport_failure(self):
        client = FakeGenerativeClient(default=GenerativeCollaboratorError("429 quota"))
        service = SymptomParserService(client)

        result = await service.parse_symptoms("my car is broken")

        assert result.is_valid is False
        assert result.error == NON_HEALTH_ERROR

    @pytest.mark.asyncio
    async def test_falls_back_when_reply_has_no_json(self):
        service = SymptomParserService(FakeGenerativeClient(default="The symptoms are fever."))

        result = await service.parse_symptoms("fever and cough")

        assert result.symptoms == ["fever", "cough"]

    @pytest.mark.asyncio
    async def test_prompt_contains_input(self):
        client = FakeGenerativeClient(default='{"symptoms": ["fever"]}')
        service = SymptomParserService(client)

        await service.parse_symptoms('I said "fever"')

        assert "I said 'fever'" in client.prompts[0]
