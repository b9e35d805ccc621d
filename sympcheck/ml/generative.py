"""
Client and JSON-parsing helper for the generative language collaborator.

Both call sites (symptom extraction and advice generation) follow the same
shape: one call, locate the first JSON object in the reply, fall back to a
deterministic result when the reply carries no usable JSON or the call fails.
"""
import asyncio
import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Callable, Dict, Optional

import google.generativeai as genai

from sympcheck.core.config import Settings
from sympcheck.core.exceptions import GenerativeCollaboratorError

logger = logging.getLogger(__name__)

SOURCE_JSON = "json"
SOURCE_TEXT_FALLBACK = "text_fallback"
SOURCE_FAILURE_FALLBACK = "failure_fallback"


def find_json_span(text: str) -> Optional[str]:
    """Return the first balanced ``{...}`` span in ``text``.

    Braces inside JSON string literals (including escaped quotes) do not
    count toward the balance.
    """
    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for index in range(start, len(text)):
            char = text[index]
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
                continue
            if char == '"':
                in_string = True
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return text[start:index + 1]
        # Unbalanced from this brace onward; try the next opening brace.
        start = text.find("{", start + 1)
    return None


def extract_json_object(text: Optional[str]) -> Optional[Dict[str, Any]]:
    """Parse the first balanced JSON object embedded in free-form text."""
    if not text:
        return None
    span = find_json_span(text)
    if span is None:
        return None
    try:
        parsed = json.loads(span)
    except ValueError:
        return None
    if not isinstance(parsed, dict):
        return None
    return parsed


class GenerativeClient:
    """Thin async wrapper around a Gemini generative model."""

    def __init__(self, api_key: Optional[str], model_name: str, timeout: Optional[float] = None):
        self.model_name = model_name
        self.timeout = timeout
        self._model = None

        if api_key:
            genai.configure(api_key=api_key)
            self._model = genai.GenerativeModel(self.model_name)
            logger.info(f"Gemini model configured: {self.model_name}")
        else:
            logger.warning("GEMINI_API_KEY not set; generative calls will use fallbacks")

    @property
    def is_configured(self) -> bool:
        return self._model is not None

    async def generate(self, prompt: str) -> str:
        """Send one prompt and return the reply text."""
        if self._model is None:
            raise GenerativeCollaboratorError("Generative model is not configured")

        try:
            call = self._model.generate_content_async(prompt)
            if self.timeout:
                response = await asyncio.wait_for(call, timeout=self.timeout)
            else:
                response = await call
            return response.text
        except asyncio.TimeoutError as e:
            raise GenerativeCollaboratorError(
                f"Gemini call timed out after {self.timeout} seconds"
            ) from e
        except Exception as e:
            raise GenerativeCollaboratorError(f"Gemini call failed: {e}") from e


@lru_cache()
def build_generative_client(
    api_key: Optional[str], model_name: str, timeout: Optional[float]
) -> GenerativeClient:
    """Build the client once per Gemini configuration."""
    return GenerativeClient(api_key, model_name, timeout)


def client_for_settings(settings: Settings) -> GenerativeClient:
    """Shared client for the Gemini settings in ``settings``."""
    return build_generative_client(
        settings.GEMINI_API_KEY, settings.GEMINI_MODEL, settings.GEMINI_TIMEOUT_SECONDS
    )


@dataclass
class JsonCallResult:
    """Outcome of a JSON-from-generative-call round trip."""
    data: Any
    source: str
    raw_text: Optional[str] = None


async def generate_json(
    client: GenerativeClient,
    prompt: str,
    on_text_fallback: Callable[[str], Any],
    on_failure: Callable[[Exception], Any],
) -> JsonCallResult:
    """Call the collaborator once and parse a JSON object from the reply.

    ``on_text_fallback`` receives the raw reply when it contains no usable
    JSON object; ``on_failure`` receives the exception when the call itself
    fails. No retries are made.
    """
    try:
        text = await client.generate(prompt)
    except GenerativeCollaboratorError as e:
        logger.warning(f"Generative call failed, using fallback: {e}")
        return JsonCallResult(data=on_failure(e), source=SOURCE_FAILURE_FALLBACK)

    logger.debug(f"Generative response: {text[:500] if text else text!r}")

    parsed = extract_json_object(text)
    if parsed is None:
        logger.warning("No JSON object found in generative response, using text fallback")
        return JsonCallResult(
            data=on_text_fallback(text or ""), source=SOURCE_TEXT_FALLBACK, raw_text=text
        )

    return JsonCallResult(data=parsed, source=SOURCE_JSON, raw_text=text)
