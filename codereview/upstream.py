"""
Gemini client handle used by the completion service.
"""

import logging
from typing import Any, Optional, Protocol

from google import genai
from google.genai.errors import APIError

from codereview.config import Settings
from codereview.constants import MODEL_NAME, SYSTEM_PROMPT
from codereview.errors import ConfigurationError, EmptyCompletion, TransientUpstreamFailure


class Upstream(Protocol):
    """Anything that can run one generation call and pull text out of its response."""

    async def generate(self, prompt: str) -> Any: ...

    def extract_text(self, response: Any) -> str: ...


def extract_text(response: Any) -> str:
    """
    Pull the text payload out of a generation response.

    Args:
        response: Object returned by the upstream generation call.

    Returns:
        The response text with surrounding whitespace removed.

    Raises:
        EmptyCompletion: If no non-empty string could be obtained.
    """
    if response is None:
        raise EmptyCompletion("No response returned from Gemini")

    try:
        text = response.text
    except Exception as e:
        raise EmptyCompletion(f"Could not read text from Gemini response: {e}") from e

    if not isinstance(text, str) or not text.strip():
        raise EmptyCompletion("No valid text returned from Gemini")

    return text.strip()


class GeminiUpstream:
    """Thin async wrapper around a google-genai client."""

    def __init__(
        self,
        client: genai.Client,
        model: str = MODEL_NAME,
        system_instruction: Optional[str] = SYSTEM_PROMPT,
    ):
        self._client = client
        self.model = model
        self._config = genai.types.GenerateContentConfig(
            system_instruction=system_instruction,
            response_mime_type="text/plain",
        )

    async def generate(self, prompt: str) -> Any:
        try:
            return await self._client.aio.models.generate_content(
                model=self.model,
                contents=[prompt],
                config=self._config,
            )
        except APIError as e:
            logging.error(f"Gemini API Error: {e}")
            raise TransientUpstreamFailure(f"Gemini API Error: {e}") from e

    def extract_text(self, response: Any) -> str:
        return extract_text(response)


def build_upstream(settings: Settings) -> GeminiUpstream:
    """
    Construct the Gemini handle from settings.

    Raises:
        ConfigurationError: If GEMINI_API_KEY is missing or the client cannot be created.
    """
    api_key = (settings.GEMINI_API_KEY or "").strip()
    if not api_key:
        raise ConfigurationError("Missing GEMINI_API_KEY in environment variables")

    try:
        client = genai.Client(api_key=api_key)
    except Exception as e:
        logging.error(f"Failed to initialize Gemini client: {e}")
        raise ConfigurationError(f"Gemini client could not be initialized: {e}") from e

    return GeminiUpstream(client, model=settings.MODEL_NAME)
