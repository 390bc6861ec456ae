"""GeminiClient — ``GenerativeClient`` backed by the google-genai SDK.

Images go inline as ``Part.from_bytes`` parts after the text instruction.
When a response schema is declared the reply is requested as JSON and the
schema is passed through unchanged.
"""

from __future__ import annotations

import logging

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from leak_intake.errors import TransportError
from leak_intake.interfaces import GenerativeClient
from leak_intake.models.request import GenerationRequest

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-1.5-flash"
DEFAULT_TIMEOUT_SECONDS = 60.0


class GeminiClient(GenerativeClient):
    """Async client for the Gemini ``generate_content`` endpoint.

    Args:
        api_key: Gemini API key
        model: model name, e.g. ``gemini-1.5-flash``
        timeout_seconds: per-request timeout enforced by the SDK's HTTP layer
        client: optional pre-built ``genai.Client`` (tests inject a fake)
    """

    def __init__(
        self,
        api_key: str | None = None,
        *,
        model: str = DEFAULT_MODEL,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        client: genai.Client | None = None,
    ) -> None:
        self._model = model
        if client is None:
            client = genai.Client(
                api_key=api_key,
                # HttpOptions.timeout is in milliseconds
                http_options=types.HttpOptions(timeout=int(timeout_seconds * 1000)),
            )
        self._client = client

    @property
    def model(self) -> str:
        return self._model

    async def generate(self, request: GenerationRequest) -> str:
        contents: list = [request.prompt]
        for image in request.images:
            contents.append(
                types.Part.from_bytes(data=image.raw_bytes(), mime_type=image.media_type)
            )

        config = None
        if request.response_schema is not None:
            config = types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=request.response_schema,
            )

        try:
            response = await self._client.aio.models.generate_content(
                model=self._model,
                contents=contents,
                config=config,
            )
        except (genai_errors.APIError, httpx.HTTPError) as exc:
            raise TransportError(f"Gemini request failed: {exc}") from exc

        text = response.text
        if not text or not text.strip():
            raise TransportError("Gemini returned an empty reply")
        logger.debug("Gemini reply: %d chars from %s", len(text), self._model)
        return text
