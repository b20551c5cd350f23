from __future__ import annotations

import logging
from typing import Callable

import httpx
from google import genai
from google.genai import errors as genai_errors

from tastify.services.errors import GeminiConfigurationError, RateLimitedError, TransportError

logger = logging.getLogger(__name__)

DEFAULT_MODEL_NAME = "gemini-2.5-flash"

# Capability consumed by the extraction pipeline: prompt text in, raw model text out.
GenerateText = Callable[[str], str]


def _is_rate_limited(error: genai_errors.APIError) -> bool:
    status_code = getattr(error, "code", None) or getattr(error, "status_code", None)
    return status_code == 429 or "RESOURCE_EXHAUSTED" in str(error)


class GeminiClient:
    def __init__(self, api_key: str, model_name: str = DEFAULT_MODEL_NAME) -> None:
        self.api_key = api_key
        self.model_name = model_name
        self._client: genai.Client | None = None

    def _get_client(self) -> genai.Client:
        if not self.api_key:
            raise GeminiConfigurationError("Missing Gemini API key.")
        if self._client is None:
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def generate_content(self, prompt: str) -> str:
        client = self._get_client()
        try:
            response = client.models.generate_content(model=self.model_name, contents=prompt)
        except genai_errors.APIError as err:
            if _is_rate_limited(err):
                raise RateLimitedError("Gemini API rate limit reached.") from err
            raise TransportError(f"Gemini API error: {err}") from err
        except genai_errors.UnknownApiResponseError as err:
            raise TransportError(f"Unexpected Gemini response: {err}") from err
        except httpx.HTTPError as err:
            raise TransportError(f"Gemini request failed: {err}") from err

        text = getattr(response, "text", None)
        if not text:
            raise TransportError("Model response did not include text content.")

        logger.debug("gemini.ok model=%s chars=%d", self.model_name, len(text))
        return text

    def __call__(self, prompt: str) -> str:
        return self.generate_content(prompt)
