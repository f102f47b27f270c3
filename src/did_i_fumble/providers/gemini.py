"""Gemini provider implementation."""

import os

from google import genai
from google.genai import errors, types

from did_i_fumble.exceptions import AuthenticationError, ProviderError, RateLimitError
from did_i_fumble.imaging import ImagePayload
from did_i_fumble.prompts import SYSTEM_PROMPT, TEMPERATURE, USER_PROMPT
from did_i_fumble.providers.base import BaseProvider


class GeminiProvider(BaseProvider):
    """Gemini Vision API provider."""

    name = "gemini"

    def __init__(self, api_key: str | None = None, model: str | None = None, client=None):
        """Initialize Gemini provider.

        Args:
            api_key: Gemini API key. Falls back to GEMINI_API_KEY env var.
            model: Model name to use. Falls back to GEMINI_MODEL, then gemini-2.0-flash.
            client: Pre-built client, mainly for tests.

        Raises:
            AuthenticationError: If no API key is provided or found.
        """
        self.model = model or os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
        if client is not None:
            self.client = client
            return

        self.api_key = api_key or os.environ.get("GEMINI_API_KEY")
        if not self.api_key:
            raise AuthenticationError(
                "No API key provided. Set GEMINI_API_KEY environment variable "
                "or pass api_key parameter."
            )
        self.client = genai.Client(api_key=self.api_key)

    def generate(self, image: ImagePayload) -> str:
        """Ask Gemini for a verdict on the screenshot.

        Raises:
            RateLimitError: If API rate limit is exceeded
            AuthenticationError: If API key is invalid
            ProviderError: For any other request failure
        """
        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=[
                    types.Part.from_bytes(data=image.content, mime_type=image.mime_type),
                    USER_PROMPT,
                ],
                config=types.GenerateContentConfig(
                    system_instruction=SYSTEM_PROMPT,
                    temperature=TEMPERATURE,
                ),
            )
        except errors.ClientError as e:
            if "rate" in str(e).lower() or "quota" in str(e).lower():
                raise RateLimitError(f"API rate limit exceeded: {e}") from e
            if "auth" in str(e).lower() or "key" in str(e).lower():
                raise AuthenticationError(f"Invalid API key: {e}") from e
            raise ProviderError(f"Gemini request failed: {e}") from e
        except Exception as e:
            raise ProviderError(f"Gemini request failed: {e}") from e

        return response.text or ""
