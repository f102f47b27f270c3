"""OpenAI chat-completion provider implementation."""

import os

import openai

from did_i_fumble.exceptions import AuthenticationError, ProviderError, RateLimitError
from did_i_fumble.imaging import ImagePayload
from did_i_fumble.prompts import SYSTEM_PROMPT, TEMPERATURE, USER_PROMPT
from did_i_fumble.providers.base import BaseProvider


class OpenAIChatProvider(BaseProvider):
    """OpenAI chat completions provider with image input."""

    name = "openai"

    def __init__(self, api_key: str | None = None, model: str | None = None, client=None):
        """Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key. Falls back to OPENAI_API_KEY env var.
            model: Model name to use. Falls back to OPENAI_MODEL, then gpt-4o-mini.
            client: Pre-built client, mainly for tests.

        Raises:
            AuthenticationError: If no API key is provided or found.
        """
        self.model = model or os.getenv("OPENAI_MODEL", "gpt-4o-mini")
        if client is not None:
            self.client = client
            return

        self.api_key = api_key or os.environ.get("OPENAI_API_KEY")
        if not self.api_key:
            raise AuthenticationError(
                "No API key provided. Set OPENAI_API_KEY environment variable "
                "or pass api_key parameter."
            )
        self.client = openai.OpenAI(api_key=self.api_key)

    def _build_messages(self, image: ImagePayload) -> list[dict]:
        return [
            {"role": "system", "content": SYSTEM_PROMPT},
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": USER_PROMPT},
                    {"type": "image_url", "image_url": {"url": image.to_data_url()}},
                ],
            },
        ]

    def generate(self, image: ImagePayload) -> str:
        """Ask the model for a verdict on the screenshot.

        Raises:
            RateLimitError: If API rate limit is exceeded
            AuthenticationError: If API key is invalid
            ProviderError: For any other request failure
        """
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=self._build_messages(image),
                temperature=TEMPERATURE,
            )
        except openai.RateLimitError as e:
            raise RateLimitError(f"API rate limit exceeded: {e}") from e
        except openai.AuthenticationError as e:
            raise AuthenticationError(f"Invalid API key: {e}") from e
        except Exception as e:
            raise ProviderError(f"Chat completion failed: {e}") from e

        choices = getattr(response, "choices", None) or []
        if not choices:
            return ""
        message = getattr(choices[0], "message", None)
        return getattr(message, "content", None) or ""
