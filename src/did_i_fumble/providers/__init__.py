"""Model providers for did-i-fumble."""

from did_i_fumble.providers.base import BaseProvider
from did_i_fumble.providers.gemini import GeminiProvider
from did_i_fumble.providers.openai_chat import OpenAIChatProvider

__all__ = ["BaseProvider", "GeminiProvider", "OpenAIChatProvider"]
