"""Core analysis function."""

import logging
import os
from typing import Any

from did_i_fumble.imaging import ImageInput, load_image_payload
from did_i_fumble.normalization import normalize_with_warnings
from did_i_fumble.parsing import parse_model_reply
from did_i_fumble.providers.base import BaseProvider
from did_i_fumble.schema import Verdict

logger = logging.getLogger(__name__)


def _build_openai_provider(api_key: str | None) -> BaseProvider:
    from did_i_fumble.providers.openai_chat import OpenAIChatProvider

    return OpenAIChatProvider(api_key=api_key)


def _build_gemini_provider(api_key: str | None) -> BaseProvider:
    from did_i_fumble.providers.gemini import GeminiProvider

    return GeminiProvider(api_key=api_key)


def select_provider(provider: str | None = None, api_key: str | None = None) -> BaseProvider:
    """Build the provider named by ``provider`` or the FUMBLE_PROVIDER env var."""
    provider_name = (provider or os.getenv("FUMBLE_PROVIDER", "openai")).strip().lower()
    if provider_name in {"openai", "chat"}:
        return _build_openai_provider(api_key)
    if provider_name == "gemini":
        return _build_gemini_provider(api_key)
    raise ValueError(f"Unsupported provider: {provider_name}")


def analyze_with_metadata(
    image: ImageInput,
    *,
    api_key: str | None = None,
    provider: str | BaseProvider | None = None,
    mime_type: str | None = None,
) -> tuple[Verdict, dict[str, Any]]:
    """Analyze a screenshot and return the verdict with request metadata.

    Metadata holds ``provider``, ``model``, ``parser`` (winning extraction
    strategy or ``"none"``), ``warnings`` and the untouched ``raw_reply``.
    """
    engine = provider if isinstance(provider, BaseProvider) else select_provider(provider, api_key)
    payload = load_image_payload(image, mime_type=mime_type)

    raw_reply = engine.generate(payload) or ""
    parsed = parse_model_reply(raw_reply)
    if parsed.value is None:
        logger.info("no JSON object found in %s reply (%d chars)", engine.name, len(raw_reply))
    verdict, warnings = normalize_with_warnings(parsed.value)

    metadata = {
        "provider": engine.name,
        "model": engine.model,
        "parser": parsed.strategy or "none",
        "warnings": warnings,
        "raw_reply": raw_reply,
    }
    return verdict, metadata


def analyze(
    image: ImageInput,
    *,
    api_key: str | None = None,
    provider: str | BaseProvider | None = None,
    mime_type: str | None = None,
) -> Verdict:
    """Judge how a chat went from its screenshot.

    Args:
        image: Image input - file path (str), Path object, raw bytes, or PIL Image.
        api_key: Provider API key. Falls back to the provider's env var.
        provider: Provider name (`openai` or `gemini`) or a provider instance.
            Defaults to `FUMBLE_PROVIDER` env var, then `openai`.
        mime_type: MIME type of raw bytes input, detected when omitted.

    Returns:
        Verdict that always satisfies the outcome allow-list and length bounds,
        even when the model reply is unusable.

    Raises:
        ImageError: If the image cannot be loaded
        AuthenticationError, RateLimitError, ProviderError: If the model call fails
    """
    verdict, _ = analyze_with_metadata(image, api_key=api_key, provider=provider, mime_type=mime_type)
    return verdict
