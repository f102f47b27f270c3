"""Tests for core analysis function."""

from io import BytesIO

import pytest
from PIL import Image

from did_i_fumble import FALLBACK_VERDICT, Verdict, analyze
from did_i_fumble.core import analyze_with_metadata
from did_i_fumble.exceptions import AuthenticationError, ImageError, ProviderError
from did_i_fumble.imaging import ImagePayload
from did_i_fumble.providers.base import BaseProvider


class StubProvider(BaseProvider):
    name = "stub"
    model = "stub-model"

    def __init__(self, reply: str = "", error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.calls: list[ImagePayload] = []

    def generate(self, image: ImagePayload) -> str:
        self.calls.append(image)
        if self.error is not None:
            raise self.error
        return self.reply


def _png_bytes() -> bytes:
    with BytesIO() as buffer:
        Image.new("RGB", (20, 20), color="white").save(buffer, format="PNG")
        return buffer.getvalue()


def test_analyze_requires_api_key(monkeypatch):
    """analyze() should raise AuthenticationError without API key."""
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)

    with pytest.raises(AuthenticationError):
        analyze(_png_bytes(), provider="openai")


def test_analyze_with_mock_openai_provider(mocker):
    """analyze() should return the verdict parsed from the provider reply."""
    stub = StubProvider('{"outcome": "You cooked 🔥", "roast": "Smooth operator.", "tip": "Set the date."}')
    mocker.patch("did_i_fumble.core._build_openai_provider", return_value=stub)

    result = analyze(_png_bytes(), api_key="test-key", provider="openai")

    assert result == Verdict(outcome="You cooked 🔥", roast="Smooth operator.", tip="Set the date.")
    assert len(stub.calls) == 1
    assert stub.calls[0].mime_type == "image/png"


def test_analyze_uses_gemini_provider_when_selected(mocker):
    stub = StubProvider('{"outcome": "You fumbled 😭", "roast": "r", "tip": "t"}')
    build = mocker.patch("did_i_fumble.core._build_gemini_provider", return_value=stub)

    result = analyze(_png_bytes(), provider="gemini")

    assert result.outcome == "You fumbled 😭"
    build.assert_called_once_with(None)


def test_analyze_reads_provider_from_env(monkeypatch, mocker):
    monkeypatch.setenv("FUMBLE_PROVIDER", "gemini")
    stub = StubProvider('{"outcome": "You fumbled 😭", "roast": "r", "tip": "t"}')
    mocker.patch("did_i_fumble.core._build_gemini_provider", return_value=stub)

    analyze(_png_bytes())

    assert len(stub.calls) == 1


def test_analyze_unsupported_provider_raises():
    with pytest.raises(ValueError):
        analyze(_png_bytes(), provider="unknown")


def test_analyze_falls_back_on_unusable_reply():
    stub = StubProvider("Sorry, I can't help with that.")

    verdict, metadata = analyze_with_metadata(_png_bytes(), provider=stub)

    assert verdict is FALLBACK_VERDICT
    assert metadata["parser"] == "none"
    assert metadata["warnings"] == ["fallback_used"]
    assert metadata["raw_reply"] == "Sorry, I can't help with that."


def test_analyze_with_metadata_reports_strategy():
    stub = StubProvider('```json\n{"outcome": "Made up 🤡", "roast": "r", "tip": "t"}\n```')

    verdict, metadata = analyze_with_metadata(_png_bytes(), provider=stub)

    assert verdict.outcome == FALLBACK_VERDICT.outcome
    assert metadata == {
        "provider": "stub",
        "model": "stub-model",
        "parser": "fence_stripped",
        "warnings": ["outcome_replaced"],
        "raw_reply": stub.reply,
    }


def test_analyze_propagates_provider_errors():
    stub = StubProvider(error=ProviderError("boom"))

    with pytest.raises(ProviderError):
        analyze(_png_bytes(), provider=stub)


def test_analyze_missing_file_raises_image_error(tmp_path):
    with pytest.raises(ImageError):
        analyze(tmp_path / "missing.png", provider=StubProvider("{}"))


def test_analyze_accepts_file_path_and_pil_image(tmp_path):
    path = tmp_path / "chat.jpg"
    Image.new("RGB", (20, 20), color="white").save(path, format="JPEG")
    stub = StubProvider('{"outcome": "Recoverable 😬", "roast": "r", "tip": "t"}')

    analyze(path, provider=stub)
    analyze(Image.new("RGB", (10, 10)), provider=stub)

    assert stub.calls[0].mime_type == "image/jpeg"
    assert stub.calls[1].mime_type == "image/png"
