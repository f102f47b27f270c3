"""Tolerant JSON extraction from free-form model replies."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Callable

_FENCE_MARKERS = ("```json", "```")
_BRACE_SPAN = re.compile(r"\{.*\}", re.DOTALL)


@dataclass(frozen=True)
class ParsedReply:
    """Object recovered from a model reply and the strategy that found it."""

    value: dict[str, Any] | None
    strategy: str | None = None


def _loads_object(text: str) -> dict[str, Any] | None:
    try:
        value = json.loads(text)
    except (ValueError, RecursionError):
        return None
    return value if isinstance(value, dict) else None


def _strip_fences(text: str) -> str:
    for marker in _FENCE_MARKERS:
        text = text.replace(marker, "")
    return text.strip()


def _parse_direct(text: str) -> dict[str, Any] | None:
    return _loads_object(text)


def _parse_fence_stripped(text: str) -> dict[str, Any] | None:
    return _loads_object(_strip_fences(text))


def _parse_brace_span(text: str) -> dict[str, Any] | None:
    match = _BRACE_SPAN.search(_strip_fences(text))
    if not match:
        return None
    return _loads_object(match.group(0))


STRATEGIES: tuple[tuple[str, Callable[[str], dict[str, Any] | None]], ...] = (
    ("direct", _parse_direct),
    ("fence_stripped", _parse_fence_stripped),
    ("brace_span", _parse_brace_span),
)


def parse_model_reply(text: object) -> ParsedReply:
    """Recover a JSON object from model text, reporting the winning strategy.

    Strategies run in order and stop at the first one that yields a JSON
    object. Never raises.
    """
    if not text or not isinstance(text, str):
        return ParsedReply(value=None)

    for name, strategy in STRATEGIES:
        value = strategy(text)
        if value is not None:
            return ParsedReply(value=value, strategy=name)
    return ParsedReply(value=None)


def extract_json(text: object) -> dict[str, Any] | None:
    """Return the JSON object embedded in ``text``, or None."""
    return parse_model_reply(text).value
