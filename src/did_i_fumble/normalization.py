"""Schema validation and bounding of candidate verdicts."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ValidationError

from did_i_fumble.schema import (
    ALLOWED_OUTCOMES,
    FALLBACK_VERDICT,
    ROAST_MAX_LENGTH,
    TIP_MAX_LENGTH,
    Verdict,
    VerdictCandidate,
)

logger = logging.getLogger(__name__)


def validate_candidate(candidate: Any) -> VerdictCandidate | None:
    """Return the candidate as a VerdictCandidate, or None if it has the wrong shape."""
    if candidate is None:
        return None
    if isinstance(candidate, BaseModel):
        candidate = candidate.model_dump()
    if not isinstance(candidate, Mapping):
        return None
    try:
        return VerdictCandidate.model_validate(dict(candidate))
    except ValidationError:
        return None


def _bound(value: str, limit: int) -> tuple[str, bool]:
    text = str(value).strip()
    if len(text) <= limit:
        return text, False
    return text[:limit].rstrip(), True


def normalize_with_warnings(candidate: Any) -> tuple[Verdict, list[str]]:
    """Normalize a candidate and report which corrections were applied.

    Warnings are ``fallback_used``, ``outcome_replaced``, ``roast_truncated``
    and ``tip_truncated``.
    """
    validated = validate_candidate(candidate)
    if validated is None:
        logger.info("model reply failed validation, using fallback verdict")
        return FALLBACK_VERDICT, ["fallback_used"]

    warnings: list[str] = []
    outcome = validated.outcome
    if outcome not in ALLOWED_OUTCOMES:
        logger.info("unknown outcome %r replaced with fallback outcome", outcome)
        outcome = FALLBACK_VERDICT.outcome
        warnings.append("outcome_replaced")

    roast, roast_truncated = _bound(validated.roast, ROAST_MAX_LENGTH)
    if roast_truncated:
        warnings.append("roast_truncated")
    tip, tip_truncated = _bound(validated.tip, TIP_MAX_LENGTH)
    if tip_truncated:
        warnings.append("tip_truncated")

    return Verdict(outcome=outcome, roast=roast, tip=tip), warnings


def normalize_result(candidate: Any) -> Verdict:
    """Coerce any candidate into a valid Verdict. Never raises."""
    verdict, _ = normalize_with_warnings(candidate)
    return verdict
