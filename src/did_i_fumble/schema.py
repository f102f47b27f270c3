"""Data models for did-i-fumble."""

from typing import Annotated, Literal, get_args

from pydantic import BaseModel, ConfigDict, Field

Outcome = Literal[
    "You cooked 🔥",
    "Recoverable 😬",
    "You fumbled 😭",
    "Yeah… it’s over 💀",
]

ALLOWED_OUTCOMES: frozenset[str] = frozenset(get_args(Outcome))
ROAST_MAX_LENGTH = 140
TIP_MAX_LENGTH = 200


class VerdictCandidate(BaseModel):
    """Loosely typed model reply that passed the shape check.

    ``outcome`` must already be a string; ``roast`` and ``tip`` also accept
    numbers and are coerced to strings.
    """

    model_config = ConfigDict(coerce_numbers_to_str=True)

    outcome: Annotated[str, Field(strict=True)]
    roast: str
    tip: str


class Verdict(BaseModel):
    """Normalized verdict returned to callers."""

    model_config = ConfigDict(frozen=True)

    outcome: Outcome
    roast: str = Field(max_length=ROAST_MAX_LENGTH)
    tip: str = Field(max_length=TIP_MAX_LENGTH)


FALLBACK_VERDICT = Verdict(
    outcome="Recoverable 😬",
    roast="The vibe is… unclear, but we move.",
    tip="Keep it short. Ask a question. Don’t over-explain.",
)
