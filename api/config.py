"""Environment-driven configuration for the HTTP API."""

from __future__ import annotations

import os
from dataclasses import dataclass, field


def parse_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def safe_float(value: str | None, default: float) -> float:
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def safe_int(value: str | None, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class ApiConfig:
    port: int = 3000
    allow_origins: list[str] = field(default_factory=lambda: ["*"])
    max_image_bytes: int = 5 * 1024 * 1024
    rate_limit_max_requests: int = 5
    rate_limit_window_sec: float = 60.0
    provider: str | None = None

    @classmethod
    def from_env(cls) -> "ApiConfig":
        raw_origins = os.getenv("FRONTEND_ORIGINS", "*")
        return cls(
            port=safe_int(os.getenv("PORT"), 3000),
            allow_origins=[origin.strip() for origin in raw_origins.split(",") if origin.strip()],
            max_image_bytes=safe_int(os.getenv("MAX_IMAGE_BYTES"), 5 * 1024 * 1024),
            rate_limit_max_requests=max(1, safe_int(os.getenv("RATE_LIMIT_MAX_REQUESTS"), 5)),
            rate_limit_window_sec=max(1.0, safe_float(os.getenv("RATE_LIMIT_WINDOW_SEC"), 60.0)),
            provider=os.getenv("FUMBLE_PROVIDER") or None,
        )
