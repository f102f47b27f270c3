"""Best-effort persistent logging of analysis requests."""

from __future__ import annotations

import hashlib
import json
import logging
import os
import re
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

from api.config import parse_bool

logger = logging.getLogger(__name__)

SAFE_TABLE_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
MAX_RAW_REPLY_CHARS = 4000


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class AnalysisLoggingConfig:
    enabled: bool = False
    database_url: str | None = None
    table: str = "analysis_logs"

    @classmethod
    def from_env(cls) -> "AnalysisLoggingConfig":
        table = os.getenv("ANALYSIS_LOG_TABLE", "analysis_logs")
        return cls(
            enabled=parse_bool(os.getenv("SAVE_REQUEST_LOG"), False),
            database_url=os.getenv("ANALYSIS_LOG_DATABASE_URL") or os.getenv("DATABASE_URL"),
            table=table if SAFE_TABLE_NAME.match(table) else "analysis_logs",
        )


class AnalysisLogger:
    def __init__(self, config: AnalysisLoggingConfig):
        self.config = config
        self._db_ready = False

    def should_log(self) -> bool:
        return self.config.enabled and bool(self.config.database_url)

    def new_request_id(self) -> str:
        return str(uuid.uuid4())

    def image_sha256(self, payload: bytes) -> str:
        return hashlib.sha256(payload).hexdigest()

    def log_success(
        self,
        *,
        request_id: str,
        payload: bytes,
        content_type: str,
        verdict: dict,
        analysis_metadata: dict,
    ) -> None:
        if not self.should_log():
            return

        self._insert_row(
            {
                "request_id": request_id,
                "created_at": _utc_now_iso(),
                "provider": analysis_metadata.get("provider"),
                "model": analysis_metadata.get("model"),
                "parser": analysis_metadata.get("parser"),
                "image_sha256": self.image_sha256(payload),
                "mime_type": content_type,
                "image_size_bytes": len(payload),
                "warnings_json": analysis_metadata.get("warnings") or [],
                "verdict_json": verdict,
                "raw_reply": (analysis_metadata.get("raw_reply") or "")[:MAX_RAW_REPLY_CHARS],
                "error_detail": None,
            }
        )

    def log_error(
        self,
        *,
        request_id: str,
        payload: bytes | None,
        content_type: str | None,
        error_detail: str,
    ) -> None:
        if not self.should_log():
            return

        self._insert_row(
            {
                "request_id": request_id,
                "created_at": _utc_now_iso(),
                "provider": None,
                "model": None,
                "parser": None,
                "image_sha256": self.image_sha256(payload) if payload else None,
                "mime_type": content_type,
                "image_size_bytes": len(payload) if payload else None,
                "warnings_json": [],
                "verdict_json": None,
                "raw_reply": None,
                "error_detail": error_detail[:2000],
            }
        )

    def _insert_row(self, row: dict) -> None:
        if not self.config.database_url:
            return
        try:
            import psycopg
        except ImportError:
            logger.warning("psycopg is not installed, analysis log disabled")
            return

        table = self.config.table
        create_sql = f"""
            create table if not exists {table} (
              id bigserial primary key,
              request_id text not null unique,
              created_at timestamptz not null default now(),
              provider text null,
              model text null,
              parser text null,
              image_sha256 text null,
              mime_type text null,
              image_size_bytes integer null,
              warnings_json jsonb not null default '[]'::jsonb,
              verdict_json jsonb null,
              raw_reply text null,
              error_detail text null
            )
        """
        insert_sql = f"""
            insert into {table} (
              request_id, created_at, provider, model, parser, image_sha256, mime_type,
              image_size_bytes, warnings_json, verdict_json, raw_reply, error_detail
            ) values (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
            on conflict (request_id) do nothing
        """
        try:
            with psycopg.connect(self.config.database_url) as conn:
                with conn.cursor() as cur:
                    if not self._db_ready:
                        cur.execute(create_sql)
                        self._db_ready = True
                    cur.execute(
                        insert_sql,
                        (
                            row.get("request_id"),
                            row.get("created_at"),
                            row.get("provider"),
                            row.get("model"),
                            row.get("parser"),
                            row.get("image_sha256"),
                            row.get("mime_type"),
                            row.get("image_size_bytes"),
                            json.dumps(row.get("warnings_json") or [], ensure_ascii=False),
                            json.dumps(row.get("verdict_json"), ensure_ascii=False)
                            if row.get("verdict_json") is not None
                            else None,
                            row.get("raw_reply"),
                            row.get("error_detail"),
                        ),
                    )
                conn.commit()
        except Exception:
            # The analysis log must never break the API response.
            logger.warning("failed to write analysis log row", exc_info=True)
