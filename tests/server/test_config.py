"""Tests for environment-driven configuration."""

from api.analysis_logging import AnalysisLogger, AnalysisLoggingConfig
from api.config import ApiConfig


def test_api_config_defaults(monkeypatch):
    for name in ("PORT", "FRONTEND_ORIGINS", "MAX_IMAGE_BYTES", "RATE_LIMIT_MAX_REQUESTS", "RATE_LIMIT_WINDOW_SEC", "FUMBLE_PROVIDER"):
        monkeypatch.delenv(name, raising=False)

    config = ApiConfig.from_env()

    assert config.port == 3000
    assert config.allow_origins == ["*"]
    assert config.max_image_bytes == 5 * 1024 * 1024
    assert config.rate_limit_max_requests == 5
    assert config.rate_limit_window_sec == 60.0
    assert config.provider is None


def test_api_config_from_env(monkeypatch):
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("FRONTEND_ORIGINS", "https://a.example, https://b.example,")
    monkeypatch.setenv("RATE_LIMIT_MAX_REQUESTS", "not-a-number")
    monkeypatch.setenv("FUMBLE_PROVIDER", "gemini")

    config = ApiConfig.from_env()

    assert config.port == 8080
    assert config.allow_origins == ["https://a.example", "https://b.example"]
    assert config.rate_limit_max_requests == 5
    assert config.provider == "gemini"


def test_analysis_logging_disabled_by_default(monkeypatch):
    monkeypatch.delenv("SAVE_REQUEST_LOG", raising=False)

    logger = AnalysisLogger(AnalysisLoggingConfig.from_env())

    assert not logger.should_log()


def test_analysis_logging_rejects_unsafe_table_name(monkeypatch):
    monkeypatch.setenv("ANALYSIS_LOG_TABLE", "logs; drop table users")

    assert AnalysisLoggingConfig.from_env().table == "analysis_logs"


def test_log_success_builds_row(mocker):
    logger = AnalysisLogger(AnalysisLoggingConfig(enabled=True, database_url="postgresql://localhost/db"))
    insert = mocker.patch.object(logger, "_insert_row")

    logger.log_success(
        request_id="req-1",
        payload=b"image",
        content_type="image/png",
        verdict={"outcome": "You cooked 🔥", "roast": "r", "tip": "t"},
        analysis_metadata={"provider": "openai", "model": "gpt-4o-mini", "parser": "direct", "warnings": [], "raw_reply": "x" * 5000},
    )

    row = insert.call_args.args[0]
    assert row["request_id"] == "req-1"
    assert row["image_sha256"] == logger.image_sha256(b"image")
    assert row["image_size_bytes"] == 5
    assert row["parser"] == "direct"
    assert len(row["raw_reply"]) == 4000
    assert row["error_detail"] is None


def test_log_error_skipped_when_disabled(mocker):
    logger = AnalysisLogger(AnalysisLoggingConfig(enabled=False, database_url="postgresql://localhost/db"))
    insert = mocker.patch.object(logger, "_insert_row")

    logger.log_error(request_id="req-2", payload=None, content_type=None, error_detail="boom")

    insert.assert_not_called()
