"""HTTP entrypoint.

Run locally:
  python -m api.index
  uvicorn api.index:app --reload --port 3000
"""

from functools import lru_cache
from io import BytesIO
import logging
from pathlib import Path
import sys

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, File, HTTPException, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from PIL import Image, UnidentifiedImageError
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.analysis_logging import AnalysisLogger, AnalysisLoggingConfig
from api.config import ApiConfig
from api.rate_limit import RateLimiter

# Ensure local src package is importable in serverless runtime.
ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from did_i_fumble.core import analyze_with_metadata, select_provider  # noqa: E402
from did_i_fumble.exceptions import ImageError  # noqa: E402
from did_i_fumble.providers.base import BaseProvider  # noqa: E402
from did_i_fumble.schema import Verdict  # noqa: E402

load_dotenv()

app = FastAPI(title="did-i-fumble API", version="1.0.0")
logger = logging.getLogger(__name__)
CONFIG = ApiConfig.from_env()
ANALYSIS_LOGGER = AnalysisLogger(AnalysisLoggingConfig.from_env())
RATE_LIMITER = RateLimiter(CONFIG.rate_limit_max_requests, CONFIG.rate_limit_window_sec)
ALLOWED_MIME_TYPES = {"image/png", "image/jpeg", "image/jpg", "image/webp"}

app.add_middleware(
    CORSMiddleware,
    allow_origins=CONFIG.allow_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # The only validated request input is the multipart `image` file.
    logger.info("rejected malformed upload: %s", exc.errors())
    return JSONResponse(status_code=400, content={"error": "No image uploaded"})


@lru_cache(maxsize=1)
def _get_provider() -> BaseProvider:
    return select_provider(CONFIG.provider)


def _enforce_rate_limit(request: Request) -> None:
    client = request.client.host if request.client else "unknown"
    if not RATE_LIMITER.allow(client):
        raise HTTPException(status_code=429, detail="Too many requests")


def _validate_multipart_content_type(content_type: str | None) -> str:
    if not content_type:
        raise HTTPException(status_code=400, detail="No image uploaded")
    normalized = content_type.split(";")[0].strip().lower()
    if normalized not in ALLOWED_MIME_TYPES:
        raise HTTPException(status_code=400, detail="Invalid file type. Upload PNG/JPG/JPEG/WEBP.")
    return normalized


def _validate_payload_size(payload: bytes) -> None:
    if len(payload) > CONFIG.max_image_bytes:
        max_mb = CONFIG.max_image_bytes // (1024 * 1024)
        raise HTTPException(status_code=413, detail=f"File too large. Max {max_mb}MB.")


def _ensure_decodable_image(payload: bytes) -> None:
    try:
        with Image.open(BytesIO(payload)) as image:
            image.verify()
    except (Image.DecompressionBombError, UnidentifiedImageError, OSError, SyntaxError) as exc:
        raise HTTPException(status_code=400, detail="Invalid image format") from exc


@app.get("/", response_class=PlainTextResponse)
def root() -> str:
    return "Did I Fumble backend is live 🔥"


@app.get("/health")
def health() -> dict[str, bool]:
    return {"ok": True}


@app.post("/analyze", response_model=Verdict, dependencies=[Depends(_enforce_rate_limit)])
async def analyze_screenshot(image: UploadFile | None = File(default=None)) -> Verdict:
    request_id = ANALYSIS_LOGGER.new_request_id()

    if image is None:
        raise HTTPException(status_code=400, detail="No image uploaded")
    content_type = _validate_multipart_content_type(image.content_type)
    payload = await image.read()
    if not payload:
        raise HTTPException(status_code=400, detail="Empty file")
    _validate_payload_size(payload)
    _ensure_decodable_image(payload)

    try:
        verdict, metadata = await run_in_threadpool(
            analyze_with_metadata,
            payload,
            provider=_get_provider(),
            mime_type=content_type,
        )
    except ImageError as exc:
        raise HTTPException(status_code=400, detail="Invalid image format") from exc
    except Exception as exc:
        ANALYSIS_LOGGER.log_error(
            request_id=request_id,
            payload=payload,
            content_type=content_type,
            error_detail=str(exc),
        )
        logger.exception("analysis failed (request_id=%s)", request_id)
        raise HTTPException(status_code=500, detail="Analysis failed")

    ANALYSIS_LOGGER.log_success(
        request_id=request_id,
        payload=payload,
        content_type=content_type,
        verdict=verdict.model_dump(),
        analysis_metadata=metadata,
    )
    return verdict


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=CONFIG.port)
