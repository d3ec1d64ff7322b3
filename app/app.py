"""
FastAPI application — proxy between the search UI and the recommendation service.

Run as a script:
    python app/app.py

Or run as a module:
    uvicorn app.app:app --reload

Endpoints:
    POST /api/recommend
        body:    {"query": "..."}
        returns: {"results": [...]}            (upstream "recommendations", verbatim)
        errors:  {"error": str, "details": str} with 400, the upstream status, or 500

    GET /health
        returns: {"status": "ok"}

Logs each query and wall-clock response time to stdout and logs/app.log
(rotating, 5 MB max, 3 backups). Every failure is logged before it is returned.
"""

import asyncio
import logging
import logging.handlers
import sys
import time
from pathlib import Path
from typing import Any

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

# Ensure project root is on sys.path when running as a script (python app/app.py)
sys.path.insert(0, str(Path(__file__).parent.parent))

from app import upstream
from app.schemas import ErrorResponse, RecommendRequest, RecommendResponse

load_dotenv()

LOG_DIR  = Path(__file__).parent.parent / "logs"
LOG_FILE = LOG_DIR / "app.log"

def _setup_logging() -> None:
    LOG_DIR.mkdir(exist_ok=True)
    fmt = logging.Formatter("%(asctime)s  %(levelname)s  %(message)s")

    stream = logging.StreamHandler(sys.stdout)
    stream.setFormatter(fmt)

    # Rotate at 5 MB, keep 3 backups
    rotating = logging.handlers.RotatingFileHandler(
        LOG_FILE, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"
    )
    rotating.setFormatter(fmt)

    root = logging.getLogger()
    root.setLevel(logging.INFO)
    root.addHandler(stream)
    root.addHandler(rotating)

_setup_logging()
log = logging.getLogger("api")


# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------

app = FastAPI(title="Solution Finder")

INVALID_QUERY_MESSAGE = "Query parameter is required and must be a string"
UPSTREAM_FAILURE_MESSAGE = "Failed to fetch recommendations"
UNEXPECTED_FAILURE_MESSAGE = "Failed to process request"


def _error(status_code: int, error: str, details: str | None = None) -> JSONResponse:
    body = ErrorResponse(error=error, details=details)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def _extract_query(body: Any) -> str | None:
    """Return body["query"] if it is a string, else None."""
    if not isinstance(body, dict):
        return None
    query = body.get("query")
    return query if isinstance(query, str) else None


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post(
    "/api/recommend",
    response_model=RecommendResponse,
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
    # Body is parsed by hand below, so declare its schema for the docs
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": RecommendRequest.model_json_schema()}},
        },
    },
)
async def recommend(request: Request) -> JSONResponse:
    t0 = time.perf_counter()

    try:
        body = await request.json()

        query = _extract_query(body)
        if query is None:
            log.warning("Rejected request without a string query: %r", body)
            return _error(400, INVALID_QUERY_MESSAGE)

        log.info("Forwarding query=%r", query)
        response = await run_in_threadpool(upstream.fetch, query)

        if not 200 <= response.status_code < 300:
            log.error("Upstream returned status %d for query=%r", response.status_code, query)
            return _error(
                response.status_code,
                UPSTREAM_FAILURE_MESSAGE,
                f"API returned status {response.status_code}",
            )

        data = response.json()
        if not isinstance(data, dict):
            raise ValueError("Upstream response is not a JSON object")

        results = data.get("recommendations") or []

    except Exception as exc:
        log.exception("Error in recommendation API: %s", exc)
        return _error(500, UNEXPECTED_FAILURE_MESSAGE, str(exc) or "Unknown error")

    elapsed = time.perf_counter() - t0
    log.info("query=%r  hits=%d  %.2fs", query, len(results), elapsed)

    return JSONResponse(content={"results": results})


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def _launch_server() -> None:
    config = uvicorn.Config(app, host="0.0.0.0", port=8000, reload=False)
    server = uvicorn.Server(config)

    try:
        asyncio.get_running_loop()
    except RuntimeError:
        uvicorn.run(app, host="0.0.0.0", port=8000, reload=False)
        return

    log.warning(
        "Detected an existing asyncio event loop; serving with create_task() instead of asyncio.run()."
    )
    asyncio.create_task(server.serve())


if __name__ == "__main__":
    log.info("=== Solution Finder proxy — launching server on http://0.0.0.0:8000 ===")
    log.info("  Upstream: %s", upstream.UPSTREAM_URL)
    _launch_server()
