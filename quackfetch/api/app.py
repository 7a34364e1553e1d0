from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from quackfetch import config
from quackfetch.search.engine import SearchContext, default_context
from quackfetch.utils import is_blank, utc_now_iso

log = logging.getLogger(__name__)

app = FastAPI(title="quackfetch search API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


class SearchRequest(BaseModel):
    query: str | None = None
    max: int = 10
    rateLimit: int = 1000  # milliseconds
    useCache: bool = True


def _error_response(status_code: int, error: str, message: str | None = None) -> JSONResponse:
    """
    Helper to return a JSON error payload with a consistent shape.

    Example:
        { "error": "Search failed", "message": "..." }
    """
    content: dict[str, Any] = {"error": error}
    if message is not None:
        content["message"] = message
    return JSONResponse(status_code=status_code, content=content)


@app.exception_handler(RequestValidationError)
async def _invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _error_response(400, "Invalid request", str(exc.errors()))


def get_search_context(request: Request) -> SearchContext:
    """
    The SearchContext used by the routes.

    Tests (or an embedding app) may set app.state.search_context; otherwise the
    process-wide default context is used.
    """
    ctx = getattr(request.app.state, "search_context", None)
    if ctx is None:
        ctx = default_context()
    return ctx


def _clamp_max(value: int) -> int:
    return max(1, min(int(value), config.API_MAX_RESULTS))


def _run_search(
    request: Request, query: str, max_results: int, rate_limit_ms: int, use_cache: bool
) -> JSONResponse:
    ctx = get_search_context(request)
    try:
        results = ctx.search(
            query,
            max=_clamp_max(max_results),
            rate_limit=max(0, rate_limit_ms) / 1000.0,
            use_cache=use_cache,
        )
    except Exception as exc:
        log.exception("search failed", extra={"query": query})
        return _error_response(500, "Search failed", str(exc))

    return JSONResponse(
        content={
            "query": query,
            "results": [r.to_dict() for r in results],
            "count": len(results),
            "timestamp": utc_now_iso(),
        }
    )


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok", "service": config.BOT_NAME}


@app.get("/search")
def search_get(
    request: Request,
    q: str | None = Query(default=None),
    max_results: int = Query(default=10, alias="max"),
    rate_limit: int = Query(default=1000, alias="rateLimit"),
    cache: str | None = Query(default=None),
) -> JSONResponse:
    """
    GET /search?q=query&max=10&rateLimit=1000&cache=false
    """
    if is_blank(q):
        return _error_response(400, 'Query parameter "q" is required')
    use_cache = (cache or "").strip().lower() != "false"
    return _run_search(request, q, max_results, rate_limit, use_cache)


@app.post("/search")
def search_post(request: Request, body: SearchRequest) -> JSONResponse:
    """
    POST /search with body: { "query": "...", "max": 10, "rateLimit": 1000, "useCache": true }
    """
    if is_blank(body.query):
        return _error_response(400, "Query is required in request body")
    return _run_search(request, body.query, body.max, body.rateLimit, body.useCache)


def main() -> None:  # pragma: no cover
    import uvicorn

    uvicorn.run("quackfetch.api.app:app", host="127.0.0.1", port=config.API_PORT)


if __name__ == "__main__":  # pragma: no cover
    main()
