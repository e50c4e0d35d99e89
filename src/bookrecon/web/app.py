"""FastAPI web application for bookrecon."""

from __future__ import annotations

import os
import time
from collections import defaultdict
from datetime import datetime, timezone

import structlog
import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .. import __version__
from ..core.errors import (
    IdentifierParseError,
    JSONParseError,
    ProviderConnectionError,
    ReconError,
    UnsupportedProviderError,
)
from ..core.fetcher import DEFAULT_PROVIDERS, DEFAULT_SEARCH_PROVIDER, MetadataFetcher
from ..core.http import HttpFetcher
from ..core.providers import Provider

load_dotenv()

log = structlog.get_logger()

# Rate limiting: per-IP, requests to /api/*
RATE_LIMIT = int(os.environ.get("RATE_LIMIT", "10"))  # requests per window
RATE_LIMIT_WINDOW = int(os.environ.get("RATE_LIMIT_WINDOW", "60"))  # seconds

_ERROR_STATUS: list[tuple[type[ReconError], int]] = [
    (IdentifierParseError, 400),
    (UnsupportedProviderError, 501),
    (ProviderConnectionError, 502),
    (JSONParseError, 502),
]

# Rate limit tracking: IP -> list of timestamps
_rate_log: dict[str, list[float]] = defaultdict(list)


class BadRequest(ValueError):
    pass


def _parse_providers(value: str | None, default: tuple[Provider, ...]) -> list[Provider]:
    if not value:
        return list(default)
    providers = []
    for name in value.split(","):
        name = name.strip()
        if not name:
            continue
        try:
            providers.append(Provider(name))
        except ValueError:
            raise BadRequest(f"Unknown provider: {name}") from None
    return providers


def _configured_providers() -> list[Provider]:
    return _parse_providers(os.environ.get("BOOKRECON_PROVIDERS"), DEFAULT_PROVIDERS)


def _configured_search_provider() -> Provider:
    name = os.environ.get("BOOKRECON_SEARCH_PROVIDER", "")
    return Provider.coerce(name) if name else DEFAULT_SEARCH_PROVIDER


def _client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def _is_rate_limited(ip: str) -> bool:
    now = time.time()
    window_start = now - RATE_LIMIT_WINDOW
    # Trim old entries
    _rate_log[ip] = [t for t in _rate_log[ip] if t > window_start]
    return len(_rate_log[ip]) >= RATE_LIMIT


def _record_request(ip: str) -> None:
    _rate_log[ip].append(time.time())


def _error_response(error: ReconError) -> JSONResponse:
    status = next((code for kind, code in _ERROR_STATUS if isinstance(error, kind)), 500)
    return JSONResponse({"error": str(error), "kind": type(error).__name__}, status_code=status)


app = FastAPI(title="bookrecon", docs_url=None, redoc_url=None)


@app.middleware("http")
async def rate_limit(request: Request, call_next):
    if not request.url.path.startswith("/api/"):
        return await call_next(request)
    ip = _client_ip(request)
    if _is_rate_limited(ip):
        log.warning("rate_limited", ip=ip)
        return JSONResponse(
            {"error": "Too many requests. Please wait a minute and try again."},
            status_code=429,
        )
    _record_request(ip)
    return await call_next(request)


# Added after rate_limit so it wraps it; 429 replies get the headers too.
@app.middleware("http")
async def security_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    return response


@app.exception_handler(ReconError)
async def recon_error(request: Request, exc: ReconError):
    log.info("lookup_failed", path=request.url.path, kind=type(exc).__name__, error=str(exc))
    return _error_response(exc)


@app.exception_handler(BadRequest)
async def bad_request(request: Request, exc: BadRequest):
    return JSONResponse({"error": str(exc)}, status_code=400)


@app.get("/health")
async def health():
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": __version__,
        "environment": os.environ.get("ENV", "dev"),
    }


@app.get("/api/isbn/{isbn}")
async def lookup_isbn(isbn: str, providers: str | None = None):
    chosen = _parse_providers(providers, tuple(_configured_providers()))
    async with HttpFetcher() as fetch:
        record = await MetadataFetcher(fetch).fetch_by_isbn(isbn, chosen)
    return {
        "isbn": isbn,
        "providers": [p.value for p in chosen],
        "record": record.to_dict(),
    }


@app.get("/api/search")
async def search(q: str, search_provider: str | None = None, providers: str | None = None):
    if not q.strip():
        return JSONResponse({"error": "Query is required."}, status_code=400)
    chosen = _parse_providers(providers, tuple(_configured_providers()))
    requested = _parse_providers(search_provider, ())
    if len(requested) > 1:
        raise BadRequest("Only one search provider may be given.")
    searcher = requested[0] if requested else _configured_search_provider()
    async with HttpFetcher() as fetch:
        records = await MetadataFetcher(fetch).fetch_by_description(q, searcher, chosen)
    return {
        "query": q,
        "search_provider": searcher.value,
        "providers": [p.value for p in chosen],
        "results": [r.to_dict() for r in records],
    }


def main():
    port = int(os.environ.get("PORT", "8000"))
    is_dev = os.environ.get("ENV", "dev") == "dev"
    uvicorn.run(
        "bookrecon.web.app:app",
        host="0.0.0.0",
        port=port,
        reload=is_dev,
    )
