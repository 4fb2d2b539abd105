"""FastAPI application for the debt swap quote service."""

import os

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from debtswap import __version__
from debtswap.api.endpoints import router
from debtswap.orchestrator.debt_swap import DebtSwap

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("DEBTSWAP_HOST", "0.0.0.0")
PORT = int(os.environ.get("DEBTSWAP_PORT", "8000"))
DEBUG = os.environ.get("DEBTSWAP_DEBUG", "false").lower() in ("true", "1", "yes")

# Maximum request body size (1 MB)
MAX_REQUEST_SIZE = 1024 * 1024

logger = structlog.get_logger()

app = FastAPI(
    title="Debt Swap Quotes",
    description="Exact-output route pricing for debt swap requests",
    version=__version__,
)


@app.middleware("http")
async def limit_request_size(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Reject requests with body larger than MAX_REQUEST_SIZE."""
    content_length = request.headers.get("content-length")
    if content_length and int(content_length) > MAX_REQUEST_SIZE:
        return JSONResponse(status_code=413, content={"detail": "Request too large"})
    return await call_next(request)


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__, "entry_version": DebtSwap.VERSION}


def run() -> None:
    """Run the quote API server.

    Configuration via environment variables:
    - DEBTSWAP_HOST: Host to bind to (default: 0.0.0.0)
    - DEBTSWAP_PORT: Port to bind to (default: 8000)
    - DEBTSWAP_DEBUG: Enable debug/reload mode (default: false)
    """
    logger.info("starting_quote_api", host=HOST, port=PORT, debug=DEBUG)
    uvicorn.run(
        "debtswap.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
