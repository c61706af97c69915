"""
Scope Error Correction (SEC) - Python Backend
FastAPI server turning shot positions into windage/elevation clicks and a group score.
"""

import argparse
import logging
import math
import os
from contextlib import asynccontextmanager
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn

from routers import correction

SERVICE_NAME = "sec-backend"
BUILD_TAG = "SEC_CANONICAL_v1"
VERSION = "1.0.0"

# Lock CORS to one origin when FRONTEND_ORIGIN is set; otherwise allow all.
FRONTEND_ORIGIN = os.environ.get("FRONTEND_ORIGIN", "*")
DEFAULT_PORT = int(os.environ.get("PORT", "10000"))


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Configure root logging once for the server process."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    return logging.getLogger("SecBackend")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle."""
    logger = logging.getLogger("SecBackend")
    logger.info("Starting SEC backend (%s, build %s)", SERVICE_NAME, BUILD_TAG)
    logger.info("CORS origin: %s", FRONTEND_ORIGIN)

    yield

    logger.info("Shutting down SEC backend...")


app = FastAPI(
    title="SEC Correction API",
    description="Scope error correction: POIB, windage/elevation clicks and group score",
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if FRONTEND_ORIGIN == "*" else [FRONTEND_ORIGIN],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(correction.router, prefix="/api/sec", tags=["Correction"])


def _json_safe(value: Any) -> Any:
    """Make validation error details JSON compliant (NaN/inf inputs, exception contexts)."""
    if isinstance(value, float) and not math.isfinite(value):
        return str(value)
    if isinstance(value, BaseException):
        return str(value)
    if isinstance(value, dict):
        return {k: _json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(v) for v in value]
    return value


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Return 422 with the offending inputs echoed as JSON-safe values."""
    return JSONResponse(
        status_code=422,
        content=jsonable_encoder({"detail": _json_safe(exc.errors())}),
    )


@app.get("/health")
async def health_check() -> Dict[str, Any]:
    """Health check endpoint."""
    return {"ok": True, "service": SERVICE_NAME, "build": BUILD_TAG}


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "SEC Correction API",
        "version": VERSION,
        "docs": "/docs",
        "health": "/health",
        "endpoints": ["POST /api/sec/calc", "POST /api/sec/score"],
    }


def main():
    """Main entry point for the backend server."""
    parser = argparse.ArgumentParser(description="SEC Correction Backend")
    parser.add_argument("--host", default="127.0.0.1", help="Host to bind to")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="Port to bind to")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    parser.add_argument("--log-level", default="INFO", help="Logging level")

    args = parser.parse_args()
    setup_logging(args.log_level)

    uvicorn.run(
        "main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
    )


if __name__ == "__main__":
    main()
