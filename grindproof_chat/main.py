"""
GrindProof Chat Service - Main Application

Conversational command interpreter. Tasks live in the task service; this
service only reads and mutates them through its HTTP API.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from grindproof_chat.config import settings
from grindproof_chat.errors import LLMProviderError, error_payload

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Conversational command interpreter for GrindProof",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
)


@app.exception_handler(LLMProviderError)
async def llm_provider_error_handler(request: Request, exc: LLMProviderError) -> JSONResponse:
    """Upstream model failures become a typed error object; never a partial reply."""
    logger.warning(f"LLM provider failure on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=exc.policy.status_code,
        content=error_payload(exc.kind),
    )


@app.get("/health", tags=["Health"])
async def health_check() -> dict:
    """
    Health check endpoint.

    Returns the service status and version information.
    Used by Docker health checks and internal monitoring.
    """
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
    }


@app.get("/", tags=["Root"])
async def root() -> dict:
    """Root endpoint with service information."""
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
    }


from grindproof_chat.router import router as chat_router
app.include_router(chat_router)


def run() -> None:
    """Serve the app with uvicorn (console entry point)."""
    import uvicorn

    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())
