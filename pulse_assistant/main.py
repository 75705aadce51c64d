"""
Pulse Assistant: FastAPI entry point.
"""

import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from pulse_assistant.config import settings
from pulse_assistant.middleware.error_handler import global_exception_handler, unsupported_language_handler
from pulse_assistant.middleware.logging_middleware import logging_middleware
from pulse_assistant.middleware.rate_limit import limiter
from pulse_assistant.services.knowledge_service import (
    UnsupportedLanguageError,
    load_language,
    supported_languages,
)

# ── Routes ───────────────────────────────────────────────
from pulse_assistant.routes.assistant import router as assistant_router
from pulse_assistant.routes.widget import router as widget_router


def configure_logging(level: str = settings.LOG_LEVEL) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level.upper())


# ── Lifespan ─────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    for language in supported_languages():
        load_language(language)
    logger.info(f"Knowledge bases ready: {', '.join(supported_languages())}")
    yield
    logger.info("Shutting down")


# ── App ──────────────────────────────────────────────────
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Storefront and donation assistant API",
    lifespan=lifespan,
)

# ── Rate Limiter ─────────────────────────────────────────
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_exception_handler(UnsupportedLanguageError, unsupported_language_handler)

# ── CORS ─────────────────────────────────────────────────
origins = settings.CORS_ORIGINS.split(",") if settings.CORS_ORIGINS != "*" else ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Custom Middleware ────────────────────────────────────
app.middleware("http")(global_exception_handler)
app.middleware("http")(logging_middleware)

# ── Register Routers ────────────────────────────────────
app.include_router(assistant_router)
app.include_router(widget_router)


# ── Health Check ─────────────────────────────────────────
@app.get("/api/health", tags=["health"])
async def health():
    return {
        "status": "ok",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "languages": list(supported_languages()),
    }


def serve() -> None:
    import uvicorn
    uvicorn.run(
        "pulse_assistant.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="info",
    )


# ── Run ──────────────────────────────────────────────────
if __name__ == "__main__":
    serve()
