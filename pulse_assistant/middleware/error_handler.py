"""
Global exception handler middleware.
"""

from fastapi import Request
from fastapi.responses import JSONResponse
from loguru import logger

from pulse_assistant.services.knowledge_service import UnsupportedLanguageError


async def unsupported_language_handler(request: Request, exc: UnsupportedLanguageError):
    logger.warning(f"{request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=404,
        content={"detail": str(exc), "language": exc.language},
    )


async def global_exception_handler(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception as exc:
        request_id = getattr(request.state, "request_id", None)
        logger.exception(f"Assistant request {request_id} failed: {request.method} {request.url.path}")
        return JSONResponse(
            status_code=500,
            content={
                "detail": "The assistant hit an unexpected error",
                "type": type(exc).__name__,
                "request_id": request_id,
            },
        )
