"""
Idea Enhancer Service - Entry point.

Turns a one-sentence website idea into a Markdown product blueprint using
Gemini through its OpenAI-compatible API.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from app.api.routes import router
from app.core.body_limit import BodySizeLimitMiddleware
from app.core.config import Settings, get_settings
from app.core.context import build_context
from app.core.logging_config import configure_logging
from app.core.rate_limit import build_limiter, rate_limit_handler

logger = logging.getLogger(__name__)


async def invalid_request_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning(f"Malformed request body on {request.url.path}: {len(exc.errors())} error(s)")
    return JSONResponse(status_code=400, content={"error": "Invalid input"})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting Idea Enhancer Service...")
        app.state.context = build_context(settings)
        logger.info(f"✅ Server running on http://{settings.HOST}:{settings.PORT}")
        yield
        logger.info("Shutting down Idea Enhancer Service...")
        await app.state.context.provider.close()

    app = FastAPI(
        title="Idea Enhancer Service",
        description="AI-powered blueprint generation for one-sentence website ideas.",
        version=settings.SERVICE_VERSION,
        lifespan=lifespan,
    )

    app.state.limiter = build_limiter(settings)
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
    app.add_exception_handler(RequestValidationError, invalid_request_handler)
    app.add_middleware(SlowAPIMiddleware)
    app.add_middleware(BodySizeLimitMiddleware, max_bytes=settings.MAX_BODY_BYTES)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_origin_regex=settings.CORS_ORIGIN_REGEX,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    app.include_router(router)

    Instrumentator(
        should_group_status_codes=True,
        should_ignore_untemplated=True,
        excluded_handlers=["/metrics", "/health"],
    ).instrument(app).expose(app, endpoint="/metrics", include_in_schema=False)

    @app.get("/", tags=["health"])
    async def root():
        return {
            "service": settings.SERVICE_NAME,
            "version": settings.SERVICE_VERSION,
            "environment": settings.ENVIRONMENT,
            "status": "running",
        }

    return app


app = create_app()


def main() -> None:
    """Run the server."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
