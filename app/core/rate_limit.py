from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from app.core.config import Settings

RATE_LIMIT_MESSAGE = "Too many requests from this IP, please try again later."


def get_client_ip(request: Request) -> str:
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    return get_remote_address(request)


def build_limiter(settings: Settings) -> Limiter:
    return Limiter(
        key_func=get_client_ip,
        default_limits=[settings.RATE_LIMIT],
        enabled=settings.RATE_LIMIT_ENABLED,
    )


def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    return JSONResponse(status_code=429, content={"error": RATE_LIMIT_MESSAGE})
