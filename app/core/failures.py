import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple

from openai import (
    APITimeoutError,
    AuthenticationError,
    BadRequestError,
    NotFoundError,
    PermissionDeniedError,
    RateLimitError,
)

TIMEOUT_MESSAGE = "⚠️ Request timed out."


class ProviderFailureKind(str, Enum):
    TIMEOUT = "timeout"
    CREDENTIAL = "credential"
    QUOTA = "quota"
    CONFIGURATION = "configuration"
    UNCLASSIFIED = "unclassified"


@dataclass(frozen=True)
class Fallback:
    status_code: int
    message: str


def _status_code(exc: BaseException) -> Optional[int]:
    code = getattr(exc, "status_code", None) or getattr(exc, "status", None)
    return code if isinstance(code, int) else None


def _message(exc: BaseException) -> str:
    return str(exc).lower()


def _is_timeout(exc: BaseException) -> bool:
    return isinstance(exc, (asyncio.TimeoutError, APITimeoutError))


def _is_credential(exc: BaseException) -> bool:
    if isinstance(exc, (AuthenticationError, PermissionDeniedError)):
        return True
    if _status_code(exc) in (401, 403):
        return True
    message = _message(exc)
    return any(keyword in message for keyword in ("api key", "api_key", "leaked", "403"))


def _is_quota(exc: BaseException) -> bool:
    if isinstance(exc, RateLimitError) or _status_code(exc) == 429:
        return True
    message = _message(exc)
    return any(keyword in message for keyword in ("429", "quota", "resource_exhausted"))


def _is_configuration(exc: BaseException) -> bool:
    if isinstance(exc, (BadRequestError, NotFoundError)):
        return True
    if _status_code(exc) in (400, 404):
        return True
    message = _message(exc)
    return any(keyword in message for keyword in ("model", "invalid"))


# Checked in order; a failure can satisfy several heuristics.
CLASSIFICATION_PRIORITY: List[Tuple[ProviderFailureKind, Callable[[BaseException], bool]]] = [
    (ProviderFailureKind.TIMEOUT, _is_timeout),
    (ProviderFailureKind.CREDENTIAL, _is_credential),
    (ProviderFailureKind.QUOTA, _is_quota),
    (ProviderFailureKind.CONFIGURATION, _is_configuration),
]


def classify_failure(exc: BaseException) -> ProviderFailureKind:
    for kind, matches in CLASSIFICATION_PRIORITY:
        if matches(exc):
            return kind
    return ProviderFailureKind.UNCLASSIFIED


def _error_line(exc: Optional[BaseException], expose_details: bool, default: str) -> str:
    if exc is None:
        return default
    if expose_details:
        return str(exc) or default
    return type(exc).__name__


def fallback_for(
    kind: ProviderFailureKind,
    exc: Optional[BaseException] = None,
    expose_details: bool = False,
) -> Fallback:
    """Map a failure kind to the status code and Markdown message sent to the client.

    Upstream error text is only included when ``expose_details`` is set;
    otherwise the client sees the exception type name.
    """
    if kind is ProviderFailureKind.TIMEOUT:
        return Fallback(408, TIMEOUT_MESSAGE)

    if kind is ProviderFailureKind.CREDENTIAL:
        error = _error_line(exc, expose_details, "API key invalid or leaked")
        return Fallback(
            500,
            "# ⚠️ API Key Error\n\n"
            "Your Gemini API key has been disabled or is invalid. Please:\n"
            "1. Generate a new API key from [Google AI Studio](https://aistudio.google.com/app/apikey)\n"
            "2. Update the `GEMINI_API_KEY` environment variable\n"
            "3. Redeploy your service\n\n"
            f"**Error:** {error}",
        )

    if kind is ProviderFailureKind.QUOTA:
        return Fallback(
            200,
            "# ⚠️ Quota Exceeded\n\n"
            "**Gemini API** is currently busy. Please try again in 1 minute.\n\n"
            "*(This is a fallback response)*",
        )

    if kind is ProviderFailureKind.CONFIGURATION:
        error = _error_line(exc, expose_details, "Invalid configuration")
        return Fallback(
            500,
            "# ⚠️ Configuration Error\n\n"
            "There's an issue with the API configuration. Please check:\n"
            "- Model name is valid\n"
            "- API key is correct\n\n"
            f"**Error:** {error}",
        )

    error = _error_line(exc, expose_details, "Unknown error")
    return Fallback(
        500,
        "# ⚠️ Error Connecting to AI\n\n"
        f"**Error:** {error}\n\n"
        "Please check server logs for more details.",
    )
