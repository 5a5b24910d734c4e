import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Optional, Protocol

from app.core.failures import (
    Fallback,
    ProviderFailureKind,
    classify_failure,
    fallback_for,
)
from app.core.metrics import ENHANCEMENT_DURATION, ENHANCEMENT_TOTAL, LLM_INVOCATIONS
from app.llm.prompts import build_blueprint_prompt

logger = logging.getLogger(__name__)


class TextProvider(Protocol):
    model: str

    async def generate_text(self, prompt: str) -> str:
        ...


@dataclass(frozen=True)
class EnhancementOutcome:
    status_code: int
    enhanced: str
    failure: Optional[ProviderFailureKind] = None

    @property
    def succeeded(self) -> bool:
        return self.failure is None


def _discard_result(task: "asyncio.Task[str]") -> None:
    # Consume the late result so an abandoned call never surfaces as an
    # unretrieved task exception.
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.info(f"Abandoned provider call finished with {type(exc).__name__}")
    else:
        logger.info("Abandoned provider call finished after the deadline; result ignored")


class IdeaEnhancer:
    """Turns a sanitized idea into a blueprint with a single provider call."""

    def __init__(self, provider: TextProvider, timeout_seconds: float, expose_provider_errors: bool = False):
        self.provider = provider
        self.timeout_seconds = timeout_seconds
        self.expose_provider_errors = expose_provider_errors

    async def enhance(self, idea: str) -> EnhancementOutcome:
        prompt = build_blueprint_prompt(idea)
        started = time.perf_counter()

        LLM_INVOCATIONS.labels(model=self.provider.model).inc()
        task = asyncio.ensure_future(self.provider.generate_text(prompt))
        try:
            done, _ = await asyncio.wait({task}, timeout=self.timeout_seconds)
        except asyncio.CancelledError:
            task.cancel()
            raise

        if task not in done:
            task.cancel()
            task.add_done_callback(_discard_result)
            logger.warning(f"Provider call exceeded {self.timeout_seconds}s deadline")
            return self._failed(ProviderFailureKind.TIMEOUT, None, started)

        if task.cancelled():
            exc: Optional[BaseException] = asyncio.CancelledError("provider call was cancelled")
        else:
            exc = task.exception()
        if exc is not None:
            kind = classify_failure(exc)
            logger.error(
                f"Enhancement error ({kind.value}): {type(exc).__name__}: {exc}",
                exc_info=exc,
            )
            return self._failed(kind, exc, started)

        enhanced = task.result()
        self._record("success", started)
        logger.info(f"Enhancement succeeded ({len(enhanced)} chars)")
        return EnhancementOutcome(status_code=200, enhanced=enhanced)

    def _failed(
        self,
        kind: ProviderFailureKind,
        exc: Optional[BaseException],
        started: float,
    ) -> EnhancementOutcome:
        fallback: Fallback = fallback_for(kind, exc, expose_details=self.expose_provider_errors)
        self._record(kind.value, started)
        return EnhancementOutcome(
            status_code=fallback.status_code,
            enhanced=fallback.message,
            failure=kind,
        )

    @staticmethod
    def _record(status: str, started: float) -> None:
        ENHANCEMENT_TOTAL.labels(status=status).inc()
        ENHANCEMENT_DURATION.labels(status=status).observe(time.perf_counter() - started)
