import logging
from dataclasses import dataclass

from app.core.config import Settings
from app.core.sanitizer import HtmlSanitizer
from app.llm.provider import GeminiProvider, build_provider
from app.services.enhancer import IdeaEnhancer
from app.services.input_gate import InputGate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ServiceContext:
    """Process-wide collaborators shared by every request."""

    settings: Settings
    provider: GeminiProvider
    input_gate: InputGate
    enhancer: IdeaEnhancer


def build_context(settings: Settings) -> ServiceContext:
    sanitizer = HtmlSanitizer()
    provider = build_provider(settings)
    enhancer = IdeaEnhancer(
        provider=provider,
        timeout_seconds=settings.REQUEST_TIMEOUT_SECONDS,
        expose_provider_errors=settings.EXPOSE_PROVIDER_ERRORS,
    )
    logger.info(
        f"Service context ready (model={settings.GEMINI_MODEL}, "
        f"timeout={settings.REQUEST_TIMEOUT_SECONDS}s)"
    )
    return ServiceContext(
        settings=settings,
        provider=provider,
        input_gate=InputGate(sanitizer),
        enhancer=enhancer,
    )
