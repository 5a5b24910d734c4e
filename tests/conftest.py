import asyncio
import os

import httpx
import pytest

os.environ.setdefault("GEMINI_API_KEY", "test-key")
os.environ["RATE_LIMIT_ENABLED"] = "false"


class FakeProvider:
    """Stands in for the Gemini client; records every prompt it receives."""

    model = "gemini-test"

    def __init__(self, text: str = "", error: Exception | None = None, delay: float = 0.0):
        self.text = text
        self.error = error
        self.delay = delay
        self.calls: list[str] = []
        self.cancelled = False

    async def generate_text(self, prompt: str) -> str:
        self.calls.append(prompt)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        if self.error is not None:
            raise self.error
        return self.text


def make_status_error(cls, status_code: int, message: str):
    request = httpx.Request("POST", "https://provider.test/v1/chat/completions")
    response = httpx.Response(status_code, request=request)
    return cls(message, response=response, body=None)


def make_timeout_error():
    from openai import APITimeoutError
    return APITimeoutError(request=httpx.Request("POST", "https://provider.test/v1/chat/completions"))


@pytest.fixture
def make_client():
    from fastapi.testclient import TestClient
    from app.api.routes import get_context
    from app.core.config import get_settings
    from app.core.context import ServiceContext
    from app.core.sanitizer import HtmlSanitizer
    from app.services.enhancer import IdeaEnhancer
    from app.services.input_gate import InputGate
    from main import app

    def _make(provider: FakeProvider, timeout: float = 5.0, expose_errors: bool = False) -> TestClient:
        context = ServiceContext(
            settings=get_settings(),
            provider=provider,
            input_gate=InputGate(HtmlSanitizer()),
            enhancer=IdeaEnhancer(provider, timeout_seconds=timeout, expose_provider_errors=expose_errors),
        )
        app.dependency_overrides[get_context] = lambda: context
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()
