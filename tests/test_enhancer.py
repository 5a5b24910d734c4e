import asyncio

from openai import AuthenticationError, RateLimitError

from app.core.failures import TIMEOUT_MESSAGE, ProviderFailureKind
from app.services.enhancer import IdeaEnhancer
from tests.conftest import FakeProvider, make_status_error


def _run(enhancer: IdeaEnhancer, idea: str):
    return asyncio.run(enhancer.enhance(idea))


def test_success_returns_provider_text_unmodified():
    text = "# ⚡ Vibe Coder Blueprint\n<b>not sanitized</b> <script>x()</script>\n"
    provider = FakeProvider(text=text)
    outcome = _run(IdeaEnhancer(provider, timeout_seconds=1), "A portfolio website for a photographer")

    assert outcome.status_code == 200
    assert outcome.enhanced == text
    assert outcome.succeeded
    assert outcome.failure is None


def test_provider_called_exactly_once_with_idea_in_prompt():
    provider = FakeProvider(text="ok")
    _run(IdeaEnhancer(provider, timeout_seconds=1), "A portfolio website for a photographer")

    assert len(provider.calls) == 1
    assert "A portfolio website for a photographer" in provider.calls[0]


def test_timeout_returns_fixed_message_and_abandons_call():
    provider = FakeProvider(text="too late", delay=5)

    async def scenario():
        outcome = await IdeaEnhancer(provider, timeout_seconds=0.05).enhance("slow idea")
        # let the cancelled call settle
        await asyncio.sleep(0.05)
        return outcome

    outcome = asyncio.run(scenario())

    assert outcome.status_code == 408
    assert outcome.enhanced == TIMEOUT_MESSAGE
    assert outcome.failure == ProviderFailureKind.TIMEOUT
    assert provider.cancelled is True
    assert len(provider.calls) == 1


def test_timeout_outcome_is_not_replaced_by_late_result():
    release = None

    class StubbornProvider:
        model = "gemini-test"

        def __init__(self):
            self.finished = False

        async def generate_text(self, prompt: str) -> str:
            # ignores cancellation once and finishes anyway
            try:
                await release.wait()
            except asyncio.CancelledError:
                await release.wait()
            self.finished = True
            return "late success"

    provider = StubbornProvider()

    async def scenario():
        nonlocal release
        release = asyncio.Event()
        outcome = await IdeaEnhancer(provider, timeout_seconds=0.05).enhance("idea")
        release.set()
        await asyncio.sleep(0.05)
        return outcome

    outcome = asyncio.run(scenario())

    assert provider.finished is True
    assert outcome.status_code == 408
    assert outcome.enhanced == TIMEOUT_MESSAGE


def test_quota_error_becomes_soft_fallback():
    provider = FakeProvider(error=make_status_error(RateLimitError, 429, "Resource exhausted"))
    outcome = _run(IdeaEnhancer(provider, timeout_seconds=1), "idea")

    assert outcome.status_code == 200
    assert outcome.failure == ProviderFailureKind.QUOTA
    assert "Quota Exceeded" in outcome.enhanced


def test_credential_error_becomes_500():
    provider = FakeProvider(error=make_status_error(AuthenticationError, 401, "API key not valid"))
    outcome = _run(IdeaEnhancer(provider, timeout_seconds=1), "idea")

    assert outcome.status_code == 500
    assert outcome.failure == ProviderFailureKind.CREDENTIAL
    assert "Generate a new API key" in outcome.enhanced


def test_unexpected_error_never_escapes():
    provider = FakeProvider(error=KeyError("choices"))
    outcome = _run(IdeaEnhancer(provider, timeout_seconds=1), "idea")

    assert outcome.status_code == 500
    assert outcome.failure == ProviderFailureKind.UNCLASSIFIED
    assert "Error Connecting to AI" in outcome.enhanced
