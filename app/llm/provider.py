import logging

from openai import AsyncOpenAI

from app.core.config import Settings

logger = logging.getLogger(__name__)


class GeminiProvider:
    """Text generation through Gemini's OpenAI-compatible endpoint."""

    def __init__(self, client: AsyncOpenAI, model: str):
        self.client = client
        self.model = model

    async def generate_text(self, prompt: str) -> str:
        completion = await self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
        )
        if not completion.choices:
            return ""
        return completion.choices[0].message.content or ""

    async def close(self) -> None:
        await self.client.close()


def build_provider(settings: Settings) -> GeminiProvider:
    # The request deadline is enforced by the caller; the client timeout only
    # bounds sockets left behind by an abandoned call.
    client = AsyncOpenAI(
        api_key=settings.GEMINI_API_KEY,
        base_url=settings.GEMINI_BASE_URL,
        timeout=settings.REQUEST_TIMEOUT_SECONDS + 30,
        max_retries=0,
    )
    logger.info(f"Provider client initialized for model {settings.GEMINI_MODEL}")
    return GeminiProvider(client=client, model=settings.GEMINI_MODEL)
