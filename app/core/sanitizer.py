import logging

from bs4 import BeautifulSoup
from bs4.element import Comment

logger = logging.getLogger(__name__)

# Elements removed together with everything inside them
UNSAFE_TAGS = [
    "script",
    "style",
    "iframe",
    "frame",
    "frameset",
    "object",
    "embed",
    "applet",
    "noscript",
    "template",
    "svg",
    "math",
    "link",
    "meta",
    "base",
    "form",
]


class HtmlSanitizer:
    """Reduce user text to plain text with no markup left in it.

    Unsafe elements are dropped with their content, every other tag is
    unwrapped to its text. Entity-encoded markup (``&lt;script&gt;``) decodes
    into new tags when parsed, so parsing repeats until the text is stable or
    ``max_passes`` is reached. Leftover angle brackets are escaped rather than
    dropped, so ``"I <3 cats"`` reaches the prompt as ``"I &lt;3 cats"``.
    """

    def __init__(self, max_passes: int = 3):
        self.max_passes = max_passes

    def _strip_once(self, text: str) -> str:
        soup = BeautifulSoup(text, "html.parser")
        for tag in soup.find_all(UNSAFE_TAGS):
            # already gone with an unsafe ancestor
            if tag.decomposed:
                continue
            tag.decompose()
        for comment in soup.find_all(string=lambda s: isinstance(s, Comment)):
            comment.extract()
        return soup.get_text()

    def sanitize(self, text: str) -> str:
        cleaned = self._strip_once(text)
        passes = 1
        while "<" in cleaned and passes < self.max_passes:
            stripped = self._strip_once(cleaned)
            passes += 1
            if stripped == cleaned:
                break
            cleaned = stripped

        if cleaned != text:
            logger.debug(f"Sanitizer removed markup ({len(text)} -> {len(cleaned)} chars)")

        return cleaned.replace("<", "&lt;").replace(">", "&gt;").strip()
