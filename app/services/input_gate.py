import logging
from typing import Any

from pydantic import ValidationError

from app.api.schemas import EnhanceRequest
from app.core.exceptions import InvalidInputError
from app.core.metrics import REJECTED_INPUTS
from app.core.sanitizer import HtmlSanitizer

logger = logging.getLogger(__name__)


class InputGate:
    """Validates the raw request body and returns the sanitized idea."""

    def __init__(self, sanitizer: HtmlSanitizer):
        self.sanitizer = sanitizer

    def validate(self, raw: Any) -> str:
        try:
            request_data = EnhanceRequest.model_validate(raw)
        except ValidationError as e:
            REJECTED_INPUTS.inc()
            logger.warning(f"Rejected enhance request: {e.error_count()} validation error(s)")
            raise InvalidInputError() from e
        return request_data.input

    def admit(self, raw: Any) -> str:
        idea = self.validate(raw)
        sanitized = self.sanitizer.sanitize(idea)
        if not sanitized:
            REJECTED_INPUTS.inc()
            logger.warning("Rejected enhance request: nothing left after sanitization")
            raise InvalidInputError()

        logger.info(f'Processing request for: "{sanitized}"')
        return sanitized
