class InvalidInputError(ValueError):
    """Raised when the submitted idea fails validation or sanitization."""

    def __init__(self, reason: str = "Invalid input"):
        super().__init__(reason)
        self.reason = reason
