"""Exception hierarchy for the review analysis pipeline."""


class PointFourError(Exception):
    """Base exception for all pipeline errors."""

    def __init__(self, message: str, *args, **kwargs):
        """Initialize error with message."""
        self.message = message
        super().__init__(message, *args, **kwargs)


class ConfigurationError(PointFourError):
    """Raised when a provider is missing its credentials."""
    pass


class UpstreamQueryError(PointFourError):
    """Raised when a single search query fails."""

    def __init__(self, message: str, query: str = ""):
        self.query = query
        super().__init__(message)


class ExtractionError(PointFourError):
    """Raised when the LLM call fails or returns an unusable structure."""
    pass


class ValidationError(PointFourError):
    """Raised when a request does not describe a fashion brand."""
    pass
