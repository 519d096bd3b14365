"""Analysis function exceptions."""


class AnalysisError(Exception):
    """Base exception for the analysis function."""

    def __init__(self, message: str = "Search failed"):
        self.message = message
        super().__init__(self.message)


class GatewayNotConfiguredError(AnalysisError):
    """Raised when no AI gateway key is configured."""

    def __init__(self):
        super().__init__("AI gateway API key is not configured")


class GatewayRateLimitedError(AnalysisError):
    """Raised when the AI gateway answers 429."""

    def __init__(self):
        super().__init__("Rate limit exceeded. Please try again later.")


class GatewayError(AnalysisError):
    """Raised when the AI gateway fails or returns no content."""


class UnparseableResultError(AnalysisError):
    """Raised when the completion is not valid JSON."""

    def __init__(self):
        super().__init__("Failed to parse search results")
