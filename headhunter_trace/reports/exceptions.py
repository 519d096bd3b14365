"""Report generation exceptions."""


class ReportError(Exception):
    """Base exception for report generation."""

    def __init__(self, message: str = "Report generation failed"):
        self.message = message
        super().__init__(self.message)


class ReportInputError(ReportError):
    """Raised when the data handed to the renderer is malformed."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Report generation failed: {detail}")
