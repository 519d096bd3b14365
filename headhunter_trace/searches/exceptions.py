"""Search flow exceptions."""


class SearchError(Exception):
    """Base exception for the search flow."""

    def __init__(self, message: str = "Search failed"):
        self.message = message
        super().__init__(self.message)


# Validation (raised before any side effect)

class EmptyQueryError(SearchError):
    """Raised when the query is empty or whitespace only."""

    def __init__(self):
        super().__init__("Enter a search query")


class NoCreditsError(SearchError):
    """Raised when the caller has no credits left."""

    def __init__(self):
        super().__init__("No credits remaining. Please upgrade your plan to continue searching.")


# Side-effect failures

class CreditDeductionError(SearchError):
    """Raised when the atomic credit decrement is refused."""

    def __init__(self):
        super().__init__("No credits remaining. Your credit could not be deducted.")


class RecordCreationError(SearchError):
    """Raised when the search record cannot be persisted. The credit stays spent."""

    def __init__(self, message: str = "Search failed: the search could not be recorded"):
        super().__init__(message)


class SearchNotFoundError(SearchError):
    """Raised when a search does not exist or belongs to someone else."""

    def __init__(self, search_id: str):
        self.search_id = search_id
        super().__init__(f"Search {search_id} not found")


class SearchNotCompletedError(SearchError):
    """Raised when results are requested for a search that did not complete."""

    def __init__(self, status: str):
        self.status = status
        super().__init__(f"Search is {status}, results are not available")


# Remote analysis failures

class AnalysisFunctionError(SearchError):
    """Raised when the analysis function call fails."""

    def __init__(self, message: str = "An error occurred during the search."):
        super().__init__(message)


class AnalysisRateLimitedError(AnalysisFunctionError):
    """Raised when the analysis function reports rate limiting."""

    def __init__(self, message: str = "Rate limit exceeded. Please try again later."):
        super().__init__(message)


class MalformedPayloadError(AnalysisFunctionError):
    """Raised when the analysis payload does not match the result schema."""

    def __init__(self, message: str = "The search returned an unusable response."):
        super().__init__(message)


class ResultPersistenceError(SearchError):
    """Raised when the results of a finished analysis cannot be stored."""

    def __init__(self, message: str = "Search failed: the results could not be saved"):
        super().__init__(message)
