"""External API clients for the search flow."""

from headhunter_trace.searches.clients.analysis import AnalysisFunctionClient, get_analysis_client

__all__ = [
    "AnalysisFunctionClient",
    "get_analysis_client",
]
