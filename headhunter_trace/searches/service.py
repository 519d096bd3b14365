"""Search service - credit check, record lifecycle and remote analysis."""

import logging
from typing import Any

from headhunter_trace.core.interfaces import IAnalysisFunction, IUserRepository
from headhunter_trace.searches.events import SearchEvents
from headhunter_trace.searches.repository import SearchRepository
from headhunter_trace.searches.session import SearchSession
from headhunter_trace.searches.schemas import (
    DashboardResponse,
    DashboardStats,
    ProfileResult,
    SearchData,
    SearchStatus,
    SearchSummary,
    record_to_response,
)
from headhunter_trace.searches.exceptions import (
    AnalysisFunctionError,
    AnalysisRateLimitedError,
    CreditDeductionError,
    EmptyQueryError,
    NoCreditsError,
    RecordCreationError,
    ResultPersistenceError,
    SearchError,
    SearchNotCompletedError,
    SearchNotFoundError,
)
from headhunter_trace.users.schemas import ProfileResponse

logger = logging.getLogger(__name__)


class SearchService:
    """Coordinates one search end to end.

    The steps of a search run strictly in order: credit decrement, record
    creation, remote call, terminal status update. ``submit`` covers the first
    two, ``run`` the rest.
    """

    HISTORY_LIMIT = 10

    def __init__(
        self,
        repository: SearchRepository,
        user_repository: IUserRepository,
        analysis: IAnalysisFunction,
        events: SearchEvents,
    ) -> None:
        """Initialize the search service.

        Args:
            repository: Search records and result rows
            user_repository: Owner of the credit balance
            analysis: Remote analysis function
            events: Status event channel
        """
        self._repository = repository
        self._users = user_repository
        self._analysis = analysis
        self._events = events

    async def submit(self, session: SearchSession, query: str) -> dict[str, Any]:
        """Validate, spend one credit and create the ``processing`` record.

        Raises:
            EmptyQueryError: Query is empty or whitespace only
            NoCreditsError: Session shows no credits left
            CreditDeductionError: The atomic decrement was refused
            RecordCreationError: The record could not be stored (credit stays spent)
        """
        query = (query or "").strip()
        if not query:
            raise EmptyQueryError()

        if session.profile.credits_remaining <= 0:
            raise NoCreditsError()

        updated = await self._users.decrement_credits(session.user_id)
        if updated is None:
            await session.refresh()
            raise CreditDeductionError()
        await session.refresh()
        logger.info(
            f"Deducted one credit from user {session.user_id}, "
            f"{session.profile.credits_remaining} remaining"
        )

        try:
            record = await self._repository.create_search(
                user_id=session.user_id,
                query=query,
                query_type="name",
            )
        except Exception as e:
            # No refund: the credit spent above is lost.
            logger.error(f"Failed to create search record for user {session.user_id}: {e}")
            raise RecordCreationError() from e

        await self._events.emit_status(record["_id"], SearchStatus.PROCESSING.value)
        return record

    async def run(self, search_id: str, query: str, user_id: str) -> SearchData:
        """Invoke the analysis function and persist the outcome.

        On success the record becomes ``completed`` and every result row is
        stored. On any failure the record becomes ``failed``, nothing is stored
        and the error is re-raised.
        """
        logger.info(f"Running analysis for search {search_id}")
        try:
            data = await self._analysis.invoke(query, search_id, user_id)
        except SearchError as e:
            await self._fail(search_id, e)
            raise
        except Exception as e:
            logger.exception(f"Unexpected analysis failure for search {search_id}")
            error = AnalysisFunctionError(str(e) or AnalysisFunctionError().message)
            await self._fail(search_id, error)
            raise error from e

        # Rows first, status last: a completed record always has all of its rows.
        results_count = len(data.results)
        try:
            result_ids = await self._repository.insert_results(search_id, user_id, data.results)
            completed = await self._repository.mark_completed(search_id, results_count, data.summary)
        except Exception as e:
            logger.exception(f"Failed to store results of search {search_id}")
            await self._repository.delete_results(search_id)
            error = ResultPersistenceError()
            await self._fail(search_id, error)
            raise error from e

        if not completed:
            await self._repository.delete_results(search_id, result_ids)
            logger.warning(f"Search {search_id} already finished, discarded {results_count} results")
            return data

        logger.info(f"Search {search_id} completed with {results_count} results")

        await self._events.emit_status(
            search_id,
            SearchStatus.COMPLETED.value,
            results_count=results_count,
        )
        return data

    async def execute(self, session: SearchSession, query: str) -> tuple[dict[str, Any], SearchData]:
        """Submit and run a search in one sequential call."""
        record = await self.submit(session, query)
        data = await self.run(record["_id"], record["query"], session.user_id)
        return record, data

    async def fail(self, search_id: str, message: str) -> None:
        """Move a processing search to ``failed`` from outside the normal flow."""
        await self._fail(search_id, SearchError(message))

    async def _fail(self, search_id: str, error: SearchError) -> None:
        logger.warning(f"Search {search_id} failed: {error.message}")
        await self._repository.mark_failed(search_id, error.message)
        await self._events.emit_status(
            search_id,
            SearchStatus.FAILED.value,
            error=error.message,
            rate_limited=isinstance(error, AnalysisRateLimitedError),
        )

    # =========================================================================
    # Reads
    # =========================================================================

    async def get_search(self, search_id: str, user_id: str) -> dict[str, Any]:
        record = await self._repository.get_search(search_id, user_id=user_id)
        if record is None:
            raise SearchNotFoundError(search_id)
        return record

    async def list_searches(self, user_id: str) -> list[dict[str, Any]]:
        return await self._repository.list_user_searches(user_id, limit=self.HISTORY_LIMIT)

    async def get_search_data(self, search_id: str, user_id: str) -> tuple[dict[str, Any], SearchData]:
        """Rebuild the SearchData of a completed search from stored rows."""
        record = await self.get_search(search_id, user_id)
        if record["status"] != SearchStatus.COMPLETED.value or not record.get("summary"):
            raise SearchNotCompletedError(record["status"])

        rows = await self._repository.get_results(search_id)
        data = SearchData(
            results=[ProfileResult.model_validate(row) for row in rows],
            summary=SearchSummary.model_validate(record["summary"]),
        )
        return record, data

    async def get_dashboard(self, session: SearchSession) -> DashboardResponse:
        profile = await session.refresh()
        stats = await self._repository.get_user_stats(session.user_id)
        history = await self.list_searches(session.user_id)
        return DashboardResponse(
            profile=ProfileResponse(
                plan=profile.plan,
                credits_remaining=profile.credits_remaining,
            ),
            stats=DashboardStats(**stats),
            history=[record_to_response(r) for r in history],
        )
