"""Search records and result rows repository."""

import logging
from datetime import datetime, timezone
from typing import Any

from motor.motor_asyncio import AsyncIOMotorDatabase

from headhunter_trace.searches.models import create_search_document, create_result_document
from headhunter_trace.searches.schemas import ProfileResult, SearchStatus, SearchSummary

logger = logging.getLogger(__name__)


class SearchRepository:
    """MongoDB repository for search records and their profile results."""

    COLLECTION_SEARCHES = "searches"
    COLLECTION_RESULTS = "search_results"

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self._searches = db[self.COLLECTION_SEARCHES]
        self._results = db[self.COLLECTION_RESULTS]

    # =========================================================================
    # Search records
    # =========================================================================

    async def create_search(
        self,
        user_id: str,
        query: str,
        query_type: str = "name",
    ) -> dict[str, Any]:
        """Persist a new record in the ``processing`` state and return it."""
        document = create_search_document(user_id=user_id, query=query, query_type=query_type)
        await self._searches.insert_one(document)
        logger.info(f"Created search {document['_id']} for user {user_id}")
        return document

    async def get_search(
        self,
        search_id: str,
        user_id: str | None = None,
    ) -> dict[str, Any] | None:
        """Get a record by ID, restricted to its owner when ``user_id`` is given."""
        filters: dict[str, Any] = {"_id": search_id}
        if user_id is not None:
            filters["user_id"] = user_id
        return await self._searches.find_one(filters)

    async def list_user_searches(
        self,
        user_id: str,
        limit: int = 10,
    ) -> list[dict[str, Any]]:
        """Most recent records of a user, newest first."""
        cursor = (
            self._searches.find({"user_id": user_id})
            .sort("created_at", -1)
            .limit(limit)
        )
        return await cursor.to_list(length=limit)

    async def mark_completed(
        self,
        search_id: str,
        results_count: int,
        summary: SearchSummary | None = None,
    ) -> bool:
        """Move a processing record to ``completed``."""
        update: dict[str, Any] = {
            "status": SearchStatus.COMPLETED.value,
            "results_count": results_count,
            "updated_at": datetime.now(timezone.utc),
        }
        if summary is not None:
            update["summary"] = summary.model_dump(mode="json")
        return await self._transition(search_id, update)

    async def mark_failed(self, search_id: str, error_message: str | None = None) -> bool:
        """Move a processing record to ``failed``. ``results_count`` is left as is."""
        update: dict[str, Any] = {
            "status": SearchStatus.FAILED.value,
            "updated_at": datetime.now(timezone.utc),
        }
        if error_message:
            update["error_message"] = error_message
        return await self._transition(search_id, update)

    async def _transition(self, search_id: str, update: dict[str, Any]) -> bool:
        # Only processing records move; terminal records are never reopened.
        result = await self._searches.update_one(
            {"_id": search_id, "status": SearchStatus.PROCESSING.value},
            {"$set": update},
        )
        if result.modified_count == 0:
            logger.warning(f"Search {search_id} is not processing, status left unchanged")
            return False
        return True

    # =========================================================================
    # Result rows
    # =========================================================================

    async def insert_results(
        self,
        search_id: str,
        user_id: str,
        results: list[ProfileResult],
    ) -> list[Any]:
        """Bulk insert result rows tagged with the search and owner. Returns the row IDs."""
        if not results:
            return []
        documents = [create_result_document(search_id, user_id, r) for r in results]
        inserted = await self._results.insert_many(documents)
        return list(inserted.inserted_ids)

    async def delete_results(
        self,
        search_id: str,
        result_ids: list[Any] | None = None,
    ) -> int:
        """Remove the rows of a search, or only the given rows of it."""
        filters: dict[str, Any] = {"search_id": search_id}
        if result_ids is not None:
            filters["_id"] = {"$in": result_ids}
        result = await self._results.delete_many(filters)
        return result.deleted_count

    async def get_results(self, search_id: str) -> list[dict[str, Any]]:
        """Result rows of a search in insertion order."""
        cursor = self._results.find({"search_id": search_id}).sort("_id", 1)
        return await cursor.to_list(length=None)

    # =========================================================================
    # Dashboard
    # =========================================================================

    async def get_user_stats(self, user_id: str) -> dict[str, int]:
        """Totals shown on the dashboard."""
        total = await self._searches.count_documents({"user_id": user_id})
        completed = await self._searches.count_documents(
            {"user_id": user_id, "status": SearchStatus.COMPLETED.value}
        )
        profiles = await self._results.count_documents({"user_id": user_id})
        return {
            "total_searches": total,
            "completed_searches": completed,
            "profiles_found": profiles,
        }
