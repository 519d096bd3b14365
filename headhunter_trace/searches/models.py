"""Search MongoDB document factories."""

import uuid
from datetime import datetime, timezone
from typing import Any

from headhunter_trace.searches.schemas import ProfileResult, SearchStatus


def create_search_document(
    user_id: str,
    query: str,
    query_type: str = "name",
) -> dict[str, Any]:
    """Create a search record in the ``processing`` state."""
    now = datetime.now(timezone.utc)
    return {
        "_id": str(uuid.uuid4()),
        "user_id": user_id,
        "query": query,
        "query_type": query_type,
        "status": SearchStatus.PROCESSING.value,
        "results_count": 0,
        "summary": None,
        "error_message": None,
        "created_at": now,
        "updated_at": now,
    }


def create_result_document(
    search_id: str,
    user_id: str,
    result: ProfileResult,
) -> dict[str, Any]:
    """Create a result row tagged with its search and owner."""
    document = result.model_dump(mode="json")
    document.update({
        "search_id": search_id,
        "user_id": user_id,
        "created_at": datetime.now(timezone.utc),
    })
    return document
