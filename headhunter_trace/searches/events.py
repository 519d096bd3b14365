"""Search status notifications.

The orchestrator emits one event per lifecycle transition; listeners (the SSE
endpoint, tests) subscribe per search and receive every event emitted after
they subscribed.
"""

import asyncio
import json
import logging
from collections import defaultdict
from typing import Any

logger = logging.getLogger(__name__)


class SearchEvents:
    """Fan-out channel of status events keyed by search ID."""

    def __init__(self) -> None:
        self._subscribers: dict[str, list[asyncio.Queue[str]]] = defaultdict(list)

    def subscribe(self, search_id: str) -> asyncio.Queue[str]:
        queue: asyncio.Queue[str] = asyncio.Queue()
        self._subscribers[search_id].append(queue)
        return queue

    def unsubscribe(self, search_id: str, queue: asyncio.Queue[str]) -> None:
        queues = self._subscribers.get(search_id)
        if not queues:
            return
        if queue in queues:
            queues.remove(queue)
        if not queues:
            self._subscribers.pop(search_id, None)

    def subscriber_count(self, search_id: str) -> int:
        return len(self._subscribers.get(search_id, []))

    async def emit(self, search_id: str, event: dict[str, Any]) -> None:
        payload = json.dumps({"search_id": search_id, **event})
        for queue in list(self._subscribers.get(search_id, [])):
            await queue.put(payload)

    async def emit_status(self, search_id: str, status: str, **fields: Any) -> None:
        logger.debug(f"Search {search_id} -> {status}")
        await self.emit(search_id, {"type": "status", "status": status, **fields})


def is_terminal(event: str) -> bool:
    """Whether a serialized event ends the search lifecycle."""
    return json.loads(event).get("status") in {"completed", "failed"}


events = SearchEvents()
