"""
In-process change feed.

Route handlers publish every record they write; SSE subscribers
(GET /v1/realtime/stream) receive {"table", "type", "record"} events.

A payload that is string-equal to the last one published for the same
(table, key) is dropped, so a client pushing back state it just received
does not bounce the same event to everybody again.
"""

import asyncio
import json
import logging
import threading
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Tuple

logger = logging.getLogger(__name__)


def _serialize(record: Dict[str, Any]) -> str:
    return json.dumps(record, sort_keys=True, ensure_ascii=False, default=str)


class ChangeFeed:
    def __init__(self, queue_size: int = 100):
        self.queue_size = queue_size
        self._lock = threading.Lock()
        self._subscribers: List[Tuple[asyncio.AbstractEventLoop, asyncio.Queue]] = []
        self._last: Dict[Tuple[str, str], str] = {}

    def publish(self, table: str, key: str, record: Dict[str, Any], event_type: str = "UPSERT") -> bool:
        """Returns False when the payload is an echo of the last one for this key."""
        cache_key = (table, key)
        if event_type == "DELETE":
            with self._lock:
                self._last.pop(cache_key, None)
        else:
            payload = _serialize(record)
            with self._lock:
                if self._last.get(cache_key) == payload:
                    logger.debug(f"Echo suppressed for {table}/{key}")
                    return False
                self._last[cache_key] = payload

        event = {"table": table, "type": event_type, "record": record}
        with self._lock:
            subscribers = list(self._subscribers)
        for loop, queue in subscribers:
            try:
                loop.call_soon_threadsafe(self._offer, queue, event)
            except RuntimeError:
                # loop already closed; the subscriber is gone
                self._drop(queue)
        return True

    def forget(self):
        with self._lock:
            self._last.clear()

    @staticmethod
    def _offer(queue: asyncio.Queue, event: dict):
        if queue.full():
            # slow subscriber: drop its oldest event
            queue.get_nowait()
        queue.put_nowait(event)

    def _drop(self, queue: asyncio.Queue):
        with self._lock:
            self._subscribers = [(l, q) for l, q in self._subscribers if q is not queue]

    @asynccontextmanager
    async def subscribe(self):
        queue: asyncio.Queue = asyncio.Queue(maxsize=self.queue_size)
        with self._lock:
            self._subscribers.append((asyncio.get_running_loop(), queue))
        try:
            yield queue
        finally:
            self._drop(queue)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)


feed = ChangeFeed()
