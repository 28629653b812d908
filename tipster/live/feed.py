"""In-process change feed: writers publish, derived views subscribe."""

import asyncio
import logging
from collections import defaultdict
from typing import Any, Callable

logger = logging.getLogger(__name__)

TOPIC_TIPS = "tips"
TOPIC_RESULTS = "results"
TOPIC_PROFILES = "profiles"


class ChangeFeed:
    """Delivers change notifications to subscribers of a topic.

    Callbacks may be plain functions or coroutine functions. Delivery order
    between topics is not guaranteed, so subscribers must treat every
    notification as "something changed, recompute".
    """

    def __init__(self):
        self._subscribers: dict[str, list[Callable]] = defaultdict(list)

    def subscribe(self, topic: str, callback: Callable) -> Callable[[], None]:
        """Register a callback; returns a function that unsubscribes it."""
        self._subscribers[topic].append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers[topic]:
                self._subscribers[topic].remove(callback)

        return unsubscribe

    def subscriber_count(self, topic: str) -> int:
        return len(self._subscribers[topic])

    async def publish(self, topic: str, payload: Any = None) -> int:
        """Notify subscribers of a change. Returns the number delivered.

        A failing subscriber is logged and skipped; the write that triggered
        the notification has already been committed.
        """
        delivered = 0
        for callback in list(self._subscribers[topic]):
            try:
                outcome = callback(topic, payload)
                if asyncio.iscoroutine(outcome):
                    await outcome
                delivered += 1
            except Exception as e:
                logger.exception(f"Subscriber {callback!r} failed on {topic}: {e}")
        return delivered
