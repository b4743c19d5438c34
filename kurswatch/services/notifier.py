from __future__ import annotations

"""Push the full history to connected real-time subscribers.

Subscribers are anything with an async ``send_json`` (Starlette's WebSocket in
production). Delivery is best effort: a failed send drops the subscriber, who
gets the full state again on reconnect.
"""
import logging
from typing import Any, Dict, List, Protocol

from kurswatch.models import UPDATE_VIEW_EVENT, History, history_to_json

logger = logging.getLogger("kurswatch.notifier")


class Subscriber(Protocol):
    async def send_json(self, data: Any) -> None: ...


def update_view_message(history: History) -> Dict[str, Any]:
    return {"event": UPDATE_VIEW_EVENT, "data": history_to_json(history)}


class Notifier:
    def __init__(self) -> None:
        self._subscribers: List[Subscriber] = []

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    async def subscribe(self, subscriber: Subscriber, history: History) -> bool:
        """Register and send the current history; False if the first send fails."""
        self._subscribers.append(subscriber)
        logger.info("subscriber connected (total=%d)", len(self._subscribers))
        return await self._send(subscriber, update_view_message(history))

    def unsubscribe(self, subscriber: Subscriber) -> None:
        if subscriber in self._subscribers:
            self._subscribers.remove(subscriber)
            logger.info("subscriber disconnected (total=%d)", len(self._subscribers))

    async def broadcast(self, history: History) -> int:
        """Send history to every subscriber; returns how many received it."""
        message = update_view_message(history)
        delivered = 0
        for subscriber in list(self._subscribers):
            if await self._send(subscriber, message):
                delivered += 1
        logger.info(
            "broadcast %d snapshots to %d subscribers", len(history), delivered
        )
        return delivered

    async def _send(self, subscriber: Subscriber, message: Dict[str, Any]) -> bool:
        try:
            await subscriber.send_json(message)
        except Exception as e:  # noqa: BLE001
            logger.warning("dropping subscriber after failed send: %s", e)
            self.unsubscribe(subscriber)
            return False
        return True
