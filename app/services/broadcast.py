"""Push change notifications to every connected client."""

import asyncio
import logging
from typing import Any, Protocol, Set

from app.models.events import ChangeNotification

logger = logging.getLogger(__name__)


class Subscriber(Protocol):
    """Anything that accepts a JSON message, e.g. a FastAPI WebSocket."""

    async def send_json(self, data: Any) -> None: ...


class ChangeBroadcaster:
    """Fire-and-forget fan-out to the connected clients.

    Connections are added and removed by the websocket endpoint. Delivery
    runs concurrently per client and each send is bounded by ``timeout``,
    so a broken client only loses its own message. A client that times out
    is unsubscribed.
    """

    def __init__(self, timeout: float = 5.0) -> None:
        self.timeout = timeout
        self._subscribers: Set[Subscriber] = set()

    def subscribe(self, subscriber: Subscriber) -> None:
        self._subscribers.add(subscriber)
        logger.debug("Client subscribed (%d connected)", len(self._subscribers))

    def unsubscribe(self, subscriber: Subscriber) -> None:
        self._subscribers.discard(subscriber)
        logger.debug("Client unsubscribed (%d connected)", len(self._subscribers))

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    async def _deliver(self, subscriber: Subscriber, message: dict[str, Any]) -> None:
        try:
            await asyncio.wait_for(subscriber.send_json(message), timeout=self.timeout)
        except asyncio.TimeoutError:
            # The cancelled send may have left a partial frame on the socket
            logger.warning(
                "Timed out sending notification after %ss, dropping client",
                self.timeout,
            )
            self.unsubscribe(subscriber)
        except Exception as e:
            logger.warning(f"Failed to send notification to client: {e}")

    async def publish(self, notification: ChangeNotification) -> None:
        """Send ``notification`` to all current subscribers. Never raises."""
        subscribers = list(self._subscribers)
        if not subscribers:
            return

        message = notification.to_message()
        logger.debug(
            "Broadcasting series %s %s to %d client(s)",
            notification.series_id,
            notification.action.value,
            len(subscribers),
        )
        await asyncio.gather(*[self._deliver(s, message) for s in subscribers])
