"""Event hub: routes domain events to the notification policy and broadcaster."""

import asyncio
import logging
from contextlib import asynccontextmanager

from app.models.events import SeriesEvent
from app.services.broadcast import ChangeBroadcaster
from app.services.policy import decide

logger = logging.getLogger(__name__)


class EventHub:
    """Async queue of domain events drained by a single background worker.

    Producers call ``emit`` from anywhere in the application; it never
    blocks and never fails because of a client. Events are handled once,
    in the order they were emitted.
    """

    def __init__(self, broadcaster: ChangeBroadcaster) -> None:
        self.broadcaster = broadcaster
        self.queue: asyncio.Queue[SeriesEvent] = asyncio.Queue()
        self._worker_task: asyncio.Task[None] | None = None

    def emit(self, event: SeriesEvent) -> None:
        """Queue an event for the worker."""
        self.queue.put_nowait(event)

    async def handle(self, event: SeriesEvent) -> None:
        """Decide and publish a single event.

        Raises UnclassifiedEventError for event types without a rule.
        """
        notification = decide(event)
        if notification is None:
            logger.debug("Suppressed %s", type(event).__name__)
            return
        await self.broadcaster.publish(notification)

    async def start(self) -> None:
        """Start the background worker."""
        if self._worker_task is None:
            logger.info("Starting event hub worker")
            self._worker_task = asyncio.create_task(self._worker())

    async def shutdown(self) -> None:
        """Cancel the worker; queued events are dropped."""
        if self._worker_task is None:
            return
        self._worker_task.cancel()
        await asyncio.gather(self._worker_task, return_exceptions=True)
        self._worker_task = None

    async def _worker(self) -> None:
        """Continuously pull events from the queue and handle them."""
        while True:
            event = await self.queue.get()
            try:
                await self.handle(event)
            except Exception:
                logger.exception("Failed to handle %s", type(event).__name__)
            finally:
                self.queue.task_done()


@asynccontextmanager
async def event_hub_lifespan(hub: EventHub):
    """Run the hub worker for the lifetime of the application."""
    await hub.start()
    try:
        yield hub
    finally:
        await hub.shutdown()
