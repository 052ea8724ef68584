"""Which domain events become client notifications, and with what payload."""

from app.core.errors import UnclassifiedEventError
from app.models.events import (
    ChangeNotification,
    DeleteMediaFileReason,
    EpisodeFileDeletedEvent,
    EpisodeImportedEvent,
    MediaCoversUpdatedEvent,
    ModelAction,
    SeriesDeletedEvent,
    SeriesEditedEvent,
    SeriesEvent,
    SeriesRenamedEvent,
    SeriesUpdatedEvent,
)
from app.models.resources import to_resource


def _updated(series_id: int) -> ChangeNotification:
    return ChangeNotification(action=ModelAction.UPDATED, series_id=series_id)


def decide(event: SeriesEvent) -> ChangeNotification | None:
    """Return the notification for ``event``, or None when it is suppressed.

    Every event type has its own branch. An unknown type raises
    UnclassifiedEventError instead of being dropped.
    """
    if isinstance(event, EpisodeImportedEvent):
        return _updated(event.series_id)

    if isinstance(event, EpisodeFileDeletedEvent):
        # Upgrades replace the file; the series itself did not change
        if event.reason == DeleteMediaFileReason.UPGRADE:
            return None
        return _updated(event.series_id)

    if isinstance(event, (SeriesUpdatedEvent, SeriesEditedEvent, SeriesRenamedEvent)):
        return _updated(event.series.id)

    if isinstance(event, SeriesDeletedEvent):
        return ChangeNotification(
            action=ModelAction.DELETED,
            series_id=event.series.id,
            resource=to_resource(event.series),
        )

    if isinstance(event, MediaCoversUpdatedEvent):
        if not event.updated:
            return None
        return _updated(event.series.id)

    raise UnclassifiedEventError(event)
