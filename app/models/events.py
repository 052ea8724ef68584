"""Domain events raised around a series, and the notifications derived from them."""

from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel

from app.models.resources import SeriesResource
from app.models.series import Series


class DeleteMediaFileReason(str, Enum):
    """Why an episode file was removed from disk or from the library."""

    MISSING_FROM_DISK = "missing_from_disk"
    MANUAL = "manual"
    UPGRADE = "upgrade"
    NO_LINKED_EPISODES = "no_linked_episodes"
    MANUAL_OVERRIDE = "manual_override"


class EpisodeImportedEvent(BaseModel):
    """An episode file was imported into a series folder."""

    series_id: int
    episode_file_id: int = 0
    relative_path: str = ""


class EpisodeFileDeletedEvent(BaseModel):
    series_id: int
    episode_file_id: int = 0
    reason: DeleteMediaFileReason = DeleteMediaFileReason.MANUAL


class SeriesUpdatedEvent(BaseModel):
    """Series metadata was refreshed from the metadata source."""

    series: Series


class SeriesEditedEvent(BaseModel):
    """A user changed the series settings."""

    series: Series
    old_series: Optional[Series] = None


class SeriesDeletedEvent(BaseModel):
    """The series was removed. ``series`` is the state captured before removal."""

    series: Series
    delete_files: bool = False


class SeriesRenamedEvent(BaseModel):
    series: Series


class MediaCoversUpdatedEvent(BaseModel):
    """Cover art was (re)downloaded; ``updated`` is False when nothing changed."""

    series: Series
    updated: bool = False


SeriesEvent = Union[
    EpisodeImportedEvent,
    EpisodeFileDeletedEvent,
    SeriesUpdatedEvent,
    SeriesEditedEvent,
    SeriesDeletedEvent,
    SeriesRenamedEvent,
    MediaCoversUpdatedEvent,
]


class ModelAction(str, Enum):
    UPDATED = "updated"
    DELETED = "deleted"


class ChangeNotification(BaseModel):
    """A change to push to live clients.

    Updates normally carry only the identity so clients re-fetch; deletions
    carry the resource snapshot since it can no longer be fetched.
    """

    action: ModelAction
    series_id: int
    resource: Optional[SeriesResource] = None

    def to_message(self) -> dict[str, Any]:
        message: dict[str, Any] = {
            "action": self.action.value,
            "resourceType": "series",
            "id": self.series_id,
        }
        if self.resource is not None:
            message["resource"] = self.resource.to_json()
        return message
