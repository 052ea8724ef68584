"""Series CRUD: validation, persistence, aggregation and broadcast per verb."""

import logging
from typing import List

from app.collaborators.base import ProfileDirectory, SeriesStore
from app.core.errors import SeriesNotFoundError, ValidationFailedError
from app.models.events import ChangeNotification, ModelAction
from app.models.resources import SeriesResource, to_model
from app.services.aggregator import ResourceAggregator
from app.services.broadcast import ChangeBroadcaster
from app.validation.pipeline import ValidationPipeline, WriteVerb

logger = logging.getLogger(__name__)


class SeriesOrchestrator:
    """The series endpoint's operations, independent of HTTP.

    All dependencies are passed in; see ``app.main`` for the default wiring.
    """

    def __init__(
        self,
        store: SeriesStore,
        validator: ValidationPipeline,
        aggregator: ResourceAggregator,
        language_profiles: ProfileDirectory,
        broadcaster: ChangeBroadcaster,
    ):
        self.store = store
        self.validator = validator
        self.aggregator = aggregator
        self.language_profiles = language_profiles
        self.broadcaster = broadcaster

    async def _validate(self, resource: SeriesResource, verb: WriteVerb) -> None:
        failures = await self.validator.validate(resource, verb)
        if failures:
            raise ValidationFailedError(failures)

    async def list_series(
        self, include_season_images: bool = False
    ) -> List[SeriesResource]:
        series = await self.store.get_all()
        return await self.aggregator.aggregate_many(series, include_season_images)

    async def get_series(
        self, series_id: int, include_season_images: bool = False
    ) -> SeriesResource:
        series = await self.store.get(series_id)
        if series is None:
            raise SeriesNotFoundError(series_id)
        return await self.aggregator.aggregate_one(series, include_season_images)

    async def create_series(self, resource: SeriesResource) -> int:
        """Validate and add a new series, returning its id."""
        await self._validate(resource, WriteVerb.CREATE)

        model = to_model(resource)

        # Older clients don't send a language profile; fall back to the
        # first one listed.
        if model.language_profile_id == 0 or not await self.language_profiles.exists(
            model.language_profile_id
        ):
            profiles = await self.language_profiles.list_all()
            model.language_profile_id = profiles[0].id

        added = await self.store.add(model, resource.root_folder_path)
        return added.id

    async def update_series(self, resource: SeriesResource) -> None:
        """Apply the editable fields of ``resource`` to the stored series.

        Clients are notified with the submitted resource once the write has
        completed.
        """
        await self._validate(resource, WriteVerb.UPDATE)

        existing = await self.store.get(resource.id)
        if existing is None:
            raise SeriesNotFoundError(resource.id)

        await self.store.update(to_model(resource, existing))

        await self.broadcaster.publish(
            ChangeNotification(
                action=ModelAction.UPDATED, series_id=resource.id, resource=resource
            )
        )

    async def delete_series(self, series_id: int, delete_files: bool = False) -> None:
        if await self.store.get(series_id) is None:
            raise SeriesNotFoundError(series_id)

        await self.store.delete(series_id, delete_files, is_folder_move=False)
