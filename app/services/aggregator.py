"""Assemble series resources from the series plus statistics, covers and titles."""

import logging
from typing import Dict, List, Sequence

from app.collaborators.base import AlternateTitleProvider, CoverMapper, StatisticsProvider
from app.models.resources import (
    AlternateTitleResource,
    SeasonStatisticsResource,
    SeriesResource,
    to_resource,
)
from app.models.series import SeasonStatistics, Series, SeriesStatistics

logger = logging.getLogger(__name__)


class ResourceAggregator:
    """Builds the outward series resource.

    The single and batch paths produce the same shape; they only differ in
    how statistics are fetched (one lookup per series vs. one bulk call for
    the whole batch). The source series are never modified.
    """

    def __init__(
        self,
        statistics: StatisticsProvider,
        cover_mapper: CoverMapper,
        alternate_titles: AlternateTitleProvider,
    ):
        self.statistics = statistics
        self.cover_mapper = cover_mapper
        self.alternate_titles = alternate_titles

    async def aggregate_one(
        self, series: Series, include_season_images: bool = False
    ) -> SeriesResource:
        resource = to_resource(series, include_season_images)
        self._map_covers_to_local(resource)

        stats = await self.statistics.for_series(resource.id)
        if stats is not None:
            link_statistics(resource, stats)

        await self._populate_alternate_titles(resource)
        return resource

    async def aggregate_many(
        self, series_list: Sequence[Series], include_season_images: bool = False
    ) -> List[SeriesResource]:
        resources = [to_resource(s, include_season_images) for s in series_list]
        for resource in resources:
            self._map_covers_to_local(resource)

        # One bulk fetch for the whole list, joined by series id
        stats_by_series: Dict[int, SeriesStatistics] = {
            s.series_id: s for s in await self.statistics.for_all()
        }
        for resource in resources:
            stats = stats_by_series.get(resource.id)
            if stats is not None:
                link_statistics(resource, stats)

        for resource in resources:
            await self._populate_alternate_titles(resource)

        return resources

    def _map_covers_to_local(self, resource: SeriesResource) -> None:
        self.cover_mapper.convert_to_local_urls(resource.id, resource.images)

    async def _populate_alternate_titles(self, resource: SeriesResource) -> None:
        mappings = await self.alternate_titles.find_by_tvdb_id(resource.tvdb_id)
        if not mappings:
            return

        resource.alternate_titles = [
            AlternateTitleResource.from_mapping(m) for m in mappings
        ]


def link_statistics(resource: SeriesResource, stats: SeriesStatistics) -> None:
    """Copy series statistics onto the resource and its seasons.

    Seasons are matched by season number. A season without a statistics
    entry is left without statistics.
    """
    resource.total_episode_count = stats.total_episode_count
    resource.episode_count = stats.episode_count
    resource.episode_file_count = stats.episode_file_count
    resource.size_on_disk = stats.size_on_disk
    resource.next_airing = stats.next_airing
    resource.previous_airing = stats.previous_airing

    if stats.season_statistics is None:
        return

    by_season: Dict[int, SeasonStatistics] = {
        s.season_number: s for s in stats.season_statistics
    }
    for season in resource.seasons:
        season_stats = by_season.get(season.season_number)
        if season_stats is None:
            logger.debug(
                "No statistics for series %s season %s",
                resource.id,
                season.season_number,
            )
            continue
        season.statistics = SeasonStatisticsResource.from_statistics(season_stats)
