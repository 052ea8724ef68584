"""Outward-facing API resources and their mapping to/from the Series model.

Resources serialize with camelCase names and drop fields that are ``None``,
so anything not attached by aggregation (statistics, season images) is simply
absent from the JSON.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from app.models.series import (
    MediaCover,
    MediaCoverType,
    SceneMapping,
    Season,
    SeasonStatistics,
    Series,
    SeriesStatus,
    SeriesType,
)


class ResourceModel(BaseModel):
    """Base for API resources: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class MediaCoverResource(ResourceModel):
    cover_type: MediaCoverType = MediaCoverType.UNKNOWN
    url: str = ""


class SeasonStatisticsResource(ResourceModel):
    next_airing: Optional[datetime] = None
    previous_airing: Optional[datetime] = None
    episode_file_count: int = 0
    episode_count: int = 0
    total_episode_count: int = 0
    size_on_disk: int = 0
    percent_of_episodes: float = 0.0

    @classmethod
    def from_statistics(cls, stats: SeasonStatistics) -> "SeasonStatisticsResource":
        percent = 0.0
        if stats.episode_count:
            percent = stats.episode_file_count / stats.episode_count * 100
        return cls(
            next_airing=stats.next_airing,
            previous_airing=stats.previous_airing,
            episode_file_count=stats.episode_file_count,
            episode_count=stats.episode_count,
            total_episode_count=stats.total_episode_count,
            size_on_disk=stats.size_on_disk,
            percent_of_episodes=percent,
        )


class SeasonResource(ResourceModel):
    season_number: int
    monitored: bool = True
    images: Optional[List[MediaCoverResource]] = None
    statistics: Optional[SeasonStatisticsResource] = None


class AlternateTitleResource(ResourceModel):
    title: str
    season_number: Optional[int] = None
    scene_season_number: Optional[int] = None
    scene_origin: Optional[str] = None
    comment: Optional[str] = None

    @classmethod
    def from_mapping(cls, mapping: SceneMapping) -> "AlternateTitleResource":
        return cls(
            title=mapping.title,
            season_number=mapping.season_number,
            scene_season_number=mapping.scene_season_number,
            scene_origin=mapping.scene_origin,
            comment=mapping.comment,
        )


class SeriesResource(ResourceModel):
    """The series as returned by, and submitted to, the REST endpoint."""

    id: int = 0
    tvdb_id: int = 0
    title: str = ""
    sort_title: Optional[str] = None
    path: Optional[str] = None
    # Only meaningful on create, when the path is derived from it
    root_folder_path: Optional[str] = None
    profile_id: int = 0
    language_profile_id: int = 0
    monitored: bool = True
    season_folder: bool = True
    series_type: SeriesType = SeriesType.STANDARD
    status: SeriesStatus = SeriesStatus.CONTINUING
    overview: Optional[str] = None
    network: Optional[str] = None
    year: int = 0
    images: List[MediaCoverResource] = []
    seasons: List[SeasonResource] = []
    tags: List[int] = []
    added: Optional[datetime] = None
    alternate_titles: List[AlternateTitleResource] = []

    # Attached by the statistics merge
    total_episode_count: Optional[int] = None
    episode_count: Optional[int] = None
    episode_file_count: Optional[int] = None
    size_on_disk: Optional[int] = None
    next_airing: Optional[datetime] = None
    previous_airing: Optional[datetime] = None


def _covers_to_resource(images: List[MediaCover]) -> List[MediaCoverResource]:
    return [MediaCoverResource(cover_type=i.cover_type, url=i.url) for i in images]


def _covers_to_model(images: List[MediaCoverResource]) -> List[MediaCover]:
    return [MediaCover(cover_type=i.cover_type, url=i.url) for i in images]


def to_resource(series: Series, include_season_images: bool = False) -> SeriesResource:
    """Project a series to a bare resource (no statistics, no alternate titles).

    Every nested object is freshly built so later in-place rewrites of the
    resource never reach the series.
    """
    seasons = [
        SeasonResource(
            season_number=s.season_number,
            monitored=s.monitored,
            images=_covers_to_resource(s.images) if include_season_images else None,
        )
        for s in series.seasons
    ]

    return SeriesResource(
        id=series.id,
        tvdb_id=series.tvdb_id,
        title=series.title,
        sort_title=series.sort_title or None,
        path=series.path or None,
        profile_id=series.profile_id,
        language_profile_id=series.language_profile_id,
        monitored=series.monitored,
        season_folder=series.season_folder,
        series_type=series.series_type,
        status=series.status,
        overview=series.overview or None,
        network=series.network,
        year=series.year,
        images=_covers_to_resource(series.images),
        seasons=seasons,
        tags=list(series.tags),
        added=series.added,
    )


def to_model(resource: SeriesResource, existing: Series | None = None) -> Series:
    """Build a Series from a submitted resource.

    With ``existing``, only the user-editable fields are taken from the
    resource and everything else (tvdb id, title, artwork, added date) is
    kept from the stored series. Season artwork is carried over by season
    number because clients usually submit seasons without images.
    """
    if existing is None:
        # Ids are assigned by the store
        return Series(
            tvdb_id=resource.tvdb_id,
            title=resource.title,
            sort_title=resource.sort_title or "",
            path=resource.path or "",
            profile_id=resource.profile_id,
            language_profile_id=resource.language_profile_id,
            monitored=resource.monitored,
            season_folder=resource.season_folder,
            series_type=resource.series_type,
            status=resource.status,
            overview=resource.overview or "",
            network=resource.network,
            year=resource.year,
            images=_covers_to_model(resource.images),
            seasons=[
                Season(
                    season_number=s.season_number,
                    monitored=s.monitored,
                    images=_covers_to_model(s.images or []),
                )
                for s in resource.seasons
            ],
            tags=list(resource.tags),
            added=resource.added,
        )

    existing_seasons = {s.season_number: s for s in existing.seasons}
    seasons = []
    for s in resource.seasons:
        previous = existing_seasons.get(s.season_number)
        if s.images is not None:
            images = _covers_to_model(s.images)
        elif previous is not None:
            images = [i.model_copy() for i in previous.images]
        else:
            images = []
        seasons.append(
            Season(season_number=s.season_number, monitored=s.monitored, images=images)
        )

    return existing.model_copy(
        deep=True,
        update={
            "path": resource.path or existing.path,
            "profile_id": resource.profile_id,
            "language_profile_id": resource.language_profile_id,
            "monitored": resource.monitored,
            "season_folder": resource.season_folder,
            "series_type": resource.series_type,
            "seasons": seasons,
            "tags": list(resource.tags),
        },
    )
