"""Interfaces of the services the series endpoint depends on.

The orchestrator, aggregator and validation rules only talk to these
abstract classes. Default implementations live next to this module; any of
them can be swapped for another backend without touching the core.
"""

from abc import ABC, abstractmethod
from typing import List

from app.models.resources import MediaCoverResource
from app.models.series import (
    MediaCover,
    Profile,
    SceneMapping,
    Series,
    SeriesStatistics,
)


class SeriesStore(ABC):
    """Persistence for series."""

    @abstractmethod
    async def get(self, series_id: int) -> Series | None:
        """Return the series, or None when it does not exist."""
        pass

    @abstractmethod
    async def get_all(self) -> List[Series]:
        pass

    @abstractmethod
    async def add(self, series: Series, root_folder_path: str | None = None) -> Series:
        """Persist a new series and return it with its assigned id.

        When the series has no path, it is derived from ``root_folder_path``.
        """
        pass

    @abstractmethod
    async def update(self, series: Series) -> Series:
        pass

    @abstractmethod
    async def delete(
        self, series_id: int, delete_files: bool, is_folder_move: bool
    ) -> None:
        pass

    @abstractmethod
    async def find_by_tvdb_id(self, tvdb_id: int) -> Series | None:
        pass


class StatisticsProvider(ABC):
    @abstractmethod
    async def for_all(self) -> List[SeriesStatistics]:
        """Statistics for every series, in one call."""
        pass

    @abstractmethod
    async def for_series(self, series_id: int) -> SeriesStatistics | None:
        pass


class CoverMapper(ABC):
    @abstractmethod
    def convert_to_local_urls(
        self, series_id: int, covers: List[MediaCover | MediaCoverResource]
    ) -> None:
        """Rewrite each cover's ``url`` in place to a locally served URL.

        Applying it to already converted covers must leave them unchanged.
        """
        pass


class AlternateTitleProvider(ABC):
    @abstractmethod
    async def find_by_tvdb_id(self, tvdb_id: int) -> List[SceneMapping] | None:
        """Scene mappings for a series in source order, or None if unknown."""
        pass


class ProfileDirectory(ABC):
    @abstractmethod
    async def exists(self, profile_id: int) -> bool:
        pass

    @abstractmethod
    async def list_all(self) -> List[Profile]:
        pass

