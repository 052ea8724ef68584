"""In-process statistics and scene mapping holders.

Statistics are computed by the episode/file subsystem and scene mappings are
fetched from the mapping service; both push their results here.
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable, List

from app.collaborators.base import AlternateTitleProvider, StatisticsProvider
from app.models.series import SceneMapping, SeriesStatistics

logger = logging.getLogger(__name__)


class InMemoryStatisticsProvider(StatisticsProvider):
    def __init__(self, statistics: Iterable[SeriesStatistics] = ()):
        self._statistics: Dict[int, SeriesStatistics] = {}
        for stats in statistics:
            self.upsert(stats)

    def upsert(self, stats: SeriesStatistics) -> None:
        self._statistics[stats.series_id] = stats

    def remove(self, series_id: int) -> None:
        self._statistics.pop(series_id, None)

    async def for_all(self) -> List[SeriesStatistics]:
        return [s.model_copy(deep=True) for s in self._statistics.values()]

    async def for_series(self, series_id: int) -> SeriesStatistics | None:
        stats = self._statistics.get(series_id)
        return stats.model_copy(deep=True) if stats else None


class InMemorySceneMappingProvider(AlternateTitleProvider):
    def __init__(self, mappings: Iterable[SceneMapping] = ()):
        self._by_tvdb_id: Dict[int, List[SceneMapping]] = {}
        self.replace_all(mappings)

    def replace_all(self, mappings: Iterable[SceneMapping]) -> None:
        """Swap in a freshly fetched mapping list, keeping its order per series."""
        grouped: Dict[int, List[SceneMapping]] = defaultdict(list)
        for mapping in mappings:
            grouped[mapping.tvdb_id].append(mapping)
        self._by_tvdb_id = dict(grouped)
        logger.debug("Loaded scene mappings for %d series", len(grouped))

    async def find_by_tvdb_id(self, tvdb_id: int) -> List[SceneMapping] | None:
        mappings = self._by_tvdb_id.get(tvdb_id)
        if mappings is None:
            return None
        return list(mappings)
