"""Shared fixtures wiring the core services to in-memory collaborators."""

import pytest
from unittest.mock import AsyncMock

from app.collaborators.memory import (
    InMemorySceneMappingProvider,
    InMemoryStatisticsProvider,
)
from app.collaborators.profiles import StaticProfileDirectory
from app.services.aggregator import ResourceAggregator
from app.services.broadcast import ChangeBroadcaster
from app.services.orchestrator import SeriesOrchestrator
from app.validation.series_rules import build_series_pipeline
from tests.factories import FakeSeriesStore, PrefixCoverMapper, make_series


@pytest.fixture
def store():
    return FakeSeriesStore([make_series()])


@pytest.fixture
def statistics():
    return InMemoryStatisticsProvider()


@pytest.fixture
def scene_mappings():
    return InMemorySceneMappingProvider()


@pytest.fixture
def aggregator(statistics, scene_mappings):
    return ResourceAggregator(
        statistics=statistics,
        cover_mapper=PrefixCoverMapper(),
        alternate_titles=scene_mappings,
    )


@pytest.fixture
def quality_profiles():
    return StaticProfileDirectory(["Any", "HD-1080p"])


@pytest.fixture
def language_profiles():
    return StaticProfileDirectory(["English", "French"])


@pytest.fixture
def broadcaster():
    broadcaster = ChangeBroadcaster(timeout=1.0)
    broadcaster.publish = AsyncMock()
    return broadcaster


@pytest.fixture
def orchestrator(store, aggregator, quality_profiles, language_profiles, broadcaster):
    return SeriesOrchestrator(
        store=store,
        validator=build_series_pipeline(
            store, quality_profiles, language_profiles, ["/tv"]
        ),
        aggregator=aggregator,
        language_profiles=language_profiles,
        broadcaster=broadcaster,
    )
