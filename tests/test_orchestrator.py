import pytest

from app.core.errors import SeriesNotFoundError, ValidationFailedError
from app.models.events import ModelAction
from app.models.resources import SeasonResource, SeriesResource
from app.models.series import Profile, SeriesStatistics


def create_payload(**kwargs) -> SeriesResource:
    defaults = dict(
        tvdb_id=456,
        title="New Show",
        root_folder_path="/tv",
        profile_id=1,
        language_profile_id=0,
    )
    defaults.update(kwargs)
    return SeriesResource(**defaults)


@pytest.mark.asyncio
async def test_list_uses_batch_aggregation(orchestrator, statistics):
    statistics.upsert(SeriesStatistics(series_id=7, episode_count=10))

    resources = await orchestrator.list_series()

    assert [r.id for r in resources] == [7]
    assert resources[0].episode_count == 10


@pytest.mark.asyncio
async def test_get_missing_series_raises_not_found(orchestrator):
    with pytest.raises(SeriesNotFoundError):
        await orchestrator.get_series(99)


@pytest.mark.asyncio
async def test_get_passes_season_image_switch(orchestrator):
    with_images = await orchestrator.get_series(7, include_season_images=True)
    without = await orchestrator.get_series(7)

    assert with_images.seasons[0].images[0].url.startswith("https://artworks")
    assert without.seasons[0].images is None


@pytest.mark.asyncio
async def test_create_backfills_first_language_profile(orchestrator, store):
    series_id = await orchestrator.create_series(create_payload())

    assert store.series[series_id].language_profile_id == 1
    assert store.added_root_folders == ["/tv"]


@pytest.mark.asyncio
async def test_create_keeps_explicit_language_profile(orchestrator, store):
    series_id = await orchestrator.create_series(
        create_payload(language_profile_id=2)
    )

    assert store.series[series_id].language_profile_id == 2


@pytest.mark.asyncio
async def test_create_backfill_takes_listing_order(
    orchestrator, store, language_profiles
):
    async def listing():
        return [Profile(id=5, name="Japanese"), Profile(id=1, name="English")]

    language_profiles.list_all = listing

    series_id = await orchestrator.create_series(create_payload())

    assert store.series[series_id].language_profile_id == 5


@pytest.mark.asyncio
async def test_create_rejected_without_persisting(orchestrator, store):
    with pytest.raises(ValidationFailedError) as excinfo:
        await orchestrator.create_series(create_payload(tvdb_id=123))

    assert excinfo.value.failures[0].property_name == "tvdbId"
    assert list(store.series) == [7]


@pytest.mark.asyncio
async def test_update_merges_and_broadcasts_submitted_resource(
    orchestrator, store, broadcaster
):
    submitted = SeriesResource(
        id=7,
        tvdb_id=999,
        title="Renamed by client",
        path="/tv/Series 7",
        profile_id=2,
        language_profile_id=1,
        monitored=False,
        seasons=[SeasonResource(season_number=1, monitored=False)],
    )

    await orchestrator.update_series(submitted)

    saved = store.updated[-1]
    assert saved.profile_id == 2
    assert saved.monitored is False
    # Not editable through the resource
    assert saved.tvdb_id == 123
    assert saved.title == "Series 7"
    # Season artwork carried over even though the client omitted it
    assert saved.seasons[0].images[0].url.startswith("https://")
    assert [s.season_number for s in saved.seasons] == [1]

    broadcaster.publish.assert_awaited_once()
    notification = broadcaster.publish.await_args.args[0]
    assert notification.action == ModelAction.UPDATED
    assert notification.series_id == 7
    assert notification.resource is submitted


@pytest.mark.asyncio
async def test_update_broadcasts_after_persisting(orchestrator, store, broadcaster):
    order = []
    update = store.update

    async def tracking_update(series):
        order.append("persist")
        return await update(series)

    async def tracking_publish(notification):
        order.append("publish")

    store.update = tracking_update
    broadcaster.publish = tracking_publish

    await orchestrator.update_series(
        SeriesResource(id=7, path="/tv/Series 7", profile_id=1, language_profile_id=1)
    )

    assert order == ["persist", "publish"]


@pytest.mark.asyncio
async def test_update_unknown_series(orchestrator, broadcaster):
    with pytest.raises(SeriesNotFoundError):
        await orchestrator.update_series(
            SeriesResource(id=50, path="/tv/Other", profile_id=1, language_profile_id=1)
        )
    broadcaster.publish.assert_not_awaited()


@pytest.mark.asyncio
async def test_delete_defaults_to_keeping_files(orchestrator, store):
    await orchestrator.delete_series(7)

    assert store.deleted == [(7, False, False)]


@pytest.mark.asyncio
async def test_delete_with_files(orchestrator, store):
    await orchestrator.delete_series(7, delete_files=True)

    assert store.deleted == [(7, True, False)]


@pytest.mark.asyncio
async def test_delete_unknown_series(orchestrator, store):
    with pytest.raises(SeriesNotFoundError):
        await orchestrator.delete_series(99)
    assert store.deleted == []
