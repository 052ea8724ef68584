import pytest
from unittest.mock import MagicMock
from sqlalchemy.exc import OperationalError
from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine

from app.collaborators.sql_store import SqlSeriesStore, clean_folder_name
from app.core.database import create_db_and_tables
from app.core.errors import CollaboratorUnavailableError, SeriesNotFoundError
from app.models.events import SeriesDeletedEvent, SeriesEditedEvent
from tests.factories import make_series


@pytest.fixture
def hub():
    return MagicMock()


@pytest.fixture
def sql_store(hub):
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_db_and_tables(engine)
    return SqlSeriesStore(engine, hub)


@pytest.mark.asyncio
async def test_add_and_get_round_trip(sql_store):
    added = await sql_store.add(make_series(0, 123, title="The Wire"))

    assert added.id > 0
    assert added.added is not None
    loaded = await sql_store.get(added.id)
    assert loaded.title == "The Wire"
    assert loaded.seasons[0].images[0].cover_type.value == "poster"
    assert [s.season_number for s in loaded.seasons] == [1, 2]


@pytest.mark.asyncio
async def test_add_derives_path_from_root_folder(sql_store):
    added = await sql_store.add(
        make_series(0, 123, title="Marvel's Agents of S.H.I.E.L.D.", path=""),
        root_folder_path="/tv",
    )

    assert added.path == "/tv/Marvel's Agents of S.H.I.E.L.D"


def test_clean_folder_name():
    assert clean_folder_name("CSI: Miami") == "CSI Miami"
    assert clean_folder_name("  What/If?  ") == "WhatIf"
    assert clean_folder_name("???") == "Unknown Series"


@pytest.mark.asyncio
async def test_find_by_tvdb_id(sql_store):
    added = await sql_store.add(make_series(0, 321, path="/tv/Found"))

    assert (await sql_store.find_by_tvdb_id(321)).id == added.id
    assert await sql_store.find_by_tvdb_id(999) is None


@pytest.mark.asyncio
async def test_update_keeps_tvdb_id_and_emits_edited(sql_store, hub):
    added = await sql_store.add(make_series(0, 123))

    changed = added.model_copy(update={"tvdb_id": 555, "monitored": False})
    updated = await sql_store.update(changed)

    assert updated.tvdb_id == 123
    assert updated.monitored is False
    event = hub.emit.call_args.args[0]
    assert isinstance(event, SeriesEditedEvent)
    assert event.old_series.monitored is True


@pytest.mark.asyncio
async def test_delete_emits_snapshot(sql_store, hub):
    added = await sql_store.add(make_series(0, 123, title="Gone"))

    await sql_store.delete(added.id, delete_files=True, is_folder_move=False)

    assert await sql_store.get(added.id) is None
    event = hub.emit.call_args.args[0]
    assert isinstance(event, SeriesDeletedEvent)
    assert event.series.title == "Gone"
    assert event.delete_files is True


@pytest.mark.asyncio
async def test_delete_unknown(sql_store):
    with pytest.raises(SeriesNotFoundError):
        await sql_store.delete(42, delete_files=False, is_folder_move=False)


@pytest.mark.asyncio
async def test_database_errors_are_wrapped(sql_store):
    original = OperationalError("SELECT", {}, Exception("database is locked"))
    sql_store._get_all_sync = MagicMock(side_effect=original)

    with pytest.raises(CollaboratorUnavailableError) as excinfo:
        await sql_store.get_all()

    assert excinfo.value.original_exception is original
    assert excinfo.value.__cause__ is original
