"""Default series store on top of SQLModel."""

import asyncio
import logging
import os
import re
from datetime import datetime, timezone
from typing import List

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from app.collaborators.base import SeriesStore
from app.core.errors import CollaboratorUnavailableError, SeriesNotFoundError
from app.models.events import SeriesDeletedEvent, SeriesEditedEvent
from app.models.records import SeriesRecord
from app.models.series import Series
from app.services.events import EventHub

logger = logging.getLogger(__name__)


def clean_folder_name(title: str) -> str:
    """Turn a series title into a folder name safe on every platform."""
    name = re.sub(r'[<>:"/\\|?*]', "", title)
    name = re.sub(r"\s+", " ", name).strip(" .")
    return name or "Unknown Series"


class SqlSeriesStore(SeriesStore):
    """Series persistence using synchronous sessions off the event loop.

    Deletes and edits are announced on the event hub, the way the rest of
    the application learns about them.
    """

    def __init__(self, engine: Engine, event_hub: EventHub | None = None):
        self.engine = engine
        self.event_hub = event_hub

    async def _run(self, description: str, func, *args):
        try:
            return await asyncio.to_thread(func, *args)
        except SQLAlchemyError as exc:
            logger.error("Database error while %s: %s", description, exc)
            raise CollaboratorUnavailableError(
                f"Database error while {description}", exc
            ) from exc

    def _get_sync(self, series_id: int) -> Series | None:
        with Session(self.engine) as session:
            record = session.get(SeriesRecord, series_id)
            return record.to_series() if record else None

    def _get_all_sync(self) -> List[Series]:
        with Session(self.engine) as session:
            records = session.exec(select(SeriesRecord).order_by(SeriesRecord.id))
            return [r.to_series() for r in records]

    def _add_sync(self, series: Series) -> Series:
        with Session(self.engine) as session:
            record = SeriesRecord.from_series(series)
            session.add(record)
            session.commit()
            session.refresh(record)
            return record.to_series()

    def _update_sync(self, series: Series) -> tuple[Series, Series]:
        with Session(self.engine) as session:
            record = session.get(SeriesRecord, series.id)
            if record is None:
                raise SeriesNotFoundError(series.id)
            old = record.to_series()
            record.apply(series)
            session.add(record)
            session.commit()
            session.refresh(record)
            return old, record.to_series()

    def _delete_sync(self, series_id: int) -> Series:
        with Session(self.engine) as session:
            record = session.get(SeriesRecord, series_id)
            if record is None:
                raise SeriesNotFoundError(series_id)
            snapshot = record.to_series()
            session.delete(record)
            session.commit()
            return snapshot

    def _find_sync(self, column, value) -> Series | None:
        with Session(self.engine) as session:
            record = session.exec(
                select(SeriesRecord).where(column == value)
            ).first()
            return record.to_series() if record else None

    async def get(self, series_id: int) -> Series | None:
        return await self._run(f"loading series {series_id}", self._get_sync, series_id)

    async def get_all(self) -> List[Series]:
        return await self._run("loading all series", self._get_all_sync)

    async def add(self, series: Series, root_folder_path: str | None = None) -> Series:
        if not series.path and root_folder_path:
            series = series.model_copy(
                update={
                    "path": os.path.join(
                        root_folder_path, clean_folder_name(series.title)
                    )
                }
            )
        if series.added is None:
            series = series.model_copy(update={"added": datetime.now(timezone.utc)})

        added = await self._run(
            f"adding series tvdb:{series.tvdb_id}", self._add_sync, series
        )
        logger.info("Added series %s [%s] at %s", added.title, added.id, added.path)
        return added

    async def update(self, series: Series) -> Series:
        old, updated = await self._run(
            f"updating series {series.id}", self._update_sync, series
        )
        if self.event_hub is not None:
            self.event_hub.emit(SeriesEditedEvent(series=updated, old_series=old))
        return updated

    async def delete(
        self, series_id: int, delete_files: bool, is_folder_move: bool
    ) -> None:
        snapshot = await self._run(
            f"deleting series {series_id}", self._delete_sync, series_id
        )
        logger.info(
            "Deleted series %s [%s] (delete_files=%s, is_folder_move=%s)",
            snapshot.title,
            series_id,
            delete_files,
            is_folder_move,
        )
        if self.event_hub is not None:
            self.event_hub.emit(
                SeriesDeletedEvent(series=snapshot, delete_files=delete_files)
            )

    async def find_by_tvdb_id(self, tvdb_id: int) -> Series | None:
        return await self._run(
            f"looking up tvdb:{tvdb_id}", self._find_sync, SeriesRecord.tvdb_id, tvdb_id
        )
