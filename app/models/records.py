"""SQLModel table backing the default series store."""

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel

from app.models.series import Series


class SeriesRecord(SQLModel, table=True):
    """One row per series; artwork, seasons and tags are stored as JSON."""

    __tablename__ = "series"

    id: Optional[int] = Field(default=None, primary_key=True)
    tvdb_id: int = Field(index=True, unique=True)
    title: str = ""
    sort_title: str = ""
    path: str = Field(default="", index=True)
    profile_id: int = 0
    language_profile_id: int = 0
    monitored: bool = True
    season_folder: bool = True
    series_type: str = "standard"
    status: str = "continuing"
    overview: str = ""
    network: Optional[str] = None
    year: int = 0
    images: list[dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))
    seasons: list[dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))
    tags: list[int] = Field(default_factory=list, sa_column=Column(JSON))
    added: Optional[datetime] = None

    @classmethod
    def from_series(cls, series: Series) -> "SeriesRecord":
        data = series.model_dump(mode="json", exclude={"id", "added"})
        record = cls(**data, added=series.added)
        if series.id:
            record.id = series.id
        return record

    def apply(self, series: Series) -> None:
        """Copy every mutable column from ``series`` onto this row."""
        data = series.model_dump(mode="json", exclude={"id", "tvdb_id", "added"})
        for key, value in data.items():
            setattr(self, key, value)

    def to_series(self) -> Series:
        return Series.model_validate(
            {
                "id": self.id,
                "tvdb_id": self.tvdb_id,
                "title": self.title,
                "sort_title": self.sort_title,
                "path": self.path,
                "profile_id": self.profile_id,
                "language_profile_id": self.language_profile_id,
                "monitored": self.monitored,
                "season_folder": self.season_folder,
                "series_type": self.series_type,
                "status": self.status,
                "overview": self.overview,
                "network": self.network,
                "year": self.year,
                "images": self.images or [],
                "seasons": self.seasons or [],
                "tags": self.tags or [],
                "added": self.added,
            }
        )
