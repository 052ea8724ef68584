"""Series domain models shared by the store and the collaborators."""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel


class MediaCoverType(str, Enum):
    """Kind of artwork attached to a series or season."""

    UNKNOWN = "unknown"
    POSTER = "poster"
    BANNER = "banner"
    FANART = "fanart"
    SCREENSHOT = "screenshot"
    HEADSHOT = "headshot"


class SeriesType(str, Enum):
    STANDARD = "standard"
    DAILY = "daily"
    ANIME = "anime"


class SeriesStatus(str, Enum):
    CONTINUING = "continuing"
    ENDED = "ended"
    UPCOMING = "upcoming"


class MediaCover(BaseModel):
    """A single cover image reference."""

    cover_type: MediaCoverType = MediaCoverType.UNKNOWN
    url: str = ""


class Season(BaseModel):
    """A season of a series, unique by season_number within its series."""

    season_number: int
    monitored: bool = True
    images: List[MediaCover] = []


class Series(BaseModel):
    """A series as persisted by the store.

    ``id`` is 0 until the store assigns one on add. ``tvdb_id`` never
    changes after creation.
    """

    id: int = 0
    tvdb_id: int = 0
    title: str = ""
    sort_title: str = ""
    path: str = ""
    profile_id: int = 0
    language_profile_id: int = 0
    monitored: bool = True
    season_folder: bool = True
    series_type: SeriesType = SeriesType.STANDARD
    status: SeriesStatus = SeriesStatus.CONTINUING
    overview: str = ""
    network: Optional[str] = None
    year: int = 0
    images: List[MediaCover] = []
    seasons: List[Season] = []
    tags: List[int] = []
    added: Optional[datetime] = None


class SeasonStatistics(BaseModel):
    """Episode and file counts for one season of a series."""

    series_id: int
    season_number: int
    episode_file_count: int = 0
    episode_count: int = 0
    total_episode_count: int = 0
    size_on_disk: int = 0
    next_airing: Optional[datetime] = None
    previous_airing: Optional[datetime] = None


class SeriesStatistics(BaseModel):
    """Episode and file counts for a whole series."""

    series_id: int
    episode_file_count: int = 0
    episode_count: int = 0
    total_episode_count: int = 0
    size_on_disk: int = 0
    next_airing: Optional[datetime] = None
    previous_airing: Optional[datetime] = None
    season_statistics: Optional[List[SeasonStatistics]] = None


class SceneMapping(BaseModel):
    """An alternate (scene) title for a series, keyed by its TVDB id."""

    tvdb_id: int
    title: str
    season_number: Optional[int] = None
    scene_season_number: Optional[int] = None
    scene_origin: Optional[str] = None
    comment: Optional[str] = None


class Profile(BaseModel):
    """A quality or language profile."""

    id: int
    name: str
