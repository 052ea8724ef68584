"""Map remote cover art URLs to the locally served media cover cache."""

import logging
import os
from typing import List

from cachetools import TTLCache

from app.collaborators.base import CoverMapper
from app.models.resources import MediaCoverResource
from app.models.series import MediaCover, MediaCoverType

logger = logging.getLogger(__name__)

# File modification times are looked up for every cover of every listed
# series, so cache them briefly. Missing files are not cached so a cover
# downloaded after the first lookup is picked up right away.
_mtime_cache = TTLCache(maxsize=2048, ttl=60)


def _last_write(path: str) -> int | None:
    if path in _mtime_cache:
        return _mtime_cache[path]
    try:
        mtime = int(os.path.getmtime(path))
    except OSError:
        return None
    _mtime_cache[path] = mtime
    return mtime


class LocalCoverMapper(CoverMapper):
    """Point covers at ``{url_base}/MediaCover/{series_id}/{type}.jpg``.

    The rewritten URL is derived from the series id, the cover type and the
    cached file only, never from the current URL, so rewriting twice gives
    the same result.
    """

    def __init__(self, cover_dir: str, url_base: str = ""):
        self.cover_dir = cover_dir
        self.url_base = url_base

    def _local_path(self, series_id: int, cover_type: MediaCoverType) -> str:
        return os.path.join(self.cover_dir, str(series_id), f"{cover_type.value}.jpg")

    def convert_to_local_urls(
        self, series_id: int, covers: List[MediaCover | MediaCoverResource]
    ) -> None:
        for cover in covers:
            if cover.cover_type == MediaCoverType.UNKNOWN:
                continue

            url = f"{self.url_base}/MediaCover/{series_id}/{cover.cover_type.value}.jpg"
            last_write = _last_write(self._local_path(series_id, cover.cover_type))
            if last_write is not None:
                url = f"{url}?lastWrite={last_write}"

            cover.url = url
