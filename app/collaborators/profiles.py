"""Profile directories backed by the configured profile names."""

from typing import List

from app.collaborators.base import ProfileDirectory
from app.models.series import Profile


class StaticProfileDirectory(ProfileDirectory):
    """Profiles numbered 1..n in the order they are configured."""

    def __init__(self, names: List[str]):
        self._profiles = [Profile(id=i, name=n) for i, n in enumerate(names, start=1)]

    async def exists(self, profile_id: int) -> bool:
        return any(p.id == profile_id for p in self._profiles)

    async def list_all(self) -> List[Profile]:
        return list(self._profiles)
