"""Validation rules for submitted series and the pipeline that combines them."""

import ntpath
import posixpath
from pathlib import PurePosixPath, PureWindowsPath
from typing import List

from app.collaborators.base import ProfileDirectory, SeriesStore
from app.models.resources import SeriesResource
from app.validation.pipeline import Rule, RuleGroup, ValidationPipeline

_INVALID_PATH_CHARS = set('<>"|?*\x00')

LINUX_SYSTEM_FOLDERS = ["/bin", "/boot", "/lib", "/sbin", "/proc", "/sys", "/dev"]
WINDOWS_SYSTEM_FOLDERS = ["C:\\Windows", "C:\\Program Files", "C:\\Program Files (x86)"]


def _is_windows_path(path: str) -> bool:
    return bool(ntpath.splitdrive(path)[0]) or path.startswith("\\\\")


def _pure(path: str):
    if _is_windows_path(path):
        return PureWindowsPath(ntpath.normpath(path))
    return PurePosixPath(posixpath.normpath(path))


def is_path_valid(path: str | None) -> bool:
    """An absolute (rooted) path without characters no filesystem accepts."""
    if not path or path.isspace() or path != path.strip():
        return False
    if _is_windows_path(path):
        # The drive colon is the only place a colon may appear
        drive, rest = ntpath.splitdrive(path)
        if ":" in rest or any(c in _INVALID_PATH_CHARS for c in rest):
            return False
        return rest.startswith(("\\", "/")) or (drive.startswith("\\\\") and not rest)
    if "\x00" in path:
        return False
    return path.startswith("/")


def paths_equal(a: str, b: str) -> bool:
    return _is_windows_path(a) == _is_windows_path(b) and _pure(a) == _pure(b)


def is_parent_path(parent: str, child: str) -> bool:
    """True when ``child`` lives strictly below ``parent``."""
    if _is_windows_path(parent) != _is_windows_path(child):
        return False
    parent_path, child_path = _pure(parent), _pure(child)
    return parent_path != child_path and child_path.is_relative_to(parent_path)


def valid_id() -> Rule:
    return Rule(
        lambda value, _: value is not None and value > 0, "Must be greater than zero"
    )


def greater_than_zero() -> Rule:
    return Rule(
        lambda value, _: value is not None and value > 0, "Must be greater than 0"
    )


def valid_path() -> Rule:
    return Rule(lambda value, _: is_path_valid(value), "Invalid Path")


def not_root_folder(root_folders: List[str]) -> Rule:
    def check(path, _):
        return not any(paths_equal(path, root) for root in root_folders)

    return Rule(check, "Path is already configured as a root folder")


def not_system_folder() -> Rule:
    def check(path, _):
        folders = WINDOWS_SYSTEM_FOLDERS if _is_windows_path(path) else LINUX_SYSTEM_FOLDERS
        if _pure(path) == _pure(path).parent:
            # Filesystem root
            return False
        return not any(
            paths_equal(path, folder) or is_parent_path(folder, path)
            for folder in folders
        )

    return Rule(check, "Is '{value}' or a child of a system folder")


def series_path_unused(store: SeriesStore) -> Rule:
    async def check(path, payload: SeriesResource):
        for series in await store.get_all():
            if series.id != payload.id and series.path and paths_equal(series.path, path):
                return False
        return True

    return Rule(check, "Path is already configured for an existing series")


def not_series_ancestor(store: SeriesStore) -> Rule:
    async def check(path, payload: SeriesResource):
        for series in await store.get_all():
            if series.id != payload.id and series.path and is_parent_path(path, series.path):
                return False
        return True

    return Rule(check, "Path is an ancestor of an existing series")


def series_not_exists(store: SeriesStore) -> Rule:
    async def check(tvdb_id, _):
        return await store.find_by_tvdb_id(tvdb_id) is None

    return Rule(check, "This series has already been added")


def profile_exists(profiles: ProfileDirectory) -> Rule:
    async def check(profile_id, _):
        return await profiles.exists(profile_id)

    return Rule(check, "Profile does not exist")


def language_profile_exists(language_profiles: ProfileDirectory) -> Rule:
    async def check(profile_id, _):
        return await language_profiles.exists(profile_id)

    return Rule(check, "Language profile does not exist")


def _blank(value: str | None) -> bool:
    return not value or value.isspace()


def build_series_pipeline(
    store: SeriesStore,
    profiles: ProfileDirectory,
    language_profiles: ProfileDirectory,
    root_folders: List[str],
) -> ValidationPipeline:
    """Rules applied to series submitted through the REST endpoint."""
    shared = [
        RuleGroup("profile_id", [valid_id(), profile_exists(profiles)]),
        RuleGroup(
            "path",
            [
                valid_path(),
                not_root_folder(root_folders),
                series_path_unused(store),
                not_series_ancestor(store),
                not_system_folder(),
            ],
            when=lambda s: not _blank(s.path),
        ),
    ]

    create = [
        RuleGroup("path", [valid_path()], when=lambda s: _blank(s.root_folder_path)),
        RuleGroup("root_folder_path", [valid_path()], when=lambda s: _blank(s.path)),
        RuleGroup("tvdb_id", [greater_than_zero(), series_not_exists(store)]),
        RuleGroup(
            "language_profile_id",
            [language_profile_exists(language_profiles)],
            when=lambda s: s.language_profile_id != 0,
        ),
    ]

    update = [
        RuleGroup("path", [valid_path()]),
        RuleGroup("language_profile_id", [language_profile_exists(language_profiles)]),
    ]

    return ValidationPipeline(shared=shared, create=create, update=update)
