"""
preset_engine.sources - Where a preset's files are read from.

A preset is either a directory on disk (built-in presets, unpacked
uploads) or a directory in the content store's preset file area (user
presets).  resolve_source() picks the backend once; the rest of the
pipeline only calls read().
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path

import config
from db.models import StoredFile
from preset_engine.errors import PresetNotFoundError
from preset_engine.field_map import PRESET_FILE, TEMPLATES_LIST
from services.file_storage import FileStorage

logger = logging.getLogger(__name__)


class PresetSource(ABC):
    """Read named files from one preset bundle."""

    name: str

    @abstractmethod
    def read(self, filename: str) -> bytes | None:
        """Return the file's bytes, or None if the bundle has no such file."""


class DirectorySource(PresetSource):

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self.name = self.path.name

    def read(self, filename: str) -> bytes | None:
        target = self.path / filename
        if not target.is_file():
            return None
        return target.read_bytes()

    def __repr__(self):
        return f"DirectorySource({str(self.path)!r})"


class ContentStoreSource(PresetSource):

    def __init__(self, storage: FileStorage, directory: StoredFile):
        self.storage = storage
        self.filepath = directory.filepath
        self.itemid = directory.itemid
        self.name = self.filepath.strip("/")

    def read(self, filename: str) -> bytes | None:
        stored = self.storage.get_file(
            config.PRESET_CONTEXT,
            config.PRESET_COMPONENT,
            config.PRESET_FILEAREA,
            self.itemid,
            self.filepath,
            filename,
        )
        if stored is None:
            return None
        return stored.get_content()

    def __repr__(self):
        return f"ContentStoreSource({self.filepath!r})"


def is_directory_a_preset(directory: str | Path) -> bool:
    """True when *directory* holds preset.xml and every template file."""
    path = Path(directory)
    if not path.is_dir():
        return False
    required = [PRESET_FILE, *TEMPLATES_LIST.values()]
    return all((path / name).is_file() for name in required)


def find_stored_preset(storage: FileStorage, directory: str) -> StoredFile | None:
    """
    Look for a preset directory in the content store whose name equals
    the last element of *directory*.  The area root never matches.
    """
    wanted = str(directory).rstrip("/").split("/")[-1]
    found = None
    for entry in storage.get_area_files(config.PRESET_CONTEXT,
                                        config.PRESET_COMPONENT,
                                        config.PRESET_FILEAREA):
        if not entry.is_directory() or entry.filepath == "/":
            continue
        if entry.filepath.strip("/") == wanted:
            found = entry
    return found


def resolve_source(
    directory: str | Path,
    storage: FileStorage | None,
    *,
    check_disk: bool = True,
) -> PresetSource:
    """
    Pick the backend for *directory* or raise PresetNotFoundError.
    With ``check_disk=False`` only the content store is searched.
    """
    if check_disk and is_directory_a_preset(directory):
        logger.debug("Reading preset from directory %s", directory)
        return DirectorySource(directory)

    if storage is not None:
        entry = find_stored_preset(storage, str(directory))
        if entry is not None:
            logger.debug("Reading preset from content store %s", entry.filepath)
            return ContentStoreSource(storage, entry)

    raise PresetNotFoundError(str(directory))
