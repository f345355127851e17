"""
preset_engine.upload - Unpack an uploaded preset zip for import.
"""

from __future__ import annotations

import io
import logging
import uuid
import zipfile
from pathlib import Path

import config
from preset_engine.errors import CannotImportError

logger = logging.getLogger(__name__)


def stage_upload(content: bytes) -> str:
    """
    Extract *content* into TEMP_DIR/forms/<new name> and return that name,
    which the importer accepts as its ``directory`` parameter.
    """
    if len(content) > config.MAX_PRESET_UPLOAD:
        raise CannotImportError("Preset file is too large")
    try:
        archive = zipfile.ZipFile(io.BytesIO(content))
    except zipfile.BadZipFile as exc:
        raise CannotImportError(f"Not a preset zip: {exc}") from exc

    name = uuid.uuid4().hex
    target = (config.TEMP_DIR / "forms" / name).resolve()
    with archive:
        members = archive.infolist()
        if sum(member.file_size for member in members) > config.MAX_PRESET_UPLOAD:
            raise CannotImportError("Preset file is too large once unpacked")
        for member in members:
            dest = (target / member.filename).resolve()
            if target not in dest.parents and dest != target:
                raise CannotImportError(f"Unsafe path in preset zip: {member.filename}")
        target.mkdir(parents=True, exist_ok=True)
        archive.extractall(target)

    _flatten_single_folder(target)
    logger.info("Staged preset upload in %s (%d entries)", target, len(members))
    return name


def _flatten_single_folder(target: Path):
    """Zips made from a folder hold one top-level directory; lift its files up."""
    entries = list(target.iterdir())
    if len(entries) != 1 or not entries[0].is_dir():
        return
    inner = entries[0]
    if (target / "preset.xml").exists() or not (inner / "preset.xml").exists():
        return
    for item in inner.iterdir():
        item.rename(target / item.name)
    inner.rmdir()
