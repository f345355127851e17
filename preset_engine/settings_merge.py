"""
preset_engine.settings_merge - Overwrite activity settings from a preset.
"""

from __future__ import annotations

import re

from db.models import DataModule
from preset_engine.field_map import TEMPLATE_KEYS
from services.data_store import DataStore

# Plain decimal or exponent notation; no inf/nan, no digit separators
_NUMERIC = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$")


def _is_numeric(value) -> bool:
    return bool(_NUMERIC.match(str(value)))


def resolve_defaultsort(settings: dict, store: DataStore, module_id: int) -> int:
    """
    Presets store the sort field by name.  A numeric value is a field id
    from the exporting site and is meaningless here, so it becomes 0.
    """
    value = settings.get("defaultsort")
    if value in (None, "", "0", 0):
        return 0
    if _is_numeric(value):
        return 0
    return int(store.find_field_id_by_name(module_id, str(value)) or 0)


def overwrite_keys(settings: dict, overwrite_all: bool) -> list[str]:
    if overwrite_all:
        return list(settings.keys())
    return list(TEMPLATE_KEYS)


def merge_settings(
    module: DataModule,
    settings: dict,
    overwrite_all: bool,
    store: DataStore,
) -> list[str]:
    """
    Resolve defaultsort in *settings*, then copy the selected keys onto
    *module*.  Returns the names of the attributes that were written.
    """
    settings["defaultsort"] = resolve_defaultsort(settings, store, module.id)

    wanted = set(overwrite_keys(settings, overwrite_all))
    written = []
    for name in DataModule.setting_names():
        if name in wanted and name in settings:
            setattr(module, name, settings[name])
            written.append(name)
    return written
