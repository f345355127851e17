"""
services.data_manager - Per-activity facade handed to the preset importer.
"""

from __future__ import annotations

from db.models import DataModule, DataField
from services.data_store import DataStore


class DataManager:
    """Wraps one data activity and the store that persists it."""

    # Template name → file name inside a preset bundle
    TEMPLATES_LIST: dict[str, str] = {
        "listtemplate":       "listtemplate.html",
        "singletemplate":     "singletemplate.html",
        "asearchtemplate":    "asearchtemplate.html",
        "addtemplate":        "addtemplate.html",
        "rsstemplate":        "rsstemplate.html",
        "csstemplate":        "csstemplate.css",
        "jstemplate":         "jstemplate.js",
        "listtemplateheader": "listtemplateheader.html",
        "listtemplatefooter": "listtemplatefooter.html",
        "rsstitletemplate":   "rsstitletemplate.html",
    }

    def __init__(self, store: DataStore, instance: DataModule):
        self.store = store
        self._instance = instance

    @classmethod
    def from_id(cls, store: DataStore, module_id: int) -> "DataManager | None":
        module = store.get_module(module_id)
        if module is None:
            return None
        return cls(store, module)

    def get_instance(self) -> DataModule:
        return self._instance

    def get_field_records(self) -> dict[int, DataField]:
        return self.store.get_existing_fields(self._instance.id)

    def has_fields(self) -> bool:
        return bool(self.get_field_records())

    def has_records(self) -> bool:
        return self.store.count_entries(self._instance.id) > 0
