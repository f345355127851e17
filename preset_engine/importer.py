"""
preset_engine.importer - Top-level orchestrator.

Coordinates sources → xml_parser → reconciler → settings_merge and
produces an ImportResult.  The importer flushes its writes through the
DataStore; committing or rolling back is left to the caller.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

import config
from db.models import DataField, DataModule
from preset_engine import messages
from preset_engine.errors import CannotImportError
from preset_engine.reconciler import FieldReconciler, NEW_FIELD, suggest_mapping
from preset_engine.report import ImportResult
from preset_engine.settings_merge import merge_settings
from preset_engine.sources import PresetSource, resolve_source
from preset_engine.xml_parser import FieldDescriptor, parse_preset
from services.data_manager import DataManager
from services.file_storage import FileStorage
from services.notifier import Notifier

logger = logging.getLogger(__name__)


@dataclass
class PresetSettings:
    settings: dict[str, object]
    import_fields: list[FieldDescriptor]
    current_fields: dict[int, DataField]


def mapping_from_parameters(params) -> dict[int, int]:
    """Collect ``field_<n>=<existing id>`` request parameters."""
    mapping: dict[int, int] = {}
    for key, value in params.items():
        if not key.startswith("field_"):
            continue
        try:
            mapping[int(key[len("field_"):])] = int(value)
        except (TypeError, ValueError):
            continue
    return mapping


class PresetImporter:
    """
    Import one preset into the activity wrapped by *manager*.

    Parameters
    ----------
    manager : DataManager for the target activity
    directory : preset location, a directory path or a content-store name
    storage : content store searched when *directory* is not on disk
    notifier : receives user-facing success/warning messages
    field_mapping : temporary_id → existing field id chosen by the user
    """

    def __init__(
        self,
        manager: DataManager,
        directory: str | Path,
        *,
        storage: FileStorage | None = None,
        notifier: Notifier | None = None,
        field_mapping: dict[int, int] | None = None,
    ):
        self.manager = manager
        self.directory = str(directory)
        self.storage = storage
        self.notifier = notifier or Notifier()
        self.field_mapping = dict(field_mapping or {})
        self._source: PresetSource | None = None

    def get_directory(self) -> str:
        return Path(self.directory.rstrip("/")).name

    def get_source(self) -> PresetSource:
        if self._source is None:
            self._source = resolve_source(self.directory, self.storage)
        return self._source

    def get_preset_settings(self) -> PresetSettings:
        module = self.manager.get_instance()
        parsed = parse_preset(self.get_source(), module.id)
        return PresetSettings(
            settings=parsed.settings,
            import_fields=parsed.fields,
            current_fields=self.manager.get_field_records(),
        )

    def import_preset(self, overwrite_settings: bool) -> ImportResult:
        """
        Apply the preset.  Fatal problems raise a PresetError before any
        field or setting is written; missing field types are reported in
        the result instead.
        """
        preset = self.get_preset_settings()
        module = self.manager.get_instance()
        store = self.manager.store

        logger.info("Importing preset %r into data %s (overwrite=%s)",
                    self.get_directory(), module.id, overwrite_settings)

        reconciler = FieldReconciler(store, module, preset.current_fields,
                                     self.field_mapping)
        outcome = reconciler.run(preset.import_fields)
        if outcome.missing_types:
            self.notifier.warning(messages.missing_field_types(outcome.missing_types))

        merge_settings(module, preset.settings, overwrite_settings, store)
        store.update_module(module)

        return ImportResult(
            success=self.cleanup(),
            missing_types=outcome.missing_types,
            created=outcome.created,
            updated=outcome.updated,
            deleted=outcome.deleted,
        )

    def cleanup(self) -> bool:
        return True

    def needs_mapping(self) -> bool:
        return self.manager.has_fields()

    def get_preset_selector(self) -> dict:
        return {"name": "directory", "value": self.get_directory()}

    def get_mapping_information(self) -> dict:
        """Preview of what an import with name-based mapping would do."""
        preset = self.get_preset_settings()
        suggested = suggest_mapping(preset.import_fields, preset.current_fields)
        to_create, to_update = [], []
        for descriptor in preset.import_fields:
            cid = suggested.get(descriptor.temporary_id, NEW_FIELD)
            if cid == NEW_FIELD:
                to_create.append(descriptor.name)
            else:
                to_update.append({"name": descriptor.name, "fieldid": cid})
        kept = set(suggested.values())
        to_remove = [f.name for cid, f in preset.current_fields.items() if cid not in kept]
        return {
            "needs_mapping": self.needs_mapping(),
            "selector": self.get_preset_selector(),
            "fields_to_create": to_create,
            "fields_to_update": to_update,
            "fields_to_remove": to_remove,
            "mapping": {f"field_{k}": v for k, v in suggested.items()},
        }

    def finish_import_process(self, overwrite_settings: bool,
                              instance: DataModule) -> ImportResult:
        """Import, then tell the user whether entries still need adding."""
        result = self.import_preset(overwrite_settings)
        has_entries = self.manager.store.count_entries(instance.id) > 0
        self.notifier.success(messages.import_success(has_entries, instance.id))
        result.messages = list(self.notifier.messages)
        return result

    @staticmethod
    def create_from_parameters(
        manager: DataManager,
        params,
        *,
        storage: FileStorage | None = None,
        notifier: Notifier | None = None,
    ) -> "PresetImporter":
        """
        ``fullname`` selects a saved preset; otherwise ``directory`` names
        an unpacked upload under TEMP_DIR/forms.
        """
        mapping = mapping_from_parameters(params)
        fullname = (params.get("fullname") or "").strip()
        if fullname:
            return ExistingPresetImporter(manager, fullname, storage=storage,
                                          notifier=notifier, field_mapping=mapping)

        name = Path((params.get("directory") or "").strip()).name
        if not name:
            raise CannotImportError("No preset directory given")
        presetdir = config.TEMP_DIR / "forms" / name
        if not presetdir.is_dir():
            raise CannotImportError(f"Cannot import: {name} is not an uploaded preset")
        return UploadPresetImporter(manager, presetdir, storage=storage,
                                    notifier=notifier, field_mapping=mapping)


class UploadPresetImporter(PresetImporter):
    """Preset unpacked from an uploaded zip.  The directory is removed afterwards."""

    def cleanup(self) -> bool:
        shutil.rmtree(self.directory, ignore_errors=True)
        return True


class ExistingPresetImporter(PresetImporter):
    """
    Preset saved on the site, addressed as ``<userid>/<shortname>``.
    userid 0 means a built-in preset under PRESETS_DIR; anything else
    lives in the content store.
    """

    def __init__(self, manager: DataManager, fullname: str, **kwargs):
        userid, _, shortname = fullname.partition("/")
        if not shortname:
            userid, shortname = "0", userid
        self.userid = int(userid) if userid.isdigit() else 0
        self.shortname = Path(shortname).name
        if self.userid == 0:
            directory = config.PRESETS_DIR / self.shortname
        else:
            directory = f"{self.userid}/{self.shortname}"
        super().__init__(manager, directory, **kwargs)

    def get_source(self) -> PresetSource:
        # User presets are never read from the working directory
        if self._source is None:
            self._source = resolve_source(self.directory, self.storage,
                                          check_disk=self.userid == 0)
        return self._source

    def get_preset_selector(self) -> dict:
        return {"name": "fullname", "value": f"{self.userid}/{self.shortname}"}
