"""
preset_engine.reconciler - Bring the activity's fields in line with a preset.

Three passes over the imported descriptors:
  1. validate  - the caller's mapping must be injective; nothing is written
                 until this has passed
  2. apply     - mapped fields are updated in place, the rest are created
  3. cleanup   - existing fields nobody mapped onto are deleted together
                 with their stored values
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from db.models import DataField, DataModule
from preset_engine.errors import MissingFieldTypeWarning, NotInjectiveMappingError
from preset_engine.field_map import FIELD_SKIP_ON_UPDATE
from preset_engine.field_types import FieldType, get_field_type
from preset_engine.xml_parser import FieldDescriptor
from services.data_store import DataStore

logger = logging.getLogger(__name__)

NEW_FIELD = -1


@dataclass
class ReconcileOutcome:
    created: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)
    warnings: list[MissingFieldTypeWarning] = field(default_factory=list)

    @property
    def missing_types(self) -> list[str]:
        return [w.field_name for w in self.warnings]


class FieldReconciler:
    """
    Stateless apart from the inputs of one import run.  ``mapping`` maps a
    descriptor's temporary_id to the id of the existing field it replaces;
    absent or NEW_FIELD means "create".
    """

    def __init__(
        self,
        store: DataStore,
        module: DataModule,
        current_fields: dict[int, DataField],
        mapping: dict[int, int] | None = None,
    ):
        self.store = store
        self.module = module
        self.current_fields = current_fields
        self.mapping = mapping or {}

    def run(self, import_fields: list[FieldDescriptor]) -> ReconcileOutcome:
        preserved = self.validate(import_fields)
        outcome = ReconcileOutcome()
        self.apply(import_fields, outcome)
        self.cleanup(preserved, outcome)
        return outcome

    # ── Passes ─────────────────────────────────────────────────────────

    def target_of(self, descriptor: FieldDescriptor) -> int:
        return int(self.mapping.get(descriptor.temporary_id, NEW_FIELD))

    def validate(self, import_fields: list[FieldDescriptor]) -> set[int]:
        """Return the set of existing field ids the preset keeps."""
        preserved: set[int] = set()
        for descriptor in import_fields:
            cid = self.target_of(descriptor)
            if cid == NEW_FIELD:
                continue
            if cid in preserved:
                raise NotInjectiveMappingError(cid)
            preserved.add(cid)
        return preserved

    def apply(self, import_fields: list[FieldDescriptor], outcome: ReconcileOutcome):
        for descriptor in import_fields:
            cid = self.target_of(descriptor)
            if cid != NEW_FIELD and cid in self.current_fields:
                self._update(self.current_fields[cid], descriptor)
                outcome.updated.append(descriptor.name)
                continue

            handler_cls = get_field_type(descriptor.type)
            if handler_cls is None:
                warning = MissingFieldTypeWarning(descriptor.name, descriptor.type)
                logger.warning(str(warning))
                outcome.warnings.append(warning)
                continue

            handler = handler_cls.from_attributes(descriptor.attributes(), self.module)
            handler.insert_field(self.store)
            outcome.created.append(descriptor.name)

    def cleanup(self, preserved: set[int], outcome: ReconcileOutcome):
        for cid, current in self.current_fields.items():
            if cid in preserved:
                continue
            logger.info("Deleting field %r (id=%s)", current.name, cid)
            name = current.name
            self.store.delete_content_by_field(cid)
            self.store.delete_field(cid)
            outcome.deleted.append(name)

    # ── Private helpers ────────────────────────────────────────────────

    def _update(self, current: DataField, descriptor: FieldDescriptor):
        # The stored type decides the handler, even if the preset changes it
        handler_cls = get_field_type(current.type) or FieldType
        handler = handler_cls(current, self.module)
        ignored = handler.apply(descriptor.attributes(), skip=FIELD_SKIP_ON_UPDATE)
        if ignored:
            logger.debug("Field %r: ignoring unknown attributes %s",
                         descriptor.name, ", ".join(sorted(ignored)))
        handler.field.dataid = self.module.id
        handler.update_field(self.store)


def suggest_mapping(
    import_fields: list[FieldDescriptor],
    current_fields: dict[int, DataField],
) -> dict[int, int]:
    """
    Map each imported field onto an unclaimed existing field with the same
    name and type.  The result is injective by construction.
    """
    available = dict(current_fields)
    suggested: dict[int, int] = {}
    for descriptor in import_fields:
        for cid, current in available.items():
            if current.name == descriptor.name and current.type == descriptor.type:
                suggested[descriptor.temporary_id] = cid
                del available[cid]
                break
    return suggested
