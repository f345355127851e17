"""
services.data_store - Persistence operations used by the preset importer.

All session management is the caller's responsibility (open before,
close/commit after).  Writes are flushed so later reads in the same
import see them, but nothing is committed here.
"""

from __future__ import annotations

import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from db.models import DataModule, DataField, DataRecord, DataContent

logger = logging.getLogger(__name__)


class DataStore:

    def __init__(self, session: Session):
        self.session = session

    # ── Fields ─────────────────────────────────────────────────────────

    def get_existing_fields(self, module_id: int) -> dict[int, DataField]:
        """Return the module's fields keyed by id, in id order."""
        rows = (
            self.session.query(DataField)
            .filter(DataField.dataid == module_id)
            .order_by(DataField.id)
            .all()
        )
        return {f.id: f for f in rows}

    def insert_field(self, field: DataField) -> DataField:
        self.session.add(field)
        self.session.flush()
        logger.info("Created field %r (%s) id=%s", field.name, field.type, field.id)
        return field

    def update_field(self, field: DataField) -> DataField:
        self.session.add(field)
        self.session.flush()
        return field

    def delete_field(self, field_id: int) -> None:
        field = self.session.get(DataField, field_id)
        if field is None:
            return
        self.session.delete(field)
        self.session.flush()

    def delete_content_by_field(self, field_id: int) -> int:
        """Delete every stored value of a field.  Returns rows removed."""
        removed = (
            self.session.query(DataContent)
            .filter(DataContent.fieldid == field_id)
            .delete(synchronize_session=False)
        )
        self.session.flush()
        return removed

    def find_field_id_by_name(self, module_id: int, name: str) -> int | None:
        return (
            self.session.query(DataField.id)
            .filter(DataField.dataid == module_id, DataField.name == name)
            .order_by(DataField.id)
            .limit(1)
            .scalar()
        )

    # ── Module ─────────────────────────────────────────────────────────

    def get_module(self, module_id: int) -> DataModule | None:
        return self.session.get(DataModule, module_id)

    def update_module(self, module: DataModule) -> DataModule:
        self.session.add(module)
        self.session.flush()
        return module

    # ── Entries ────────────────────────────────────────────────────────

    def count_entries(self, module_id: int) -> int:
        return (
            self.session.query(func.count(DataRecord.id))
            .filter(DataRecord.dataid == module_id)
            .scalar()
        ) or 0
