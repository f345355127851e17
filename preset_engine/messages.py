"""
preset_engine.messages - User-facing message texts.
"""

IMPORT_SUCCESS = "Preset successfully applied."
ADD_ENTRIES = "Add entries"
TO_DATABASE = "to this database."
MISSING_FIELD_TYPE = (
    "The following fields from the preset could not be imported because "
    "the field type does not exist:"
)


def import_success(has_entries: bool, module_id: int) -> str:
    if has_entries:
        return IMPORT_SUCCESS
    return f"{IMPORT_SUCCESS} {ADD_ENTRIES} (edit.php?d={module_id}) {TO_DATABASE}"


def missing_field_types(names: list[str]) -> str:
    return MISSING_FIELD_TYPE + " " + ", ".join(names)
