"""
preset_engine.errors - Exceptions raised by the import pipeline.

Every fatal error derives from PresetError and aborts the import before
anything is written.  MissingFieldTypeWarning is never raised: the
reconciler collects one per skipped field and the importer reports them.
"""

from __future__ import annotations


class PresetError(Exception):
    """Base class for fatal import errors."""
    status_code = 400
    default_message = "Preset import failed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)


class PresetNotFoundError(PresetError):
    """The requested preset exists neither on disk nor in the content store."""
    status_code = 404
    default_message = "This is not a preset"

    def __init__(self, directory: str):
        self.directory = directory
        super().__init__(f"{self.default_message}: {directory}")


class ParseError(PresetError):
    """preset.xml is missing or malformed."""
    status_code = 422
    default_message = "Invalid preset.xml"


class NotInjectiveMappingError(PresetError):
    """Two imported fields were mapped onto the same existing field."""
    status_code = 409
    default_message = "Not an injective map"

    def __init__(self, field_id: int):
        self.field_id = field_id
        super().__init__(
            f"{self.default_message}: existing field {field_id} chosen more than once"
        )


class CannotImportError(PresetError):
    """The upload directory given to the importer is unusable."""
    default_message = "Cannot import"


class MissingFieldTypeWarning(UserWarning):
    """An imported field names a type with no registered handler."""

    def __init__(self, field_name: str, field_type: str):
        self.field_name = field_name
        self.field_type = field_type
        super().__init__(f"No handler for field type {field_type!r} (field {field_name!r})")
