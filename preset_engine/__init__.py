"""
preset_engine - Data activity preset import pipeline.

Public API:
    PresetImporter.create_from_parameters(manager, params) → PresetImporter
    PresetImporter.import_preset(overwrite_settings)     → ImportResult
    stage_upload(zip_bytes)                               → directory name
"""

from preset_engine.importer import (                   # noqa: F401
    PresetImporter,
    UploadPresetImporter,
    ExistingPresetImporter,
)
from preset_engine.report import ImportResult           # noqa: F401
from preset_engine.upload import stage_upload           # noqa: F401
from preset_engine.errors import (                      # noqa: F401
    PresetError,
    PresetNotFoundError,
    ParseError,
    NotInjectiveMappingError,
    CannotImportError,
    MissingFieldTypeWarning,
)
