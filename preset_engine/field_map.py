"""
preset_engine.field_map - Which preset keys reach the activity, and how.
"""

from services.data_manager import DataManager

# Settings copied from the <settings> block; anything else is dropped
ALLOWED_SETTINGS = (
    "intro",
    "comments",
    "requiredentries",
    "requiredentriestoview",
    "maxentries",
    "rssarticles",
    "approval",
    "defaultsortdir",
    "defaultsort",
)

# Template name → file name inside a preset bundle
TEMPLATES_LIST: dict[str, str] = DataManager.TEMPLATES_LIST

# Keys overwritten when the caller keeps the activity's own settings
TEMPLATE_KEYS = (
    "singletemplate",
    "listtemplate",
    "listtemplateheader",
    "listtemplatefooter",
    "addtemplate",
    "rsstemplate",
    "rsstitletemplate",
    "csstemplate",
    "jstemplate",
    "asearchtemplate",
    "defaultsortdir",
    "defaultsort",
)

PRESET_FILE = "preset.xml"

# Field attributes that are never copied onto an existing field
FIELD_SKIP_ON_UPDATE = frozenset({"id", "similarfield"})

# Allowed settings stored as integers on the activity
INTEGER_SETTINGS = frozenset(ALLOWED_SETTINGS) - {"intro", "defaultsort"}
