"""
DATAPRESET - Centralised configuration.

All tunables live here.  Every other module imports from config
instead of reading os.environ directly.
"""

from __future__ import annotations
import os
from pathlib import Path


# ── Paths ──────────────────────────────────────────────────────────────
BASE_DIR    = Path(__file__).resolve().parent
# Uploaded preset zips are unpacked under TEMP_DIR/forms/<directory>
TEMP_DIR    = Path(os.environ.get("DATAPRESET_TEMP_DIR", BASE_DIR / "temp"))
# Built-in presets shipped with the application (userid 0)
PRESETS_DIR = Path(os.environ.get("DATAPRESET_PRESETS_DIR", BASE_DIR / "presets"))

# ── Content store: preset file area ────────────────────────────────────
PRESET_CONTEXT   = 1
PRESET_COMPONENT = "mod_data"
PRESET_FILEAREA  = "site_presets"

# ── Database ───────────────────────────────────────────────────────────
DB_URL = os.environ.get("DATAPRESET_DB", f"sqlite:///{BASE_DIR / 'datapreset.sqlite'}")

# ── Server ─────────────────────────────────────────────────────────────
HOST   = os.environ.get("DATAPRESET_HOST", "0.0.0.0")
PORT   = int(os.environ.get("DATAPRESET_PORT", "5000"))
DEBUG  = os.environ.get("DATAPRESET_DEBUG", "0") == "1"
SECRET = os.environ.get("DATAPRESET_SECRET", "datapreset-dev-key-change-in-prod")

# ── Logging ────────────────────────────────────────────────────────────
LOG_LEVEL = os.environ.get("DATAPRESET_LOG_LEVEL", "INFO").upper()

# ── Uploads ────────────────────────────────────────────────────────────
MAX_PRESET_UPLOAD = 20 * 1024 * 1024
