"""
db - Database layer.

Public API:
    init_db()       → create engine + tables
    get_session()   → new Session
    DataModule, DataField, DataRecord, DataContent, StoredFile → ORM models
"""

from db.engine import init_db, get_engine, get_session          # noqa: F401
from db.models import (                                          # noqa: F401
    Base, DataModule, DataField, DataRecord, DataContent, StoredFile,
)
