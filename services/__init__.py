"""
services - Persistence and support layer sitting between API and DB.
"""

from services.data_store import DataStore          # noqa: F401
from services.data_manager import DataManager      # noqa: F401
from services.file_storage import FileStorage      # noqa: F401
from services.notifier import Notifier             # noqa: F401
