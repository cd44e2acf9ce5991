from cinegraph.storage.base import PreferenceStore
from cinegraph.storage.sqlite import SQLiteStorage

__all__ = ["PreferenceStore", "SQLiteStorage"]
