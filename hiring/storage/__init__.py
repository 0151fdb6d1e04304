from flask import current_app

from hiring.storage.base import Storage
from hiring.storage.memory import MemoryStorage
from hiring.storage.sql import SqlStorage

EXTENSION_KEY = "hiring.storage"


def get_storage() -> Storage:
    """Storage bound to the current Flask application."""
    return current_app.extensions[EXTENSION_KEY]


__all__ = ["Storage", "MemoryStorage", "SqlStorage", "get_storage", "EXTENSION_KEY"]
