"""Storage backends for uploaded degree documents."""

from __future__ import annotations

from flask import current_app

from .abstract_storage import AbstractStorage
from .local_storage import LocalStorage

EXTENSION_KEY = "degree_storage"


def init_storage(app, storage: AbstractStorage | None = None) -> AbstractStorage:
    """Attach a storage backend to the app, defaulting to the upload directory."""

    backend = storage or LocalStorage(app.config.get("UPLOAD_DIR"))
    app.extensions[EXTENSION_KEY] = backend
    return backend


def get_storage() -> AbstractStorage:
    return current_app.extensions[EXTENSION_KEY]


__all__ = ["AbstractStorage", "LocalStorage", "init_storage", "get_storage"]
