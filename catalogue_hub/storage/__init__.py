import logging
from flask import current_app

from catalogue_hub.storage.base import Storage

logger = logging.getLogger(__name__)


def init_storage(app, storage=None):
    """Attach a storage backend to the app according to STORAGE_BACKEND."""
    if storage is None:
        backend = app.config.get('STORAGE_BACKEND', 'database')
        if backend == 'memory':
            from catalogue_hub.storage.memory import MemStorage
            storage = MemStorage()
        elif backend == 'database':
            from catalogue_hub.storage.database import DatabaseStorage
            from catalogue_hub import db
            storage = DatabaseStorage()
            with app.app_context():
                db.create_all()
        else:
            raise ValueError(f'Unknown STORAGE_BACKEND: {backend}')
    app.extensions['storage'] = storage
    logger.debug(f"Storage backend: {type(storage).__name__}")
    return storage


def get_storage() -> Storage:
    return current_app.extensions['storage']


__all__ = ['Storage', 'init_storage', 'get_storage']
