from functools import lru_cache

from hallway.config import get_settings
from hallway.services.storage import FileStorage, Storage


@lru_cache(maxsize=1)
def _default_storage() -> FileStorage:
    storage = FileStorage(get_settings())
    storage.ensure_storage()
    return storage


def get_storage() -> Storage:
    return _default_storage()
