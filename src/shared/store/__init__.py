"""Key-value store factory.

Provides get_store() / set_store() / reset_store():
- InMemoryStore when ROOTSTORE_STORE_PATH is unset (development, tests)
- JsonFileStore backed by ROOTSTORE_STORE_PATH otherwise
"""

import os

from shared.store.port import KeyValueStore

_current_store: KeyValueStore | None = None


def get_store() -> KeyValueStore:
    """Return the current key-value store, creating the default on first use."""
    global _current_store
    if _current_store is None:
        path = os.environ.get("ROOTSTORE_STORE_PATH")
        if path:
            from shared.store.json_file import JsonFileStore

            _current_store = JsonFileStore(path)
        else:
            from shared.store.memory import InMemoryStore

            _current_store = InMemoryStore()
    return _current_store


def set_store(store: KeyValueStore) -> None:
    """Override the active store (useful for tests)."""
    global _current_store
    _current_store = store


def reset_store() -> None:
    """Reset to the default store."""
    global _current_store
    _current_store = None
