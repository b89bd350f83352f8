"""In-memory key-value store for tests and single-process development."""

from shared.store.port import KeyValueStore


class InMemoryStore(KeyValueStore):
    """Dictionary-backed store. Records every write for test assertions."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})
        self.writes: list[tuple[str, str | None]] = []

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value
        self.writes.append((key, value))

    def delete(self, key: str) -> None:
        self._data.pop(key, None)
        self.writes.append((key, None))

    def keys(self) -> list[str]:
        return list(self._data)

    def reset(self) -> None:
        """Drop all data and recorded writes."""
        self._data.clear()
        self.writes.clear()
