"""
Storage adapters for the single-record cache and usage slots.

Every adapter exposes the same capability: read(key), write(key, value),
remove(key). Values are JSON-compatible dicts. Adapters raise CacheError on
any failure; callers decide whether to swallow it.
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, MutableMapping, Optional, Protocol, Union

from a11ytool.utils.exceptions import CacheError, ConfigurationError

logger = logging.getLogger(__name__)

CACHE_KEY = "license_cache"
USAGE_KEY = "usage"


class StorageBackend(Protocol):
    def read(self, key: str) -> Optional[Dict[str, Any]]: ...

    def write(self, key: str, value: Dict[str, Any]) -> None: ...

    def remove(self, key: str) -> None: ...


class FileStorage:
    """One JSON file per key inside a directory"""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        # license_cache -> .tool-license-cache.json
        return self.directory / f".tool-{key.replace('_', '-')}.json"

    def read(self, key: str) -> Optional[Dict[str, Any]]:
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise CacheError(f"Failed to read {path}: {e}") from e
        if not isinstance(data, dict):
            raise CacheError(f"Unexpected content in {path}")
        return data

    def write(self, key: str, value: Dict[str, Any]) -> None:
        path = self.path_for(key)
        try:
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(value, f, indent=2)
        except (OSError, TypeError, ValueError) as e:
            raise CacheError(f"Failed to write {path}: {e}") from e

    def remove(self, key: str) -> None:
        try:
            self.path_for(key).unlink(missing_ok=True)
        except OSError as e:
            raise CacheError(f"Failed to remove {self.path_for(key)}: {e}") from e


class BrowserStorage:
    """localStorage-style store: string values under prefixed keys.

    Wraps any string-to-string mapping (a localStorage bridge, a shelf, a dict).
    """

    def __init__(self, store: MutableMapping[str, str], prefix: str = "a11y_"):
        self.store = store
        self.prefix = prefix

    def _item_key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def read(self, key: str) -> Optional[Dict[str, Any]]:
        try:
            item = self.store.get(self._item_key(key))
            if not item:
                return None
            data = json.loads(item)
        except Exception as e:
            raise CacheError(f"Failed to read {self._item_key(key)}: {e}") from e
        if not isinstance(data, dict):
            raise CacheError(f"Unexpected content in {self._item_key(key)}")
        return data

    def write(self, key: str, value: Dict[str, Any]) -> None:
        try:
            self.store[self._item_key(key)] = json.dumps(value)
        except Exception as e:
            raise CacheError(f"Failed to write {self._item_key(key)}: {e}") from e

    def remove(self, key: str) -> None:
        try:
            self.store.pop(self._item_key(key), None)
        except Exception as e:
            raise CacheError(f"Failed to remove {self._item_key(key)}: {e}") from e


class MemoryStorage:
    """Process-local store, mostly for tests"""

    def __init__(self):
        self.records: Dict[str, str] = {}

    def read(self, key: str) -> Optional[Dict[str, Any]]:
        if key not in self.records:
            return None
        return json.loads(self.records[key])

    def write(self, key: str, value: Dict[str, Any]) -> None:
        try:
            self.records[key] = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise CacheError(f"Failed to serialize {key}: {e}") from e

    def remove(self, key: str) -> None:
        self.records.pop(key, None)


def build_storage(backend: str, directory: Optional[Path] = None,
                  store: Optional[MutableMapping[str, str]] = None) -> StorageBackend:
    """Create the storage adapter named by the STORAGE_BACKEND setting"""
    if backend == "file":
        if directory is None:
            raise ConfigurationError("File storage requires a directory")
        logger.debug(f"Using file storage in {directory}")
        return FileStorage(directory)
    if backend == "browser":
        if store is None:
            raise ConfigurationError("Browser storage requires a key/value store")
        return BrowserStorage(store)
    if backend == "memory":
        return MemoryStorage()
    raise ConfigurationError(f"Unknown storage backend: {backend}")
