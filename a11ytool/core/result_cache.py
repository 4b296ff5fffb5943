import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from pydantic import ValidationError

from a11ytool.core.models import CacheEntry, EntitlementResult
from a11ytool.core.storage import CACHE_KEY, StorageBackend
from a11ytool.utils.exceptions import CacheError

logger = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(hours=24)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ResultCache:
    """
    Last entitlement decision, persisted as a single record.

    The in-process copy and the persisted copy are judged by the same TTL
    check, so both sides of the 24h boundary agree. Corrupt, stale or
    unreadable records read as a miss; write failures are logged and dropped.
    """

    def __init__(
        self,
        storage: StorageBackend,
        ttl: timedelta = DEFAULT_TTL,
        clock: Optional[Callable[[], datetime]] = None,
        key: str = CACHE_KEY,
    ):
        self.storage = storage
        self.ttl = ttl
        self.clock = clock or utc_now
        self.key = key
        self._memory: Optional[CacheEntry] = None

    def is_fresh(self, entry: CacheEntry) -> bool:
        timestamp = entry.timestamp
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        return self.clock() - timestamp < self.ttl

    def _load(self) -> Optional[CacheEntry]:
        try:
            data = self.storage.read(self.key)
        except CacheError as e:
            logger.debug(f"Cache read failed, proceeding without cache: {e}")
            return None
        except Exception as e:
            logger.warning(f"Unexpected cache read failure, proceeding without cache: {e}")
            return None

        if not data or not data.get("result"):
            return None

        try:
            return CacheEntry.model_validate(data)
        except ValidationError as e:
            logger.debug(f"Ignoring corrupt cache record: {e.error_count()} error(s)")
            return None

    def read(self) -> Optional[EntitlementResult]:
        if self._memory is not None and self.is_fresh(self._memory):
            return self._memory.result

        entry = self._load()
        if entry is None or not self.is_fresh(entry):
            return None

        self._memory = entry
        return entry.result

    def write(self, result: EntitlementResult) -> None:
        entry = CacheEntry(
            timestamp=self.clock(),
            result=result.model_copy(update={"from_cache": False}),
        )
        self._memory = entry
        try:
            self.storage.write(self.key, entry.to_record())
        except Exception as e:
            logger.warning(f"Failed to write license cache: {e}")

    def clear(self, purge: bool = False) -> None:
        """Overwrite the record with an empty payload, or remove it when purging"""
        self._memory = None
        try:
            if purge:
                self.storage.remove(self.key)
            else:
                self.storage.write(self.key, {})
        except Exception as e:
            logger.warning(f"Failed to clear license cache: {e}")
