import logging
from datetime import datetime
from typing import Callable, Optional

from pydantic import ValidationError

from a11ytool.core.domain import normalize_domain
from a11ytool.core.models import PackageInfo, UsageEntry, UsageRecord
from a11ytool.core.result_cache import utc_now
from a11ytool.core.storage import USAGE_KEY, StorageBackend
from a11ytool.utils.exceptions import CacheError

logger = logging.getLogger(__name__)

MAX_USAGE_ENTRIES = 100


class UsageTracker:
    """Write-only invocation history, bounded to the most recent entries"""

    def __init__(
        self,
        storage: StorageBackend,
        max_entries: int = MAX_USAGE_ENTRIES,
        clock: Optional[Callable[[], datetime]] = None,
        key: str = USAGE_KEY,
    ):
        self.storage = storage
        self.max_entries = max_entries
        self.clock = clock or utc_now
        self.key = key

    def read(self) -> Optional[UsageRecord]:
        try:
            data = self.storage.read(self.key)
        except CacheError as e:
            logger.debug(f"Usage read failed: {e}")
            return None
        except Exception as e:
            logger.warning(f"Unexpected usage read failure: {e}")
            return None
        if not data:
            return None
        try:
            return UsageRecord.model_validate(data)
        except ValidationError:
            logger.debug("Ignoring corrupt usage record")
            return None

    def record(self, package_info: Optional[PackageInfo], domain: Optional[str]) -> None:
        """Append one use; failures are logged and dropped"""
        try:
            now = self.clock()
            normalized = normalize_domain(domain)
            usage = self.read() or UsageRecord(first_used=now)

            usage.last_used = now
            usage.package_name = package_info.name if package_info else "unknown"
            usage.package_version = package_info.version if package_info else "unknown"
            usage.domain = normalized
            usage.uses.append(UsageEntry(timestamp=now, domain=normalized))

            if len(usage.uses) > self.max_entries:
                usage.uses = usage.uses[-self.max_entries:] if self.max_entries > 0 else []

            self.storage.write(self.key, usage.to_record())
        except Exception as e:
            logger.warning(f"Usage tracking failed: {e}")

    def clear(self, purge: bool = False) -> None:
        try:
            if purge:
                self.storage.remove(self.key)
            else:
                self.storage.write(self.key, {})
        except Exception as e:
            logger.warning(f"Failed to clear usage record: {e}")
