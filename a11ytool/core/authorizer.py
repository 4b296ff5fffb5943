"""
Entitlement facade.

An Authorizer is constructed once by the host application and handed to
consumers. authorize() always returns an EntitlementResult; licensing
problems degrade the tier and never propagate as exceptions.

Cache and usage files are read and written synchronously inside authorize();
only the remote call awaits, so the file I/O briefly blocks the event loop.
"""
import logging
import sys
from datetime import datetime
from typing import Any, Callable, Dict, MutableMapping, Optional

from a11ytool.config.settings import Settings
from a11ytool.core import predicates
from a11ytool.core.domain import normalize_domain
from a11ytool.core.entitlement_client import EntitlementClient
from a11ytool.core.key_format import is_valid_format
from a11ytool.core.models import EntitlementResult, PackageInfo, UsageRecord
from a11ytool.core.result_cache import ResultCache
from a11ytool.core.storage import StorageBackend, build_storage
from a11ytool.core.usage_tracker import UsageTracker
from a11ytool.utils.exceptions import LicenseFormatError, MissingInputError
from a11ytool.utils.package_info import get_package_info

logger = logging.getLogger(__name__)


class Authorizer:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        storage: Optional[StorageBackend] = None,
        client: Optional[EntitlementClient] = None,
        clock: Optional[Callable[[], datetime]] = None,
        package_info: Optional[PackageInfo] = None,
        browser_store: Optional[MutableMapping[str, str]] = None,
    ):
        self.settings = settings or Settings()
        self.storage = storage or build_storage(
            self.settings.STORAGE_BACKEND,
            directory=self.settings.cache_directory,
            store=browser_store,
        )
        self.cache = ResultCache(self.storage, ttl=self.settings.cache_ttl, clock=clock)
        self.client = client or EntitlementClient(
            self.settings.LICENSE_API_URL,
            timeout=self.settings.REQUEST_TIMEOUT,
        )
        self.usage_tracker = (
            UsageTracker(self.storage, max_entries=self.settings.MAX_USAGE_ENTRIES, clock=clock)
            if self.settings.TRACK_USAGE else None
        )
        self.package_info = package_info or get_package_info()
        self._last_result: Optional[EntitlementResult] = None

    @property
    def last_result(self) -> Optional[EntitlementResult]:
        """Most recent decision made by this session, if any"""
        return self._last_result

    def _request_context(self) -> Dict[str, Any]:
        if self.settings.REQUEST_VARIANT == "product":
            return {"product_id": self.settings.PRODUCT_ID}
        return {
            "package_name": self.package_info.name,
            "package_version": self.package_info.version,
            "environment": "python",
            "platform": sys.platform,
        }

    def _track(self, domain: Optional[str]) -> None:
        if self.usage_tracker is not None:
            self.usage_tracker.record(self.package_info, domain)

    async def _authorize(self, license_key: Optional[str], domain: Optional[str]) -> EntitlementResult:
        if not license_key:
            self._track(domain)
            raise MissingInputError("No license key provided")

        if not is_valid_format(license_key):
            raise LicenseFormatError("Invalid license key format")

        cached = self.cache.read()
        if cached is not None:
            self._track(domain)
            return cached.model_copy(update={"from_cache": True})

        if not domain:
            raise MissingInputError("Domain required for authorization")

        result = await self.client.call_remote(license_key, domain, self._request_context())

        # Free results are cached too, so free mode does not retry within the TTL
        self.cache.write(result)
        self._track(domain)
        return result

    async def authorize(
        self,
        license_key: Optional[str] = None,
        domain: Optional[str] = None,
    ) -> EntitlementResult:
        normalized = normalize_domain(domain)
        try:
            result = await self._authorize(license_key, normalized)
        except (MissingInputError, LicenseFormatError) as e:
            logger.info(f"{e.message} - allowing free mode")
            result = EntitlementResult.free(e.message, domain=normalized)
        except Exception as e:
            logger.error(f"Unexpected authorization failure: {e}", exc_info=True)
            result = EntitlementResult.free(f"INTERNAL_ERROR:{e}", domain=normalized)

        self._last_result = result
        return result

    def cached_result(self) -> Optional[EntitlementResult]:
        """Fresh cached decision without contacting the network"""
        cached = self.cache.read()
        return cached.model_copy(update={"from_cache": True}) if cached else None

    def clear_cache(self, purge: bool = False) -> None:
        """Reset cached decision and usage history (logout/reset)"""
        self._last_result = None
        self.cache.clear(purge=purge)
        if self.usage_tracker is not None:
            self.usage_tracker.clear(purge=purge)

    def usage_stats(self) -> Optional[UsageRecord]:
        if self.usage_tracker is None:
            return None
        return self.usage_tracker.read()

    def get_config(self) -> Dict[str, Any]:
        config = self.settings.model_dump(mode="json")
        config.pop("LICENSE_KEY", None)
        config["CACHE_DIR"] = str(self.settings.cache_directory)
        return config

    def has_paid_features(self, result: Optional[EntitlementResult] = None) -> bool:
        target = result if result is not None else self._last_result
        return predicates.has_paid_features(target, self.settings.PAID_TIERS)

    def is_pro_or_higher(self, result: Optional[EntitlementResult] = None) -> bool:
        return self.has_paid_features(result)

    def status_message(self, result: Optional[EntitlementResult] = None) -> str:
        return predicates.status_message(result if result is not None else self._last_result)

    def license_metadata(self, result: Optional[EntitlementResult] = None) -> Optional[Dict[str, Any]]:
        target = result if result is not None else self._last_result
        return predicates.license_metadata(target, self.settings.PAID_TIERS)
