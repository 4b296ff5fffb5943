"""
Value types threaded through the licensing subsystem.

Persisted records use camelCase keys so cache and usage files keep the
layout the browser widget writes to localStorage.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


class LicenseTier(str, Enum):
    FREE = "free"
    PRO = "pro"
    ENTERPRISE = "enterprise"


class RecordModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_record(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class EntitlementResult(RecordModel):
    valid: bool = False
    authorized: bool = False
    tier: LicenseTier = LicenseTier.FREE
    expires_at: Optional[datetime] = None
    domain: Optional[str] = None
    error: Optional[str] = None
    message: str = "Free mode active"
    from_cache: bool = False
    authorized_at: Optional[datetime] = None
    expired: bool = False
    domain_match: bool = False

    @model_validator(mode="after")
    def _errors_are_free(self) -> "EntitlementResult":
        if self.error is not None and (self.tier != LicenseTier.FREE or self.authorized):
            raise ValueError("a result carrying an error must be free and unauthorized")
        return self

    @classmethod
    def free(cls, reason: str, domain: Optional[str] = None, **flags) -> "EntitlementResult":
        """Fail-open result; built locally, never from a remote grant"""
        return cls(
            valid=False,
            authorized=False,
            tier=LicenseTier.FREE,
            error=reason,
            message=f"Free mode - {reason}",
            domain=domain,
            **flags,
        )

    @classmethod
    def granted(
        cls,
        tier: LicenseTier,
        domain: str,
        expires_at: Optional[datetime] = None,
    ) -> "EntitlementResult":
        return cls(
            valid=True,
            authorized=True,
            tier=tier,
            expires_at=expires_at,
            domain=domain,
            message=f"{tier.value.upper()} license authorized",
            authorized_at=datetime.now(timezone.utc),
            expired=False,
            domain_match=True,
        )


class CacheEntry(RecordModel):
    timestamp: datetime
    result: EntitlementResult


class UsageEntry(RecordModel):
    timestamp: datetime
    domain: Optional[str] = None


class UsageRecord(RecordModel):
    first_used: datetime
    last_used: Optional[datetime] = None
    package_name: str = "unknown"
    package_version: str = "unknown"
    domain: Optional[str] = None
    uses: List[UsageEntry] = []


class PackageInfo(BaseModel):
    name: str = "unknown"
    version: str = "unknown"
