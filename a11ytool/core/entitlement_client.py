"""
Client for the remote authorization endpoint.

This is the only network boundary of the subsystem. call_remote() never
raises: transport failures, non-success statuses and malformed bodies all
come back as free results carrying a tagged error string.
"""
import logging
from datetime import datetime
from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel, ConfigDict, StrictBool, ValidationError

from a11ytool.core.models import EntitlementResult, LicenseTier
from a11ytool.utils.exceptions import ApiError, MalformedResponseError, NetworkError

logger = logging.getLogger(__name__)


class RemoteGrant(BaseModel):
    """Well-formed success body of the authorization endpoint"""
    model_config = ConfigDict(extra="ignore")

    valid: Optional[StrictBool] = None
    expired: Optional[StrictBool] = None
    domain_match: Optional[StrictBool] = None
    authorized: Optional[StrictBool] = None
    tier: Optional[LicenseTier] = None
    expires_at: Optional[datetime] = None
    error: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        # The server's own valid flag is not trusted in isolation
        return self.valid is True and self.domain_match is True and self.expired is not True

    @property
    def grants_access(self) -> bool:
        return self.is_valid and self.authorized is not False

    def denial_reason(self) -> str:
        if self.error:
            return self.error
        if self.expired:
            return "License expired"
        if self.domain_match is not True:
            return "License domain mismatch"
        return "Authorization failed"


def parse_grant(payload: Any) -> RemoteGrant:
    """Validate a decoded body, raising MalformedResponseError on any shape mismatch"""
    if not isinstance(payload, dict):
        raise MalformedResponseError(f"expected a JSON object, got {type(payload).__name__}")
    try:
        return RemoteGrant.model_validate(payload)
    except ValidationError as e:
        fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err.get("loc"))
        raise MalformedResponseError(f"invalid fields: {fields}") from e


class EntitlementClient:
    def __init__(
        self,
        api_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_url = api_url
        self.timeout = timeout
        self.transport = transport

    async def _post(self, body: Dict[str, Any]) -> RemoteGrant:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    self.api_url,
                    json=body,
                    headers={"Accept": "application/json"},
                )
        except (httpx.HTTPError, httpx.InvalidURL, OSError) as e:
            raise NetworkError(str(e) or e.__class__.__name__) from e

        if not response.is_success:
            raise ApiError(response.status_code)

        try:
            payload = response.json()
        except ValueError as e:
            raise NetworkError(f"Invalid JSON response: {e}") from e

        return parse_grant(payload)

    async def call_remote(
        self,
        license_key: str,
        domain: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> EntitlementResult:
        body = {"license_key": license_key, "domain": domain, **(context or {})}

        try:
            grant = await self._post(body)
        except (NetworkError, ApiError, MalformedResponseError) as e:
            logger.warning(f"License API call failed ({e.tag}) - allowing free mode")
            return EntitlementResult.free(e.tag, domain=domain)

        if grant.grants_access:
            return EntitlementResult.granted(
                tier=grant.tier or LicenseTier.PRO,
                domain=domain,
                expires_at=grant.expires_at,
            )

        return EntitlementResult.free(
            grant.denial_reason(),
            domain=domain,
            expired=grant.expired is True,
            domain_match=grant.domain_match is True,
        )
