# conftest.py

import json
from datetime import datetime, timedelta, timezone

import httpx
import pytest

from a11ytool.config.settings import Settings
from a11ytool.core.authorizer import Authorizer
from a11ytool.core.entitlement_client import EntitlementClient
from a11ytool.core.models import PackageInfo
from a11ytool.core.storage import MemoryStorage

API_URL = "https://licenses.test/v1/authorize"
VALID_UUID = "123e4567-e89b-12d3-a456-426614174000"
VALID_TOKEN = "ABCDEF0123456789XYZ"

PRO_GRANT = {
    "valid": True,
    "expired": False,
    "domain_match": True,
    "tier": "pro",
    "expires_at": "2027-01-01T00:00:00Z",
}


class Clock:
    """Controllable UTC clock"""
    def __init__(self, start=None):
        self.now = start or datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


class RecordingTransport:
    """httpx.MockTransport wrapper that keeps the decoded request bodies"""
    def __init__(self, handler):
        self.calls = []
        self._handler = handler
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request):
        self.calls.append(json.loads(request.content))
        return self._handler(request)


def respond_with(payload, status_code=200):
    return RecordingTransport(lambda request: httpx.Response(status_code, json=payload))


def fail_with(exc_type, message="Connection refused"):
    def handler(request):
        raise exc_type(message, request=request)
    return RecordingTransport(handler)


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def settings(tmp_path):
    """Settings isolated from the developer's environment"""
    return Settings(
        LICENSE_API_URL=API_URL,
        CACHE_DIR=tmp_path,
        LICENSE_KEY=None,
        DOMAIN=None,
    )


@pytest.fixture
def package_info():
    return PackageInfo(name="a11y-tool", version="1.0.4")


@pytest.fixture
def make_authorizer(settings, storage, clock, package_info):
    """Build an Authorizer around a recording transport"""
    def _make(recorder, **overrides):
        effective = settings.model_copy(update=overrides) if overrides else settings
        client = EntitlementClient(API_URL, timeout=1.0, transport=recorder.transport)
        return Authorizer(
            settings=effective,
            storage=storage,
            client=client,
            clock=clock,
            package_info=package_info,
        )
    return _make
