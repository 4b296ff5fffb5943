"""
Tests for entitlement predicates and consumer gating
"""
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from a11ytool.core.gating import check_export, feature_access
from a11ytool.core.models import EntitlementResult, LicenseTier
from a11ytool.core.predicates import (
    has_paid_features,
    is_fully_authorized,
    is_license_valid,
    is_pro_or_higher,
    license_metadata,
    status_message,
)


@pytest.fixture
def pro():
    return EntitlementResult.granted(
        LicenseTier.PRO, "example.com",
        expires_at=datetime(2027, 1, 1, tzinfo=timezone.utc),
    )


@pytest.fixture
def free():
    return EntitlementResult.free("NETWORK_ERROR:timeout", domain="example.com")


@pytest.mark.parametrize("tier,authorized,valid,expected", [
    (LicenseTier.PRO, True, True, True),
    (LicenseTier.ENTERPRISE, True, True, True),
    (LicenseTier.FREE, True, True, False),
    (LicenseTier.PRO, False, True, False),
    (LicenseTier.PRO, True, False, False),
])
def test_has_paid_features(tier, authorized, valid, expected):
    result = EntitlementResult(tier=tier, authorized=authorized, valid=valid)
    assert has_paid_features(result) is expected
    assert is_pro_or_higher(result) is expected


def test_free_results_never_unlock_paid_features(free):
    assert has_paid_features(free) is False
    assert has_paid_features(None) is False
    assert license_metadata(free) is None


def test_error_results_cannot_carry_a_paid_tier():
    with pytest.raises(ValidationError):
        EntitlementResult(tier=LicenseTier.PRO, authorized=True, valid=True, error="API_ERROR:500")


def test_custom_paid_tiers(pro):
    assert has_paid_features(pro, paid_tiers=["enterprise"]) is False


def test_authorization_predicates(pro, free):
    assert is_fully_authorized(pro) is True
    assert is_fully_authorized(free) is False
    assert is_fully_authorized(None) is False
    assert is_license_valid(pro) is True
    assert is_license_valid(free) is False


def test_status_messages(pro, free):
    assert status_message(None) == "Free mode active"
    assert status_message(pro) == "✅ PRO license authorized (expires 2027-01-01)"
    assert status_message(free) == "⚠️  Free mode - NETWORK_ERROR:timeout"
    cached = free.model_copy(update={"from_cache": True})
    assert status_message(cached).endswith("[cached]")


def test_license_metadata(pro):
    metadata = license_metadata(pro)
    assert metadata["tier"] == "pro"
    assert metadata["licensed"] is True
    assert metadata["domain"] == "example.com"
    assert metadata["expiresAt"].startswith("2027-01-01")
    assert metadata["authorizedAt"] is not None


def test_feature_access_free(free):
    access = dict(feature_access(free))
    assert access["Accessibility Scan"] is True
    assert access["Terminal Output"] is True
    assert access["Export Reports (HTML/JSON)"] is False
    assert access["PDF Audit Report"] is False
    assert access["Compliance PASS/FAIL"] is False


def test_feature_access_pro(pro):
    assert all(unlocked for _, unlocked in feature_access(pro))


@pytest.mark.parametrize("fmt", ["json", "html"])
def test_exports_locked_in_free_mode(free, fmt):
    gate = check_export(fmt, free)
    assert gate.locked
    assert gate.error == f"License required to export {fmt.upper()} reports"
    assert gate.license_metadata is None


def test_pdf_requires_pro(free, pro):
    locked = check_export("pdf", free)
    assert locked.error == "PDF audit report requires a PRO license"
    assert locked.upgrade_tip

    unlocked = check_export("PDF", pro)
    assert unlocked.allowed
    assert unlocked.license_metadata["tier"] == "pro"


def test_terminal_always_allowed(free):
    assert check_export("terminal", free).allowed
    assert check_export("terminal", None).allowed


def test_unknown_export_format(pro):
    with pytest.raises(ValueError):
        check_export("docx", pro)
