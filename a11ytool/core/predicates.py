"""
Pure predicates over an EntitlementResult. No I/O.

Every function accepts None and treats it as free mode.
"""
from typing import Any, Dict, Iterable, Optional

from a11ytool.core.models import EntitlementResult

DEFAULT_PAID_TIERS = ("pro", "enterprise")


def has_paid_features(
    result: Optional[EntitlementResult],
    paid_tiers: Iterable[str] = DEFAULT_PAID_TIERS,
) -> bool:
    if result is None or result.error is not None:
        return False
    return result.tier.value in paid_tiers and result.authorized and result.valid


def is_pro_or_higher(
    result: Optional[EntitlementResult],
    paid_tiers: Iterable[str] = DEFAULT_PAID_TIERS,
) -> bool:
    return has_paid_features(result, paid_tiers)


def is_fully_authorized(result: Optional[EntitlementResult]) -> bool:
    return result is not None and result.authorized and result.valid


def is_license_valid(result: Optional[EntitlementResult]) -> bool:
    return result is not None and result.valid


def status_message(result: Optional[EntitlementResult]) -> str:
    """User-facing one-liner describing how the result was reached"""
    if result is None:
        return "Free mode active"

    if is_fully_authorized(result):
        message = f"✅ {result.tier.value.upper()} license authorized"
        if result.expires_at:
            message += f" (expires {result.expires_at.strftime('%Y-%m-%d')})"
    else:
        message = f"⚠️  {result.message or 'Free mode active'}"

    if result.from_cache:
        message += " [cached]"
    return message


def license_metadata(
    result: Optional[EntitlementResult],
    paid_tiers: Iterable[str] = DEFAULT_PAID_TIERS,
) -> Optional[Dict[str, Any]]:
    """Metadata stamped on paid outputs; None unless paid features are unlocked"""
    if not has_paid_features(result, paid_tiers):
        return None

    return {
        "tier": result.tier.value,
        "licensed": True,
        "domain": result.domain,
        "authorizedAt": result.authorized_at.isoformat() if result.authorized_at else None,
        "expiresAt": result.expires_at.isoformat() if result.expires_at else None,
    }
