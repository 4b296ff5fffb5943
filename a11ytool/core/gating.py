"""
Feature and export gating for consumers of an EntitlementResult.

Scanning and terminal output are always available; exports and compliance
verdicts depend on the license tier.
"""
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from a11ytool.core.models import EntitlementResult
from a11ytool.core.predicates import (
    DEFAULT_PAID_TIERS,
    has_paid_features,
    is_pro_or_higher,
    license_metadata,
)

EXPORT_FORMATS = ('terminal', 'json', 'html', 'pdf')

# (feature, requirement); requirement is None, 'paid' or 'pro'
FEATURES = [
    ("Accessibility Scan", None),
    ("Terminal Output", None),
    ("WCAG Level A Checks", None),
    ("Export Reports (HTML/JSON)", "paid"),
    ("PDF Audit Report", "pro"),
    ("Compliance PASS/FAIL", "paid"),
]


@dataclass
class ExportGate:
    format: str
    allowed: bool
    error: Optional[str] = None
    upgrade_tip: Optional[str] = None
    license_metadata: Optional[Dict[str, Any]] = None

    @property
    def locked(self) -> bool:
        return not self.allowed


def _meets(requirement: Optional[str], result: Optional[EntitlementResult],
           paid_tiers: Iterable[str]) -> bool:
    if requirement is None:
        return True
    if requirement == "pro":
        return is_pro_or_higher(result, paid_tiers)
    return has_paid_features(result, paid_tiers)


def feature_access(
    result: Optional[EntitlementResult],
    paid_tiers: Iterable[str] = DEFAULT_PAID_TIERS,
) -> List[Tuple[str, bool]]:
    paid_tiers = tuple(paid_tiers)
    return [(name, _meets(requirement, result, paid_tiers)) for name, requirement in FEATURES]


def check_export(
    output_format: str,
    result: Optional[EntitlementResult],
    paid_tiers: Iterable[str] = DEFAULT_PAID_TIERS,
) -> ExportGate:
    output_format = output_format.lower()
    if output_format not in EXPORT_FORMATS:
        raise ValueError(f"Unsupported export format: {output_format}")

    paid_tiers = tuple(paid_tiers)
    if output_format == 'terminal':
        return ExportGate(format=output_format, allowed=True)

    if output_format == 'pdf':
        if not is_pro_or_higher(result, paid_tiers):
            return ExportGate(
                format=output_format,
                allowed=False,
                error="PDF audit report requires a PRO license",
                upgrade_tip="Upgrade to PRO for audit-ready PDF reports",
            )
    elif not has_paid_features(result, paid_tiers):
        return ExportGate(
            format=output_format,
            allowed=False,
            error=f"License required to export {output_format.upper()} reports",
            upgrade_tip="Upgrade your license to export reports",
        )

    return ExportGate(
        format=output_format,
        allowed=True,
        license_metadata=license_metadata(result, paid_tiers),
    )
