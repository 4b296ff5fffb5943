"""
a11ytool - license authorization core for the accessibility toolbar and CLI
"""
from .core.authorizer import Authorizer
from .core.models import EntitlementResult, LicenseTier
from .core.predicates import (
    has_paid_features,
    is_pro_or_higher,
    is_fully_authorized,
    status_message,
    license_metadata,
)
from .core.key_format import is_valid_format
from .core.domain import normalize_domain
from .config.settings import Settings

__version__ = "1.0.4"
__all__ = [
    'Authorizer',
    'EntitlementResult',
    'LicenseTier',
    'has_paid_features',
    'is_pro_or_higher',
    'is_fully_authorized',
    'status_message',
    'license_metadata',
    'is_valid_format',
    'normalize_domain',
    'Settings'
]
