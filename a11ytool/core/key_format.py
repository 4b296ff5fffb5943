import re
from typing import Any

UUID_PATTERN = re.compile(
    r'^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$',
    re.IGNORECASE | re.ASCII
)
TOKEN_PATTERN = re.compile(r'^[A-Z0-9]{16,}$', re.IGNORECASE | re.ASCII)


def is_valid_format(license_key: Any) -> bool:
    """Syntactic gate run before any network call.

    Accepts a canonical UUID or a token of 16+ ASCII alphanumerics. Says
    nothing about authenticity.
    """
    if not license_key or not isinstance(license_key, str):
        return False
    return bool(UUID_PATTERN.fullmatch(license_key) or TOKEN_PATTERN.fullmatch(license_key))
