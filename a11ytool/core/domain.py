import re
from typing import Any, Optional

_SCHEME = re.compile(r'^https?://')
_LEADING_SLASHES = re.compile(r'^/*')
_PATH = re.compile(r'/.*$', re.DOTALL)


def normalize_domain(domain: Any) -> Optional[str]:
    """Canonicalize a hostname or URL for case- and scheme-insensitive comparison.

    Ports, IDN and punycode are left untouched.
    """
    if not domain or not isinstance(domain, str):
        return None

    normalized = domain.lower()
    normalized = _SCHEME.sub('', normalized)
    normalized = _LEADING_SLASHES.sub('', normalized)
    normalized = _PATH.sub('', normalized)
    normalized = normalized.strip()
    return normalized or None
