from typing import Optional


class A11yToolException(Exception):
    """Base exception for the licensing subsystem"""
    def __init__(self, message: str, error_code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__

    @property
    def tag(self) -> str:
        """Machine-oriented error string carried on a free result"""
        return f"{self.error_code}:{self.message}"


class LicenseFormatError(A11yToolException):
    def __init__(self, message: str = "Invalid license key format"):
        super().__init__(message, error_code="INVALID_FORMAT")


class MissingInputError(A11yToolException):
    def __init__(self, message: str = "Required input missing"):
        super().__init__(message, error_code="MISSING_INPUT")


class CacheError(A11yToolException):
    """Raised by storage adapters; never leaves the cache or usage layer"""
    def __init__(self, message: str = "Cache storage failure"):
        super().__init__(message, error_code="CACHE_ERROR")


class NetworkError(A11yToolException):
    def __init__(self, message: str = "Network error"):
        super().__init__(message, error_code="NETWORK_ERROR")


class ApiError(A11yToolException):
    """Remote endpoint reachable but answered with a non-success status"""
    def __init__(self, status_code: int, message: Optional[str] = None):
        super().__init__(message or f"API returned status {status_code}", error_code="API_ERROR")
        self.status_code = status_code

    @property
    def tag(self) -> str:
        return f"{self.error_code}:{self.status_code}"


class MalformedResponseError(A11yToolException):
    """Success status and decodable JSON, but not the expected grant shape.

    Bodies that are not JSON at all surface as NetworkError instead.
    """
    def __init__(self, message: str = "Malformed response body"):
        super().__init__(message, error_code="PARSE_ERROR")


class ConfigurationError(A11yToolException):
    def __init__(self, message: str = "Invalid configuration"):
        super().__init__(message, error_code="CONFIGURATION_ERROR")
