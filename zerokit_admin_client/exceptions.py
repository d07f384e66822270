"""
Custom exceptions for the ZeroKit admin API client.
"""

from typing import Optional


class AdminApiClientError(Exception):
    """Base exception for admin API client errors."""
    pass


class InvalidArgumentError(AdminApiClientError, ValueError):
    """Raised when client or request input is missing or malformed."""
    pass


class InvalidKeyError(InvalidArgumentError):
    """Raised when the signing key is not a 256 bit key."""
    pass


class RequestAssemblyError(AdminApiClientError):
    """Raised when a signed request cannot be turned into an HTTP request."""
    pass


class AdminApiError(AdminApiClientError):
    """
    Raised when the admin API rejects a call.

    Attributes:
        error_code: Machine-readable error code reported by the API, or
            ``ParsingError`` when the error response could not be parsed
        message: Human-readable error message
        status_code: HTTP status code of the failed response, if known
    """

    def __init__(
        self,
        error_code: str,
        message: str,
        cause: Optional[BaseException] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.__cause__ = cause

    @property
    def cause(self) -> Optional[BaseException]:
        """Underlying parse failure for ``ParsingError`` errors."""
        return self.__cause__

    def __str__(self) -> str:
        return f"{self.error_code}: {self.message}"
