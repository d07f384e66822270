"""
ZeroKit Admin API Client

A Python client library that signs requests to the ZeroKit tenant
administrative API with the tenant's admin key.

Example usage:
    from zerokit_admin_client import AdminApiClient

    client = AdminApiClient("https://abcd1234.api.tresorit.io/", "your-admin-key")
    response = client.create_post_request("/api/v4/admin/user/init-user-registration").send()
    print(response.json()["UserId"])
"""

from .client import AdminApiClient
from .request import AdminApiRequest
from .response import AdminApiResponse
from .settings import AdminApiSettings
from .exceptions import (
    AdminApiClientError,
    InvalidArgumentError,
    InvalidKeyError,
    RequestAssemblyError,
    AdminApiError
)
from .constants import (
    HEADERS_TO_SIGN,
    PARSING_ERROR_CODE,
    SERVICE_DOMAIN
)

__version__ = "1.0.0"
__all__ = [
    "AdminApiClient",
    "AdminApiRequest",
    "AdminApiResponse",
    "AdminApiSettings",
    "AdminApiClientError",
    "InvalidArgumentError",
    "InvalidKeyError",
    "RequestAssemblyError",
    "AdminApiError",
    "HEADERS_TO_SIGN",
    "PARSING_ERROR_CODE",
    "SERVICE_DOMAIN"
]
