"""
Validation of tenant service address, admin key and tenant id.

Everything here is a pure function over the compiled patterns in
:mod:`zerokit_admin_client.constants`.
"""

from typing import Optional
from urllib.parse import urlparse

from .constants import (
    ADMIN_KEY_PATTERN,
    ADMIN_KEY_SIZE,
    SERVICE_DOMAIN,
    TENANT_ID_PATTERN,
    TENANT_URL_PATTERNS,
)
from .exceptions import InvalidArgumentError


def normalize_service_url(service_url: Optional[str]) -> str:
    """
    Validate a tenant service URL and make sure it ends with a slash.

    Raises:
        InvalidArgumentError: If the URL is missing or not an absolute
            http(s) URL
    """
    if not service_url:
        raise InvalidArgumentError("service_url cannot be empty")

    parsed = urlparse(service_url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise InvalidArgumentError(f"service_url must be an absolute http(s) URL: {service_url!r}")

    if not service_url.endswith("/"):
        service_url += "/"
    return service_url


def validate_tenant_id(tenant_id: str) -> str:
    """Check a tenant id against the tenant id format."""
    if not TENANT_ID_PATTERN.match(tenant_id):
        raise InvalidArgumentError(f"Invalid tenant id: {tenant_id!r}")
    return tenant_id


def infer_tenant_id(service_url: str) -> Optional[str]:
    """
    Infer the tenant id from a production or hosted service URL.

    Returns:
        The tenant id captured by the first matching pattern, or None
    """
    for pattern in TENANT_URL_PATTERNS:
        match = pattern.match(service_url)
        if match:
            return match.group("tenant_id")
    return None


def resolve_tenant_id(service_url: str, tenant_id: Optional[str] = None) -> str:
    """Return the explicit tenant id if given, otherwise infer it from the URL."""
    if tenant_id is not None:
        return validate_tenant_id(tenant_id)

    inferred = infer_tenant_id(service_url)
    if inferred is None:
        raise InvalidArgumentError(
            "Could not infer tenant id from service_url, please supply it explicitly"
        )
    return inferred


def decode_admin_key(admin_key: Optional[str]) -> bytes:
    """
    Decode a 64 character hex admin key into its 32 raw bytes.

    Raises:
        InvalidArgumentError: If the key is missing or not 64 hex characters
    """
    if not admin_key:
        raise InvalidArgumentError("admin_key cannot be empty")
    if not ADMIN_KEY_PATTERN.match(admin_key):
        raise InvalidArgumentError(
            f"admin_key must be {ADMIN_KEY_SIZE * 2} hexadecimal characters"
        )
    return bytes.fromhex(admin_key)


def admin_user_id(tenant_id: str) -> str:
    """Admin user id of a tenant."""
    return f"admin@{tenant_id}.{SERVICE_DOMAIN}"
