"""
Request canonicalization and HMAC-SHA256 signing for the admin API.

The string to sign is::

    METHOD\\n
    path?query\\n
    UserId:...\\n
    TresoritDate:...\\n
    Content-SHA256:...\\n
    Content-Type:...\\n
    HMACHeaders:...

keyed with the 32 byte tenant admin key and sent base64 encoded in the
``Authorization: AdminKey <signature>`` header.
"""

import base64
import datetime
import hashlib
import hmac
from typing import Mapping, Optional, Sequence

from .constants import (
    ADMIN_KEY_SIZE,
    AUTHORIZATION_SCHEME,
    DATE_FORMAT,
    EMPTY_SHA256,
    HEADERS_TO_SIGN,
)
from .exceptions import InvalidKeyError, RequestAssemblyError


def sha256_hex(data: bytes) -> str:
    """Lower-case hex SHA-256 digest of a request body."""
    if not data:
        return EMPTY_SHA256
    return hashlib.sha256(data).hexdigest()


def format_timestamp(moment: Optional[datetime.datetime] = None) -> str:
    """Format a moment (default: now) as a sortable UTC timestamp with a trailing Z."""
    if moment is None:
        moment = datetime.datetime.now(datetime.timezone.utc)
    elif moment.tzinfo is not None:
        moment = moment.astimezone(datetime.timezone.utc)
    return moment.strftime(DATE_FORMAT)


def hmac_headers_value() -> str:
    """Value of the HMACHeaders header."""
    return ",".join(HEADERS_TO_SIGN)


def build_string_to_sign(
    method: str,
    path_and_query: str,
    headers: Mapping[str, Sequence[str]],
) -> str:
    """
    Build the canonical string of a request.

    Args:
        method: HTTP method
        path_and_query: Relative request URL, leading slash is ignored
        headers: Request headers, name -> list of values

    Raises:
        RequestAssemblyError: If a signed header is missing or has more
            than one value
    """
    lines = [method.upper(), path_and_query.lstrip("/")]
    for name in HEADERS_TO_SIGN:
        values = headers.get(name, ())
        if len(values) != 1:
            raise RequestAssemblyError(
                f"Signed header {name!r} must have exactly one value, found {len(values)}"
            )
        lines.append(f"{name}:{values[0]}")
    return "\n".join(lines)


def sign(key: bytes, message: str) -> str:
    """
    Create a base64 encoded HMAC-SHA256 signature.

    Raises:
        InvalidKeyError: If the key is not exactly 32 bytes
    """
    if key is None or len(key) != ADMIN_KEY_SIZE:
        raise InvalidKeyError(f"Signing key must be {ADMIN_KEY_SIZE} bytes")

    mac = hmac.new(key, message.encode("utf-8"), hashlib.sha256)
    return base64.b64encode(mac.digest()).decode("ascii")


def authorization_value(signature: str) -> str:
    """Value of the Authorization header for a signature."""
    return f"{AUTHORIZATION_SCHEME} {signature}"
