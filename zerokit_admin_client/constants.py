"""
Constants for the ZeroKit admin API client.
Compatible with the tenant admin API request signing scheme.
"""

import re

# HTTP Headers
HEADER_USER_ID = "UserId"
HEADER_DATE = "TresoritDate"
HEADER_CONTENT_SHA256 = "Content-SHA256"
HEADER_CONTENT_TYPE = "Content-Type"
HEADER_CONTENT_LENGTH = "Content-Length"
HEADER_HMAC_HEADERS = "HMACHeaders"
HEADER_AUTHORIZATION = "Authorization"

# Headers covered by the signature, in canonical order
HEADERS_TO_SIGN = (
    HEADER_USER_ID,
    HEADER_DATE,
    HEADER_CONTENT_SHA256,
    HEADER_CONTENT_TYPE,
    HEADER_HMAC_HEADERS,
)

AUTHORIZATION_SCHEME = "AdminKey"
DEFAULT_CONTENT_TYPE = "application/json"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# SHA-256 of the empty input
EMPTY_SHA256 = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"

HTTP_METHODS = ("GET", "POST", "PUT", "DELETE", "HEAD", "OPTIONS", "TRACE")
DEFAULT_METHOD = "GET"

# Tenant identity
SERVICE_DOMAIN = "tresorit.io"
ADMIN_KEY_SIZE = 32  # bytes

ADMIN_KEY_PATTERN = re.compile(r"\A[a-fA-F0-9]{64}\Z")
TENANT_ID_PATTERN = re.compile(r"\A[a-z][a-z0-9]{7,9}\Z")
PRODUCTION_TENANT_URL_PATTERN = re.compile(
    r"\Ahttps?://(?P<tenant_id>[a-z][a-z0-9]{7,9})\.api\." + re.escape(SERVICE_DOMAIN) + r"/?\Z"
)
HOSTED_TENANT_URL_PATTERN = re.compile(
    r"\Ahttps?://[^/?#]*/tenant-(?P<tenant_id>[a-z][a-z0-9]{7,9})/?\Z"
)
TENANT_URL_PATTERNS = (PRODUCTION_TENANT_URL_PATTERN, HOSTED_TENANT_URL_PATTERN)

# Error reporting
PARSING_ERROR_CODE = "ParsingError"
PARSING_ERROR_MESSAGE = "The client was unable to parse the error response message."
