"""Pytest configuration and fixtures."""

from typing import Dict, Optional
from unittest.mock import Mock

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from zerokit_admin_client import AdminApiClient

ADMIN_KEY = "00112233445566778899aabbccddeeff" * 2
TENANT_ID = "abcd1234"
SERVICE_URL = f"https://{TENANT_ID}.api.tresorit.io"


def make_http_response(
    status_code: int = 200,
    content: bytes = b"",
    reason: str = "OK",
    headers: Optional[Dict[str, str]] = None,
) -> requests.Response:
    """Build a fully read ``requests`` response."""
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason
    response._content = content
    response.headers = CaseInsensitiveDict(headers or {})
    return response


@pytest.fixture
def session() -> Mock:
    """Mock HTTP session answering 200 with an empty JSON object."""
    session = Mock(spec=requests.Session)
    session.send.return_value = make_http_response(
        200, b"{}", headers={"Content-Type": "application/json"}
    )
    return session


@pytest.fixture
def client(session) -> AdminApiClient:
    """Client bound to the test tenant over the mock session."""
    return AdminApiClient(SERVICE_URL, ADMIN_KEY, session=session)
