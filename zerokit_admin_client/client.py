"""
ZeroKit admin API client.

This module binds a tenant (service URL, tenant id and admin key) to a
shared HTTP session and executes signed requests built with
:class:`~zerokit_admin_client.request.AdminApiRequest`.
"""

import asyncio
import concurrent.futures
import json
from typing import Any, Coroutine, Optional, TypeVar
from urllib.parse import urljoin

import requests

from . import credentials, signing
from .constants import (
    PARSING_ERROR_CODE,
    PARSING_ERROR_MESSAGE,
)
from .exceptions import AdminApiError
from .log import get_logger
from .request import AdminApiRequest
from .response import AdminApiResponse
from .settings import AdminApiSettings

logger = get_logger(__name__)

T = TypeVar("T")


def run_blocking(coro: Coroutine[Any, Any, T]) -> T:
    """
    Run a coroutine to completion from synchronous code.

    Uses ``asyncio.run`` when no event loop is running in this thread,
    otherwise runs it on a fresh loop in a worker thread. The coroutine's
    own exception is re-raised as is.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        loop_running = False
    else:
        loop_running = True

    if not loop_running:
        return asyncio.run(coro)

    with concurrent.futures.ThreadPoolExecutor(max_workers=1) as executor:
        future = executor.submit(asyncio.run, coro)
        return future.result()


def _field(body: dict, *names: str) -> Any:
    folded = {key.lower(): value for key, value in body.items()}
    for name in names:
        if name.lower() in folded:
            return folded[name.lower()]
    return None


def parse_error(response: requests.Response) -> AdminApiError:
    """
    Turn a failed response into an :class:`AdminApiError`.

    The body is expected to be a JSON object carrying ``errorCode`` and
    ``errorMessage`` (or ``message``). Anything else yields a
    ``ParsingError`` error with the parse failure as its cause.
    """
    try:
        body = json.loads(response.content.decode("utf-8"))
        if not isinstance(body, dict):
            raise ValueError(f"Expected a JSON object, got {type(body).__name__}")

        error_code = _field(body, "errorCode")
        message = _field(body, "errorMessage", "message")
        if not isinstance(error_code, str) or not isinstance(message, str):
            raise ValueError("Error response must contain string errorCode and message fields")
    except Exception as e:
        logger.warning(
            "Could not parse error response",
            status_code=response.status_code,
            error=str(e),
        )
        return AdminApiError(
            PARSING_ERROR_CODE,
            PARSING_ERROR_MESSAGE,
            cause=e,
            status_code=response.status_code,
        )

    return AdminApiError(error_code, message, status_code=response.status_code)


class AdminApiClient:
    """
    Client for the signed ZeroKit tenant admin API.

    The client is immutable once created. It owns the admin key of one
    tenant and a ``requests.Session`` shared by every request it sends.
    """

    def __init__(
        self,
        service_url: str,
        admin_key: str,
        tenant_id: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the admin API client.

        Args:
            service_url: Tenant service URL, e.g. https://abcd1234.api.tresorit.io/
            admin_key: 64 character hex admin key of the tenant
            tenant_id: Tenant id; inferred from service_url when omitted
            session: HTTP session to use; a new one is created if omitted

        Raises:
            InvalidArgumentError: If any of the arguments is invalid or the
                tenant id cannot be inferred
        """
        service_url = credentials.normalize_service_url(service_url)
        key = credentials.decode_admin_key(admin_key)
        tenant_id = credentials.resolve_tenant_id(service_url, tenant_id)

        self._service_url = service_url
        self._tenant_id = tenant_id
        self._admin_user_id = credentials.admin_user_id(tenant_id)
        self._admin_key = key

        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()

        logger.info("Admin API client bound", tenant_id=tenant_id, service_url=service_url)

    @classmethod
    def from_settings(
        cls,
        settings: Optional[AdminApiSettings] = None,
        session: Optional[requests.Session] = None,
    ) -> "AdminApiClient":
        """Create a client from settings (read from the environment by default)."""
        settings = settings or AdminApiSettings()
        return cls(
            settings.service_url,
            settings.admin_key.get_secret_value() if settings.admin_key else None,
            tenant_id=settings.tenant_id,
            session=session,
        )

    @property
    def tenant_id(self) -> str:
        return self._tenant_id

    @property
    def service_url(self) -> str:
        return self._service_url

    @property
    def admin_user_id(self) -> str:
        return self._admin_user_id

    def sign_message(self, message: str) -> str:
        """Base64 HMAC-SHA256 signature of ``message`` under the admin key."""
        return signing.sign(self._admin_key, message)

    def resolve_url(self, relative_url: str) -> str:
        """Absolute URL of a path relative to the service URL."""
        return urljoin(self._service_url, relative_url.lstrip("/"))

    def create_request(self, path: str, method: str = "GET") -> AdminApiRequest:
        """Create a request for a path relative to the service URL."""
        return AdminApiRequest(self, path, method)

    def create_post_request(self, path: str) -> AdminApiRequest:
        return self.create_request(path, "POST")

    def create_put_request(self, path: str) -> AdminApiRequest:
        return self.create_request(path, "PUT")

    def create_delete_request(self, path: str) -> AdminApiRequest:
        return self.create_request(path, "DELETE")

    def create_head_request(self, path: str) -> AdminApiRequest:
        return self.create_request(path, "HEAD")

    def create_options_request(self, path: str) -> AdminApiRequest:
        return self.create_request(path, "OPTIONS")

    def create_trace_request(self, path: str) -> AdminApiRequest:
        return self.create_request(path, "TRACE")

    async def send_request_async(self, prepared: requests.PreparedRequest) -> AdminApiResponse:
        """
        Send a prepared, signed request over the client's session.

        Returns:
            The response, if the status code is 2xx

        Raises:
            AdminApiError: For any other status code
        """
        logger.debug("Sending request", method=prepared.method, url=prepared.url)

        response = await asyncio.to_thread(self.session.send, prepared)

        if 200 <= response.status_code < 300:
            return AdminApiResponse.from_http_response(response)

        raise parse_error(response)

    def run_blocking(self, coro: Coroutine[Any, Any, T]) -> T:
        """Run one of this client's coroutines from synchronous code."""
        return run_blocking(coro)

    def close(self):
        """Close the HTTP session if this client created it."""
        if self.session and self._owns_session:
            self.session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()

    def __repr__(self) -> str:
        return f"<AdminApiClient tenant={self._tenant_id} url={self._service_url}>"
