"""
Admin API request builder.

A request is a mutable, reusable description of one call: method, path,
multi-valued headers and query parameters, and a body. Every mutator
returns the request itself so calls can be chained::

    response = (
        client.create_put_request("/api/v4/admin/tenant/upload-custom-content")
        .add_query_parameter("fileName", "css/login.css")
        .set_header("Content-Type", "text/css")
        .send("body { background-color: red; }")
    )

The request is signed again before every send, so it can be sent more
than once. It is not safe to mutate or send one instance from several
call sites at the same time; use :meth:`AdminApiRequest.copy`.
"""

import copy
import json
from typing import IO, TYPE_CHECKING, Any, Dict, List, Optional, Tuple, Union

import requests
from requests.exceptions import InvalidHeader

from . import signing
from .constants import (
    DEFAULT_CONTENT_TYPE,
    DEFAULT_METHOD,
    HEADER_AUTHORIZATION,
    HEADER_CONTENT_LENGTH,
    HEADER_CONTENT_SHA256,
    HEADER_CONTENT_TYPE,
    HEADER_DATE,
    HEADER_HMAC_HEADERS,
    HEADER_USER_ID,
    HTTP_METHODS,
)
from .exceptions import InvalidArgumentError, RequestAssemblyError
from .log import get_logger
from .response import AdminApiResponse

if TYPE_CHECKING:
    from .client import AdminApiClient

logger = get_logger(__name__)

Contents = Union[bytes, bytearray, str, IO]


def _add_value(values: Dict[str, List[str]], name: str, value: Optional[str]) -> None:
    if value is None:
        raise InvalidArgumentError(f"Value of {name!r} cannot be None")
    values.setdefault(name, []).append(value)


def _set_value(values: Dict[str, List[str]], name: str, value: Optional[str]) -> None:
    if value is None:
        values.pop(name, None)
    else:
        values[name] = [value]


def _remove_value(values: Dict[str, List[str]], name: str, value: Optional[str]) -> None:
    if name not in values:
        return
    if value is None:
        del values[name]
        return

    remaining = [v for v in values[name] if v != value]
    if remaining:
        values[name] = remaining
    else:
        del values[name]


def _snapshot(values: Dict[str, List[str]]) -> Dict[str, Tuple[str, ...]]:
    return {name: tuple(items) for name, items in values.items()}


class AdminApiRequest:
    """A signed admin API call bound to one :class:`AdminApiClient`."""

    def __init__(self, client: "AdminApiClient", path: str, method: str = DEFAULT_METHOD):
        if path is None:
            raise InvalidArgumentError("path cannot be None")

        self._client = client
        self._path = path
        self._method = DEFAULT_METHOD
        self._headers: Dict[str, List[str]] = {}
        self._query_parameters: Dict[str, List[str]] = {}
        self._content = b""

        self.set_method(method)

    @property
    def client(self) -> "AdminApiClient":
        return self._client

    @property
    def method(self) -> str:
        return self._method

    @property
    def path(self) -> str:
        return self._path

    @property
    def content_bytes(self) -> bytes:
        return self._content

    @property
    def headers(self) -> Dict[str, Tuple[str, ...]]:
        """Snapshot of the headers, name -> values."""
        return _snapshot(self._headers)

    @property
    def query_parameters(self) -> Dict[str, Tuple[str, ...]]:
        """Snapshot of the query parameters, name -> values."""
        return _snapshot(self._query_parameters)

    @property
    def query_string(self) -> str:
        """Query parameters joined as ``name=value`` pairs in insertion order."""
        return "&".join(
            name if value is None else f"{name}={value}"
            for name, values in self._query_parameters.items()
            for value in values
        )

    @property
    def url(self) -> str:
        """Relative request URL: the path without leading slash plus the query string."""
        path_and_query = self._path.lstrip("/")
        query = self.query_string
        if query:
            separator = "&" if "?" in path_and_query else "?"
            path_and_query = f"{path_and_query}{separator}{query}"
        return path_and_query

    def set_method(self, method: str) -> "AdminApiRequest":
        """Set the HTTP method (GET, POST, PUT, DELETE, HEAD, OPTIONS or TRACE)."""
        if not method or method.upper() not in HTTP_METHODS:
            raise InvalidArgumentError(f"Unsupported HTTP method: {method!r}")
        self._method = method.upper()
        return self

    def add_header(self, name: str, value: str) -> "AdminApiRequest":
        """Append a value to a header."""
        _add_value(self._headers, name, value)
        return self

    def set_header(self, name: str, value: Optional[str]) -> "AdminApiRequest":
        """Replace all values of a header; None removes the header."""
        _set_value(self._headers, name, value)
        return self

    def remove_header(self, name: str, value: Optional[str] = None) -> "AdminApiRequest":
        """Remove a header, or only one of its values if ``value`` is given."""
        _remove_value(self._headers, name, value)
        return self

    def add_query_parameter(self, name: str, value: str) -> "AdminApiRequest":
        """Append a value to a query parameter."""
        _add_value(self._query_parameters, name, value)
        return self

    def set_query_parameter(self, name: str, value: Optional[str]) -> "AdminApiRequest":
        """Replace all values of a query parameter; None removes the parameter."""
        _set_value(self._query_parameters, name, value)
        return self

    def remove_query_parameter(self, name: str, value: Optional[str] = None) -> "AdminApiRequest":
        """Remove a query parameter, or only one of its values if ``value`` is given."""
        _remove_value(self._query_parameters, name, value)
        return self

    def set_contents(self, contents: Optional[Contents]) -> "AdminApiRequest":
        """
        Replace the request body.

        Accepts bytes, text (encoded as UTF-8) or a readable stream, which
        is read to the end. None sets an empty body. Content-SHA256 and
        Content-Length are updated to match.
        """
        if contents is None:
            data = b""
        elif isinstance(contents, (bytes, bytearray)):
            data = bytes(contents)
        elif isinstance(contents, str):
            data = contents.encode("utf-8")
        elif hasattr(contents, "read"):
            data = contents.read()
            if isinstance(data, str):
                data = data.encode("utf-8")
            elif isinstance(data, (bytes, bytearray)):
                data = bytes(data)
            else:
                raise InvalidArgumentError(
                    f"Stream read returned {type(data).__name__}, expected bytes or str"
                )
        else:
            raise InvalidArgumentError(
                f"Unsupported contents type: {type(contents).__name__}"
            )

        self._content = data
        self._update_content_headers()
        return self

    def set_json_contents(self, obj: Any) -> "AdminApiRequest":
        """Serialize ``obj`` as the JSON body; None sets an empty body."""
        if obj is None:
            return self.set_contents(b"")

        self.set_header(HEADER_CONTENT_TYPE, DEFAULT_CONTENT_TYPE)
        return self.set_contents(json.dumps(obj, separators=(",", ":")))

    def copy(self) -> "AdminApiRequest":
        """Independent copy of this request, bound to the same client."""
        clone = copy.copy(self)
        clone._headers = copy.deepcopy(self._headers)
        clone._query_parameters = copy.deepcopy(self._query_parameters)
        return clone

    def _update_content_headers(self) -> None:
        self.set_header(HEADER_CONTENT_SHA256, signing.sha256_hex(self._content))
        self.set_header(HEADER_CONTENT_LENGTH, str(len(self._content)))

    def sign(self) -> "AdminApiRequest":
        """
        Sign the request with the client's admin key.

        Sets UserId, Content-SHA256, Content-Length, TresoritDate,
        Content-Type (if unset), HMACHeaders and Authorization.

        Raises:
            RequestAssemblyError: If a signed header has several values
            InvalidKeyError: If the client's key is not 32 bytes
        """
        self.set_header(HEADER_USER_ID, self._client.admin_user_id)
        self._update_content_headers()
        self.set_header(HEADER_DATE, signing.format_timestamp())
        if HEADER_CONTENT_TYPE not in self._headers:
            self.set_header(HEADER_CONTENT_TYPE, DEFAULT_CONTENT_TYPE)
        self.set_header(HEADER_HMAC_HEADERS, signing.hmac_headers_value())

        string_to_sign = signing.build_string_to_sign(self._method, self.url, self._headers)
        signature = self._client.sign_message(string_to_sign)
        self.set_header(HEADER_AUTHORIZATION, signing.authorization_value(signature))

        logger.debug(
            "Request signed",
            method=self._method,
            url=self.url,
            date=self._headers[HEADER_DATE][0],
        )
        return self

    def prepare(self) -> requests.PreparedRequest:
        """
        Build the wire-level request from the current state.

        Multi-valued headers are folded into one comma separated value.

        Raises:
            RequestAssemblyError: If the headers cannot be applied
        """
        headers: Dict[str, str] = {}
        seen: Dict[str, str] = {}
        for name, values in self._headers.items():
            folded = name.lower()
            if folded in seen:
                raise RequestAssemblyError(
                    f"Headers {seen[folded]!r} and {name!r} differ only in case"
                )
            seen[folded] = name
            value = ", ".join(values)
            try:
                value.encode("latin-1")
            except UnicodeEncodeError as e:
                raise RequestAssemblyError(
                    f"Header {name!r} has a value that is not Latin-1 encodable"
                ) from e
            headers[name] = value

        http_request = requests.Request(
            method=self._method,
            url=self._client.resolve_url(self.url),
            headers=headers,
            data=self._content,
        )
        try:
            return http_request.prepare()
        except (InvalidHeader, ValueError) as e:
            raise RequestAssemblyError(
                f"Failed to compose request from the provided information: {e}"
            ) from e

    async def send_async(self, contents: Optional[Contents] = None) -> AdminApiResponse:
        """
        Sign and send the request.

        Args:
            contents: Optional body, applied with :meth:`set_contents` first

        Returns:
            The successful response

        Raises:
            AdminApiError: If the API answers with a non-2xx status
            RequestAssemblyError: If the request cannot be composed
        """
        if contents is not None:
            self.set_contents(contents)

        self.sign()
        return await self._client.send_request_async(self.prepare())

    async def send_json_async(self, obj: Any) -> AdminApiResponse:
        """Send ``obj`` as a JSON body."""
        self.set_json_contents(obj)
        return await self.send_async()

    def send(self, contents: Optional[Contents] = None) -> AdminApiResponse:
        """Blocking form of :meth:`send_async`, raising the same errors."""
        return self._client.run_blocking(self.send_async(contents))

    def send_json(self, obj: Any) -> AdminApiResponse:
        """Blocking form of :meth:`send_json_async`."""
        return self._client.run_blocking(self.send_json_async(obj))

    def __repr__(self) -> str:
        return f"<AdminApiRequest [{self._method} {self.url}]>"
