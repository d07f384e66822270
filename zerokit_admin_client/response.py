"""Successful admin API responses."""

import json
from functools import cached_property
from types import MappingProxyType
from typing import Any, Mapping

import requests
from requests.structures import CaseInsensitiveDict


class AdminApiResponse:
    """
    Snapshot of a successful (2xx) admin API response.

    The body is kept as raw bytes; ``text`` and ``json()`` decode it on
    demand. Decoding errors are raised as-is.

    ``headers`` maps each name to a single string. A header the server
    sent more than once arrives folded into one comma separated value,
    as ``requests`` delivers it.
    """

    def __init__(
        self,
        status_code: int,
        reason: str,
        headers: Mapping[str, str],
        content: bytes,
    ):
        self._status_code = status_code
        self._reason = reason
        self._headers = MappingProxyType(CaseInsensitiveDict(headers))
        self._content = content

    @classmethod
    def from_http_response(cls, response: requests.Response) -> "AdminApiResponse":
        """Snapshot a fully read ``requests`` response."""
        return cls(
            status_code=response.status_code,
            reason=response.reason or "",
            headers=response.headers,
            content=response.content or b"",
        )

    @property
    def status_code(self) -> int:
        return self._status_code

    @property
    def reason(self) -> str:
        return self._reason

    @property
    def headers(self) -> Mapping[str, str]:
        return self._headers

    @property
    def content(self) -> bytes:
        """Raw response body."""
        return self._content

    @cached_property
    def text(self) -> str:
        """Response body decoded as UTF-8."""
        return self._content.decode("utf-8")

    def json(self, **kwargs) -> Any:
        """Parse the response body as JSON; kwargs go to ``json.loads``."""
        return json.loads(self.text, **kwargs)

    def __repr__(self) -> str:
        return f"<AdminApiResponse [{self._status_code}]>"
