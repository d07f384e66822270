"""
Unit tests for sending admin API requests and classifying the results.
"""

import asyncio
import json
from unittest.mock import patch

import pytest
import requests

from zerokit_admin_client import (
    AdminApiClient,
    AdminApiError,
    AdminApiResponse,
    PARSING_ERROR_CODE,
    RequestAssemblyError,
)
from zerokit_admin_client.client import parse_error, run_blocking

from conftest import ADMIN_KEY, SERVICE_URL, make_http_response


class TestSend:
    """Test the transport executor."""

    def test_send_success(self, client, session):
        session.send.return_value = make_http_response(
            200,
            b'{"UserId":"u1","RegSessionId":"s1","RegSessionVerifier":"v1"}',
            headers={"Content-Type": "application/json"},
        )

        response = client.create_post_request("/api/v4/admin/user/init-user-registration").send()

        assert isinstance(response, AdminApiResponse)
        assert response.status_code == 200
        assert response.json()["RegSessionId"] == "s1"

        prepared = session.send.call_args[0][0]
        assert prepared.method == "POST"
        assert prepared.url == SERVICE_URL + "/api/v4/admin/user/init-user-registration"
        for name in ("UserId", "TresoritDate", "Content-SHA256", "Content-Length",
                     "Content-Type", "HMACHeaders", "Authorization"):
            assert name in prepared.headers
        assert prepared.headers["UserId"] == "admin@abcd1234.tresorit.io"

    @pytest.mark.parametrize("status_code", [200, 201, 204, 299])
    def test_send_any_2xx(self, client, session, status_code):
        session.send.return_value = make_http_response(status_code, b"")

        response = client.create_request("/path").send()

        assert response.status_code == status_code

    def test_send_with_contents(self, client, session):
        client.create_put_request("/api/v4/admin/tenant/upload-custom-content?fileName=css/login.css") \
            .set_header("Content-Type", "text/css") \
            .send("body { background-color: red; }")

        prepared = session.send.call_args[0][0]
        assert prepared.body == b"body { background-color: red; }"
        assert prepared.headers["Content-Type"] == "text/css"

    def test_send_json(self, client, session):
        client.create_post_request("/api/v4/admin/user/set-user-state").send_json(
            {"UserId": "user-1", "Enabled": False}
        )

        prepared = session.send.call_args[0][0]
        assert json.loads(prepared.body) == {"UserId": "user-1", "Enabled": False}
        assert prepared.headers["Content-Type"] == "application/json"

    def test_request_is_resigned_on_every_send(self, client, session):
        request = client.create_request("/path")

        with patch(
            "zerokit_admin_client.signing.format_timestamp",
            side_effect=["2026-10-18T12:00:00Z", "2026-10-18T12:05:00Z"],
        ):
            request.send()
            request.send()

        first, second = [c[0][0] for c in session.send.call_args_list]
        assert first.headers["TresoritDate"] == "2026-10-18T12:00:00Z"
        assert second.headers["TresoritDate"] == "2026-10-18T12:05:00Z"
        assert first.headers["Authorization"] != second.headers["Authorization"]

    def test_send_api_error(self, client, session):
        session.send.return_value = make_http_response(
            400,
            b'{"ErrorCode":"UserNotExists","ErrorMessage":"The given user does not exist."}',
            reason="Bad Request",
        )

        with pytest.raises(AdminApiError) as exc_info:
            client.create_post_request("/api/v4/admin/user/set-user-state").send_json(
                {"UserId": "missing", "Enabled": False}
            )

        assert exc_info.value.error_code == "UserNotExists"
        assert exc_info.value.message == "The given user does not exist."
        assert exc_info.value.status_code == 400
        assert exc_info.value.cause is None

    def test_send_unparsable_error(self, client, session):
        session.send.return_value = make_http_response(500, b"Internal Server Error", reason="Internal Server Error")

        with pytest.raises(AdminApiError) as exc_info:
            client.create_request("/path").send()

        assert exc_info.value.error_code == PARSING_ERROR_CODE
        assert isinstance(exc_info.value.cause, json.JSONDecodeError)
        assert exc_info.value.__cause__ is exc_info.value.cause

    def test_send_assembly_error(self, client, session):
        request = client.create_request("/path").set_header("X-Test", "bad\nvalue")

        with pytest.raises(RequestAssemblyError):
            request.send()

        session.send.assert_not_called()

    def test_send_non_latin1_header(self, client, session):
        request = client.create_request("/path").set_header("X-Name", "árvíztűrő")

        with pytest.raises(RequestAssemblyError):
            request.send()

        session.send.assert_not_called()

    def test_transport_error_propagates(self, client, session):
        error = requests.ConnectionError("connection refused")
        session.send.side_effect = error

        with pytest.raises(requests.ConnectionError) as exc_info:
            client.create_request("/path").send()

        assert exc_info.value is error
        assert session.send.call_count == 1

    @patch("zerokit_admin_client.client.requests.Session.send")
    def test_default_session(self, mock_send):
        """Client sends over its own requests session."""
        mock_send.return_value = make_http_response(200, b"{}")

        with AdminApiClient(SERVICE_URL, ADMIN_KEY) as client:
            client.create_request("/path").send()

        mock_send.assert_called_once()
        prepared = mock_send.call_args[0][0]
        assert prepared.url == SERVICE_URL + "/path"


class TestSendAsync:
    """Test the coroutine send forms and the blocking adapter."""

    @pytest.mark.asyncio
    async def test_send_async(self, client, session):
        session.send.return_value = make_http_response(200, b'{"ContentType":"text/css"}')

        response = await client.create_put_request(
            "/api/v4/admin/tenant/upload-custom-content?fileName=css/login.css"
        ).set_header("Content-Type", "text/css").send_async("body { background-color: red; }")

        assert response.json()["ContentType"] == "text/css"

    @pytest.mark.asyncio
    async def test_send_json_async(self, client, session):
        await client.create_post_request("/path").send_json_async({"a": 1})

        prepared = session.send.call_args[0][0]
        assert prepared.body == b'{"a":1}'

    @pytest.mark.asyncio
    async def test_send_async_api_error(self, client, session):
        session.send.return_value = make_http_response(
            404, b'{"errorCode":"NotFound","message":"No such thing."}'
        )

        with pytest.raises(AdminApiError) as exc_info:
            await client.create_request("/path").send_async()

        assert exc_info.value.error_code == "NotFound"

    @pytest.mark.asyncio
    async def test_blocking_send_inside_event_loop(self, client, session):
        """Blocking send works from a coroutine and raises the same error type."""
        session.send.return_value = make_http_response(
            400, b'{"errorCode":"UserNotExists","message":"No such user."}'
        )

        with pytest.raises(AdminApiError) as exc_info:
            client.create_request("/path").send()

        assert exc_info.value.error_code == "UserNotExists"

    @pytest.mark.asyncio
    async def test_concurrent_sends(self, client, session):
        requests_ = [client.create_request(f"/path/{i}") for i in range(5)]

        responses = await asyncio.gather(*(r.send_async() for r in requests_))

        assert [r.status_code for r in responses] == [200] * 5
        urls = sorted(c[0][0].url for c in session.send.call_args_list)
        assert urls == sorted(SERVICE_URL + f"/path/{i}" for i in range(5))

    def test_run_blocking_preserves_exception(self):
        error = AdminApiError("SomeCode", "Some message")

        async def fail():
            raise error

        with pytest.raises(AdminApiError) as exc_info:
            run_blocking(fail())

        assert exc_info.value is error

    @pytest.mark.asyncio
    async def test_run_blocking_preserves_exception_in_event_loop(self):
        error = AdminApiError("SomeCode", "Some message")

        async def fail():
            raise error

        with pytest.raises(AdminApiError) as exc_info:
            run_blocking(fail())

        assert exc_info.value is error

    def test_run_blocking_returns_result(self):
        async def answer():
            return 42

        assert run_blocking(answer()) == 42


class TestParseError:
    """Test classification of error responses."""

    def test_parse_error(self):
        response = make_http_response(
            400, b'{"ErrorCode":"UserNotExists","ErrorMessage":"No such user."}'
        )

        error = parse_error(response)

        assert error.error_code == "UserNotExists"
        assert error.message == "No such user."
        assert str(error) == "UserNotExists: No such user."

    def test_parse_error_camel_case(self):
        response = make_http_response(403, b'{"errorCode":"Forbidden","message":"Denied.","extra":1}')

        error = parse_error(response)

        assert error.error_code == "Forbidden"
        assert error.message == "Denied."
        assert error.status_code == 403

    @pytest.mark.parametrize(
        "body,cause_type",
        [
            (b"Internal Server Error", json.JSONDecodeError),
            (b"", json.JSONDecodeError),
            (b'["UserNotExists"]', ValueError),
            (b'{"message":"no code"}', ValueError),
            (b'{"errorCode":42,"message":"bad code"}', ValueError),
            (b'{"errorCode":"NoMessage"}', ValueError),
            (b"\xff\xfe\xfa", UnicodeDecodeError),
            (b"[" * 200000, RecursionError),
        ],
    )
    def test_parse_error_fallback(self, body, cause_type):
        error = parse_error(make_http_response(502, body))

        assert error.error_code == PARSING_ERROR_CODE
        assert error.message == "The client was unable to parse the error response message."
        assert isinstance(error.cause, cause_type)
        assert error.status_code == 502
