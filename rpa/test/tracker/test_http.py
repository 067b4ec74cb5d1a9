"""Tests for tracker/http.py."""

from __future__ import annotations

import io
import json
import urllib.error
from email.message import Message
from unittest.mock import MagicMock, patch

from rpa.core.result import Err, Ok
from rpa.tracker.http import HttpError, MockHttpClient, RealHttpClient

URL = "https://jira.example.com/rest/api/2/version"


def _response(payload: bytes) -> MagicMock:
    response = MagicMock()
    response.read.return_value = payload
    response.__enter__.return_value = response
    return response


def _http_error(code: int, body: bytes) -> urllib.error.HTTPError:
    return urllib.error.HTTPError(URL, code, "Bad Request", Message(), io.BytesIO(body))


class TestRealHttpClient:
    """Tests for RealHttpClient."""

    @patch("urllib.request.urlopen")
    def test_sends_json_with_basic_auth(self, mock_urlopen: MagicMock) -> None:
        mock_urlopen.return_value = _response(b'{"id": "10001"}')

        result = RealHttpClient(basic_auth=("ci", "secret")).request("POST", URL, {"name": "1.3.0"})

        assert result == Ok({"id": "10001"})
        request = mock_urlopen.call_args.args[0]
        assert request.get_method() == "POST"
        assert json.loads(request.data) == {"name": "1.3.0"}
        assert request.get_header("Authorization") == "Basic Y2k6c2VjcmV0"

    @patch("urllib.request.urlopen")
    def test_empty_body(self, mock_urlopen: MagicMock) -> None:
        mock_urlopen.return_value = _response(b"")

        assert RealHttpClient().request("DELETE", URL + "/10001") == Ok(None)

    @patch("urllib.request.urlopen")
    def test_jira_error_messages(self, mock_urlopen: MagicMock) -> None:
        body = json.dumps({"errorMessages": [], "errors": {"name": "A version with this name already exists"}})
        mock_urlopen.side_effect = _http_error(400, body.encode())

        result = RealHttpClient().request("POST", URL, {"name": "1.3.0"})

        assert result == Err(HttpError(url=URL, status=400, message="name: A version with this name already exists"))

    @patch("urllib.request.urlopen")
    def test_unreachable(self, mock_urlopen: MagicMock) -> None:
        mock_urlopen.side_effect = urllib.error.URLError("Name or service not known")

        result = RealHttpClient().request("GET", URL)

        assert isinstance(result, Err)
        assert result.error.status == 0

    @patch("urllib.request.urlopen")
    def test_invalid_json(self, mock_urlopen: MagicMock) -> None:
        mock_urlopen.return_value = _response(b"<html>")

        result = RealHttpClient().request("GET", URL)

        assert isinstance(result, Err)
        assert "JSON parse error" in result.error.message


def test_mock_client_records_calls() -> None:
    client = MockHttpClient()
    client.set_response("PUT", URL + "/1", {"released": True})
    client.set_response("GET", URL + "/2", HttpError(url=URL + "/2", status=500, message="boom"))

    assert client.request("PUT", URL + "/1", {"released": True}) == Ok({"released": True})
    assert isinstance(client.request("GET", URL + "/2"), Err)
    assert client.request("GET", URL + "/3") == Err(HttpError(url=URL + "/3", status=404, message="Not found (mock)"))
    assert client.requests_for("PUT") == [(URL + "/1", {"released": True})]
