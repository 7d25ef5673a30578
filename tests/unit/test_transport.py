"""Tests for sfrest.transport."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from sfrest.exceptions import TransportError
from sfrest.transport import HttpResult, Transport


def _response(status=200, content=b'{"ok": true}', headers=None):
    r = MagicMock()
    r.status_code = status
    r.content = content
    r.headers = headers or {"Content-Type": "application/json"}
    return r


class TestTransport:
    def test_perform_returns_result(self):
        transport = Transport(timeout=5)
        resp = _response(headers={"Sforce-Limit-Info": "api-usage=3/15000"})

        with patch.object(transport.session, "request", return_value=resp) as req:
            result = transport.perform(
                "GET", "https://na1.salesforce.com/x", {"Authorization": "Bearer t"}, None
            )

        assert result.status_code == 200
        assert result.json() == {"ok": True}
        assert result.header("sforce-limit-info") == "api-usage=3/15000"
        kwargs = req.call_args.kwargs
        assert kwargs["method"] == "GET"
        assert kwargs["headers"] == {"Authorization": "Bearer t"}
        assert kwargs["timeout"] == 5.0

    def test_request_exception_becomes_transport_error(self):
        transport = Transport()

        with patch.object(
            transport.session, "request", side_effect=requests.ConnectionError("Network error")
        ):
            with pytest.raises(TransportError, match="Network error") as exc_info:
                transport.perform("GET", "https://na1.salesforce.com/x")

        assert isinstance(exc_info.value.__cause__, requests.ConnectionError)

    def test_empty_body(self):
        transport = Transport()

        with patch.object(transport.session, "request", return_value=_response(204, b"")):
            result = transport.perform("DELETE", "https://na1.salesforce.com/x")

        assert result.body == b""
        assert result.text == ""

    def test_close(self):
        transport = Transport()

        with patch.object(transport.session, "close") as close:
            transport.close()

        close.assert_called_once()


def test_http_result_missing_header():
    assert HttpResult(200).header("Sforce-Limit-Info") is None
