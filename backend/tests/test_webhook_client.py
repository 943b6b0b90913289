from __future__ import annotations

from unittest.mock import MagicMock, patch

import requests

from portfolio_ceo.clients.webhook import WebhookClient
from portfolio_ceo.services.result import ErrorKind


def _response(status_code: int, text: str = "", reason: str = "OK") -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400  # mirrors requests: 3xx counts as ok
    response.reason = reason
    response.text = text
    return response


def test_post_sends_json_with_content_type():
    client = WebhookClient(url="http://webhook.test/hook", timeout_s=5)
    with patch("portfolio_ceo.clients.webhook.requests.request", return_value=_response(200, '{"title": "Plan A"}')) as mocked:
        result = client.post({"action": "create_plan"})

    mocked.assert_called_once_with(
        "POST",
        "http://webhook.test/hook",
        headers={"Content-Type": "application/json"},
        json={"action": "create_plan"},
        timeout=5,
    )
    assert result.is_ok
    assert result.value.status_code == 200
    assert result.value.data == {"title": "Plan A"}
    assert result.value.is_json


def test_plain_text_body_is_kept_raw():
    client = WebhookClient(url="http://webhook.test/hook")
    with patch("portfolio_ceo.clients.webhook.requests.request", return_value=_response(200, "Resumen listo")):
        result = client.post({})

    assert result.is_ok
    assert result.value.text == "Resumen listo"
    assert result.value.data is None
    assert not result.value.is_json


def test_non_2xx_status_is_an_error():
    client = WebhookClient(url="http://webhook.test/hook")
    with patch(
        "portfolio_ceo.clients.webhook.requests.request",
        return_value=_response(500, "boom", reason="Internal Server Error"),
    ):
        result = client.post({})

    assert not result.is_ok
    assert result.kind is ErrorKind.HTTP_STATUS
    assert result.status_code == 500
    assert result.message == "Error: 500 Internal Server Error"


def test_transport_failure_is_an_error():
    client = WebhookClient(url="http://webhook.test/hook")
    with patch(
        "portfolio_ceo.clients.webhook.requests.request",
        side_effect=requests.ConnectionError("connection refused"),
    ):
        result = client.fetch()

    assert not result.is_ok
    assert result.kind is ErrorKind.TRANSPORT
    assert result.message.startswith("Error:")
    assert "connection refused" in result.message


def test_fetch_uses_get_without_body():
    client = WebhookClient(url="http://webhook.test/hook", timeout_s=2.5)
    with patch("portfolio_ceo.clients.webhook.requests.request", return_value=_response(200, "[]")) as mocked:
        result = client.fetch()

    assert mocked.call_args.args == ("GET", "http://webhook.test/hook")
    assert mocked.call_args.kwargs["json"] is None
    assert mocked.call_args.kwargs["timeout"] == 2.5
    assert result.value.data == []


def test_not_modified_is_an_error():
    not_modified = requests.Response()
    not_modified.status_code = 304
    not_modified.reason = "Not Modified"
    not_modified._content = b""
    client = WebhookClient(url="http://webhook.test/hook")
    with patch("portfolio_ceo.clients.webhook.requests.request", return_value=not_modified):
        result = client.fetch()

    assert not result.is_ok
    assert result.kind is ErrorKind.HTTP_STATUS
    assert result.status_code == 304
    assert result.message == "Error: 304 Not Modified"


def test_redirect_status_is_an_error():
    client = WebhookClient(url="http://webhook.test/hook")
    with patch("portfolio_ceo.clients.webhook.requests.request", return_value=_response(302, "", reason="Found")):
        result = client.post({})

    assert result.kind is ErrorKind.HTTP_STATUS
    assert result.message == "Error: 302 Found"
