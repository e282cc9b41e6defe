import json
from dataclasses import dataclass

import httpx
import pytest

from styraclient.http_error import HTTPError, StyraError
from styraclient.transport import APIResponse, BaseClient


def make_client(handler, token="token"):
    http_client = httpx.Client(transport=httpx.MockTransport(handler))
    return BaseClient("http://test.com", token, http_client)


def recording_handler(seen, status=200, content=b""):
    def handler(request):
        seen.append(request)
        return httpx.Response(status, content=content)

    return handler


def test_request_without_body_sends_empty_content():
    seen = []
    client = make_client(recording_handler(seen))
    response = client.request("GET", "/v1/systems/abc")
    assert response.status_code == 200
    request = seen[0]
    assert request.method == "GET"
    assert str(request.url) == "http://test.com/v1/systems/abc"
    assert request.content == b""


def test_request_sets_auth_and_content_type_headers():
    seen = []
    token = "token"
    client = make_client(recording_handler(seen), token=token)
    client.request("GET", "/v1/users/name")
    request = seen[0]
    assert request.headers["Authorization"] == f"Bearer {token}"
    assert request.headers["Content-Type"] == "application/json"


def test_request_body_is_json_with_trailing_newline():
    seen = []
    client = make_client(recording_handler(seen))
    payload = {"name": "mysystem", "read_only": True, "items": [1, 2]}
    client.request("POST", "/v1/systems", payload)
    content = seen[0].content
    assert content.endswith(b"\n")
    assert not content.endswith(b"\n\n")
    assert json.loads(content) == payload


def test_request_body_escapes_html_characters():
    seen = []
    client = make_client(recording_handler(seen))
    payload = {"value": "<a & b>"}
    client.request("PUT", "/v1/secrets/x", payload)
    content = seen[0].content
    assert b"<" not in content
    assert b">" not in content
    assert b"&" not in content
    assert json.loads(content) == payload


def test_request_body_uses_to_dict():
    class Thing:
        def to_dict(self):
            return {"user_id": "name"}

    seen = []
    client = make_client(recording_handler(seen))
    client.request("POST", "/v1/invitations?email=false", Thing())
    assert json.loads(seen[0].content) == {"user_id": "name"}
    assert str(seen[0].url) == "http://test.com/v1/invitations?email=false"


def test_request_body_encodes_plain_dataclass():
    @dataclass
    class Payload:
        key: str

    seen = []
    client = make_client(recording_handler(seen))
    client.request("POST", "/x", Payload(key="groups"))
    assert json.loads(seen[0].content) == {"key": "groups"}


def test_request_unencodable_body_raises():
    client = make_client(recording_handler([]))
    with pytest.raises(StyraError, match="could not encode body"):
        client.request("POST", "/x", object())


def test_request_transport_failure_raises_styra_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    client = make_client(handler)
    with pytest.raises(StyraError, match="could not send request"):
        client.request("GET", "/v1/systems/abc")


def test_send_returns_api_response_on_success():
    client = make_client(recording_handler([], content=b"expected response from styra api"))
    result = client._send("GET", "/v1/users/name")
    assert result == APIResponse(status_code=200, body=b"expected response from styra api")


def test_send_accepts_extra_status_codes():
    client = make_client(recording_handler([], status=404, content=b'{"request_id":"test"}'))
    result = client._send("DELETE", "/v1/systems/x", ok=(200, 404))
    assert result.status_code == 404
    assert result.body == b'{"request_id":"test"}'


def test_send_raises_http_error_on_unexpected_status():
    client = make_client(recording_handler([], status=500))
    with pytest.raises(HTTPError) as info:
        client._send("GET", "/v1/systems/x")
    assert info.value.status_code == 500


def test_context_manager_closes_owned_client():
    with BaseClient("http://test.com", "token") as client:
        inner = client.http_client
        assert inner.is_closed is False
    assert inner.is_closed is True


def test_close_leaves_supplied_client_open():
    http_client = httpx.Client(transport=httpx.MockTransport(recording_handler([])))
    client = BaseClient("http://test.com", "token", http_client)
    client.close()
    assert http_client.is_closed is False