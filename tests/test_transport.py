import json
import logging

import pytest
import requests

from marathon_adapter.errors import TransportError
from marathon_adapter.transport import MarathonTransport


class FakeResponse:
    def __init__(self, status_code: int = 200, body=None, text=None, headers=None) -> None:
        self.status_code = status_code
        self.headers = headers or {}
        if text is None:
            text = json.dumps(body) if body is not None else ""
        self.text = text


class FakeSession:
    def __init__(self, *responses) -> None:
        self.responses = list(responses)
        self.requests = []
        self.closed = False

    def request(self, method, url, **kwargs):
        self.requests.append({"method": method, "url": url, **kwargs})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def close(self) -> None:
        self.closed = True


def _transport(*responses, **kwargs):
    session = FakeSession(*responses)
    transport = MarathonTransport("http://marathon.local:8080/", session=session, **kwargs)
    return transport, session


def test_get_joins_base_url_prefix_and_path():
    transport, session = _transport(FakeResponse(body={"apps": []}))
    assert transport.get("/apps") == {"apps": []}
    sent = session.requests[0]
    assert sent["method"] == "GET"
    assert sent["url"] == "http://marathon.local:8080/v2/apps"
    assert sent["json"] is None
    assert sent["headers"]["Accept"] == "application/json"


def test_custom_prefix_and_timeout():
    transport, session = _transport(FakeResponse(body={}), api_prefix="marathon/v2/", request_timeout_seconds=2.5)
    transport.get("/apps")
    assert session.requests[0]["url"] == "http://marathon.local:8080/marathon/v2/apps"
    assert session.requests[0]["timeout"] == 2.5


def test_put_sends_body_params_and_custom_header():
    transport, session = _transport(
        FakeResponse(body={"deploymentId": "d-1", "version": "v2"}),
        header_name="Authorization",
        header_value="token=abc",
        request_id_provider=lambda: "req-42",
    )
    payload = transport.put("/apps/web", body={"instances": 3}, params={"force": "true"})
    assert payload == {"deploymentId": "d-1", "version": "v2"}
    sent = session.requests[0]
    assert sent["method"] == "PUT"
    assert sent["json"] == {"instances": 3}
    assert sent["params"] == {"force": "true"}
    assert sent["headers"]["Authorization"] == "token=abc"
    assert sent["headers"]["X-Request-Id"] == "req-42"


def test_empty_body_decodes_to_empty_dict():
    transport, _ = _transport(FakeResponse(status_code=204, text=""))
    assert transport.delete("/apps/web") == {}


def test_non_2xx_raises_transport_error_with_status_and_message():
    transport, _ = _transport(
        FakeResponse(
            status_code=409,
            body={"message": "An app with id [/web] already exists."},
            headers={"X-Request-Id": "srv-9"},
        )
    )
    with pytest.raises(TransportError) as excinfo:
        transport.post("/apps", body={"id": "/web"})
    error = excinfo.value
    assert error.status_code == 409
    assert error.request_id == "srv-9"
    assert error.code == "TRANSPORT"
    assert "already exists" in str(error)
    assert "requestId=srv-9" in str(error)


def test_error_message_is_redacted():
    transport, _ = _transport(FakeResponse(status_code=401, text="Authorization: Bearer sekrit rejected"))
    with pytest.raises(TransportError) as excinfo:
        transport.get("/apps")
    assert "sekrit" not in str(excinfo.value)
    assert excinfo.value.status_code == 401


def test_connection_failure_raises_transport_error_without_status():
    transport, _ = _transport(requests.ConnectionError("Max retries exceeded with url: /v2/apps"))
    with pytest.raises(TransportError, match="connection failed") as excinfo:
        transport.get("/apps")
    assert excinfo.value.status_code is None


def test_undecodable_body_raises_transport_error():
    transport, _ = _transport(FakeResponse(status_code=200, text="<html>proxy error</html>"))
    with pytest.raises(TransportError, match="undecodable"):
        transport.get("/apps")


def test_missing_base_url_fails_before_request():
    session = FakeSession()
    transport = MarathonTransport("", session=session)
    with pytest.raises(TransportError, match="base URL"):
        transport.get("/apps")
    assert session.requests == []


def test_calls_emit_redacted_observability_events(caplog):
    transport, _ = _transport(FakeResponse(status_code=503, text="leader election in progress"))
    with caplog.at_level(logging.INFO, logger="marathon.obs"):
        with pytest.raises(TransportError):
            transport.get("/apps/secret-app", operation="get_application")
    lines = [record.getMessage() for record in caplog.records if record.name == "marathon.obs"]
    assert any("event=marathon_call_started" in line for line in lines)
    failed = [line for line in lines if "event=marathon_call_failed" in line]
    assert failed and "operation=get_application" in failed[0]
    assert "status_code=503" in failed[0]
    assert "secret-app" not in " ".join(lines)


def test_close_closes_session():
    transport, session = _transport()
    transport.close()
    assert session.closed is True
