import httpx
import pytest

from blogwriter.exceptions import (
    AuthenticationError,
    BlogWriterError,
    EmptyResultError,
    RateLimitError,
    TransportError,
)
from blogwriter.http_client import HTTPClient
from blogwriter.models import GenerateContentRequest

from conftest import RecordingTransport, gemini_response


def _client(transport, api_key="test-key"):
    return HTTPClient(api_key=api_key, transport=transport)


def _request():
    return GenerateContentRequest.from_prompt("Write about tea")


def test_generate_text_returns_first_part():
    transport = RecordingTransport(body=gemini_response("# Tea\n\nHot."))
    with _client(transport) as client:
        assert client.generate_text("gemini-1.5-flash", _request()) == "# Tea\n\nHot."
    assert len(transport.requests) == 1


def test_request_shape():
    transport = RecordingTransport(body=gemini_response("ok"))
    with _client(transport) as client:
        client.generate_text("gemini-1.5-flash", _request())

    request = transport.requests[0]
    assert request.method == "POST"
    assert request.url.params["key"] == "test-key"
    assert "gemini-1.5-flash" in request.url.path
    assert request.url.path.endswith(":generateContent")

    payload = transport.last_payload()
    assert payload["contents"][0]["parts"][0]["text"] == "Write about tea"
    assert payload["generationConfig"] == {
        "temperature": 0.7,
        "topK": 40,
        "topP": 0.95,
        "maxOutputTokens": 2048,
    }
    assert len(payload["safetySettings"]) == 4
    assert all(s["threshold"] == "BLOCK_MEDIUM_AND_ABOVE" for s in payload["safetySettings"])


@pytest.mark.parametrize("status,exc_type", [
    (400, AuthenticationError),
    (403, AuthenticationError),
    (429, RateLimitError),
    (500, TransportError),
    (503, TransportError),
    (404, TransportError),
])
def test_status_code_mapping(status, exc_type):
    body = {"error": {"code": status, "message": "nope", "status": "SOMETHING"}}
    transport = RecordingTransport(status_code=status, body=body)

    with _client(transport) as client:
        with pytest.raises(exc_type) as exc_info:
            client.generate_text("gemini-1.5-flash", _request())

    assert exc_info.value.status_code == status
    assert isinstance(exc_info.value, BlogWriterError)
    # no retry
    assert len(transport.requests) == 1


def test_error_details_keep_provider_message():
    body = {"error": {"code": 400, "message": "API key not valid", "status": "INVALID_ARGUMENT"}}
    transport = RecordingTransport(status_code=400, body=body)

    with _client(transport) as client:
        with pytest.raises(AuthenticationError) as exc_info:
            client.generate_text("gemini-1.5-flash", _request())

    assert exc_info.value.details["status"] == "INVALID_ARGUMENT"
    assert exc_info.value.details["response"] == "API key not valid"


def test_non_json_error_body():
    transport = RecordingTransport(status_code=502, content=b"Bad Gateway")
    with _client(transport) as client:
        with pytest.raises(TransportError) as exc_info:
            client.generate_text("gemini-1.5-flash", _request())
    assert exc_info.value.status_code == 502


def test_network_failure_is_transport_error():
    transport = RecordingTransport(exc=httpx.ConnectError)
    with _client(transport) as client:
        with pytest.raises(TransportError) as exc_info:
            client.generate_text("gemini-1.5-flash", _request())
    assert exc_info.value.status_code is None


def test_timeout_is_transport_error():
    transport = RecordingTransport(exc=httpx.ReadTimeout)
    with _client(transport) as client:
        with pytest.raises(TransportError):
            client.generate_text("gemini-1.5-flash", _request())


def test_malformed_success_body_is_transport_error():
    transport = RecordingTransport(content=b"<html>not json</html>")
    with _client(transport) as client:
        with pytest.raises(TransportError):
            client.generate_text("gemini-1.5-flash", _request())


@pytest.mark.parametrize("body", [
    {"candidates": []},
    {},
    {"candidates": [{}]},
    {"candidates": [{"content": {"parts": []}}]},
    gemini_response(None),
    gemini_response("   \n  "),
])
def test_empty_results(body):
    transport = RecordingTransport(body=body)
    with _client(transport) as client:
        with pytest.raises(EmptyResultError):
            client.generate_text("gemini-1.5-flash", _request())


def test_blocked_prompt_reports_reason():
    transport = RecordingTransport(body={"promptFeedback": {"blockReason": "SAFETY"}})
    with _client(transport) as client:
        with pytest.raises(EmptyResultError) as exc_info:
            client.generate_text("gemini-1.5-flash", _request())
    assert exc_info.value.details == {"block_reason": "SAFETY"}


def test_missing_key_makes_no_request():
    transport = RecordingTransport(body=gemini_response("ok"))
    with _client(transport, api_key=None) as client:
        with pytest.raises(AuthenticationError):
            client.generate_text("gemini-1.5-flash", _request())
    assert transport.requests == []
