import pytest
import requests

from email_writer.config import DEFAULT_API_URL, DEFAULT_API_TIMEOUT
from email_writer.services.completion import (
    CompletionClient,
    CompletionError,
    BackendUnavailableError,
    CompletionHTTPError,
    UnexpectedResponseError,
    UNEXPECTED_FORMAT_MESSAGE,
    TIMEOUT_MESSAGE,
)

from conftest import FakeSession, make_response

API_URL = "http://proxy.test/api/generate"


def client_for(response=None, error=None):
    session = FakeSession(response=response, error=error)
    return CompletionClient(api_url=API_URL, timeout=5, session=session), session


def test_success_returns_text():
    client, _ = client_for(make_response(200, {"text": "hello"}))
    assert client.complete("x") == "hello"


def test_request_shape():
    """One POST with the prompt as JSON and the configured timeout."""
    client, session = client_for(make_response(200, {"text": "hello"}))
    client.complete("write something")

    assert len(session.calls) == 1
    call = session.calls[0]
    assert call["url"] == API_URL
    assert call["json"] == {"prompt": "write something"}
    assert call["headers"]["Content-Type"] == "application/json"
    assert call["timeout"] == 5


def test_defaults():
    client = CompletionClient()
    assert client.api_url == DEFAULT_API_URL == "http://localhost:3001/api/generate"
    assert client.timeout == DEFAULT_API_TIMEOUT
    assert isinstance(client.session, requests.Session)


def test_error_body_message_is_used():
    client, _ = client_for(make_response(500, {"error": "boom"}))
    with pytest.raises(CompletionHTTPError) as exc_info:
        client.complete("x")
    assert str(exc_info.value) == "boom"
    assert exc_info.value.status_code == 500


def test_nested_error_message_is_used():
    client, _ = client_for(make_response(429, {"error": {"type": "rate_limit", "message": "slow down"}}))
    with pytest.raises(CompletionHTTPError, match="slow down"):
        client.complete("x")


@pytest.mark.parametrize("response", [
    make_response(502, raw=b"<html>Bad Gateway</html>"),
    make_response(502, {}),
    make_response(502, {"error": ""}),
    make_response(502, ["not", "an", "object"]),
])
def test_status_message_when_error_body_unusable(response):
    client, _ = client_for(response)
    with pytest.raises(CompletionHTTPError) as exc_info:
        client.complete("x")
    assert str(exc_info.value) == "API request failed: 502"


@pytest.mark.parametrize("response", [
    make_response(200, {}),
    make_response(200, {"text": ""}),
    make_response(200, {"text": "   \n "}),
    make_response(200, {"text": None}),
    make_response(200, {"text": 42}),
    make_response(200, {"completion": "hello"}),
    make_response(200, ["hello"]),
    make_response(200, raw=b"hello"),
])
def test_unexpected_format(response):
    client, _ = client_for(response)
    with pytest.raises(UnexpectedResponseError) as exc_info:
        client.complete("x")
    assert str(exc_info.value) == UNEXPECTED_FORMAT_MESSAGE == "Unexpected API response format"


def test_unreachable_backend_is_rewritten():
    raw = "HTTPConnectionPool(host='proxy.test', port=80): Max retries exceeded ([Errno 111] Connection refused)"
    client, _ = client_for(error=requests.ConnectionError(raw))
    with pytest.raises(BackendUnavailableError) as exc_info:
        client.complete("x")

    message = str(exc_info.value)
    assert message.startswith("Cannot connect to server.")
    assert API_URL in message
    assert "Errno" not in message
    assert "Max retries" not in message


def test_connect_timeout_counts_as_unreachable():
    client, _ = client_for(error=requests.ConnectTimeout("connect timed out"))
    with pytest.raises(BackendUnavailableError, match="Cannot connect to server"):
        client.complete("x")


def test_read_timeout():
    client, _ = client_for(error=requests.ReadTimeout("read timed out"))
    with pytest.raises(BackendUnavailableError) as exc_info:
        client.complete("x")
    assert str(exc_info.value) == TIMEOUT_MESSAGE


def test_bad_url_is_a_completion_error():
    client, _ = client_for(error=requests.exceptions.MissingSchema("Invalid URL 'proxy': No scheme supplied"))
    with pytest.raises(CompletionError) as exc_info:
        client.complete("x")
    assert not isinstance(exc_info.value, BackendUnavailableError)
    assert "API_URL" in str(exc_info.value)


def test_no_retry_on_failure():
    client, session = client_for(make_response(503, {"error": "overloaded"}))
    with pytest.raises(CompletionHTTPError):
        client.complete("x")
    assert len(session.calls) == 1


def test_error_types_share_base():
    for error_type in (BackendUnavailableError, CompletionHTTPError, UnexpectedResponseError):
        assert issubclass(error_type, CompletionError)


@pytest.mark.parametrize("error", [
    requests.exceptions.ChunkedEncodingError("Connection broken: IncompleteRead(12 bytes read)"),
    requests.exceptions.ContentDecodingError("Received response with content-encoding: gzip, but failed to decode it"),
])
def test_dropped_connection_is_rewritten(error):
    client, _ = client_for(error=error)
    with pytest.raises(BackendUnavailableError) as exc_info:
        client.complete("x")

    message = str(exc_info.value)
    assert message.startswith("Cannot connect to server.")
    assert API_URL in message
    assert "API_URL" not in message
    assert "IncompleteRead" not in message


@pytest.mark.parametrize("error", [
    requests.exceptions.InvalidURL("Invalid URL 'http://': No host supplied"),
    requests.exceptions.InvalidSchema("No connection adapters were found for 'ftp://proxy'"),
])
def test_invalid_url_points_at_setting(error):
    client, _ = client_for(error=error)
    with pytest.raises(CompletionError) as exc_info:
        client.complete("x")
    assert not isinstance(exc_info.value, BackendUnavailableError)
    assert "API_URL" in str(exc_info.value)
