"""
Client for the completion proxy: POST a prompt, get generated text back.
"""

import logging
from typing import Optional, Protocol

import requests

from email_writer.config import log_event, DEFAULT_API_URL, DEFAULT_API_TIMEOUT

UNEXPECTED_FORMAT_MESSAGE = "Unexpected API response format"
TIMEOUT_MESSAGE = "The server took too long to respond. Please try again."

_BAD_URL_ERRORS = (
    requests.exceptions.InvalidURL,
    requests.exceptions.MissingSchema,
    requests.exceptions.InvalidSchema,
)


# --- ERRORS ---

class CompletionError(Exception):
    """A failed completion. The message is meant to be shown to the user."""


class BackendUnavailableError(CompletionError):
    """The completion endpoint could not be reached."""


class CompletionHTTPError(CompletionError):
    """The completion endpoint answered with a non-success status."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


class UnexpectedResponseError(CompletionError):
    """The completion endpoint answered 2xx without usable text."""

    def __init__(self, message: str = UNEXPECTED_FORMAT_MESSAGE):
        super().__init__(message)


# --- CLIENT ---

class Completer(Protocol):
    def complete(self, prompt: str) -> str:
        ...


class CompletionClient:
    """
    Sends {"prompt": ...} to the proxy and expects {"text": ...} in return.
    One request per call: no retries, no streaming.
    """

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        timeout: float = DEFAULT_API_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.api_url = api_url
        self.timeout = timeout
        self.session = session or requests.Session()

    def complete(self, prompt: str) -> str:
        log_event(logging.INFO, "completion_request", url=self.api_url, chars=len(prompt))

        try:
            response = self.session.post(
                self.api_url,
                json={"prompt": prompt},
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.ConnectionError as e:
            log_event(logging.ERROR, "completion_unreachable", url=self.api_url, error=str(e))
            raise BackendUnavailableError(self._unreachable_message()) from e
        except requests.Timeout as e:
            log_event(logging.ERROR, "completion_timeout", url=self.api_url, timeout=self.timeout)
            raise BackendUnavailableError(TIMEOUT_MESSAGE) from e
        except _BAD_URL_ERRORS as e:
            log_event(logging.ERROR, "completion_bad_url", url=self.api_url, error=str(e))
            raise CompletionError(
                f"Could not send the request to {self.api_url}. Check the API_URL setting."
            ) from e
        except requests.RequestException as e:
            # Connection dropped mid-response (ChunkedEncodingError, ContentDecodingError, ...)
            log_event(logging.ERROR, "completion_transport_error", url=self.api_url, error=str(e))
            raise BackendUnavailableError(self._unreachable_message()) from e

        if not response.ok:
            message = self._error_message(response)
            log_event(logging.ERROR, "completion_http_error", status=response.status_code, error=message)
            raise CompletionHTTPError(message, response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            log_event(logging.ERROR, "completion_bad_json", status=response.status_code)
            raise UnexpectedResponseError() from e

        text = data.get("text") if isinstance(data, dict) else None
        if not isinstance(text, str) or not text.strip():
            log_event(logging.ERROR, "completion_bad_format", keys=sorted(data) if isinstance(data, dict) else type(data).__name__)
            raise UnexpectedResponseError()

        log_event(logging.INFO, "completion_success", chars=len(text))
        return text

    def _unreachable_message(self) -> str:
        return f"Cannot connect to server. Make sure the backend server is running at {self.api_url}."

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        """Prefer the proxy's own error text; otherwise describe the status."""
        try:
            data = response.json()
        except ValueError:
            data = None

        if isinstance(data, dict):
            error = data.get("error")
            # Some providers nest the message: {"error": {"message": "..."}}
            if isinstance(error, dict):
                error = error.get("message")
            if isinstance(error, str) and error.strip():
                return error

        return f"API request failed: {response.status_code}"
