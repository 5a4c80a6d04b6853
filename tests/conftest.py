import os
import sys
import json

import pytest
import requests

# Add project root to path so email_writer is importable without installing
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from email_writer.app import create_app
from email_writer.config import Settings


def make_response(status_code, body=None, raw=None):
    """Build a real requests.Response with a JSON (or raw) body."""
    response = requests.Response()
    response.status_code = status_code
    response.url = "http://proxy.test/api/generate"
    response.encoding = "utf-8"
    if raw is not None:
        response._content = raw
    else:
        response._content = json.dumps(body if body is not None else {}).encode("utf-8")
    return response


class FakeSession:
    """Stands in for requests.Session: returns a canned response or raises."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append({"url": url, **kwargs})
        if self.error is not None:
            raise self.error
        return self.response


class FakeCompleter:
    """Records prompts; replies with fixed text or raises."""

    def __init__(self, reply="Hi Sam,\n\nThanks for the update.\n", error=None):
        self.reply = reply
        self.error = error
        self.prompts = []

    def complete(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def completer():
    return FakeCompleter()


@pytest.fixture
def app(completer):
    """App with the default settings, a clean environment, and a fake completer."""
    app = create_app(settings=Settings(), completer=completer, environ={})
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()
