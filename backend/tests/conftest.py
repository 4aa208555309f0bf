import json

import pytest
from fastapi.testclient import TestClient

from sitegen.db import WebsiteStore
from sitegen.main import create_app

HOME_MARKUP = (
    "() => { return (<div><h1 data-edit-id=\"hero\">Welcome</h1>"
    "<p data-edit-id='tagline'>Fresh bread daily</p>"
    "<button data-nav-target=\"About\">About us</button></div>); }"
)
ABOUT_MARKUP = (
    "() => { return (<div><h2 data-edit-id=\"about-title\">Our story</h2>"
    "<a data-nav-target='home'>Back</a></div>); }"
)


class FakeCompletionClient:
    """Stands in for the completion API, replaying canned responses"""

    def __init__(self, responses=None, error=None):
        self.responses = list(responses or [])
        self.error = error
        self.calls = []

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        self.calls.append((system_prompt, user_prompt))
        if self.error:
            raise self.error
        return self.responses.pop(0)


@pytest.fixture
def site_payload():
    return {
        "pages": {"index": HOME_MARKUP, "about": ABOUT_MARKUP},
        "styles": "body { font-family: sans-serif; }",
    }


@pytest.fixture
def store():
    return WebsiteStore()


@pytest.fixture
def fake_client(site_payload):
    return FakeCompletionClient(responses=[json.dumps(site_payload)])


@pytest.fixture
def client(store, fake_client):
    app = create_app(store=store, completion_client=fake_client)
    with TestClient(app) as test_client:
        yield test_client
