import pytest
from unittest import mock
from fastapi.testclient import TestClient
from codereview.api import app, limiter, get_completion_service
from codereview.service import CompletionService
from codereview.upstream import extract_text

# Disable rate limiting for all tests
limiter.enabled = False


class StubUpstream:
    """Plays back a scripted list of outcomes; the last one repeats forever."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = []
        self.model = "stub-model"

    async def generate(self, prompt):
        self.calls.append(prompt)
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    def extract_text(self, response):
        return extract_text(response)


def text_response(text):
    return mock.Mock(text=text)


@pytest.fixture
def delays():
    return []


@pytest.fixture
def fake_sleep(delays):
    async def _sleep(seconds):
        delays.append(seconds)
    return _sleep


@pytest.fixture(scope="module")
def client():
    return TestClient(app)


@pytest.fixture
def override_service(fake_sleep):
    def _install(upstream):
        service = CompletionService(upstream, sleep=fake_sleep)
        app.dependency_overrides[get_completion_service] = lambda: service
        return service

    yield _install
    app.dependency_overrides.pop(get_completion_service, None)


@pytest.fixture
def base_payload():
    return {
        "code": "def add(a, b):\n    return a + b\n",
        "language": "python",
    }
