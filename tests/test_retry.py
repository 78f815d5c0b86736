import pytest
import requests

from econ_savings_charts.common import retry
from econ_savings_charts.common.retry import http_get_with_retries


class FakeResponse:
    def __init__(self, status_code, content=b"", headers=None):
        self.status_code = status_code
        self.content = content
        self.headers = headers or {}

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)


class FakeSession:
    def __init__(self, answers):
        self.answers = list(answers)
        self.calls = 0

    def get(self, url, headers=None, timeout=None):
        self.calls += 1
        answer = self.answers.pop(0)
        if isinstance(answer, Exception):
            raise answer
        return answer


@pytest.fixture
def sleeps(monkeypatch):
    slept = []
    monkeypatch.setattr(retry.time, "sleep", slept.append)
    return slept


def test_transient_status_is_retried(sleeps):
    session = FakeSession([FakeResponse(503), FakeResponse(200, b"ok")])

    assert http_get_with_retries("https://example.org", session=session) == b"ok"
    assert session.calls == 2
    assert len(sleeps) == 1


def test_retry_after_header_is_honoured(sleeps):
    session = FakeSession([FakeResponse(429, headers={"Retry-After": "3"}), FakeResponse(200, b"ok")])

    http_get_with_retries("https://example.org", session=session)
    assert sleeps == [3.0]


def test_connection_errors_are_retried(sleeps):
    session = FakeSession([requests.ConnectionError("reset"), FakeResponse(200, b"body")])
    assert http_get_with_retries("https://example.org", session=session) == b"body"


def test_client_error_is_raised_immediately(sleeps):
    session = FakeSession([FakeResponse(404), FakeResponse(200)])

    with pytest.raises(requests.HTTPError):
        http_get_with_retries("https://example.org", session=session)
    assert session.calls == 1
    assert sleeps == []


def test_gives_up_after_max_attempts(sleeps):
    session = FakeSession([requests.Timeout("slow")] * 3)

    with pytest.raises(requests.Timeout):
        http_get_with_retries("https://example.org", session=session, max_attempts=3)
    assert session.calls == 3
    assert len(sleeps) == 2


def test_last_transient_status_surfaces_as_http_error(sleeps):
    session = FakeSession([FakeResponse(502), FakeResponse(502)])

    with pytest.raises(requests.HTTPError):
        http_get_with_retries("https://example.org", session=session, max_attempts=2)
