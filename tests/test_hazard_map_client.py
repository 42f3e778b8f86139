import asyncio

import httpx
import pytest

from conftest import OKAYAMA, RecordingSleep, make_payload
from disaster_info.core.errors import ExternalApiError
from disaster_info.data_sources.hazard_map_client import HazardMapClient, RetryState, is_retryable_status
from disaster_info.utils.config import HazardMapConfig

BASE_URL = "http://hazard.test/api/hazard"


class ScriptedUpstream:
    """Replays a list of responses (or exceptions) one per request."""

    def __init__(self, *steps):
        self.steps = list(steps)
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        step = self.steps[min(len(self.requests), len(self.steps)) - 1]
        if isinstance(step, Exception):
            raise step
        if isinstance(step, int):
            return httpx.Response(step)
        return step


def make_client(upstream, sleep=None, **config) -> HazardMapClient:
    return HazardMapClient(
        config=HazardMapConfig(base_url=BASE_URL, **config),
        transport=httpx.MockTransport(upstream),
        sleep=sleep or RecordingSleep(),
    )


def fetch(client):
    return asyncio.run(client.fetch_hazard_payload(OKAYAMA))


def test_request_carries_coordinates_and_datum():
    upstream = ScriptedUpstream(httpx.Response(200, json=make_payload()))
    fetch(make_client(upstream))

    request = upstream.requests[0]
    assert request.method == "GET"
    assert request.url.params["lat"] == "34.6993494"
    assert request.url.params["lon"] == "133.9110238"
    assert request.url.params["datum"] == "wgs84"
    assert request.headers["accept"] == "application/json"
    assert "authorization" not in request.headers


def test_api_key_sent_as_bearer_token():
    upstream = ScriptedUpstream(httpx.Response(200, json=make_payload()))
    fetch(make_client(upstream, api_key="secret"))
    assert upstream.requests[0].headers["authorization"] == "Bearer secret"


def test_success_returns_payload():
    payload = make_payload()
    upstream = ScriptedUpstream(httpx.Response(200, json=payload))
    assert fetch(make_client(upstream)) == payload


def test_retries_503_twice_then_succeeds():
    payload = make_payload()
    sleep = RecordingSleep()
    upstream = ScriptedUpstream(503, 503, httpx.Response(200, json=payload))

    assert fetch(make_client(upstream, sleep=sleep)) == payload
    assert len(upstream.requests) == 3
    assert sleep.calls == [2.0, 2.0]


def test_404_fails_after_one_attempt():
    sleep = RecordingSleep()
    upstream = ScriptedUpstream(404)

    with pytest.raises(ExternalApiError) as exc:
        fetch(make_client(upstream, sleep=sleep))

    assert exc.value.status_code == 404
    assert exc.value.api_name == "hazard-map-api"
    assert len(upstream.requests) == 1
    assert sleep.calls == []


@pytest.mark.parametrize("status", [408, 429, 500, 502])
def test_retryable_statuses(status):
    upstream = ScriptedUpstream(status, httpx.Response(200, json=make_payload()))
    fetch(make_client(upstream))
    assert len(upstream.requests) == 2


def test_exhaustion_surfaces_last_status():
    sleep = RecordingSleep()
    upstream = ScriptedUpstream(504)

    with pytest.raises(ExternalApiError) as exc:
        fetch(make_client(upstream, sleep=sleep))

    assert exc.value.status_code == 504
    assert len(upstream.requests) == 3
    assert sleep.calls == [2.0, 2.0]


def test_timeouts_are_retried_then_surfaced():
    upstream = ScriptedUpstream(httpx.ReadTimeout("timed out"))

    with pytest.raises(ExternalApiError) as exc:
        fetch(make_client(upstream))

    assert len(upstream.requests) == 3
    assert exc.value.status_code is None
    assert exc.value.is_timeout


def test_connection_error_then_success():
    payload = make_payload()
    upstream = ScriptedUpstream(httpx.ConnectError("refused"), httpx.Response(200, json=payload))
    assert fetch(make_client(upstream)) == payload
    assert len(upstream.requests) == 2


def test_redirect_is_followed():
    payload = make_payload()

    def upstream(request: httpx.Request) -> httpx.Response:
        if request.url.scheme == "http":
            return httpx.Response(301, headers={"Location": str(request.url.copy_with(scheme="https"))})
        return httpx.Response(200, json=payload)

    client = HazardMapClient(
        config=HazardMapConfig(base_url=BASE_URL),
        transport=httpx.MockTransport(upstream),
        sleep=RecordingSleep(),
    )
    assert fetch(client) == payload


def test_non_json_body_is_parse_error():
    upstream = ScriptedUpstream(httpx.Response(200, text="<html>oops</html>"))

    with pytest.raises(ExternalApiError) as exc:
        fetch(make_client(upstream))

    assert exc.value.api_name == "hazard-map-api-parser"
    assert len(upstream.requests) == 1


def test_custom_attempt_budget():
    upstream = ScriptedUpstream(500)
    with pytest.raises(ExternalApiError):
        fetch(make_client(upstream, retry_attempts=5, retry_delay_seconds=0.5))
    assert len(upstream.requests) == 5


def test_retry_state_machine():
    state = RetryState(max_attempts=3)
    error = ExternalApiError("boom", status_code=503)

    assert state.begin() == 1
    state.record(error, retryable=True)
    assert state.should_retry()

    state.begin()
    state.record(error, retryable=True)
    assert state.should_retry()

    state.begin()
    state.record(error, retryable=True)
    assert not state.should_retry()
    assert state.last_error is error


def test_retry_state_non_retryable():
    state = RetryState(max_attempts=3)
    state.begin()
    state.record(ExternalApiError("nope", status_code=404), retryable=False)
    assert not state.should_retry()


@pytest.mark.parametrize("status,expected", [
    (500, True), (503, True), (504, True), (408, True), (429, True),
    (400, False), (401, False), (404, False), (409, False),
])
def test_is_retryable_status(status, expected):
    assert is_retryable_status(status) is expected
