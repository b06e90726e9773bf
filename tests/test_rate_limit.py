import asyncio

from fastapi import FastAPI, Request, Response
from fastapi.testclient import TestClient

import hillcipher.middleware.rate_limit as rate_limit_module
from hillcipher.middleware import RateLimit


def make_client(**kwargs):
    app = FastAPI()

    @app.get("/ping")
    async def ping():
        return {"message": "pong"}

    app.add_middleware(RateLimit, **kwargs)
    return TestClient(app)


def test_requests_are_rate_limited():
    """Send multiple requests quickly; the burst must be cut off."""
    client = make_client(max_per_second=5, timeout_period_s=60, enabled=True)

    responses = [client.get("/ping") for _ in range(20)]

    assert responses[0].status_code == 200
    rate_limited = [resp for resp in responses if resp.status_code == 429]
    assert rate_limited, "Expected at least one rate-limited (429) response"
    assert rate_limited[0].json() == {"detail": "Too many requests."}


def test_disabled_rate_limit():
    client = make_client(max_per_second=1, timeout_period_s=60, enabled=False)
    assert all(client.get("/ping").status_code == 200 for _ in range(10))


def test_options_requests_skip_rate_limit():
    client = make_client(max_per_second=1, timeout_period_s=60, enabled=True)
    client.get("/ping")
    client.get("/ping")
    assert client.options("/ping").status_code != 429


def make_request(host):
    return Request(
        {
            "type": "http",
            "method": "GET",
            "path": "/ping",
            "headers": [],
            "query_string": b"",
            "client": (host, 50000),
            "server": ("testserver", 80),
            "scheme": "http",
        }
    )


async def ok(request):
    return Response(status_code=200)


def test_idle_clients_are_forgotten(monkeypatch):
    clock = [100.0]
    monkeypatch.setattr(rate_limit_module, "monotonic", lambda: clock[0])
    limiter = RateLimit(FastAPI(), max_per_second=5, timeout_period_s=1, enabled=True)

    for i in range(50):
        asyncio.run(limiter.dispatch(make_request(f"10.0.0.{i}"), ok))
    assert limiter.tracked_clients == 50

    clock[0] += 5
    asyncio.run(limiter.dispatch(make_request("10.0.1.1"), ok))
    assert limiter.tracked_clients == 1


def test_clients_in_timeout_are_kept_until_it_ends(monkeypatch):
    clock = [100.0]
    monkeypatch.setattr(rate_limit_module, "monotonic", lambda: clock[0])
    limiter = RateLimit(FastAPI(), max_per_second=1, timeout_period_s=10, enabled=True)

    statuses = [asyncio.run(limiter.dispatch(make_request("10.0.0.1"), ok)).status_code for _ in range(3)]
    assert 429 in statuses

    clock[0] += 5
    response = asyncio.run(limiter.dispatch(make_request("10.0.0.2"), ok))
    assert response.status_code == 200
    assert limiter.tracked_clients == 2
    assert asyncio.run(limiter.dispatch(make_request("10.0.0.1"), ok)).status_code == 429

    clock[0] += 20
    asyncio.run(limiter.dispatch(make_request("10.0.0.2"), ok))
    assert limiter.tracked_clients == 1
