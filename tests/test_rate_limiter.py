import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from artisan_doors.services import rate_limiter as rate_limiter_module
from artisan_doors.services.rate_limiter import RateLimiter


def test_allows_requests_within_budget():
    limiter = RateLimiter(max_requests=2, window_seconds=60, message="slow down")
    assert limiter.hit("1.2.3.4") is True
    assert limiter.hit("1.2.3.4") is True
    assert limiter.hit("1.2.3.4") is False


def test_budget_is_per_client():
    limiter = RateLimiter(max_requests=1, window_seconds=60, message="slow down")
    assert limiter.hit("1.1.1.1") is True
    assert limiter.hit("2.2.2.2") is True
    assert limiter.hit("1.1.1.1") is False


def test_window_expiry_restores_budget(monkeypatch):
    clock = [1000.0]
    monkeypatch.setattr(rate_limiter_module.time, "monotonic", lambda: clock[0])
    limiter = RateLimiter(max_requests=1, window_seconds=60, message="slow down")

    assert limiter.hit("1.1.1.1") is True
    assert limiter.hit("1.1.1.1") is False
    clock[0] += 61
    assert limiter.hit("1.1.1.1") is True


def test_reset_clears_counters():
    limiter = RateLimiter(max_requests=1, window_seconds=60, message="slow down")
    limiter.hit("1.1.1.1")
    limiter.reset()
    assert limiter.hit("1.1.1.1") is True


@pytest.fixture
def limited_client():
    limiter = RateLimiter(max_requests=1, window_seconds=60, message="slow down")
    app = FastAPI()

    @app.get("/limited", dependencies=[Depends(limiter)])
    def limited():
        return {"ok": True}

    return TestClient(app)


def test_dependency_answers_429(limited_client):
    assert limited_client.get("/limited").status_code == 200
    response = limited_client.get("/limited")
    assert response.status_code == 429
    assert response.json() == {"detail": "slow down"}


def test_forwarded_for_header_is_ignored_by_default(limited_client):
    assert limited_client.get("/limited", headers={"X-Forwarded-For": "9.9.9.9"}).status_code == 200
    # Cambiar el header no consigue una ventana nueva
    assert limited_client.get("/limited", headers={"X-Forwarded-For": "8.8.8.8"}).status_code == 429


def test_forwarded_for_header_identifies_client_behind_trusted_proxy(limited_client, monkeypatch):
    monkeypatch.setenv("TRUST_PROXY", "true")
    assert limited_client.get("/limited", headers={"X-Forwarded-For": "9.9.9.9"}).status_code == 200
    assert limited_client.get("/limited", headers={"X-Forwarded-For": "8.8.8.8, 10.0.0.1"}).status_code == 200
    assert limited_client.get("/limited", headers={"X-Forwarded-For": "9.9.9.9"}).status_code == 429


def test_subscribe_limit_cannot_be_dodged_with_forwarded_for(client, outbox):
    statuses = [
        client.post(
            "/api/subscribe",
            json={"email": f"visitor{i}@example.com"},
            headers={"X-Forwarded-For": f"203.0.113.{i}"},
        ).status_code
        for i in range(8)
    ]
    assert statuses[:5] == [201] * 5
    assert statuses[5:] == [429] * 3


def test_expired_windows_are_pruned(monkeypatch):
    clock = [1000.0]
    monkeypatch.setattr(rate_limiter_module.time, "monotonic", lambda: clock[0])
    limiter = RateLimiter(max_requests=5, window_seconds=60, message="slow down")

    for i in range(5000):
        limiter.hit(f"10.0.{i // 256}.{i % 256}")
    assert limiter.tracked_clients == 5000

    clock[0] += 60 * 60
    limiter.hit("192.0.2.1")
    assert limiter.tracked_clients == 1


def test_active_windows_survive_cleanup(monkeypatch):
    clock = [1000.0]
    monkeypatch.setattr(rate_limiter_module.time, "monotonic", lambda: clock[0])
    limiter = RateLimiter(max_requests=1, window_seconds=600, message="slow down")

    limiter.hit("1.1.1.1")
    clock[0] += 120
    limiter.hit("2.2.2.2")

    assert limiter.tracked_clients == 2
    assert limiter.hit("1.1.1.1") is False
