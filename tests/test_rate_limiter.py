"""
Tests for the failed-attempt store
"""
from app.services.rate_limiter import InMemoryAttemptStore, limiter_key


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


def make_store(clock, window=60, max_attempts=3):
    return InMemoryAttemptStore(window_seconds=window, max_attempts=max_attempts, clock=clock)


def test_limited_after_max_failures():
    store = make_store(FakeClock())
    key = limiter_key("admin_login", "10.0.0.1")

    for _ in range(2):
        store.record_failure(key)
    assert not store.is_limited(key)

    store.record_failure(key)
    assert store.is_limited(key)


def test_keys_are_independent():
    store = make_store(FakeClock(), max_attempts=1)

    store.record_failure(limiter_key("admin_login", "10.0.0.1"))

    assert store.is_limited("admin_login:10.0.0.1")
    assert not store.is_limited("admin_login:10.0.0.2")
    assert not store.is_limited("pres_submit:10.0.0.1")


def test_old_failures_expire():
    clock = FakeClock()
    store = make_store(clock, window=60)
    key = "pres_submit:10.0.0.1"
    for _ in range(3):
        store.record_failure(key)

    clock.now += 59
    assert store.is_limited(key)

    clock.now += 1
    assert not store.is_limited(key)
    assert store.attempts(key) == 0


def test_window_is_rolling():
    clock = FakeClock()
    store = make_store(clock, window=60)
    key = "pres_submit:10.0.0.1"

    store.record_failure(key)
    clock.now += 30
    store.record_failure(key)
    store.record_failure(key)
    assert store.is_limited(key)

    clock.now += 30
    assert store.attempts(key) == 2
    assert not store.is_limited(key)


def test_clear_resets_counter():
    store = make_store(FakeClock())
    key = "admin_login:10.0.0.1"
    for _ in range(3):
        store.record_failure(key)

    store.clear(key)

    assert store.attempts(key) == 0
    assert not store.is_limited(key)


def test_forwarded_for_used_behind_proxy(tmp_path):
    from fastapi.testclient import TestClient

    from app.main import create_app
    from conftest import make_settings

    app = create_app(make_settings(tmp_path, TRUST_PROXY=True))
    with TestClient(app) as client:
        for _ in range(3):
            client.post("/api/admin/login", json={"code": "wrong"}, headers={"X-Forwarded-For": "1.2.3.4"})

        blocked = client.post("/api/admin/login", json={"code": "wrong"}, headers={"X-Forwarded-For": "1.2.3.4"})
        other = client.post("/api/admin/login", json={"code": "wrong"}, headers={"X-Forwarded-For": "5.6.7.8, 1.2.3.4"})

    assert blocked.status_code == 429
    assert other.status_code == 401
    assert app.state.attempt_store.attempts("admin_login:5.6.7.8") == 1
