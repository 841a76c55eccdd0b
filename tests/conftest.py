# tests/conftest.py

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import fakeredis
import pytest
from fastapi.testclient import TestClient

from task_manager.api.routes import get_redis
from task_manager.main import app
from task_manager.services import store as store_module


@pytest.fixture()
def redis_server() -> fakeredis.FakeServer:
    """One in-process Redis server per test; every request gets its own client to it."""
    return fakeredis.FakeServer()


@pytest.fixture()
def client(redis_server: fakeredis.FakeServer):
    async def override_get_redis():
        redis = fakeredis.FakeAsyncRedis(server=redis_server, decode_responses=True)
        try:
            yield redis
        finally:
            await redis.aclose()

    app.dependency_overrides[get_redis] = override_get_redis
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def ticking_clock(monkeypatch: pytest.MonkeyPatch):
    """
    Make the store's clock advance one second per call.

    Keeps createdAt strictly increasing so ordering assertions do not depend
    on the resolution of the system clock.
    """
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    calls = {"n": 0}

    def fake_now() -> datetime:
        calls["n"] += 1
        return start + timedelta(seconds=calls["n"])

    monkeypatch.setattr(store_module, "_utcnow", fake_now)
    return fake_now
