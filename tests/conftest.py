from __future__ import annotations

from datetime import date

import pytest
from fastapi.testclient import TestClient

import main
from core import settings
from fakes import FakeDatabase

TODAY = date(2026, 3, 15)


@pytest.fixture(autouse=True)
def fixed_today(monkeypatch):
    monkeypatch.setattr(settings, "today", lambda: TODAY)
    return TODAY


@pytest.fixture
def fake_db(monkeypatch) -> FakeDatabase:
    fake = FakeDatabase()
    fake.install(monkeypatch)
    return fake


@pytest.fixture
def client(fake_db) -> TestClient:
    # No context manager: the lifespan (real DB pool) is not started.
    return TestClient(main.app)
