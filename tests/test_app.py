from __future__ import annotations

from datetime import date

from fastapi.testclient import TestClient

import main
from core import periods, settings


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
    assert client.get("/").json() == {"message": "stockbook api"}


def test_unexpected_errors_are_opaque_500(monkeypatch, fake_db):
    async def boom():
        raise RuntimeError("connection reset by peer")

    monkeypatch.setattr(fake_db, "list_products", boom)
    fake_db.install(monkeypatch)
    client = TestClient(main.app, raise_server_exceptions=False)

    resp = client.get("/api/products")

    assert resp.status_code == 500
    assert resp.json() == {"message": "Internal server error."}


def test_period_helpers():
    assert periods.month_bounds(date(2024, 2, 10)) == (date(2024, 2, 1), date(2024, 2, 29))
    assert periods.year_bounds(2026) == (date(2026, 1, 1), date(2026, 12, 31))
    assert periods.parse_month("2026-04") == (date(2026, 4, 1), date(2026, 4, 30))
    assert periods.month_key(date(2026, 4, 9)) == "2026-04"


def test_settings_fall_back_on_bad_values(monkeypatch):
    monkeypatch.setenv("DB_POOL_MAX_SIZE", "lots")
    monkeypatch.setenv("CORS_ORIGINS", " http://a.test , ,http://b.test")
    monkeypatch.setenv("APP_TIMEZONE", "Mars/Olympus_Mons")

    assert settings.pool_max_size() == 5
    assert settings.cors_origins() == ["http://a.test", "http://b.test"]
    assert settings.app_timezone().key == "UTC"
