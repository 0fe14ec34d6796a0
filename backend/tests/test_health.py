import pytest
from httpx import ASGITransport, AsyncClient

from backend.portfolio.main import app


@pytest.mark.asyncio
async def test_health_ok():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        resp = await ac.get("/api/v1/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_info_endpoint():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        resp = await ac.get("/api/v1/info")
        assert resp.status_code == 200
        data = resp.json()
        assert data["name"] == "Portfolio Media API"
        assert isinstance(data["version"], str)
        # lifespan ran, so the service state has a start time
        assert data["started_at"]


@pytest.mark.asyncio
async def test_api_root_and_docs_redirect():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        resp = await ac.get("/api")
        assert resp.status_code == 200
        assert resp.json()["name"] == "Portfolio Media API"

        resp = await ac.get("/docs")
        assert resp.status_code in (302, 307)
        assert resp.headers["location"] == "/api/docs"


def test_async_engine_driver_available():
    # the async extra pulls in greenlet, which AsyncSession needs to run ORM IO
    import greenlet  # noqa: F401

    from backend.portfolio.db.session import engine

    assert engine.dialect.is_async
    assert engine.url.drivername == "sqlite+aiosqlite"
