import pytest
from httpx import ASGITransport, AsyncClient

from backend.portfolio.main import app


def _client():
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


@pytest.mark.asyncio
async def test_settings_upsert_and_read():
    async with _client() as ac:
        resp = await ac.post("/api/v1/settings/", json={"site_title": "Portfolio", "hero_video": "https://youtu.be/dQw4w9WgXcQ"})
        assert resp.status_code == 200
        assert resp.json() == {
            "success": True,
            "message": "Settings updated successfully",
            "updated": ["hero_video", "site_title"],
        }

        resp = await ac.post("/api/v1/settings/", json={"site_title": "New title", "show_bts": True})
        assert resp.status_code == 200

        data = (await ac.get("/api/v1/settings/")).json()
        assert data["site_title"] == "New title"
        assert data["hero_video"] == "https://youtu.be/dQw4w9WgXcQ"
        assert data["show_bts"] is True

        resp = await ac.get("/api/v1/settings/site_title")
        assert resp.json() == {"key": "site_title", "value": "New title"}


@pytest.mark.asyncio
async def test_settings_structured_values():
    async with _client() as ac:
        await ac.post("/api/v1/settings/", json={"social_links": {"vimeo": "https://vimeo.com/me"}, "featured_ids": [3, 1]})
        data = (await ac.get("/api/v1/settings/")).json()
        assert data["social_links"] == {"vimeo": "https://vimeo.com/me"}
        assert data["featured_ids"] == [3, 1]


@pytest.mark.asyncio
async def test_settings_invalid_input():
    async with _client() as ac:
        resp = await ac.post("/api/v1/settings/", json={"  ": "x"})
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Invalid settings data"

        resp = await ac.post("/api/v1/settings/", json=["not", "an", "object"])
        assert resp.status_code == 422

        resp = await ac.get("/api/v1/settings/never_set")
        assert resp.status_code == 404
