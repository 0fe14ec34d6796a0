from datetime import datetime

import pytest
from httpx import ASGITransport, AsyncClient

from backend.portfolio.main import app
from backend.portfolio.utils import metadata


def _client():
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


@pytest.mark.asyncio
async def test_video_info_requires_url():
    async with _client() as ac:
        resp = await ac.get("/api/v1/debug/video-info")
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Missing video URL parameter"


@pytest.mark.asyncio
async def test_video_info_unrecognized_url():
    async with _client() as ac:
        resp = await ac.get("/api/v1/debug/video-info", params={"url": "https://example.com/clip.mp4"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["success"] is False
        assert data["url"] == "https://example.com/clip.mp4"
        assert data["info"] is None
        assert data["embed_url"] is None
        assert data["message"]


@pytest.mark.asyncio
async def test_video_info_youtube(monkeypatch):
    async def fake_title(video_id, client=None):
        assert video_id == "dQw4w9WgXcQ"
        return "Never Gonna Give You Up"

    monkeypatch.setattr(metadata, "fetch_youtube_title", fake_title)
    async with _client() as ac:
        resp = await ac.get("/api/v1/debug/video-info", params={"url": "https://youtu.be/dQw4w9WgXcQ"})
        data = resp.json()
        assert data["success"] is True
        assert data["info"] == {"platform": "youtube", "id": "dQw4w9WgXcQ"}
        assert data["title"] == "Never Gonna Give You Up"
        assert data["embed_url"].startswith("https://www.youtube.com/embed/dQw4w9WgXcQ?")
        assert data["thumbnail_url"] == "https://img.youtube.com/vi/dQw4w9WgXcQ/hqdefault.jpg"
        assert data["vimeo_metadata"] is None


@pytest.mark.asyncio
async def test_video_info_vimeo_uses_metadata(monkeypatch):
    async def fake_vimeo(video_id, client=None):
        return metadata.VimeoMetadata(
            title="Sintel",
            thumbnail_url="https://i.vimeocdn.com/video/1.jpg",
            upload_date=datetime(2013, 10, 15, 14, 8, 29),
            raw={"id": int(video_id), "title": "Sintel"},
        )

    monkeypatch.setattr(metadata, "fetch_vimeo_metadata", fake_vimeo)
    async with _client() as ac:
        resp = await ac.get("/api/v1/debug/video-info", params={"url": "https://vimeo.com/76979871"})
        data = resp.json()
        assert data["info"] == {"platform": "vimeo", "id": "76979871"}
        assert data["title"] == "Sintel"
        assert data["thumbnail_url"] == "https://i.vimeocdn.com/video/1.jpg"
        assert data["vimeo_metadata"]["id"] == 76979871
        assert data["embed_url"].startswith("https://player.vimeo.com/video/76979871?")


@pytest.mark.asyncio
async def test_video_info_linkedin_has_no_embed():
    async with _client() as ac:
        resp = await ac.get(
            "/api/v1/debug/video-info",
            params={"url": "https://www.linkedin.com/feed/update/urn:li:activity:7140000000000000000/"},
        )
        data = resp.json()
        assert data["success"] is True
        assert data["info"] == {"platform": "linkedin", "id": "7140000000000000000"}
        assert data["embed_url"] is None
        assert data["thumbnail_url"] is None
        assert data["title"] is None


@pytest.mark.asyncio
async def test_youtube_title_requires_video_id():
    async with _client() as ac:
        resp = await ac.get("/api/v1/youtube-title")
        assert resp.status_code == 400


@pytest.mark.asyncio
async def test_youtube_title_success_is_cacheable(monkeypatch):
    async def fake_oembed(video_id, client=None):
        return metadata.YouTubeOEmbed(title="A title", author="Someone", thumbnail_url="https://i.ytimg.com/x.jpg")

    monkeypatch.setattr(metadata, "get_youtube_oembed", fake_oembed)
    async with _client() as ac:
        resp = await ac.get("/api/v1/youtube-title", params={"videoId": "dQw4w9WgXcQ"})
        assert resp.status_code == 200
        assert resp.json() == {"title": "A title", "author": "Someone", "thumbnail_url": "https://i.ytimg.com/x.jpg"}
        assert resp.headers["cache-control"] == "public, max-age=3600, s-maxage=3600"


@pytest.mark.asyncio
async def test_youtube_title_upstream_failure(monkeypatch):
    async def not_found(video_id, client=None):
        raise metadata.MetadataFetchFailed("Not Found", status_code=404)

    monkeypatch.setattr(metadata, "get_youtube_oembed", not_found)
    async with _client() as ac:
        resp = await ac.get("/api/v1/youtube-title", params={"videoId": "xxxxxxxxxxx"})
        assert resp.status_code == 404
        assert resp.json()["detail"].startswith("Failed to fetch YouTube title")


@pytest.mark.asyncio
async def test_youtube_title_disabled_fetch_is_unavailable():
    # outbound lookups are switched off for the test run
    async with _client() as ac:
        resp = await ac.get("/api/v1/youtube-title", params={"videoId": "dQw4w9WgXcQ"})
        assert resp.status_code == 503
