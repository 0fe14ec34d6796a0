import pytest
from httpx import ASGITransport, AsyncClient

from backend.portfolio.main import app
from backend.portfolio.utils.roles import ROLE_SET_VERSION, Role, RoleMetadataError, parse_role_metadata


def test_parse_role_metadata_basic():
    role_set = parse_role_metadata({"roles": ["Editor", " viewer "], "other": 1})
    assert role_set.roles == frozenset({Role.editor, Role.viewer})
    assert role_set.version == ROLE_SET_VERSION
    assert not role_set.is_admin
    assert role_set.sorted_names() == ["editor", "viewer"]


def test_super_admin_implies_admin():
    role_set = parse_role_metadata({"superAdmin": True})
    assert role_set.is_admin
    assert role_set.has(Role.admin)
    assert parse_role_metadata({"superAdmin": False, "roles": []}).roles == frozenset()


def test_missing_metadata_is_empty_role_set():
    assert parse_role_metadata(None).roles == frozenset()
    assert parse_role_metadata({}).roles == frozenset()


@pytest.mark.parametrize(
    "bad",
    [
        {"roles": "admin"},
        {"roles": ["owner"]},
        {"superAdmin": "yes"},
        {"superAdmin": 1},
        ["admin"],
    ],
)
def test_invalid_metadata_raises(bad):
    with pytest.raises(RoleMetadataError):
        parse_role_metadata(bad)


@pytest.mark.asyncio
async def test_sync_roles_adds_and_keeps():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        resp = await ac.post(
            "/api/v1/roles/sync",
            json={"user_id": "user_sync_1", "public_metadata": {"roles": ["editor"], "superAdmin": True}},
        )
        assert resp.status_code == 200
        assert resp.json() == {"user_id": "user_sync_1", "roles": ["admin", "editor"], "version": ROLE_SET_VERSION}

        # roles missing from later metadata are not revoked
        resp = await ac.post(
            "/api/v1/roles/sync",
            json={"user_id": "user_sync_1", "public_metadata": {"roles": ["viewer", "editor"]}},
        )
        assert resp.json()["roles"] == ["admin", "editor", "viewer"]

        resp = await ac.get("/api/v1/roles/user_sync_1")
        assert resp.status_code == 200
        assert resp.json()["roles"] == ["admin", "editor", "viewer"]


@pytest.mark.asyncio
async def test_sync_rejects_bad_metadata():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        resp = await ac.post(
            "/api/v1/roles/sync",
            json={"user_id": "user_bad_1", "public_metadata": {"roles": ["root"]}},
        )
        assert resp.status_code == 400
        assert resp.json()["detail"].startswith("Invalid role metadata")

        resp = await ac.get("/api/v1/roles/user_bad_1")
        assert resp.json()["roles"] == []


@pytest.mark.asyncio
async def test_revoke_role():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        await ac.post("/api/v1/roles/sync", json={"user_id": "user_revoke_1", "public_metadata": {"roles": ["editor"]}})

        resp = await ac.delete("/api/v1/roles/user_revoke_1/editor")
        assert resp.status_code == 204
        resp = await ac.get("/api/v1/roles/user_revoke_1")
        assert resp.json()["roles"] == []

        resp = await ac.delete("/api/v1/roles/user_revoke_1/editor")
        assert resp.status_code == 404
        resp = await ac.delete("/api/v1/roles/user_revoke_1/owner")
        assert resp.status_code == 422
