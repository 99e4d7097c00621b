"""Tests for tenant info, upgrade and stats endpoints."""

import pytest
from httpx import AsyncClient


async def _login(client: AsyncClient, email: str) -> dict:
    resp = await client.post("/auth/login", json={"email": email, "password": "password"})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.json()['token']}"}


@pytest.mark.asyncio
async def test_get_own_tenant(client: AsyncClient):
    headers = await _login(client, "user@acme.test")
    await client.post("/notes", json={"title": "one"}, headers=headers)

    resp = await client.get("/tenants/acme", headers=headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["slug"] == "acme"
    assert data["name"] == "Acme Corporation"
    assert data["plan"] == "free"
    assert data["noteCount"] == 1
    assert data["noteLimit"] == 3
    assert data["canCreateNote"] is True


@pytest.mark.asyncio
async def test_get_tenant_at_capacity(client: AsyncClient):
    headers = await _login(client, "admin@acme.test")
    for i in range(3):
        await client.post("/notes", json={"title": f"n{i}"}, headers=headers)

    data = (await client.get("/tenants/acme", headers=headers)).json()
    assert data["noteCount"] == 3
    assert data["canCreateNote"] is False


@pytest.mark.asyncio
@pytest.mark.parametrize("slug", ["globex", "initech"])
async def test_get_other_or_unknown_tenant_is_404(client: AsyncClient, slug: str):
    headers = await _login(client, "admin@acme.test")
    resp = await client.get(f"/tenants/{slug}", headers=headers)
    assert resp.status_code == 404
    assert resp.json() == {"error": "Tenant not found or access denied"}


@pytest.mark.asyncio
async def test_upgrade(client: AsyncClient):
    headers = await _login(client, "admin@globex.test")

    resp = await client.post("/tenants/globex/upgrade", headers=headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["slug"] == "globex"
    assert data["plan"] == "pro"
    assert data["noteLimit"] == "unlimited"
    assert data["upgradeDate"]
    assert data["message"] == "Tenant upgraded to Pro plan successfully"

    info = (await client.get("/tenants/globex", headers=headers)).json()
    assert info["plan"] == "pro"
    assert info["noteLimit"] == "unlimited"
    assert info["canCreateNote"] is True


@pytest.mark.asyncio
async def test_upgrade_twice_is_rejected(client: AsyncClient):
    headers = await _login(client, "admin@acme.test")
    assert (await client.post("/tenants/acme/upgrade", headers=headers)).status_code == 200

    resp = await client.post("/tenants/acme/upgrade", headers=headers)
    assert resp.status_code == 400
    assert resp.json() == {"error": "Tenant is already on Pro plan"}


@pytest.mark.asyncio
@pytest.mark.parametrize("slug", ["acme", "globex"])
async def test_member_cannot_upgrade(client: AsyncClient, slug: str):
    """Members get 403 whether or not the slug is their own tenant."""
    headers = await _login(client, "user@acme.test")
    resp = await client.post(f"/tenants/{slug}/upgrade", headers=headers)
    assert resp.status_code == 403

    admin = await _login(client, "admin@acme.test")
    assert (await client.get("/tenants/acme", headers=admin)).json()["plan"] == "free"


@pytest.mark.asyncio
async def test_admin_cannot_upgrade_other_tenant(client: AsyncClient):
    headers = await _login(client, "admin@acme.test")
    resp = await client.post("/tenants/globex/upgrade", headers=headers)
    assert resp.status_code == 404

    globex = await _login(client, "admin@globex.test")
    assert (await client.get("/tenants/globex", headers=globex)).json()["plan"] == "free"


@pytest.mark.asyncio
async def test_stats(client: AsyncClient):
    headers = await _login(client, "admin@acme.test")
    await client.post("/notes", json={"title": "a"}, headers=headers)
    await client.post("/notes", json={"title": "b"}, headers=headers)

    resp = await client.get("/tenants/acme/stats", headers=headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["tenant"]["slug"] == "acme"
    assert data["tenant"]["plan"] == "free"
    assert data["stats"] == {"noteCount": 2, "userCount": 2, "noteLimit": 3}


@pytest.mark.asyncio
async def test_stats_after_upgrade(client: AsyncClient):
    headers = await _login(client, "admin@globex.test")
    await client.post("/tenants/globex/upgrade", headers=headers)

    data = (await client.get("/tenants/globex/stats", headers=headers)).json()
    assert data["stats"]["noteLimit"] == "unlimited"


@pytest.mark.asyncio
async def test_stats_requires_admin(client: AsyncClient):
    headers = await _login(client, "user@acme.test")
    resp = await client.get("/tenants/acme/stats", headers=headers)
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_stats_other_tenant_is_404(client: AsyncClient):
    headers = await _login(client, "admin@acme.test")
    resp = await client.get("/tenants/globex/stats", headers=headers)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_tenant_routes_require_auth(client: AsyncClient):
    for method, path in [
        ("GET", "/tenants/acme"),
        ("POST", "/tenants/acme/upgrade"),
        ("GET", "/tenants/acme/stats"),
    ]:
        resp = await client.request(method, path)
        assert resp.status_code == 401, f"{method} {path} should require auth"
