"""Application lifespan: secret check, schema verification, seeding."""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text
from sqlalchemy.ext.asyncio import create_async_engine

from notehub import main
from notehub.core.config import Settings, get_settings
from notehub.core.database import Database
from notehub.core.errors import InvalidTokenError, SchemaVersionError
from notehub.core.security import decode_jwt
from notehub.main import create_app


def _settings(**overrides) -> Settings:
    values = {
        "database_url": "sqlite+aiosqlite://",
        "jwt_secret_key": "test-secret-key",
    }
    values.update(overrides)
    return Settings(**values)


@pytest.mark.asyncio
async def test_startup_refuses_missing_secret():
    app = create_app(_settings(jwt_secret_key=""))
    with pytest.raises(RuntimeError, match="JWT_SECRET_KEY"):
        async with app.router.lifespan_context(app):
            pass


@pytest.mark.asyncio
async def test_startup_seeds_and_serves():
    app = create_app(_settings())
    async with app.router.lifespan_context(app):
        assert isinstance(app.state.database, Database)
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            resp = await client.post("/auth/login", json={
                "email": "admin@globex.test", "password": "password",
            })
            assert resp.status_code == 200
            assert resp.json()["user"]["tenant"]["slug"] == "globex"


@pytest.mark.asyncio
async def test_startup_without_auto_create_fails_on_empty_db():
    app = create_app(_settings(auto_create_schema=False))
    with pytest.raises(SchemaVersionError):
        async with app.router.lifespan_context(app):
            pass


@pytest.mark.asyncio
async def test_verify_schema_reports_missing_updated_by():
    engine = create_async_engine("sqlite+aiosqlite://")
    database = Database(engine)
    async with engine.begin() as conn:
        await conn.execute(text(
            "CREATE TABLE tenants (id INTEGER PRIMARY KEY, slug TEXT, name TEXT,"
            " plan TEXT, created_at TIMESTAMP)"
        ))
        await conn.execute(text(
            "CREATE TABLE users (id INTEGER PRIMARY KEY, email TEXT, password_hash TEXT,"
            " role TEXT, tenant_id INTEGER, created_at TIMESTAMP)"
        ))
        await conn.execute(text(
            "CREATE TABLE notes (id INTEGER PRIMARY KEY, title TEXT, content TEXT,"
            " tenant_id INTEGER, user_id INTEGER, created_at TIMESTAMP, updated_at TIMESTAMP)"
        ))

    with pytest.raises(SchemaVersionError, match="notes.updated_by"):
        await database.verify_schema()

    await database.dispose()


@pytest.mark.asyncio
async def test_verify_schema_accepts_current_models():
    database = Database(create_async_engine("sqlite+aiosqlite://"))
    await database.create_all()
    await database.verify_schema()
    await database.dispose()


@pytest.mark.asyncio
async def test_injected_settings_drive_limits_and_tokens():
    app = create_app(_settings(
        jwt_secret_key="injected-secret",
        free_plan_note_limit=1,
    ))
    assert app.state.settings.free_plan_note_limit == 1

    async with app.router.lifespan_context(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            resp = await client.post("/auth/login", json={
                "email": "user@acme.test", "password": "password",
            })
            assert resp.status_code == 200
            token = resp.json()["token"]
            headers = {"Authorization": f"Bearer {token}"}

            statuses = [
                (await client.post("/notes", json={"title": f"n{i}"}, headers=headers)).status_code
                for i in range(3)
            ]
            assert statuses == [201, 403, 403]

            tenant = (await client.get("/tenants/acme", headers=headers)).json()
            assert tenant["noteLimit"] == 1
            assert tenant["canCreateNote"] is False

    # Signed with the injected secret, not the process-wide one
    with pytest.raises(InvalidTokenError):
        decode_jwt(token)
    assert decode_jwt(token, app.state.settings).tenant_slug == "acme"


def test_run_serves_app_with_uvicorn(monkeypatch):
    calls = []
    monkeypatch.setattr(main.uvicorn, "run", lambda target, **kwargs: calls.append((target, kwargs)))

    main.run()

    assert calls[0][0] == "notehub.main:app"
    assert calls[0][1]["port"] == get_settings().port
