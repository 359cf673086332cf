"""Admin bearer-token guard and the TokenValidator capability."""
from gameportal.auth import DatabaseTokenValidator, TokenValidator, get_token_validator
from gameportal.database import async_session_maker
from gameportal.main import app
from gameportal.services import admin_service


async def test_me_with_valid_token(client, auth_headers):
    res = await client.get("/api/v1/admin/me", headers=auth_headers)

    assert res.status_code == 200
    assert res.json()["username"] == "admin"


async def test_missing_token(client):
    res = await client.get("/api/v1/admin/me")

    assert res.status_code == 401
    assert res.json()["detail"] == "No token provided"


async def test_wrong_scheme(client, admin_token):
    res = await client.get("/api/v1/admin/me", headers={"Authorization": f"Basic {admin_token}"})

    assert res.status_code == 401
    assert res.json()["detail"] == "Invalid token format"


async def test_malformed_token(client):
    res = await client.get("/api/v1/admin/me", headers={"Authorization": "Bearer no-separator"})

    assert res.status_code == 401
    assert res.json()["detail"] == "Invalid token format"


async def test_wrong_secret(client, admin_token):
    admin_id, _ = admin_service.split_token(admin_token)

    res = await client.get("/api/v1/admin/me", headers={"Authorization": f"Bearer {admin_id}.forged"})

    assert res.status_code == 401
    assert res.json()["detail"] == "Invalid token"


async def test_logout_revokes_token(client, auth_headers):
    res = await client.post("/api/v1/admin/logout", headers=auth_headers)
    assert res.status_code == 204

    res = await client.get("/api/v1/admin/me", headers=auth_headers)
    assert res.status_code == 401
    assert res.json()["detail"] == "Invalid token"


async def test_rotation_invalidates_previous_token(client, admin_token):
    async with async_session_maker() as s:
        admin, is_new = await admin_service.get_or_create_admin(s, "admin")
        new_token = await admin_service.rotate_token(s, admin)
        await s.commit()
    assert is_new is False

    old = await client.get("/api/v1/admin/me", headers={"Authorization": f"Bearer {admin_token}"})
    new = await client.get("/api/v1/admin/me", headers={"Authorization": f"Bearer {new_token}"})

    assert old.status_code == 401
    assert new.status_code == 200


async def test_database_validator(admin_token):
    admin_id, _ = admin_service.split_token(admin_token)
    async with async_session_maker() as s:
        validator = DatabaseTokenValidator(s)
        assert await validator.is_valid(admin_id, admin_token)
        assert not await validator.is_valid("someone-else", admin_token)
        await validator.revoke(admin_id)
        assert not await validator.is_valid(admin_id, admin_token)


async def test_guard_delegates_to_validator(client, admin_token):
    class RejectAll(TokenValidator):
        async def is_valid(self, subject_id, token):
            return False

        async def revoke(self, subject_id):
            pass

    app.dependency_overrides[get_token_validator] = lambda: RejectAll()
    try:
        res = await client.get("/api/v1/admin/me", headers={"Authorization": f"Bearer {admin_token}"})
    finally:
        app.dependency_overrides.pop(get_token_validator, None)

    assert res.status_code == 401
