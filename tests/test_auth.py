import pytest

from movie_cms.utils.auth.admin_auth import authenticate_admin, verify_admin_token
from movie_cms.utils.auth.jwt_handler import create_access_token, verify_access_token
from movie_cms.utils.exceptions import AuthError, ForbiddenError, ValidationError
from tests.fixtures.auth import cookie_header

pytestmark = pytest.mark.anyio


# ---------------- credential gate ----------------

async def test_authenticate_admin_issues_admin_token():
    token = authenticate_admin("admin@example.com", "s3cret-pass")
    payload = verify_access_token(token)
    assert payload["role"] == "admin"
    assert payload["email"] == "admin@example.com"
    # 7 day lifetime
    assert payload["exp"] - payload["iat"] == 7 * 24 * 60 * 60


@pytest.mark.parametrize("email, password", [(None, "x"), ("admin@example.com", None), ("", ""), (None, None)])
async def test_authenticate_admin_requires_both_fields(email, password):
    with pytest.raises(ValidationError):
        authenticate_admin(email, password)


@pytest.mark.parametrize(
    "email, password",
    [("admin@example.com", "wrong"), ("other@example.com", "s3cret-pass"), ("ADMIN@example.com", "s3cret-pass")],
)
async def test_authenticate_admin_rejects_mismatch(email, password):
    with pytest.raises(AuthError):
        authenticate_admin(email, password)


async def test_verify_admin_token_failures():
    with pytest.raises(AuthError):
        verify_admin_token(None)
    with pytest.raises(AuthError):
        verify_admin_token("not-a-jwt")
    with pytest.raises(AuthError):
        verify_admin_token(create_access_token({"role": "admin", "email": "a@b.c"}, expires_minutes=-1))
    with pytest.raises(ForbiddenError):
        verify_admin_token(create_access_token({"role": "editor", "email": "a@b.c"}))


async def test_verify_admin_token_rejects_foreign_signature():
    from jose import jwt

    forged = jwt.encode({"role": "admin", "email": "a@b.c"}, "another-secret", algorithm="HS256")
    with pytest.raises(AuthError):
        verify_admin_token(forged)


# ---------------- routes ----------------

async def test_login_sets_httponly_cookie(client):
    resp = await client.post("/api/admin/login", json={"email": "admin@example.com", "password": "s3cret-pass"})
    assert resp.status_code == 200, resp.text
    assert resp.json() == {"success": True, "message": "Admin logged in successfully"}

    set_cookie = resp.headers["set-cookie"]
    assert set_cookie.startswith("admin_token=")
    assert "HttpOnly" in set_cookie
    assert "Max-Age=604800" in set_cookie
    assert "Secure" not in set_cookie


async def test_login_missing_fields_is_400(client):
    resp = await client.post("/api/admin/login", json={"email": "admin@example.com"})
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "message": "Email and password required"}

    resp = await client.post("/api/admin/login")
    assert resp.status_code == 400


async def test_login_wrong_password_is_401(client):
    resp = await client.post("/api/admin/login", json={"email": "admin@example.com", "password": "nope"})
    assert resp.status_code == 401
    assert resp.json()["success"] is False
    assert "set-cookie" not in resp.headers


async def test_me_echoes_identity(client, admin_headers):
    resp = await client.get("/api/admin/me", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "admin": {"email": "admin@example.com", "role": "admin"}}


async def test_me_without_cookie_is_401(client):
    resp = await client.get("/api/admin/me")
    assert resp.status_code == 401
    assert resp.json() == {"success": False, "message": "Admin token missing"}


async def test_me_with_wrong_role_is_403(client):
    token = create_access_token({"role": "viewer", "email": "v@example.com"})
    resp = await client.get("/api/admin/me", headers=cookie_header(token))
    assert resp.status_code == 403
    assert resp.json() == {"success": False, "message": "Admin access only"}


async def test_logout_clears_cookie(client, admin_headers):
    resp = await client.post("/api/admin/logout", headers=admin_headers)
    assert resp.status_code == 200
    set_cookie = resp.headers["set-cookie"]
    assert set_cookie.startswith("admin_token=")
    assert "Max-Age=0" in set_cookie


async def test_logout_requires_admin(client):
    resp = await client.post("/api/admin/logout")
    assert resp.status_code == 401
