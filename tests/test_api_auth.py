import pytest
from tortoise.queryset import QuerySet

from portfolio.core.errors import ConflictError
from portfolio.models.user import User
from portfolio.services import users
from portfolio.main import app
from tests.helpers import TEST_PASSWORD, unique_email


@pytest.mark.asyncio
async def test_register_login_profile_scenario(client):
    resp = await client.post("/api/register", json={"name": "A", "email": "a@x.com", "password": "pw"})
    assert resp.status_code == 201
    assert resp.json() == {"success": True, "message": "User registered successfully"}

    resp = await client.post("/api/login", json={"email": "a@x.com", "password": "pw"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["token"]
    assert body["user"]["name"] == "A"
    assert body["user"]["email"] == "a@x.com"

    resp = await client.get("/api/profile", headers={"Authorization": f"Bearer {body['token']}"})
    assert resp.status_code == 200
    user = resp.json()["user"]
    assert {"name": user["name"], "email": user["email"]} == {"name": "A", "email": "a@x.com"}
    assert user["id"] == body["user"]["id"]

    resp = await client.get("/api/profile")
    assert resp.status_code == 401
    assert resp.json()["success"] is False


@pytest.mark.asyncio
async def test_token_subject_matches_account(client, admin):
    issuer = app.state.token_issuer
    claims = issuer.validate(admin["token"])
    assert claims.user_id == admin["user"]["id"]
    assert claims.email == admin["email"]


@pytest.mark.asyncio
async def test_duplicate_email_conflicts(client):
    email = unique_email()
    first = await client.post("/api/register", json={"name": "One", "email": email, "password": TEST_PASSWORD})
    assert first.status_code == 201

    second = await client.post("/api/register", json={"name": "Two", "email": email, "password": "other"})
    assert second.status_code == 409
    assert second.json() == {"success": False, "message": "Email already in use"}
    assert await User.filter(email=email).count() == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [
    {"email": "x@y.com", "password": "pw"},
    {"name": "X", "password": "pw"},
    {"name": "X", "email": "x@y.com"},
    {"name": "   ", "email": "x@y.com", "password": "pw"},
])
async def test_register_requires_all_fields(client, payload):
    resp = await client.post("/api/register", json=payload)
    assert resp.status_code == 400
    assert resp.json()["message"] == "Name, email, and password are required"


@pytest.mark.asyncio
async def test_malformed_json_is_bad_request(client):
    resp = await client.post(
        "/api/register", content=b"{not json", headers={"Content-Type": "application/json"}
    )
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "message": "Invalid request payload"}


@pytest.mark.asyncio
async def test_login_failures_do_not_reveal_accounts(client, admin):
    wrong_pw = await client.post("/api/login", json={"email": admin["email"], "password": "nope"})
    unknown = await client.post("/api/login", json={"email": unique_email(), "password": "nope"})
    assert wrong_pw.status_code == unknown.status_code == 401
    assert wrong_pw.json() == unknown.json() == {"success": False, "message": "Invalid email or password"}


@pytest.mark.asyncio
async def test_login_requires_fields(client):
    resp = await client.post("/api/login", json={"email": "a@x.com"})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Email and password are required"


@pytest.mark.asyncio
async def test_password_is_stored_hashed(client, admin):
    user = await User.get(email=admin["email"])
    assert user.password_hash != TEST_PASSWORD
    assert user.password_hash.startswith("$argon2")


@pytest.mark.asyncio
@pytest.mark.parametrize("header,message", [
    ("Token abc", "Invalid authorization format"),
    ("Bearer not-a-jwt", "Invalid token"),
])
async def test_profile_rejects_bad_credentials(client, header, message):
    resp = await client.get("/api/profile", headers={"Authorization": header})
    assert resp.status_code == 401
    assert resp.json() == {"success": False, "message": message}


@pytest.mark.asyncio
async def test_profile_missing_header_message(client):
    resp = await client.get("/api/profile")
    assert resp.json()["message"] == "Authorization header required"


@pytest.mark.asyncio
async def test_profile_for_removed_user_is_not_found(client, admin):
    await User.filter(id=admin["user"]["id"]).delete()
    resp = await client.get("/api/profile", headers=admin["headers"])
    assert resp.status_code == 404
    assert resp.json()["message"] == "User not found"


@pytest.mark.asyncio
async def test_unique_constraint_settles_duplicate_registration(client, monkeypatch):
    async def never_exists(self):
        return False

    # both registrations get past the pre-check, as two racing requests would
    monkeypatch.setattr(QuerySet, "exists", never_exists)
    email = unique_email()
    assert await users.register("One", email, TEST_PASSWORD)
    with pytest.raises(ConflictError) as exc:
        await users.register("Two", email, "other")
    assert exc.value.message == "Email already in use"
    assert await User.filter(email=email).count() == 1


@pytest.mark.asyncio
async def test_login_ignores_surrounding_whitespace_in_email(client, admin):
    resp = await client.post("/api/login", json={"email": f"  {admin['email']} ", "password": TEST_PASSWORD})
    assert resp.status_code == 200
    assert resp.json()["user"]["email"] == admin["email"]
