# tests/test_auth.py
from app.core.security import hash_token, split_token, token_matches, verify_password
from app.models.token import PersonalAccessToken
from app.models.user import User


def test_login_returns_bearer_token(client, make_user):
    make_user(email="jane@catalog.io", password="hunter22")
    resp = client.post("/api/login", json={"email": "jane@catalog.io", "password": "hunter22"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["message"] == "Login successful"
    assert body["data"]["token_type"] == "Bearer"

    token = body["data"]["access_token"]
    resp = client.get("/api/user", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200
    assert resp.json()["email"] == "jane@catalog.io"


def test_login_with_wrong_password(client, make_user):
    make_user(email="jane@catalog.io", password="hunter22")
    resp = client.post("/api/login", json={"email": "jane@catalog.io", "password": "nope"})
    assert resp.status_code == 401
    assert resp.json() == {
        "success": False,
        "message": "The provided credentials are incorrect.",
    }


def test_login_with_unknown_email(client):
    resp = client.post("/api/login", json={"email": "ghost@catalog.io", "password": "x"})
    assert resp.status_code == 401


def test_login_validates_body(client):
    resp = client.post("/api/login", json={"email": "not-an-email"})
    assert resp.status_code == 422
    body = resp.json()
    assert body["success"] is False
    assert set(body["errors"]) == {"email", "password"}


def test_logout_revokes_only_current_token(client, make_user, db):
    user, headers = make_user()
    resp = client.post("/api/logout", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["message"] == "Logged out successfully"
    assert "data" not in resp.json()

    assert client.get("/api/user", headers=headers).status_code == 401
    db.expire_all()
    assert db.query(PersonalAccessToken).filter_by(user_id=user.id).count() == 0


def test_logout_requires_authentication(client):
    assert client.post("/api/logout").status_code == 401


def test_register_is_admin_only(client, make_user):
    payload = {"name": "New", "email": "new@catalog.io", "password": "secret123"}
    assert client.post("/api/register", json=payload).status_code == 401

    _, headers = make_user()
    resp = client.post("/api/register", json=payload, headers=headers)
    assert resp.status_code == 403

    _, editor_headers = make_user(roles=["editor"])
    resp = client.post("/api/register", json=payload, headers=editor_headers)
    assert resp.status_code == 403
    assert resp.json()["message"] == "Forbidden - missing role"


def test_admin_registers_user(client, make_user, db):
    _, headers = make_user(roles=["admin"])
    payload = {"name": "New", "email": "new@catalog.io", "password": "secret123"}
    resp = client.post("/api/register", json=payload, headers=headers)
    assert resp.status_code == 201
    body = resp.json()
    assert body["message"] == "User registered successfully"
    assert body["data"]["email"] == "new@catalog.io"
    assert "password" not in body["data"]

    user = db.query(User).filter_by(email="new@catalog.io").one()
    assert user.password != "secret123"
    assert verify_password("secret123", user.password)


def test_register_rejects_duplicate_email_and_short_password(client, make_user):
    _, headers = make_user(roles=["admin"], email="boss@catalog.io")
    payload = {"name": "Dup", "email": "boss@catalog.io", "password": "123"}
    resp = client.post("/api/register", json=payload, headers=headers)
    assert resp.status_code == 422
    errors = resp.json()["errors"]
    assert errors["email"] == ["The email has already been taken."]
    assert errors["password"] == ["The password field must be at least 6 characters."]


def test_token_helpers():
    assert split_token("12|abc") == (12, "abc")
    assert split_token("abc") is None
    assert split_token("x|abc") is None
    assert split_token("12|") is None
    assert split_token("\u00b2|abc") is None
    assert split_token(f"{2**63}|abc") is None
    assert split_token(f"{2**63 - 1}|abc") == (2**63 - 1, "abc")
    assert token_matches("abc", hash_token("abc"))
    assert not token_matches("abd", hash_token("abc"))
