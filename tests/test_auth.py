"""
Registration, login and the current-user endpoint
"""
import pytest

from formportal.core.security import verify_token
from formportal.db.models.user import Role, User

PASSWORD = "testpassword123"


def _register(client, **overrides):
    body = {
        "name": "Meera Nair",
        "email": "Meera@Example.com",
        "phone": "9876543210",
        "password": "secret123",
    }
    body.update(overrides)
    return client.post("/auth/register", json=body)


class TestRegister:

    def test_user_registration_returns_token(self, client, db):
        r = _register(client)
        assert r.status_code == 200
        data = r.json()["data"]
        assert data["user"]["email"] == "meera@example.com"
        assert data["user"]["role"] == "user"
        assert data["user"]["roleLabel"] == "User"
        assert "passwordHash" not in data["user"]

        identity = verify_token(data["token"])
        assert identity.user_id == data["user"]["id"]
        assert identity.role == Role.USER
        assert db.query(User).count() == 1

    def test_agent_needs_a_bank(self, client, make_bank):
        assert _register(client, role="agent").status_code == 400
        assert _register(client, role="agent", bankId="nope").status_code == 400

        bank = make_bank()
        r = _register(client, role="agent", bankId=bank.id)
        assert r.status_code == 200
        assert verify_token(r.json()["data"]["token"]).bank_id == bank.id

    def test_agent_cannot_join_inactive_bank(self, client, make_bank):
        bank = make_bank(is_active=False)
        assert _register(client, role="agent", bankId=bank.id).status_code == 400

    def test_user_bank_is_dropped(self, client, make_bank):
        r = _register(client, bankId=make_bank().id)
        assert r.json()["data"]["user"]["bankId"] is None

    def test_admin_cannot_self_register(self, client):
        assert _register(client, role="admin").status_code == 403

    def test_duplicate_email(self, client):
        _register(client)
        r = _register(client, email="meera@example.com")
        assert r.status_code == 409
        assert r.json() == {"success": False, "message": "Email already registered"}

    @pytest.mark.parametrize("overrides", [
        {"email": "not-an-email"},
        {"email": "asha@bank..com"},
        {"password": "123"},
        {"phone": "123"},
        {"name": "M"},
    ])
    def test_invalid_fields(self, client, overrides):
        r = _register(client, **overrides)
        assert r.status_code == 400
        assert r.json()["success"] is False


class TestLogin:

    def test_valid_credentials(self, client, make_user):
        user = make_user(Role.USER)
        r = client.post("/auth/login", json={"email": user.email, "password": PASSWORD})
        assert r.status_code == 200
        assert r.json()["data"]["user"]["id"] == user.id

    def test_email_is_case_insensitive(self, client, make_user):
        user = make_user(Role.USER)
        r = client.post("/auth/login", json={"email": user.email.upper(), "password": PASSWORD})
        assert r.status_code == 200

    def test_wrong_password(self, client, make_user):
        user = make_user(Role.USER)
        r = client.post("/auth/login", json={"email": user.email, "password": "wrong"})
        assert r.status_code == 401

    def test_unknown_email(self, client):
        r = client.post("/auth/login", json={"email": "ghost@example.com", "password": PASSWORD})
        assert r.status_code == 401

    def test_role_mismatch(self, client, make_user):
        user = make_user(Role.USER)
        r = client.post("/auth/login", json={"email": user.email, "password": PASSWORD, "role": "admin"})
        assert r.status_code == 401

    def test_inactive_account(self, client, make_user):
        user = make_user(Role.USER, is_active=False)
        r = client.post("/auth/login", json={"email": user.email, "password": PASSWORD})
        assert r.status_code == 403

    def test_agent_token_carries_bank(self, client, make_user, make_bank):
        bank = make_bank()
        agent = make_user(Role.AGENT, bank=bank)
        r = client.post("/auth/login", json={"email": agent.email, "password": PASSWORD})
        identity = verify_token(r.json()["data"]["token"])
        assert identity.role == Role.AGENT
        assert identity.bank_id == bank.id


def test_me(client, auth_headers, make_user, db):
    user = make_user(Role.USER)
    r = client.get("/auth/me", headers=auth_headers(user))
    assert r.status_code == 200
    assert r.json()["data"]["email"] == user.email

    user.is_active = False
    db.commit()
    assert client.get("/auth/me", headers=auth_headers(user)).status_code == 401
