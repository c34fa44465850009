"""
Token codec and password hashing
"""
from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from formportal.core.config import settings
from formportal.core.security import (
    Identity,
    InvalidToken,
    hash_password,
    issue_token,
    verify_password,
    verify_token,
)
from formportal.db.models.user import Role


class TestTokenCodec:

    def test_round_trip_agent(self):
        identity = Identity(user_id="u-1", role=Role.AGENT, bank_id="b-1")
        assert verify_token(issue_token(identity)) == identity

    def test_round_trip_user_has_no_bank(self):
        identity = Identity(user_id="u-2", role=Role.USER)
        decoded = verify_token(issue_token(identity))
        assert decoded == identity
        assert decoded.bank_id is None

    def test_bank_dropped_for_non_agents(self):
        identity = Identity(user_id="u-3", role=Role.ADMIN, bank_id="b-9")
        assert identity.bank_id is None
        claims = jwt.get_unverified_claims(issue_token(identity))
        assert "bankId" not in claims

    def test_default_expiry_is_seven_days(self):
        claims = jwt.get_unverified_claims(issue_token(Identity(user_id="u", role=Role.USER)))
        assert claims["exp"] - claims["iat"] == 7 * 24 * 60 * 60
        assert settings.JWT_EXPIRES_SECONDS == 7 * 24 * 60 * 60

    def test_expired_token_rejected(self):
        token = issue_token(Identity(user_id="u", role=Role.USER), expires_in=timedelta(seconds=-5))
        with pytest.raises(InvalidToken):
            verify_token(token)

    def test_foreign_signature_rejected(self):
        token = jwt.encode(
            {"userId": "u", "role": "admin", "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
            "some-other-secret-that-is-long-enough-0000",
            algorithm="HS256",
        )
        with pytest.raises(InvalidToken):
            verify_token(token)

    def test_garbage_rejected(self):
        with pytest.raises(InvalidToken):
            verify_token("not-a-jwt")

    @pytest.mark.parametrize("claims", [
        {"role": "user"},
        {"userId": "u", "role": "superuser"},
        {"userId": "u"},
    ])
    def test_malformed_claims_rejected(self, claims):
        claims = {**claims, "exp": datetime.now(timezone.utc) + timedelta(hours=1)}
        token = jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
        with pytest.raises(InvalidToken):
            verify_token(token)


class TestPasswordHashing:

    def test_hash_and_verify(self):
        hashed = hash_password("testpassword123")
        assert hashed != "testpassword123"
        assert verify_password("testpassword123", hashed) is True
        assert verify_password("wrongpassword", hashed) is False


class TestSettings:

    def test_placeholder_secret_rejected(self, monkeypatch):
        from pydantic import ValidationError
        from formportal.core.config import Settings

        monkeypatch.setenv("JWT_SECRET", "fallback-secret-change-this")
        with pytest.raises(ValidationError):
            Settings()

    def test_short_secret_rejected(self, monkeypatch):
        from pydantic import ValidationError
        from formportal.core.config import Settings

        monkeypatch.setenv("JWT_SECRET", "short")
        with pytest.raises(ValidationError):
            Settings()

    def test_missing_secret_rejected(self, monkeypatch):
        from pydantic import ValidationError
        from formportal.core.config import Settings

        monkeypatch.delenv("JWT_SECRET", raising=False)
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    @pytest.mark.parametrize("password", ["admin123", "", "short-pw"])
    def test_weak_admin_password_rejected_when_bootstrapping(self, monkeypatch, password):
        from pydantic import ValidationError
        from formportal.core.config import Settings

        monkeypatch.setenv("AUTO_CREATE_ADMIN", "true")
        monkeypatch.setenv("DEFAULT_ADMIN_PASSWORD", password)
        with pytest.raises(ValidationError):
            Settings()

    def test_admin_password_ignored_without_bootstrap(self, monkeypatch):
        from formportal.core.config import Settings

        monkeypatch.setenv("AUTO_CREATE_ADMIN", "false")
        monkeypatch.setenv("DEFAULT_ADMIN_PASSWORD", "admin123")
        assert Settings().AUTO_CREATE_ADMIN is False

    def test_strong_admin_password_accepted(self, monkeypatch):
        from formportal.core.config import Settings

        monkeypatch.setenv("AUTO_CREATE_ADMIN", "true")
        monkeypatch.setenv("DEFAULT_ADMIN_PASSWORD", "a-long-bootstrap-password")
        assert Settings().DEFAULT_ADMIN_PASSWORD == "a-long-bootstrap-password"
