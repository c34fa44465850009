"""
Test configuration and fixtures: in-memory SQLite, dependency-overridden
sessions and small factories for banks, sections, questions and users.
"""
import os

os.environ["JWT_SECRET"] = "test-jwt-secret-key-for-testing-only-0123456789"
os.environ["DATABASE_DSN"] = "sqlite://"
os.environ["AUTO_CREATE_ADMIN"] = "false"
os.environ["DEFAULT_ADMIN_PASSWORD"] = "bootstrap-admin-pass-0123"

import pytest
from faker import Faker
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from formportal.main import app
from formportal.db.base import Base
from formportal.db.session import get_db
from formportal.db.models.bank import Bank
from formportal.db.models.section import Section
from formportal.db.models.question import Question, QuestionType
from formportal.db.models.user import User, Role
from formportal.core.security import Identity, hash_password, issue_token

fake = Faker()

test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(bind=test_engine, autocommit=False, autoflush=False)

PASSWORD = "testpassword123"


@pytest.fixture(scope="session")
def password_hash() -> str:
    return hash_password(PASSWORD)


@pytest.fixture
def db():
    """Fresh schema and session for each test"""
    Base.metadata.create_all(bind=test_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def client(db):
    """Test client sharing the test session"""

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def make_bank(db):
    def _make(name: str | None = None, is_active: bool = True) -> Bank:
        bank = Bank(name=name or fake.unique.company(), logo="https://example.com/logo.svg", is_active=is_active)
        db.add(bank)
        db.commit()
        db.refresh(bank)
        return bank

    return _make


@pytest.fixture
def make_section(db):
    def _make(bank: Bank, title: str = "Applicant details", questions: list[dict] | None = None) -> Section:
        s = Section(bank_id=bank.id, title=title, order=0)
        db.add(s)
        db.flush()
        for i, qdef in enumerate(questions or []):
            q = Question(
                section_id=s.id,
                type=qdef.get("type", QuestionType.TEXT),
                label=qdef.get("label", f"Question {i + 1}"),
                required=qdef.get("required", False),
                order=i,
            )
            q.options = qdef.get("options")
            db.add(q)
        db.commit()
        db.refresh(s)
        return s

    return _make


@pytest.fixture
def make_user(db, password_hash):
    def _make(role: Role = Role.USER, bank: Bank | None = None, is_active: bool = True) -> User:
        u = User(
            name=fake.name(),
            email=fake.unique.email().lower(),
            phone="9876543210",
            password_hash=password_hash,
            role=role,
            bank_id=bank.id if bank is not None else None,
            is_active=is_active,
        )
        db.add(u)
        db.commit()
        db.refresh(u)
        return u

    return _make


def headers_for(user: User) -> dict:
    token = issue_token(Identity(user_id=user.id, role=user.role, bank_id=user.bank_id))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers():
    return headers_for


@pytest.fixture
def admin(make_user):
    return make_user(Role.ADMIN)
