"""
Shared fixtures: in-memory SQLite, a recording mailer and a temp-dir upload store.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from jobboard.main import app
from jobboard.core.auth_dependency import get_db
from jobboard.core.rate_limit import reset_rate_limits
from jobboard.db.base import Base
from jobboard.db.models.company import Company
from jobboard.db.models.user import User
from jobboard.db.session import build_engine
from jobboard.services.mail_service import get_mailer
from jobboard.services.upload_service import UploadStore, get_upload_store

import jobboard.db.models  # noqa: F401


# Setup in-memory SQLite database for testing
TEST_DATABASE_URL = "sqlite://"
test_engine = build_engine(TEST_DATABASE_URL, poolclass=StaticPool)
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64
TEST_UPLOAD_LIMIT = 64 * 1024


def override_get_db():
    """Override get_db dependency for testing."""
    db = TestSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


class RecordingMailer:
    """Stands in for the SMTP gateway; remembers every code it was asked to send."""

    def __init__(self):
        self.sent = []

    def send_otp(self, email: str, code: str) -> None:
        self.sent.append((email, code))

    def last_code_for(self, email: str):
        codes = [code for to, code in self.sent if to == email]
        return codes[-1] if codes else None


@pytest.fixture(scope="function", autouse=True)
def setup_db():
    """Create and drop tables for each test."""
    Base.metadata.create_all(bind=test_engine)
    reset_rate_limits()
    yield
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def db_session():
    """Provide a database session for tests."""
    db = TestSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def mailer():
    recorder = RecordingMailer()
    app.dependency_overrides[get_mailer] = lambda: recorder
    yield recorder
    app.dependency_overrides.pop(get_mailer, None)


@pytest.fixture
def upload_store(tmp_path):
    store = UploadStore(str(tmp_path / "uploads"), max_bytes=TEST_UPLOAD_LIMIT)
    app.dependency_overrides[get_upload_store] = lambda: store
    yield store
    app.dependency_overrides.pop(get_upload_store, None)


@pytest.fixture
def client(mailer, upload_store):
    return TestClient(app)


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_company(client, db_session):
    """Register and verify a company; returns its id, credentials and token."""
    def _make(email="hr@acme.example", name="Acme", password="secret1"):
        response = client.post(
            "/api/company/register",
            data={"name": name, "email": email, "password": password},
            files={"image": ("logo.png", PNG_BYTES, "image/png")},
        )
        assert response.status_code == 201, response.text

        db_session.expire_all()
        company = db_session.query(Company).filter(Company.email == email).first()
        response = client.post("/api/company/verify-otp", json={"email": email, "otp": company.otp})
        assert response.status_code == 200, response.text

        token = response.json()["token"]
        return {
            "id": company.id,
            "email": email,
            "password": password,
            "token": token,
            "headers": auth_headers(token),
        }

    return _make


@pytest.fixture
def make_user(client, db_session):
    """Register and verify a user; returns its id, credentials and token."""
    def _make(email="jane@example.com", name="Jane Doe", password="secret1"):
        response = client.post(
            "/api/user/register",
            data={"name": name, "email": email, "password": password},
            files={"image": ("me.png", PNG_BYTES, "image/png")},
        )
        assert response.status_code == 201, response.text

        db_session.expire_all()
        user = db_session.query(User).filter(User.email == email).first()
        response = client.post("/api/user/verify-otp", json={"email": email, "otp": user.otp})
        assert response.status_code == 200, response.text

        token = response.json()["token"]
        return {
            "id": user.id,
            "email": email,
            "password": password,
            "token": token,
            "headers": auth_headers(token),
        }

    return _make


@pytest.fixture
def make_category(client):
    def _make(headers, category_type="Engineering"):
        response = client.post("/api/categories", json={"type": category_type}, headers=headers)
        assert response.status_code == 201, response.text
        return response.json()["categoryData"]["_id"]

    return _make


def job_payload(category_id, **overrides) -> dict:
    payload = {
        "title": "Backend Engineer",
        "description": "Build and run our APIs.",
        "location": {"city": "Pune", "state": "MH", "country": "India", "pincode": "411001"},
        "category": category_id,
        "jobType": "full-time",
        "salaryMin": 50000,
        "salaryMax": 90000,
        "skills": ["python", "sql"],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_job(client):
    def _make(headers, category_id, **overrides):
        response = client.post("/api/company/jobs", json=job_payload(category_id, **overrides), headers=headers)
        assert response.status_code == 201, response.text
        return response.json()["jobData"]["_id"]

    return _make
