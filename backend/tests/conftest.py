import pytest
from fastapi.testclient import TestClient
from mess_feedback.config import Settings
from mess_feedback.main import create_app

ADMIN_EMAIL = "warden@mess.test"
ADMIN_PASSWORD = "warden-pw"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'mess.db'}",
        jwt_secret_key="test-secret",
        password_hash_method="pbkdf2:sha256:1000",
        admin_email=ADMIN_EMAIL,
        admin_password=ADMIN_PASSWORD,
        admin_name="Warden",
    )


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as c:
        yield c


def register(client, email, password="pw1", role="student", **fields):
    body = {"email": email, "password": password, "name": fields.pop("name", "Asha"), "role": role}
    if role == "student":
        body.setdefault("student_roll", "R1")
    body.update(fields)
    return client.post("/api/auth/register", json=body)


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(client):
    resp = client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert resp.status_code == 200
    return bearer(resp.json()["token"])


@pytest.fixture
def student(client):
    resp = register(client, "a@x.com", "pw1", student_roll="R1", room_no="B-12")
    assert resp.status_code == 201
    data = resp.json()
    return {"id": data["user"]["id"], "headers": bearer(data["token"])}
