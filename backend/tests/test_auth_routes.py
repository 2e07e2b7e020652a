from conftest import ADMIN_EMAIL, bearer, register
from mess_feedback.auth import verify_session


def test_register_returns_token_and_profile(client, settings):
    resp = register(client, "a@x.com", "pw1", student_roll="R1", department="CSE")
    assert resp.status_code == 201
    data = resp.json()
    assert data["success"] is True
    assert data["user"]["email"] == "a@x.com"
    assert data["profile"]["student_roll"] == "R1"
    assert verify_session(data["token"], settings).role == "student"


def test_login_returns_student_profile(client, settings):
    register(client, "a@x.com", "pw1", student_roll="R1")
    resp = client.post("/api/auth/login", json={"email": "a@x.com", "password": "pw1"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["profile"]["student_roll"] == "R1"
    assert data["user"]["role"] == "student"
    assert verify_session(data["token"], settings).role == "student"


def test_seeded_admin_can_log_in(client, settings):
    resp = client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": "warden-pw"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["user"]["name"] == "Warden"
    assert verify_session(data["token"], settings).is_admin


def test_duplicate_email_is_conflict(client):
    register(client, "a@x.com")
    resp = register(client, "a@x.com", "other")
    assert resp.status_code == 409
    assert "already exists" in resp.json()["error"]


def test_bad_credentials_share_one_response(client):
    register(client, "a@x.com", "pw1")
    wrong = client.post("/api/auth/login", json={"email": "a@x.com", "password": "nope"})
    unknown = client.post("/api/auth/login", json={"email": "nobody@x.com", "password": "pw1"})
    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json() == unknown.json() == {"error": "Invalid credentials"}


def test_missing_fields_are_rejected(client):
    assert client.post("/api/auth/login", json={"email": "a@x.com"}).status_code == 400
    resp = client.post("/api/auth/register", json={"email": "a@x.com", "password": "pw"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Name, email and password are required"


def test_malformed_body_is_400(client):
    resp = client.post("/api/auth/login", content="not json", headers={"Content-Type": "application/json"})
    assert resp.status_code == 400


def test_protected_route_requires_token(client):
    resp = client.get("/api/meals")
    assert resp.status_code == 401
    assert resp.json()["error"] == "Access denied. No token provided."


def test_protected_route_rejects_bad_token(client):
    resp = client.get("/api/meals", headers=bearer("garbage"))
    assert resp.status_code == 401
    assert resp.json()["error"] == "Invalid or expired token"


def test_health_endpoints(client):
    assert client.get("/api/health").json()["status"] == "healthy"
    db = client.get("/api/health/db")
    assert db.status_code == 200
    assert db.json()["status"] == "success"
