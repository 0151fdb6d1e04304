from app import create_app
from hiring.storage import get_storage

from tests.conftest import base_config


def register(client, email="ada@mail.test", password="s3cret-pass", **extra):
    return client.post("/api/auth/register", json={"email": email, "password": password, **extra})


def test_register_logs_in_and_returns_profile(client):
    resp = register(client, email="  Ada@Mail.test ", experienceLevel="Senior", skills=["python"])

    assert resp.status_code == 201
    body = resp.get_json()
    assert body["email"] == "ada@mail.test"
    assert body["role"] == "candidate"
    assert body["experienceLevel"] == "Senior"
    assert "passwordHash" not in body

    me = client.get("/api/auth/user")
    assert me.status_code == 200
    assert me.get_json()["id"] == body["id"]


def test_register_rejects_duplicates_and_bad_payloads(client):
    register(client)

    assert register(client).status_code == 409
    assert register(client, email="x@mail.test", password="123").status_code == 400
    assert register(client, email="y@mail.test", experienceLevel="Guru").status_code == 400


def test_login_and_logout(client):
    register(client)
    client.post("/api/auth/logout")
    assert client.get("/api/auth/user").status_code == 401

    bad = client.post("/api/auth/login", json={"email": "ada@mail.test", "password": "nope"})
    good = client.post("/api/auth/login", json={"email": "ADA@mail.test", "password": "s3cret-pass"})

    assert bad.status_code == 401
    assert good.status_code == 200
    assert client.get("/api/auth/user").get_json()["email"] == "ada@mail.test"


def test_registered_users_cannot_reach_admin_routes(client):
    register(client)

    assert client.get("/api/admin/recruiters").status_code == 403


def test_admin_seed_creates_admin_account():
    app = create_app(base_config(ADMIN_EMAIL="root@acme.test", ADMIN_PASSWORD="changeme1"))
    client = app.test_client()

    resp = client.post("/api/auth/login", json={"email": "root@acme.test", "password": "changeme1"})

    assert resp.status_code == 200
    assert resp.get_json()["role"] == "admin"


def test_admin_seed_promotes_existing_user():
    app = create_app(base_config(STORAGE_BACKEND="memory"))
    with app.app_context():
        storage = get_storage()
        user = storage.create_user(email="boss@acme.test", role="candidate")

    app2 = create_app(
        base_config(STORAGE_BACKEND="memory", ADMIN_EMAIL="boss@acme.test", ADMIN_PASSWORD="pw123456"),
        storage=storage,
    )

    with app2.app_context():
        assert get_storage().get_user(user.id).role == "admin"
