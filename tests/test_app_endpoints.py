import pytest
from fastapi.testclient import TestClient

from authdemo.app import create_app
from authdemo.config import Settings
from authdemo.errors import StorageFailure

ANN = {"name": "Ann", "email": "ann@x.com", "password": "secret1", "role": "influencer"}


def test_register_login_user_logout_flow(client, settings):
    r = client.post("/api/register", json=ANN)
    assert r.status_code == 201
    body = r.json()
    assert body["message"] == "User registered successfully"
    assert body["user"]["id"] == 1
    assert "password" not in body["user"]

    r = client.post("/api/register", json=ANN)
    assert r.status_code == 400
    assert r.json() == {"message": "User with this email already exists"}

    r = client.post("/api/login", json={"email": "ann@x.com", "password": "secret1"})
    assert r.status_code == 200
    assert r.json()["message"] == "Login successful"
    assert settings.cookie_name in r.cookies

    r = client.get("/api/user")
    assert r.status_code == 200
    assert r.json() == {
        "id": 1,
        "name": "Ann",
        "email": "ann@x.com",
        "profilePicture": None,
        "role": "influencer",
    }

    r = client.post("/api/logout")
    assert r.status_code == 200
    assert r.json() == {"message": "Logged out successfully"}

    r = client.get("/api/user")
    assert r.status_code == 401
    assert r.json() == {"message": "Not authenticated"}


def test_old_cookie_is_useless_after_logout(client, settings):
    client.post("/api/register", json=ANN)
    r = client.post("/api/login", json={"email": "ann@x.com", "password": "secret1"})
    cookie = r.cookies[settings.cookie_name]
    client.post("/api/logout")

    fresh = TestClient(client.app)
    fresh.cookies.set(settings.cookie_name, cookie)
    assert fresh.get("/api/user").status_code == 401


def test_register_defaults_role_to_creator(client):
    r = client.post("/api/register", json={"name": "Cy", "email": "cy@x.com", "password": "secret1"})
    assert r.status_code == 201
    assert r.json()["user"]["role"] == "creator"


def test_register_validation_errors(client):
    cases = [
        ({"name": "", "email": "a@x.com", "password": "secret1"}, "name"),
        ({"name": "A", "email": "not-an-email", "password": "secret1"}, "email"),
        ({"name": "A", "email": "a@x.com", "password": "123"}, "password"),
        ({"name": "A", "email": "a@x.com", "password": "secret1", "role": "admin"}, "role"),
        ({"email": "a@x.com", "password": "secret1"}, "name"),
    ]
    for payload, field in cases:
        r = client.post("/api/register", json=payload)
        assert r.status_code == 400, payload
        message = r.json()["message"]
        assert message.startswith("Validation error")
        assert f'"{field}"' in message


def test_login_failures_are_generic(client):
    client.post("/api/register", json=ANN)
    wrong = client.post("/api/login", json={"email": "ann@x.com", "password": "wrong-pass"})
    unknown = client.post("/api/login", json={"email": "bob@x.com", "password": "secret1"})
    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json() == unknown.json() == {"message": "Invalid email or password"}
    assert "set-cookie" not in wrong.headers


def test_login_requires_both_fields(client):
    r = client.post("/api/login", json={"email": "ann@x.com"})
    assert r.status_code == 400


def test_user_requires_session(client):
    assert client.get("/api/user").status_code == 401
    client.cookies.set("authdemo_session", "forged")
    assert client.get("/api/user").status_code == 401


def test_dashboard_path_follows_role(client):
    for role, path in (("creator", "/dashboard"), ("influencer", "/influencer"), ("sponsor", "/sponsor")):
        email = f"{role}@x.com"
        client.post("/api/register", json={"name": role, "email": email, "password": "secret1", "role": role})
        client.post("/api/login", json={"email": email, "password": "secret1"})
        r = client.get("/api/dashboard")
        assert r.status_code == 200
        assert r.json() == {"role": role, "path": path}
        client.post("/api/logout")
    assert client.get("/api/dashboard").status_code == 401


def test_logout_without_session_is_ok(client):
    assert client.post("/api/logout").status_code == 200


def test_logout_failure_returns_500(client, monkeypatch):
    def boom(token):
        raise OSError("session backend down")

    monkeypatch.setattr(client.app.state.authenticator, "logout", boom)
    r = client.post("/api/logout")
    assert r.status_code == 500
    assert r.json() == {"message": "Could not log out"}


def test_storage_failure_returns_500(settings):
    settings.users_path.parent.mkdir(parents=True, exist_ok=True)
    settings.users_path.write_text(
        "id,name,email,password,profile_picture,role\nbad,Ann,ann@x.com,abc,,creator\n",
        encoding="utf-8",
    )
    client = TestClient(create_app(settings))
    r = client.post("/api/login", json={"email": "ann@x.com", "password": "secret1"})
    assert r.status_code == 500
    assert "invalid id" in r.json()["message"]


def test_memory_backend_app(tmp_path):
    app = create_app(Settings(store_backend="memory", secret_key="s", users_path=tmp_path / "unused.csv"))
    client = TestClient(app)
    assert client.post("/api/register", json=ANN).status_code == 201
    assert not (tmp_path / "unused.csv").exists()


def test_undecodable_users_file_fails_as_storage_error(settings):
    settings.users_path.parent.mkdir(parents=True, exist_ok=True)
    settings.users_path.write_bytes(
        b"id,name,email,password,profile_picture,role\n1,An\xff\xfen,ann@x.com,abc,,creator\n"
    )
    with pytest.raises(StorageFailure):
        create_app(settings)
