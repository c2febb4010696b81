from types import SimpleNamespace

from flask_login import AnonymousUserMixin

from auth import has_role, is_authenticated, is_owner_or_role
from conftest import login, register


def _user(uid, role="farmer"):
    return SimpleNamespace(id=uid, role=role, is_authenticated=True)


def test_is_owner_or_role():
    gh = SimpleNamespace(owner_id=1)

    assert is_owner_or_role(gh, _user(1))
    assert not is_owner_or_role(gh, _user(2))
    assert is_owner_or_role(gh, _user(2, "technician"), "technician")
    assert not is_owner_or_role(gh, _user(2, "farmer"), "technician")
    assert not is_owner_or_role(None, _user(1), "technician")
    assert not is_owner_or_role(gh, AnonymousUserMixin(), "technician")


def test_has_role_requires_authentication():
    assert has_role(_user(1, "technician"), "technician")
    assert not has_role(AnonymousUserMixin(), "technician")
    assert not is_authenticated(AnonymousUserMixin())


def test_register_then_login_reaches_dashboard(client):
    resp = register(client, "alice")
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/login")

    resp = login(client, "alice")
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/dashboard")
    assert client.get("/dashboard").status_code == 200


def test_register_duplicate_username(client):
    register(client, "alice")
    resp = register(client, "alice")

    assert resp.status_code == 200
    assert b"Username already exists" in resp.data


def test_register_requires_username_and_password(client):
    resp = client.post("/register", data={"username": "", "password": ""})
    assert b"Username and password required." in resp.data


def test_wrong_password_rerenders_login_without_session(client):
    register(client, "alice")

    resp = login(client, "alice", "not-the-password")

    assert resp.status_code == 200
    assert b"Invalid username or password" in resp.data
    with client.session_transaction() as sess:
        assert "_user_id" not in sess
    assert client.get("/dashboard").status_code == 302


def test_unknown_user_gets_same_message(client):
    resp = login(client, "nobody")
    assert b"Invalid username or password" in resp.data


def test_dashboard_requires_login(client):
    resp = client.get("/dashboard")
    assert resp.status_code == 302
    assert "/login" in resp.headers["Location"]


def test_logout_ends_session(client):
    register(client, "alice")
    login(client, "alice")

    resp = client.get("/logout")

    assert resp.status_code == 302
    assert client.get("/dashboard").status_code == 302
