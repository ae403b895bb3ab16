from urllib.parse import parse_qs, urlparse

import pytest

from auth import oauth
from auth.models import User
from config import settings


def test_register_returns_user_without_password(client):
    response = client.post("/auth/register", json={
        "username": "alice",
        "password": "wonderland",
        "fullName": "Alice Liddell",
        "email": "alice@mail.com",
        "location": "Oxford",
        "interests": ["tea", "croquet"],
    })

    assert response.status_code == 201
    body = response.json()
    assert body["username"] == "alice"
    assert body["fullName"] == "Alice Liddell"
    assert body["interests"] == ["tea", "croquet"]
    assert body["followerCount"] == 0
    assert "password" not in body
    assert "passwordHash" not in body


def test_register_duplicate_email_conflicts(client, make_user):
    make_user("alice", email="alice@mail.com")

    response = client.post("/auth/register", json={
        "username": "alice2",
        "password": "wonderland",
        "fullName": "Alice Again",
        "email": "ALICE@mail.com",
    })

    assert response.status_code == 409


def test_register_duplicate_username_conflicts(client, make_user):
    make_user("alice")

    response = client.post("/auth/register", json={
        "username": "alice",
        "password": "wonderland",
        "fullName": "Alice",
        "email": "other@mail.com",
    })

    assert response.status_code == 409


def test_register_rejects_malformed_input(client):
    response = client.post("/auth/register", json={
        "username": "al",
        "password": "123",
        "fullName": "Al",
        "email": "not-an-email",
    })

    assert response.status_code == 400


def test_login_with_username_or_email(client, make_user, password):
    make_user("bob", email="bob@mail.com")

    by_name = client.post("/auth/login", json={"username": "bob", "password": password})
    by_email = client.post("/auth/login", json={"username": "bob@mail.com", "password": password})

    assert by_name.status_code == 200
    assert by_name.json()["token_type"] == "bearer"
    assert by_email.status_code == 200


def test_login_wrong_password(client, make_user):
    make_user("bob")

    response = client.post("/auth/login", json={"username": "bob", "password": "nope-nope"})

    assert response.status_code == 401


def test_me_requires_token(client):
    assert client.get("/auth/me").status_code == 401


def test_me_rejects_garbage_token(client):
    response = client.get("/auth/me", headers={"Authorization": "Bearer garbage"})
    assert response.status_code == 401


def test_me_returns_current_user(client, make_user, password):
    make_user("carol")
    token = client.post("/auth/login", json={"username": "carol", "password": password}).json()["access_token"]

    response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.json()["username"] == "carol"


@pytest.fixture
def google_enabled(monkeypatch):
    providers = {name: dict(conf) for name, conf in settings.OAUTH_PROVIDERS.items()}
    providers["google"].update(client_id="cid", client_secret="csecret", enabled=True)
    monkeypatch.setattr(settings, "OAUTH_PROVIDERS", providers)


class FakeResponse:
    def __init__(self, status_code, payload):
        self.status_code = status_code
        self._payload = payload
        self.text = str(payload)

    def json(self):
        return self._payload


def test_providers_lists_only_configured(client, google_enabled):
    assert client.get("/auth/providers").json() == {"providers": ["google"]}


def test_unconfigured_provider_is_not_found(client, google_enabled):
    response = client.get("/auth/facebook", follow_redirects=False)
    assert response.status_code == 404


def test_oauth_redirect_carries_state(client, google_enabled):
    response = client.get("/auth/google", follow_redirects=False)

    assert response.status_code in (302, 307)
    location = urlparse(response.headers["location"])
    params = parse_qs(location.query)
    assert location.netloc == "accounts.google.com"
    assert params["client_id"] == ["cid"]
    assert params["redirect_uri"] == [f"{settings.BASE_URL}/auth/google/callback"]
    assert params["state"]


def test_oauth_callback_creates_then_reuses_user(client, db, google_enabled, monkeypatch):
    monkeypatch.setattr(oauth.requests, "post", lambda *a, **kw: FakeResponse(200, {"access_token": "tok"}))
    monkeypatch.setattr(oauth.requests, "get", lambda *a, **kw: FakeResponse(200, {
        "email": "dana@mail.com",
        "name": "Dana Scully",
        "picture": "https://img.mail.com/dana.png",
    }))
    state = parse_qs(urlparse(oauth.authorize_url("google")).query)["state"][0]

    first = client.get("/auth/google/callback", params={"code": "abc", "state": state})
    second = client.get("/auth/google/callback", params={"code": "def", "state": state})

    assert first.status_code == 200
    assert second.status_code == 200
    users = db.query(User).filter(User.email == "dana@mail.com").all()
    assert len(users) == 1
    assert users[0].username.startswith("dana_")
    assert users[0].bio == "User connected via Google"
    assert users[0].profile_picture == "https://img.mail.com/dana.png"


def test_oauth_callback_rejects_bad_state(client, google_enabled):
    response = client.get("/auth/google/callback", params={"code": "abc", "state": "forged"})
    assert response.status_code == 400


def test_oauth_callback_provider_failure(client, google_enabled, monkeypatch):
    monkeypatch.setattr(oauth.requests, "post", lambda *a, **kw: FakeResponse(401, {"error": "invalid_grant"}))
    state = parse_qs(urlparse(oauth.authorize_url("google")).query)["state"][0]

    response = client.get("/auth/google/callback", params={"code": "abc", "state": state})

    assert response.status_code == 502


def test_facebook_profile_picture_is_unwrapped():
    identity = oauth._parse_profile("facebook", {
        "email": "eve@mail.com",
        "name": "Eve",
        "picture": {"data": {"url": "https://fb.mail.com/eve.jpg"}},
    })
    assert identity.avatar_url == "https://fb.mail.com/eve.jpg"
