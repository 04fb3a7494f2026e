"""Tests for the session context and auth client."""

from __future__ import annotations

import json

import pytest

from ledgerview.errors import AuthFailure, ValidationFailure
from ledgerview.infra.auth_client import AuthClient
from ledgerview.infra.http import ApiClient
from ledgerview.models import User
from ledgerview.session import AuthSession
from tests.conftest import run
from tests.test_http_store import FakeHttp, _response

AUTH_BODY = {"token": "jwt-abc", "user": {"id": 1, "email": "ana@example.com", "name": "Ana"}}


def _auth(tmp_path, *responses):
    session = AuthSession(tmp_path / "session.json")
    http = FakeHttp(*responses)
    return AuthClient(ApiClient("http://api.test", session, http=http)), session, http


def test_login_establishes_and_persists_session(tmp_path):
    auth, session, http = _auth(tmp_path, _response(200, AUTH_BODY))

    token, user = run(auth.login("ana@example.com", "secret"))

    assert http.calls[0]["url"] == "http://api.test/auth/login"
    assert http.calls[0]["json"] == {"email": "ana@example.com", "password": "secret"}
    assert token == "jwt-abc"
    assert user == User(id="1", email="ana@example.com", name="Ana")
    assert session.is_authenticated
    stored = json.loads((tmp_path / "session.json").read_text(encoding="utf-8"))
    assert stored["token"] == "jwt-abc"

    restored = AuthSession.load(tmp_path / "session.json")
    assert restored.token == "jwt-abc"
    assert restored.user == user
    assert restored.authorization_header() == {"Authorization": "Bearer jwt-abc"}


def test_register_posts_name_email_password(tmp_path):
    auth, session, http = _auth(tmp_path, _response(201, AUTH_BODY))

    run(auth.register("Ana", "ana@example.com", "secret"))

    assert http.calls[0]["url"] == "http://api.test/auth/register"
    assert http.calls[0]["json"]["name"] == "Ana"
    assert session.token == "jwt-abc"


def test_failed_login_leaves_session_empty(tmp_path):
    auth, session, _ = _auth(tmp_path, _response(422, {"message": "Invalid credentials"}))

    with pytest.raises(ValidationFailure):
        run(auth.login("ana@example.com", "wrong"))

    assert not session.is_authenticated
    assert not (tmp_path / "session.json").exists()


def test_current_user_validates_token(tmp_path):
    auth, session, http = _auth(tmp_path, _response(200, AUTH_BODY["user"]))
    session.token = "jwt-abc"

    user = run(auth.current_user())

    assert http.calls[0]["url"] == "http://api.test/auth/me"
    assert http.calls[0]["headers"] == {"Authorization": "Bearer jwt-abc"}
    assert user.email == "ana@example.com"
    assert session.user == user


def test_current_user_with_expired_token_clears_session(tmp_path):
    auth, session, _ = _auth(tmp_path, _response(200, AUTH_BODY), _response(401))
    run(auth.login("ana@example.com", "secret"))

    with pytest.raises(AuthFailure):
        run(auth.current_user())

    assert not session.is_authenticated
    assert not (tmp_path / "session.json").exists()


def test_current_user_requires_a_token(tmp_path):
    auth, _, http = _auth(tmp_path)

    with pytest.raises(AuthFailure):
        run(auth.current_user())

    assert http.calls == []


def test_logout_clears_token_and_notifies(tmp_path):
    auth, session, _ = _auth(tmp_path, _response(200, AUTH_BODY))
    run(auth.login("ana@example.com", "secret"))
    events = []
    session.add_listener(events.append)

    auth.logout()

    assert session.token is None and session.user is None
    assert events == [session]
    assert AuthSession.load(tmp_path / "session.json").token is None


def test_corrupt_session_file_is_ignored(tmp_path):
    path = tmp_path / "session.json"
    path.write_text("{not json", encoding="utf-8")

    session = AuthSession.load(path)

    assert not session.is_authenticated
    assert session.authorization_header() == {}
