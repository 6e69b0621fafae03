"""Router tests for protected endpoints, posts and profiles."""

from __future__ import annotations

from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from app.dependencies import get_auth_service
from app.routers.auth import get_session_auth_service
from app.schemas.auth import AuthUser
from app.services.auth_service import AuthService
from supabase import AuthError

ALICE = AuthUser(uid="alice", email="alice@example.com", display_name="Alice")
BOB = AuthUser(uid="bob", email="bob@example.com", display_name="Bob")
ADMIN = AuthUser(uid="root", email="root@example.com", claims={"role": "admin"})


@pytest.fixture
def tokens(auth_service) -> dict[str, str]:
    auth_service.add("token-alice", ALICE)
    auth_service.add("token-bob", BOB)
    auth_service.add("token-admin", ADMIN)
    return {"alice": "token-alice", "bob": "token-bob", "admin": "token-admin"}


def _bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def _seed_profile(db, user: AuthUser, display_name: str) -> None:
    db.seed(
        "users",
        [
            {
                "uid": user.uid,
                "email": user.email,
                "display_name": display_name,
                "photo_url": "",
                "email_verified": True,
                "bio": "",
                "created_at": "2026-01-01T00:00:00+00:00",
                "updated_at": "2026-01-01T00:00:00+00:00",
                "metadata": {
                    "last_login_at": "2026-01-01T00:00:00+00:00",
                    "sign_up_method": "email",
                },
            }
        ],
    )


def test_session_requires_authentication(client: TestClient) -> None:
    """Requests without a token should be rejected with 401."""
    response = client.get("/auth/session")

    assert response.status_code == 401
    assert response.json() == {"error": "Authentication required", "code": "UNAUTHORIZED"}


def test_invalid_token_is_rejected(client: TestClient, tokens) -> None:
    """Unknown tokens should be treated like missing ones."""
    response = client.get("/auth/session", headers=_bearer("forged"))
    assert response.status_code == 401


def test_session_reads_token_from_cookie(client: TestClient, tokens) -> None:
    """The auth cookie should be accepted in place of a bearer header."""
    response = client.get("/auth/session", headers={"Cookie": f"access_token={tokens['alice']}"})

    assert response.status_code == 200
    assert response.json()["user"]["uid"] == "alice"


def test_sign_out_revokes_and_clears_cookie(client: TestClient, tokens, auth_service) -> None:
    """Sign-out should revoke the session and expire the cookie."""
    response = client.post("/auth/sign-out", headers=_bearer(tokens["alice"]))

    assert response.status_code == 200
    assert auth_service.signed_out == [tokens["alice"]]
    assert "access_token=" in response.headers.get("set-cookie", "")


def test_unknown_oauth_provider_is_invalid_input(client: TestClient) -> None:
    """Only google and github are accepted as providers."""
    client.app.dependency_overrides[get_session_auth_service] = lambda: AuthService(
        SimpleNamespace()
    )
    response = client.get("/auth/oauth/myspace")

    assert response.status_code == 422
    assert response.json()["code"] == "INVALID_INPUT"


def test_create_post_requires_authentication(client: TestClient, db) -> None:
    """Anonymous callers cannot publish posts."""
    response = client.post("/posts", json={"title": "Hi", "content": "There"})

    assert response.status_code == 401
    assert db.rows("posts") == []


def test_create_post_uses_profile_snapshot(client: TestClient, db, tokens) -> None:
    """The author snapshot should come from the stored profile."""
    _seed_profile(db, ALICE, "Alice Liddell")

    response = client.post(
        "/posts",
        json={"title": "Wonderland", "content": "Down the hole"},
        headers=_bearer(tokens["alice"]),
    )

    assert response.status_code == 201
    post = response.json()["post"]
    assert post["author_id"] == "alice"
    assert post["author"]["display_name"] == "Alice Liddell"


def test_list_posts_filters_by_author(client: TestClient, tokens) -> None:
    """The author filter should only return that author's posts."""
    client.post("/posts", json={"title": "A1", "content": "x"}, headers=_bearer(tokens["alice"]))
    client.post("/posts", json={"title": "B1", "content": "x"}, headers=_bearer(tokens["bob"]))

    response = client.get("/posts", params={"author_id": "bob"})

    assert response.status_code == 200
    posts = response.json()["posts"]
    assert [post["title"] for post in posts] == ["B1"]


def test_update_post_by_other_user_is_forbidden(client: TestClient, tokens) -> None:
    """Only the author may edit a post."""
    created = client.post(
        "/posts",
        json={"title": "Mine", "content": "x"},
        headers=_bearer(tokens["alice"]),
    ).json()["post"]

    response = client.patch(
        f"/posts/{created['id']}",
        json={"title": "Yours"},
        headers=_bearer(tokens["bob"]),
    )
    assert response.status_code == 403


def test_patch_post_title_only(client: TestClient, tokens) -> None:
    """Patching the title should leave the content alone."""
    created = client.post(
        "/posts",
        json={"title": "Draft", "content": "Body"},
        headers=_bearer(tokens["alice"]),
    ).json()["post"]

    response = client.patch(
        f"/posts/{created['id']}",
        json={"title": "Final"},
        headers=_bearer(tokens["alice"]),
    )

    assert response.status_code == 200
    assert response.json()["post"]["title"] == "Final"
    assert response.json()["post"]["content"] == "Body"


def test_delete_missing_post_returns_not_found(client: TestClient, tokens) -> None:
    """Deleting a post that does not exist should be a 404."""
    response = client.delete("/posts/does-not-exist", headers=_bearer(tokens["alice"]))

    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


def test_profile_update_roundtrip(client: TestClient, db, tokens) -> None:
    """Editing the own profile should persist and keep the uid."""
    _seed_profile(db, ALICE, "Alice")

    response = client.patch(
        "/users/me",
        json={"bio": "Curious", "display_name": "Alice L."},
        headers=_bearer(tokens["alice"]),
    )
    assert response.status_code == 200

    profile = client.get("/users/me", headers=_bearer(tokens["alice"])).json()["profile"]
    assert profile["uid"] == "alice"
    assert profile["bio"] == "Curious"
    assert profile["display_name"] == "Alice L."


def test_missing_profile_is_not_found(client: TestClient, tokens) -> None:
    """Looking up an unknown profile should return 404."""
    response = client.get("/users/nobody", headers=_bearer(tokens["alice"]))
    assert response.status_code == 404


def test_admin_routes_require_admin_claim(client: TestClient, tokens) -> None:
    """Non-admin users cannot reach user management."""
    response = client.get(
        "/admin/users",
        params={"email": "x@example.com"},
        headers=_bearer(tokens["alice"]),
    )
    assert response.status_code == 403


def _supabase_user(uid: str, email: str, provider: str, name: str = "") -> SimpleNamespace:
    return SimpleNamespace(
        id=uid,
        email=email,
        user_metadata={"display_name": name} if name else {},
        app_metadata={"provider": provider},
        email_confirmed_at=None,
    )


def _session(token: str) -> SimpleNamespace:
    return SimpleNamespace(access_token=token, refresh_token="refresh", expires_in=3600)


def test_sign_up_then_profile_reports_email_method(client: TestClient, db, auth_service) -> None:
    """Password sign-up should create a profile with the email sign-up method."""
    user = _supabase_user("new-1", "new@example.com", "email", "Newt")
    fake_auth = SimpleNamespace(
        sign_up=lambda credentials: SimpleNamespace(user=user, session=_session("token-new")),
    )
    client.app.dependency_overrides[get_session_auth_service] = lambda: AuthService(
        SimpleNamespace(auth=fake_auth)
    )
    auth_service.add("token-new", AuthUser.from_supabase_user(user))

    response = client.post(
        "/auth/sign-up",
        json={"email": "new@example.com", "password": "secret123", "display_name": "Newt"},
    )
    assert response.status_code == 201
    assert "access_token=token-new" in response.headers.get("set-cookie", "")

    profile = client.get("/users/me", headers=_bearer("token-new")).json()["profile"]
    assert profile["metadata"]["sign_up_method"] == "email"
    assert profile["display_name"] == "Newt"


def test_oauth_callback_records_provider(client: TestClient, db) -> None:
    """OAuth sign-in should record the provider id as sign-up method."""
    user = _supabase_user("gh-1", "octo@example.com", "github", "Octo")
    fake_auth = SimpleNamespace(
        set_session=lambda access, refresh: SimpleNamespace(user=user, session=_session(access)),
    )
    client.app.dependency_overrides[get_session_auth_service] = lambda: AuthService(
        SimpleNamespace(auth=fake_auth)
    )

    response = client.post(
        "/auth/callback",
        json={"access_token": "token-gh", "refresh_token": "refresh"},
    )

    assert response.status_code == 200
    assert response.json()["profile"]["metadata"]["sign_up_method"] == "github"
    assert db.rows("users")[0]["uid"] == "gh-1"


class RejectedCredentials(AuthError):
    def __init__(self) -> None:
        Exception.__init__(self, "Invalid login credentials")
        self.message = "Invalid login credentials"
        self.code = "invalid_credentials"


def test_sign_in_error_returns_mapped_message(client: TestClient) -> None:
    """Provider rejections should surface as the mapped user-facing message."""

    def sign_in_with_password(_credentials):
        raise RejectedCredentials()

    fake_auth = SimpleNamespace(sign_in_with_password=sign_in_with_password)
    client.app.dependency_overrides[get_session_auth_service] = lambda: AuthService(
        SimpleNamespace(auth=fake_auth)
    )

    response = client.post(
        "/auth/sign-in",
        json={"email": "ada@example.com", "password": "nope"},
    )

    assert response.status_code == 400
    assert response.json() == {
        "error": "Incorrect email or password. Please try again.",
        "code": "AUTH_ERROR",
    }


class ExpiredSession(AuthError):
    def __init__(self) -> None:
        Exception.__init__(self, "invalid JWT: token is expired")
        self.message = "invalid JWT: token is expired"
        self.code = "bad_jwt"


def test_sign_out_clears_cookie_when_revoke_fails(client: TestClient) -> None:
    """An expired session should still lose its cookie on sign-out."""

    def sign_out(_token):
        raise ExpiredSession()

    vendor = SimpleNamespace(auth=SimpleNamespace(admin=SimpleNamespace(sign_out=sign_out)))
    client.app.dependency_overrides[get_auth_service] = lambda: AuthService(vendor)

    response = client.post("/auth/sign-out", headers={"Cookie": "access_token=stale"})

    assert response.status_code == 400
    assert response.json() == {
        "error": "Failed to sign out. Please try again.",
        "code": "AUTH_ERROR",
    }
    set_cookie = response.headers.get("set-cookie", "")
    assert "access_token=" in set_cookie
    assert "Max-Age=0" in set_cookie
