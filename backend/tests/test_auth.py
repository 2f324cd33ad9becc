"""Tests for tokens, the access gate, signup and signin."""

import pytest
from starlette.requests import Request
from jose import jwt
from datetime import datetime, timezone

from second_brain.core.auth import (
    ALGORITHM,
    InvalidTokenError,
    TokenService,
    get_current_user_id,
    get_token_service,
)
from second_brain.core.errors import AuthError
from second_brain.models.user import User

API = "/api/v1"
TEST_PASSWORD = "Str0ng!Pass"

SECRET = "unit_test_secret"


@pytest.mark.unit
class TestTokenService:
    """Test issuing and verifying tokens."""

    def test_issue_and_verify(self):
        service = TokenService(SECRET)
        token = service.issue("a" * 32)

        assert isinstance(token, str)
        assert service.verify(token) == "a" * 32

    def test_token_has_no_expiry_by_default(self):
        token = TokenService(SECRET).issue("user-1")
        payload = jwt.decode(token, SECRET, algorithms=[ALGORITHM])

        assert payload["sub"] == "user-1"
        assert payload["type"] == "access"
        assert "exp" not in payload
        assert len(payload["jti"]) == 36

    def test_token_expiry_when_configured(self):
        token = TokenService(SECRET, expire_minutes=30).issue("user-1")
        payload = jwt.decode(token, SECRET, algorithms=[ALGORITHM])

        exp_time = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
        iat_time = datetime.fromtimestamp(payload["iat"], tz=timezone.utc)
        assert 1700 < (exp_time - iat_time).total_seconds() < 1900

    def test_expired_token_rejected(self):
        service = TokenService(SECRET, expire_minutes=-1)
        token = service.issue("user-1")

        with pytest.raises(InvalidTokenError):
            service.verify(token)

    def test_token_signed_with_other_secret_rejected(self):
        token = TokenService("another_secret").issue("user-1")

        with pytest.raises(InvalidTokenError):
            TokenService(SECRET).verify(token)

    @pytest.mark.parametrize("token", [None, "", "invalid.token.here", "garbage"])
    def test_malformed_or_missing_token_rejected(self, token):
        with pytest.raises(InvalidTokenError):
            TokenService(SECRET).verify(token)

    def test_wrong_token_type_rejected(self):
        token = jwt.encode({"sub": "user-1", "type": "refresh"}, SECRET, algorithm=ALGORITHM)

        with pytest.raises(InvalidTokenError):
            TokenService(SECRET).verify(token)

    def test_token_without_subject_rejected(self):
        token = jwt.encode({"type": "access"}, SECRET, algorithm=ALGORITHM)

        with pytest.raises(InvalidTokenError):
            TokenService(SECRET).verify(token)

    def test_empty_secret_refused(self):
        with pytest.raises(ValueError):
            TokenService("")


def make_request() -> Request:
    return Request(
        {
            "type": "http",
            "method": "GET",
            "scheme": "http",
            "server": ("testserver", 80),
            "path": "/api/v1/content",
            "root_path": "",
            "query_string": b"",
            "headers": [],
            "client": ("203.0.113.7", 50000),
        }
    )


@pytest.mark.unit
class TestAccessGateDependency:
    """Call the gate directly, outside the HTTP stack."""

    @pytest.mark.asyncio
    async def test_attaches_user_id_to_request(self):
        service = TokenService(SECRET)
        request = make_request()

        user_id = await get_current_user_id(
            request, authorization=service.issue("user-1"), token_service=service
        )

        assert user_id == "user-1"
        assert request.state.user_id == "user-1"

    @pytest.mark.asyncio
    async def test_missing_header_raises_auth_error(self):
        with pytest.raises(AuthError) as exc_info:
            await get_current_user_id(
                make_request(), authorization=None, token_service=TokenService(SECRET)
            )

        assert exc_info.value.status_code == 401


@pytest.mark.unit
class TestAccessGate:
    """Test authorization on protected endpoints."""

    def test_missing_header_rejected(self, client):
        response = client.get(f"{API}/content")

        assert response.status_code == 401
        assert response.json() == {"message": "You are not logged in"}

    def test_invalid_token_rejected(self, client):
        response = client.get(f"{API}/content", headers={"Authorization": "not-a-token"})

        assert response.status_code == 401
        assert response.json()["message"] == "You are not logged in"

    def test_bare_token_accepted(self, client, auth_headers):
        response = client.get(f"{API}/content", headers=auth_headers)

        assert response.status_code == 200

    def test_bearer_prefix_accepted(self, client, token_service, test_user):
        headers = {"Authorization": f"Bearer {token_service.issue(test_user.id)}"}
        response = client.get(f"{API}/content", headers=headers)

        assert response.status_code == 200

    def test_verifier_crash_becomes_rejection(self, client, test_app, auth_headers):
        """Exceptions other than InvalidTokenError are also turned into 401."""

        class ExplodingTokenService:
            def verify(self, token):
                raise RuntimeError("boom")

        test_app.dependency_overrides[get_token_service] = ExplodingTokenService
        response = client.get(f"{API}/content", headers=auth_headers)

        assert response.status_code == 401
        assert response.json() == {"message": "You are not logged in"}

    def test_token_of_one_user_never_resolves_to_another(
        self, client, token_service, test_user, other_user, add_content
    ):
        alice_headers = {"Authorization": token_service.issue(test_user.id)}
        bob_headers = {"Authorization": token_service.issue(other_user.id)}
        created = add_content(alice_headers, title="alice only")

        alice_view = client.get(f"{API}/content", headers=alice_headers).json()
        bob_view = client.get(f"{API}/content", headers=bob_headers).json()

        assert [c["id"] for c in alice_view["content"]] == [created["id"]]
        assert all(c["userId"] == test_user.id for c in alice_view["content"])
        assert bob_view["content"] == []


@pytest.mark.unit
class TestSignup:
    """Test the signup endpoint."""

    def test_signup_success(self, client, db_session, password_hasher):
        response = client.post(
            f"{API}/signup", json={"username": "carol", "password": TEST_PASSWORD}
        )

        assert response.status_code == 200
        assert response.json() == {"message": "Signed up successfully"}

        user = db_session.query(User).filter(User.username == "carol").one()
        assert user.password != TEST_PASSWORD
        assert password_hasher.verify(TEST_PASSWORD, user.password)
        assert len(user.id) == 32

    @pytest.mark.parametrize("password", [TEST_PASSWORD, "0ther!Passw"])
    def test_duplicate_username_rejected(self, client, test_user, password):
        response = client.post(
            f"{API}/signup", json={"username": test_user.username, "password": password}
        )

        assert response.status_code == 403
        assert response.json()["message"] == "User already exists with this username"

    @pytest.mark.parametrize("username", ["ab", "abcdefghijk"])
    def test_username_length_enforced(self, client, username):
        response = client.post(
            f"{API}/signup", json={"username": username, "password": TEST_PASSWORD}
        )

        assert response.status_code == 411
        data = response.json()
        assert data["message"] == "Error in inputs"
        assert data["errors"][0]["loc"] == ["username"]

    def test_password_rules_enumerated(self, client):
        response = client.post(
            f"{API}/signup", json={"username": "carol", "password": "alllowercase"}
        )

        assert response.status_code == 411
        errors = response.json()["errors"]
        assert len(errors) == 1
        assert errors[0]["loc"] == ["password"]
        message = errors[0]["msg"]
        assert "uppercase letter" in message
        assert "number" in message
        assert "special character" in message
        assert "lowercase letter" not in message

    @pytest.mark.parametrize("password", ["S0!rt", "Way2Long!Password1234"])
    def test_password_length_enforced(self, client, password):
        response = client.post(
            f"{API}/signup", json={"username": "carol", "password": password}
        )

        assert response.status_code == 411

    def test_missing_fields_rejected(self, client):
        response = client.post(f"{API}/signup", json={})

        assert response.status_code == 411
        locs = [e["loc"] for e in response.json()["errors"]]
        assert ["username"] in locs
        assert ["password"] in locs


@pytest.mark.unit
class TestSignin:
    """Test the signin endpoint."""

    def test_signin_returns_usable_token(self, client, token_service, test_user):
        response = client.post(
            f"{API}/signin",
            json={"username": test_user.username, "password": TEST_PASSWORD},
        )

        assert response.status_code == 200
        token = response.json()["token"]
        assert token_service.verify(token) == test_user.id

        listed = client.get(f"{API}/content", headers={"Authorization": token})
        assert listed.status_code == 200

    def test_unknown_username(self, client):
        response = client.post(
            f"{API}/signin", json={"username": "nobody", "password": TEST_PASSWORD}
        )

        assert response.status_code == 403
        assert response.json()["message"] == "No User with this username exists"

    def test_wrong_password(self, client, test_user):
        response = client.post(
            f"{API}/signin",
            json={"username": test_user.username, "password": "Wr0ng!Pass"},
        )

        assert response.status_code == 403
        assert response.json()["message"] == "Wrong password entered"
        assert "token" not in response.json()
