"""
Portfolio Backend — AuthGate Unit Tests
=========================================

What we test:
    ✅ Missing / malformed Authorization header → MissingCredentialError
    ✅ Bad signature / expired / garbage token → InvalidCredentialError
    ✅ Valid token → Principal with the subject id from id, _id or sub
    ✅ An already verified Principal is not verified again
"""

import time

import pytest

from app.exceptions import AuthenticationError, InvalidCredentialError, MissingCredentialError
from app.services.auth_service import (
    AuthGate,
    JWTVerifier,
    Principal,
    create_access_token,
    extract_bearer_token,
)

SECRET = "unit-test-secret"


@pytest.fixture
def gate():
    return AuthGate(verifier=JWTVerifier(secret=SECRET, algorithm="HS256"))


class TestExtractBearerToken:

    def test_extracts_token(self):
        assert extract_bearer_token("Bearer abc.def") == "abc.def"

    @pytest.mark.parametrize("header", [None, "", "Bearer ", "Basic abc", "bearer abc", "abc"])
    def test_rejects_malformed(self, header):
        assert extract_bearer_token(header) is None


class TestAuthGate:

    def test_missing_header(self, gate):
        with pytest.raises(MissingCredentialError) as exc_info:
            gate.authorize(None)
        assert exc_info.value.message == "Missing bearer token"

    def test_wrong_scheme(self, gate):
        with pytest.raises(MissingCredentialError):
            gate.authorize("Token abc")

    def test_valid_token_returns_subject(self, gate):
        token = create_access_token("admin-1", secret=SECRET)
        assert gate.authorize(f"Bearer {token}") == Principal(subject="admin-1")

    def test_id_claim_takes_precedence(self, gate):
        token = create_access_token("fallback", secret=SECRET, id="42")
        assert gate.authorize(f"Bearer {token}").subject == "42"

    def test_wrong_secret(self, gate):
        token = create_access_token("admin-1", secret="other-secret")
        with pytest.raises(InvalidCredentialError) as exc_info:
            gate.authorize(f"Bearer {token}")
        assert exc_info.value.message == "Invalid or expired token"

    def test_expired_token(self, gate):
        token = create_access_token("admin-1", secret=SECRET, exp=int(time.time()) - 60)
        with pytest.raises(InvalidCredentialError):
            gate.authorize(f"Bearer {token}")

    def test_garbage_token(self, gate):
        with pytest.raises(AuthenticationError):
            gate.authorize("Bearer not-a-jwt")

    def test_custom_verifier(self):
        class StaticVerifier:
            def verify(self, token):
                if token != "letmein":
                    raise InvalidCredentialError()
                return "static"

        gate = AuthGate(verifier=StaticVerifier())
        assert gate.authorize("Bearer letmein").subject == "static"
        with pytest.raises(InvalidCredentialError):
            gate.authorize("Bearer nope")

    def test_principal_passes_through_without_verification(self):
        class CountingVerifier:
            calls = 0

            def verify(self, token):
                CountingVerifier.calls += 1
                return "admin-1"

        gate = AuthGate(verifier=CountingVerifier())
        principal = gate.authorize("Bearer anything")

        assert gate.authorize(principal) is principal
        assert CountingVerifier.calls == 1
