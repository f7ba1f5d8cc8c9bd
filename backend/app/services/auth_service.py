"""
Portfolio Backend — Bearer Token Gate
=======================================

What:  Verifies the bearer credential on mutating requests.
How:   AuthGate extracts the token from the Authorization header and hands it
       to a TokenVerifier. The default verifier checks an HS256 JWT signed
       with settings.jwt_secret (python-jose) and returns the subject id.
Who:   Routes call authorize() before reading a mutating body and hand the
       resulting Principal to ProjectService, which authorizes first on
       create/update/delete (a Principal passes straight through).

Failure modes (both → 401, generic message):
    - no header / not "Bearer <token>"    → MissingCredentialError
    - expired, malformed, bad signature    → InvalidCredentialError

Authorization model:
    Any authenticated subject may mutate any project. The subject id is used
    for log attribution only.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol, Union

from jose import JWTError, jwt

from app.config import settings
from app.exceptions import InvalidCredentialError, MissingCredentialError

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "

# Claims checked, in order, for the subject identifier
SUBJECT_CLAIMS = ("id", "_id", "sub")


@dataclass(frozen=True)
class Principal:
    """A caller whose bearer token has already been verified by an AuthGate."""
    subject: Optional[str] = None


# What a mutating operation accepts: a raw Authorization header value, or the
# Principal an earlier authorize() call returned for the same request
Credential = Union[Principal, str, None]


class TokenVerifier(Protocol):
    def verify(self, token: str) -> Optional[str]:
        """Return the subject id (possibly None) or raise InvalidCredentialError."""
        ...


class JWTVerifier:
    """Verifies HS256 (or configured algorithm) JWTs with a shared secret."""

    def __init__(self, secret: Optional[str] = None, algorithm: Optional[str] = None):
        self.secret = secret or settings.jwt_secret
        self.algorithm = algorithm or settings.jwt_algorithm

    def verify(self, token: str) -> Optional[str]:
        try:
            claims: Dict[str, Any] = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
            )
        except JWTError as e:
            # Detail stays server-side; the client only sees a generic 401
            logger.debug("Token verification failed: %s", str(e))
            raise InvalidCredentialError(context={"reason": type(e).__name__}) from e

        for claim in SUBJECT_CLAIMS:
            if claims.get(claim):
                return str(claims[claim])
        return None


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token from `Bearer <token>`, or None when absent/malformed."""
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        return None
    token = authorization[len(BEARER_PREFIX):].strip()
    return token or None


class AuthGate:
    """Bearer-credential check performed before any mutating operation."""

    def __init__(self, verifier: Optional[TokenVerifier] = None):
        self.verifier = verifier or JWTVerifier()

    def authorize(self, authorization: Credential) -> Principal:
        """
        Validate the Authorization header value.

        Returns:
            The verified Principal (subject None when the token names none).
            A Principal passed in is returned unchanged, so a request is
            verified once even when several layers ask.

        Raises:
            MissingCredentialError: no syntactically valid bearer token
            InvalidCredentialError: the verifier rejected the token
        """
        if isinstance(authorization, Principal):
            return authorization
        token = extract_bearer_token(authorization)
        if token is None:
            raise MissingCredentialError()
        return Principal(subject=self.verifier.verify(token))


def create_access_token(subject: str, secret: Optional[str] = None, **claims: Any) -> str:
    """
    Sign a token accepted by JWTVerifier.

    Used by operators to mint an admin token and by the test-suite.
    """
    payload = {"sub": subject, **claims}
    return jwt.encode(
        payload,
        secret or settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )


# ── Singleton Instance ────────────────────────────────────────────────────
auth_gate = AuthGate()
