"""
BoardCtrl — Security Layer
Password hashing, JWT issuance/verification, and the role-gated access dependency.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import AbstractSet, Any, Callable, Dict, Optional

from fastapi import Depends, Header, Request
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from boardctrl.config import JWTSettings, get_settings
from boardctrl.core.exceptions import (
    AuthenticationError,
    ConfigurationError,
    InvalidInputError,
    PermissionDeniedError,
)
from boardctrl.services.rbac import RoleGate

logger = logging.getLogger("boardctrl.auth")

TOKEN_LIFETIME_MINUTES = 60
BEARER_SCHEME = "bearer"

# ─── Password hashing ─────────────────────────────────────────────────────────
# pbkdf2_sha256 is salted per hash and its round count is the adaptive cost
_pwd_context = CryptContext(
    schemes=["pbkdf2_sha256"],
    deprecated="auto",
    pbkdf2_sha256__default_rounds=get_settings().PASSWORD_HASH_ROUNDS,
)


def hash_password(password: Optional[str]) -> str:
    """Return a salted hash of the given plain-text password."""
    if not password:
        raise InvalidInputError("Password must not be empty", field="password")
    return _pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Return True if the plain password matches the hash."""
    if not plain_password or not hashed_password:
        return False
    try:
        return _pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Stored value is not a hash passlib recognises
        return False


# ─── JWT ──────────────────────────────────────────────────────────────────────


class TokenService:
    """
    Issues and verifies signed session tokens carrying ``name`` and ``role``.

    Built once at startup from the immutable JWT settings. A missing signing
    secret is a configuration failure, raised here rather than per request.
    """

    def __init__(self, jwt_settings: JWTSettings) -> None:
        if not jwt_settings.SECRET:
            raise ConfigurationError("JWT secret")
        self._secret = jwt_settings.SECRET
        self._algorithm = jwt_settings.ALGORITHM
        self.issuer = jwt_settings.VALID_ISSUER
        self.audience = jwt_settings.VALID_AUDIENCE

    def issue(self, name: str, role: str, issued_at: Optional[datetime] = None) -> str:
        """
        Create a signed JWT for an authenticated principal.

        :param name: The principal's user name.
        :param role: The principal's role name.
        :param issued_at: Override the issuance instant (defaults to now).
        """
        now = issued_at or datetime.now(tz=timezone.utc)
        payload: Dict[str, Any] = {
            "name": name,
            "role": role,
            "iss": self.issuer,
            "aud": self.audience,
            "iat": now,
            "exp": now + timedelta(minutes=TOKEN_LIFETIME_MINUTES),
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> Dict[str, Any]:
        """
        Decode and validate a JWT.
        Signature, issuer, audience and expiry are all mandatory, with no leeway.
        Raises AuthenticationError on any failure.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                audience=self.audience,
                issuer=self.issuer,
                options={
                    "require_exp": True,
                    "require_iss": True,
                    "require_aud": True,
                    "leeway": 0,
                },
            )
        except ExpiredSignatureError:
            raise AuthenticationError("Token has expired")
        except JWTError as exc:
            raise AuthenticationError(f"Invalid token: {exc}")

        if not payload.get("name") or not payload.get("role"):
            raise AuthenticationError("Token missing 'name' or 'role' claim")
        return payload


@lru_cache()
def get_token_service() -> TokenService:
    """Cached token service — safe for FastAPI Depends()."""
    return TokenService(get_settings().JWT)


def extract_bearer_token(authorization: Optional[str]) -> str:
    """Return the token from an Authorization header, with or without a ``Bearer `` prefix."""
    value = (authorization or "").strip()
    scheme, _, rest = value.partition(" ")
    if scheme.lower() == BEARER_SCHEME:
        value = rest.strip()
    if not value:
        raise AuthenticationError("Missing authorization token")
    return value


# ─── FastAPI dependency ───────────────────────────────────────────────────────


class Principal:
    """Represents the authenticated caller extracted from the JWT."""

    def __init__(self, name: str, role: str, raw_claims: Dict[str, Any]) -> None:
        self.name = name
        self.role = role
        self.raw_claims = raw_claims

    def __repr__(self) -> str:
        return f"Principal(name={self.name!r}, role={self.role!r})"


_role_gate = RoleGate()


def require_roles(allowed: AbstractSet[str]) -> Callable[..., Principal]:
    """
    Build the access gate for one operation.

    Usage:
        @router.get("/")
        def list_things(principal: Principal = Depends(require_roles(READERS))):
            ...
    """
    allowed_roles = frozenset(allowed)

    def access_gate(
        request: Request,
        authorization: Optional[str] = Header(default=None),
        tokens: TokenService = Depends(get_token_service),
    ) -> Principal:
        claims = tokens.verify(extract_bearer_token(authorization))
        principal = Principal(name=claims["name"], role=claims["role"], raw_claims=claims)
        operation = f"{request.method} {request.url.path}"
        try:
            _role_gate.check(principal.role, allowed_roles, operation)
        except PermissionDeniedError:
            logger.info("Denied %s for %r", operation, principal)
            raise
        return principal

    return access_gate
