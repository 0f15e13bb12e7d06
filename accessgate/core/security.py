"""Password hashing and session token issuance/validation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import TYPE_CHECKING, Any, Iterable

import bcrypt
import jwt

from accessgate.core.config import get_settings
from accessgate.core.exceptions import (
    MalformedTokenError,
    SignatureInvalidError,
    TokenExpiredError,
    TokenIssuanceError,
)
from accessgate.models.role import RoleName

if TYPE_CHECKING:
    from accessgate.core.config import Settings

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of the password.
BCRYPT_MAX_BYTES = 72

# Min/max lengths for username and password validation.
USERNAME_MIN_LEN = 1
USERNAME_MAX_LEN = 255
PASSWORD_MIN_LEN = 1
PASSWORD_MAX_LEN = 128

TOKEN_TYPE = "Bearer"
REQUIRED_CLAIMS = ("sub", "roles", "iat", "exp")


@dataclass(frozen=True)
class Principal:
    """Identity and roles taken from a validated session token."""

    username: str
    roles: frozenset[RoleName]


def _password_bytes(plain_password: str) -> bytes:
    # Truncate rather than error; request validation already bounds the length.
    return plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(plain_password: str, rounds: int | None = None) -> str:
    """
    Hash a plain-text password for storage. Do not store plain passwords.

    A fresh salt is generated on every call; the returned digest embeds the
    algorithm, cost and salt so verify_password needs nothing else.
    """
    if rounds is None:
        rounds = get_settings().BCRYPT_ROUNDS
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(_password_bytes(plain_password), salt).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash. Malformed hashes verify as False."""
    try:
        return bcrypt.checkpw(_password_bytes(plain_password), hashed.encode("utf-8"))
    except (ValueError, TypeError, AttributeError):
        return False


@lru_cache
def _dummy_hash() -> str:
    return hash_password("accessgate-timing-equalizer")


def burn_password_check(plain_password: str) -> None:
    """Spend the same time as a real verification when the account does not exist."""
    verify_password(plain_password, _dummy_hash())


def resolve_now(now: datetime | None) -> datetime:
    """Current UTC time if `now` is None; naive datetimes are taken as UTC."""
    if now is None:
        return datetime.now(UTC)
    if now.tzinfo is None:
        return now.replace(tzinfo=UTC)
    return now


def token_ttl(settings: Settings | None = None) -> timedelta:
    """Session lifetime configured by JWT_EXPIRE_MINUTES."""
    settings = settings or get_settings()
    return timedelta(minutes=settings.JWT_EXPIRE_MINUTES)


def issue_token(
    identity: str,
    roles: Iterable[RoleName],
    now: datetime | None = None,
    settings: Settings | None = None,
) -> str:
    """
    Create a signed session token with sub (username), roles, iat and exp.

    iat and exp are NumericDates that keep sub-second precision, so the token
    is valid for exactly the configured TTL after `now`.
    Raises TokenIssuanceError if signing fails.
    """
    settings = settings or get_settings()
    issued_at = resolve_now(now).timestamp()
    expires_at = issued_at + token_ttl(settings).total_seconds()
    payload: dict[str, Any] = {
        "sub": identity,
        "roles": sorted(RoleName(r).value for r in roles),
        "iat": issued_at,
        "exp": expires_at,
    }
    try:
        return jwt.encode(
            payload,
            settings.JWT_SECRET.get_secret_value(),
            algorithm=settings.JWT_ALGORITHM,
        )
    except (jwt.PyJWTError, NotImplementedError, TypeError, ValueError) as e:
        logger.error("Token signing failed", extra={"algorithm": settings.JWT_ALGORITHM})
        raise TokenIssuanceError("Could not issue session token", cause=e) from e


def _claims_to_principal(claims: dict[str, Any]) -> Principal:
    sub = claims.get("sub")
    if not isinstance(sub, str) or not sub:
        raise MalformedTokenError("Invalid token payload")
    raw_roles = claims.get("roles")
    if not isinstance(raw_roles, list):
        raise MalformedTokenError("Invalid token payload")
    try:
        roles = frozenset(RoleName(r) for r in raw_roles)
    except ValueError as e:
        raise MalformedTokenError("Invalid token payload") from e
    return Principal(username=sub, roles=roles)


def validate_token(
    token: str,
    now: datetime | None = None,
    settings: Settings | None = None,
) -> Principal:
    """
    Verify signature and expiry of a session token and return its principal.

    Raises MalformedTokenError, SignatureInvalidError or TokenExpiredError.
    Roles are trusted as issued; the credential store is not consulted.
    """
    settings = settings or get_settings()
    try:
        claims = jwt.decode(
            token,
            settings.JWT_SECRET.get_secret_value(),
            algorithms=[settings.JWT_ALGORITHM],
            # Expiry is checked below against the caller's clock.
            options={
                "verify_exp": False,
                "verify_iat": False,
                "verify_nbf": False,
                "require": list(REQUIRED_CLAIMS),
            },
        )
    except jwt.InvalidSignatureError as e:
        raise SignatureInvalidError() from e
    except jwt.PyJWTError as e:
        raise MalformedTokenError() from e

    expires_at = claims["exp"]
    if isinstance(expires_at, bool) or not isinstance(expires_at, (int, float)):
        raise MalformedTokenError("Invalid token payload")
    if resolve_now(now).timestamp() >= expires_at:
        raise TokenExpiredError()
    return _claims_to_principal(claims)
