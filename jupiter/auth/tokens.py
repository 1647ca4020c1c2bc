# =============================================================================
# JWT Tokens
# =============================================================================
#
# Access and refresh tokens:
#   - signed with separate secrets
#   - independent expiry windows (short access, long refresh)
#   - both carry sub/email/role, plus student_id for STUDENT accounts
#
# Whether a refresh token is still the account's current one is checked by
# the session service, not here.
#
# =============================================================================

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from enum import Enum

import jwt
from pydantic import BaseModel

from jupiter.auth.identity import Identity, identity_for_user, make_identity
from jupiter.config import Settings, get_settings
from jupiter.core.errors import TokenExpiredError, TokenInvalidError
from jupiter.core.models import UserAccount
from jupiter.core.utils import generate_id, utc_now

logger = logging.getLogger(__name__)


class TokenKind(str, Enum):
    ACCESS = "access"
    REFRESH = "refresh"


class TokenPair(BaseModel):
    """Access and refresh token pair."""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int  # seconds until access token expires


# =============================================================================
# Token Creation
# =============================================================================


def _secret_for(kind: TokenKind, settings: Settings) -> str:
    if kind == TokenKind.ACCESS:
        return settings.jwt_access_secret
    return settings.jwt_refresh_secret


def _lifetime_for(kind: TokenKind, settings: Settings) -> timedelta:
    if kind == TokenKind.ACCESS:
        return timedelta(minutes=settings.jwt_access_token_expire_minutes)
    return timedelta(days=settings.jwt_refresh_token_expire_days)


def create_token(
    identity: Identity,
    kind: TokenKind,
    settings: Settings | None = None,
    now: datetime | None = None,
) -> str:
    """Sign a token of the given kind for an identity."""
    settings = settings or get_settings()
    now = now or utc_now()

    payload = {
        **identity.claims(),
        "iat": now,
        "exp": now + _lifetime_for(kind, settings),
        "type": kind.value,
        # Unique per token so two pairs minted in the same second differ
        "jti": generate_id("tok" if kind == TokenKind.ACCESS else "rtok"),
    }

    return jwt.encode(payload, _secret_for(kind, settings), algorithm=settings.jwt_algorithm)


def issue_tokens(user: UserAccount, settings: Settings | None = None) -> TokenPair:
    """Create both access and refresh tokens for an account."""
    settings = settings or get_settings()
    identity = identity_for_user(user)

    return TokenPair(
        access_token=create_token(identity, TokenKind.ACCESS, settings),
        refresh_token=create_token(identity, TokenKind.REFRESH, settings),
        expires_in=settings.jwt_access_token_expire_minutes * 60,
    )


# =============================================================================
# Token Validation
# =============================================================================


def decode_token(
    token: str,
    kind: TokenKind = TokenKind.ACCESS,
    settings: Settings | None = None,
) -> Identity:
    """
    Decode and validate a JWT token.

    Args:
        token: The JWT string
        kind: which secret to check against and which ``type`` to expect

    Returns:
        The Identity carried by the token

    Raises:
        TokenExpiredError: Token has expired
        TokenInvalidError: Token is invalid
    """
    settings = settings or get_settings()

    try:
        payload = jwt.decode(
            token,
            _secret_for(kind, settings),
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp", "iat"]},
        )
    except jwt.ExpiredSignatureError:
        raise TokenExpiredError(
            "Refresh token has expired" if kind == TokenKind.REFRESH else None
        )
    except jwt.InvalidTokenError as e:
        logger.debug(f"Rejected {kind.value} token: {e}")
        raise TokenInvalidError(
            "Invalid refresh token" if kind == TokenKind.REFRESH else None
        )

    if payload.get("type") != kind.value:
        raise TokenInvalidError(f"Expected {kind.value} token, got {payload.get('type')}")

    try:
        return make_identity(
            subject_id=str(payload["sub"]),
            email=payload["email"],
            role=payload["role"],
            linked_student_id=payload.get("student_id"),
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
    except (KeyError, ValueError, TypeError) as e:
        raise TokenInvalidError(f"Malformed token claims: {e}")
