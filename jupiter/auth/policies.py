"""
Policies - the role gate and the ownership scoper.

The checks themselves are plain functions over an Identity, so services and
tests can call them directly. The FastAPI side wraps them:

    ctx: Identity = Depends(require_roles(ADMIN_OR_HR))
    ctx: Identity = Depends(require_self_student_or_elevated("id"))
    ctx: Identity = Depends(require_listing())

A denied check raises an AppError subclass; the app's exception handler
turns it into the standard error envelope.
"""

from __future__ import annotations

from typing import Callable, Iterable

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from jupiter.auth.identity import Identity
from jupiter.auth.roles import ANY_AUTHENTICATED, describe, is_elevated
from jupiter.auth.tokens import TokenKind, decode_token
from jupiter.config import Settings, get_settings
from jupiter.core.errors import ForbiddenError, TokenError, UnauthenticatedError
from jupiter.core.models import Role


# =============================================================================
# Role-Capability Gate
# =============================================================================


def authorize(identity: Identity | None, allowed_roles: Iterable[Role]) -> Identity:
    """
    Allow or deny an identity against a set of roles.

    Returns the identity when allowed so callers can chain on it.

    Raises:
        UnauthenticatedError: no identity
        ForbiddenError: identity's role is not in allowed_roles
    """
    if identity is None:
        raise UnauthenticatedError()

    allowed = frozenset(allowed_roles)
    if identity.role not in allowed:
        raise ForbiddenError(f"Access denied. Required roles: {describe(allowed)}")

    return identity


# =============================================================================
# Ownership Scoper
# =============================================================================


def owner_or_elevated(identity: Identity, owner_id: str) -> None:
    """The resource's owning account, or ADMIN/HR."""
    if identity.subject_id == owner_id or is_elevated(identity.role):
        return
    raise ForbiddenError()


def self_student_or_elevated(identity: Identity, student_id: str) -> None:
    """ADMIN/HR see any student; a STUDENT sees only their linked one."""
    if is_elevated(identity.role):
        return
    if identity.role == Role.STUDENT and identity.linked_student_id == str(student_id):
        return
    raise ForbiddenError("Students can only access their own data")


def block_listing_for_student(identity: Identity) -> None:
    """Enumeration endpoints are closed to STUDENT identities."""
    if identity.role == Role.STUDENT:
        raise ForbiddenError(
            "Students cannot access this endpoint. Please contact HR or Admin."
        )


# =============================================================================
# Token Extraction (header or cookie)
# =============================================================================


# Optional JWT bearer (doesn't fail if no token)
optional_bearer = HTTPBearer(auto_error=False)


async def get_access_token(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(optional_bearer),
    settings: Settings = Depends(get_settings),
) -> str | None:
    """Bearer token from the Authorization header, falling back to the cookie."""
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(settings.access_token_cookie) or None


async def get_identity(
    token: str | None = Depends(get_access_token),
    settings: Settings = Depends(get_settings),
) -> Identity:
    """
    Resolve the caller's identity, failing the request if there is none.

    Raises:
        UnauthenticatedError: no token presented
        TokenExpiredError / TokenInvalidError: token did not verify
    """
    if not token:
        raise UnauthenticatedError()
    return decode_token(token, TokenKind.ACCESS, settings)


async def optional_identity(
    token: str | None = Depends(get_access_token),
    settings: Settings = Depends(get_settings),
) -> Identity | None:
    """Identity if a valid token was sent, otherwise None (never fails)."""
    if not token:
        return None
    try:
        return decode_token(token, TokenKind.ACCESS, settings)
    except TokenError:
        return None


# =============================================================================
# FastAPI Dependencies
# =============================================================================


def require_roles(allowed_roles: Iterable[Role] = ANY_AUTHENTICATED) -> Callable:
    """
    Require one of the given roles to access a route.

    Usage:
        @router.put("/{id}/verify")
        async def verify(id: str, ctx: Identity = Depends(require_roles(ADMIN_OR_HR))):
            ...
    """
    allowed = frozenset(allowed_roles)

    async def dependency(identity: Identity = Depends(get_identity)) -> Identity:
        return authorize(identity, allowed)

    return dependency


def require_auth() -> Callable:
    """Just require authentication, no specific role."""
    return require_roles(ANY_AUTHENTICATED)


def require_self_student_or_elevated(param: str = "id") -> Callable:
    """Scope a route to the student named by a path parameter."""

    async def dependency(
        request: Request,
        identity: Identity = Depends(get_identity),
    ) -> Identity:
        self_student_or_elevated(identity, request.path_params.get(param, ""))
        return identity

    return dependency


def require_listing() -> Callable:
    """Enumeration endpoints: ADMIN/HR only, with a student-specific message."""

    async def dependency(identity: Identity = Depends(get_identity)) -> Identity:
        block_listing_for_student(identity)
        return identity

    return dependency
