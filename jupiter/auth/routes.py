# =============================================================================
# Auth API Routes
# =============================================================================
#
# Endpoints:
#   POST  /auth/register          - Create account (HR/STUDENT need an ADMIN caller)
#   POST  /auth/login             - Get tokens
#   POST  /auth/refresh           - Rotate tokens
#   POST  /auth/logout            - Invalidate refresh token
#   POST  /auth/change-password   - Change own password
#   GET   /auth/profile           - Get own profile
#   PUT   /auth/profile           - Update own name
#   GET   /auth/me                - Get current user
#   PATCH /auth/users/{id}/active - Activate/deactivate an account (ADMIN)
#
# =============================================================================

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, EmailStr, Field

from jupiter.api.dependencies import get_auth_service
from jupiter.api.responses import Messages, success
from jupiter.auth.identity import Identity
from jupiter.auth.policies import optional_identity, require_auth, require_roles
from jupiter.auth.roles import ADMIN_ONLY
from jupiter.auth.service import AuthSessionService, ProfileUpdate, UserCreate

router = APIRouter(prefix="/auth", tags=["auth"])


# =============================================================================
# Request Models
# =============================================================================

class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class RefreshRequest(BaseModel):
    refresh_token: str = Field(min_length=1)


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=8, max_length=128)


class SetActiveRequest(BaseModel):
    is_active: bool


# =============================================================================
# Public Endpoints
# =============================================================================

@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    data: UserCreate,
    caller: Identity | None = Depends(optional_identity),
    service: AuthSessionService = Depends(get_auth_service),
):
    """
    Create a new account.

    Anyone may create an ADMIN account; HR and STUDENT accounts need an
    ADMIN bearer token. Returns the user and a fresh token pair.
    """
    user, tokens = await service.register(data, caller)
    return success(Messages.REGISTERED, {"user": user.public(), **tokens.model_dump()})


@router.post("/login")
async def login(
    data: LoginRequest,
    service: AuthSessionService = Depends(get_auth_service),
):
    user, tokens = await service.login(data.email, data.password)
    return success(Messages.LOGIN_SUCCESS, {"user": user.public(), **tokens.model_dump()})


@router.post("/refresh")
async def refresh(
    data: RefreshRequest,
    service: AuthSessionService = Depends(get_auth_service),
):
    """Use the current refresh token to get a new pair."""
    tokens = await service.refresh(data.refresh_token)
    return success(Messages.TOKEN_REFRESHED, tokens.model_dump())


# =============================================================================
# Protected Endpoints
# =============================================================================

@router.post("/logout")
async def logout(
    ctx: Identity = Depends(require_auth()),
    service: AuthSessionService = Depends(get_auth_service),
):
    await service.logout(ctx.subject_id)
    return success(Messages.LOGOUT_SUCCESS)


@router.post("/change-password")
async def change_password(
    data: ChangePasswordRequest,
    ctx: Identity = Depends(require_auth()),
    service: AuthSessionService = Depends(get_auth_service),
):
    await service.change_password(ctx.subject_id, data.current_password, data.new_password)
    return success(Messages.PASSWORD_CHANGED)


@router.get("/profile")
async def get_profile(
    ctx: Identity = Depends(require_auth()),
    service: AuthSessionService = Depends(get_auth_service),
):
    user = await service.get_profile(ctx.subject_id)
    return success(Messages.PROFILE_FOUND, user.public())


@router.put("/profile")
async def update_profile(
    data: ProfileUpdate,
    ctx: Identity = Depends(require_auth()),
    service: AuthSessionService = Depends(get_auth_service),
):
    user = await service.update_profile(ctx.subject_id, data)
    return success(Messages.PROFILE_UPDATED, user.public())


@router.get("/me")
async def me(
    ctx: Identity = Depends(require_auth()),
    service: AuthSessionService = Depends(get_auth_service),
):
    user = await service.get_profile(ctx.subject_id)
    return success(Messages.USER_FOUND, user.public())


@router.patch("/users/{user_id}/active")
async def set_user_active(
    user_id: str,
    data: SetActiveRequest,
    ctx: Identity = Depends(require_roles(ADMIN_ONLY)),
    service: AuthSessionService = Depends(get_auth_service),
):
    """Enable or disable an account. Disabling ends its session."""
    user = await service.set_active(user_id, data.is_active)
    return success(Messages.USER_STATUS_UPDATED, user.public())
