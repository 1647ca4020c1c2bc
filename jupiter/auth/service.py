"""
Auth session service - registration, login, refresh, logout.

Per-account lifecycle:

    ANONYMOUS → REGISTERED → SESSION_ACTIVE (login)
              → SESSION_ACTIVE' (refresh, token rotated) → ANONYMOUS (logout)

Each account has at most one live refresh token, stored on the account.
Logging in again, refreshing, logging out, or changing the password
replaces or clears it, so any older refresh token stops working at once.

Known race: two concurrent refreshes with the same token can both pass the
"matches stored token" check; the later write wins and the other caller's
new refresh token is dead on arrival.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, EmailStr, Field, model_validator

from jupiter.auth.identity import Identity
from jupiter.auth.passwords import hash_password, verify_password
from jupiter.auth.roles import ADMIN_CREATED_ROLES
from jupiter.auth.tokens import TokenKind, TokenPair, decode_token, issue_tokens
from jupiter.config import Settings, get_settings
from jupiter.core.errors import (
    AccountDeactivatedError,
    BadRequestError,
    ConflictError,
    ForbiddenError,
    IncorrectPasswordError,
    InvalidCredentialsError,
    NotFoundError,
    OwnerNotFoundError,
    TokenInvalidError,
    UnauthenticatedError,
)
from jupiter.core.models import Role, Student, UserAccount
from jupiter.core.utils import utc_now
from jupiter.storage.base import Collections, MetadataStorage

logger = logging.getLogger(__name__)


# =============================================================================
# Models
# =============================================================================


class UserCreate(BaseModel):
    """User registration data."""
    email: EmailStr
    password: str = Field(min_length=8, max_length=128)
    first_name: str = Field(min_length=1, max_length=50)
    last_name: str = Field(min_length=1, max_length=50)
    role: Role
    student_id: str | None = None

    @model_validator(mode="after")
    def _student_id_only_for_students(self) -> UserCreate:
        if self.student_id and self.role != Role.STUDENT:
            raise ValueError("studentId must not be provided for non-STUDENT roles")
        return self


class ProfileUpdate(BaseModel):
    """The only account fields a user may edit on themselves."""
    first_name: str | None = Field(default=None, min_length=1, max_length=50)
    last_name: str | None = Field(default=None, min_length=1, max_length=50)


# =============================================================================
# Service
# =============================================================================


class AuthSessionService:
    """Mints, rotates and revokes tokens against the account store."""

    def __init__(self, metadata: MetadataStorage, settings: Settings | None = None):
        self.metadata = metadata
        self.settings = settings or get_settings()

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    async def get_user(self, user_id: str) -> UserAccount | None:
        doc = await self.metadata.get(Collections.USERS, user_id)
        return UserAccount.model_validate(doc) if doc else None

    async def get_user_by_email(self, email: str) -> UserAccount | None:
        doc = await self.metadata.find_one(Collections.USERS, {"email": email.strip().lower()})
        return UserAccount.model_validate(doc) if doc else None

    async def _save(self, user: UserAccount) -> None:
        user.updated_at = utc_now()
        await self.metadata.save(Collections.USERS, user.id, user.model_dump())

    async def _require_user(self, user_id: str) -> UserAccount:
        user = await self.get_user(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    async def register(
        self,
        data: UserCreate,
        requester: Identity | None = None,
    ) -> tuple[UserAccount, TokenPair]:
        """
        Create an account and open its first session.

        HR and STUDENT accounts can only be created by an ADMIN. A STUDENT
        account must point at an existing student that has no account yet;
        the student gets a back-reference to the new account.

        Raises:
            UnauthenticatedError: HR/STUDENT requested with no caller
            ForbiddenError: HR/STUDENT requested by a non-ADMIN caller
            ConflictError: email taken, or student already linked
            BadRequestError: STUDENT requested without a student_id
            OwnerNotFoundError: student_id does not resolve
        """
        if data.role in ADMIN_CREATED_ROLES:
            if requester is None:
                raise UnauthenticatedError("Authentication required to create HR or STUDENT users")
            if requester.role != Role.ADMIN:
                raise ForbiddenError("Only ADMIN can create HR or STUDENT users")

        email = data.email.strip().lower()
        if await self.get_user_by_email(email):
            raise ConflictError("Email already registered")

        student: Student | None = None
        if data.role == Role.STUDENT:
            if not data.student_id:
                raise BadRequestError("studentId is required for STUDENT role")

            doc = await self.metadata.get(Collections.STUDENTS, data.student_id)
            if not doc:
                raise OwnerNotFoundError(
                    "Student not found. studentId must reference an existing student."
                )
            student = Student.model_validate(doc)

            linked = await self.metadata.find_one(Collections.USERS, {"student_id": student.id})
            if linked or student.user_id:
                raise ConflictError("This student is already linked to another user account")

        user = UserAccount(
            email=email,
            password_hash=hash_password(data.password, self.settings.password_hash_iterations),
            first_name=data.first_name,
            last_name=data.last_name,
            role=data.role,
            student_id=student.id if student else None,
        )

        tokens = issue_tokens(user, self.settings)
        user.refresh_token = tokens.refresh_token
        await self._save(user)

        if student:
            await self.metadata.update(
                Collections.STUDENTS,
                student.id,
                {"user_id": user.id, "updated_at": utc_now()},
            )

        logger.info(f"Registered {user.role.value} account {user.id}")
        return user, tokens

    # -------------------------------------------------------------------------
    # Sessions
    # -------------------------------------------------------------------------

    async def login(self, email: str, password: str) -> tuple[UserAccount, TokenPair]:
        """
        Authenticate by email and password and rotate the refresh token.

        A failed attempt leaves the account untouched.

        Raises:
            InvalidCredentialsError: unknown email or wrong password
            AccountDeactivatedError: credentials fine, account disabled
        """
        user = await self.get_user_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            logger.info("Failed login attempt")
            raise InvalidCredentialsError()

        if not user.is_active:
            raise AccountDeactivatedError()

        tokens = issue_tokens(user, self.settings)
        user.last_login_at = utc_now()
        user.refresh_token = tokens.refresh_token
        await self._save(user)

        return user, tokens

    async def refresh(self, refresh_token: str) -> TokenPair:
        """
        Exchange the current refresh token for a new pair.

        The presented token must be the one stored on the account; after
        this call it no longer is.

        Raises:
            TokenExpiredError: refresh token past its expiry
            TokenInvalidError: bad signature, or superseded/revoked token
            AccountDeactivatedError: account disabled since the token was issued
        """
        identity = decode_token(refresh_token, TokenKind.REFRESH, self.settings)

        user = await self.get_user(identity.subject_id)
        if not user or user.refresh_token != refresh_token:
            logger.warning(f"Refresh token reuse or revoked token for {identity.subject_id}")
            raise TokenInvalidError("Invalid refresh token")

        if not user.is_active:
            raise AccountDeactivatedError()

        tokens = issue_tokens(user, self.settings)
        user.refresh_token = tokens.refresh_token
        await self._save(user)

        return tokens

    async def logout(self, user_id: str) -> None:
        """Forget the account's refresh token."""
        await self.metadata.update(
            Collections.USERS,
            user_id,
            {"refresh_token": None, "updated_at": utc_now()},
        )

    # -------------------------------------------------------------------------
    # Account management
    # -------------------------------------------------------------------------

    async def change_password(self, user_id: str, current: str, new: str) -> None:
        """
        Replace the password after checking the current one.

        Also ends the account's session (clears the refresh token).

        Raises:
            NotFoundError: no such account
            IncorrectPasswordError: current password does not match
        """
        user = await self._require_user(user_id)

        if not verify_password(current, user.password_hash):
            raise IncorrectPasswordError()

        user.password_hash = hash_password(new, self.settings.password_hash_iterations)
        user.refresh_token = None
        await self._save(user)

        logger.info(f"Password changed for {user_id}")

    async def get_profile(self, user_id: str) -> UserAccount:
        return await self._require_user(user_id)

    async def update_profile(self, user_id: str, changes: ProfileUpdate) -> UserAccount:
        user = await self._require_user(user_id)

        fields: dict[str, Any] = changes.model_dump(exclude_none=True)
        for key, value in fields.items():
            setattr(user, key, value)

        await self._save(user)
        return user

    async def set_active(self, user_id: str, active: bool) -> UserAccount:
        """
        Enable or disable an account.

        Disabling also drops the refresh token so the next refresh fails.
        """
        user = await self._require_user(user_id)

        user.is_active = active
        if not active:
            user.refresh_token = None
        await self._save(user)

        logger.info(f"Account {user_id} {'activated' if active else 'deactivated'}")
        return user
