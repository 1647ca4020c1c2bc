"""
Core module - data models, errors and shared helpers.

This module contains:
- models: Accounts, students and the reviewable record kinds
- errors: The AppError hierarchy (code + HTTP status per failure)
- utils: Shared utility functions
"""

from jupiter.core.models import (
    Role,
    UserAccount,
    Student,
    StudentStatus,
    Department,
    Gender,
    ReviewStatus,
    ReviewableRecord,
    Skill,
    Performance,
    Document,
)

from jupiter.core.errors import (
    AppError,
    BadRequestError,
    UnauthenticatedError,
    TokenError,
    TokenInvalidError,
    TokenExpiredError,
    ForbiddenError,
    NotFoundError,
    OwnerNotFoundError,
    ConflictError,
    AlreadyVerifiedError,
)

from jupiter.core.utils import (
    generate_id,
    utc_now,
)

__all__ = [
    # Models
    "Role",
    "UserAccount",
    "Student",
    "StudentStatus",
    "Department",
    "Gender",
    "ReviewStatus",
    "ReviewableRecord",
    "Skill",
    "Performance",
    "Document",
    # Errors
    "AppError",
    "BadRequestError",
    "UnauthenticatedError",
    "TokenError",
    "TokenInvalidError",
    "TokenExpiredError",
    "ForbiddenError",
    "NotFoundError",
    "OwnerNotFoundError",
    "ConflictError",
    "AlreadyVerifiedError",
    # Utils
    "generate_id",
    "utc_now",
]
