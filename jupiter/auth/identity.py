"""
Identity - the verified "who" behind a request.

Decoded from an access token and passed explicitly into every service
call. There is one variant per role; only a StudentIdentity carries a
linked student, so "a STUDENT without a student" or "an HR user with a
student" cannot be represented.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Union

from jupiter.core.models import Role, UserAccount


@dataclass(frozen=True)
class _BaseIdentity:
    subject_id: str
    email: str
    issued_at: datetime | None = None
    expires_at: datetime | None = None

    role: Role = field(default=Role.ADMIN, init=False)  # fixed per variant

    @property
    def linked_student_id(self) -> str | None:
        return None

    def claims(self) -> dict[str, Any]:
        """Token claims for this identity (without timing fields)."""
        claims = {"sub": self.subject_id, "email": self.email, "role": self.role.value}
        if self.linked_student_id:
            claims["student_id"] = self.linked_student_id
        return claims


@dataclass(frozen=True)
class AdminIdentity(_BaseIdentity):
    role: Role = field(default=Role.ADMIN, init=False)


@dataclass(frozen=True)
class HrIdentity(_BaseIdentity):
    role: Role = field(default=Role.HR, init=False)


@dataclass(frozen=True)
class StudentIdentity(_BaseIdentity):
    role: Role = field(default=Role.STUDENT, init=False)
    student_id: str = ""

    @property
    def linked_student_id(self) -> str | None:
        return self.student_id or None


Identity = Union[AdminIdentity, HrIdentity, StudentIdentity]


def make_identity(
    subject_id: str,
    email: str,
    role: Role | str,
    linked_student_id: str | None = None,
    issued_at: datetime | None = None,
    expires_at: datetime | None = None,
) -> Identity:
    """
    Build the identity variant for a role.

    Raises:
        ValueError: unknown role, a STUDENT without a linked student, or a
            linked student on any other role
    """
    role = Role(role)

    if role == Role.STUDENT:
        if not linked_student_id:
            raise ValueError("STUDENT identity requires a linked student")
        return StudentIdentity(
            subject_id=subject_id,
            email=email,
            issued_at=issued_at,
            expires_at=expires_at,
            student_id=linked_student_id,
        )

    if linked_student_id:
        raise ValueError(f"{role.value} identity cannot carry a linked student")

    cls = AdminIdentity if role == Role.ADMIN else HrIdentity
    return cls(
        subject_id=subject_id,
        email=email,
        issued_at=issued_at,
        expires_at=expires_at,
    )


def identity_for_user(user: UserAccount) -> Identity:
    """The identity a freshly issued token for this account would carry."""
    return make_identity(
        subject_id=user.id,
        email=user.email,
        role=user.role,
        linked_student_id=user.student_id if user.role == Role.STUDENT else None,
    )
