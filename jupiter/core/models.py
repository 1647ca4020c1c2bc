"""
Core data models for the jupiter API.

User accounts, students, and the three reviewable record kinds (skills,
performance evaluations, documents). Records are stored as plain documents;
these models are the typed view over them.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator

from jupiter.core.utils import generate_id, utc_now


# =============================================================================
# Enums
# =============================================================================


class Role(str, Enum):
    """Platform role embedded in every access token."""

    ADMIN = "ADMIN"
    HR = "HR"
    STUDENT = "STUDENT"


class StudentStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    GRADUATED = "GRADUATED"
    SUSPENDED = "SUSPENDED"
    ON_LEAVE = "ON_LEAVE"


class Gender(str, Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"
    OTHER = "OTHER"


class Department(str, Enum):
    COMPUTER_SCIENCE = "COMPUTER_SCIENCE"
    INFORMATION_TECHNOLOGY = "INFORMATION_TECHNOLOGY"
    ELECTRONICS = "ELECTRONICS"
    MECHANICAL = "MECHANICAL"
    CIVIL = "CIVIL"
    ELECTRICAL = "ELECTRICAL"
    CHEMICAL = "CHEMICAL"
    BIOTECHNOLOGY = "BIOTECHNOLOGY"


class ReviewStatus(str, Enum):
    """
    Review state of a skill, performance record or document.

    DRAFT and PENDING are both "not yet reviewed". Performance records end
    up APPROVED, skills and documents end up VERIFIED.
    """

    DRAFT = "DRAFT"
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    VERIFIED = "VERIFIED"
    REJECTED = "REJECTED"


class SkillCategory(str, Enum):
    TECHNICAL = "TECHNICAL"
    PROGRAMMING = "PROGRAMMING"
    DATABASE = "DATABASE"
    FRAMEWORK = "FRAMEWORK"
    SOFT_SKILL = "SOFT_SKILL"
    LANGUAGE = "LANGUAGE"
    MANAGEMENT = "MANAGEMENT"
    DESIGN = "DESIGN"
    OTHER = "OTHER"


class ProficiencyLevel(str, Enum):
    BEGINNER = "BEGINNER"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"
    EXPERT = "EXPERT"


class EvaluationType(str, Enum):
    ACADEMIC = "ACADEMIC"
    INTERNSHIP = "INTERNSHIP"
    PROJECT = "PROJECT"
    QUARTERLY = "QUARTERLY"
    ANNUAL = "ANNUAL"
    PROBATION = "PROBATION"
    SKILL_ASSESSMENT = "SKILL_ASSESSMENT"


class DocumentType(str, Enum):
    ID_PROOF = "ID_PROOF"
    ADDRESS_PROOF = "ADDRESS_PROOF"
    ACADEMIC_CERTIFICATE = "ACADEMIC_CERTIFICATE"
    PROFESSIONAL_CERTIFICATE = "PROFESSIONAL_CERTIFICATE"
    TRANSCRIPT = "TRANSCRIPT"
    RESUME = "RESUME"
    COVER_LETTER = "COVER_LETTER"
    OFFER_LETTER = "OFFER_LETTER"
    EXPERIENCE_LETTER = "EXPERIENCE_LETTER"
    RECOMMENDATION_LETTER = "RECOMMENDATION_LETTER"
    PASSPORT = "PASSPORT"
    VISA = "VISA"
    MEDICAL_RECORD = "MEDICAL_RECORD"
    OTHER = "OTHER"


# =============================================================================
# User Account
# =============================================================================


class UserAccount(BaseModel):
    """
    A login account.

    STUDENT accounts are bound to exactly one Student through ``student_id``;
    a student is never linked to more than one account.
    """

    id: str = Field(default_factory=lambda: generate_id("usr"))
    email: str
    password_hash: str
    first_name: str
    last_name: str
    role: Role

    student_id: str | None = None

    is_active: bool = True
    last_login_at: datetime | None = None

    # The one refresh token currently honoured for this account
    refresh_token: str | None = None

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def public(self) -> dict[str, Any]:
        """User data safe to return to clients."""
        data = {
            "id": self.id,
            "email": self.email,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "role": self.role.value,
            "is_active": self.is_active,
            "last_login_at": self.last_login_at,
        }
        if self.role == Role.STUDENT and self.student_id:
            data["student_id"] = self.student_id
        return data


# =============================================================================
# Student
# =============================================================================


class Student(BaseModel):
    """A student record. ``student_code`` never changes once created."""

    id: str = Field(default_factory=lambda: generate_id("stu"))
    student_code: str
    first_name: str
    last_name: str
    email: str
    department: Department
    status: StudentStatus = StudentStatus.ACTIVE

    phone: str | None = None
    date_of_birth: date | None = None
    gender: Gender | None = None
    enrollment_date: date | None = None

    # Back-reference to the STUDENT account linked to this record
    user_id: str | None = None

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


# =============================================================================
# Reviewable Records
# =============================================================================


class ReviewableRecord(BaseModel):
    """
    Fields shared by everything HR reviews.

    The approval branch (``remarks``) and the rejection branch
    (``rejection_reason``) are never both set; the reviewer stamp belongs
    to whichever decision was made last.
    """

    id: str
    student_id: str
    status: ReviewStatus = ReviewStatus.PENDING

    reviewer_id: str | None = None
    reviewer_name: str | None = None
    reviewed_at: datetime | None = None
    remarks: str | None = None
    rejection_reason: str | None = None

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class Skill(ReviewableRecord):
    id: str = Field(default_factory=lambda: generate_id("skl"))
    skill_name: str = Field(min_length=1, max_length=100)
    category: SkillCategory
    proficiency_level: ProficiencyLevel
    years_of_experience: float = Field(default=0, ge=0, le=50)
    certified: bool = False
    certification_name: str | None = Field(default=None, max_length=200)
    description: str | None = Field(default=None, max_length=1000)


class Performance(ReviewableRecord):
    id: str = Field(default_factory=lambda: generate_id("prf"))
    evaluation_type: EvaluationType
    evaluation_period: str | None = None
    score: float | None = Field(default=None, ge=0, le=100)
    grade: str | None = None
    comments: str | None = Field(default=None, max_length=2000)
    evaluator_id: str | None = None


class Document(ReviewableRecord):
    id: str = Field(default_factory=lambda: generate_id("doc"))
    document_type: DocumentType
    document_name: str = Field(min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=1000)

    # File metadata only; the bytes live with the upload collaborator
    file_name: str | None = None
    mime_type: str | None = None
    size: int | None = Field(default=None, ge=0)
    url: str | None = None

    expiry_date: datetime | None = None

    @field_validator("expiry_date")
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        # Naive expiry dates are taken as UTC so they compare with utc_now()
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
