"""
Student service - the student registry.

Students are the owners every review record and STUDENT account points at.
``student_code`` is assigned once (given or generated) and never changes.
"""

from __future__ import annotations

import logging
from collections import Counter
from datetime import date
from typing import Any

from pydantic import BaseModel, EmailStr, Field

from jupiter.core.errors import ConflictError, NotFoundError
from jupiter.core.models import Department, Gender, Student, StudentStatus
from jupiter.core.utils import newest_first, utc_now
from jupiter.storage.base import Collections, MetadataStorage

logger = logging.getLogger(__name__)

STUDENT_NOT_FOUND = "Student not found"


# =============================================================================
# Models
# =============================================================================


class StudentCreate(BaseModel):
    student_code: str | None = Field(default=None, min_length=1, max_length=20)
    first_name: str = Field(min_length=1, max_length=50)
    last_name: str = Field(min_length=1, max_length=50)
    email: EmailStr
    department: Department
    status: StudentStatus = StudentStatus.ACTIVE
    phone: str | None = Field(default=None, pattern=r"^[+]?[\d\s-]{10,15}$")
    date_of_birth: date | None = None
    gender: Gender | None = None
    enrollment_date: date | None = None


class StudentUpdate(BaseModel):
    """Editable student fields. student_code cannot be changed."""
    first_name: str | None = Field(default=None, min_length=1, max_length=50)
    last_name: str | None = Field(default=None, min_length=1, max_length=50)
    email: EmailStr | None = None
    department: Department | None = None
    status: StudentStatus | None = None
    phone: str | None = Field(default=None, pattern=r"^[+]?[\d\s-]{10,15}$")
    date_of_birth: date | None = None
    gender: Gender | None = None
    enrollment_date: date | None = None


# =============================================================================
# Service
# =============================================================================


class StudentService:
    """CRUD and lookups over the students collection."""

    def __init__(self, metadata: MetadataStorage):
        self.metadata = metadata

    async def _save(self, student: Student) -> None:
        await self.metadata.save(Collections.STUDENTS, student.id, student.model_dump())

    async def _all(self, filters: dict[str, Any] | None = None) -> list[Student]:
        docs = await self.metadata.query(Collections.STUDENTS, filters)
        return [Student.model_validate(d) for d in newest_first(docs)]

    async def _email_taken(self, email: str, exclude_id: str | None = None) -> bool:
        doc = await self.metadata.find_one(Collections.STUDENTS, {"email": email})
        return doc is not None and doc["id"] != exclude_id

    async def _next_code(self) -> str:
        """Next code in the current year's sequence, e.g. STU2026001."""
        prefix = f"STU{utc_now().year}"
        docs = await self.metadata.query(Collections.STUDENTS)
        used = [
            int(d["student_code"][len(prefix):])
            for d in docs
            if d["student_code"].startswith(prefix) and d["student_code"][len(prefix):].isdigit()
        ]
        return f"{prefix}{max(used, default=0) + 1:03d}"

    # -------------------------------------------------------------------------
    # CRUD
    # -------------------------------------------------------------------------

    async def create(self, data: StudentCreate) -> Student:
        """
        Register a student.

        Raises:
            ConflictError: student code or email already in use
        """
        code = data.student_code.strip().upper() if data.student_code else await self._next_code()
        email = data.email.strip().lower()

        if await self.metadata.find_one(Collections.STUDENTS, {"student_code": code}):
            raise ConflictError("Student code already exists")
        if await self._email_taken(email):
            raise ConflictError("Student email already exists")

        student = Student(
            **data.model_dump(exclude={"student_code", "email"}),
            student_code=code,
            email=email,
        )
        await self._save(student)

        logger.info(f"Created student {student.id} ({code})")
        return student

    async def get(self, student_id: str) -> Student:
        doc = await self.metadata.get(Collections.STUDENTS, student_id)
        if not doc:
            raise NotFoundError(STUDENT_NOT_FOUND)
        return Student.model_validate(doc)

    async def get_by_code(self, code: str) -> Student:
        doc = await self.metadata.find_one(Collections.STUDENTS, {"student_code": code.strip().upper()})
        if not doc:
            raise NotFoundError(STUDENT_NOT_FOUND)
        return Student.model_validate(doc)

    async def update(self, student_id: str, changes: StudentUpdate) -> Student:
        """
        Apply a partial update.

        Raises:
            NotFoundError: no such student
            ConflictError: new email belongs to another student
        """
        student = await self.get(student_id)
        fields = changes.model_dump(exclude_unset=True, exclude_none=True)

        if "email" in fields:
            fields["email"] = fields["email"].strip().lower()
            if await self._email_taken(fields["email"], exclude_id=student.id):
                raise ConflictError("Student email already exists")

        updated = student.model_copy(update={**fields, "updated_at": utc_now()})
        await self._save(updated)
        return updated

    async def update_status(self, student_id: str, status: StudentStatus) -> Student:
        student = await self.get(student_id)
        updated = student.model_copy(update={"status": status, "updated_at": utc_now()})
        await self._save(updated)

        logger.info(f"Student {student_id} status -> {status.value}")
        return updated

    async def delete(self, student_id: str) -> None:
        # Review records and the linked account are left in place
        if not await self.metadata.delete(Collections.STUDENTS, student_id):
            raise NotFoundError(STUDENT_NOT_FOUND)
        logger.info(f"Deleted student {student_id}")

    # -------------------------------------------------------------------------
    # Listings
    # -------------------------------------------------------------------------

    async def list_all(
        self,
        department: Department | None = None,
        status: StudentStatus | None = None,
    ) -> list[Student]:
        """All students, newest first, optionally narrowed by department/status."""
        filters: dict[str, Any] = {}
        if department:
            filters["department"] = department
        if status:
            filters["status"] = status
        return await self._all(filters or None)

    async def search(self, query: str) -> list[Student]:
        """Case-insensitive substring match on name, email or code."""
        needle = query.strip().lower()
        matches = [
            s for s in await self._all()
            if any(
                needle in value.lower()
                for value in (s.first_name, s.last_name, s.email, s.student_code)
            )
        ]
        return sorted(matches, key=lambda s: s.first_name.lower())

    async def stats(self) -> dict[str, Any]:
        students = await self._all()
        by_status = Counter(s.status.value for s in students)
        return {
            "total": len(students),
            "active": by_status[StudentStatus.ACTIVE.value],
            "inactive": by_status[StudentStatus.INACTIVE.value],
            "graduated": by_status[StudentStatus.GRADUATED.value],
            "by_department": dict(Counter(s.department.value for s in students)),
            "by_status": dict(by_status),
        }
