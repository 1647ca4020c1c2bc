"""
Tests for the student registry.
"""

import pytest

from jupiter.core.errors import ConflictError, NotFoundError
from jupiter.core.models import Department, StudentStatus
from jupiter.core.utils import paginate, utc_now
from jupiter.students.service import StudentCreate, StudentService, StudentUpdate


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def service(metadata):
    return StudentService(metadata)


def new_student(**overrides) -> StudentCreate:
    data = {
        "first_name": "Grace",
        "last_name": "Hopper",
        "email": "grace@example.com",
        "department": "COMPUTER_SCIENCE",
    }
    data.update(overrides)
    return StudentCreate(**data)


# =============================================================================
# CRUD
# =============================================================================


class TestStudentCrud:
    @pytest.mark.asyncio
    async def test_code_is_upper_cased(self, service):
        student = await service.create(new_student(student_code="stu2026042"))

        assert student.student_code == "STU2026042"
        assert (await service.get_by_code("stu2026042")).id == student.id

    @pytest.mark.asyncio
    async def test_code_generated_in_sequence(self, service):
        year = utc_now().year
        first = await service.create(new_student())
        second = await service.create(new_student(email="alan@example.com"))

        assert first.student_code == f"STU{year}001"
        assert second.student_code == f"STU{year}002"

    @pytest.mark.asyncio
    async def test_duplicate_code(self, service):
        await service.create(new_student(student_code="STU1"))
        with pytest.raises(ConflictError, match="code"):
            await service.create(new_student(student_code="stu1", email="other@example.com"))

    @pytest.mark.asyncio
    async def test_duplicate_email(self, service):
        await service.create(new_student())
        with pytest.raises(ConflictError, match="email"):
            await service.create(new_student(email="GRACE@example.com"))

    @pytest.mark.asyncio
    async def test_get_missing(self, service):
        with pytest.raises(NotFoundError, match="Student not found"):
            await service.get("stu_missing")

    @pytest.mark.asyncio
    async def test_update_keeps_code(self, service):
        student = await service.create(new_student(student_code="STU9"))

        updated = await service.update(student.id, StudentUpdate(last_name="Murray"))

        assert updated.last_name == "Murray"
        assert updated.student_code == "STU9"
        assert (await service.get(student.id)).last_name == "Murray"

    @pytest.mark.asyncio
    async def test_update_email_must_stay_unique(self, service):
        await service.create(new_student())
        other = await service.create(new_student(email="alan@example.com"))

        with pytest.raises(ConflictError):
            await service.update(other.id, StudentUpdate(email="grace@example.com"))

        # Re-saving your own email is fine
        await service.update(other.id, StudentUpdate(email="alan@example.com"))

    @pytest.mark.asyncio
    async def test_update_status(self, service):
        student = await service.create(new_student())
        updated = await service.update_status(student.id, StudentStatus.GRADUATED)
        assert updated.status == StudentStatus.GRADUATED

    @pytest.mark.asyncio
    async def test_delete(self, service):
        student = await service.create(new_student())
        await service.delete(student.id)

        with pytest.raises(NotFoundError):
            await service.get(student.id)
        with pytest.raises(NotFoundError):
            await service.delete(student.id)


# =============================================================================
# Listings
# =============================================================================


class TestStudentListings:
    @pytest.mark.asyncio
    async def test_filters(self, service):
        await service.create(new_student())
        civil = await service.create(new_student(email="c@example.com", department="CIVIL"))
        await service.update_status(civil.id, StudentStatus.SUSPENDED)

        assert [s.id for s in await service.list_all(department=Department.CIVIL)] == [civil.id]
        assert [s.id for s in await service.list_all(status=StudentStatus.SUSPENDED)] == [civil.id]
        assert len(await service.list_all()) == 2

    @pytest.mark.asyncio
    async def test_search(self, service):
        await service.create(new_student())
        await service.create(new_student(first_name="Alan", last_name="Turing", email="alan@example.com"))

        assert [s.first_name for s in await service.search("HOP")] == ["Grace"]
        assert [s.first_name for s in await service.search("example")] == ["Alan", "Grace"]
        assert await service.search("nobody") == []

    @pytest.mark.asyncio
    async def test_stats(self, service):
        await service.create(new_student())
        other = await service.create(new_student(email="c@example.com", department="CIVIL"))
        await service.update_status(other.id, StudentStatus.GRADUATED)

        stats = await service.stats()
        assert stats["total"] == 2
        assert stats["active"] == 1
        assert stats["graduated"] == 1
        assert stats["by_department"] == {"COMPUTER_SCIENCE": 1, "CIVIL": 1}

    def test_paginate(self):
        page = paginate(list(range(25)), page=3, limit=10)

        assert page["items"] == [20, 21, 22, 23, 24]
        assert page["pagination"] == {
            "page": 3,
            "limit": 10,
            "total_items": 25,
            "total_pages": 3,
        }
