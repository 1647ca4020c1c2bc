# =============================================================================
# Student API Routes
# =============================================================================
#
# Endpoints:
#   GET    /students                      - List students (ADMIN/HR)
#   GET    /students/stats                - Counts by status and department
#   GET    /students/search?name=         - Search by name, email or code
#   GET    /students/code/{code}          - Lookup by student code
#   GET    /students/department/{dept}    - List by department
#   GET    /students/status/{status}      - List by status
#   POST   /students                      - Create student
#   GET    /students/{id}                 - Get student (self or ADMIN/HR)
#   GET    /students/{id}/skills          - Student's skills
#   GET    /students/{id}/performances    - Student's performance records
#   GET    /students/{id}/documents       - Student's documents
#   PUT    /students/{id}                 - Update student
#   PATCH  /students/{id}/status          - Change status
#   DELETE /students/{id}                 - Delete student
#
# Fixed paths are declared before /{student_id} so they are not captured.
#
# =============================================================================

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel

from jupiter.api.dependencies import (
    get_document_service,
    get_performance_service,
    get_skill_service,
    get_student_service,
)
from jupiter.api.responses import Messages, success
from jupiter.auth.identity import Identity
from jupiter.auth.policies import require_listing, require_roles, require_self_student_or_elevated
from jupiter.auth.roles import ADMIN_OR_HR
from jupiter.core.models import Department, StudentStatus
from jupiter.core.utils import paginate
from jupiter.review.service import ReviewService
from jupiter.students.service import StudentCreate, StudentService, StudentUpdate

router = APIRouter(prefix="/students", tags=["students"])


class StatusUpdate(BaseModel):
    status: StudentStatus


# =============================================================================
# Listings (closed to STUDENT)
# =============================================================================

@router.get("")
async def list_students(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    ctx: Identity = Depends(require_listing()),
    service: StudentService = Depends(get_student_service),
):
    students = await service.list_all()
    return success(Messages.STUDENTS_FOUND, paginate(students, page, limit))


@router.get("/stats")
async def student_stats(
    ctx: Identity = Depends(require_roles(ADMIN_OR_HR)),
    service: StudentService = Depends(get_student_service),
):
    return success(Messages.STATS_FOUND, await service.stats())


@router.get("/search")
async def search_students(
    name: str = Query(min_length=1),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    ctx: Identity = Depends(require_listing()),
    service: StudentService = Depends(get_student_service),
):
    students = await service.search(name)
    return success(Messages.STUDENTS_FOUND, paginate(students, page, limit))


@router.get("/code/{student_code}")
async def get_student_by_code(
    student_code: str,
    ctx: Identity = Depends(require_listing()),
    service: StudentService = Depends(get_student_service),
):
    return success(Messages.STUDENT_FOUND, await service.get_by_code(student_code))


@router.get("/department/{department}")
async def list_by_department(
    department: Department,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    ctx: Identity = Depends(require_listing()),
    service: StudentService = Depends(get_student_service),
):
    students = await service.list_all(department=department)
    return success(Messages.STUDENTS_FOUND, paginate(students, page, limit))


@router.get("/status/{student_status}")
async def list_by_status(
    student_status: StudentStatus,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    ctx: Identity = Depends(require_listing()),
    service: StudentService = Depends(get_student_service),
):
    students = await service.list_all(status=student_status)
    return success(Messages.STUDENTS_FOUND, paginate(students, page, limit))


# =============================================================================
# Single Student
# =============================================================================

@router.post("", status_code=status.HTTP_201_CREATED)
async def create_student(
    data: StudentCreate,
    ctx: Identity = Depends(require_roles(ADMIN_OR_HR)),
    service: StudentService = Depends(get_student_service),
):
    return success(Messages.STUDENT_CREATED, await service.create(data))


@router.get("/{student_id}")
async def get_student(
    student_id: str,
    ctx: Identity = Depends(require_self_student_or_elevated("student_id")),
    service: StudentService = Depends(get_student_service),
):
    return success(Messages.STUDENT_FOUND, await service.get(student_id))


@router.get("/{student_id}/skills")
async def student_skills(
    student_id: str,
    ctx: Identity = Depends(require_self_student_or_elevated("student_id")),
    skills: ReviewService = Depends(get_skill_service),
):
    return success("Skills retrieved successfully", await skills.list_for_student(student_id))


@router.get("/{student_id}/performances")
async def student_performances(
    student_id: str,
    ctx: Identity = Depends(require_self_student_or_elevated("student_id")),
    performances: ReviewService = Depends(get_performance_service),
):
    records = await performances.list_for_student(student_id)
    return success("Performance records retrieved successfully", records)


@router.get("/{student_id}/documents")
async def student_documents(
    student_id: str,
    ctx: Identity = Depends(require_self_student_or_elevated("student_id")),
    documents: ReviewService = Depends(get_document_service),
):
    return success("Documents retrieved successfully", await documents.list_for_student(student_id))


@router.put("/{student_id}")
async def update_student(
    student_id: str,
    data: StudentUpdate,
    ctx: Identity = Depends(require_roles(ADMIN_OR_HR)),
    service: StudentService = Depends(get_student_service),
):
    return success(Messages.STUDENT_UPDATED, await service.update(student_id, data))


@router.patch("/{student_id}/status")
async def update_student_status(
    student_id: str,
    data: StatusUpdate,
    ctx: Identity = Depends(require_roles(ADMIN_OR_HR)),
    service: StudentService = Depends(get_student_service),
):
    student = await service.update_status(student_id, data.status)
    return success(Messages.STUDENT_STATUS_UPDATED, student)


@router.delete("/{student_id}")
async def delete_student(
    student_id: str,
    ctx: Identity = Depends(require_roles(ADMIN_OR_HR)),
    service: StudentService = Depends(get_student_service),
):
    await service.delete(student_id)
    return success(Messages.STUDENT_DELETED)
