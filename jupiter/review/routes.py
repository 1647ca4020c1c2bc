# =============================================================================
# HR Review API Routes
# =============================================================================
#
# One router per record kind, all ADMIN/HR only:
#
#   POST   /hr/{kind}                    - Create (starts unreviewed)
#   GET    /hr/skill/unverified          - Awaiting review (/pending for the others)
#   GET    /hr/{kind}/stats              - Counts per status
#   GET    /hr/{kind}/student/{id}       - A student's records
#   GET    /hr/document/expiring?days=   - Documents expiring soon
#   GET    /hr/document/expired          - Documents past expiry
#   GET    /hr/{kind}/{id}               - Get one
#   PUT    /hr/{kind}/{id}               - Edit content (re-queues review)
#   PUT    /hr/{kind}/{id}/verify        - Approve (/approve for performance)
#   PUT    /hr/{kind}/{id}/reject        - Reject
#   DELETE /hr/{kind}/{id}               - Delete
#
# Body models are bound per kind at build time, so this module does not use
# postponed annotations.
#
# =============================================================================

from datetime import datetime
from typing import Callable

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from jupiter.api.dependencies import (
    get_document_service,
    get_performance_service,
    get_skill_service,
)
from jupiter.api.responses import success
from jupiter.auth.identity import Identity
from jupiter.auth.policies import require_roles
from jupiter.auth.roles import ADMIN_OR_HR
from jupiter.core.models import (
    DocumentType,
    EvaluationType,
    ProficiencyLevel,
    ReviewStatus,
    SkillCategory,
)
from jupiter.review.machine import DOCUMENT, PERFORMANCE, SKILL, ReviewKind
from jupiter.review.service import ReviewService


# =============================================================================
# Request Models
# =============================================================================

class SkillCreate(BaseModel):
    student_id: str = Field(min_length=1)
    skill_name: str = Field(min_length=1, max_length=100)
    category: SkillCategory
    proficiency_level: ProficiencyLevel
    years_of_experience: float = Field(default=0, ge=0, le=50)
    certified: bool = False
    certification_name: str | None = Field(default=None, max_length=200)
    description: str | None = Field(default=None, max_length=1000)


class SkillUpdate(BaseModel):
    skill_name: str | None = Field(default=None, min_length=1, max_length=100)
    category: SkillCategory | None = None
    proficiency_level: ProficiencyLevel | None = None
    years_of_experience: float | None = Field(default=None, ge=0, le=50)
    certified: bool | None = None
    certification_name: str | None = Field(default=None, max_length=200)
    description: str | None = Field(default=None, max_length=1000)


class PerformanceCreate(BaseModel):
    student_id: str = Field(min_length=1)
    evaluation_type: EvaluationType
    evaluation_period: str | None = None
    score: float | None = Field(default=None, ge=0, le=100)
    grade: str | None = None
    comments: str | None = Field(default=None, max_length=2000)
    evaluator_id: str | None = None
    # DRAFT or PENDING
    status: ReviewStatus | None = None


class PerformanceUpdate(BaseModel):
    evaluation_type: EvaluationType | None = None
    evaluation_period: str | None = None
    score: float | None = Field(default=None, ge=0, le=100)
    grade: str | None = None
    comments: str | None = Field(default=None, max_length=2000)


class DocumentCreate(BaseModel):
    student_id: str = Field(min_length=1)
    document_type: DocumentType
    document_name: str = Field(min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=1000)
    file_name: str | None = None
    mime_type: str | None = None
    size: int | None = Field(default=None, ge=0)
    url: str | None = None
    expiry_date: datetime | None = None


class DocumentUpdate(BaseModel):
    document_type: DocumentType | None = None
    document_name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=1000)
    expiry_date: datetime | None = None


class VerifyRequest(BaseModel):
    remarks: str | None = Field(default=None, max_length=500)


class RejectRequest(BaseModel):
    rejection_reason: str | None = Field(default=None, max_length=500)


# =============================================================================
# Router Factory
# =============================================================================

def build_review_router(
    kind: ReviewKind,
    get_service: Callable,
    create_model: type[BaseModel],
    update_model: type[BaseModel],
    pending_path: str = "/pending",
    approve_path: str = "/verify",
    with_expiry: bool = False,
) -> APIRouter:
    """Wire one record kind's CRUD and review endpoints onto a router."""
    router = APIRouter(
        prefix=f"/hr/{kind.name}",
        tags=["hr"],
        dependencies=[Depends(require_roles(ADMIN_OR_HR))],
    )
    label = kind.label
    approved = kind.approved_status.value.lower()

    @router.post("", status_code=status.HTTP_201_CREATED)
    async def create_record(
        data: create_model,
        ctx: Identity = Depends(require_roles(ADMIN_OR_HR)),
        service: ReviewService = Depends(get_service),
    ):
        fields = data.model_dump(exclude_none=True)
        if "evaluator_id" in create_model.model_fields:
            fields.setdefault("evaluator_id", ctx.subject_id)
        return success(f"{label} created successfully", await service.create(fields))

    @router.get(pending_path)
    async def list_pending(
        student_id: str | None = None,
        service: ReviewService = Depends(get_service),
    ):
        records = await service.list_pending(student_id)
        return success(f"{label}s awaiting review retrieved successfully", records)

    @router.get("/stats")
    async def record_stats(service: ReviewService = Depends(get_service)):
        return success(f"{label} statistics retrieved successfully", await service.stats())

    @router.get("/student/{student_id}")
    async def list_for_student(
        student_id: str,
        service: ReviewService = Depends(get_service),
    ):
        records = await service.list_for_student(student_id)
        return success(f"{label}s retrieved successfully", records)

    if with_expiry:
        @router.get("/expiring")
        async def list_expiring(
            days: int = Query(30, ge=1, le=365),
            service: ReviewService = Depends(get_service),
        ):
            records = await service.list_expiring(days)
            return success(f"{label}s expiring within {days} days retrieved successfully", records)

        @router.get("/expired")
        async def list_expired(service: ReviewService = Depends(get_service)):
            return success(f"Expired {label.lower()}s retrieved successfully", await service.list_expired())

    @router.get("/{record_id}")
    async def get_record(
        record_id: str,
        service: ReviewService = Depends(get_service),
    ):
        return success(f"{label} retrieved successfully", await service.get(record_id))

    @router.put("/{record_id}")
    async def update_record(
        record_id: str,
        data: update_model,
        service: ReviewService = Depends(get_service),
    ):
        record = await service.update(record_id, data.model_dump(exclude_unset=True))
        return success(f"{label} updated successfully", record)

    @router.put(f"/{{record_id}}{approve_path}")
    async def verify_record(
        record_id: str,
        data: VerifyRequest | None = None,
        ctx: Identity = Depends(require_roles(ADMIN_OR_HR)),
        service: ReviewService = Depends(get_service),
    ):
        remarks = data.remarks if data else None
        record = await service.verify(record_id, ctx, remarks)
        return success(f"{label} {approved} successfully", record)

    @router.put("/{record_id}/reject")
    async def reject_record(
        record_id: str,
        data: RejectRequest | None = None,
        ctx: Identity = Depends(require_roles(ADMIN_OR_HR)),
        service: ReviewService = Depends(get_service),
    ):
        reason = data.rejection_reason if data else None
        record = await service.reject(record_id, ctx, reason)
        return success(f"{label} rejected successfully", record)

    @router.delete("/{record_id}")
    async def delete_record(
        record_id: str,
        service: ReviewService = Depends(get_service),
    ):
        await service.delete(record_id)
        return success(f"{label} deleted successfully")

    return router


skill_router = build_review_router(
    SKILL,
    get_skill_service,
    SkillCreate,
    SkillUpdate,
    pending_path="/unverified",
)

performance_router = build_review_router(
    PERFORMANCE,
    get_performance_service,
    PerformanceCreate,
    PerformanceUpdate,
    approve_path="/approve",
)

document_router = build_review_router(
    DOCUMENT,
    get_document_service,
    DocumentCreate,
    DocumentUpdate,
    with_expiry=True,
)
