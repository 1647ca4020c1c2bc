"""
Review state machine shared by skills, performance records and documents.

    UNREVIEWED (PENDING | DRAFT) ──verify──▶ APPROVED / VERIFIED
              │                                  │
              └──────────reject──────────▶ REJECTED ◀─┘

- verify on a record that is already approved fails (ALREADY_VERIFIED).
- reject has no such guard: rejecting twice re-stamps reviewer and time.
- Each decision clears the other decision's fields.
- A content edit sends an approved or rejected record back to unreviewed.

The transition functions here are pure: they take a record and return the
updated copy. Loading, owner checks and persistence live in service.py.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from jupiter.core.errors import AlreadyVerifiedError
from jupiter.core.models import (
    Document,
    Performance,
    ReviewableRecord,
    ReviewStatus,
    Skill,
)
from jupiter.core.utils import utc_now
from jupiter.storage.base import Collections


# Fields owned by the review decision; never writable through content edits
DECISION_FIELDS: frozenset[str] = frozenset({
    "status",
    "reviewer_id",
    "reviewer_name",
    "reviewed_at",
    "remarks",
    "rejection_reason",
})

# Fields no edit may touch
IMMUTABLE_FIELDS: frozenset[str] = frozenset({"id", "student_id", "created_at", "updated_at"})


@dataclass(frozen=True)
class ReviewKind:
    """How one record type plugs into the shared review lifecycle."""

    name: str
    label: str
    collection: str
    model: type[ReviewableRecord]
    approved_status: ReviewStatus
    unreviewed_statuses: frozenset[ReviewStatus] = frozenset({ReviewStatus.PENDING})
    initial_status: ReviewStatus = ReviewStatus.PENDING

    def is_approved(self, record: ReviewableRecord) -> bool:
        return record.status == self.approved_status

    def is_unreviewed(self, record: ReviewableRecord) -> bool:
        return record.status in self.unreviewed_statuses

    @property
    def not_found_message(self) -> str:
        return f"{self.label} not found"


SKILL = ReviewKind(
    name="skill",
    label="Skill",
    collection=Collections.SKILLS,
    model=Skill,
    approved_status=ReviewStatus.VERIFIED,
)

PERFORMANCE = ReviewKind(
    name="performance",
    label="Performance record",
    collection=Collections.PERFORMANCES,
    model=Performance,
    approved_status=ReviewStatus.APPROVED,
    unreviewed_statuses=frozenset({ReviewStatus.DRAFT, ReviewStatus.PENDING}),
)

DOCUMENT = ReviewKind(
    name="document",
    label="Document",
    collection=Collections.DOCUMENTS,
    model=Document,
    approved_status=ReviewStatus.VERIFIED,
)


@dataclass(frozen=True)
class Reviewer:
    """Who made a review decision."""

    id: str
    name: str


# =============================================================================
# Transitions
# =============================================================================


def verify(
    kind: ReviewKind,
    record: ReviewableRecord,
    reviewer: Reviewer,
    remarks: str | None = None,
    now: datetime | None = None,
) -> ReviewableRecord:
    """
    Approve a record.

    Raises:
        AlreadyVerifiedError: record is already in the approved state
    """
    if kind.is_approved(record):
        raise AlreadyVerifiedError(f"{kind.label} is already {kind.approved_status.value.lower()}")

    now = now or utc_now()
    return record.model_copy(update={
        "status": kind.approved_status,
        "reviewer_id": reviewer.id,
        "reviewer_name": reviewer.name,
        "reviewed_at": now,
        "remarks": remarks,
        "rejection_reason": None,
        "updated_at": now,
    })


def reject(
    kind: ReviewKind,
    record: ReviewableRecord,
    reviewer: Reviewer,
    reason: str | None = None,
    now: datetime | None = None,
) -> ReviewableRecord:
    """Reject a record. Allowed from any state, including REJECTED."""
    now = now or utc_now()
    return record.model_copy(update={
        "status": ReviewStatus.REJECTED,
        "reviewer_id": reviewer.id,
        "reviewer_name": reviewer.name,
        "reviewed_at": now,
        "rejection_reason": reason,
        "remarks": None,
        "updated_at": now,
    })


def resubmit(
    kind: ReviewKind,
    record: ReviewableRecord,
    now: datetime | None = None,
) -> ReviewableRecord:
    """Return a reviewed record to the unreviewed state, dropping the decision."""
    if kind.is_unreviewed(record):
        return record

    return record.model_copy(update={
        "status": kind.initial_status,
        "reviewer_id": None,
        "reviewer_name": None,
        "reviewed_at": None,
        "remarks": None,
        "rejection_reason": None,
        "updated_at": now or utc_now(),
    })
