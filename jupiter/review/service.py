"""
Review service - records HR reviews, backed by the document store.

One ``ReviewService`` per record kind:

    skills = ReviewService(metadata, SKILL)
    skill = await skills.verify(skill_id, identity, remarks="Checked certificate")

Every operation that names a student checks the student exists before it
writes anything. Concurrent decisions on the same record are last-write-wins.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any

from pydantic import ValidationError

from jupiter.auth.identity import Identity
from jupiter.core.errors import BadRequestError, NotFoundError, OwnerNotFoundError
from jupiter.core.models import Document, ReviewableRecord, ReviewStatus, UserAccount
from jupiter.core.utils import newest_first, utc_now
from jupiter.review import machine
from jupiter.review.machine import DECISION_FIELDS, IMMUTABLE_FIELDS, Reviewer, ReviewKind
from jupiter.storage.base import Collections, MetadataStorage

logger = logging.getLogger(__name__)


class ReviewService:
    """CRUD plus verify/reject for one reviewable record kind."""

    def __init__(self, metadata: MetadataStorage, kind: ReviewKind):
        self.metadata = metadata
        self.kind = kind

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _load(self, doc: dict[str, Any]) -> ReviewableRecord:
        return self.kind.model.model_validate(doc)

    async def _save(self, record: ReviewableRecord) -> None:
        await self.metadata.save(self.kind.collection, record.id, record.model_dump())

    async def _require_student(self, student_id: str) -> None:
        if not await self.metadata.get(Collections.STUDENTS, student_id):
            raise OwnerNotFoundError()

    async def _reviewer(self, identity: Identity) -> Reviewer:
        """Reviewer stamp: account's full name, falling back to email."""
        doc = await self.metadata.get(Collections.USERS, identity.subject_id)
        name = UserAccount.model_validate(doc).full_name if doc else ""
        return Reviewer(id=identity.subject_id, name=name or identity.email)

    # -------------------------------------------------------------------------
    # CRUD
    # -------------------------------------------------------------------------

    async def create(self, data: dict[str, Any]) -> ReviewableRecord:
        """
        Create a record for an existing student, in the unreviewed state.

        Raises:
            OwnerNotFoundError: student does not exist
            BadRequestError: invalid fields or a non-unreviewed initial status
        """
        fields = {k: v for k, v in data.items() if k not in DECISION_FIELDS | IMMUTABLE_FIELDS}
        fields["student_id"] = data.get("student_id")

        try:
            status = ReviewStatus(data.get("status") or self.kind.initial_status)
        except ValueError:
            raise BadRequestError(f"Unknown status: {data.get('status')}")
        if status not in self.kind.unreviewed_statuses:
            raise BadRequestError(f"A new {self.kind.name} cannot start as {status.value}")

        await self._require_student(fields["student_id"])

        try:
            record = self.kind.model(**fields, status=status)
        except ValidationError as e:
            raise BadRequestError(f"Invalid {self.kind.name}", detail=e.errors(include_url=False, include_context=False))

        await self._save(record)
        return record

    async def get(self, record_id: str) -> ReviewableRecord:
        doc = await self.metadata.get(self.kind.collection, record_id)
        if not doc:
            raise NotFoundError(self.kind.not_found_message)
        return self._load(doc)

    async def list_for_student(self, student_id: str) -> list[ReviewableRecord]:
        """All of a student's records, newest first."""
        await self._require_student(student_id)
        docs = await self.metadata.query(self.kind.collection, {"student_id": student_id})
        return [self._load(d) for d in newest_first(docs)]

    async def list_pending(self, student_id: str | None = None) -> list[ReviewableRecord]:
        """Records awaiting review, newest first, optionally for one student."""
        filters = {"student_id": student_id} if student_id else {}
        docs = await self.metadata.query(self.kind.collection, filters or None)
        pending = [d for d in docs if d.get("status") in self.kind.unreviewed_statuses]
        return [self._load(d) for d in newest_first(pending)]

    async def update(self, record_id: str, changes: dict[str, Any]) -> ReviewableRecord:
        """
        Edit a record's content.

        Decision fields cannot be set this way. Editing a record that was
        already approved or rejected puts it back in the review queue.
        """
        record = await self.get(record_id)

        content = {
            k: v for k, v in changes.items()
            if k not in DECISION_FIELDS | IMMUTABLE_FIELDS
        }
        if not content:
            return record

        try:
            updated = self.kind.model.model_validate({**record.model_dump(), **content})
        except ValidationError as e:
            raise BadRequestError(f"Invalid {self.kind.name}", detail=e.errors(include_url=False, include_context=False))

        updated = machine.resubmit(self.kind, updated)
        updated.updated_at = utc_now()
        await self._save(updated)
        return updated

    async def delete(self, record_id: str) -> None:
        if not await self.metadata.delete(self.kind.collection, record_id):
            raise NotFoundError(self.kind.not_found_message)

    # -------------------------------------------------------------------------
    # Review decisions
    # -------------------------------------------------------------------------

    async def verify(
        self,
        record_id: str,
        reviewer: Identity,
        remarks: str | None = None,
    ) -> ReviewableRecord:
        """
        Approve a record.

        Raises:
            NotFoundError: no such record
            OwnerNotFoundError: the record's student no longer exists
            AlreadyVerifiedError: record already approved
        """
        record = await self.get(record_id)
        await self._require_student(record.student_id)

        updated = machine.verify(self.kind, record, await self._reviewer(reviewer), remarks)
        await self._save(updated)

        logger.info(f"{self.kind.label} {record_id} {updated.status.value} by {reviewer.subject_id}")
        return updated

    async def reject(
        self,
        record_id: str,
        reviewer: Identity,
        reason: str | None = None,
    ) -> ReviewableRecord:
        """
        Reject a record (re-rejecting re-stamps the reviewer and time).

        Raises:
            NotFoundError: no such record
            OwnerNotFoundError: the record's student no longer exists
        """
        record = await self.get(record_id)
        await self._require_student(record.student_id)

        updated = machine.reject(self.kind, record, await self._reviewer(reviewer), reason)
        await self._save(updated)

        logger.info(f"{self.kind.label} {record_id} REJECTED by {reviewer.subject_id}")
        return updated

    # -------------------------------------------------------------------------
    # Documents only
    # -------------------------------------------------------------------------

    async def list_expiring(self, days: int = 30) -> list[Document]:
        """Documents whose expiry falls within the next ``days`` days."""
        now = utc_now()
        horizon = now + timedelta(days=days)
        docs = await self.metadata.query(self.kind.collection)
        return [
            self._load(d) for d in newest_first(docs)
            if d.get("expiry_date") and now < d["expiry_date"] <= horizon
        ]

    async def list_expired(self) -> list[Document]:
        now = utc_now()
        docs = await self.metadata.query(self.kind.collection)
        return [
            self._load(d) for d in newest_first(docs)
            if d.get("expiry_date") and d["expiry_date"] <= now
        ]

    # -------------------------------------------------------------------------
    # Stats
    # -------------------------------------------------------------------------

    async def stats(self) -> dict[str, Any]:
        """Record counts, overall and per review status."""
        docs = await self.metadata.query(self.kind.collection)
        by_status = {s.value: 0 for s in ReviewStatus}
        for d in docs:
            by_status[ReviewStatus(d["status"]).value] += 1
        return {
            "total": len(docs),
            "unreviewed": sum(by_status[s.value] for s in self.kind.unreviewed_statuses),
            "by_status": by_status,
        }
