"""
Service providers for route handlers.

Services are cheap, stateless wrappers around the store held in
``app.state``; one is built per request.
"""

from __future__ import annotations

from fastapi import Depends, Request

from jupiter.auth.service import AuthSessionService
from jupiter.config import Settings, get_settings
from jupiter.review.machine import DOCUMENT, PERFORMANCE, SKILL
from jupiter.review.service import ReviewService
from jupiter.storage.base import MetadataStorage, StorageProvider
from jupiter.students.service import StudentService


def get_storage(request: Request) -> StorageProvider:
    return request.app.state.storage


def get_metadata(storage: StorageProvider = Depends(get_storage)) -> MetadataStorage:
    return storage.metadata


def get_auth_service(
    metadata: MetadataStorage = Depends(get_metadata),
    settings: Settings = Depends(get_settings),
) -> AuthSessionService:
    return AuthSessionService(metadata, settings)


def get_student_service(metadata: MetadataStorage = Depends(get_metadata)) -> StudentService:
    return StudentService(metadata)


def get_skill_service(metadata: MetadataStorage = Depends(get_metadata)) -> ReviewService:
    return ReviewService(metadata, SKILL)


def get_performance_service(metadata: MetadataStorage = Depends(get_metadata)) -> ReviewService:
    return ReviewService(metadata, PERFORMANCE)


def get_document_service(metadata: MetadataStorage = Depends(get_metadata)) -> ReviewService:
    return ReviewService(metadata, DOCUMENT)
