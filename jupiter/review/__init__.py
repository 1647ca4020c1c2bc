"""
HR review of skills, performance records and documents.

- machine: the shared review lifecycle and the per-kind configuration
- service: persistence-backed CRUD and review decisions
"""

from jupiter.review.machine import SKILL, PERFORMANCE, DOCUMENT, ReviewKind, Reviewer
from jupiter.review.service import ReviewService

__all__ = [
    "SKILL",
    "PERFORMANCE",
    "DOCUMENT",
    "ReviewKind",
    "Reviewer",
    "ReviewService",
]
