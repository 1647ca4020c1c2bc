"""
Shared utility functions for the jupiter API.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone


_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def generate_id(prefix: str = "") -> str:
    """
    Generate a unique ID with optional prefix.

    Args:
        prefix: Optional prefix (e.g., "usr", "stu", "skl")

    Returns:
        A unique ID like "stu_a1b2c3d4e5f6"
    """
    uid = uuid.uuid4().hex[:12]
    return f"{prefix}_{uid}" if prefix else uid


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def newest_first(docs: list[dict]) -> list[dict]:
    """Sort stored documents by creation time, most recent first."""
    return sorted(docs, key=lambda d: d.get("created_at") or _EPOCH, reverse=True)


def paginate(items: list, page: int = 1, limit: int = 10) -> dict:
    """
    Slice a full result list into one page.

    Returns:
        {"items": [...], "pagination": {page, limit, total_items, total_pages}}
    """
    total = len(items)
    start = (page - 1) * limit
    return {
        "items": items[start:start + limit],
        "pagination": {
            "page": page,
            "limit": limit,
            "total_items": total,
            "total_pages": (total + limit - 1) // limit,
        },
    }
