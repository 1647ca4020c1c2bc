"""
Standard response envelope.

Every endpoint answers with ``{success, message, data}``; errors use the
same shape with ``success: false``.
"""

from __future__ import annotations

from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def success(message: str, data: Any = None) -> dict[str, Any]:
    """Body for a successful response (status code is set on the route)."""
    return {"success": True, "message": message, "data": data}


def error_response(status_code: int, message: str, data: Any = None) -> JSONResponse:
    """Error envelope as a ready-to-send response."""
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder({"success": False, "message": message, "data": data}),
    )


class Messages:
    """Response messages."""

    # Auth
    REGISTERED = "User registered successfully"
    LOGIN_SUCCESS = "Login successful"
    LOGOUT_SUCCESS = "Logout successful"
    TOKEN_REFRESHED = "Token refreshed successfully"
    PASSWORD_CHANGED = "Password changed successfully"
    PROFILE_FOUND = "Profile retrieved successfully"
    PROFILE_UPDATED = "Profile updated successfully"
    USER_FOUND = "User retrieved successfully"
    USER_STATUS_UPDATED = "User status updated successfully"

    # Student
    STUDENT_CREATED = "Student created successfully"
    STUDENT_UPDATED = "Student updated successfully"
    STUDENT_DELETED = "Student deleted successfully"
    STUDENT_FOUND = "Student retrieved successfully"
    STUDENTS_FOUND = "Students retrieved successfully"
    STUDENT_STATUS_UPDATED = "Student status updated successfully"
    STATS_FOUND = "Statistics retrieved successfully"

    # General
    VALIDATION_ERROR = "Validation failed"
    SERVER_ERROR = "Internal server error"
    NOT_FOUND = "Resource not found"
    HEALTHY = "Service is healthy"
