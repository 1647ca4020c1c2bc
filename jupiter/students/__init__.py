"""Student registry."""

from jupiter.students.service import StudentService, StudentCreate, StudentUpdate

__all__ = ["StudentService", "StudentCreate", "StudentUpdate"]
