"""
Roles and capability presets.

This defines WHO may reach an endpoint, not HOW we check it.
The actual checking happens in policies.py.
"""

from __future__ import annotations

from jupiter.core.models import Role


# Roles exempt from student self-scoping
ELEVATED_ROLES: frozenset[Role] = frozenset({Role.ADMIN, Role.HR})


# =============================================================================
# Capability Presets
# =============================================================================


ADMIN_ONLY: frozenset[Role] = frozenset({Role.ADMIN})
HR_ONLY: frozenset[Role] = frozenset({Role.HR})
ADMIN_OR_HR: frozenset[Role] = ELEVATED_ROLES
STUDENT_ONLY: frozenset[Role] = frozenset({Role.STUDENT})
ANY_AUTHENTICATED: frozenset[Role] = frozenset(Role)


# Roles an account may only be given by an authenticated ADMIN
ADMIN_CREATED_ROLES: frozenset[Role] = frozenset({Role.HR, Role.STUDENT})


def is_elevated(role: Role | str) -> bool:
    """ADMIN and HR see every student's data."""
    try:
        return Role(role) in ELEVATED_ROLES
    except ValueError:
        return False


def describe(roles: frozenset[Role] | set[Role]) -> str:
    """Stable, human-readable listing used in denial messages."""
    return ", ".join(r.value for r in Role if r in roles)
