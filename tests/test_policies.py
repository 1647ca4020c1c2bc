"""
Tests for the role gate and the ownership scoper.
"""

import pytest

from jupiter.auth.identity import make_identity
from jupiter.auth.policies import (
    authorize,
    block_listing_for_student,
    owner_or_elevated,
    self_student_or_elevated,
)
from jupiter.auth.roles import (
    ADMIN_ONLY,
    ADMIN_OR_HR,
    ANY_AUTHENTICATED,
    HR_ONLY,
    STUDENT_ONLY,
    describe,
    is_elevated,
)
from jupiter.core.errors import ForbiddenError, UnauthenticatedError
from jupiter.core.models import Role


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def admin():
    return make_identity("usr_admin", "admin@example.com", Role.ADMIN)


@pytest.fixture
def hr():
    return make_identity("usr_hr", "hr@example.com", Role.HR)


@pytest.fixture
def student_s1():
    return make_identity("usr_s1", "s1@example.com", Role.STUDENT, linked_student_id="S1")


# =============================================================================
# Role Gate Tests
# =============================================================================


class TestAuthorize:
    def test_no_identity(self):
        with pytest.raises(UnauthenticatedError) as exc:
            authorize(None, ANY_AUTHENTICATED)
        assert exc.value.status_code == 401

    def test_allowed_returns_identity(self, hr):
        assert authorize(hr, ADMIN_OR_HR) is hr

    def test_denied_names_required_roles(self, student_s1):
        with pytest.raises(ForbiddenError, match="Required roles: ADMIN, HR"):
            authorize(student_s1, ADMIN_OR_HR)

    @pytest.mark.parametrize(
        "preset, allowed",
        [
            (ADMIN_ONLY, {Role.ADMIN}),
            (HR_ONLY, {Role.HR}),
            (ADMIN_OR_HR, {Role.ADMIN, Role.HR}),
            (STUDENT_ONLY, {Role.STUDENT}),
            (ANY_AUTHENTICATED, {Role.ADMIN, Role.HR, Role.STUDENT}),
        ],
    )
    def test_presets(self, preset, allowed, admin, hr, student_s1):
        for identity in (admin, hr, student_s1):
            if identity.role in allowed:
                assert authorize(identity, preset) is identity
            else:
                with pytest.raises(ForbiddenError):
                    authorize(identity, preset)

    def test_role_helpers(self):
        assert is_elevated(Role.ADMIN)
        assert is_elevated("HR")
        assert not is_elevated(Role.STUDENT)
        assert not is_elevated("NOBODY")
        assert describe({Role.STUDENT, Role.ADMIN}) == "ADMIN, STUDENT"


# =============================================================================
# Ownership Scoper Tests
# =============================================================================


class TestOwnership:
    def test_student_sees_only_own_record(self, student_s1):
        self_student_or_elevated(student_s1, "S1")

        with pytest.raises(ForbiddenError, match="only access their own data"):
            self_student_or_elevated(student_s1, "S2")

    def test_elevated_sees_any_student(self, admin, hr):
        self_student_or_elevated(admin, "S2")
        self_student_or_elevated(hr, "S2")

    def test_owner_or_elevated(self, admin, student_s1):
        owner_or_elevated(student_s1, "usr_s1")
        owner_or_elevated(admin, "usr_s1")

        with pytest.raises(ForbiddenError):
            owner_or_elevated(student_s1, "usr_someone_else")

    def test_listing_blocked_for_students(self, admin, hr, student_s1):
        block_listing_for_student(admin)
        block_listing_for_student(hr)

        with pytest.raises(ForbiddenError, match="contact HR or Admin"):
            block_listing_for_student(student_s1)
