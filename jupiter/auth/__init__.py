"""
Authentication and authorization.

Two decisions guard every protected route:
1. Role gate - is the caller's role allowed here at all?
2. Ownership scoper - may this caller touch this particular student?

The HTTP routes live in ``jupiter.auth.routes`` and are mounted by the app.
"""

from jupiter.auth.identity import (
    Identity,
    AdminIdentity,
    HrIdentity,
    StudentIdentity,
    make_identity,
)
from jupiter.auth.roles import (
    ADMIN_ONLY,
    HR_ONLY,
    ADMIN_OR_HR,
    STUDENT_ONLY,
    ANY_AUTHENTICATED,
)
from jupiter.auth.policies import (
    authorize,
    owner_or_elevated,
    self_student_or_elevated,
    block_listing_for_student,
    require_roles,
    require_auth,
    require_listing,
    require_self_student_or_elevated,
    optional_identity,
)
from jupiter.auth.tokens import (
    TokenKind,
    TokenPair,
    issue_tokens,
    decode_token,
)
from jupiter.auth.passwords import hash_password, verify_password
from jupiter.auth.service import AuthSessionService

__all__ = [
    # Identity
    "Identity",
    "AdminIdentity",
    "HrIdentity",
    "StudentIdentity",
    "make_identity",
    # Role presets
    "ADMIN_ONLY",
    "HR_ONLY",
    "ADMIN_OR_HR",
    "STUDENT_ONLY",
    "ANY_AUTHENTICATED",
    # Policies
    "authorize",
    "owner_or_elevated",
    "self_student_or_elevated",
    "block_listing_for_student",
    "require_roles",
    "require_auth",
    "require_listing",
    "require_self_student_or_elevated",
    "optional_identity",
    # Tokens
    "TokenKind",
    "TokenPair",
    "issue_tokens",
    "decode_token",
    "hash_password",
    "verify_password",
    # Service
    "AuthSessionService",
]
