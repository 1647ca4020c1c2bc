"""
Password hashing.

PBKDF2-SHA256 with a random per-password salt. Stored format is
``iterations:salt:hash`` so the work factor can be raised without
invalidating existing hashes.
"""

from __future__ import annotations

import hashlib
import secrets

from jupiter.config import get_settings


def _derive(password: str, salt: str, iterations: int) -> str:
    return hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt.encode("utf-8"),
        iterations=iterations,
    ).hex()


def hash_password(password: str, iterations: int | None = None) -> str:
    """Hash a password. Returns ``iterations:salt:hash``."""
    iterations = iterations or get_settings().password_hash_iterations
    salt = secrets.token_hex(32)
    return f"{iterations}:{salt}:{_derive(password, salt, iterations)}"


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash in constant time."""
    try:
        iterations, salt, stored_hash = password_hash.split(":")
        candidate = _derive(password, salt, int(iterations))
        return secrets.compare_digest(candidate, stored_hash)
    except (ValueError, AttributeError):
        return False
