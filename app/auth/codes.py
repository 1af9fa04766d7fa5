"""
Access Code Verification
Admin code and president password checks
"""

import hashlib
import hmac
from typing import Optional


def sha256_hex(value: str) -> str:
    """
    Unsalted SHA-256 hex digest, as sent by the admin page

    Args:
        value: Plain text

    Returns:
        Lowercase hex digest
    """
    return hashlib.sha256(str(value).encode("utf-8")).hexdigest()


def _same(given: str, expected: str) -> bool:
    return hmac.compare_digest(given.encode("utf-8"), expected.encode("utf-8"))


def admin_code_matches(code: Optional[str], code_hash: Optional[str], admin_code: str) -> bool:
    """
    Check a plaintext admin code or its digest against the configured code

    An unconfigured (empty) admin code never matches.
    """
    if not admin_code:
        return False
    if code_hash and _same(code_hash.strip().lower(), sha256_hex(admin_code)):
        return True
    if code and _same(code, admin_code):
        return True
    return False


def admin_login_matches(code: Optional[str], code_hash: Optional[str], admin_code: str) -> bool:
    """Login prefers the plaintext code when both are sent"""
    if not admin_code:
        return False
    if code:
        return _same(code, admin_code)
    return bool(code_hash) and _same(code_hash.strip().lower(), sha256_hex(admin_code))


def president_password_matches(password: Optional[str], expected: str) -> bool:
    if not expected or not password:
        return False
    return _same(password, expected)
