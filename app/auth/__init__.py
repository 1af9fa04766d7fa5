"""
Authentication Module
Admin code and president password checks
"""

from app.auth.codes import (
    sha256_hex,
    admin_code_matches,
    admin_login_matches,
    president_password_matches,
)
from app.auth.dependencies import require_admin, client_ip

__all__ = [
    "sha256_hex",
    "admin_code_matches",
    "admin_login_matches",
    "president_password_matches",
    "require_admin",
    "client_ip",
]
