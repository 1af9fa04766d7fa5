"""
Admin Request Models
"""

from pydantic import BaseModel
from typing import Optional


class AdminLoginRequest(BaseModel):
    """Either the plaintext code or its SHA-256 hex digest"""
    code: Optional[str] = None
    code_hash: Optional[str] = None
