"""
Pydantic schemas for request/response validation
"""

from app.schemas.club import (
    ClubResponse,
    ClubListResponse,
    ClubDetailResponse,
    ClubUpdateRequest,
    OkResponse,
    SubmitResponse,
)
from app.schemas.admin import AdminLoginRequest
from app.schemas.submission import PresidentSubmission

__all__ = [
    "ClubResponse",
    "ClubListResponse",
    "ClubDetailResponse",
    "ClubUpdateRequest",
    "OkResponse",
    "SubmitResponse",
    "AdminLoginRequest",
    "PresidentSubmission",
]
