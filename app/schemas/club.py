"""
Club Request/Response Models
For the public directory and admin management
"""

from pydantic import BaseModel, Field, field_validator
from typing import List, Optional

from app.constants import CLUB_STATUSES


class ClubResponse(BaseModel):
    """Club row with its tag sets attached"""
    id: int
    name: str
    subject: Optional[str] = None
    meeting_frequency: Optional[str] = None
    meeting_time_type: Optional[str] = None
    meeting_time_range: Optional[str] = None
    meeting_room: str = ""
    open_to_all: bool = False
    prereq_required: bool = False
    prerequisites: str = ""
    volunteer_hours: bool = False
    description: str = ""
    status: str
    website_url: Optional[str] = None
    president_contact: Optional[str] = None

    subfield: List[str] = []
    meeting_days: List[str] = []
    categories: List[str] = []
    fields: List[str] = []


class ClubListResponse(BaseModel):
    clubs: List[ClubResponse]


class ClubDetailResponse(BaseModel):
    club: ClubResponse


class ClubUpdateRequest(BaseModel):
    """Admin edit; only the fields present in the body are changed"""
    description: Optional[str] = Field(None, max_length=10000)
    status: Optional[str] = None
    website_url: Optional[str] = Field(None, max_length=512)
    meeting_room: Optional[str] = Field(None, max_length=50)
    president_contact: Optional[str] = Field(None, max_length=255)

    # Admin credentials may travel in the body instead of headers
    code: Optional[str] = None
    code_hash: Optional[str] = None

    @field_validator("status")
    @classmethod
    def _known_status(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and value not in CLUB_STATUSES:
            raise ValueError(f"status must be one of {', '.join(CLUB_STATUSES)}")
        return value

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True, exclude={"code", "code_hash"})


class OkResponse(BaseModel):
    ok: bool = True


class SubmitResponse(OkResponse):
    club_id: int
