"""
Database Models
Import all models here so their tables register on Base.metadata
"""

from app.models.club import Club
from app.models.tags import (
    MeetingDay,
    Subfield,
    ClubSubfield,
    ClubMeetingDay,
    ClubCategory,
    ClubField,
)
from app.models.migration import SchemaMigration

__all__ = [
    "Club",
    "MeetingDay",
    "Subfield",
    "ClubSubfield",
    "ClubMeetingDay",
    "ClubCategory",
    "ClubField",
    "SchemaMigration",
]
