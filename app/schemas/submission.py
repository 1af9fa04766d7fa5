"""
President Submission Models
Validated request body for POST /api/presidents/submit
"""

import re
from typing import Any, Callable, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from app.constants import (
    ALLOWED_CATEGORIES,
    DAY_IDS,
    DEFAULT_SUBJECT,
    MAX_LENGTHS,
    MEETING_FREQUENCIES,
    MEETING_TIME_TYPES,
)

TRUTHY_STRINGS = {"true", "1", "yes", "on"}
_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)


def _dedupe(values: List[str], key: Callable[[str], str] = str) -> List[str]:
    seen = set()
    result = []
    for value in values:
        marker = key(value)
        if value and marker not in seen:
            seen.add(marker)
            result.append(value)
    return result


def normalize_website_url(url: Optional[str]) -> Optional[str]:
    """Prefix bare hostnames with https://; empty input becomes None"""
    if not url:
        return None
    value = str(url).strip()
    if not value:
        return None
    if _SCHEME_RE.match(value):
        return value
    if value.startswith("//"):
        return "https:" + value
    if "." in value or value.startswith("www."):
        return "https://" + value.lstrip("/")
    return value


class PresidentSubmission(BaseModel):
    """
    Club submission from a president

    Every field is optional at parse time so that missing values can be
    reported together by `missing_fields()` instead of failing one by one.
    """
    model_config = ConfigDict(extra="ignore")

    president_submit_password: str = ""
    club_name: str = ""
    president_contact: str = ""
    meeting_frequency: str = ""
    meeting_time_type: str = ""
    meeting_time_range: str = ""
    meeting_room: str = ""
    meeting_days: List[str] = []
    fields: List[str] = []
    categories: List[str] = []
    subfields: List[str] = []
    description: str = ""
    open_to_all: bool = False
    prereq_required: bool = False
    prerequisites: str = ""
    volunteer_hours: bool = False
    website_url: str = ""

    @field_validator(
        "president_submit_password", "club_name", "president_contact",
        "meeting_frequency", "meeting_time_type", "meeting_time_range",
        "meeting_room", "description", "prerequisites", "website_url",
        mode="before",
    )
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, (list, dict)):
            return ""
        return str(value)

    @field_validator("meeting_days", "fields", "categories", "subfields", mode="before")
    @classmethod
    def _coerce_list(cls, value: Any) -> List[str]:
        if not isinstance(value, list):
            return []
        return [str(item).strip() for item in value if item is not None]

    @field_validator("open_to_all", "prereq_required", "volunteer_hours", mode="before")
    @classmethod
    def _coerce_flag(cls, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.strip().lower() in TRUTHY_STRINGS
        if isinstance(value, (int, float)):
            return value != 0
        return False

    @field_validator(
        "club_name", "president_contact", "meeting_frequency", "meeting_time_type",
        "meeting_time_range", "meeting_room", "description", "prerequisites", "website_url",
    )
    @classmethod
    def _strip(cls, value: str) -> str:
        return value.strip()

    # ==================== VALIDATION ====================

    def missing_fields(self) -> List[str]:
        """Names of required fields that are absent or hold a disallowed value"""
        missing = []
        if not self.club_name:
            missing.append("club_name")
        if self.meeting_frequency not in MEETING_FREQUENCIES:
            missing.append("meeting_frequency")
        if self.meeting_time_type not in MEETING_TIME_TYPES:
            missing.append("meeting_time_type")
        if not self.normalized_meeting_days:
            missing.append("meeting_days")
        if self.meeting_time_type == "after_school" and not self.meeting_time_range:
            missing.append("meeting_time_range")
        if not self.meeting_room:
            missing.append("meeting_room")
        return missing

    def description_word_count(self) -> int:
        return len(self.description.split())

    def overlong_fields(self) -> List[str]:
        """Names of fields whose value (or any label in a tag list) exceeds its column width"""
        values = {
            "club_name": [self.club_name],
            "president_contact": [self.president_contact],
            "meeting_time_range": [self.meeting_time_range],
            "meeting_room": [self.meeting_room],
            "website_url": [self.normalized_website_url or ""],
            "fields": self.normalized_fields,
            "subfields": self.normalized_subfields,
        }
        return [
            name for name, limit in MAX_LENGTHS.items()
            if any(len(value) > limit for value in values[name])
        ]

    # ==================== NORMALIZED VALUES ====================

    @property
    def normalized_meeting_days(self) -> List[str]:
        return _dedupe([day for day in self.meeting_days if day in DAY_IDS])

    @property
    def normalized_categories(self) -> List[str]:
        # Unknown categories are dropped, not rejected
        return _dedupe([c for c in self.categories if c in ALLOWED_CATEGORIES])

    @property
    def normalized_fields(self) -> List[str]:
        return _dedupe(self.fields, key=str.casefold)

    @property
    def normalized_subfields(self) -> List[str]:
        return _dedupe(self.subfields, key=str.casefold)

    @property
    def subject(self) -> str:
        fields = self.normalized_fields
        return fields[0] if fields else DEFAULT_SUBJECT

    @property
    def normalized_prerequisites(self) -> str:
        return self.prerequisites if self.prereq_required else ""

    @property
    def normalized_website_url(self) -> Optional[str]:
        return normalize_website_url(self.website_url)
