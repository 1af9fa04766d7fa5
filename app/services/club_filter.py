"""
Directory Filtering
Search and facet filters for the public club list
"""

from typing import Iterable, List, Optional, Sequence

from pydantic import BaseModel

from app.constants import CATEGORY_BY_LABEL, CATEGORY_LABELS, FIELD_SYNONYMS


class ClubFilter(BaseModel):
    """Optional criteria; an empty filter matches every club"""
    q: str = ""
    field: str = ""
    subfield: str = ""
    category: str = ""
    days: List[str] = []

    @property
    def is_empty(self) -> bool:
        return not (self.q.strip() or self.field or self.subfield or self.category or self.days)

    @property
    def category_key(self) -> str:
        # The browse page sends display labels; API callers may send keys
        if self.category in CATEGORY_LABELS:
            return self.category
        return CATEGORY_BY_LABEL.get(self.category, self.category)


def club_fields(club: dict) -> List[str]:
    if club.get("fields"):
        return list(club["fields"])
    return [club["subject"]] if club.get("subject") else []


def search_text(club: dict) -> str:
    categories = club.get("categories") or []
    parts: List[str] = [
        club.get("name") or "",
        club.get("description") or "",
        *club_fields(club),
        club.get("subject") or "",
        *(club.get("subfield") or []),
        *categories,
        *(CATEGORY_LABELS.get(key, key) for key in categories),
        club.get("prerequisites") or "",
        club.get("meeting_room") or "",
        club.get("president_contact") or "",
    ]
    return " ".join(parts).lower()


def field_matches(selected: str, fields: Sequence[str]) -> bool:
    if not selected:
        return True
    synonyms = set(FIELD_SYNONYMS.get(selected, (selected,)))
    return any(f in synonyms for f in fields)


def matches(club: dict, criteria: ClubFilter) -> bool:
    query = criteria.q.strip().lower()
    if query and query not in search_text(club):
        return False
    if not field_matches(criteria.field, club_fields(club)):
        return False
    if criteria.subfield and criteria.subfield not in (club.get("subfield") or []):
        return False
    if criteria.days and not set(criteria.days) & set(club.get("meeting_days") or []):
        return False
    if criteria.category and criteria.category_key not in (club.get("categories") or []):
        return False
    return True


def filter_clubs(clubs: Iterable[dict], criteria: Optional[ClubFilter]) -> List[dict]:
    clubs = list(clubs)
    if criteria is None or criteria.is_empty:
        return clubs
    return [club for club in clubs if matches(club, criteria)]
