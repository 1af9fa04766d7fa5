"""
Public Endpoints
Club directory listing and detail
"""

from typing import List

from databases import Database
from fastapi import APIRouter, Depends, Query

from app.dependencies import get_database
from app.schemas.club import ClubDetailResponse, ClubListResponse
from app.services.club_filter import ClubFilter, filter_clubs
from app.services.club_service import ClubService

router = APIRouter()


@router.get("/clubs", response_model=ClubListResponse)
async def list_clubs(
    include_pending: str = Query("", alias="includePending"),
    q: str = Query(""),
    field: str = Query(""),
    subfield: str = Query(""),
    category: str = Query(""),
    days: List[str] = Query([]),
    db: Database = Depends(get_database),
):
    """List approved clubs, optionally searched and filtered"""
    clubs = await ClubService.list_clubs(db, include_pending=include_pending == "1")
    criteria = ClubFilter(q=q, field=field, subfield=subfield, category=category, days=days)
    return {"clubs": filter_clubs(clubs, criteria)}


@router.get("/clubs/{club_id}", response_model=ClubDetailResponse)
async def get_club(club_id: int, db: Database = Depends(get_database)):
    """Get one club with tag arrays"""
    return {"club": await ClubService.get_club(db, club_id)}
