"""
Admin Endpoints
Login check and club management behind the admin code
"""

import logging

from databases import Database
from fastapi import APIRouter, Depends, Request

from app.auth import admin_login_matches, client_ip, require_admin
from app.constants import ADMIN_LOGIN_BUCKET
from app.dependencies import get_attempt_store, get_database
from app.errors import InvalidCode, RateLimited
from app.schemas.admin import AdminLoginRequest
from app.schemas.club import ClubListResponse, ClubUpdateRequest, OkResponse
from app.services.club_service import ClubService
from app.services.rate_limiter import AttemptStore, limiter_key

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/admin/login", response_model=OkResponse)
async def admin_login(
    credentials: AdminLoginRequest,
    request: Request,
    attempts: AttemptStore = Depends(get_attempt_store),
):
    """Verify the admin code (plaintext or SHA-256 hex)"""
    key = limiter_key(ADMIN_LOGIN_BUCKET, client_ip(request))
    if attempts.is_limited(key):
        raise RateLimited()

    admin_code = request.app.state.settings.ADMIN_CODE
    if not admin_login_matches(credentials.code, credentials.code_hash, admin_code):
        attempts.record_failure(key)
        logger.info("Failed admin login from %s", key)
        raise InvalidCode()

    attempts.clear(key)
    return OkResponse()


@router.get("/admin/clubs", response_model=ClubListResponse, dependencies=[Depends(require_admin)])
async def list_admin_clubs(db: Database = Depends(get_database)):
    """List every club including pending and rejected ones"""
    return {"clubs": await ClubService.list_admin_clubs(db)}


@router.patch("/clubs/{club_id}", response_model=OkResponse, dependencies=[Depends(require_admin)])
async def update_club(club_id: int, update: ClubUpdateRequest, db: Database = Depends(get_database)):
    """Edit admin-editable club columns"""
    await ClubService.update_club(db, club_id, update.changes())
    return OkResponse()


@router.delete("/clubs/{club_id}", response_model=OkResponse, dependencies=[Depends(require_admin)])
async def delete_club(club_id: int, db: Database = Depends(get_database)):
    """Delete a club and its tag rows"""
    await ClubService.delete_club(db, club_id)
    return OkResponse()


@router.post("/clubs/{club_id}/approve", response_model=OkResponse, dependencies=[Depends(require_admin)])
async def approve_club(club_id: int, db: Database = Depends(get_database)):
    """Mark a club approved so it shows in the public list"""
    await ClubService.approve_club(db, club_id)
    return OkResponse()
