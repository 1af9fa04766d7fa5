"""
President Endpoints
Club submission (create or update)
"""

import logging

from databases import Database
from fastapi import APIRouter, Depends, Request

from app.auth import client_ip, president_password_matches
from app.constants import MAX_DESCRIPTION_WORDS, PRESIDENT_SUBMIT_BUCKET
from app.dependencies import get_attempt_store, get_database
from app.errors import RateLimited, Unauthorized, ValidationFailed
from app.schemas.club import SubmitResponse
from app.schemas.submission import PresidentSubmission
from app.services.rate_limiter import AttemptStore, limiter_key
from app.services.submission_service import SubmissionService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/presidents/submit", response_model=SubmitResponse)
async def submit_club(
    submission: PresidentSubmission,
    request: Request,
    attempts: AttemptStore = Depends(get_attempt_store),
):
    """
    Create or update a club from the presidents' form

    Process:
    1. Refuse clients over the failed-password limit
    2. Check the shared president password
    3. Check required fields, column widths and the description length
    4. Upsert the club and its tags in one transaction
    """
    key = limiter_key(PRESIDENT_SUBMIT_BUCKET, client_ip(request))
    if attempts.is_limited(key):
        raise RateLimited()

    settings = request.app.state.settings
    if not president_password_matches(submission.president_submit_password, settings.PRESIDENT_PASSWORD):
        attempts.record_failure(key)
        logger.info("Bad president password from %s", key)
        raise Unauthorized(reason="bad_president_password")
    attempts.clear(key)

    missing = submission.missing_fields()
    if missing:
        raise ValidationFailed("missing_required", fields=missing)

    overlong = submission.overlong_fields()
    if overlong:
        raise ValidationFailed("too_long", fields=overlong)

    words = submission.description_word_count()
    if words > MAX_DESCRIPTION_WORDS:
        raise ValidationFailed("desc_too_long", words=words)

    db: Database = await get_database(request)
    club_id = await SubmissionService.upsert_club(db, submission)
    return SubmitResponse(ok=True, club_id=club_id)
