"""
Authentication Dependencies
Admin code checks for protected routes
"""

import json
import logging
from typing import Optional

from fastapi import Header, Request

from app.auth.codes import admin_code_matches
from app.errors import Unauthorized

logger = logging.getLogger(__name__)


async def _body_credentials(request: Request) -> dict:
    """Admin pages may send the code in the JSON body instead of headers"""
    if request.method in ("GET", "HEAD"):
        return {}
    body = await request.body()
    if not body:
        return {}
    try:
        payload = json.loads(body)
    except ValueError:
        return {}
    return payload if isinstance(payload, dict) else {}


async def require_admin(
    request: Request,
    x_admin_code: Optional[str] = Header(None, alias="X-Admin-Code"),
    x_admin_hash: Optional[str] = Header(None, alias="X-Admin-Hash"),
) -> bool:
    """
    Require the configured admin code (plain or SHA-256) on the request

    Raises:
        Unauthorized: If neither headers nor body carry a matching code
    """
    settings = request.app.state.settings
    code, code_hash = x_admin_code, x_admin_hash
    if not code and not code_hash:
        body = await _body_credentials(request)
        code, code_hash = body.get("code"), body.get("code_hash")

    if not admin_code_matches(
        code if isinstance(code, str) else None,
        code_hash if isinstance(code_hash, str) else None,
        settings.ADMIN_CODE,
    ):
        logger.info("Rejected admin request %s %s", request.method, request.url.path)
        raise Unauthorized()
    return True


def client_ip(request: Request) -> str:
    """Client address, honouring X-Forwarded-For behind a trusted proxy"""
    if request.app.state.settings.TRUST_PROXY:
        forwarded = request.headers.get("x-forwarded-for", "")
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return request.client.host if request.client else "unknown"
