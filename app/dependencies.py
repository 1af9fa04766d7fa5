"""
Request Dependencies
Database handle (with lazy reconnect) and the failed-attempt store
"""

import logging

from databases import Database
from fastapi import Request
from starlette.concurrency import run_in_threadpool

from app.database import error_code, error_message
from app.errors import DatabaseError
from app.migrations import run_schema_reconciliation
from app.services.rate_limiter import AttemptStore

logger = logging.getLogger(__name__)


async def connect_database(state) -> bool:
    """
    Make sure the schema has been reconciled and the pool is open

    Called at startup and again on requests while the database is down, so the
    service recovers without a restart. Returns True when queries can run.
    """
    async with state.connect_lock:
        if not state.schema_ready:
            report = await run_in_threadpool(run_schema_reconciliation, state.engine)
            state.schema_ready = report.connected

        database: Database = state.database
        if not database.is_connected:
            try:
                await database.connect()
            except Exception as exc:
                logger.error(
                    "[db] connection failed (API calls will fail until fixed): [%s] %s",
                    error_code(exc), error_message(exc),
                )
                return False
            logger.info("[db] connected")
        return True


async def get_database(request: Request) -> Database:
    state = request.app.state
    if state.database.is_connected and state.schema_ready:
        return state.database
    if not await connect_database(state):
        raise DatabaseError(diagnostics=False)
    return state.database


def get_attempt_store(request: Request) -> AttemptStore:
    return request.app.state.attempt_store
