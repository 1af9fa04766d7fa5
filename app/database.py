"""
Database Connection and Session Management
Async queries go through `databases`; schema work uses a sync SQLAlchemy engine
"""

import logging
import sqlite3
from contextlib import asynccontextmanager
from typing import Any, Optional

from databases import Database
from sqlalchemy import create_engine, MetaData
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm import declarative_base

from app.config import Settings
from app.errors import ApiError, DatabaseError

logger = logging.getLogger(__name__)

# Metadata for models
metadata = MetaData()

# Base class for models
Base = declarative_base(metadata=metadata)

MYSQL_DUPLICATE_ENTRY = 1062
POSTGRES_UNIQUE_VIOLATION = "23505"


def build_database(settings: Settings) -> Database:
    """Create the async database handle with a bounded pool"""
    url = settings.database_url
    if settings.is_sqlite:
        # aiosqlite opens one connection per acquire and takes no pool options
        return Database(url)

    db_options = {"min_size": 1, "max_size": settings.DB_POOL_SIZE}
    # Supabase/pgbouncer poolers reject prepared statements
    if "pooler.supabase.com" in url:
        db_options["statement_cache_size"] = 0
    return Database(url, **db_options)


def build_engine(settings: Settings) -> Engine:
    """Create the SQLAlchemy engine used for schema reconciliation"""
    return create_engine(settings.sync_database_url, pool_pre_ping=True)


def _unwrap(exc: BaseException) -> BaseException:
    # SQLAlchemy wraps the driver exception
    if isinstance(exc, DBAPIError) and exc.orig is not None:
        return exc.orig
    return exc


def error_code(exc: BaseException) -> Optional[Any]:
    """Best-effort engine error code (SQLSTATE, MySQL errno, or driver class)"""
    exc = _unwrap(exc)
    sqlstate = getattr(exc, "sqlstate", None) or getattr(exc, "pgcode", None)
    if sqlstate:
        return sqlstate
    if exc.args and isinstance(exc.args[0], int):
        return exc.args[0]
    return type(exc).__name__


def error_message(exc: BaseException) -> str:
    exc = _unwrap(exc)
    if len(exc.args) > 1 and isinstance(exc.args[0], int):
        return str(exc.args[1])
    return str(exc)


def is_duplicate_key(exc: BaseException) -> bool:
    """True when the engine rejected a write because of a unique key"""
    exc = _unwrap(exc)
    code = error_code(exc)
    if code in (MYSQL_DUPLICATE_ENTRY, POSTGRES_UNIQUE_VIOLATION):
        return True
    if isinstance(exc, sqlite3.IntegrityError):
        message = str(exc)
        return "UNIQUE constraint failed" in message or "PRIMARY KEY" in message
    return False


@asynccontextmanager
async def translate_db_errors(operation: str, diagnostics: bool = False):
    """
    Turn driver exceptions raised inside the block into API errors

    Args:
        operation: Label used in the log line
        diagnostics: Attach the engine code/message to the response
    """
    try:
        yield
    except ApiError:
        raise
    except Exception as exc:
        code, message = error_code(exc), error_message(exc)
        logger.error("%s failed: [%s] %s", operation, code, message, exc_info=True)
        raise DatabaseError(code=code, message=message, diagnostics=diagnostics) from exc
