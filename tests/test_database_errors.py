"""
Tests for database error classification and translation
"""
import asyncio
import sqlite3

import pytest
from sqlalchemy.exc import IntegrityError as SAIntegrityError

from app.database import error_code, error_message, is_duplicate_key, translate_db_errors
from app.errors import Conflict, DatabaseError, NotFound


class MySQLIntegrityError(Exception):
    """Shaped like the pymysql/aiomysql error: (errno, message) args"""


class PostgresUniqueViolation(Exception):
    sqlstate = "23505"


def run(coro):
    return asyncio.run(coro)


async def raise_inside(exc, **options):
    async with translate_db_errors("test operation", **options):
        raise exc


class TestClassification:

    def test_mysql_duplicate_entry(self):
        exc = MySQLIntegrityError(1062, "Duplicate entry 'Chess Club' for key 'uq_clubs_name'")

        assert is_duplicate_key(exc)
        assert error_code(exc) == 1062
        assert error_message(exc) == "Duplicate entry 'Chess Club' for key 'uq_clubs_name'"

    def test_postgres_unique_violation(self):
        exc = PostgresUniqueViolation("duplicate key value violates unique constraint")

        assert is_duplicate_key(exc)
        assert error_code(exc) == "23505"

    def test_sqlite_unique_constraint(self):
        assert is_duplicate_key(sqlite3.IntegrityError("UNIQUE constraint failed: clubs.name"))

    def test_sqlite_not_null_is_not_duplicate(self):
        assert not is_duplicate_key(sqlite3.IntegrityError("NOT NULL constraint failed: clubs.name"))

    def test_wrapped_driver_error(self):
        orig = sqlite3.IntegrityError("UNIQUE constraint failed: clubs.name")
        wrapped = SAIntegrityError("INSERT INTO clubs ...", {}, orig)

        assert is_duplicate_key(wrapped)
        assert error_code(wrapped) == "IntegrityError"
        assert error_message(wrapped) == "UNIQUE constraint failed: clubs.name"

    def test_other_mysql_errors(self):
        exc = MySQLIntegrityError(1146, "Table 'clubs_db.clubs' doesn't exist")

        assert not is_duplicate_key(exc)
        assert error_code(exc) == 1146


class TestTranslation:

    def test_duplicate_key_is_db_error(self):
        # Only the club insert knows a duplicate means a name conflict
        with pytest.raises(DatabaseError) as info:
            run(raise_inside(sqlite3.IntegrityError("UNIQUE constraint failed: club_fields.club_id, club_fields.field_label")))

        assert info.value.code == "IntegrityError"

    def test_conflict_raised_inside_passes_through(self):
        with pytest.raises(Conflict) as info:
            run(raise_inside(Conflict()))

        assert info.value.status_code == 409
        assert info.value.payload == {"error": "duplicate_name"}

    def test_diagnostics_attached(self):
        with pytest.raises(DatabaseError) as info:
            run(raise_inside(MySQLIntegrityError(1146, "Table missing"), diagnostics=True))

        assert info.value.status_code == 500
        assert info.value.payload == {"error": "db_error", "db_code": 1146, "db_message": "Table missing"}

    def test_diagnostics_hidden_by_default(self):
        with pytest.raises(DatabaseError) as info:
            run(raise_inside(MySQLIntegrityError(1146, "Table missing")))

        assert info.value.payload == {"error": "db_error"}
        assert info.value.code == 1146

    def test_api_errors_pass_through(self):
        with pytest.raises(NotFound):
            run(raise_inside(NotFound()))

    def test_errors_are_logged(self, caplog):
        with pytest.raises(DatabaseError):
            run(raise_inside(MySQLIntegrityError(2013, "Lost connection")))

        assert "test operation failed: [2013] Lost connection" in caplog.text
