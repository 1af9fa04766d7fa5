"""
Schema Reconciliation

Brings any prior database state (empty, partially migrated, or a legacy
installation) up to the current schema. Steps are registered in a fixed
order and each one inspects the live schema before changing it, so the
whole list is safe to run on every process start. Completed steps are
recorded in `schema_migrations` and skipped afterwards.

Order: base tables -> lookup tables -> link tables -> column renames ->
column backfills -> legacy key removal -> unique index.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

import sqlalchemy as sa
from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import inspect, select
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import DBAPIError

from app.constants import MEETING_DAYS
from app.database import error_message, is_duplicate_key
from app.models import (
    Club,
    MeetingDay,
    Subfield,
    ClubSubfield,
    ClubMeetingDay,
    ClubCategory,
    ClubField,
    SchemaMigration,
)

logger = logging.getLogger(__name__)

CLUB_IDENTITY_INDEX = "uq_clubs_name"
LEGACY_CLUB_INDEXES = ("uq_club_name_code", "uq_club_name_contact")
LEGACY_FIELD_COLUMNS = ("field", "label")
CLUB_FIELDS_KEY = ["club_id", "field_label"]


@dataclass
class MigrationStep:
    """
    One idempotent schema change

    `apply` returns True once the schema matches; returning False leaves the
    step unrecorded so it is attempted again on the next run.
    """
    version: str
    name: str
    apply: Callable[[Connection], bool]
    depends_on: Tuple[str, ...] = ()


@dataclass
class ReconcileReport:
    connected: bool = True
    applied: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    deferred: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.connected and not self.failed


def _operations(conn: Connection) -> Operations:
    return Operations(MigrationContext.configure(conn))


def _has_table(conn: Connection, table_name: str) -> bool:
    return inspect(conn).has_table(table_name)


def _column_names(conn: Connection, table_name: str) -> set:
    return {col["name"] for col in inspect(conn).get_columns(table_name)}


def _index_names(conn: Connection, table_name: str) -> set:
    insp = inspect(conn)
    names = {ix["name"] for ix in insp.get_indexes(table_name)}
    names |= {uq["name"] for uq in insp.get_unique_constraints(table_name)}
    names.discard(None)
    return names


def _create_table(conn: Connection, table: sa.Table) -> bool:
    if not _has_table(conn, table.name):
        table.create(conn, checkfirst=True)
        logger.info("[schema] Created table %s", table.name)
    return True


# ==================== STEPS ====================

def create_clubs_table(conn: Connection) -> bool:
    return _create_table(conn, Club.__table__)


def create_meeting_days_table(conn: Connection) -> bool:
    _create_table(conn, MeetingDay.__table__)

    days = MeetingDay.__table__
    existing = dict(conn.execute(select(days.c.id, days.c.name)).all())
    for day_id, name in MEETING_DAYS:
        if day_id not in existing:
            conn.execute(days.insert().values(id=day_id, name=name))
        elif existing[day_id] != name:
            conn.execute(days.update().where(days.c.id == day_id).values(name=name))
    return True


def create_subfields_table(conn: Connection) -> bool:
    return _create_table(conn, Subfield.__table__)


def create_club_subfields_table(conn: Connection) -> bool:
    return _create_table(conn, ClubSubfield.__table__)


def create_club_meeting_days_table(conn: Connection) -> bool:
    return _create_table(conn, ClubMeetingDay.__table__)


def create_club_categories_table(conn: Connection) -> bool:
    return _create_table(conn, ClubCategory.__table__)


def create_club_fields_table(conn: Connection) -> bool:
    return _create_table(conn, ClubField.__table__)


def _ensure_club_fields_key(conn: Connection) -> None:
    pk = inspect(conn).get_pk_constraint("club_fields")
    current = pk.get("constrained_columns") or []
    if sorted(current) == sorted(CLUB_FIELDS_KEY):
        return
    if conn.dialect.name == "sqlite":
        logger.warning(
            "[schema] club_fields is keyed on %s; SQLite cannot change a primary key in place",
            current,
        )
        return

    op = _operations(conn)
    if current:
        op.drop_constraint(pk.get("name") or "PRIMARY", "club_fields", type_="primary")
    op.create_primary_key("pk_club_fields", "club_fields", CLUB_FIELDS_KEY)
    logger.info("[schema] Re-keyed club_fields on (club_id, field_label)")


def rename_legacy_field_column(conn: Connection) -> bool:
    """Older installs stored the field tag as `field` or `label`"""
    columns = _column_names(conn, "club_fields")
    if "field_label" not in columns:
        legacy = next((name for name in LEGACY_FIELD_COLUMNS if name in columns), None)
        if legacy is None:
            # Rows without any label column carry no field data
            table = ClubField.__table__
            table.drop(conn)
            table.create(conn)
            logger.info("[schema] Recreated club_fields with field_label")
            return True

        _operations(conn).alter_column(
            "club_fields",
            legacy,
            new_column_name="field_label",
            existing_type=sa.String(100),
            existing_nullable=False,
        )
        logger.info("[schema] Renamed club_fields.%s to field_label", legacy)

    _ensure_club_fields_key(conn)
    return True


def _club_backfill_columns() -> List[sa.Column]:
    # Fresh Column objects on each call; alembic attaches them to a temp table
    return [
        sa.Column("subject", sa.String(100), nullable=True),
        sa.Column("meeting_frequency", sa.String(20), nullable=True),
        sa.Column("meeting_time_type", sa.String(20), nullable=True),
        sa.Column("meeting_time_range", sa.String(100), nullable=True),
        sa.Column("meeting_room", sa.String(50), nullable=True),
        sa.Column("open_to_all", sa.Boolean(), nullable=False, server_default="0"),
        sa.Column("prereq_required", sa.Boolean(), nullable=False, server_default="0"),
        sa.Column("prerequisites", sa.Text(), nullable=True),
        sa.Column("volunteer_hours", sa.Boolean(), nullable=False, server_default="0"),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="approved"),
        sa.Column("website_url", sa.String(512), nullable=True),
        sa.Column("president_contact", sa.String(255), nullable=True),
    ]


def backfill_club_columns(conn: Connection) -> bool:
    existing = _column_names(conn, "clubs")
    op = _operations(conn)
    for column in _club_backfill_columns():
        if column.name not in existing:
            op.add_column("clubs", column)
            logger.info("[schema] Added clubs.%s", column.name)
    return True


def drop_legacy_identity_keys(conn: Connection) -> bool:
    """Older installs keyed clubs on name plus president code or contact"""
    insp = inspect(conn)
    indexes = {ix["name"] for ix in insp.get_indexes("clubs")}
    # PostgreSQL and MySQL report named unique keys as constraints
    constraints = {uq["name"] for uq in insp.get_unique_constraints("clubs")}

    op = _operations(conn)
    for name in LEGACY_CLUB_INDEXES:
        if name in constraints:
            try:
                op.drop_constraint(name, "clubs", type_="unique")
            except NotImplementedError:
                # SQLite keeps table-level constraints until the table is rebuilt
                logger.warning("[schema] Cannot drop legacy constraint clubs.%s on this engine", name)
                continue
            logger.info("[schema] Dropped legacy unique constraint clubs.%s", name)
        elif name in indexes:
            op.drop_index(name, table_name="clubs")
            logger.info("[schema] Dropped legacy index clubs.%s", name)
    return True


def _duplicate_club_names(conn: Connection) -> List[str]:
    rows = conn.execute(sa.text("SELECT name FROM clubs GROUP BY name HAVING COUNT(*) > 1"))
    return list(rows.scalars())


def _defer_identity_index(detail: str) -> bool:
    logger.warning(
        "[schema] Duplicate club names prevent unique index clubs.%s (%s); "
        "leaving it absent until the duplicates are resolved",
        CLUB_IDENTITY_INDEX,
        detail,
    )
    return False


def create_club_identity_index(conn: Connection) -> bool:
    """Unique index on clubs.name, deferred while duplicate names exist"""
    if CLUB_IDENTITY_INDEX in _index_names(conn, "clubs"):
        return True

    duplicates = _duplicate_club_names(conn)
    if duplicates:
        return _defer_identity_index(", ".join(repr(name) for name in duplicates[:5]))

    # Last statement of the step, so a failure needs no savepoint
    try:
        _operations(conn).create_index(CLUB_IDENTITY_INDEX, "clubs", ["name"], unique=True)
    except DBAPIError as exc:
        if not is_duplicate_key(exc):
            raise
        return _defer_identity_index(error_message(exc))

    logger.info("[schema] Added unique index clubs(name)")
    return True


MIGRATIONS: List[MigrationStep] = [
    MigrationStep("1.0.0", "Create clubs table", create_clubs_table),
    MigrationStep("1.1.0", "Create and seed meeting_days", create_meeting_days_table),
    MigrationStep("1.2.0", "Create subfields table", create_subfields_table),
    MigrationStep("1.3.0", "Create club_subfields links", create_club_subfields_table, ("1.0.0", "1.2.0")),
    MigrationStep("1.3.1", "Create club_meeting_days links", create_club_meeting_days_table, ("1.0.0", "1.1.0")),
    MigrationStep("1.3.2", "Create club_categories links", create_club_categories_table, ("1.0.0",)),
    MigrationStep("1.3.3", "Create club_fields links", create_club_fields_table, ("1.0.0",)),
    MigrationStep("1.4.0", "Rename legacy club_fields column", rename_legacy_field_column, ("1.3.3",)),
    MigrationStep("1.5.0", "Backfill clubs columns", backfill_club_columns, ("1.0.0",)),
    MigrationStep("1.6.0", "Drop legacy club identity keys", drop_legacy_identity_keys, ("1.0.0",)),
    MigrationStep("1.7.0", "Unique index on clubs.name", create_club_identity_index, ("1.0.0", "1.5.0", "1.6.0")),
]


# ==================== RUNNER ====================

def applied_versions(engine: Engine) -> List[str]:
    """Versions recorded in schema_migrations (empty if the table is missing)"""
    with engine.connect() as conn:
        if not _has_table(conn, SchemaMigration.__tablename__):
            return []
        table = SchemaMigration.__table__
        rows = conn.execute(select(table.c.version)).all()
    return sorted((row[0] for row in rows), key=_version_tuple)


def _version_tuple(version: str) -> Tuple[int, ...]:
    return tuple(int(part) for part in version.split("."))


def _record(conn: Connection, step: MigrationStep) -> None:
    conn.execute(SchemaMigration.__table__.insert().values(version=step.version, name=step.name))


def run_schema_reconciliation(
    engine: Engine,
    steps: Optional[List[MigrationStep]] = None,
    force: bool = False,
) -> ReconcileReport:
    """
    Apply every pending step in order

    Args:
        engine: Sync SQLAlchemy engine
        steps: Step list (defaults to MIGRATIONS)
        force: Re-run steps even when already recorded

    Returns:
        ReconcileReport; never raises for database problems
    """
    steps = MIGRATIONS if steps is None else steps
    report = ReconcileReport()

    try:
        with engine.begin() as conn:
            SchemaMigration.__table__.create(conn, checkfirst=True)
        recorded = set(applied_versions(engine))
    except DBAPIError as exc:
        report.connected = False
        logger.error("[db] connection failed (API calls will fail until fixed): %s", exc.orig or exc)
        return report

    satisfied = set(recorded)
    for step in steps:
        if step.version in recorded and not force:
            continue

        missing = [dep for dep in step.depends_on if dep not in satisfied]
        if missing:
            logger.warning(
                "[schema] Skipping %s (%s): depends on unapplied %s",
                step.version, step.name, ", ".join(missing),
            )
            report.skipped.append(step.version)
            continue

        try:
            with engine.begin() as conn:
                done = step.apply(conn)
                if done and step.version not in recorded:
                    _record(conn, step)
        except Exception:
            logger.exception("[schema] Step %s (%s) failed", step.version, step.name)
            report.failed.append(step.version)
            continue

        if done:
            satisfied.add(step.version)
            report.applied.append(step.version)
        else:
            report.deferred.append(step.version)

    logger.info(
        "[schema] Reconciliation finished: %d applied, %d deferred, %d skipped, %d failed",
        len(report.applied), len(report.deferred), len(report.skipped), len(report.failed),
    )
    return report
