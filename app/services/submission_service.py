"""
Submission Service
Creates or updates one club and replaces its tag sets in a single transaction
"""

import logging
from typing import List, Optional

from databases import Database
from databases.core import Connection

from app.constants import DAY_IDS, DEFAULT_STATUS
from app.database import is_duplicate_key, translate_db_errors
from app.errors import Conflict
from app.schemas.submission import PresidentSubmission

logger = logging.getLogger(__name__)


class SubmissionService:
    """Upsert of a validated president submission"""

    @staticmethod
    async def upsert_club(db: Database, submission: PresidentSubmission) -> int:
        """
        Create or update the club named in the submission

        The club row and all four tag sets change together or not at all.
        Tag sets are replaced wholesale rather than diffed.

        Args:
            db: Connected database
            submission: Payload that already passed validation

        Returns:
            The club id

        Raises:
            Conflict: A concurrent submission inserted the same name first
            DatabaseError: Any other engine failure (code/message attached)
        """
        async with translate_db_errors("/api/presidents/submit", diagnostics=True):
            async with db.connection() as conn:
                async with conn.transaction():
                    club_id = await SubmissionService._save_club(conn, submission)
                    await SubmissionService._replace_meeting_days(conn, club_id, submission.normalized_meeting_days)
                    await SubmissionService._replace_subfields(conn, club_id, submission.normalized_subfields)
                    await SubmissionService._replace_categories(conn, club_id, submission.normalized_categories)
                    await SubmissionService._replace_fields(conn, club_id, submission.normalized_fields)

        logger.info("Saved club %s (%r)", club_id, submission.club_name)
        return club_id

    @staticmethod
    async def _club_id(conn: Connection, name: str) -> Optional[int]:
        return await conn.fetch_val("SELECT id FROM clubs WHERE name = :name", {"name": name})

    @staticmethod
    async def _save_club(conn: Connection, submission: PresidentSubmission) -> int:
        values = {
            "subject": submission.subject,
            "meeting_frequency": submission.meeting_frequency,
            "meeting_time_type": submission.meeting_time_type,
            "meeting_time_range": submission.meeting_time_range,
            "meeting_room": submission.meeting_room,
            "open_to_all": submission.open_to_all,
            "prereq_required": submission.prereq_required,
            "prerequisites": submission.normalized_prerequisites,
            "description": submission.description,
            "volunteer_hours": submission.volunteer_hours,
            "website_url": submission.normalized_website_url,
            "president_contact": submission.president_contact or None,
        }

        club_id = await SubmissionService._club_id(conn, submission.club_name)

        if club_id is not None:
            await conn.execute(
                """
                UPDATE clubs SET
                    subject = :subject, meeting_frequency = :meeting_frequency,
                    meeting_time_type = :meeting_time_type, meeting_time_range = :meeting_time_range,
                    meeting_room = :meeting_room, open_to_all = :open_to_all,
                    prereq_required = :prereq_required, prerequisites = :prerequisites,
                    description = :description, volunteer_hours = :volunteer_hours,
                    website_url = :website_url, president_contact = :president_contact
                WHERE id = :id
                """,
                {**values, "id": club_id}
            )
            return club_id

        try:
            await conn.execute(
                """
                INSERT INTO clubs
                    (name, subject, meeting_frequency, meeting_time_type, meeting_time_range,
                     meeting_room, open_to_all, prereq_required, prerequisites, description,
                     volunteer_hours, website_url, president_contact, status)
                VALUES
                    (:name, :subject, :meeting_frequency, :meeting_time_type, :meeting_time_range,
                     :meeting_room, :open_to_all, :prereq_required, :prerequisites, :description,
                     :volunteer_hours, :website_url, :president_contact, :status)
                """,
                {**values, "name": submission.club_name, "status": DEFAULT_STATUS}
            )
        except Exception as exc:
            # The only unique key a new clubs row can violate is the name index
            if is_duplicate_key(exc):
                logger.warning("Club %r was inserted concurrently", submission.club_name)
                raise Conflict() from exc
            raise

        # Portable across engines: re-read by the identity key inside the transaction
        return await SubmissionService._club_id(conn, submission.club_name)

    @staticmethod
    async def _replace_meeting_days(conn: Connection, club_id: int, days: List[str]) -> None:
        await conn.execute("DELETE FROM club_meeting_days WHERE club_id = :club_id", {"club_id": club_id})
        rows = [{"club_id": club_id, "day_id": DAY_IDS[day]} for day in days if day in DAY_IDS]
        if rows:
            await conn.execute_many(
                "INSERT INTO club_meeting_days (club_id, day_id) VALUES (:club_id, :day_id)",
                rows
            )

    @staticmethod
    async def _subfield_id(conn: Connection, label: str) -> Optional[int]:
        return await conn.fetch_val("SELECT id FROM subfields WHERE label = :label", {"label": label})

    @staticmethod
    async def _get_or_create_subfield(conn: Connection, label: str) -> int:
        """Subfield id for a label, inserting the label if nobody has yet"""
        subfield_id = await SubmissionService._subfield_id(conn, label)
        if subfield_id is not None:
            return subfield_id

        try:
            # Savepoint so a lost race leaves the outer transaction usable
            async with conn.transaction():
                await conn.execute("INSERT INTO subfields (label) VALUES (:label)", {"label": label})
        except Exception as exc:
            if not is_duplicate_key(exc):
                raise
            logger.info("Subfield %r was inserted concurrently", label)

        return await SubmissionService._subfield_id(conn, label)

    @staticmethod
    async def _replace_subfields(conn: Connection, club_id: int, labels: List[str]) -> None:
        subfield_ids: List[int] = []
        for label in labels:
            subfield_id = await SubmissionService._get_or_create_subfield(conn, label)
            # Labels differing only by case share a row under case-insensitive collations
            if subfield_id not in subfield_ids:
                subfield_ids.append(subfield_id)

        await conn.execute("DELETE FROM club_subfields WHERE club_id = :club_id", {"club_id": club_id})
        if subfield_ids:
            await conn.execute_many(
                "INSERT INTO club_subfields (club_id, subfield_id) VALUES (:club_id, :subfield_id)",
                [{"club_id": club_id, "subfield_id": sid} for sid in subfield_ids]
            )

    @staticmethod
    async def _replace_categories(conn: Connection, club_id: int, categories: List[str]) -> None:
        await conn.execute("DELETE FROM club_categories WHERE club_id = :club_id", {"club_id": club_id})
        if categories:
            await conn.execute_many(
                "INSERT INTO club_categories (club_id, category) VALUES (:club_id, :category)",
                [{"club_id": club_id, "category": c} for c in categories]
            )

    @staticmethod
    async def _replace_fields(conn: Connection, club_id: int, fields: List[str]) -> None:
        await conn.execute("DELETE FROM club_fields WHERE club_id = :club_id", {"club_id": club_id})
        if fields:
            await conn.execute_many(
                "INSERT INTO club_fields (club_id, field_label) VALUES (:club_id, :field_label)",
                [{"club_id": club_id, "field_label": f} for f in fields]
            )
