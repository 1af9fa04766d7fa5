"""
Club Service
Directory queries and admin changes
"""

import logging
from typing import Dict, List, Optional

from databases import Database

from app.constants import DEFAULT_STATUS
from app.database import translate_db_errors
from app.errors import NotFound

logger = logging.getLogger(__name__)

CLUB_COLUMNS = """
    c.id, c.name, c.subject, c.meeting_frequency, c.meeting_time_type, c.meeting_time_range,
    c.meeting_room, c.open_to_all, c.prereq_required, c.prerequisites, c.description,
    c.volunteer_hours, c.status, c.website_url, c.president_contact
"""

# (response key, query returning club_id + value) for each tag set
TAG_QUERIES = (
    ("subfield", """
        SELECT cs.club_id, s.label AS value
        FROM club_subfields cs
        JOIN subfields s ON s.id = cs.subfield_id
        JOIN clubs c ON c.id = cs.club_id
        {where}
        ORDER BY s.label
    """),
    ("meeting_days", """
        SELECT cmd.club_id, d.name AS value
        FROM club_meeting_days cmd
        JOIN meeting_days d ON d.id = cmd.day_id
        JOIN clubs c ON c.id = cmd.club_id
        {where}
        ORDER BY d.id
    """),
    ("categories", """
        SELECT cc.club_id, cc.category AS value
        FROM club_categories cc
        JOIN clubs c ON c.id = cc.club_id
        {where}
        ORDER BY cc.category
    """),
    ("fields", """
        SELECT cf.club_id, cf.field_label AS value
        FROM club_fields cf
        JOIN clubs c ON c.id = cf.club_id
        {where}
        ORDER BY cf.field_label
    """),
)


def serialize_club(row) -> dict:
    """Club row to the JSON shape the pages expect (tags filled in later)"""
    return {
        "id": row["id"],
        "name": row["name"],
        "subject": row["subject"],
        "meeting_frequency": row["meeting_frequency"],
        "meeting_time_type": row["meeting_time_type"],
        "meeting_time_range": row["meeting_time_range"],
        "meeting_room": row["meeting_room"] or "",
        "open_to_all": bool(row["open_to_all"]),
        "prereq_required": bool(row["prereq_required"]),
        "prerequisites": row["prerequisites"] or "",
        "volunteer_hours": bool(row["volunteer_hours"]),
        "description": row["description"] or "",
        "status": row["status"],
        "website_url": row["website_url"] or None,
        "president_contact": row["president_contact"] or None,
        "subfield": [],
        "meeting_days": [],
        "categories": [],
        "fields": [],
    }


def apply_fields_fallback(club: dict) -> dict:
    """Clubs saved before multi-field support only have `subject`"""
    if not club["fields"] and club["subject"]:
        club["fields"] = [club["subject"]]
    return club


class ClubService:
    """Service for directory listing and admin management"""

    @staticmethod
    async def _attach_tags(db: Database, clubs: Dict[int, dict], where: str, params: dict) -> None:
        for key, query in TAG_QUERIES:
            rows = await db.fetch_all(query.format(where=where), params)
            for row in rows:
                club = clubs.get(row["club_id"])
                if club is not None:
                    club[key].append(row["value"])

    @staticmethod
    async def _list(db: Database, where: str, params: dict) -> List[dict]:
        rows = await db.fetch_all(
            f"SELECT {CLUB_COLUMNS} FROM clubs c {where} ORDER BY c.name",
            params
        )
        clubs = {row["id"]: serialize_club(row) for row in rows}
        if clubs:
            await ClubService._attach_tags(db, clubs, where, params)
        return [apply_fields_fallback(club) for club in clubs.values()]

    @staticmethod
    async def list_clubs(db: Database, include_pending: bool = False) -> List[dict]:
        """Approved clubs ordered by name (every status when include_pending)"""
        async with translate_db_errors("/api/clubs"):
            if include_pending:
                return await ClubService._list(db, "", {})
            return await ClubService._list(db, "WHERE c.status = :status", {"status": DEFAULT_STATUS})

    @staticmethod
    async def list_admin_clubs(db: Database) -> List[dict]:
        """Every club regardless of status"""
        async with translate_db_errors("/api/admin/clubs"):
            return await ClubService._list(db, "", {})

    @staticmethod
    async def get_club(db: Database, club_id: int) -> dict:
        """
        Get one club with its tag sets

        Raises:
            NotFound: If no club has this id
        """
        async with translate_db_errors("/api/clubs/:id"):
            clubs = await ClubService._list(db, "WHERE c.id = :club_id", {"club_id": club_id})
        if not clubs:
            raise NotFound()
        return clubs[0]

    @staticmethod
    async def update_club(db: Database, club_id: int, changes: dict) -> None:
        """Partial update of admin-editable columns"""
        if not changes:
            return
        assignments = ", ".join(f"{column} = :{column}" for column in changes)
        async with translate_db_errors("PATCH /api/clubs/:id"):
            await db.execute(
                f"UPDATE clubs SET {assignments} WHERE id = :club_id",
                {**changes, "club_id": club_id}
            )
        logger.info("Updated club %s: %s", club_id, ", ".join(changes))

    @staticmethod
    async def delete_club(db: Database, club_id: int) -> None:
        """Remove a club and all of its tag rows"""
        async with translate_db_errors("DELETE /api/clubs/:id"):
            async with db.transaction():
                # SQLite only cascades with PRAGMA foreign_keys enabled
                for table in ("club_subfields", "club_meeting_days", "club_categories", "club_fields"):
                    await db.execute(f"DELETE FROM {table} WHERE club_id = :club_id", {"club_id": club_id})
                await db.execute("DELETE FROM clubs WHERE id = :club_id", {"club_id": club_id})
        logger.info("Deleted club %s", club_id)

    @staticmethod
    async def approve_club(db: Database, club_id: int) -> None:
        """
        Publish a pending or rejected club

        Raises:
            NotFound: If no club has this id
        """
        async with translate_db_errors("/api/clubs/:id/approve"):
            existing: Optional[int] = await db.fetch_val(
                "SELECT id FROM clubs WHERE id = :club_id",
                {"club_id": club_id}
            )
            if existing is None:
                raise NotFound()
            await db.execute(
                "UPDATE clubs SET status = :status WHERE id = :club_id",
                {"status": DEFAULT_STATUS, "club_id": club_id}
            )
        logger.info("Approved club %s", club_id)
