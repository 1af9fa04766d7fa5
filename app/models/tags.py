"""
Tag Models
Lookup tables and the many-to-many link rows hanging off clubs
"""

from sqlalchemy import Column, Integer, String, ForeignKey
from app.database import Base


class MeetingDay(Base):
    __tablename__ = "meeting_days"

    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(20), nullable=False, unique=True)


class Subfield(Base):
    __tablename__ = "subfields"

    id = Column(Integer, primary_key=True, autoincrement=True)
    label = Column(String(100), nullable=False, unique=True)


class ClubSubfield(Base):
    __tablename__ = "club_subfields"

    club_id = Column(Integer, ForeignKey("clubs.id", ondelete="CASCADE"), primary_key=True)
    subfield_id = Column(Integer, ForeignKey("subfields.id", ondelete="CASCADE"), primary_key=True)


class ClubMeetingDay(Base):
    __tablename__ = "club_meeting_days"

    club_id = Column(Integer, ForeignKey("clubs.id", ondelete="CASCADE"), primary_key=True)
    day_id = Column(Integer, ForeignKey("meeting_days.id", ondelete="CASCADE"), primary_key=True)


class ClubCategory(Base):
    __tablename__ = "club_categories"

    club_id = Column(Integer, ForeignKey("clubs.id", ondelete="CASCADE"), primary_key=True)
    category = Column(String(50), primary_key=True)


class ClubField(Base):
    __tablename__ = "club_fields"

    club_id = Column(Integer, ForeignKey("clubs.id", ondelete="CASCADE"), primary_key=True)
    field_label = Column(String(100), primary_key=True)
