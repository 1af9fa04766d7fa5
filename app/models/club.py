"""
Club Model
One row per directory entry; tag sets live in the link tables
"""

from sqlalchemy import Column, Integer, String, Text, Boolean
from app.database import Base


class Club(Base):
    __tablename__ = "clubs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    # Legacy single-field value, kept as the fallback for clubs without field tags
    subject = Column(String(100), nullable=True)

    # Schedule
    meeting_frequency = Column(String(20), nullable=True)
    meeting_time_type = Column(String(20), nullable=True)
    meeting_time_range = Column(String(100), nullable=True)
    meeting_room = Column(String(50), nullable=True)

    # Requirements
    open_to_all = Column(Boolean, nullable=False, server_default="0")
    prereq_required = Column(Boolean, nullable=False, server_default="0")
    prerequisites = Column(Text, nullable=True)
    volunteer_hours = Column(Boolean, nullable=False, server_default="0")

    description = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, server_default="approved")
    website_url = Column(String(512), nullable=True)
    president_contact = Column(String(255), nullable=True)
