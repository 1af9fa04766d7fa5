"""
Schema Migration Record
One row per reconciler step that has been applied to this database
"""

from sqlalchemy import Column, String, DateTime, func
from app.database import Base


class SchemaMigration(Base):
    __tablename__ = "schema_migrations"

    version = Column(String(20), primary_key=True)
    name = Column(String(200), nullable=False)
    applied_at = Column(DateTime(timezone=True), server_default=func.now())
