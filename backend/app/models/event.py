"""
Modèle SQLAlchemy pour les événements et annonces.
"""

import uuid
from sqlalchemy import Column, DateTime, ForeignKey, String, Text, func
from sqlalchemy.dialects.postgresql import UUID

from app.database import Base


class Event(Base):
    __tablename__ = "events"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String(255), nullable=False)
    type = Column(String(20), nullable=False)  # ANNOUNCEMENT, EVENT, BIRTHDAY, MEMORY_VERSE
    description = Column(Text, nullable=True)
    date = Column(DateTime, nullable=False)
    created_by = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    scheduled_for = Column(DateTime, nullable=True, index=True)  # publication programmée
    status = Column(String(20), default="DRAFT")  # DRAFT, SCHEDULED, SENT
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
