"""
Modèles SQLAlchemy pour les créneaux de bénévolat rattachés aux événements.
"""

import uuid
from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.dialects.postgresql import UUID

from app.database import Base


class VolunteerSlot(Base):
    __tablename__ = "volunteer_slots"
    __table_args__ = (CheckConstraint("slots_available >= 0", name="ck_volunteer_slots_available"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    event_id = Column(UUID(as_uuid=True), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    slots_available = Column(Integer, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class VolunteerSignup(Base):
    """Inscription d'un parent sur un créneau (une seule par créneau)."""
    __tablename__ = "volunteer_signups"

    slot_id = Column(UUID(as_uuid=True), ForeignKey("volunteer_slots.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    signed_up_at = Column(DateTime, server_default=func.now())
