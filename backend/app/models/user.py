"""
Modèles SQLAlchemy pour les utilisateurs et les familles.
"""

import uuid
from sqlalchemy import JSON, Column, DateTime, ForeignKey, String, Text, func
from sqlalchemy.dialects.postgresql import UUID

from app.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(150), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="PARENT")  # ADMIN, TEACHER, PARENT
    # use_alter : FK circulaire users.family_id ↔ families.primary_contact_id
    family_id = Column(
        UUID(as_uuid=True),
        ForeignKey("families.id", ondelete="SET NULL", use_alter=True),
        nullable=True,
    )
    availability = Column(JSON, nullable=True)  # ["Sunday", "Wednesday"], enseignants uniquement
    profile_picture_url = Column(String(500), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class Family(Base):
    """Foyer regroupant plusieurs comptes ; les membres portent family_id."""
    __tablename__ = "families"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    family_name = Column(String(150), nullable=False)
    primary_contact_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    address = Column(String(255), nullable=True)
    phone_number = Column(String(50), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
