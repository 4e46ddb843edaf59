"""
Schémas Pydantic pour les événements et annonces.
"""

import uuid
import datetime as dt
from typing import Optional

from pydantic import BaseModel, field_validator

from app.datetime_utils import to_naive_utc

VALID_EVENT_TYPES = {"ANNOUNCEMENT", "EVENT", "BIRTHDAY", "MEMORY_VERSE"}
EDITABLE_EVENT_STATUSES = {"DRAFT", "SCHEDULED"}


class EventCreate(BaseModel):
    title: str
    type: str
    description: Optional[str] = None
    date: dt.datetime
    scheduled_for: Optional[dt.datetime] = None  # si fourni, l'annonce part automatiquement

    @field_validator("date", "scheduled_for")
    @classmethod
    def dates_to_utc(cls, v: Optional[dt.datetime]) -> Optional[dt.datetime]:
        return to_naive_utc(v)

    @field_validator("title")
    @classmethod
    def title_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le titre ne peut pas être vide.")
        return v.strip()

    @field_validator("type")
    @classmethod
    def valid_type(cls, v: str) -> str:
        if v not in VALID_EVENT_TYPES:
            raise ValueError(f"Type invalide. Valeurs acceptées : {sorted(VALID_EVENT_TYPES)}")
        return v


class EventUpdate(BaseModel):
    title: Optional[str] = None
    type: Optional[str] = None
    description: Optional[str] = None
    date: Optional[dt.datetime] = None
    scheduled_for: Optional[dt.datetime] = None
    status: Optional[str] = None

    @field_validator("date", "scheduled_for")
    @classmethod
    def dates_to_utc(cls, v: Optional[dt.datetime]) -> Optional[dt.datetime]:
        return to_naive_utc(v)

    @field_validator("type")
    @classmethod
    def valid_type(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in VALID_EVENT_TYPES:
            raise ValueError(f"Type invalide. Valeurs acceptées : {sorted(VALID_EVENT_TYPES)}")
        return v

    @field_validator("status")
    @classmethod
    def valid_status(cls, v: Optional[str]) -> Optional[str]:
        # SENT est réservé au job de publication
        if v is not None and v not in EDITABLE_EVENT_STATUSES:
            raise ValueError(f"Statut invalide. Valeurs acceptées : {sorted(EDITABLE_EVENT_STATUSES)}")
        return v


class EventResponse(BaseModel):
    id: uuid.UUID
    title: str
    type: str
    description: Optional[str]
    date: dt.datetime
    created_by: Optional[uuid.UUID]
    scheduled_for: Optional[dt.datetime]
    status: str
    created_at: Optional[dt.datetime] = None

    model_config = {"from_attributes": True}
