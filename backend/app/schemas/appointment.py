"""
Schémas Pydantic pour les demandes de rendez-vous.
"""

import uuid
import datetime as dt
from typing import Optional

from pydantic import BaseModel, field_validator

from app.datetime_utils import to_naive_utc

APPOINTMENT_DECISIONS = {"APPROVED", "REJECTED"}


class AppointmentCreate(BaseModel):
    teacher_id: uuid.UUID
    reason: str
    proposed_date: dt.datetime

    @field_validator("reason")
    @classmethod
    def reason_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le motif ne peut pas être vide.")
        return v.strip()

    @field_validator("proposed_date")
    @classmethod
    def date_to_utc(cls, v: dt.datetime) -> dt.datetime:
        return to_naive_utc(v)


class AppointmentStatusUpdate(BaseModel):
    status: str

    @field_validator("status")
    @classmethod
    def valid_decision(cls, v: str) -> str:
        v = v.strip().upper()
        if v not in APPOINTMENT_DECISIONS:
            raise ValueError(f"Statut invalide. Valeurs acceptées : {sorted(APPOINTMENT_DECISIONS)}")
        return v


class AppointmentResponse(BaseModel):
    id: uuid.UUID
    parent_id: uuid.UUID
    teacher_id: uuid.UUID
    reason: str
    proposed_date: dt.datetime
    status: str
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None

    model_config = {"from_attributes": True}
