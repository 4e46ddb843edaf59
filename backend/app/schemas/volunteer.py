"""
Schémas Pydantic pour les créneaux de bénévolat.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, field_validator


class VolunteerSlotCreate(BaseModel):
    event_id: uuid.UUID
    title: str
    slots_available: int

    @field_validator("title")
    @classmethod
    def title_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le titre ne peut pas être vide.")
        return v.strip()

    @field_validator("slots_available")
    @classmethod
    def slots_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Le nombre de places doit être au moins 1.")
        return v


class VolunteerSlotResponse(BaseModel):
    id: uuid.UUID
    event_id: uuid.UUID
    event_title: str
    event_date: datetime
    title: str
    slots_available: int
    volunteer_ids: List[uuid.UUID]
    created_at: Optional[datetime] = None
