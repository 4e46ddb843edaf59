"""
Schémas Pydantic pour les enfants.
"""

import uuid
import datetime as dt
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator


class ChildCreate(BaseModel):
    first_name: str
    last_name: str
    date_of_birth: dt.date
    allergies: Optional[str] = None
    special_notes: Optional[str] = None

    @field_validator("first_name", "last_name")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le champ ne peut pas être vide.")
        return v.strip()

    @field_validator("date_of_birth")
    @classmethod
    def not_in_future(cls, v: dt.date) -> dt.date:
        if v > dt.date.today():
            raise ValueError("La date de naissance ne peut pas être dans le futur.")
        return v


class ChildUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    date_of_birth: Optional[dt.date] = None
    allergies: Optional[str] = None
    special_notes: Optional[str] = None

    @field_validator("first_name", "last_name")
    @classmethod
    def not_empty(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Le champ ne peut pas être vide.")
        return v.strip() if v else v


class ChildResponse(BaseModel):
    id: uuid.UUID
    first_name: str
    last_name: str
    date_of_birth: dt.date
    parent_id: uuid.UUID
    assigned_class_id: Optional[uuid.UUID]
    allergies: Optional[str]
    special_notes: Optional[str]
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
