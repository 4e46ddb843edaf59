"""
Schémas Pydantic pour les classes.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, field_validator

from app.schemas.child import ChildResponse


class ClassCreate(BaseModel):
    name: str
    age_range: str
    capacity: int
    description: Optional[str] = None
    teacher_id: Optional[uuid.UUID] = None

    @field_validator("name", "age_range")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le champ ne peut pas être vide.")
        return v.strip()

    @field_validator("capacity")
    @classmethod
    def capacity_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("La capacité doit être un entier strictement positif.")
        return v


class ClassUpdate(BaseModel):
    name: Optional[str] = None
    age_range: Optional[str] = None
    capacity: Optional[int] = None
    description: Optional[str] = None
    teacher_id: Optional[uuid.UUID] = None

    @field_validator("name", "age_range")
    @classmethod
    def not_empty(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Le champ ne peut pas être vide.")
        return v.strip() if v else v

    @field_validator("capacity")
    @classmethod
    def capacity_positive(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 1:
            raise ValueError("La capacité doit être un entier strictement positif.")
        return v


class ClassChildAssign(BaseModel):
    """Corps de requête pour assigner un enfant à une classe."""
    child_id: uuid.UUID


class ClassResponse(BaseModel):
    id: uuid.UUID
    name: str
    age_range: str
    capacity: int
    description: Optional[str]
    teacher_id: Optional[uuid.UUID]
    archived: bool
    nb_students: int
    created_at: datetime
    updated_at: datetime


class ClassDetailResponse(ClassResponse):
    students: List[ChildResponse] = []
