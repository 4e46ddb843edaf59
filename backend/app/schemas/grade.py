"""
Schémas Pydantic pour le carnet de notes.
"""

import uuid
import datetime as dt
from typing import Optional

from pydantic import BaseModel, field_validator

from app.datetime_utils import to_naive_utc


class GradeCreate(BaseModel):
    child_id: uuid.UUID
    class_id: uuid.UUID
    assignment_title: str
    grade: str
    notes: Optional[str] = None
    date: dt.datetime

    @field_validator("assignment_title", "grade")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le champ ne peut pas être vide.")
        return v.strip()

    @field_validator("date")
    @classmethod
    def date_to_utc(cls, v: dt.datetime) -> dt.datetime:
        return to_naive_utc(v)


class GradeResponse(BaseModel):
    id: uuid.UUID
    child_id: uuid.UUID
    class_id: uuid.UUID
    teacher_id: Optional[uuid.UUID]
    assignment_title: str
    grade: str
    notes: Optional[str]
    date: dt.datetime
    created_at: Optional[dt.datetime] = None

    model_config = {"from_attributes": True}


class ClassGradeItem(GradeResponse):
    child_first_name: str
    child_last_name: str


class ChildGradeItem(GradeResponse):
    class_name: str
