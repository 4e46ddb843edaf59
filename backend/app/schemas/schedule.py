"""
Schémas Pydantic pour les séances.

Note : on importe datetime en tant que module (dt) pour éviter le conflit de nommage
entre le champ `date` et le type dans Pydantic v2.
"""

import uuid
import datetime as dt
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from app.datetime_utils import to_naive_utc

VALID_FREQUENCIES = {"daily", "weekly", "monthly"}
MAX_OCCURRENCES = 52


class Recurrence(BaseModel):
    frequency: str
    interval: int = 1
    count: int

    @field_validator("frequency")
    @classmethod
    def valid_frequency(cls, v: str) -> str:
        if v not in VALID_FREQUENCIES:
            raise ValueError(f"Fréquence invalide. Valeurs acceptées : {sorted(VALID_FREQUENCIES)}")
        return v

    @field_validator("interval")
    @classmethod
    def interval_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("L'intervalle doit être au moins 1.")
        return v

    @field_validator("count")
    @classmethod
    def count_in_range(cls, v: int) -> int:
        if not 1 <= v <= MAX_OCCURRENCES:
            raise ValueError(f"Le nombre d'occurrences doit être compris entre 1 et {MAX_OCCURRENCES}.")
        return v


class ScheduleCreate(BaseModel):
    class_id: uuid.UUID
    teacher_id: uuid.UUID
    date: dt.datetime
    room: Optional[str] = None
    # Décalage du client, conservé pour juger la disponibilité en heure locale
    utc_offset: Optional[dt.timedelta] = Field(default=None, exclude=True)

    @model_validator(mode="after")
    def date_to_utc(self) -> "ScheduleCreate":
        self.utc_offset = self.date.utcoffset()
        self.date = to_naive_utc(self.date)
        return self

    @field_validator("room")
    @classmethod
    def room_strip(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None


class RecurringScheduleCreate(ScheduleCreate):
    recurrence: Recurrence


class ScheduleUpdate(BaseModel):
    class_id: Optional[uuid.UUID] = None   # si fourni, le snapshot est recalculé
    teacher_id: Optional[uuid.UUID] = None
    date: Optional[dt.datetime] = None
    room: Optional[str] = None
    utc_offset: Optional[dt.timedelta] = Field(default=None, exclude=True)

    @model_validator(mode="after")
    def date_to_utc(self) -> "ScheduleUpdate":
        if self.date is not None:
            self.utc_offset = self.date.utcoffset()
            self.date = to_naive_utc(self.date)
        return self

    @field_validator("room")
    @classmethod
    def room_strip(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None


class ScheduleResponse(BaseModel):
    id: uuid.UUID
    class_id: uuid.UUID
    teacher_id: Optional[uuid.UUID]
    date: dt.datetime
    room: Optional[str]
    student_ids: List[uuid.UUID]
    total_students: int
    created_at: dt.datetime
    updated_at: dt.datetime
