"""
Schémas Pydantic pour le marquage des présences.

Statuts acceptés : PRESENT, ABSENT. La valeur LATE n'est pas reconnue.
"""

import uuid
import datetime as dt
from typing import List, Optional

from pydantic import BaseModel, field_validator

from app.schemas.schedule import ScheduleResponse

VALID_ATTENDANCE_STATUSES = {"PRESENT", "ABSENT"}


class AttendanceRecordIn(BaseModel):
    child_id: uuid.UUID
    status: str
    notes: Optional[str] = None

    @field_validator("status")
    @classmethod
    def valid_status(cls, v: str) -> str:
        v = v.strip().upper()
        if v not in VALID_ATTENDANCE_STATUSES:
            raise ValueError(f"Statut invalide. Valeurs acceptées : {sorted(VALID_ATTENDANCE_STATUSES)}")
        return v


class AttendanceMark(BaseModel):
    """Lot complet de présences d'une séance : remplace le marquage précédent."""
    records: List[AttendanceRecordIn]

    @field_validator("records")
    @classmethod
    def not_empty_and_unique(cls, v: List[AttendanceRecordIn]) -> List[AttendanceRecordIn]:
        if not v:
            raise ValueError("La liste des présences ne peut pas être vide.")
        child_ids = [r.child_id for r in v]
        if len(child_ids) != len(set(child_ids)):
            raise ValueError("Un enfant ne peut apparaître qu'une seule fois par marquage.")
        return v


class AttendanceResponse(BaseModel):
    id: uuid.UUID
    schedule_id: uuid.UUID
    child_id: uuid.UUID
    child_first_name: str
    child_last_name: str
    status: str
    notes: Optional[str]
    marked_by: Optional[uuid.UUID]
    marked_by_name: Optional[str]
    created_at: Optional[dt.datetime]


class RosterChild(BaseModel):
    id: uuid.UUID
    first_name: str
    last_name: str


class ScheduleAttendanceResponse(BaseModel):
    schedule: ScheduleResponse
    students: List[RosterChild]
    records: List[AttendanceResponse]


class ChildAttendanceItem(BaseModel):
    id: uuid.UUID
    schedule_id: uuid.UUID
    schedule_date: dt.datetime
    class_id: uuid.UUID
    class_name: str
    status: str
    notes: Optional[str]
    created_at: Optional[dt.datetime]
