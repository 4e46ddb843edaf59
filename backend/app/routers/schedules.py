"""
Router pour les séances et le marquage des présences.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from app.database import get_db
from app.datetime_utils import to_naive_utc
from app.dependencies import get_current_user, require_role
from app.schemas.attendance import AttendanceMark, AttendanceResponse, ScheduleAttendanceResponse
from app.schemas.schedule import (
    RecurringScheduleCreate,
    ScheduleCreate,
    ScheduleResponse,
    ScheduleUpdate,
)
from app.schemas.user import CurrentUser
from app.services import attendance_service, schedule_service

router = APIRouter(prefix="/api/v1/schedules", tags=["Séances"])

admin_only = require_role("ADMIN")
staff_only = require_role("TEACHER", "ADMIN")


@router.post("", response_model=ScheduleResponse, status_code=201, summary="Créer une séance")
def create_schedule(data: ScheduleCreate, db: Session = Depends(get_db), _: CurrentUser = Depends(admin_only)):
    """
    Crée une séance et fige la liste des enfants de la classe à cet instant.
    Les enfants assignés plus tard à la classe n'y figureront pas.
    """
    return schedule_service.create_schedule(db, data)


@router.post("/recurring", response_model=List[ScheduleResponse], status_code=201,
             summary="Créer une série de séances")
def create_recurring_schedules(
    data: RecurringScheduleCreate,
    db: Session = Depends(get_db),
    _: CurrentUser = Depends(admin_only),
):
    return schedule_service.create_recurring_schedules(db, data)


@router.get("", response_model=List[ScheduleResponse], summary="Lister les séances")
def list_schedules(
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    teacher_id: Optional[uuid.UUID] = None,
    class_id: Optional[uuid.UUID] = None,
    db: Session = Depends(get_db),
    _: CurrentUser = Depends(get_current_user),
):
    return schedule_service.get_schedules(
        db, start=to_naive_utc(start), end=to_naive_utc(end), teacher_id=teacher_id, class_id=class_id,
    )


@router.get("/mine", response_model=List[ScheduleResponse], summary="Mes séances à venir")
def list_my_schedules(db: Session = Depends(get_db), current_user: CurrentUser = Depends(require_role("TEACHER"))):
    return schedule_service.get_teacher_schedules(db, current_user.id)


@router.get("/{schedule_id}", response_model=ScheduleResponse, summary="Détail d'une séance")
def get_schedule(schedule_id: uuid.UUID, db: Session = Depends(get_db), _: CurrentUser = Depends(get_current_user)):
    schedule = schedule_service.get_schedule(db, schedule_id)
    if schedule is None:
        raise HTTPException(status_code=404, detail="Séance introuvable.")
    return schedule


@router.put("/{schedule_id}", response_model=ScheduleResponse, summary="Modifier une séance")
def update_schedule(
    schedule_id: uuid.UUID,
    data: ScheduleUpdate,
    db: Session = Depends(get_db),
    _: CurrentUser = Depends(admin_only),
):
    """Changer de classe recalcule la liste des enfants ; les autres champs la conservent."""
    result = schedule_service.update_schedule(db, schedule_id, data)
    if result is None:
        raise HTTPException(status_code=404, detail="Séance introuvable.")
    return result


@router.delete("/{schedule_id}", status_code=204, summary="Supprimer une séance")
def delete_schedule(schedule_id: uuid.UUID, db: Session = Depends(get_db), _: CurrentUser = Depends(admin_only)):
    if not schedule_service.delete_schedule(db, schedule_id):
        raise HTTPException(status_code=404, detail="Séance introuvable.")


# --- Présences ---

@router.post("/{schedule_id}/attendance", response_model=List[AttendanceResponse],
             summary="Marquer les présences")
def mark_attendance(
    schedule_id: uuid.UUID,
    data: AttendanceMark,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_role("TEACHER")),
):
    """
    Enregistre les présences de la séance.
    Le lot remplace entièrement le marquage précédent.
    Réservé à l'enseignant de la séance.
    """
    return attendance_service.mark_attendance(db, schedule_id, current_user.id, data.records)


@router.get("/{schedule_id}/attendance", response_model=ScheduleAttendanceResponse,
            summary="Présences d'une séance")
def get_schedule_attendance(
    schedule_id: uuid.UUID,
    db: Session = Depends(get_db),
    _: CurrentUser = Depends(staff_only),
):
    return attendance_service.get_schedule_attendance(db, schedule_id)


@router.get("/{schedule_id}/attendance/export", summary="Exporter les présences en CSV")
def export_schedule_attendance(
    schedule_id: uuid.UUID,
    db: Session = Depends(get_db),
    _: CurrentUser = Depends(staff_only),
):
    """Exporte les présences d'une séance en CSV (UTF-8 BOM, séparateur ;)."""
    csv_content = attendance_service.export_schedule_attendance_csv(db, schedule_id)
    return StreamingResponse(
        iter([csv_content]),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f"attachment; filename=presences_{schedule_id}.csv"},
    )
