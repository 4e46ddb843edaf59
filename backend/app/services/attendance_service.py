"""
Service métier pour le marquage des présences.

Un marquage remplace intégralement le précédent : toutes les lignes de la séance
sont supprimées puis le nouveau lot est inséré, dans une seule transaction.
La ligne de la séance est verrouillée pendant l'opération, deux marquages
concurrents de la même séance s'exécutent donc l'un après l'autre.
"""

import csv
import io
import uuid
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.exceptions import AppError, BadRequestError, ForbiddenError, NotFoundError
from app.models.attendance import Attendance
from app.models.child import Child
from app.models.schedule import Schedule, ScheduleStudent
from app.models.school_class import SchoolClass
from app.models.user import User
from app.schemas.attendance import (
    AttendanceRecordIn,
    AttendanceResponse,
    ChildAttendanceItem,
    RosterChild,
    ScheduleAttendanceResponse,
)
from app.schemas.user import CurrentUser
from app.services import schedule_service
from app.services.child_service import NOT_FOUND_OR_DENIED

logger = logging.getLogger(__name__)


def mark_attendance(
    db: Session,
    schedule_id: uuid.UUID,
    acting_teacher_id: uuid.UUID,
    records: List[AttendanceRecordIn],
) -> List[AttendanceResponse]:
    """
    Enregistre le lot de présences d'une séance.

    Lève NotFoundError si la séance n'existe pas, ForbiddenError si l'utilisateur
    n'est pas l'enseignant de la séance, BadRequestError si un enfant ne fait pas
    partie du snapshot de la séance. Aucune écriture n'a lieu dans ces cas.
    """
    try:
        schedule = db.execute(
            select(Schedule).where(Schedule.id == schedule_id).with_for_update()
        ).scalar()
        if schedule is None:
            raise NotFoundError("Séance introuvable.")
        if schedule.teacher_id != acting_teacher_id:
            raise ForbiddenError("Seul l'enseignant de la séance peut marquer les présences.")

        snapshot = set(_snapshot_ids(db, schedule_id))
        unknown = [r.child_id for r in records if r.child_id not in snapshot]
        if unknown:
            raise BadRequestError(
                f"{len(unknown)} enfant(s) ne font pas partie de cette séance : "
                + ", ".join(str(cid) for cid in unknown)
            )

        deleted = db.execute(delete(Attendance).where(Attendance.schedule_id == schedule_id))
        db.add_all([
            Attendance(
                schedule_id=schedule_id,
                child_id=r.child_id,
                status=r.status,
                notes=r.notes,
                marked_by=acting_teacher_id,
            )
            for r in records
        ])
        db.commit()
    except (AppError, SQLAlchemyError):
        db.rollback()
        raise

    logger.info(
        "Présences de la séance %s marquées par %s : %d ligne(s) remplacée(s), %d enregistrée(s)",
        schedule_id, acting_teacher_id, deleted.rowcount or 0, len(records),
    )
    return _get_records(db, schedule_id)


def get_schedule_attendance(db: Session, schedule_id: uuid.UUID) -> ScheduleAttendanceResponse:
    """Séance, enfants du snapshot et présences déjà marquées."""
    schedule = db.get(Schedule, schedule_id)
    if schedule is None:
        raise NotFoundError("Séance introuvable.")

    students = db.execute(
        select(Child)
        .join(ScheduleStudent, ScheduleStudent.child_id == Child.id)
        .where(ScheduleStudent.schedule_id == schedule_id)
        .order_by(Child.last_name, Child.first_name)
    ).scalars().all()

    return ScheduleAttendanceResponse(
        schedule=schedule_service.get_schedule(db, schedule_id),
        students=[RosterChild(id=s.id, first_name=s.first_name, last_name=s.last_name) for s in students],
        records=_get_records(db, schedule_id),
    )


def get_child_attendance(
    db: Session,
    child_id: uuid.UUID,
    requester: CurrentUser,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> List[ChildAttendanceItem]:
    """
    Historique des présences d'un enfant, de la séance la plus récente à la plus ancienne.
    Un parent ne peut consulter que ses propres enfants.
    """
    child = db.get(Child, child_id)
    if child is None:
        raise NotFoundError("Enfant introuvable.")
    if requester.role == "PARENT" and child.parent_id != requester.id:
        raise NotFoundError(NOT_FOUND_OR_DENIED)

    query = (
        select(Attendance, Schedule.date, Schedule.class_id, SchoolClass.name)
        .join(Schedule, Schedule.id == Attendance.schedule_id)
        .join(SchoolClass, SchoolClass.id == Schedule.class_id)
        .where(Attendance.child_id == child_id)
        .order_by(Schedule.date.desc())
    )
    if start is not None:
        query = query.where(Schedule.date >= start)
    if end is not None:
        query = query.where(Schedule.date <= end)

    return [
        ChildAttendanceItem(
            id=attendance.id,
            schedule_id=attendance.schedule_id,
            schedule_date=schedule_date,
            class_id=class_id,
            class_name=class_name,
            status=attendance.status,
            notes=attendance.notes,
            created_at=attendance.created_at,
        )
        for attendance, schedule_date, class_id, class_name in db.execute(query).all()
    ]


def export_schedule_attendance_csv(db: Session, schedule_id: uuid.UUID) -> str:
    """
    Génère le CSV des présences d'une séance.
    Retourne le contenu sous forme de string (UTF-8 BOM, séparateur ;).
    """
    if db.get(Schedule, schedule_id) is None:
        raise NotFoundError("Séance introuvable.")

    output = io.StringIO()
    writer = csv.writer(output, delimiter=";")
    writer.writerow(["child_id", "last_name", "first_name", "status", "notes", "marked_by", "marked_at"])

    for r in _get_records(db, schedule_id):
        writer.writerow([
            str(r.child_id),
            r.child_last_name,
            r.child_first_name,
            r.status,
            r.notes or "",
            r.marked_by_name or "",
            r.created_at.strftime("%Y-%m-%d %H:%M:%S") if r.created_at else "",
        ])

    return "\ufeff" + output.getvalue()  # BOM pour compatibilité Excel


def _snapshot_ids(db: Session, schedule_id: uuid.UUID) -> List[uuid.UUID]:
    return list(db.execute(
        select(ScheduleStudent.child_id).where(ScheduleStudent.schedule_id == schedule_id)
    ).scalars().all())


def _get_records(db: Session, schedule_id: uuid.UUID) -> List[AttendanceResponse]:
    """Lignes de présence de la séance avec le nom de l'enfant et de l'enseignant."""
    rows = db.execute(
        select(Attendance, Child.first_name, Child.last_name, User.name)
        .join(Child, Child.id == Attendance.child_id)
        .outerjoin(User, User.id == Attendance.marked_by)
        .where(Attendance.schedule_id == schedule_id)
        .order_by(Child.last_name, Child.first_name)
    ).all()

    return [
        AttendanceResponse(
            id=attendance.id,
            schedule_id=attendance.schedule_id,
            child_id=attendance.child_id,
            child_first_name=first_name,
            child_last_name=last_name,
            status=attendance.status,
            notes=attendance.notes,
            marked_by=attendance.marked_by,
            marked_by_name=marker_name,
            created_at=attendance.created_at,
        )
        for attendance, first_name, last_name, marker_name in rows
    ]
