"""
Service métier pour les séances (génération et édition).

À la création, le roster courant de la classe est copié dans schedule_students.
Ce snapshot n'évolue plus ensuite, sauf si la classe de la séance est modifiée :
il est alors recalculé depuis le roster de la nouvelle classe.
"""

import uuid
import logging
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from app.datetime_utils import add_months, utcnow, weekday_name
from app.exceptions import BadRequestError, ConflictError, NotFoundError
from app.models.child import Child
from app.models.schedule import Schedule, ScheduleStudent
from app.models.school_class import SchoolClass
from app.models.user import User
from app.schemas.schedule import (
    RecurringScheduleCreate,
    Recurrence,
    ScheduleCreate,
    ScheduleResponse,
    ScheduleUpdate,
)

logger = logging.getLogger(__name__)


def create_schedule(db: Session, data: ScheduleCreate) -> ScheduleResponse:
    """
    Crée une séance et y copie les enfants actuellement assignés à la classe.

    Lève NotFoundError si la classe ou l'enseignant n'existe pas,
    BadRequestError si l'utilisateur n'est pas enseignant ou pas disponible ce jour-là,
    ConflictError si la salle est déjà réservée à cette date.
    """
    _get_active_class(db, data.class_id)
    _check_teacher(db, data.teacher_id, data.date, data.utc_offset)
    _check_room_free(db, data.date, data.room)

    student_ids = _roster_snapshot(db, data.class_id)

    schedule = Schedule(
        class_id=data.class_id,
        teacher_id=data.teacher_id,
        date=data.date,
        room=data.room,
    )
    db.add(schedule)
    db.flush()  # Obtenir l'ID avant d'écrire le snapshot
    _write_snapshot(db, schedule.id, student_ids)

    db.commit()
    db.refresh(schedule)

    logger.info(
        "Séance créée : %s (classe %s, %s) : %d enfant(s) dans le snapshot",
        schedule.id, data.class_id, data.date.isoformat(), len(student_ids),
    )
    return _to_response(db, schedule)


def create_recurring_schedules(db: Session, data: RecurringScheduleCreate) -> List[ScheduleResponse]:
    """
    Crée `recurrence.count` séances à partir de `date`, espacées selon la fréquence.
    Toutes partagent le même snapshot ; tout est commité en une fois.
    """
    _get_active_class(db, data.class_id)
    dates = occurrence_dates(data.date, data.recurrence)
    for occurrence in dates:
        _check_teacher(db, data.teacher_id, occurrence, data.utc_offset)
        _check_room_free(db, occurrence, data.room)

    student_ids = _roster_snapshot(db, data.class_id)

    schedules = [
        Schedule(class_id=data.class_id, teacher_id=data.teacher_id, date=occurrence, room=data.room)
        for occurrence in dates
    ]
    db.add_all(schedules)
    db.flush()
    for schedule in schedules:
        _write_snapshot(db, schedule.id, student_ids)

    db.commit()
    for schedule in schedules:
        db.refresh(schedule)

    logger.info(
        "%d séance(s) %s créée(s) pour la classe %s : %d enfant(s) par snapshot",
        len(schedules), data.recurrence.frequency, data.class_id, len(student_ids),
    )
    return [_to_response(db, s) for s in schedules]


def occurrence_dates(start: datetime, recurrence: Recurrence) -> List[datetime]:
    """Dates des occurrences, la première étant `start`."""
    dates = []
    for i in range(recurrence.count):
        step = i * recurrence.interval
        if recurrence.frequency == "daily":
            dates.append(start + timedelta(days=step))
        elif recurrence.frequency == "weekly":
            dates.append(start + timedelta(weeks=step))
        else:
            dates.append(add_months(start, step))
    return dates


def get_schedules(
    db: Session,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    teacher_id: Optional[uuid.UUID] = None,
    class_id: Optional[uuid.UUID] = None,
) -> List[ScheduleResponse]:
    """Liste les séances filtrées, de la plus proche à la plus lointaine."""
    query = select(Schedule).order_by(Schedule.date)
    if start is not None:
        query = query.where(Schedule.date >= start)
    if end is not None:
        query = query.where(Schedule.date <= end)
    if teacher_id is not None:
        query = query.where(Schedule.teacher_id == teacher_id)
    if class_id is not None:
        query = query.where(Schedule.class_id == class_id)

    schedules = db.execute(query).scalars().all()
    return [_to_response(db, s) for s in schedules]


def get_teacher_schedules(db: Session, teacher_id: uuid.UUID) -> List[ScheduleResponse]:
    """Séances à venir d'un enseignant."""
    return get_schedules(db, start=utcnow(), teacher_id=teacher_id)


def get_schedule(db: Session, schedule_id: uuid.UUID) -> Optional[ScheduleResponse]:
    schedule = db.get(Schedule, schedule_id)
    if schedule is None:
        return None
    return _to_response(db, schedule)


def update_schedule(db: Session, schedule_id: uuid.UUID, data: ScheduleUpdate) -> Optional[ScheduleResponse]:
    """
    Met à jour une séance.

    - class_id fourni : le snapshot est recalculé depuis le roster de cette classe
    - date / teacher_id / room seuls : le snapshot existant est conservé
    Les contrôles enseignant, disponibilité et salle sont rejoués sur les valeurs finales.
    """
    schedule = db.get(Schedule, schedule_id)
    if schedule is None:
        return None

    update_data = {
        field: value
        for field, value in data.model_dump(exclude_unset=True).items()
        if value is not None or field == "room"
    }

    new_class_id = update_data.get("class_id")
    if new_class_id is not None:
        _get_active_class(db, new_class_id)

    target_date = update_data.get("date", schedule.date)
    target_teacher_id = update_data.get("teacher_id", schedule.teacher_id)
    target_room = update_data.get("room", schedule.room)

    if ("teacher_id" in update_data or "date" in update_data) and target_teacher_id is not None:
        _check_teacher(db, target_teacher_id, target_date, data.utc_offset if "date" in update_data else None)
    if "room" in update_data or "date" in update_data:
        _check_room_free(db, target_date, target_room, exclude_id=schedule.id)

    for field, value in update_data.items():
        setattr(schedule, field, value)

    if new_class_id is not None:
        db.execute(delete(ScheduleStudent).where(ScheduleStudent.schedule_id == schedule.id))
        student_ids = _roster_snapshot(db, new_class_id)
        _write_snapshot(db, schedule.id, student_ids)
        logger.info(
            "Séance %s : snapshot recalculé depuis la classe %s (%d enfant(s))",
            schedule.id, new_class_id, len(student_ids),
        )

    db.commit()
    db.refresh(schedule)
    return _to_response(db, schedule)


def delete_schedule(db: Session, schedule_id: uuid.UUID) -> bool:
    """Supprime une séance ; son snapshot et ses présences partent en cascade."""
    schedule = db.get(Schedule, schedule_id)
    if schedule is None:
        return False
    db.delete(schedule)
    db.commit()
    logger.info("Séance supprimée : %s", schedule_id)
    return True


def _get_active_class(db: Session, class_id: uuid.UUID) -> SchoolClass:
    school_class = db.get(SchoolClass, class_id)
    if school_class is None:
        raise NotFoundError("Classe introuvable.")
    if school_class.archived:
        raise BadRequestError("Impossible de planifier une séance pour une classe archivée.")
    return school_class


def _check_teacher(
    db: Session,
    teacher_id: uuid.UUID,
    date: datetime,
    utc_offset: Optional[timedelta] = None,
) -> User:
    """La disponibilité se juge sur le jour local du client quand son décalage est connu."""
    teacher = db.get(User, teacher_id)
    if teacher is None:
        raise NotFoundError("Enseignant introuvable.")
    if teacher.role != "TEACHER":
        raise BadRequestError("Enseignant invalide.")
    day = weekday_name(date + utc_offset if utc_offset else date)
    if teacher.availability and day not in teacher.availability:
        raise BadRequestError(f"L'enseignant n'est pas disponible le {day}.")
    return teacher


def _check_room_free(
    db: Session,
    date: datetime,
    room: Optional[str],
    exclude_id: Optional[uuid.UUID] = None,
) -> None:
    if not room:
        return
    query = select(Schedule.id).where(Schedule.date == date, Schedule.room == room)
    if exclude_id is not None:
        query = query.where(Schedule.id != exclude_id)
    if db.execute(query.limit(1)).scalar():
        raise ConflictError(f"La salle '{room}' est déjà réservée à cette date.")


def _roster_snapshot(db: Session, class_id: uuid.UUID) -> List[uuid.UUID]:
    """IDs des enfants actuellement assignés à la classe."""
    return list(db.execute(
        select(Child.id)
        .where(Child.assigned_class_id == class_id)
        .order_by(Child.last_name, Child.first_name)
    ).scalars().all())


def _write_snapshot(db: Session, schedule_id: uuid.UUID, student_ids: List[uuid.UUID]) -> None:
    if student_ids:
        db.bulk_insert_mappings(ScheduleStudent, [
            {"schedule_id": schedule_id, "child_id": cid}
            for cid in student_ids
        ])


def _snapshot_ids(db: Session, schedule_id: uuid.UUID) -> List[uuid.UUID]:
    return list(db.execute(
        select(ScheduleStudent.child_id).where(ScheduleStudent.schedule_id == schedule_id)
    ).scalars().all())


def _to_response(db: Session, schedule: Schedule) -> ScheduleResponse:
    """Construit le schéma de réponse avec le snapshot des enfants."""
    student_ids = _snapshot_ids(db, schedule.id)
    return ScheduleResponse(
        id=schedule.id,
        class_id=schedule.class_id,
        teacher_id=schedule.teacher_id,
        date=schedule.date,
        room=schedule.room,
        student_ids=student_ids,
        total_students=len(student_ids),
        created_at=schedule.created_at,
        updated_at=schedule.updated_at,
    )
