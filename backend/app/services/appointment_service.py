"""
Service métier pour les demandes de rendez-vous entre parents et enseignants.
"""

import uuid
import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.exceptions import BadRequestError, ForbiddenError, NotFoundError
from app.models.appointment import AppointmentRequest
from app.models.user import User
from app.schemas.appointment import AppointmentCreate, AppointmentResponse, AppointmentStatusUpdate

logger = logging.getLogger(__name__)


def create_request(db: Session, parent_id: uuid.UUID, data: AppointmentCreate) -> AppointmentResponse:
    teacher = db.get(User, data.teacher_id)
    if teacher is None or teacher.role != "TEACHER":
        raise BadRequestError("Enseignant invalide.")

    request = AppointmentRequest(**data.model_dump(), parent_id=parent_id, status="PENDING")
    db.add(request)
    db.commit()
    db.refresh(request)
    logger.info("Demande de rendez-vous %s : parent %s, enseignant %s", request.id, parent_id, data.teacher_id)
    return AppointmentResponse.model_validate(request)


def get_parent_requests(db: Session, parent_id: uuid.UUID) -> List[AppointmentResponse]:
    requests = db.execute(
        select(AppointmentRequest)
        .where(AppointmentRequest.parent_id == parent_id)
        .order_by(AppointmentRequest.created_at.desc())
    ).scalars().all()
    return [AppointmentResponse.model_validate(r) for r in requests]


def get_teacher_requests(db: Session, teacher_id: uuid.UUID) -> List[AppointmentResponse]:
    requests = db.execute(
        select(AppointmentRequest)
        .where(AppointmentRequest.teacher_id == teacher_id)
        .order_by(AppointmentRequest.created_at.desc())
    ).scalars().all()
    return [AppointmentResponse.model_validate(r) for r in requests]


def update_request_status(
    db: Session, request_id: uuid.UUID, teacher_id: uuid.UUID, data: AppointmentStatusUpdate
) -> AppointmentResponse:
    """Seul l'enseignant destinataire accepte ou refuse la demande."""
    request = db.get(AppointmentRequest, request_id)
    if request is None:
        raise NotFoundError("Demande de rendez-vous introuvable.")
    if request.teacher_id != teacher_id:
        raise ForbiddenError("Seul l'enseignant concerné peut répondre à cette demande.")

    request.status = data.status
    db.commit()
    db.refresh(request)
    logger.info("Demande de rendez-vous %s : %s", request_id, data.status)
    return AppointmentResponse.model_validate(request)
