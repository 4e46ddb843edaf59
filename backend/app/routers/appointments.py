"""
Router pour les demandes de rendez-vous parent / enseignant.
"""

import uuid
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import require_role
from app.schemas.appointment import AppointmentCreate, AppointmentResponse, AppointmentStatusUpdate
from app.schemas.user import CurrentUser
from app.services import appointment_service

router = APIRouter(prefix="/api/v1/appointments", tags=["Rendez-vous"])

parent_only = require_role("PARENT")
teacher_only = require_role("TEACHER")


@router.post("", response_model=AppointmentResponse, status_code=201, summary="Demander un rendez-vous")
def create_request(
    data: AppointmentCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(parent_only),
):
    return appointment_service.create_request(db, current_user.id, data)


@router.get("", response_model=List[AppointmentResponse], summary="Mes demandes")
def list_my_requests(db: Session = Depends(get_db), current_user: CurrentUser = Depends(parent_only)):
    return appointment_service.get_parent_requests(db, current_user.id)


@router.get("/teacher", response_model=List[AppointmentResponse], summary="Demandes reçues")
def list_received_requests(db: Session = Depends(get_db), current_user: CurrentUser = Depends(teacher_only)):
    return appointment_service.get_teacher_requests(db, current_user.id)


@router.put("/{request_id}/status", response_model=AppointmentResponse, summary="Répondre à une demande")
def update_request_status(
    request_id: uuid.UUID,
    data: AppointmentStatusUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(teacher_only),
):
    return appointment_service.update_request_status(db, request_id, current_user.id, data)
