"""
Router pour les créneaux de bénévolat.
"""

import uuid
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import require_role
from app.schemas.user import CurrentUser
from app.schemas.volunteer import VolunteerSlotCreate, VolunteerSlotResponse
from app.services import volunteer_service

router = APIRouter(prefix="/api/v1/volunteers", tags=["Bénévolat"])


@router.get("", response_model=List[VolunteerSlotResponse], summary="Créneaux disponibles")
def list_slots(db: Session = Depends(get_db), _: CurrentUser = Depends(require_role("PARENT", "ADMIN"))):
    return volunteer_service.get_available_slots(db)


@router.post("", response_model=VolunteerSlotResponse, status_code=201, summary="Créer un créneau")
def create_slot(
    data: VolunteerSlotCreate,
    db: Session = Depends(get_db),
    _: CurrentUser = Depends(require_role("ADMIN")),
):
    return volunteer_service.create_slot(db, data)


@router.post("/{slot_id}/signup", response_model=VolunteerSlotResponse, summary="S'inscrire à un créneau")
def sign_up(
    slot_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_role("PARENT")),
):
    return volunteer_service.sign_up(db, slot_id, current_user.id)
