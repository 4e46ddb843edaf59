"""
Router pour les événements et annonces.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.database import get_db
from app.datetime_utils import to_naive_utc
from app.dependencies import get_current_user, require_role
from app.schemas.event import EventCreate, EventResponse, EventUpdate
from app.schemas.user import CurrentUser
from app.services import event_service

router = APIRouter(prefix="/api/v1/events", tags=["Événements"])

staff_only = require_role("ADMIN", "TEACHER")


@router.post("", response_model=EventResponse, status_code=201, summary="Créer un événement")
def create_event(data: EventCreate, db: Session = Depends(get_db), current_user: CurrentUser = Depends(staff_only)):
    """Avec scheduled_for, l'annonce sera publiée automatiquement à cette date."""
    return event_service.create_event(db, current_user.id, data)


@router.get("", response_model=List[EventResponse], summary="Lister les événements")
def list_events(
    type: Optional[str] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    db: Session = Depends(get_db),
    _: CurrentUser = Depends(get_current_user),
):
    return event_service.get_events(db, event_type=type, start=to_naive_utc(start), end=to_naive_utc(end))


@router.get("/{event_id}", response_model=EventResponse, summary="Détail d'un événement")
def get_event(event_id: uuid.UUID, db: Session = Depends(get_db), _: CurrentUser = Depends(get_current_user)):
    return event_service.get_event(db, event_id)


@router.put("/{event_id}", response_model=EventResponse, summary="Modifier un événement")
def update_event(
    event_id: uuid.UUID,
    data: EventUpdate,
    db: Session = Depends(get_db),
    _: CurrentUser = Depends(staff_only),
):
    return event_service.update_event(db, event_id, data)


@router.delete("/{event_id}", status_code=204, summary="Supprimer un événement")
def delete_event(event_id: uuid.UUID, db: Session = Depends(get_db), _: CurrentUser = Depends(require_role("ADMIN"))):
    if not event_service.delete_event(db, event_id):
        raise HTTPException(status_code=404, detail="Événement introuvable.")
