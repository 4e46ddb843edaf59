"""
Service métier pour les créneaux de bénévolat.

L'inscription décrémente slots_available sous verrou de ligne sur le créneau,
comme l'assignation d'un enfant à une classe.
"""

import uuid
import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.exceptions import AppError, BadRequestError, NotFoundError
from app.models.event import Event
from app.models.volunteer import VolunteerSignup, VolunteerSlot
from app.schemas.volunteer import VolunteerSlotCreate, VolunteerSlotResponse

logger = logging.getLogger(__name__)


def create_slot(db: Session, data: VolunteerSlotCreate) -> VolunteerSlotResponse:
    event = db.get(Event, data.event_id)
    if event is None:
        raise NotFoundError("Événement introuvable.")

    slot = VolunteerSlot(**data.model_dump())
    db.add(slot)
    db.commit()
    db.refresh(slot)
    logger.info("Créneau de bénévolat %s créé pour l'événement %s (%d place(s))", slot.id, event.id, slot.slots_available)
    return _to_response(db, slot, event)


def get_available_slots(db: Session) -> List[VolunteerSlotResponse]:
    """Créneaux qui ont encore au moins une place, par date d'événement."""
    rows = db.execute(
        select(VolunteerSlot, Event)
        .join(Event, Event.id == VolunteerSlot.event_id)
        .where(VolunteerSlot.slots_available > 0)
        .order_by(Event.date, VolunteerSlot.title)
    ).all()
    return [_to_response(db, slot, event) for slot, event in rows]


def sign_up(db: Session, slot_id: uuid.UUID, user_id: uuid.UUID) -> VolunteerSlotResponse:
    """
    Inscrit un parent sur un créneau.
    Lève NotFoundError si le créneau n'existe pas, BadRequestError s'il est complet
    ou si le parent y est déjà inscrit.
    """
    try:
        slot = db.execute(
            select(VolunteerSlot).where(VolunteerSlot.id == slot_id).with_for_update()
        ).scalar()
        if slot is None:
            raise NotFoundError("Créneau de bénévolat introuvable.")
        if slot.slots_available <= 0:
            raise BadRequestError("Plus aucune place disponible sur ce créneau.")
        if db.get(VolunteerSignup, (slot_id, user_id)) is not None:
            raise BadRequestError("Vous êtes déjà inscrit à ce créneau.")

        db.add(VolunteerSignup(slot_id=slot_id, user_id=user_id))
        slot.slots_available -= 1
        db.commit()
    except (AppError, SQLAlchemyError):
        db.rollback()
        raise

    db.refresh(slot)
    logger.info("Bénévole %s inscrit au créneau %s (%d place(s) restante(s))", user_id, slot_id, slot.slots_available)
    return _to_response(db, slot, db.get(Event, slot.event_id))


def _to_response(db: Session, slot: VolunteerSlot, event: Event) -> VolunteerSlotResponse:
    volunteer_ids = db.execute(
        select(VolunteerSignup.user_id)
        .where(VolunteerSignup.slot_id == slot.id)
        .order_by(VolunteerSignup.signed_up_at)
    ).scalars().all()
    return VolunteerSlotResponse(
        id=slot.id,
        event_id=slot.event_id,
        event_title=event.title,
        event_date=event.date,
        title=slot.title,
        slots_available=slot.slots_available,
        volunteer_ids=list(volunteer_ids),
        created_at=slot.created_at,
    )
