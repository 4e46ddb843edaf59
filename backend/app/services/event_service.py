"""
Service métier pour les événements et la publication programmée des annonces.
"""

import uuid
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.datetime_utils import utcnow
from app.event_bus import NEW_ANNOUNCEMENT, EventBus
from app.exceptions import BadRequestError, NotFoundError
from app.models.event import Event
from app.schemas.event import EventCreate, EventResponse, EventUpdate

logger = logging.getLogger(__name__)


def create_event(db: Session, author_id: uuid.UUID, data: EventCreate) -> EventResponse:
    """Crée un événement, programmé si scheduled_for est renseigné, brouillon sinon."""
    event = Event(
        **data.model_dump(),
        created_by=author_id,
        status="SCHEDULED" if data.scheduled_for is not None else "DRAFT",
    )
    db.add(event)
    db.commit()
    db.refresh(event)
    logger.info("Événement %s créé (%s, %s)", event.id, event.type, event.status)
    return EventResponse.model_validate(event)


def get_events(
    db: Session,
    event_type: Optional[str] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> List[EventResponse]:
    """Événements par date croissante. Sans borne de début, seuls ceux à venir sont retournés."""
    query = select(Event).order_by(Event.date)
    query = query.where(Event.date >= (start if start is not None else utcnow()))
    if end is not None:
        query = query.where(Event.date <= end)
    if event_type is not None:
        query = query.where(Event.type == event_type)

    events = db.execute(query).scalars().all()
    return [EventResponse.model_validate(e) for e in events]


def get_event(db: Session, event_id: uuid.UUID) -> EventResponse:
    event = db.get(Event, event_id)
    if event is None:
        raise NotFoundError("Événement introuvable.")
    return EventResponse.model_validate(event)


def update_event(db: Session, event_id: uuid.UUID, data: EventUpdate) -> EventResponse:
    """
    Met à jour un événement non encore envoyé.
    Passer en SCHEDULED exige une date de publication.
    """
    event = db.get(Event, event_id)
    if event is None:
        raise NotFoundError("Événement introuvable.")
    if event.status == "SENT":
        raise BadRequestError("Un événement déjà envoyé ne peut plus être modifié.")

    update_data = data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(event, field, value)

    if "status" not in update_data and "scheduled_for" in update_data:
        event.status = "SCHEDULED" if event.scheduled_for is not None else "DRAFT"
    if event.status == "SCHEDULED" and event.scheduled_for is None:
        db.rollback()
        raise BadRequestError("Une date de publication (scheduled_for) est requise pour programmer l'événement.")

    db.commit()
    db.refresh(event)
    return EventResponse.model_validate(event)


def delete_event(db: Session, event_id: uuid.UUID) -> bool:
    event = db.get(Event, event_id)
    if event is None:
        return False
    db.delete(event)
    db.commit()
    logger.info("Événement supprimé : %s", event_id)
    return True


def promote_due_events(db: Session, bus: EventBus, now: Optional[datetime] = None) -> int:
    """
    Passe en SENT les événements SCHEDULED dont la date de publication est échue,
    puis les diffuse sur le bus une fois la transaction validée.
    Retourne le nombre d'événements publiés.
    """
    now = now or utcnow()
    try:
        due = db.execute(
            select(Event)
            .where(Event.status == "SCHEDULED", Event.scheduled_for <= now)
            .order_by(Event.scheduled_for)
            .with_for_update(skip_locked=True)
        ).scalars().all()
        if not due:
            return 0

        for event in due:
            event.status = "SENT"
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    for event in due:
        bus.publish(NEW_ANNOUNCEMENT, {
            "id": str(event.id),
            "title": event.title,
            "type": event.type,
            "description": event.description,
            "date": event.date.isoformat() if event.date else None,
        })

    logger.info("%d annonce(s) publiée(s)", len(due))
    return len(due)
