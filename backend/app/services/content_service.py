"""
Service métier pour les contenus soumis à modération : ressources et galerie.

Tout contenu soumis est PENDING ; seul un administrateur le passe en APPROVED
ou REJECTED. Les listes publiques ne montrent que les contenus approuvés.
"""

import uuid
import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.exceptions import BadRequestError, NotFoundError
from app.models.content import GalleryImage, Resource
from app.models.event import Event
from app.models.school_class import SchoolClass
from app.schemas.content import (
    GalleryImageCreate,
    GalleryImageResponse,
    ModerationUpdate,
    ResourceCreate,
    ResourceResponse,
)

logger = logging.getLogger(__name__)


# --- Ressources ---

def submit_resource(db: Session, uploader_id: uuid.UUID, data: ResourceCreate) -> ResourceResponse:
    resource = Resource(**data.model_dump(), uploaded_by=uploader_id, status="PENDING")
    db.add(resource)
    db.commit()
    db.refresh(resource)
    logger.info("Ressource %s soumise par %s", resource.id, uploader_id)
    return ResourceResponse.model_validate(resource)


def get_resources(db: Session, resource_type: Optional[str] = None) -> List[ResourceResponse]:
    query = select(Resource).where(Resource.status == "APPROVED").order_by(Resource.created_at.desc())
    if resource_type is not None:
        query = query.where(Resource.type == resource_type)
    return [ResourceResponse.model_validate(r) for r in db.execute(query).scalars().all()]


def get_pending_resources(db: Session) -> List[ResourceResponse]:
    resources = db.execute(
        select(Resource).where(Resource.status == "PENDING").order_by(Resource.created_at)
    ).scalars().all()
    return [ResourceResponse.model_validate(r) for r in resources]


def moderate_resource(
    db: Session, resource_id: uuid.UUID, moderator_id: uuid.UUID, data: ModerationUpdate
) -> ResourceResponse:
    """L'approbateur est enregistré uniquement en cas d'approbation."""
    resource = db.get(Resource, resource_id)
    if resource is None:
        raise NotFoundError("Ressource introuvable.")

    resource.status = data.status
    resource.approved_by = moderator_id if data.status == "APPROVED" else None
    db.commit()
    db.refresh(resource)
    logger.info("Ressource %s : %s par %s", resource_id, data.status, moderator_id)
    return ResourceResponse.model_validate(resource)


# --- Galerie ---

def submit_image(db: Session, uploader_id: uuid.UUID, data: GalleryImageCreate) -> GalleryImageResponse:
    """Lève BadRequestError si l'événement ou la classe référencés n'existent pas."""
    if data.event_id is not None and db.get(Event, data.event_id) is None:
        raise BadRequestError("Événement introuvable.")
    if data.class_id is not None and db.get(SchoolClass, data.class_id) is None:
        raise BadRequestError("Classe introuvable.")

    image = GalleryImage(**data.model_dump(), uploaded_by=uploader_id, status="PENDING")
    db.add(image)
    db.commit()
    db.refresh(image)
    logger.info("Photo %s soumise par %s", image.id, uploader_id)
    return GalleryImageResponse.model_validate(image)


def get_images(
    db: Session,
    event_id: Optional[uuid.UUID] = None,
    class_id: Optional[uuid.UUID] = None,
) -> List[GalleryImageResponse]:
    query = select(GalleryImage).where(GalleryImage.status == "APPROVED").order_by(GalleryImage.created_at.desc())
    if event_id is not None:
        query = query.where(GalleryImage.event_id == event_id)
    if class_id is not None:
        query = query.where(GalleryImage.class_id == class_id)
    return [GalleryImageResponse.model_validate(i) for i in db.execute(query).scalars().all()]


def get_pending_images(db: Session) -> List[GalleryImageResponse]:
    images = db.execute(
        select(GalleryImage).where(GalleryImage.status == "PENDING").order_by(GalleryImage.created_at)
    ).scalars().all()
    return [GalleryImageResponse.model_validate(i) for i in images]


def moderate_image(db: Session, image_id: uuid.UUID, data: ModerationUpdate) -> GalleryImageResponse:
    image = db.get(GalleryImage, image_id)
    if image is None:
        raise NotFoundError("Photo introuvable.")

    image.status = data.status
    db.commit()
    db.refresh(image)
    logger.info("Photo %s : %s", image_id, data.status)
    return GalleryImageResponse.model_validate(image)
